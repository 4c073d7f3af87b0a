"""
K-Means Configuration

Configuration for the parallel k-means engine used for palette reduction.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# ============================================================================
# Enums
# ============================================================================

class AggregationStrategy(Enum):
    """Available strategies for turning assignments into new centroids."""
    REDUCE = "reduce"  # per-worker partial sums, merged at the end
    LOCKED = "locked"  # shared accumulators, one lock per cluster


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class KMeansConfig:
    """
    Configuration for parallel k-means clustering.

    Defaults reproduce the command-line tool: 4 colors, at most 100
    iterations and a closeness threshold of 1e-5 per channel.
    """
    n_clusters: int = 4
    """Number of clusters (K), i.e. colors in the output palette."""

    max_iter: int = 100
    """Iteration cap. Reaching it is an accepted terminal state."""

    tol: float = 1e-5
    """Per-channel threshold below which two centroids count as equal."""

    n_workers: Optional[int] = None
    """Worker threads for assignment and aggregation. None = os.cpu_count()."""

    aggregation: AggregationStrategy = AggregationStrategy.REDUCE
    """How concurrent workers combine their partial cluster sums."""

    random_state: Optional[int] = None
    """Seed for centroid initialization. None = fresh OS entropy."""

    verbose: bool = False
    """Print one progress line per iteration."""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.n_clusters < 1:
            raise ValueError(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.tol <= 0:
            raise ValueError(f"tol must be positive, got {self.tol}")
        if self.n_workers is not None and self.n_workers < 1:
            raise ValueError(f"n_workers must be >= 1, got {self.n_workers}")

        if isinstance(self.aggregation, str):
            try:
                self.aggregation = AggregationStrategy(self.aggregation)
            except ValueError:
                options = [s.value for s in AggregationStrategy]
                raise ValueError(
                    f"aggregation must be one of {options}, got '{self.aggregation}'"
                ) from None
