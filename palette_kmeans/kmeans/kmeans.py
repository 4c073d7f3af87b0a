"""
Parallel K-Means Clustering for Palette Reduction

Driver for the iterative clustering engine:

1. Initialize K centroids by sampling pixels at random (with replacement)
2. Assign each pixel to its nearest centroid (parallel over pixel chunks)
3. Recompute each centroid as the mean of its pixels (parallel aggregation)
4. Stop when no centroid moved by 1e-5 or more in any channel, or when the
   iteration cap is hit

Objective Function: J(V) = Σ Σ ||xn - vl||²
"""

import os
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .aggregation import create_aggregator
from .assignment import assign_clusters
from .config import KMeansConfig
from .initializer import random_init, validate_cluster_count
from .primitives import centroids_close


# ============================================================================
# Results
# ============================================================================

class ConvergenceState(Enum):
    """States of the convergence loop."""
    RUNNING = "running"
    CONVERGED = "converged"
    ITERATION_CAP_REACHED = "iteration_cap_reached"


@dataclass
class KMeansResult:
    """
    Results from k-means clustering.

    Both terminal states are normal outcomes; `state` tells them apart.
    """
    labels: np.ndarray
    """Assignment vector from the last assignment pass. Shape: (N,)"""

    centroids: np.ndarray
    """Final RGB centroids. Shape: (n_clusters, 3), float64"""

    inertia: float
    """Sum of squared distances to the assigned centroid, last pass."""

    n_iter: int
    """Iterations whose centroids were adopted without converging."""

    state: ConvergenceState
    """CONVERGED or ITERATION_CAP_REACHED."""

    inertia_history: List[float] = field(default_factory=list)
    """Inertia of every assignment pass, in order."""

    cluster_size_history: List[np.ndarray] = field(default_factory=list)
    """Cluster sizes (K,) produced by every aggregation pass, in order."""

    @property
    def converged(self) -> bool:
        """Whether the loop stopped because the centroids settled."""
        return self.state == ConvergenceState.CONVERGED

    def cluster_sizes(self) -> np.ndarray:
        """Number of samples per cluster in the last assignment. Shape: (K,)"""
        return np.bincount(self.labels, minlength=len(self.centroids))

    def reshape_labels(self, shape: Tuple[int, int]) -> np.ndarray:
        """
        Reshape flat labels to 2D image shape.

        Args:
            shape: (H, W) image dimensions

        Returns:
            labels_2d: (H, W) cluster labels
        """
        return self.labels.reshape(shape)


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class BaseKMeans(ABC):
    """
    Abstract base class for k-means clustering implementations.

    All implementations must:
    1. Accept RGB samples of shape (N, 3) as input
    2. Return KMeansResult with labels, centroids, and metrics
    3. Support fit/predict/fit_predict interface
    """

    def __init__(self, config: Optional[KMeansConfig] = None):
        """
        Initialize k-means clusterer.

        Args:
            config: Configuration parameters. If None, uses defaults.
        """
        self.config = config or KMeansConfig()
        self._fitted = False
        self._centroids: Optional[np.ndarray] = None

    @abstractmethod
    def fit(self, samples: np.ndarray) -> 'BaseKMeans':
        """Fit k-means on RGB samples of shape (N, 3)."""
        pass

    @abstractmethod
    def predict(self, samples: np.ndarray) -> np.ndarray:
        """
        Predict cluster labels for samples using fitted centroids.

        Raises:
            RuntimeError: If called before fit()
        """
        pass

    @abstractmethod
    def fit_predict(self, samples: np.ndarray) -> KMeansResult:
        """Fit k-means and return complete results."""
        pass

    @property
    def centroids(self) -> np.ndarray:
        """Fitted centroids, shape (K, 3)."""
        if not self._fitted:
            raise RuntimeError("Must call fit() before accessing centroids")
        return self._centroids

    def compute_inertia(
        self,
        samples: np.ndarray,
        labels: np.ndarray,
        centroids: Optional[np.ndarray] = None
    ) -> float:
        """
        Compute k-means objective function J(V).

        Args:
            samples: RGB values, shape (N, 3)
            labels: Cluster assignments, shape (N,)
            centroids: Cluster centers, shape (K, 3).
                      If None, uses fitted centroids.

        Returns:
            inertia: Sum of squared distances to the assigned centroid
        """
        if centroids is None:
            if self._centroids is None:
                raise RuntimeError("Must fit() before computing inertia")
            centroids = self._centroids

        diff = np.asarray(samples, dtype=np.float64) - centroids[labels]
        return float(np.sum(diff ** 2))


# ============================================================================
# Thread-parallel implementation
# ============================================================================

def as_samples(data: np.ndarray) -> np.ndarray:
    """
    Coerce input to a contiguous (N, 3) uint8 sample array.

    Raises:
        ValueError: If the shape is wrong or values fall outside [0, 255]
    """
    data = np.asarray(data)
    if data.ndim != 2 or data.shape[1] != 3:
        raise ValueError(f"samples must have shape (N, 3), got {data.shape}")

    if data.dtype != np.uint8:
        if data.size and (data.min() < 0 or data.max() > 255):
            raise ValueError("sample channels must lie in [0, 255]")
        if not np.all(np.equal(np.mod(data, 1), 0)):
            raise ValueError("sample channels must be integers")
        data = data.astype(np.uint8)

    return np.ascontiguousarray(data)


class ParallelKMeans(BaseKMeans):
    """
    K-means clustering with thread-parallel assignment and aggregation.

    Iterations run strictly one after another; inside each iteration the
    samples are split into chunks that run on a ThreadPoolExecutor. numpy
    releases the GIL in its kernels, so chunks execute concurrently.

    Example:
        >>> from palette_kmeans.kmeans import ParallelKMeans, KMeansConfig
        >>> from palette_kmeans.image_io import load_image
        >>>
        >>> image = load_image('photo.png')
        >>> kmeans = ParallelKMeans(KMeansConfig(n_clusters=8, random_state=0))
        >>> result = kmeans.fit_predict(image.samples)
        >>> print(f"Converged: {result.converged} after {result.n_iter} iterations")
    """

    def __init__(self, config: Optional[KMeansConfig] = None):
        super().__init__(config)
        self._aggregator = create_aggregator(self.config)
        self._result: Optional[KMeansResult] = None

    @property
    def n_workers(self) -> int:
        """Number of worker threads used per parallel step."""
        return self.config.n_workers or os.cpu_count() or 1

    @property
    def result(self) -> KMeansResult:
        """Result of the last fit()."""
        if self._result is None:
            raise RuntimeError("Must call fit() before accessing result")
        return self._result

    def _initial_centroids(
        self,
        samples: np.ndarray,
        rng: Optional[np.random.Generator],
        initial_centroids: Optional[np.ndarray]
    ) -> np.ndarray:
        k = self.config.n_clusters
        if initial_centroids is None:
            if rng is None:
                rng = np.random.default_rng(self.config.random_state)
            return random_init(samples, k, rng)

        centroids = np.array(initial_centroids, dtype=np.float64)
        if centroids.shape != (k, 3):
            raise ValueError(
                f"initial_centroids must have shape ({k}, 3), got {centroids.shape}"
            )
        return centroids

    def fit(
        self,
        samples: np.ndarray,
        rng: Optional[np.random.Generator] = None,
        initial_centroids: Optional[np.ndarray] = None
    ) -> 'ParallelKMeans':
        """
        Run the clustering loop on RGB samples.

        Args:
            samples: RGB values, shape (N, 3), integers in [0, 255]
            rng: Randomness for initialization. Overrides config.random_state.
            initial_centroids: Explicit starting centroids, shape (K, 3).
                               Skips random initialization when given.

        Returns:
            self

        Raises:
            EmptyImageError: If samples is empty
            ValueError: If n_clusters exceeds the number of samples
        """
        samples = as_samples(samples)
        n_samples = len(samples)
        validate_cluster_count(self.config.n_clusters, n_samples)

        centroids = self._initial_centroids(samples, rng, initial_centroids)
        labels = np.zeros(n_samples, dtype=np.intp)
        inertia_history: List[float] = []
        cluster_size_history: List[np.ndarray] = []
        n_iter = 0
        state = ConvergenceState.RUNNING
        n_chunks = self.n_workers

        with ThreadPoolExecutor(max_workers=self.n_workers) as executor:
            while state == ConvergenceState.RUNNING:
                labels, min_distances = assign_clusters(
                    samples, centroids, executor, n_chunks, labels
                )
                inertia = float(np.sum(min_distances ** 2))
                inertia_history.append(inertia)

                new_centroids, counts = self._aggregator.aggregate(
                    samples, labels, executor, n_chunks
                )
                cluster_size_history.append(counts)
                shift = float(np.max(np.abs(new_centroids - centroids)))

                if centroids_close(centroids, new_centroids, self.config.tol):
                    state = ConvergenceState.CONVERGED
                else:
                    n_iter += 1
                    if n_iter >= self.config.max_iter:
                        state = ConvergenceState.ITERATION_CAP_REACHED
                centroids = new_centroids

                if self.config.verbose:
                    print(
                        f"Iteration {n_iter}: inertia={inertia:.2f}, "
                        f"max shift={shift:.6f}"
                    )

        if self.config.verbose:
            print(f"K-means stopped: {state.value} after {n_iter} iterations")

        self._centroids = centroids
        self._fitted = True
        self._result = KMeansResult(
            labels=labels,
            centroids=centroids,
            inertia=inertia_history[-1],
            n_iter=n_iter,
            state=state,
            inertia_history=inertia_history,
            cluster_size_history=cluster_size_history,
        )
        return self

    def predict(self, samples: np.ndarray) -> np.ndarray:
        """
        Assign samples to the nearest fitted centroid.

        Args:
            samples: RGB values, shape (N, 3)

        Returns:
            labels: Cluster assignments, shape (N,)
        """
        if not self._fitted:
            raise RuntimeError(
                "Must call fit() before predict(). "
                "Or use fit_predict() to do both."
            )
        samples = as_samples(samples)
        with ThreadPoolExecutor(max_workers=self.n_workers) as executor:
            labels, _ = assign_clusters(
                samples, self._centroids, executor, self.n_workers
            )
        return labels

    def fit_predict(
        self,
        samples: np.ndarray,
        rng: Optional[np.random.Generator] = None,
        initial_centroids: Optional[np.ndarray] = None
    ) -> KMeansResult:
        """
        Fit k-means and return complete results.

        Example:
            >>> samples = image.reshape(-1, 3)
            >>> result = ParallelKMeans(KMeansConfig(n_clusters=4)).fit_predict(samples)
            >>> labels_2d = result.reshape_labels((h, w))
            >>> print(f"Inertia: {result.inertia:.2f}")
        """
        self.fit(samples, rng=rng, initial_centroids=initial_centroids)
        return self._result
