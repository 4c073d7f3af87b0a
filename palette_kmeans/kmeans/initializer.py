"""
Centroid initialization.

Initial centroids are samples drawn uniformly at random, with replacement.
Duplicates are allowed and no spreading (k-means++) is attempted.
"""

import numpy as np

from ..errors import EmptyImageError


def validate_cluster_count(n_clusters: int, n_samples: int) -> None:
    """
    Check K against the number of samples before any sampling happens.

    Raises:
        EmptyImageError: If there are no samples
        ValueError: If K < 1 or K > number of samples
    """
    if n_samples == 0:
        raise EmptyImageError("Cannot cluster an image with zero pixels")
    if n_clusters < 1:
        raise ValueError(f"Number of colors must be >= 1, got {n_clusters}")
    if n_clusters > n_samples:
        raise ValueError(
            f"Number of colors ({n_clusters}) exceeds number of pixels ({n_samples})"
        )


def random_init(
    samples: np.ndarray,
    n_clusters: int,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Pick K initial centroids from the samples.

    Args:
        samples: RGB samples, shape (N, 3)
        n_clusters: Number of centroids to produce (K)
        rng: Source of uniform integers in [0, N)

    Returns:
        centroids: shape (K, 3), float64 copies of the drawn samples

    Example:
        >>> rng = np.random.default_rng(0)
        >>> centroids = random_init(samples, 4, rng)
        >>> centroids.shape
        (4, 3)
    """
    n_samples = len(samples)
    validate_cluster_count(n_clusters, n_samples)

    indices = rng.integers(0, n_samples, size=n_clusters)
    return samples[indices].astype(np.float64)
