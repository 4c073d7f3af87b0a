"""
Sample/Centroid primitives.

Samples are rows of a (N, 3) uint8 array, centroids rows of a (K, 3)
float64 array. Distances are Euclidean in RGB space.
"""

import numpy as np


CLOSE_THRESHOLD = 1e-5


def distance(sample: np.ndarray, centroid: np.ndarray) -> float:
    """
    Euclidean distance between one sample and one centroid.

    Args:
        sample: RGB sample, shape (3,), integer channels
        centroid: RGB centroid, shape (3,), float channels

    Returns:
        sqrt(sum_c (sample_c - centroid_c)^2)
    """
    diff = np.asarray(sample, dtype=np.float64) - np.asarray(centroid, dtype=np.float64)
    return float(np.sqrt(np.sum(diff ** 2)))


def is_close(a: np.ndarray, b: np.ndarray, tol: float = CLOSE_THRESHOLD) -> bool:
    """True iff every channel of a and b differs by strictly less than tol."""
    diff = np.abs(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64))
    return bool(np.all(diff < tol))


def centroids_close(
    previous: np.ndarray,
    current: np.ndarray,
    tol: float = CLOSE_THRESHOLD
) -> bool:
    """
    Convergence test between two centroid sets.

    Centroids are compared by index: row j of `previous` against row j of
    `current`. Both sets must have the same shape.
    """
    if previous.shape != current.shape:
        raise ValueError(
            f"Centroid sets differ in shape: {previous.shape} vs {current.shape}"
        )
    return all(is_close(a, b, tol) for a, b in zip(previous, current))


def pairwise_distances(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Distances from every sample to every centroid.

    Args:
        samples: shape (N, 3)
        centroids: shape (K, 3)

    Returns:
        distances: shape (N, K), float64
    """
    diff = samples[:, np.newaxis, :].astype(np.float64) - centroids[np.newaxis, :, :]
    return np.sqrt(np.sum(diff ** 2, axis=2))
