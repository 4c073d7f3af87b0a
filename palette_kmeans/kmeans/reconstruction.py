"""
Rebuild an image from the final centroids.

Each pixel is mapped to the nearest centroid of the final set, computed
afresh rather than taken from the clustering loop. If the loop converged,
its last assignment was made against the previous centroids, so a handful
of pixels may end up with a different color than that assignment implies.
"""

import numpy as np

from .assignment import chunk_bounds, max_chunk_size_for
from .primitives import pairwise_distances


def nearest_centroids(samples: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Index of the nearest centroid for every sample, lowest index on ties.

    Args:
        samples: RGB values, shape (N, 3)
        centroids: shape (K, 3)

    Returns:
        indices: shape (N,)
    """
    indices = np.empty(len(samples), dtype=np.intp)
    for start, end in chunk_bounds(len(samples), 1, max_chunk_size_for(len(centroids))):
        distances = pairwise_distances(samples[start:end], centroids)
        indices[start:end] = np.argmin(distances, axis=1)
    return indices


def quantize_centroids(centroids: np.ndarray) -> np.ndarray:
    """Convert float centroids to 8-bit colors by truncation."""
    return np.clip(centroids, 0, 255).astype(np.uint8)


def reconstruct_image(
    centroids: np.ndarray,
    samples: np.ndarray,
    width: int,
    height: int
) -> np.ndarray:
    """
    Create the palette-reduced image.

    Args:
        centroids: Final centroids, shape (K, 3)
        samples: Original RGB samples in row-major order, shape (N, 3)
        width: Image width in pixels
        height: Image height in pixels

    Returns:
        image: shape (height, width, 3), uint8

    Raises:
        ValueError: If width * height does not match the number of samples

    Example:
        >>> result = ParallelKMeans(config).fit_predict(image.samples)
        >>> out = reconstruct_image(result.centroids, image.samples,
        ...                         image.width, image.height)
    """
    samples = np.asarray(samples)
    if width * height != len(samples):
        raise ValueError(
            f"Image size {width}x{height} doesn't match number of samples "
            f"({len(samples)})"
        )

    palette = quantize_centroids(np.asarray(centroids, dtype=np.float64))
    indices = nearest_centroids(samples, np.asarray(centroids, dtype=np.float64))

    return palette[indices].reshape(height, width, 3)
