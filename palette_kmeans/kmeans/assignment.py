"""
Assignment step.

Each sample is assigned to the index of its nearest centroid. Samples are
split into contiguous chunks and each worker writes only to its own slice
of the assignment vector, so no synchronization is needed.
"""

from concurrent.futures import Executor
from typing import List, Optional, Tuple

import numpy as np

from .primitives import pairwise_distances


# Samples per chunk at K <= 4; keeps the (chunk, K, 3) temporaries small
MAX_CHUNK_SIZE = 65536
MIN_CHUNK_SIZE = 1024


def max_chunk_size_for(n_clusters: int) -> int:
    """Samples per chunk for K centroids, shrinking as K grows."""
    return max(MIN_CHUNK_SIZE, MAX_CHUNK_SIZE // max(1, n_clusters // 4))


def chunk_bounds(
    n_items: int,
    n_chunks: int,
    max_chunk_size: int = MAX_CHUNK_SIZE
) -> List[Tuple[int, int]]:
    """
    Split range(n_items) into contiguous (start, end) pairs.

    At least n_chunks pieces are produced when there are enough items, more
    if needed to respect max_chunk_size. Chunks differ in size by at most
    one and are never empty.
    """
    n_chunks = max(n_chunks, -(-n_items // max_chunk_size))
    n_chunks = max(1, min(n_chunks, n_items))
    edges = np.linspace(0, n_items, n_chunks + 1).astype(int)
    return [(int(s), int(e)) for s, e in zip(edges[:-1], edges[1:]) if e > s]


def _assign_chunk(
    samples: np.ndarray,
    centroids: np.ndarray,
    labels: np.ndarray,
    min_distances: np.ndarray,
    start: int,
    end: int
) -> None:
    """Fill labels[start:end] and min_distances[start:end] in place."""
    distances = pairwise_distances(samples[start:end], centroids)
    # argmin returns the first minimum, so the lowest index wins on ties
    nearest = np.argmin(distances, axis=1)
    labels[start:end] = nearest
    min_distances[start:end] = distances[np.arange(end - start), nearest]


def assign_clusters(
    samples: np.ndarray,
    centroids: np.ndarray,
    executor: Optional[Executor] = None,
    n_chunks: int = 1,
    labels: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Assign every sample to its nearest centroid.

    The centroid array is treated as a frozen snapshot for the whole pass.

    Args:
        samples: RGB samples, shape (N, 3)
        centroids: Current centroids, shape (K, 3)
        executor: Pool to run chunks on. If None, runs in the calling thread.
        n_chunks: Number of chunks to split the samples into
        labels: Optional preallocated (N,) integer array to overwrite

    Returns:
        labels: Index of nearest centroid per sample, shape (N,)
        min_distances: Distance to that centroid, shape (N,)
    """
    n_samples = len(samples)
    if labels is None:
        labels = np.zeros(n_samples, dtype=np.intp)
    elif labels.shape != (n_samples,):
        raise ValueError(
            f"labels must have shape ({n_samples},), got {labels.shape}"
        )
    min_distances = np.empty(n_samples, dtype=np.float64)

    bounds = chunk_bounds(n_samples, n_chunks, max_chunk_size_for(len(centroids)))

    if executor is None or len(bounds) <= 1:
        for start, end in bounds:
            _assign_chunk(samples, centroids, labels, min_distances, start, end)
        return labels, min_distances

    futures = [
        executor.submit(
            _assign_chunk, samples, centroids, labels, min_distances, start, end
        )
        for start, end in bounds
    ]
    for future in futures:
        # Re-raises any worker exception in the caller
        future.result()

    return labels, min_distances
