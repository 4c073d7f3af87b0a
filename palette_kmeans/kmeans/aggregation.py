"""
Aggregation step.

Turns an assignment vector into new centroids: each centroid becomes the
per-channel mean of the samples assigned to it. A cluster with no samples
gets the zero centroid (0, 0, 0).

Two strategies are provided:

1. Reduce: every worker sums its own chunk privately, then the partial sums
   are merged once all workers finish. No contention while summing.
2. Locked: workers add their chunk sums into shared per-cluster
   accumulators, each guarded by its own lock. Workers touching different
   clusters never wait on each other.
"""

import threading
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import List, Optional, Tuple

import numpy as np

from .assignment import chunk_bounds
from .config import AggregationStrategy, KMeansConfig


def partial_sums(
    samples: np.ndarray,
    labels: np.ndarray,
    n_clusters: int,
    start: int,
    end: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Per-cluster channel sums and counts over samples[start:end].

    Returns:
        sums: shape (K, 3), float64
        counts: shape (K,), int64
    """
    chunk = samples[start:end]
    chunk_labels = labels[start:end]

    counts = np.bincount(chunk_labels, minlength=n_clusters).astype(np.int64)
    sums = np.empty((n_clusters, 3), dtype=np.float64)
    for c in range(3):
        sums[:, c] = np.bincount(
            chunk_labels, weights=chunk[:, c], minlength=n_clusters
        )
    return sums, counts


def centroids_from_sums(sums: np.ndarray, counts: np.ndarray) -> np.ndarray:
    """Divide sums by counts; empty clusters become (0, 0, 0)."""
    centroids = np.zeros_like(sums, dtype=np.float64)
    occupied = counts > 0
    centroids[occupied] = sums[occupied] / counts[occupied, np.newaxis]
    return centroids


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class BaseAggregator(ABC):
    """
    Interface for the aggregation step.

    Implementations receive the full assignment vector and return the new
    centroid set plus the number of samples in each cluster.
    """

    def __init__(self, n_clusters: int):
        self.n_clusters = n_clusters

    def aggregate(
        self,
        samples: np.ndarray,
        labels: np.ndarray,
        executor: Optional[Executor] = None,
        n_chunks: int = 1
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute new centroids from the current assignments.

        Args:
            samples: RGB samples, shape (N, 3)
            labels: Assignment vector, shape (N,), values in [0, K)
            executor: Pool to run chunks on. If None, runs sequentially.
            n_chunks: Number of chunks to split the samples into

        Returns:
            centroids: New centroids, shape (K, 3)
            counts: Cluster sizes, shape (K,); sums to N
        """
        if len(labels) != len(samples):
            raise ValueError(
                f"labels ({len(labels)}) and samples ({len(samples)}) differ in length"
            )
        bounds = chunk_bounds(len(samples), n_chunks)
        sums, counts = self._accumulate(samples, labels, bounds, executor)
        return centroids_from_sums(sums, counts), counts

    @abstractmethod
    def _accumulate(
        self,
        samples: np.ndarray,
        labels: np.ndarray,
        bounds: List[Tuple[int, int]],
        executor: Optional[Executor]
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Return total per-cluster sums (K, 3) and counts (K,)."""
        pass


# ============================================================================
# Reduce-then-merge
# ============================================================================

class ReduceAggregator(BaseAggregator):
    """Private partial sums per worker, merged after the parallel phase."""

    def _accumulate(self, samples, labels, bounds, executor):
        if executor is None or len(bounds) <= 1:
            partials = [
                partial_sums(samples, labels, self.n_clusters, start, end)
                for start, end in bounds
            ]
        else:
            futures = [
                executor.submit(
                    partial_sums, samples, labels, self.n_clusters, start, end
                )
                for start, end in bounds
            ]
            partials = [future.result() for future in futures]

        sums = np.zeros((self.n_clusters, 3), dtype=np.float64)
        counts = np.zeros(self.n_clusters, dtype=np.int64)
        for part_sums, part_counts in partials:
            sums += part_sums
            counts += part_counts
        return sums, counts


# ============================================================================
# Lock-per-cluster
# ============================================================================

class ClusterAccumulator:
    """Running channel sum and count for one cluster, behind its own lock."""

    def __init__(self):
        self.lock = threading.Lock()
        self.sum = np.zeros(3, dtype=np.float64)
        self.count = 0

    def add(self, channel_sum: np.ndarray, count: int) -> None:
        with self.lock:
            self.sum += channel_sum
            self.count += count


class LockedAggregator(BaseAggregator):
    """Shared accumulators, one lock per cluster."""

    def _merge_chunk(
        self,
        accumulators: List[ClusterAccumulator],
        samples: np.ndarray,
        labels: np.ndarray,
        start: int,
        end: int
    ) -> None:
        sums, counts = partial_sums(samples, labels, self.n_clusters, start, end)
        for j in np.flatnonzero(counts):
            accumulators[j].add(sums[j], int(counts[j]))

    def _accumulate(self, samples, labels, bounds, executor):
        accumulators = [ClusterAccumulator() for _ in range(self.n_clusters)]

        if executor is None or len(bounds) <= 1:
            for start, end in bounds:
                self._merge_chunk(accumulators, samples, labels, start, end)
        else:
            futures = [
                executor.submit(
                    self._merge_chunk, accumulators, samples, labels, start, end
                )
                for start, end in bounds
            ]
            for future in futures:
                future.result()

        sums = np.array([acc.sum for acc in accumulators], dtype=np.float64)
        counts = np.array([acc.count for acc in accumulators], dtype=np.int64)
        return sums.reshape(self.n_clusters, 3), counts


def create_aggregator(config: KMeansConfig) -> BaseAggregator:
    """
    Factory function to create the aggregator named in the config.

    Example:
        >>> config = KMeansConfig(aggregation=AggregationStrategy.LOCKED)
        >>> aggregator = create_aggregator(config)
        >>> centroids, counts = aggregator.aggregate(samples, labels)
    """
    if config.aggregation == AggregationStrategy.REDUCE:
        return ReduceAggregator(config.n_clusters)
    elif config.aggregation == AggregationStrategy.LOCKED:
        return LockedAggregator(config.n_clusters)
    else:
        raise ValueError(f"Unknown aggregation strategy: {config.aggregation}")
