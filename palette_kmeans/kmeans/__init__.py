"""
K-Means clustering engine for palette reduction.

Modules:
- config: KMeansConfig and aggregation strategy
- primitives: distance and centroid closeness
- initializer: random sampling of initial centroids
- assignment: parallel nearest-centroid assignment
- aggregation: parallel centroid update (reduce or lock-per-cluster)
- kmeans: convergence loop driver and results
- reconstruction: map pixels to final palette colors
"""

from .config import KMeansConfig, AggregationStrategy
from .primitives import distance, is_close, centroids_close, pairwise_distances
from .initializer import random_init, validate_cluster_count
from .assignment import assign_clusters, chunk_bounds, max_chunk_size_for
from .aggregation import (
    BaseAggregator,
    ReduceAggregator,
    LockedAggregator,
    create_aggregator,
)
from .kmeans import (
    ConvergenceState,
    KMeansResult,
    BaseKMeans,
    ParallelKMeans,
    as_samples,
)
from .reconstruction import reconstruct_image, nearest_centroids, quantize_centroids

__all__ = [
    # Configuration
    'KMeansConfig',
    'AggregationStrategy',
    # Primitives
    'distance',
    'is_close',
    'centroids_close',
    'pairwise_distances',
    # Steps
    'random_init',
    'validate_cluster_count',
    'assign_clusters',
    'chunk_bounds',
    'max_chunk_size_for',
    'BaseAggregator',
    'ReduceAggregator',
    'LockedAggregator',
    'create_aggregator',
    # Driver
    'ConvergenceState',
    'KMeansResult',
    'BaseKMeans',
    'ParallelKMeans',
    'as_samples',
    # Reconstruction
    'reconstruct_image',
    'nearest_centroids',
    'quantize_centroids',
]
