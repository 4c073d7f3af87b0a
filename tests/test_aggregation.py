from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from palette_kmeans.kmeans import (
    AggregationStrategy,
    KMeansConfig,
    LockedAggregator,
    ReduceAggregator,
    assign_clusters,
    create_aggregator,
)


AGGREGATORS = [ReduceAggregator, LockedAggregator]


@pytest.mark.parametrize("aggregator_cls", AGGREGATORS)
def test_centroid_is_per_channel_mean(aggregator_cls):
    samples = np.array(
        [[0, 0, 0], [10, 20, 30], [255, 255, 255], [200, 100, 50]],
        dtype=np.uint8,
    )
    labels = np.array([0, 0, 1, 1])

    centroids, counts = aggregator_cls(2).aggregate(samples, labels)

    np.testing.assert_allclose(centroids, [[5.0, 10.0, 15.0], [227.5, 177.5, 152.5]])
    assert counts.tolist() == [2, 2]


@pytest.mark.parametrize("aggregator_cls", AGGREGATORS)
def test_empty_cluster_becomes_zero_centroid(aggregator_cls):
    samples = np.array([[0, 0, 0], [10, 10, 10], [250, 250, 250]], dtype=np.uint8)
    initial = np.array([[5.0, 5.0, 5.0], [200.0, 200.0, 200.0], [255.0, 0.0, 0.0]])

    labels, _ = assign_clusters(samples, initial)
    centroids, counts = aggregator_cls(3).aggregate(samples, labels)

    assert counts.tolist() == [2, 1, 0]
    assert centroids[2].tolist() == [0.0, 0.0, 0.0]
    np.testing.assert_allclose(centroids[0], [5.0, 5.0, 5.0])


@pytest.mark.parametrize("aggregator_cls", AGGREGATORS)
def test_parallel_aggregation_covers_every_sample(aggregator_cls, rng):
    samples = rng.integers(0, 256, size=(10000, 3)).astype(np.uint8)
    labels = rng.integers(0, 6, size=10000)

    expected = np.array([samples[labels == j].mean(axis=0) for j in range(6)])
    with ThreadPoolExecutor(max_workers=4) as executor:
        centroids, counts = aggregator_cls(6).aggregate(
            samples, labels, executor, n_chunks=8
        )

    assert counts.sum() == len(samples)
    np.testing.assert_array_equal(counts, np.bincount(labels, minlength=6))
    np.testing.assert_allclose(centroids, expected, rtol=1e-9)


def test_strategies_agree(rng):
    samples = rng.integers(0, 256, size=(3000, 3)).astype(np.uint8)
    labels = rng.integers(0, 5, size=3000)

    with ThreadPoolExecutor(max_workers=3) as executor:
        reduced, reduced_counts = ReduceAggregator(5).aggregate(
            samples, labels, executor, n_chunks=3
        )
        locked, locked_counts = LockedAggregator(5).aggregate(
            samples, labels, executor, n_chunks=3
        )

    np.testing.assert_array_equal(reduced_counts, locked_counts)
    np.testing.assert_allclose(reduced, locked)


def test_rejects_mismatched_lengths():
    with pytest.raises(ValueError, match="differ in length"):
        ReduceAggregator(2).aggregate(np.zeros((3, 3), dtype=np.uint8), np.zeros(2, dtype=int))


def test_factory_follows_config():
    assert isinstance(create_aggregator(KMeansConfig()), ReduceAggregator)
    locked = create_aggregator(KMeansConfig(aggregation=AggregationStrategy.LOCKED))
    assert isinstance(locked, LockedAggregator)
    assert locked.n_clusters == 4
