import numpy as np
import pytest

from palette_kmeans import EmptyImageError
from palette_kmeans.kmeans import random_init, validate_cluster_count


def test_random_init_returns_k_float_centroids_drawn_from_samples(rng):
    samples = rng.integers(0, 256, size=(50, 3)).astype(np.uint8)

    centroids = random_init(samples, 6, rng)

    assert centroids.shape == (6, 3)
    assert centroids.dtype == np.float64
    sample_rows = {tuple(row) for row in samples.tolist()}
    for row in centroids.astype(int).tolist():
        assert tuple(row) in sample_rows


def test_random_init_samples_with_replacement(fixed_rng):
    samples = np.array([[1, 2, 3], [4, 5, 6], [7, 8, 9]], dtype=np.uint8)
    rng = fixed_rng([1, 1, 1])

    centroids = random_init(samples, 3, rng)

    np.testing.assert_array_equal(centroids, [[4, 5, 6]] * 3)
    assert rng.calls == [(0, 3, 3)]


def test_random_init_k_equal_to_n_is_allowed(rng):
    samples = np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)
    assert random_init(samples, 2, rng).shape == (2, 3)


def test_validate_rejects_empty_input():
    with pytest.raises(EmptyImageError):
        validate_cluster_count(1, 0)


def test_validate_rejects_zero_clusters():
    with pytest.raises(ValueError, match=">= 1"):
        validate_cluster_count(0, 10)


def test_validate_rejects_more_clusters_than_samples(rng):
    samples = np.zeros((3, 3), dtype=np.uint8)
    with pytest.raises(ValueError, match="exceeds"):
        random_init(samples, 4, rng)
