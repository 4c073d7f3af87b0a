import numpy as np
import pytest

from palette_kmeans.kmeans import (
    distance,
    nearest_centroids,
    quantize_centroids,
    reconstruct_image,
)


def test_each_pixel_gets_its_nearest_final_centroid(rng):
    samples = rng.integers(0, 256, size=(60, 3)).astype(np.uint8)
    centroids = rng.uniform(0, 255, size=(5, 3))

    output = reconstruct_image(centroids, samples, 10, 6)

    assert output.shape == (6, 10, 3)
    assert output.dtype == np.uint8
    flat = output.reshape(-1, 3)
    palette = quantize_centroids(centroids)
    for sample, color in zip(samples, flat):
        nearest = int(np.argmin([distance(sample, c) for c in centroids]))
        np.testing.assert_array_equal(color, palette[nearest])


def test_channels_are_truncated_not_rounded():
    centroids = np.array([[10.9, 20.5, 254.999]])
    assert quantize_centroids(centroids).tolist() == [[10, 20, 254]]


def test_ignores_earlier_assignments():
    samples = np.array([[0, 0, 0], [200, 200, 200]], dtype=np.uint8)
    centroids = np.array([[10.0, 10.0, 10.0], [190.0, 190.0, 190.0]])

    assert nearest_centroids(samples, centroids).tolist() == [0, 1]


def test_rejects_geometry_mismatch():
    samples = np.zeros((6, 3), dtype=np.uint8)
    with pytest.raises(ValueError, match="doesn't match"):
        reconstruct_image(np.zeros((1, 3)), samples, 4, 2)
