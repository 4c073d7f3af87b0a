"""Shared fixtures for the palette_kmeans test suite."""

import numpy as np
import pytest
from PIL import Image


RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


class FixedRng:
    """Randomness stand-in that hands out a fixed sequence of indices."""

    def __init__(self, indices):
        self.indices = np.asarray(indices)
        self.calls = []

    def integers(self, low, high, size=None):
        self.calls.append((low, high, size))
        return self.indices[:size]


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def primaries_image():
    """2x2 image: red, green / blue, white."""
    return np.array([[RED, GREEN], [BLUE, WHITE]], dtype=np.uint8)


@pytest.fixture
def primaries_samples(primaries_image):
    return primaries_image.reshape(-1, 3)


@pytest.fixture
def blob_samples(rng):
    """Three tight, well separated color blobs of 40 pixels each."""
    centers = np.array([[20, 20, 20], [128, 200, 50], [240, 30, 200]])
    noise = rng.integers(-6, 7, size=(3, 40, 3))
    blobs = np.clip(centers[:, np.newaxis, :] + noise, 0, 255)
    return blobs.reshape(-1, 3).astype(np.uint8)


@pytest.fixture
def write_image(tmp_path):
    """Write an (H, W, C) uint8 array to tmp_path and return the path."""
    def _write(array, name="input.png"):
        path = tmp_path / name
        Image.fromarray(np.asarray(array, dtype=np.uint8)).save(path)
        return path
    return _write


@pytest.fixture
def fixed_rng():
    """Factory for FixedRng instances."""
    return FixedRng
