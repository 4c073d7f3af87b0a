"""
palette_kmeans - Color palette reduction with a parallel k-means engine.

The package reduces an image to K representative colors and re-renders it
using only those colors.

Subpackages:
- kmeans: clustering engine (initializer, assignment, aggregation, driver)
- image_io: Pillow-based loading and saving of RGB images
- viz: matplotlib helpers for inspecting a quantization
"""

from .errors import EmptyImageError, ImageDecodeError, ImageWriteError
from .kmeans import (
    KMeansConfig,
    KMeansResult,
    ParallelKMeans,
    ConvergenceState,
    reconstruct_image,
)
from .image_io import ImageSamples, load_image, save_image

__version__ = "0.1.0"

__all__ = [
    'EmptyImageError',
    'ImageDecodeError',
    'ImageWriteError',
    'KMeansConfig',
    'KMeansResult',
    'ParallelKMeans',
    'ConvergenceState',
    'reconstruct_image',
    'ImageSamples',
    'load_image',
    'save_image',
]
