"""
Image input/output for palette_kmeans.

Pillow-based helpers that turn image files into sample arrays and write
quantized arrays back to disk.
"""

from .image_loader import ImageSamples, load_image
from .image_writer import save_image

__all__ = ['ImageSamples', 'load_image', 'save_image']
