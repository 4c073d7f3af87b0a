"""
Image loading.

Decodes an image file with Pillow and flattens it into the (N, 3) sample
array consumed by the clustering engine.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..errors import EmptyImageError, ImageDecodeError


@dataclass
class ImageSamples:
    """
    Pixels of one image in row-major order.

    Attributes:
        samples: RGB values, shape (width * height, 3), uint8
        width: Image width in pixels
        height: Image height in pixels
    """
    samples: np.ndarray
    width: int
    height: int

    def __post_init__(self):
        """Validate that geometry and sample count agree."""
        if self.width * self.height != len(self.samples):
            raise ValueError(
                f"Image size {self.width}x{self.height} doesn't match "
                f"number of samples ({len(self.samples)})"
            )

    @property
    def n_samples(self) -> int:
        return len(self.samples)

    def to_array(self) -> np.ndarray:
        """Image as an (H, W, 3) uint8 array."""
        return self.samples.reshape(self.height, self.width, 3)

    @classmethod
    def from_array(cls, image: np.ndarray) -> 'ImageSamples':
        """
        Build from an (H, W, 3) uint8 array.

        Raises:
            ValueError: If image is not 3D with 3 channels
        """
        if image.ndim != 3 or image.shape[2] != 3:
            raise ValueError(f"Image must be (H, W, 3), got shape {image.shape}")

        h, w, c = image.shape
        samples = np.ascontiguousarray(image.reshape(-1, c), dtype=np.uint8)
        return cls(samples=samples, width=w, height=h)


def load_image(path: Union[str, Path]) -> ImageSamples:
    """
    Load an image file as RGB samples.

    Palette, grayscale and alpha images are converted to plain RGB; the
    alpha channel is dropped.

    Args:
        path: Path to any image format Pillow can decode

    Returns:
        ImageSamples with one sample per pixel, row-major

    Raises:
        FileNotFoundError: If the file does not exist
        ImageDecodeError: If the file cannot be decoded as an image
        EmptyImageError: If the image has no pixels

    Example:
        >>> image = load_image('photo.jpg')
        >>> print(image.width, image.height, image.samples.shape)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input image not found: {path}")

    try:
        with Image.open(path) as img:
            rgb = img.convert('RGB')
    except Image.DecompressionBombError as e:
        raise ImageDecodeError(f"Refusing to decode image {path}: {e}") from e
    except (UnidentifiedImageError, OSError) as e:
        if isinstance(e, (FileNotFoundError, PermissionError, IsADirectoryError)):
            raise
        raise ImageDecodeError(f"Failed to decode image {path}: {e}") from e

    img_array = np.array(rgb, dtype=np.uint8)
    if img_array.size == 0:
        raise EmptyImageError(f"Image {path} has no pixels")

    return ImageSamples.from_array(img_array)
