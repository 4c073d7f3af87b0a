"""
Image saving.
"""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from ..errors import ImageWriteError


def save_image(image: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Write an (H, W, 3) uint8 array to disk.

    The output format follows the file extension.

    Args:
        image: RGB image, shape (H, W, 3), uint8
        path: Destination file

    Returns:
        path: The written path

    Raises:
        ValueError: If image is not (H, W, 3) uint8
        ImageWriteError: If encoding or writing fails
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Image must be (H, W, 3), got shape {image.shape}")
    if image.dtype != np.uint8:
        raise ValueError(f"Image must be uint8, got {image.dtype}")

    path = Path(path)
    try:
        Image.fromarray(image).save(path)
    except (OSError, ValueError, KeyError) as e:
        # Pillow raises ValueError/KeyError for unknown extensions
        raise ImageWriteError(f"Failed to write image {path}: {e}") from e

    return path
