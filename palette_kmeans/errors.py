"""
Error types raised at the boundaries of the quantizer.

All of them subclass a builtin so callers that only know about
ValueError / OSError keep working.
"""


class EmptyImageError(ValueError):
    """Raised when there are no samples to cluster."""


class ImageDecodeError(ValueError):
    """Raised when an input file exists but cannot be decoded as an image."""


class ImageWriteError(OSError):
    """Raised when the quantized image cannot be encoded or written."""
