"""
Command-line entry point.

Reduces an image to K colors:

    python -m palette_kmeans --input photo.jpg --output photo_4.png -k 4
"""

import argparse
import sys
from typing import List, Optional

from .image_io import load_image, save_image
from .kmeans import KMeansConfig, ParallelKMeans, reconstruct_image


def positive_int(value: str) -> int:
    """argparse type for integers >= 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="palette-kmeans",
        description="Reduce the color palette of an image to K colors with k-means.",
    )
    parser.add_argument(
        "-i", "--input",
        required=True,
        help="Path of the image to quantize.",
    )
    parser.add_argument(
        "-o", "--output",
        required=True,
        help="Path of the quantized image; format follows the extension.",
    )
    parser.add_argument(
        "-k", "--k",
        type=positive_int,
        default=4,
        help="Number of colors in the output palette (default: 4).",
    )
    return parser.parse_args(argv)


def run(input_path: str, output_path: str, k: int) -> int:
    """Load, cluster, reconstruct and save. Returns the iteration count."""
    image = load_image(input_path)

    kmeans = ParallelKMeans(KMeansConfig(n_clusters=k))
    result = kmeans.fit_predict(image.samples)

    output = reconstruct_image(
        result.centroids, image.samples, image.width, image.height
    )
    save_image(output, output_path)

    print(
        f"{image.width}x{image.height} -> {k} colors, "
        f"{result.n_iter} iterations ({result.state.value}), saved to {output_path}"
    )
    return result.n_iter


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        run(args.input, args.output, args.k)
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
