"""
Visualization of a palette reduction.

Shows the original image, the quantized image and the palette as a bar
chart of cluster sizes, one bar per centroid colored with that centroid.
"""

from typing import Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt

from ..kmeans import KMeansResult, quantize_centroids


def plot_quantization(
    original: np.ndarray,
    quantized: np.ndarray,
    result: KMeansResult,
    title: Optional[str] = None,
    figsize: Tuple[int, int] = (18, 6)
) -> plt.Figure:
    """
    Plot original vs. quantized image and the resulting palette.

    Args:
        original: Original image, shape (H, W, 3), uint8
        quantized: Palette-reduced image, shape (H, W, 3), uint8
        result: K-means result used to produce `quantized`
        title: Optional figure title
        figsize: Figure size (width, height) in inches

    Returns:
        fig: matplotlib figure with three panels

    Raises:
        ValueError: If the two images differ in shape

    Example:
        >>> fig = plot_quantization(image.to_array(), output, result)
        >>> fig.savefig('comparison.png')
    """
    if original.shape != quantized.shape:
        raise ValueError(
            f"Original {original.shape} and quantized {quantized.shape} differ in shape"
        )

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(original)
    axes[0].axis('off')
    axes[0].set_title('Original', fontsize=12, pad=10)

    n_clusters = len(result.centroids)
    axes[1].imshow(quantized)
    axes[1].axis('off')
    axes[1].set_title(f'Quantized (K={n_clusters})', fontsize=12, pad=10)

    counts = result.cluster_sizes()
    percentages = counts / max(counts.sum(), 1) * 100
    colors = quantize_centroids(result.centroids) / 255.0

    x_pos = np.arange(n_clusters)
    axes[2].bar(x_pos, percentages, color=colors, edgecolor='black', linewidth=1)
    axes[2].set_xticks(x_pos)
    axes[2].set_xticklabels(
        ['#{:02x}{:02x}{:02x}'.format(*c) for c in quantize_centroids(result.centroids)],
        rotation=45,
        fontsize=9
    )
    axes[2].set_ylabel('Pixels (%)', fontsize=11)
    axes[2].set_title(
        f'Palette ({result.state.value}, {result.n_iter} iterations)',
        fontsize=12,
        pad=10
    )
    axes[2].grid(axis='y', alpha=0.3)

    if title:
        fig.suptitle(title, fontsize=14)

    fig.tight_layout()
    return fig
