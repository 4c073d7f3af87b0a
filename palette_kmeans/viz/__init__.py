"""
Visualization helpers for palette_kmeans.
"""

from .palette_plot import plot_quantization

__all__ = ['plot_quantization']
