"""
Visualization helpers for masks and edge maps.
"""

from .mask_preview import plot_image_grid, overlay_mask, plot_mask_overlay, plot_edge_map, plot_mask_preview

__all__ = ['plot_image_grid', 'overlay_mask', 'plot_mask_overlay', 'plot_edge_map', 'plot_mask_preview']
