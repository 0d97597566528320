"""
Visualization utilities for masks and edge maps.

Matplotlib figures for checking a built mask against its image (the
"Mask Preview" the editor shows as an extra layer) and for inspecting
Sobel edge maps.
"""

from typing import List, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt

from ..compositor import MaskResult


def plot_image_grid(
    images: List[np.ndarray],
    titles: List[str],
    figsize: Tuple[int, int] = (18, 6),
    cmaps: Optional[List[Optional[str]]] = None
) -> plt.Figure:
    """
    Show images side by side in a single row.

    Args:
        images: Images, RGB (H, W, 3) or single-channel (H, W)
        titles: One title per image
        figsize: Figure size (width, height) in inches
        cmaps: Optional colormap per image (None for RGB images)

    Returns:
        fig: Matplotlib figure without visible axes

    Raises:
        ValueError: If images and titles differ in length
    """
    if len(images) != len(titles):
        raise ValueError(
            f"Number of images ({len(images)}) must match "
            f"number of titles ({len(titles)})"
        )
    cmaps = cmaps or [None] * len(images)

    fig, axes = plt.subplots(1, len(images), figsize=figsize)

    # A single subplot is not returned as an array
    if len(images) == 1:
        axes = [axes]

    for ax, img, title, cmap in zip(axes, images, titles, cmaps):
        if cmap is None and img.ndim == 2:
            cmap = 'gray'
        ax.imshow(img, cmap=cmap)
        ax.axis('off')
        ax.set_title(title, fontsize=14, pad=10)

    plt.tight_layout()

    return fig


def overlay_mask(
    image: np.ndarray,
    mask: np.ndarray,
    color: Tuple[int, int, int] = (255, 0, 0),
    alpha: float = 0.5
) -> np.ndarray:
    """
    Tint the included region of a mask on top of an RGB image.

    Args:
        image: RGB image (H, W, 3), uint8
        mask: Mask (H, W), 0..255
        color: Tint color
        alpha: Tint opacity at full inclusion

    Returns:
        overlay: RGB image (H, W, 3), uint8

    Raises:
        ValueError: If image and mask sizes differ
    """
    if image.shape[:2] != mask.shape:
        raise ValueError(
            f"Image {image.shape[:2]} and mask {mask.shape} must have the same size"
        )
    weight = (mask.astype(np.float64) / 255.0 * alpha)[..., None]
    tint = np.array(color, dtype=np.float64)
    blended = image[..., :3].astype(np.float64) * (1 - weight) + tint * weight
    return np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def plot_mask_overlay(
    image: np.ndarray,
    mask: np.ndarray,
    alpha: float = 0.5,
    figsize: Tuple[int, int] = (12, 6)
) -> plt.Figure:
    """Original image next to the image with the mask tinted on top."""
    return plot_image_grid(
        [image, overlay_mask(image, mask, alpha=alpha)],
        ['Original Image', 'Editable Region'],
        figsize=figsize
    )


def plot_edge_map(
    edge_map: np.ndarray,
    title: str = 'Gradient Magnitude',
    figsize: Tuple[int, int] = (8, 6)
) -> plt.Figure:
    """Edge map with a colorbar."""
    fig, ax = plt.subplots(figsize=figsize)
    im = ax.imshow(edge_map, cmap='magma')
    ax.axis('off')
    ax.set_title(title, fontsize=14, pad=10)
    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    plt.tight_layout()
    return fig


def plot_mask_preview(
    image: np.ndarray,
    result: MaskResult,
    edge_map: Optional[np.ndarray] = None,
    figsize: Tuple[int, int] = (18, 6)
) -> plt.Figure:
    """
    Preview a built mask: original, mask, overlay and optionally edges.

    Args:
        image: Original RGB image the mask was built for
        result: Built mask
        edge_map: Optional edge map shown as a fourth panel
        figsize: Figure size

    Returns:
        fig: Matplotlib figure
    """
    images = [image, result.mask, overlay_mask(image, result.mask)]
    titles = ['Original Image', 'Mask Preview', 'Overlay']
    cmaps = [None, 'gray', None]
    if edge_map is not None:
        images.append(edge_map)
        titles.append('Edges')
        cmaps.append('magma')

    fig = plot_image_grid(images, titles, figsize=figsize, cmaps=cmaps)
    fig.suptitle(str(result), fontsize=12, y=0.98)
    return fig
