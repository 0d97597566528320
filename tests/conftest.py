"""Shared fixtures for the selection-mask test suite."""

from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from selection_mask import LayerGeometry


@pytest.fixture
def geometry_200() -> LayerGeometry:
    return LayerGeometry(offset_x=0, offset_y=0, original_width=200, original_height=200)


@pytest.fixture
def step_edge_image() -> np.ndarray:
    """100x100 RGB image, black for x < 50 and white from x = 50."""
    image = np.zeros((100, 100, 3), dtype=np.uint8)
    image[:, 50:] = 255
    return image


@pytest.fixture
def uniform_image() -> np.ndarray:
    return np.full((100, 100, 3), 128, dtype=np.uint8)
