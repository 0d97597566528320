"""
Settings

Defaults for mask building and edge snapping, read from ``SELECTION_MASK_*``
environment variables. A ``.env`` file in the working directory supplies
values the environment does not set.

The compositor and the edge detector never read settings themselves; the
host builds them from here:

    >>> settings = get_settings()
    >>> compositor = settings.compositor()
    >>> detector = settings.edge_detector()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Dict, Mapping, Tuple

from ..compositor import CompositorConfig, VectorToRasterCompositor
from ..edges import EdgeConfig, SobelEdgeDetector

ENV_PREFIX = "SELECTION_MASK_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _read_dotenv(path: Path) -> Dict[str, str]:
    """KEY=VALUE pairs of a .env file; comments and malformed lines are ignored."""
    if not path.is_file():
        return {}

    values = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, value = line.split("=", 1)
            values[key.strip()] = value.strip().strip('"\'')
    return values


def _parse_bool(value: str) -> bool:
    return value.lower() in _TRUE_VALUES


# Settings field -> (variable name after the prefix, converter)
_VARIABLES: Dict[str, Tuple[str, Callable[[str], object]]] = {
    "log_level": ("LOG_LEVEL", str),
    "expansion_ratio": ("EXPANSION_RATIO", float),
    "default_stroke_width": ("STROKE_WIDTH", float),
    "antialias": ("ANTIALIAS", _parse_bool),
    "snap_radius": ("SNAP_RADIUS", int),
    "snap_threshold": ("SNAP_THRESHOLD", float),
}


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide defaults, one field per ``SELECTION_MASK_*`` variable."""

    log_level: str = "INFO"

    expansion_ratio: float = 0.01
    default_stroke_width: float = 30.0
    antialias: bool = True

    snap_radius: int = 20
    snap_threshold: float = 50.0

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> Settings:
        """
        Build settings from ``SELECTION_MASK_*`` entries of ``values``.

        Missing variables keep their defaults.

        Raises:
            ValueError: If a variable cannot be converted, naming the variable
        """
        kwargs = {}
        for field, (suffix, cast) in _VARIABLES.items():
            name = ENV_PREFIX + suffix
            if name not in values:
                continue
            try:
                kwargs[field] = cast(values[name])
            except ValueError as e:
                raise ValueError(f"Invalid value for {name}: {values[name]!r}") from e
        return cls(**kwargs)

    def compositor_config(self) -> CompositorConfig:
        return CompositorConfig(
            expansion_ratio=self.expansion_ratio,
            default_stroke_width=self.default_stroke_width,
            antialias=self.antialias,
        )

    def edge_config(self) -> EdgeConfig:
        return EdgeConfig(radius=self.snap_radius, threshold=self.snap_threshold)

    def compositor(self) -> VectorToRasterCompositor:
        """Compositor configured from these settings."""
        return VectorToRasterCompositor(self.compositor_config())

    def edge_detector(self) -> SobelEdgeDetector:
        """Edge detector configured from these settings."""
        return SobelEdgeDetector(self.edge_config())


def load_settings(env_file: str = ".env") -> Settings:
    """Read settings from the environment, falling back to ``env_file``."""
    values = _read_dotenv(Path(env_file))
    values.update(os.environ)
    return Settings.from_mapping(values)


@lru_cache
def get_settings() -> Settings:
    """Settings for this process, read once."""
    return load_settings()
