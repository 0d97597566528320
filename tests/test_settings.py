"""Tests for environment-driven settings and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from selection_mask import FreehandStroke, LayerGeometry, PathCommand
from selection_mask.config import Settings, configure_logging, get_settings, load_settings

ENV_VARS = [
    "SELECTION_MASK_LOG_LEVEL",
    "SELECTION_MASK_EXPANSION_RATIO",
    "SELECTION_MASK_STROKE_WIDTH",
    "SELECTION_MASK_ANTIALIAS",
    "SELECTION_MASK_SNAP_RADIUS",
    "SELECTION_MASK_SNAP_THRESHOLD",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = get_settings()

    assert settings == Settings()
    assert settings.log_level == "INFO"
    assert settings.compositor_config().expansion_ratio == 0.01
    assert settings.compositor_config().default_stroke_width == 30.0
    assert settings.compositor_config().antialias is True
    assert settings.edge_config().radius == 20
    assert settings.edge_config().threshold == 50.0


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SELECTION_MASK_EXPANSION_RATIO", "0.05")
    monkeypatch.setenv("SELECTION_MASK_ANTIALIAS", "no")
    monkeypatch.setenv("SELECTION_MASK_SNAP_RADIUS", "8")

    settings = get_settings()
    config = settings.compositor_config()

    assert config.expansion_ratio == 0.05
    assert config.antialias is False
    assert settings.edge_config().radius == 8


def test_env_file_is_read(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "# local overrides\nSELECTION_MASK_STROKE_WIDTH=12\nSELECTION_MASK_LOG_LEVEL=\"debug\"\n",
        encoding="utf-8",
    )

    settings = get_settings()

    assert settings.default_stroke_width == 12.0
    assert settings.log_level == "debug"


def test_environment_wins_over_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "local.env").write_text("SELECTION_MASK_SNAP_RADIUS=5\n", encoding="utf-8")
    monkeypatch.setenv("SELECTION_MASK_SNAP_RADIUS", "9")

    assert load_settings("local.env").snap_radius == 9


def test_invalid_value_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SELECTION_MASK_SNAP_RADIUS", "wide")

    with pytest.raises(ValueError, match="SELECTION_MASK_SNAP_RADIUS"):
        get_settings()


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()


def test_components_built_from_settings_follow_the_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("SELECTION_MASK_STROKE_WIDTH", "4")
    monkeypatch.setenv("SELECTION_MASK_SNAP_THRESHOLD", "5000")
    settings = get_settings()
    geometry = LayerGeometry(0, 0, original_width=100, original_height=100)
    stroke = FreehandStroke((PathCommand.move(20, 50), PathCommand.line(80, 50)))

    mask = settings.compositor().build_mask([stroke], geometry).mask
    detector = settings.edge_detector()

    assert mask[50, 50] > 0
    # 4 px wide line, far narrower than the 30 px default
    assert mask[45, 50] == 0
    assert detector.config.threshold == 5000


def test_configure_logging_uses_settings_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SELECTION_MASK_LOG_LEVEL", "warning")
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    pil_logger = logging.getLogger("PIL")
    monkeypatch.setattr(pil_logger, "level", pil_logger.level)

    assert configure_logging() == logging.WARNING
    assert calls["level"] == logging.WARNING
    assert "%(name)s" in calls["format"]


def test_configure_logging_explicit_level_keeps_pil_quiet(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: None)
    pil_logger = logging.getLogger("PIL")
    monkeypatch.setattr(pil_logger, "level", pil_logger.level)

    assert configure_logging("debug") == logging.DEBUG
    assert pil_logger.level == logging.INFO
    assert configure_logging("chatty") == logging.INFO
