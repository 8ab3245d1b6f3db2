"""tests/unit/test_config.py"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from mortcast.common.config import load_config
from mortcast.common.logging import setup_logging
from mortcast.common.utils import get_option, resolve_path, safe_float, safe_int

CONFIG_YAML = """
paths:
  raw_dir: data/raw
  metrics_dir: artifacts/metrics
logging:
  level: debug
  file: artifacts/logs/test.log
model:
  adjust: deaths
forecast:
  horizon: 7
"""


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    p = tmp_path / "configs" / "config.yaml"
    p.parent.mkdir(parents=True)
    p.write_text(CONFIG_YAML, encoding="utf-8")
    return p


def test_load_config_resolves_paths_against_project_root(config_file: Path, tmp_path: Path) -> None:
    cfg = load_config(config_file)

    assert cfg.project_root == tmp_path.resolve()
    assert cfg.paths["raw_dir"] == (tmp_path / "data" / "raw").resolve()
    assert cfg.model["adjust"] == "deaths"
    assert cfg.backtest == {}
    assert cfg.groups == {}


def test_ensure_directories_creates_missing(config_file: Path, tmp_path: Path) -> None:
    cfg = load_config(config_file)
    created = cfg.ensure_directories()

    assert (tmp_path / "data" / "raw").is_dir()
    assert (tmp_path / "artifacts" / "metrics").is_dir()
    assert len(created) == 2
    assert cfg.ensure_directories() == []


def test_setup_logging_adds_rotating_file_handler(config_file: Path, tmp_path: Path) -> None:
    cfg = load_config(config_file)
    setup_logging(cfg)
    try:
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)
        assert (tmp_path / "artifacts" / "logs").is_dir()
    finally:
        for h in list(logging.getLogger().handlers):
            if isinstance(h, RotatingFileHandler):
                h.close()
                logging.getLogger().removeHandler(h)


def test_get_option_dict_and_attribute_sections() -> None:
    class Section:
        horizon = 5
        level = None

    assert get_option({"horizon": 3}, "horizon") == 3
    assert get_option({"horizon": None}, "horizon", 9) == 9
    assert get_option(Section(), "horizon") == 5
    assert get_option(Section(), "level", 0.9) == 0.9
    assert get_option(None, "x", "d") == "d"


def test_safe_conversions_and_paths(tmp_path: Path) -> None:
    assert safe_int("12", 0) == 12
    assert safe_int(None, 4) == 4
    assert safe_float("x", 0.5) == 0.5
    assert resolve_path(tmp_path, "a/b") == (tmp_path / "a" / "b").resolve()
    assert resolve_path(tmp_path, tmp_path / "c") == tmp_path / "c"
