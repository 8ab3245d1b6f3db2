"""tests/unit/test_cli.py"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from mortcast.cli import app

runner = CliRunner()


def _write_config(root: Path, *, horizon: int = 3) -> Path:
    cfg = root / "configs" / "config.yaml"
    cfg.parent.mkdir(parents=True, exist_ok=True)
    cfg.write_text(
        f"""
paths:
  raw_dir: data/raw
  processed_dir: data/processed
  models_dir: artifacts/models
  metrics_dir: artifacts/metrics
  forecasts_dir: artifacts/forecasts
logging:
  level: WARNING
database:
  sqlite_path: data/processed/mortality.db
data:
  raw_file: mortality_raw.csv
model:
  adjust: dt
forecast:
  horizon: {horizon}
backtest:
  holdout_years: 4
""",
        encoding="utf-8",
    )
    return cfg


def test_init_creates_directories(tmp_path: Path) -> None:
    cfg = _write_config(tmp_path)
    result = runner.invoke(app, ["init", "--config-path", str(cfg)])

    assert result.exit_code == 0, result.output
    assert "Init complete" in result.output
    assert (tmp_path / "artifacts" / "forecasts").is_dir()


def test_run_all_end_to_end(tmp_path: Path, canonical_frame: pd.DataFrame) -> None:
    cfg = _write_config(tmp_path)
    raw_dir = tmp_path / "data" / "raw"
    raw_dir.mkdir(parents=True)
    canonical_frame.to_csv(raw_dir / "mortality_raw.csv", index=False)

    result = runner.invoke(app, ["run-all", "--config-path", str(cfg)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "artifacts" / "forecasts" / "mortality_forecast.csv").exists()
    assert (tmp_path / "artifacts" / "metrics" / "backtest_metrics.csv").exists()


def test_domain_errors_exit_nonzero(tmp_path: Path, canonical_frame: pd.DataFrame) -> None:
    cfg = _write_config(tmp_path, horizon=0)
    raw_dir = tmp_path / "data" / "raw"
    raw_dir.mkdir(parents=True)
    canonical_frame.to_csv(raw_dir / "mortality_raw.csv", index=False)

    assert runner.invoke(app, ["etl", "--config-path", str(cfg)]).exit_code == 0
    assert runner.invoke(app, ["fit", "--config-path", str(cfg)]).exit_code == 0

    result = runner.invoke(app, ["forecast", "--config-path", str(cfg)])
    assert result.exit_code == 1
    assert "InvalidArgument" in result.output


def test_forecast_before_fit_reports_missing_registry(tmp_path: Path) -> None:
    cfg = _write_config(tmp_path)
    result = runner.invoke(app, ["forecast", "--config-path", str(cfg)])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "FileNotFoundError" in result.output


def test_fit_with_no_matching_groups_reports_data_error(tmp_path: Path, canonical_frame: pd.DataFrame) -> None:
    cfg = _write_config(tmp_path)
    with cfg.open("a", encoding="utf-8") as f:
        f.write("groups:\n  sexes: [Nobody]\n")
    raw_dir = tmp_path / "data" / "raw"
    raw_dir.mkdir(parents=True)
    canonical_frame.to_csv(raw_dir / "mortality_raw.csv", index=False)

    assert runner.invoke(app, ["etl", "--config-path", str(cfg)]).exit_code == 0
    result = runner.invoke(app, ["fit", "--config-path", str(cfg)])

    assert result.exit_code == 1
    assert "DataError" in result.output
