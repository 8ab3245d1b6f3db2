"""src/mortcast/cli.py"""

from __future__ import annotations

import typer
from rich import print
from rich.markup import escape

from mortcast.common.config import load_config
from mortcast.common.logging import setup_logging
from mortcast.errors import MortcastError
from mortcast.pipelines.run_backtest import run_backtest
from mortcast.pipelines.run_etl import run_etl
from mortcast.pipelines.run_fit import run_fit
from mortcast.pipelines.run_forecast import run_forecast

app = typer.Typer(help="Lee-Carter mortality forecasting CLI")

DEFAULT_CONFIG = "configs/config.yaml"

# Missing upstream artifacts (e.g. forecast before fit) surface as FileNotFoundError
HANDLED_ERRORS = (MortcastError, FileNotFoundError)


def _fail(exc: Exception) -> None:
    print(f"[bold red]{type(exc).__name__}:[/bold red] {escape(str(exc))}")
    context = getattr(exc, "context", None)
    if context:
        for k, v in context.items():
            print(f"  {k}: {escape(str(v))}")
    raise typer.Exit(code=1)


@app.command()
def init(config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config")) -> None:
    """Create expected directories from config (data/, artifacts/, etc.)."""
    cfg = load_config(config_path)
    setup_logging(cfg)

    created = cfg.ensure_directories()
    print("[bold green]Init complete.[/bold green]")
    if created:
        print("Created directories:")
        for p in created:
            print(f"  - {p}")
    else:
        print("No directories needed (already exist).")


@app.command()
def etl(config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config")) -> None:
    """Run ETL: raw deaths/exposures → canonical mortality rates (CSV + SQLite)."""
    cfg = load_config(config_path)
    setup_logging(cfg)
    cfg.ensure_directories()
    try:
        run_etl(cfg)
    except HANDLED_ERRORS as exc:
        _fail(exc)
    print("[bold green]ETL complete.[/bold green]")


@app.command()
def fit(config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config")) -> None:
    """Fit Lee-Carter models per region/sex; persist artifacts."""
    cfg = load_config(config_path)
    setup_logging(cfg)
    cfg.ensure_directories()
    try:
        run_fit(cfg)
    except HANDLED_ERRORS as exc:
        _fail(exc)
    print("[bold green]Fitting complete.[/bold green]")


@app.command()
def forecast(config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config")) -> None:
    """Forecast mortality surfaces with prediction intervals."""
    cfg = load_config(config_path)
    setup_logging(cfg)
    cfg.ensure_directories()
    try:
        run_forecast(cfg)
    except HANDLED_ERRORS as exc:
        _fail(exc)
    print("[bold green]Forecasting complete.[/bold green]")


@app.command()
def backtest(config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config")) -> None:
    """Holdout backtest of the Lee-Carter forecasts."""
    cfg = load_config(config_path)
    setup_logging(cfg)
    cfg.ensure_directories()
    try:
        run_backtest(cfg)
    except HANDLED_ERRORS as exc:
        _fail(exc)
    print("[bold green]Backtest complete.[/bold green]")


@app.command()
def run_all(config_path: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config")) -> None:
    """Convenience command: init → etl → fit → forecast → backtest"""
    cfg = load_config(config_path)
    setup_logging(cfg)
    cfg.ensure_directories()
    try:
        run_etl(cfg)
        run_fit(cfg)
        run_forecast(cfg)
        run_backtest(cfg)
    except HANDLED_ERRORS as exc:
        _fail(exc)
    print("[bold green]All steps complete.[/bold green]")


if __name__ == "__main__":
    app()
