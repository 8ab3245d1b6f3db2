"""tests/conftest.py"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

import numpy as np
import pandas as pd
import pytest

from mortcast.tables.series import MortalitySeries


class _Obj:
    """Simple attribute container (duck-typed config sections)."""

    def __init__(self, **kwargs: Any) -> None:
        for k, v in kwargs.items():
            setattr(self, k, v)


@dataclass
class MinimalAppConfig:
    """
    Duck-typed stand-in for mortcast.common.config.AppConfig.
    Only includes what pipelines use.
    """
    project_root: Path
    paths: _Obj
    database: _Obj
    data: _Obj
    model: _Obj
    forecast: _Obj
    backtest: _Obj
    groups: _Obj


# ---------- synthetic mortality ----------

def make_canonical_frame(
    *,
    regions: Iterable[str] = ("SWE",),
    sexes: Iterable[str] = ("Female", "Male"),
    ages: Iterable[int] = range(0, 10),
    years: Iterable[int] = range(1990, 2020),
    population: float = 50_000.0,
    noise: float = 0.02,
    seed: int = 0,
) -> pd.DataFrame:
    """
    Canonical table (Region_Code, Sex, Age, Year, Deaths, Population, Mortality)
    drawn from a Lee-Carter surface with declining kt plus small noise.
    """
    rng = np.random.default_rng(seed)
    ages = np.asarray(list(ages), dtype=int)
    years = np.asarray(list(years), dtype=int)

    ax = -6.0 + 0.35 * ages
    bx = np.linspace(1.5, 0.5, ages.size)
    bx = bx / bx.sum()
    trend = np.linspace(8.0, -8.0, years.size)

    rows: list[dict[str, Any]] = []
    for r_i, region in enumerate(regions):
        for s_i, sex in enumerate(sexes):
            kt = trend + rng.normal(0.0, 0.4, years.size)
            log_m = (ax + 0.25 * s_i + 0.1 * r_i)[:, None] + np.outer(bx, kt)
            log_m = log_m + rng.normal(0.0, noise, log_m.shape)
            m = np.exp(log_m)
            for i, age in enumerate(ages):
                for j, year in enumerate(years):
                    rows.append(
                        {
                            "Region_Code": region,
                            "Sex": sex,
                            "Age": int(age),
                            "Year": int(year),
                            "Deaths": float(m[i, j] * population),
                            "Population": float(population),
                            "Mortality": float(m[i, j]),
                        }
                    )
    return pd.DataFrame(rows)


@pytest.fixture
def canonical_frame() -> pd.DataFrame:
    return make_canonical_frame()


@pytest.fixture
def noisy_series(canonical_frame: pd.DataFrame) -> MortalitySeries:
    g = canonical_frame[canonical_frame["Sex"] == "Female"]
    return MortalitySeries.from_frame(
        g,
        key={"Region_Code": "SWE", "Sex": "Female"},
        exposure_col="Population",
    )


@pytest.fixture
def closed_form_series() -> MortalitySeries:
    """
    Exact rank-1 surface:
        ax = [-4, -6], bx = [0.25, 0.75], kt = [2, 0, -2]
    """
    log_m = np.array([[-3.5, -4.0, -4.5], [-4.5, -6.0, -7.5]])
    return MortalitySeries(
        key={"Region_Code": "TST", "Sex": "Female"},
        ages=np.array([0, 1]),
        years=np.array([2000, 2001, 2002]),
        rates=np.exp(log_m),
    )


# ---------- pipeline fixtures ----------

@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    # Emulate repository root in temp dir
    (tmp_path / "data" / "raw").mkdir(parents=True, exist_ok=True)
    (tmp_path / "artifacts" / "metrics").mkdir(parents=True, exist_ok=True)
    (tmp_path / "artifacts" / "forecasts").mkdir(parents=True, exist_ok=True)
    return tmp_path


def make_minimal_config(project_root: Path) -> MinimalAppConfig:
    paths = _Obj(
        raw_dir="data/raw",
        processed_dir="data/processed",
        models_dir="artifacts/models",
        metrics_dir="artifacts/metrics",
        forecasts_dir="artifacts/forecasts",
    )
    database = _Obj(sqlite_path="artifacts/mortcast_test.db")
    data = _Obj(raw_file="mortality_raw.csv", drop_sexes=["Total"], max_age=8, start_year=None, end_year=None)
    model = _Obj(adjust="dt", workers=1, age_min=None, age_max=None)
    forecast = _Obj(horizon=5, jump_off="fit", interval_level=0.95)
    backtest = _Obj(holdout_years=5)
    groups = _Obj(regions=None, sexes=None)
    return MinimalAppConfig(
        project_root=project_root,
        paths=paths,
        database=database,
        data=data,
        model=model,
        forecast=forecast,
        backtest=backtest,
        groups=groups,
    )


@pytest.fixture
def cfg(project_root: Path) -> MinimalAppConfig:
    return make_minimal_config(project_root)


def write_minimal_raw_data(raw_dir: Path) -> None:
    """
    Writes a raw tidy export as run_etl expects it:
      - Country / Sex / Age / Year / Deaths / Exposure columns
      - short sex codes, a 'Total' sex, and an open '10+' age label
    """
    raw_dir.mkdir(parents=True, exist_ok=True)

    canonical = make_canonical_frame(ages=range(0, 11), years=range(1990, 2020), seed=7)
    raw = canonical.rename(columns={"Region_Code": "Country", "Population": "Exposure"}).drop(columns="Mortality")
    raw["Sex"] = raw["Sex"].map({"Female": "f", "Male": "m"})
    raw["Age"] = raw["Age"].astype(str).replace({"10": "10+"})

    total = (
        raw.groupby(["Country", "Age", "Year"], as_index=False)[["Deaths", "Exposure"]]
        .sum()
        .assign(Sex="t")
    )
    pd.concat([raw, total], ignore_index=True).to_csv(raw_dir / "mortality_raw.csv", index=False)


@pytest.fixture
def minimal_data(cfg: MinimalAppConfig) -> MinimalAppConfig:
    write_minimal_raw_data(cfg.project_root / "data" / "raw")
    return cfg
