"""src/mortcast/pipelines/run_fit.py"""

from __future__ import annotations

import logging
import re
from typing import Any

import pandas as pd

from mortcast.common.config import AppConfig
from mortcast.common.utils import get_option, resolve_path, safe_int
from mortcast.errors import DataError
from mortcast.io.db import read_table, table_exists
from mortcast.io.writers import write_csv, write_model_artifact
from mortcast.modeling.batch import fit_groups
from mortcast.pipelines.run_etl import MORTALITY_TABLE, db_path_from_config
from mortcast.reporting.tables import age_components, fit_summary_table, time_components
from mortcast.tables.vital import VitalTable

logger = logging.getLogger(__name__)

MODEL_NAME = "lee_carter"
REGISTRY_FILE = "fitted_models.csv"


def _slug(value: Any) -> str:
    return re.sub(r"[^A-Za-z0-9_-]+", "_", str(value)).strip("_") or "NA"


def _filter_groups(df: pd.DataFrame, groups: Any) -> pd.DataFrame:
    regions = get_option(groups, "regions")
    sexes = get_option(groups, "sexes")
    if regions:
        df = df[df["Region_Code"].isin([str(r).strip() for r in regions])]
    if sexes:
        df = df[df["Sex"].isin([str(s).strip() for s in sexes])]
    return df


def load_vital_table(cfg: AppConfig) -> VitalTable:
    """
    Canonical mortality table from SQLite, restricted to the configured
    groups and to the fitting age window (model.age_min / model.age_max).
    """
    db_path = db_path_from_config(cfg)
    if not table_exists(db_path, MORTALITY_TABLE):
        raise FileNotFoundError(f"Missing table {MORTALITY_TABLE} in {db_path}. Run `mortcast etl` first.")

    df = read_table(db_path, MORTALITY_TABLE)

    # Normalize schema after the SQLite round trip
    df["Region_Code"] = df["Region_Code"].astype("string").str.strip()
    df["Sex"] = df["Sex"].astype("string").str.strip()
    df["Age"] = pd.to_numeric(df["Age"], errors="coerce").astype(int)
    df["Year"] = pd.to_numeric(df["Year"], errors="coerce").astype(int)
    for c in ("Deaths", "Population", "Mortality"):
        df[c] = pd.to_numeric(df[c], errors="coerce").astype(float)

    df = _filter_groups(df, cfg.groups)

    age_min = get_option(cfg.model, "age_min")
    age_max = get_option(cfg.model, "age_max")
    if age_min is not None:
        df = df[df["Age"] >= safe_int(age_min, 0)]
    if age_max is not None:
        df = df[df["Age"] <= safe_int(age_max, 120)]

    if df.empty:
        raise DataError(
            "No mortality rows left after group/age filtering; check config groups and model ages.",
            context={"groups": cfg.groups, "age_min": age_min, "age_max": age_max},
        )

    return VitalTable.from_canonical(df.reset_index(drop=True))


def run_fit(cfg: AppConfig) -> None:
    """
    Fit one Lee-Carter model per (Region_Code, Sex) group and persist:
      - one joblib payload per group + a registry CSV
      - age/time components and a fit summary
    """
    adjust = str(get_option(cfg.model, "adjust", "dt"))
    workers = safe_int(get_option(cfg.model, "workers", 1), 1)

    models_dir = resolve_path(cfg.project_root, get_option(cfg.paths, "models_dir", "artifacts/models")) / MODEL_NAME
    metrics_dir = resolve_path(cfg.project_root, get_option(cfg.paths, "metrics_dir", "artifacts/metrics"))
    root = resolve_path(cfg.project_root, ".")
    models_dir.mkdir(parents=True, exist_ok=True)
    metrics_dir.mkdir(parents=True, exist_ok=True)

    table = load_vital_table(cfg)
    fits = fit_groups(table, adjust=adjust, workers=workers)

    registry_rows: list[dict[str, Any]] = []
    for fit in fits.values():
        rc, sex = str(fit.key["Region_Code"]), str(fit.key["Sex"])
        model_path = models_dir / f"{MODEL_NAME}_{_slug(rc)}_{_slug(sex)}.joblib"
        write_model_artifact(
            {
                "model_name": MODEL_NAME,
                "region_code": rc,
                "sex": sex,
                "adjust": adjust,
                "train_year_min": int(fit.years.min()),
                "train_year_max": int(fit.years.max()),
                "model": fit,
            },
            model_path,
        )
        registry_rows.append(
            {
                "Region_Code": rc,
                "Sex": sex,
                "Model": MODEL_NAME,
                "Model_Path": model_path.relative_to(root).as_posix()
                if model_path.is_relative_to(root)
                else model_path.as_posix(),
            }
        )
        logger.info(
            "Fitted %s/%s: %d ages x %d years, variance explained %.3f",
            rc, sex, fit.ages.size, fit.years.size, fit.variance_explained,
        )

    registry = pd.DataFrame(registry_rows).sort_values(["Region_Code", "Sex"]).reset_index(drop=True)
    registry_path = write_csv(registry, metrics_dir / REGISTRY_FILE)
    write_csv(age_components(fits), metrics_dir / "age_components.csv")
    write_csv(time_components(fits), metrics_dir / "time_components.csv")
    summary_path = write_csv(fit_summary_table(fits), metrics_dir / "fit_summary.csv")

    logger.info("Fitting complete.")
    logger.info("Saved fit registry: %s", registry_path)
    logger.info("Saved fit summary: %s", summary_path)
    logger.info("Saved models to: %s", models_dir)
