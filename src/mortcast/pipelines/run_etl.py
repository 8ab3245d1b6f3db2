"""src/mortcast/pipelines/run_etl.py"""

from __future__ import annotations

import logging
from pathlib import Path

from mortcast.common.config import AppConfig
from mortcast.common.utils import get_option, resolve_path, safe_int
from mortcast.errors import InvalidArgument
from mortcast.io.db import ensure_index, write_table
from mortcast.io.readers import read_mortality_raw
from mortcast.io.writers import write_csv
from mortcast.preprocessing.clean_mortality import clean_mortality, collapse_ages
from mortcast.validation.checks import validate_mortality_canonical

logger = logging.getLogger(__name__)

MORTALITY_TABLE = "mortality_rates"
DEFAULT_RAW_FILE = "mortality_raw.csv"


def db_path_from_config(cfg: AppConfig) -> Path:
    sqlite_path = get_option(cfg.database, "sqlite_path")
    if not sqlite_path:
        raise InvalidArgument("Missing database.sqlite_path in config", context={"section": "database"})
    return resolve_path(cfg.project_root, sqlite_path)


def run_etl(cfg: AppConfig) -> None:
    """
    Raw tidy export -> canonical mortality table:
      1) read + clean (derive Mortality = Deaths / Population, drop 'Total' sex rows)
      2) optionally fold old ages into an open group (data.max_age)
      3) restrict to [data.start_year, data.end_year]
      4) validate, then save processed CSV + SQLite table
    """
    raw_dir = resolve_path(cfg.project_root, get_option(cfg.paths, "raw_dir", "data/raw"))
    processed_dir = resolve_path(cfg.project_root, get_option(cfg.paths, "processed_dir", "data/processed"))
    db_path = db_path_from_config(cfg)

    raw_file = raw_dir / str(get_option(cfg.data, "raw_file", DEFAULT_RAW_FILE))
    drop_sexes = get_option(cfg.data, "drop_sexes", ["Total"])
    max_age = get_option(cfg.data, "max_age")
    start_year = get_option(cfg.data, "start_year")
    end_year = get_option(cfg.data, "end_year")

    raw = read_mortality_raw(raw_file)
    logger.info("Read %d raw rows from %s", len(raw), raw_file)

    mortality = clean_mortality(raw, drop_sexes=drop_sexes, region_code=get_option(cfg.data, "region_code"))
    if max_age is not None:
        mortality = collapse_ages(mortality, max_age=safe_int(max_age, 100))
    if start_year is not None:
        mortality = mortality[mortality["Year"] >= safe_int(start_year, 0)]
    if end_year is not None:
        mortality = mortality[mortality["Year"] <= safe_int(end_year, 9999)]
    mortality = mortality.reset_index(drop=True)

    validate_mortality_canonical(
        mortality,
        max_age=safe_int(max_age, 120) if max_age is not None else 120,
    ).raise_if_failed()

    processed_path = write_csv(mortality, processed_dir / "mortality_processed.csv")

    write_table(db_path, MORTALITY_TABLE, mortality, if_exists="replace", index=False)
    ensure_index(db_path, MORTALITY_TABLE, ["Region_Code", "Sex", "Age", "Year"], unique=True)

    n_groups = mortality[["Region_Code", "Sex"]].drop_duplicates().shape[0]
    logger.info("ETL complete: %d rows, %d group(s). SQLite written to: %s", len(mortality), n_groups, db_path)
    logger.info("Processed CSV written to: %s", processed_path)
