"""tests/unit/test_io.py"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from mortcast.errors import DataError
from mortcast.io.db import ensure_index, read_query, read_table, table_exists, write_table
from mortcast.io.readers import read_fit_registry, read_model_artifact
from mortcast.io.writers import write_csv, write_model_artifact
from mortcast.modeling.lee_carter import fit_lee_carter
from mortcast.tables.series import MortalitySeries


def test_sqlite_roundtrip(tmp_path: Path, canonical_frame: pd.DataFrame) -> None:
    db = tmp_path / "nested" / "mortality.db"
    write_table(db, "mortality_rates", canonical_frame)
    ensure_index(db, "mortality_rates", ["Region_Code", "Sex", "Age", "Year"], unique=True)

    assert table_exists(db, "mortality_rates")
    assert not table_exists(db, "other")
    back = read_table(db, "mortality_rates")
    assert len(back) == len(canonical_frame)

    n = read_query(db, "SELECT COUNT(*) AS n FROM mortality_rates WHERE Sex = ?", params=("Male",))
    assert int(n["n"].iloc[0]) == len(canonical_frame) // 2


def test_unique_index_rejects_duplicates(tmp_path: Path, canonical_frame: pd.DataFrame) -> None:
    db = tmp_path / "m.db"
    dup = pd.concat([canonical_frame, canonical_frame.iloc[[0]]], ignore_index=True)
    write_table(db, "mortality_rates", dup)
    with pytest.raises(Exception):
        ensure_index(db, "mortality_rates", ["Region_Code", "Sex", "Age", "Year"], unique=True)


def test_sql_identifiers_are_checked(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        read_table(tmp_path / "m.db", "rates; DROP TABLE x")


def test_model_artifact_roundtrip(tmp_path: Path, closed_form_series: MortalitySeries) -> None:
    fit = fit_lee_carter(closed_form_series)
    path = write_model_artifact({"model": fit, "model_name": "lee_carter"}, tmp_path / "m" / "fit.joblib")

    payload = read_model_artifact(path)
    assert payload["model_name"] == "lee_carter"
    assert payload["model"].drift == pytest.approx(fit.drift)

    with pytest.raises(ValueError):
        write_model_artifact({"name": "x"}, tmp_path / "bad.joblib")
    with pytest.raises(FileNotFoundError):
        read_model_artifact(tmp_path / "missing.joblib")


def test_fit_registry_schema(tmp_path: Path) -> None:
    good = write_csv(
        pd.DataFrame({"Region_Code": [" 01"], "Sex": ["Female "], "Model_Path": ["m.joblib"]}),
        tmp_path / "fitted_models.csv",
    )
    reg = read_fit_registry(good)
    assert reg["Region_Code"].tolist() == ["01"]
    assert reg["Sex"].tolist() == ["Female"]

    bad = write_csv(pd.DataFrame({"Region_Code": ["01"], "Sex": ["Male"]}), tmp_path / "bad.csv")
    with pytest.raises(DataError):
        read_fit_registry(bad)
