"""Unit tests for attrition/ingest.py"""
import pandas as pd
import pytest

from attrition.config import DROP_COLUMNS
from attrition.errors import SchemaError
from attrition.features import AttritionPreprocessor
from attrition.ingest import drop_constant_columns, load_raw_data
from attrition.split import stratified_split


def test_non_informative_columns_dropped(loaded_data):
    for col in DROP_COLUMNS:
        assert col not in loaded_data.columns


def test_label_encoded(synthetic_data, loaded_data):
    assert set(loaded_data["Attrition"].unique()) <= {0, 1}
    assert loaded_data["Attrition"].sum() == (synthetic_data["Attrition"] == "Yes").sum()


def test_drop_list_is_configurable(raw_csv):
    df = load_raw_data(raw_csv, drop_columns=["EmployeeNumber"])
    # Constant columns still go, the identifier is dropped by configuration
    assert "EmployeeNumber" not in df.columns
    assert "EmployeeCount" not in df.columns


def test_absent_drop_column_is_not_an_error(raw_csv):
    df = load_raw_data(raw_csv, drop_columns=DROP_COLUMNS + ["NotAColumn"])
    assert len(df) == 200


def test_bad_label_values(tmp_path, synthetic_data):
    bad = synthetic_data.copy()
    bad.loc[0, "Attrition"] = "Maybe"
    path = tmp_path / "bad.csv"
    bad.to_csv(path, index=False)
    with pytest.raises(SchemaError):
        load_raw_data(path)


def test_missing_column(tmp_path, synthetic_data):
    path = tmp_path / "missing.csv"
    synthetic_data.drop(columns=["MonthlyIncome"]).to_csv(path, index=False)
    with pytest.raises(SchemaError, match="MonthlyIncome"):
        load_raw_data(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_raw_data(tmp_path / "nope.csv")


def test_drop_constant_columns_keeps_label():
    df = pd.DataFrame({"a": [1, 1, 1], "b": [1, 2, 3], "Attrition": [0, 0, 0]})
    result = drop_constant_columns(df)
    assert list(result.columns) == ["b", "Attrition"]


def test_drop_constant_columns_respects_keep():
    df = pd.DataFrame({"a": [1, 1, 1], "b": [5, 5, 5], "Attrition": [0, 1, 0]})
    result = drop_constant_columns(df, keep=["a"])
    assert list(result.columns) == ["a", "Attrition"]


def test_constant_schema_feature_survives_to_preprocessor(tmp_path, synthetic_data):
    data = synthetic_data.copy()
    data["PerformanceRating"] = 3
    path = tmp_path / "constant_feature.csv"
    data.to_csv(path, index=False)

    df = load_raw_data(path)
    assert "PerformanceRating" in df.columns

    train, _ = stratified_split(df, seed=42)
    encoded = AttritionPreprocessor().fit_transform(train)
    assert "PerformanceRating" in encoded.columns
    assert (encoded["PerformanceRating"] == 0.0).all()
