"""Unit tests for attrition/features.py"""
import numpy as np
import pandas as pd
import pytest

from attrition.errors import DataLeakageError, SchemaError
from attrition.features import (
    CATEGORICAL_LEVELS,
    NUMERIC_FEATURES,
    AttritionPreprocessor,
    join_xy,
    split_xy,
)


def test_train_numerics_standardized(prepared):
    train_p = prepared["train_p"]
    for col in NUMERIC_FEATURES:
        assert train_p[col].mean() == pytest.approx(0.0, abs=1e-9)
        assert train_p[col].std(ddof=0) == pytest.approx(1.0, rel=1e-6)


def test_test_partition_uses_train_statistics(prepared):
    pre, test = prepared["pre"], prepared["test"]
    expected = (test["Age"] - pre.means_["Age"]) / pre.scales_["Age"]
    np.testing.assert_allclose(prepared["test_p"]["Age"], expected)
    # Statistics learned on train are not those of the test partition
    assert pre.means_["Age"] == pytest.approx(prepared["train"]["Age"].mean())


def test_one_hot_columns_and_label_last(prepared):
    train_p = prepared["train_p"]
    assert train_p.columns[-1] == "Attrition"
    for col, levels in CATEGORICAL_LEVELS.items():
        indicators = [f"{col}_{level}" for level in levels]
        assert all(c in train_p.columns for c in indicators)
        assert col not in train_p.columns
        # Exactly one indicator set per row
        assert (train_p[indicators].sum(axis=1) == 1).all()


def test_drop_first_gives_k_minus_1(prepared):
    pre = AttritionPreprocessor(drop_first=True)
    out = pre.fit_transform(prepared["train"])
    assert "OverTime_No" not in out.columns
    assert "OverTime_Yes" in out.columns
    n_indicators = sum(len(v) - 1 for v in CATEGORICAL_LEVELS.values())
    assert out.shape[1] == len(NUMERIC_FEATURES) + n_indicators + 1


def test_column_order_deterministic(prepared):
    a = AttritionPreprocessor().fit_transform(prepared["train"])
    b = AttritionPreprocessor().fit_transform(prepared["train"].sample(frac=1, random_state=0))
    assert list(a.columns) == list(b.columns)


def test_transform_before_fit_is_leakage(prepared):
    with pytest.raises(DataLeakageError):
        AttritionPreprocessor().transform(prepared["test"])


def test_refit_is_leakage(prepared):
    pre = prepared["pre"]
    with pytest.raises(DataLeakageError):
        pre.fit(prepared["test"])


def test_non_numeric_value_in_numeric_column(prepared):
    bad = prepared["train"].copy()
    bad["Age"] = bad["Age"].astype(object)
    bad.loc[bad.index[0], "Age"] = "forty"
    with pytest.raises(SchemaError, match="Age"):
        AttritionPreprocessor().fit(bad)


def test_undeclared_level(prepared):
    bad = prepared["test"].copy()
    bad.loc[bad.index[0], "Department"] = "Legal"
    with pytest.raises(SchemaError, match="Legal"):
        prepared["pre"].transform(bad)


def test_name_collision_detected():
    df = pd.DataFrame({"a_b": [1.0, 2.0], "a": ["b", "c"], "Attrition": [0, 1]})
    pre = AttritionPreprocessor(numeric=["a_b"], categorical_levels={"a": ["b", "c"]})
    with pytest.raises(SchemaError, match="collide"):
        pre.fit(df)


def test_small_custom_schema():
    df = pd.DataFrame(
        {"x": [1.0, 2.0, 3.0, 4.0], "c": ["u", "v", "u", "v"], "Attrition": [0, 1, 0, 1]}
    )
    pre = AttritionPreprocessor(numeric=["x"], categorical_levels={"c": ["u", "v"]})
    out = pre.fit_transform(df)
    assert list(out.columns) == ["x", "c_u", "c_v", "Attrition"]
    assert list(out["c_v"]) == [0.0, 1.0, 0.0, 1.0]


def test_split_and_join_roundtrip_label_position(prepared):
    X, y = split_xy(prepared["train_p"])
    assert "Attrition" not in X.columns
    joined = join_xy(X, y)
    assert joined.columns[-1] == "Attrition"
    assert list(joined.index) == list(prepared["train_p"].index)
