"""Unit tests for attrition/split.py"""
import pandas as pd
import pytest

from attrition.errors import SchemaError
from attrition.split import stratified_split, stratum_train_count


def _ten_rows():
    return pd.DataFrame({"x": range(10), "Attrition": ["No"] * 8 + ["Yes"] * 2})


def test_partitions_are_disjoint_and_cover(loaded_data):
    train, test = stratified_split(loaded_data)
    assert set(train.index).isdisjoint(test.index)
    assert set(train.index) | set(test.index) == set(loaded_data.index)


def test_class_proportions_preserved(loaded_data):
    train, test = stratified_split(loaded_data)
    for label, stratum in loaded_data.groupby("Attrition"):
        n = len(stratum)
        share = (train["Attrition"] == label).sum() / n
        assert share == pytest.approx(0.8, abs=1 / n)


def test_small_minority_lands_in_both_partitions():
    train, test = stratified_split(_ten_rows())
    assert (train["Attrition"] == "Yes").sum() >= 1
    assert (test["Attrition"] == "Yes").sum() >= 1
    assert len(train) == 7
    assert len(test) == 3


def test_seeded_split_is_reproducible(loaded_data):
    a, _ = stratified_split(loaded_data, seed=7)
    b, _ = stratified_split(loaded_data, seed=7)
    c, _ = stratified_split(loaded_data, seed=8)
    assert list(a.index) == list(b.index)
    assert list(a.index) != list(c.index)


def test_split_does_not_modify_input():
    df = _ten_rows()
    before = df.copy()
    stratified_split(df)
    pd.testing.assert_frame_equal(df, before)


@pytest.mark.parametrize(
    "n, expected",
    [(1, 1), (2, 1), (10, 8), (8, 6), (237, 190), (1233, 986)],
)
def test_stratum_train_count(n, expected):
    assert stratum_train_count(n, 0.8) == expected


def test_missing_label_column():
    with pytest.raises(SchemaError):
        stratified_split(pd.DataFrame({"x": [1, 2]}))


def test_invalid_train_size():
    with pytest.raises(ValueError):
        stratified_split(_ten_rows(), train_size=1.0)


def test_duplicate_index_rejected():
    df = _ten_rows()
    df.index = [0] * 10
    with pytest.raises(SchemaError):
        stratified_split(df)
