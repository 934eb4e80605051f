"""Unit tests for attrition/odds.py"""
import numpy as np
import pytest

from attrition.errors import SchemaError
from attrition.odds import ODDS_RATIO_FEATURES, odds_ratios


def test_one_global_row_per_feature(prepared):
    report = odds_ratios(prepared["train_p"])
    assert list(report["feature"]) == ODDS_RATIO_FEATURES
    assert len(report) == len(ODDS_RATIO_FEATURES)


def test_odds_ratio_is_exp_coefficient(prepared):
    report = odds_ratios(prepared["train_p"])
    np.testing.assert_allclose(report["odds_ratio"], np.exp(report["coefficient"]))
    assert (report["ci_lower"] <= report["odds_ratio"]).all()
    assert (report["odds_ratio"] <= report["ci_upper"]).all()


def test_overtime_raises_odds(prepared):
    # Synthetic attrition is generated with a strong overtime effect
    report = odds_ratios(prepared["train_p"]).set_index("feature")
    assert report.loc["OverTime_Yes", "odds_ratio"] > 1.0


def test_unknown_feature(prepared):
    with pytest.raises(SchemaError):
        odds_ratios(prepared["train_p"], features=["Age", "Shoe size"])
