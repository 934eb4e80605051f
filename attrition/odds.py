"""Odds ratios from an auxiliary logistic regression on a fixed feature subset."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import statsmodels.api as sm

from attrition.config import TARGET
from attrition.errors import SchemaError

logger = logging.getLogger(__name__)

# Encoded column names (after AttritionPreprocessor)
ODDS_RATIO_FEATURES = ["Age", "MonthlyIncome", "OverTime_Yes", "JobSatisfaction"]


def odds_ratios(
    train: pd.DataFrame,
    features: list[str] = ODDS_RATIO_FEATURES,
    target: str = TARGET,
) -> pd.DataFrame:
    """
    Fit Logit(target ~ 1 + features) and report one odds ratio per feature.

    The result is a single global table, one row per feature, with 95%
    confidence bounds on the odds-ratio scale.
    """
    features = list(features)
    missing = [c for c in features + [target] if c not in train.columns]
    if missing:
        raise SchemaError(f"Odds-ratio columns not found: {missing}")

    X = sm.add_constant(train[features].astype(float), has_constant="add")
    y = train[target].astype(int)
    result = sm.Logit(y, X).fit(disp=0)
    conf = result.conf_int()

    report = pd.DataFrame(
        {
            "feature": features,
            "coefficient": result.params[features].to_numpy(),
            "odds_ratio": np.exp(result.params[features].to_numpy()),
            "ci_lower": np.exp(conf.loc[features, 0].to_numpy()),
            "ci_upper": np.exp(conf.loc[features, 1].to_numpy()),
            "p_value": result.pvalues[features].to_numpy(),
        }
    )

    for _, row in report.iterrows():
        logger.info(
            "  %s: OR=%.3f [%.3f, %.3f] p=%.4f",
            row["feature"],
            row["odds_ratio"],
            row["ci_lower"],
            row["ci_upper"],
            row["p_value"],
        )
    return report
