"""
Multicollinearity checks on the logistic-regression design matrix.

VIF_i = 1 / (1 − R²_i), with R²_i from regressing predictor i on every other
predictor plus an intercept. Full one-hot groups sum to the intercept, so
without removal some indicators carry an infinite VIF.

  perfect — VIF infinite, undefined, or ≥ PERFECT_VIF (exact dependency)
  high    — VIF > HIGH_VIF
  ok      — otherwise

Perfect dependencies are surfaced (CollinearityError), never averaged away;
removal of columns is always an explicit caller choice.
"""

from __future__ import annotations

import logging
import warnings

import numpy as np
import pandas as pd
from statsmodels.stats.outliers_influence import variance_inflation_factor
from statsmodels.tools.tools import add_constant

from attrition.errors import CollinearityError, SchemaError

logger = logging.getLogger(__name__)

HIGH_VIF = 10.0
PERFECT_VIF = 1e6


def _flag(vif: float) -> str:
    if not np.isfinite(vif) or vif >= PERFECT_VIF:
        return "perfect"
    if vif > HIGH_VIF:
        return "high"
    return "ok"


def compute_vif(X: pd.DataFrame) -> pd.DataFrame:
    """VIF per predictor, sorted descending, with a perfect/high/ok flag."""
    exog = add_constant(X.astype(float), has_constant="add")
    values = exog.to_numpy()

    rows = []
    with warnings.catch_warnings(), np.errstate(divide="ignore", invalid="ignore"):
        warnings.simplefilter("ignore", RuntimeWarning)
        for i, col in enumerate(exog.columns):
            if col == "const":
                continue
            vif = float(variance_inflation_factor(values, i))
            # R² rounding just above 1 yields a negative VIF
            if vif < 0:
                vif = np.inf
            rows.append({"feature": col, "vif": vif})

    vif_df = pd.DataFrame(rows, columns=["feature", "vif"])
    vif_df["flag"] = vif_df["vif"].map(_flag)
    vif_df = vif_df.sort_values("vif", ascending=False, na_position="first")
    vif_df = vif_df.reset_index(drop=True)

    n_perfect = int((vif_df["flag"] == "perfect").sum())
    n_high = int((vif_df["flag"] == "high").sum())
    logger.info(
        "VIF over %d predictors: %d perfect, %d high (> %.0f)",
        len(vif_df),
        n_perfect,
        n_high,
        HIGH_VIF,
    )
    for _, row in vif_df[vif_df["flag"] != "ok"].iterrows():
        logger.info("  %s: VIF=%s (%s)", row["feature"], f"{row['vif']:.2f}", row["flag"])
    return vif_df


def find_aliased_columns(X: pd.DataFrame) -> list[str]:
    """
    Columns that are exact linear combinations of the intercept and the
    columns kept before them, scanning left to right.

    These are the coefficients an unpenalized GLM would report as aliased;
    dropping them restores a full-rank design.
    """
    kept = [np.ones(len(X))]
    aliased = []
    for col in X.columns:
        candidate = np.column_stack(kept + [X[col].to_numpy(dtype=float)])
        if np.linalg.matrix_rank(candidate) < candidate.shape[1]:
            aliased.append(col)
        else:
            kept.append(candidate[:, -1])
    if aliased:
        logger.info("Aliased (linearly dependent) columns: %s", aliased)
    return aliased


def assert_no_perfect_collinearity(vif_df: pd.DataFrame) -> None:
    perfect = vif_df.loc[vif_df["flag"] == "perfect", "feature"].tolist()
    if perfect:
        raise CollinearityError(perfect)


def drop_features(columns: list[str], *frames: pd.DataFrame) -> tuple[pd.DataFrame, ...]:
    """Remove the same caller-chosen columns from every frame (train and test together)."""
    columns = list(columns)
    for frame in frames:
        unknown = [c for c in columns if c not in frame.columns]
        if unknown:
            raise SchemaError(f"Cannot drop unknown columns: {unknown}")
    if columns:
        logger.info("Dropping %d columns before refit: %s", len(columns), columns)
    return tuple(frame.drop(columns=columns) for frame in frames)
