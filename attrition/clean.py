"""
Data-quality scan — outliers, missing values, categorical cardinality.

Strategy:
  Outliers:   two independent per-column detectors on unscaled numerics
                IQR     — x < Q1 − 4·IQR or x > Q3 + 4·IQR
                Z-score — |x − mean| / std > 4
              The 4× fences are deliberately permissive; only gross errors
              should show up.
  Missing:    report NaN counts per column
  Cardinality: report level counts for categorical columns

Every check is advisory: nothing here modifies or drops a row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from attrition.config import TARGET

logger = logging.getLogger(__name__)

IQR_MULTIPLIER = 4.0
Z_THRESHOLD = 4.0


@dataclass(frozen=True)
class OutlierReport:
    """Per-column outlier counts and flagged row labels for both detectors."""

    iqr_counts: dict[str, int] = field(default_factory=dict)
    zscore_counts: dict[str, int] = field(default_factory=dict)
    iqr_rows: tuple = ()
    zscore_rows: tuple = ()

    def to_frame(self) -> pd.DataFrame:
        cols = list(self.iqr_counts)
        return pd.DataFrame(
            {
                "column": cols,
                "iqr_outliers": [self.iqr_counts[c] for c in cols],
                "zscore_outliers": [self.zscore_counts.get(c, 0) for c in cols],
            }
        )


def iqr_outlier_mask(series: pd.Series, multiplier: float = IQR_MULTIPLIER) -> pd.Series:
    q1 = series.quantile(0.25)
    q3 = series.quantile(0.75)
    iqr = q3 - q1
    return (series < q1 - multiplier * iqr) | (series > q3 + multiplier * iqr)


def zscore_outlier_mask(series: pd.Series, threshold: float = Z_THRESHOLD) -> pd.Series:
    std = series.std()
    if not np.isfinite(std) or std == 0:
        return pd.Series(False, index=series.index)
    z = (series - series.mean()) / std
    return z.abs() > threshold


def _numeric_columns(df: pd.DataFrame, target: str) -> list[str]:
    return [
        c
        for c in df.columns
        if c != target
        and pd.api.types.is_numeric_dtype(df[c])
        and not pd.api.types.is_bool_dtype(df[c])
    ]


def scan_outliers(
    df: pd.DataFrame,
    columns: list[str] | None = None,
    iqr_multiplier: float = IQR_MULTIPLIER,
    z_threshold: float = Z_THRESHOLD,
    target: str = TARGET,
) -> OutlierReport:
    """Run both detectors over numeric columns; report counts and flagged rows."""
    if columns is None:
        columns = _numeric_columns(df, target)

    iqr_flags = pd.DataFrame(False, index=df.index, columns=columns)
    z_flags = pd.DataFrame(False, index=df.index, columns=columns)
    for col in columns:
        series = df[col].astype(float)
        iqr_flags[col] = iqr_outlier_mask(series, iqr_multiplier)
        z_flags[col] = zscore_outlier_mask(series, z_threshold)

    report = OutlierReport(
        iqr_counts={c: int(iqr_flags[c].sum()) for c in columns},
        zscore_counts={c: int(z_flags[c].sum()) for c in columns},
        iqr_rows=tuple(sorted(df.index[iqr_flags.any(axis=1)])),
        zscore_rows=tuple(sorted(df.index[z_flags.any(axis=1)])),
    )

    for name, counts, rows in [
        ("IQR", report.iqr_counts, report.iqr_rows),
        ("Z-score", report.zscore_counts, report.zscore_rows),
    ]:
        flagged = {c: n for c, n in counts.items() if n > 0}
        if flagged:
            logger.info(
                "%s detector: %d rows flagged across %d columns (advisory, nothing dropped)",
                name,
                len(rows),
                len(flagged),
            )
            for col, n in flagged.items():
                logger.info("  %s: %d outliers (%.1f%%)", col, n, n / len(df) * 100)
        else:
            logger.info("%s detector: no outliers in %d numeric columns", name, len(columns))

    return report


def check_cardinality(df: pd.DataFrame) -> pd.DataFrame:
    """Log level counts of categorical features and flag rare levels."""
    cat_cols = df.select_dtypes(include="object").columns
    if len(cat_cols) == 0:
        return df

    logger.info("Cardinality check for %d categorical features:", len(cat_cols))
    for col in cat_cols:
        value_counts = df[col].value_counts()
        min_count = value_counts.min()
        flag = ""
        if min_count < 20:
            flag = f" ⚠️ rare level: '{value_counts.idxmin()}' ({min_count} rows)"
        logger.info("  %s: %d levels, min=%d%s", col, df[col].nunique(), min_count, flag)

    return df


def check_missing_values(df: pd.DataFrame) -> pd.DataFrame:
    """Log missing value counts across all columns."""
    null_counts = df.isnull().sum()
    cols_with_nulls = null_counts[null_counts > 0]

    if len(cols_with_nulls) > 0:
        logger.info("Missing values (NaN) found in %d columns:", len(cols_with_nulls))
        for col, count in cols_with_nulls.items():
            logger.info("  %s: %d (%.1f%%)", col, count, count / len(df) * 100)
    else:
        logger.info("No missing values found (%d rows)", len(df))

    return df


def scan_data(df: pd.DataFrame) -> OutlierReport:
    """
    Full advisory scan:
      1. Missing values (report)
      2. Categorical cardinality (report)
      3. IQR and z-score outliers (report)
    """
    logger.info("Starting data-quality scan...")
    check_missing_values(df)
    check_cardinality(df)
    return scan_outliers(df)
