"""
Load and validate the IBM HR employee attrition table.

Checks on load:
  - every schema column and the label column is present
  - the label only takes the values Yes / No (mapped to 1 / 0)
  - configured non-informative columns are dropped, then any remaining
    single-valued column outside the schema is dropped as well; constant
    schema features are kept (the scaler maps them to zero) and logged
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from attrition.config import DATA_FILE, DROP_COLUMNS, LABEL_MAP, TARGET
from attrition.errors import SchemaError
from attrition.features import FEATURE_COLUMNS

logger = logging.getLogger(__name__)


def drop_constant_columns(
    df: pd.DataFrame, target: str = TARGET, keep: list[str] | None = None
) -> pd.DataFrame:
    """Drop columns holding a single distinct value (never the label or a kept column)."""
    keep = set(keep or [])
    constant = [c for c in df.columns if c != target and df[c].nunique(dropna=False) <= 1]
    kept = [c for c in constant if c in keep]
    if kept:
        logger.warning("Constant schema columns kept: %s", kept)
    constant = [c for c in constant if c not in keep]
    if constant:
        logger.info("Dropped %d constant columns: %s", len(constant), constant)
        df = df.drop(columns=constant)
    return df


def load_raw_data(
    filepath: Path | None = None,
    drop_columns: list[str] = DROP_COLUMNS,
    required_columns: list[str] = FEATURE_COLUMNS,
    target: str = TARGET,
) -> pd.DataFrame:
    """Load the CSV, validate its schema, encode the label, drop non-informative columns."""
    if filepath is None:
        filepath = DATA_FILE
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(
            f"'{filepath}' not found. Place the IBM HR attrition CSV at this path "
            f"or pass --data"
        )

    df = pd.read_csv(filepath)

    missing = [c for c in list(required_columns) + [target] if c not in df.columns]
    if missing:
        raise SchemaError(f"Missing columns in {filepath.name}: {missing}")

    unexpected = sorted(set(df[target].dropna().astype(str)) - set(LABEL_MAP))
    if unexpected or df[target].isnull().any():
        raise SchemaError(
            f"Label '{target}' must be one of {sorted(LABEL_MAP)}; found {unexpected or 'NaN'}"
        )
    df[target] = df[target].map(LABEL_MAP).astype(int)

    present = [c for c in drop_columns if c in df.columns]
    df = df.drop(columns=present)
    logger.info("Dropped non-informative columns: %s", present)
    df = drop_constant_columns(df, target=target, keep=list(required_columns))

    logger.info(
        "Loaded %d records, %d columns | Positive rate: %.1f%%",
        len(df),
        len(df.columns),
        df[target].mean() * 100,
    )
    return df


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    df = load_raw_data()
    print(f"✅ {df.shape[0]} records, {df.shape[1]} columns")
    print(f"Target: {df[TARGET].value_counts().to_dict()}")
