"""Stratified train/test splitting preserving class ratio."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from attrition.config import SEED, TARGET, TRAIN_SIZE
from attrition.errors import SchemaError

logger = logging.getLogger(__name__)


def stratum_train_count(n: int, train_size: float) -> int:
    """
    Rows of an n-row stratum that go to train.

    Rounded half-up, then clamped to [1, n − 1] so that every class with at
    least two rows is represented in both partitions.
    """
    if n < 2:
        return n
    k = int(np.floor(train_size * n + 0.5))
    return min(max(k, 1), n - 1)


def stratified_split(
    df: pd.DataFrame,
    train_size: float = TRAIN_SIZE,
    seed: int = SEED,
    target: str = TARGET,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Sample train_size of each label stratum for train; the remainder is test."""
    if target not in df.columns:
        raise SchemaError(f"Label column '{target}' not found")
    if not df.index.is_unique:
        raise SchemaError("Row index must be unique to split by row label")
    if not 0.0 < train_size < 1.0:
        raise ValueError(f"train_size must be in (0, 1), got {train_size}")

    rng = np.random.default_rng(seed)
    train_labels = []
    for label in sorted(df[target].unique()):
        stratum = df.index[df[target] == label]
        k = stratum_train_count(len(stratum), train_size)
        picked = rng.choice(len(stratum), size=k, replace=False)
        train_labels.extend(stratum[picked])

    in_train = df.index.isin(train_labels)
    df_train, df_test = df[in_train], df[~in_train]

    for name, split in [("Train", df_train), ("Test", df_test)]:
        logger.info(
            "%s: %d records, class counts: %s",
            name,
            len(split),
            split[target].value_counts().sort_index().to_dict(),
        )

    return df_train, df_test
