"""
Minority-class upsampling of the training partition.

Rows of the minority class are duplicated (random, with replacement, seeded)
until both classes are equally frequent. The test partition is never
resampled: it is handed back as the very same object.
"""

from __future__ import annotations

import logging

import pandas as pd
from imblearn.over_sampling import RandomOverSampler

from attrition.config import SEED, TARGET
from attrition.features import join_xy, split_xy

logger = logging.getLogger(__name__)


def upsample(train: pd.DataFrame, seed: int = SEED, target: str = TARGET) -> pd.DataFrame:
    """Return a new training frame with class counts equalized by duplication."""
    X, y = split_xy(train, target)
    sampler = RandomOverSampler(sampling_strategy="auto", random_state=seed)
    X_res, y_res = sampler.fit_resample(X, y)

    out = join_xy(pd.DataFrame(X_res, columns=X.columns), pd.Series(y_res), target)
    logger.info(
        "Upsampled train: %d → %d rows | class counts %s → %s",
        len(train),
        len(out),
        y.value_counts().sort_index().to_dict(),
        out[target].value_counts().sort_index().to_dict(),
    )
    return out


def upsample_split(
    train: pd.DataFrame, test: pd.DataFrame, seed: int = SEED, target: str = TARGET
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Upsample train only; test is returned untouched."""
    return upsample(train, seed=seed, target=target), test
