"""
Feature encoding — schema, standardization, one-hot encoding.

Design decisions:
  - numerics → StandardScaler (mean 0, unit variance), parameters learned on
    the training partition only and reused for the test partition
  - categoricals → one-hot against level lists declared up front; an
    undeclared level is a SchemaError, never a silently ignored column
  - k indicators per categorical by default (drop_first=False); the
    collinearity step decides which redundant indicators to remove
  - label column re-attached last
"""

from __future__ import annotations

import logging

import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from attrition.config import TARGET
from attrition.errors import DataLeakageError, SchemaError

logger = logging.getLogger(__name__)

NUMERIC_FEATURES = [
    "Age",
    "DailyRate",
    "DistanceFromHome",
    "Education",
    "EnvironmentSatisfaction",
    "HourlyRate",
    "JobInvolvement",
    "JobLevel",
    "JobSatisfaction",
    "MonthlyIncome",
    "MonthlyRate",
    "NumCompaniesWorked",
    "PercentSalaryHike",
    "PerformanceRating",
    "RelationshipSatisfaction",
    "StockOptionLevel",
    "TotalWorkingYears",
    "TrainingTimesLastYear",
    "WorkLifeBalance",
    "YearsAtCompany",
    "YearsInCurrentRole",
    "YearsSinceLastPromotion",
    "YearsWithCurrManager",
]

CATEGORICAL_LEVELS = {
    "BusinessTravel": ["Non-Travel", "Travel_Frequently", "Travel_Rarely"],
    "Department": ["Human Resources", "Research & Development", "Sales"],
    "EducationField": [
        "Human Resources",
        "Life Sciences",
        "Marketing",
        "Medical",
        "Other",
        "Technical Degree",
    ],
    "Gender": ["Female", "Male"],
    "JobRole": [
        "Healthcare Representative",
        "Human Resources",
        "Laboratory Technician",
        "Manager",
        "Manufacturing Director",
        "Research Director",
        "Research Scientist",
        "Sales Executive",
        "Sales Representative",
    ],
    "MaritalStatus": ["Divorced", "Married", "Single"],
    "OverTime": ["No", "Yes"],
}

FEATURE_COLUMNS = NUMERIC_FEATURES + list(CATEGORICAL_LEVELS)


def validate_schema(
    df: pd.DataFrame,
    numeric: list[str] = NUMERIC_FEATURES,
    categorical_levels: dict[str, list[str]] = CATEGORICAL_LEVELS,
) -> None:
    """Raise SchemaError unless every declared column exists and is well-formed."""
    missing = [c for c in list(numeric) + list(categorical_levels) if c not in df.columns]
    if missing:
        raise SchemaError(f"Missing columns: {missing}")

    for col in numeric:
        if not pd.api.types.is_numeric_dtype(df[col]) or pd.api.types.is_bool_dtype(
            df[col]
        ):
            raise SchemaError(f"Column '{col}' is declared numeric but has dtype {df[col].dtype}")
        if df[col].isnull().any():
            raise SchemaError(f"Column '{col}' has {df[col].isnull().sum()} missing values")

    for col, levels in categorical_levels.items():
        unknown = sorted(set(df[col].dropna().astype(str)) - set(levels))
        if unknown:
            raise SchemaError(f"Column '{col}' has undeclared levels: {unknown}")
        if df[col].isnull().any():
            raise SchemaError(f"Column '{col}' has {df[col].isnull().sum()} missing values")


class AttritionPreprocessor:
    """
    Standardize numerics and one-hot encode categoricals.

    Statistics are learned once, from the training partition, by ``fit``.
    ``transform`` only ever applies them, so the test partition cannot leak
    into the scaling parameters.
    """

    def __init__(
        self,
        numeric: list[str] | None = None,
        categorical_levels: dict[str, list[str]] | None = None,
        drop_first: bool = False,
        target: str = TARGET,
    ):
        self.numeric = list(NUMERIC_FEATURES if numeric is None else numeric)
        self.categorical_levels = dict(
            CATEGORICAL_LEVELS if categorical_levels is None else categorical_levels
        )
        self.drop_first = drop_first
        self.target = target
        self._transformer = None

    @property
    def is_fitted(self) -> bool:
        return self._transformer is not None

    def _indicator_names(self) -> list[str]:
        names = []
        for col, levels in self.categorical_levels.items():
            kept = levels[1:] if self.drop_first else levels
            names.extend(f"{col}_{level}" for level in kept)
        return names

    def _check_collisions(self) -> None:
        names = self.numeric + self._indicator_names() + [self.target]
        seen, dupes = set(), []
        for n in names:
            if n in seen:
                dupes.append(n)
            seen.add(n)
        if dupes:
            raise SchemaError(f"Encoded column names collide: {dupes}")

    def fit(self, train: pd.DataFrame) -> "AttritionPreprocessor":
        if self.is_fitted:
            raise DataLeakageError(
                "Preprocessor is already fitted; refitting would replace the "
                "training-partition statistics"
            )
        validate_schema(train, self.numeric, self.categorical_levels)
        self._check_collisions()

        cat_cols = list(self.categorical_levels)
        transformer = ColumnTransformer(
            transformers=[
                ("num", StandardScaler(), self.numeric),
                (
                    "cat",
                    OneHotEncoder(
                        categories=[self.categorical_levels[c] for c in cat_cols],
                        drop="first" if self.drop_first else None,
                        handle_unknown="error",
                        sparse_output=False,
                    ),
                    cat_cols,
                ),
            ],
            remainder="drop",
            verbose_feature_names_out=False,
        )
        transformer.set_output(transform="pandas")
        X = train[self.numeric + cat_cols].copy()
        X[cat_cols] = X[cat_cols].astype(str)
        transformer.fit(X)
        self._transformer = transformer

        logger.info(
            "Preprocessor fitted on %d training rows: %d numeric, %d categorical → %d features",
            len(train),
            len(self.numeric),
            len(cat_cols),
            len(self.feature_names_out),
        )
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        if not self.is_fitted:
            raise DataLeakageError(
                "Preprocessor must be fitted on the training partition before transform"
            )
        validate_schema(df, self.numeric, self.categorical_levels)

        cat_cols = list(self.categorical_levels)
        X = df[self.numeric + cat_cols].copy()
        X[cat_cols] = X[cat_cols].astype(str)
        out = self._transformer.transform(X)
        out.index = df.index
        out = out[self.feature_names_out].astype(float)

        if self.target in df.columns:
            out[self.target] = df[self.target].to_numpy()
        return out

    def fit_transform(self, train: pd.DataFrame) -> pd.DataFrame:
        return self.fit(train).transform(train)

    @property
    def feature_names_out(self) -> list[str]:
        return self.numeric + self._indicator_names()

    @property
    def means_(self) -> pd.Series:
        scaler = self._transformer.named_transformers_["num"]
        return pd.Series(scaler.mean_, index=self.numeric)

    @property
    def scales_(self) -> pd.Series:
        scaler = self._transformer.named_transformers_["num"]
        return pd.Series(scaler.scale_, index=self.numeric)


def split_xy(df: pd.DataFrame, target: str = TARGET) -> tuple[pd.DataFrame, pd.Series]:
    """Separate predictors from the label."""
    if target not in df.columns:
        raise SchemaError(f"Label column '{target}' not found")
    return df.drop(columns=[target]), df[target]


def join_xy(X: pd.DataFrame, y: pd.Series, target: str = TARGET) -> pd.DataFrame:
    """Re-attach the label as the last column."""
    out = X.copy()
    out[target] = y.to_numpy()
    return out
