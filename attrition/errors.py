"""Error taxonomy for the attrition pipeline."""

from __future__ import annotations


class AttritionError(Exception):
    """Base class for every pipeline error."""


class SchemaError(AttritionError, ValueError):
    """A column is missing, malformed, or carries an undeclared level."""


class DataLeakageError(AttritionError):
    """Preprocessing statistics would come from outside the training partition."""


class DegenerateMetricError(AttritionError, ArithmeticError):
    """A metric is undefined for the given predictions (e.g. F1 with P + R = 0)."""


class CollinearityError(AttritionError):
    """Predictors are perfectly linearly dependent (infinite VIF)."""

    def __init__(self, columns):
        self.columns = list(columns)
        super().__init__(
            f"Perfect collinearity in {len(self.columns)} predictors: {self.columns}"
        )
