"""
Model training — six model families, exhaustive grid search, 5-fold CV.

Families: k-nearest neighbours, decision tree, logistic regression,
random forest, RBF support-vector machine, AdaBoost (boosting ensemble).

Selection: every grid point is scored by its mean metric over the same
stratified 5 folds; the best grid point wins and ties go to the first grid
point in grid order. The winner is then refit once on the full training
partition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

import pandas as pd
from sklearn.base import ClassifierMixin
from sklearn.ensemble import AdaBoostClassifier, RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import GridSearchCV, StratifiedKFold
from sklearn.neighbors import KNeighborsClassifier
from sklearn.svm import SVC
from sklearn.tree import DecisionTreeClassifier

from attrition.config import BOOSTING_ROUNDS, CV_FOLDS, SEED

logger = logging.getLogger(__name__)

SCORINGS = ("accuracy", "recall", "roc_auc", "f1")


class ModelFamily(Enum):
    KNN = "knn"
    DECISION_TREE = "decision_tree"
    LOGISTIC_REGRESSION = "logistic_regression"
    RANDOM_FOREST = "random_forest"
    SVM = "svm"
    BOOSTING = "boosting"


@dataclass(frozen=True)
class ModelSpec:
    """Estimator factory (takes the run seed) and its hyperparameter grid."""

    build: Callable[[int], ClassifierMixin]
    param_grid: dict[str, list] = field(default_factory=dict)


def _knn(seed: int) -> ClassifierMixin:
    return KNeighborsClassifier(p=2, weights="distance")


def _decision_tree(seed: int) -> ClassifierMixin:
    return DecisionTreeClassifier(random_state=seed)


def _logistic_regression(seed: int) -> ClassifierMixin:
    return LogisticRegression(max_iter=5000)


def _random_forest(seed: int) -> ClassifierMixin:
    return RandomForestClassifier(n_estimators=500, random_state=seed)


def _svm(seed: int) -> ClassifierMixin:
    return SVC(kernel="rbf", probability=True, random_state=seed)


def _boosting(seed: int) -> ClassifierMixin:
    # Depth-1 trees with discrete (SAMME) votes
    return AdaBoostClassifier(n_estimators=BOOSTING_ROUNDS, random_state=seed)


MODEL_SPECS: dict[ModelFamily, ModelSpec] = {
    ModelFamily.KNN: ModelSpec(_knn, {"n_neighbors": list(range(3, 22, 2))}),
    ModelFamily.DECISION_TREE: ModelSpec(
        _decision_tree, {"ccp_alpha": [round(0.01 * i, 2) for i in range(1, 11)]}
    ),
    ModelFamily.LOGISTIC_REGRESSION: ModelSpec(_logistic_regression, {}),
    ModelFamily.RANDOM_FOREST: ModelSpec(
        _random_forest, {"max_features": [2, 4, 6, 8, 10]}
    ),
    ModelFamily.SVM: ModelSpec(
        _svm, {"C": [4, 8, 16], "gamma": [0.5, 0.25, 0.125]}
    ),
    ModelFamily.BOOSTING: ModelSpec(_boosting, {}),
}

# Families that go through grid search; boosting is trained separately
TUNED_FAMILIES = [f for f in ModelFamily if f is not ModelFamily.BOOSTING]


@dataclass
class SelectionResult:
    family: ModelFamily
    scoring: str
    best_params: dict[str, Any]
    best_score: float
    cv_results: pd.DataFrame = field(repr=False)
    estimator: ClassifierMixin = field(repr=False)


def make_cv(seed: int = SEED, n_splits: int = CV_FOLDS) -> StratifiedKFold:
    """Fold generator shared by every family so scores are comparable."""
    return StratifiedKFold(n_splits=n_splits, shuffle=True, random_state=seed)


def build_model(family: ModelFamily, seed: int = SEED, **params) -> ClassifierMixin:
    """Unfitted estimator for a family, with optional hyperparameters set."""
    model = MODEL_SPECS[family].build(seed)
    if params:
        model.set_params(**params)
    return model


def _cv_table(search: GridSearchCV) -> pd.DataFrame:
    results = search.cv_results_
    table = pd.DataFrame(list(results["params"]))
    table["mean_score"] = results["mean_test_score"]
    table["std_score"] = results["std_test_score"]
    table["rank"] = results["rank_test_score"]
    return table


def select_model(
    family: ModelFamily,
    X_train,
    y_train,
    scoring: str = "accuracy",
    seed: int = SEED,
) -> SelectionResult:
    """
    Grid-search one family with 5-fold CV and refit the winner.

    Ties on the mean CV score resolve to the first grid point in grid order.
    """
    if scoring not in SCORINGS:
        raise ValueError(f"Unknown scoring '{scoring}'; expected one of {SCORINGS}")

    spec = MODEL_SPECS[family]
    search = GridSearchCV(
        spec.build(seed),
        param_grid=spec.param_grid,
        scoring=scoring,
        cv=make_cv(seed),
        refit=True,
        error_score="raise",
    )
    search.fit(X_train, y_train)

    logger.info(
        "%s → best CV %s: %.4f | params: %s (%d grid points)",
        family.value,
        scoring,
        search.best_score_,
        search.best_params_,
        len(search.cv_results_["params"]),
    )

    return SelectionResult(
        family=family,
        scoring=scoring,
        best_params=dict(search.best_params_),
        best_score=float(search.best_score_),
        cv_results=_cv_table(search),
        estimator=search.best_estimator_,
    )


def select_all(
    X_train,
    y_train,
    scoring: str = "accuracy",
    families: list[ModelFamily] | None = None,
    seed: int = SEED,
) -> dict[ModelFamily, SelectionResult]:
    """Run select_model for each family, in enum order."""
    if families is None:
        families = TUNED_FAMILIES
    return {f: select_model(f, X_train, y_train, scoring=scoring, seed=seed) for f in families}


def train_boosting(
    X_train, y_train, n_rounds: int = BOOSTING_ROUNDS, seed: int = SEED
) -> ClassifierMixin:
    """Fit the boosting ensemble with a fixed number of rounds."""
    model = build_model(ModelFamily.BOOSTING, seed=seed, n_estimators=n_rounds)
    model.fit(X_train, y_train)
    logger.info("boosting → fitted %d rounds on %d rows", n_rounds, len(y_train))
    return model
