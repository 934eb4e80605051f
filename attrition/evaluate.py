"""
Evaluation — confusion matrix, ROC/AUC, recall-oriented metrics, thresholds.

Conventions:
  - positive class = attrition (label 1) unless a pos_label is given
  - ROC curve from sweeping the decision threshold over predicted
    probabilities; AUC is the trapezoidal area under those points
  - F1 is undefined when precision + recall = 0; it is reported as N/A
    (None), never as 0
  - custom thresholds predict positive only when probability > threshold
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, ClassifierMixin, clone
from sklearn.metrics import auc, confusion_matrix, roc_curve

from attrition.config import POSITIVE_LABEL, RECALL_THRESHOLD
from attrition.errors import DegenerateMetricError

logger = logging.getLogger(__name__)

NA = "N/A"


# ═══════════════════════════════════════════════════════════════════════════════
# REPORT
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class EvaluationReport:
    name: str
    tp: int
    fp: int
    tn: int
    fn: int
    accuracy: float
    precision: float
    recall: float
    specificity: float
    f1: float | None
    auc: float | None
    threshold: float | None = None
    fpr: np.ndarray = field(default=None, repr=False, compare=False)
    tpr: np.ndarray = field(default=None, repr=False, compare=False)
    roc_thresholds: np.ndarray = field(default=None, repr=False, compare=False)

    def as_row(self) -> dict:
        return {
            "model": self.name,
            "threshold": self.threshold if self.threshold is not None else 0.5,
            "tp": self.tp,
            "fp": self.fp,
            "tn": self.tn,
            "fn": self.fn,
            "accuracy": round(self.accuracy, 4),
            "precision": round(self.precision, 4),
            "recall": round(self.recall, 4),
            "specificity": round(self.specificity, 4),
            "f1": round(self.f1, 4) if self.f1 is not None else NA,
            "auc": round(self.auc, 4) if self.auc is not None else NA,
        }

    def summary(self) -> str:
        f1 = f"{self.f1:.4f}" if self.f1 is not None else NA
        auc_str = f"{self.auc:.4f}" if self.auc is not None else NA
        return (
            f"{self.name}\n"
            f"              pred No   pred Yes\n"
            f"  true No   {self.tn:9d} {self.fp:10d}\n"
            f"  true Yes  {self.fn:9d} {self.tp:10d}\n"
            f"  accuracy={self.accuracy:.4f}  recall={self.recall:.4f}  "
            f"specificity={self.specificity:.4f}  precision={self.precision:.4f}  "
            f"F1={f1}  AUC={auc_str}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# METRICS
# ═══════════════════════════════════════════════════════════════════════════════
def confusion_counts(y_true, y_pred, pos_label=POSITIVE_LABEL) -> dict[str, int]:
    """TP/FP/TN/FN against an explicit positive label."""
    actual = np.asarray(y_true) == pos_label
    predicted = np.asarray(y_pred) == pos_label
    tn, fp, fn, tp = confusion_matrix(actual, predicted, labels=[False, True]).ravel()
    return {"tp": int(tp), "fp": int(fp), "tn": int(tn), "fn": int(fn)}


def _ratio(num: int, den: int) -> float:
    return float(num / den) if den > 0 else 0.0


def f1_from_counts(tp: int, fp: int, fn: int) -> float:
    precision = _ratio(tp, tp + fp)
    recall = _ratio(tp, tp + fn)
    if precision + recall == 0:
        raise DegenerateMetricError("F1 undefined: precision + recall = 0")
    return 2 * precision * recall / (precision + recall)


def roc_points(y_true, y_prob, pos_label=POSITIVE_LABEL):
    """False/true positive rates across every probability threshold."""
    actual = np.asarray(y_true) == pos_label
    if actual.all() or not actual.any():
        raise DegenerateMetricError("ROC undefined: test labels contain a single class")
    return roc_curve(actual, np.asarray(y_prob, dtype=float), pos_label=True)


def roc_auc(fpr, tpr) -> float:
    """Trapezoidal area under ROC points."""
    return float(auc(fpr, tpr))


def positive_proba(model, X, pos_label=POSITIVE_LABEL) -> np.ndarray:
    """Probability of the positive class from a fitted classifier."""
    classes = list(model.classes_)
    proba = model.predict_proba(X)
    if pos_label not in classes:
        return np.zeros(len(proba))
    return proba[:, classes.index(pos_label)]


# ═══════════════════════════════════════════════════════════════════════════════
# THRESHOLD ADJUSTMENT
# ═══════════════════════════════════════════════════════════════════════════════
def apply_threshold(
    y_prob, threshold: float = RECALL_THRESHOLD, pos_label=POSITIVE_LABEL, neg_label=0
) -> np.ndarray:
    """Predict positive where probability is strictly greater than threshold."""
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be in [0, 1], got {threshold}")
    return np.where(np.asarray(y_prob, dtype=float) > threshold, pos_label, neg_label)


class ThresholdClassifier(ClassifierMixin, BaseEstimator):
    """Wrap a probabilistic classifier with a custom decision threshold."""

    def __init__(self, estimator=None, threshold=RECALL_THRESHOLD, pos_label=POSITIVE_LABEL):
        self.estimator = estimator
        self.threshold = threshold
        self.pos_label = pos_label

    def fit(self, X, y):
        self.estimator_ = clone(self.estimator).fit(X, y)
        self.classes_ = self.estimator_.classes_
        return self

    @classmethod
    def from_fitted(cls, estimator, threshold=RECALL_THRESHOLD, pos_label=POSITIVE_LABEL):
        """Wrap an already fitted classifier without refitting it."""
        wrapper = cls(estimator, threshold=threshold, pos_label=pos_label)
        wrapper.estimator_ = estimator
        wrapper.classes_ = estimator.classes_
        return wrapper

    def predict_proba(self, X):
        return self.estimator_.predict_proba(X)

    def predict(self, X):
        negatives = [c for c in self.classes_ if c != self.pos_label]
        neg_label = negatives[0] if negatives else 0
        return apply_threshold(
            positive_proba(self.estimator_, X, self.pos_label),
            self.threshold,
            pos_label=self.pos_label,
            neg_label=neg_label,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# MODEL EVALUATION
# ═══════════════════════════════════════════════════════════════════════════════
def evaluate_model(
    name: str,
    model,
    X_test,
    y_test,
    threshold: float | None = None,
    pos_label=POSITIVE_LABEL,
) -> EvaluationReport:
    """
    Score a fitted model on the held-out partition.

    Labels come from the model's own predict unless a threshold is given, in
    which case they come from apply_threshold on the positive-class
    probabilities. A ThresholdClassifier's own threshold counts as given.
    """
    if threshold is None:
        threshold = getattr(model, "threshold", None)
    y_true = np.asarray(y_test)
    y_prob = positive_proba(model, X_test, pos_label)
    if threshold is None:
        y_pred = np.asarray(model.predict(X_test))
    else:
        negatives = [c for c in model.classes_ if c != pos_label]
        y_pred = apply_threshold(
            y_prob, threshold, pos_label=pos_label, neg_label=negatives[0] if negatives else 0
        )

    counts = confusion_counts(y_true, y_pred, pos_label)
    tp, fp, tn, fn = counts["tp"], counts["fp"], counts["tn"], counts["fn"]

    try:
        f1 = f1_from_counts(tp, fp, fn)
    except DegenerateMetricError as exc:
        logger.warning("%s: %s; reporting F1 as %s", name, exc, NA)
        f1 = None

    try:
        fpr, tpr, roc_thr = roc_points(y_true, y_prob, pos_label)
        auc_value = roc_auc(fpr, tpr)
    except DegenerateMetricError as exc:
        logger.warning("%s: %s; reporting AUC as %s", name, exc, NA)
        fpr = tpr = roc_thr = None
        auc_value = None

    report = EvaluationReport(
        name=name,
        tp=tp,
        fp=fp,
        tn=tn,
        fn=fn,
        accuracy=_ratio(tp + tn, tp + fp + tn + fn),
        precision=_ratio(tp, tp + fp),
        recall=_ratio(tp, tp + fn),
        specificity=_ratio(tn, tn + fp),
        f1=f1,
        auc=auc_value,
        threshold=threshold,
        fpr=fpr,
        tpr=tpr,
        roc_thresholds=roc_thr,
    )
    logger.info(
        "%s → AUC=%s  Recall=%.3f  Specificity=%.3f  F1=%s",
        name,
        f"{auc_value:.4f}" if auc_value is not None else NA,
        report.recall,
        report.specificity,
        f"{f1:.3f}" if f1 is not None else NA,
    )
    return report


# ═══════════════════════════════════════════════════════════════════════════════
# RECALL-FOCUSED ANALYSIS
# ═══════════════════════════════════════════════════════════════════════════════
def threshold_sweep(y_true, y_prob, thresholds=None, pos_label=POSITIVE_LABEL) -> pd.DataFrame:
    """Show recall vs precision vs specificity trade-off at different thresholds."""
    if thresholds is None:
        thresholds = np.arange(0.05, 0.95, 0.05)

    rows = []
    for t in thresholds:
        y_pred = apply_threshold(y_prob, float(t), pos_label=pos_label, neg_label=-1)
        c = confusion_counts(y_true, y_pred, pos_label)
        rows.append(
            {
                "threshold": round(float(t), 2),
                "recall": round(_ratio(c["tp"], c["tp"] + c["fn"]), 3),
                "precision": round(_ratio(c["tp"], c["tp"] + c["fp"]), 3),
                "specificity": round(_ratio(c["tn"], c["tn"] + c["fp"]), 3),
                "flagged": c["tp"] + c["fp"],
                "leavers_caught": c["tp"],
                "leavers_missed": c["fn"],
                "false_alarms": c["fp"],
            }
        )

    return pd.DataFrame(rows)


def compare_models(reports: list[EvaluationReport]) -> pd.DataFrame:
    """One row per evaluation, best AUC first (N/A last)."""
    df = pd.DataFrame([r.as_row() for r in reports])
    if df.empty:
        return df
    order = pd.to_numeric(df["auc"], errors="coerce")
    return (
        df.assign(_auc=order)
        .sort_values("_auc", ascending=False, na_position="last", kind="stable")
        .drop(columns="_auc")
        .reset_index(drop=True)
    )
