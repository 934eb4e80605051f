#!/usr/bin/env python3
"""
EMPLOYEE ATTRITION PIPELINE
============================
  1. Load + drop non-informative columns
  2. Outlier scan (advisory)
  3. Stratified 80/20 split
  4. Standardize + one-hot (fit on train only)
  5. Odds ratios (auxiliary logistic model)
  6. 5-fold CV selection (accuracy) for KNN · Tree · LogReg · RF · SVM
  7. VIF on the logistic design → drop aliased columns → refit
  8. Selection again, optimising recall
  9. Upsample the minority class in train → retrain
 10. LogReg at threshold 0.3 · AdaBoost (50 rounds)

Usage:  python scripts/run_pipeline.py
        python scripts/run_pipeline.py --data path/to/attrition.csv --seed 7
        python scripts/run_pipeline.py --skip-svm
"""
from __future__ import annotations

import warnings

warnings.filterwarnings("ignore", category=FutureWarning)

import argparse, logging, time, sys
from pathlib import Path

import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from attrition.config import DATA_FILE, MET_DIR, RECALL_THRESHOLD, SEED, TARGET
from attrition.ingest import load_raw_data
from attrition.clean import scan_data
from attrition.split import stratified_split
from attrition.features import AttritionPreprocessor, join_xy, split_xy
from attrition.odds import odds_ratios
from attrition.train import (
    TUNED_FAMILIES,
    ModelFamily,
    select_all,
    select_model,
    train_boosting,
)
from attrition.collinearity import (
    assert_no_perfect_collinearity,
    compute_vif,
    drop_features,
    find_aliased_columns,
)
from attrition.evaluate import (
    ThresholdClassifier,
    compare_models,
    evaluate_model,
    positive_proba,
    threshold_sweep,
)
from attrition.resample import upsample_split

ROOT = Path(__file__).resolve().parent.parent


# ═══════════════════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════════════════
class PrettyFormatter(logging.Formatter):
    GREY = "\033[90m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BOLD = "\033[1m"
    RESET = "\033[0m"
    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: RED + BOLD,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, self.GREY)
        ts = self.formatTime(record, "%H:%M:%S")
        return f"{self.GREY}{ts}{self.RESET} {color}│{self.RESET} {record.getMessage()}"


handler = logging.StreamHandler()
handler.setFormatter(PrettyFormatter())
logging.basicConfig(level=logging.INFO, handlers=[handler])
log = logging.getLogger("pipeline")


def banner(title, emoji="═"):
    w = 65
    log.info("")
    log.info(f"\033[1m\033[96m{'═' * w}\033[0m")
    log.info(f"\033[1m\033[96m  {emoji}  {title}\033[0m")
    log.info(f"\033[1m\033[96m{'═' * w}\033[0m")


def step_done(msg):
    log.info(f"  \033[92m✅ {msg}\033[0m")


def metric_log(label, value):
    log.info(f"     \033[93m▸ {label}: {value}\033[0m")


def print_report(report):
    for line in report.summary().splitlines():
        log.info(f"     {line}")


# ═══════════════════════════════════════════════════════════════════════════════
# STEP 1–4 : DATA
# ═══════════════════════════════════════════════════════════════════════════════
def step_data(data_path, seed, met_dir):
    banner("STEP 1–3  ·  LOAD → OUTLIER SCAN → SPLIT", "📦")
    df = load_raw_data(data_path)
    outliers = scan_data(df)
    outliers.to_frame().to_csv(met_dir / "outliers.csv", index=False)
    metric_log("IQR-flagged rows", len(outliers.iqr_rows))
    metric_log("Z-score-flagged rows", len(outliers.zscore_rows))

    train, test = stratified_split(df, seed=seed)
    log.info(
        f"  📊 Rows: {len(df):,}  |  Train: {len(train):,}  Test: {len(test):,}  |  "
        f"Attrition rate: {df[TARGET].mean():.1%}"
    )
    return df, train, test


def step_preprocess(train, test):
    banner("STEP 4  ·  STANDARDIZE + ONE-HOT (train statistics only)", "🧮")
    pre = AttritionPreprocessor()
    train_p = pre.fit_transform(train)
    test_p = pre.transform(test)
    step_done(f"{len(pre.feature_names_out)} features, label last")
    return pre, train_p, test_p


# ═══════════════════════════════════════════════════════════════════════════════
# STEP 5 : ODDS RATIOS
# ═══════════════════════════════════════════════════════════════════════════════
def step_odds_ratios(train_p, met_dir):
    banner("STEP 5  ·  ODDS RATIOS (auxiliary logistic model)", "🎲")
    report = odds_ratios(train_p)
    report.to_csv(met_dir / "odds_ratios.csv", index=False)
    step_done("odds_ratios.csv")
    return report


# ═══════════════════════════════════════════════════════════════════════════════
# STEP 6 : CV SELECTION + TEST EVALUATION
# ═══════════════════════════════════════════════════════════════════════════════
def step_select_and_evaluate(X_tr, y_tr, X_te, y_te, families, scoring, seed, tag):
    banner(f"{tag}  ·  5-FOLD CV SELECTION ({scoring})", "🏋️")
    selections = select_all(X_tr, y_tr, scoring=scoring, families=families, seed=seed)
    reports = []
    for family, sel in selections.items():
        metric_log(family.value, f"CV {scoring}={sel.best_score:.4f}  params={sel.best_params}")
        report = evaluate_model(f"{family.value} [{tag.lower()}]", sel.estimator, X_te, y_te)
        print_report(report)
        reports.append(report)
    return selections, reports


# ═══════════════════════════════════════════════════════════════════════════════
# STEP 7 : COLLINEARITY
# ═══════════════════════════════════════════════════════════════════════════════
def step_collinearity(X_tr, y_tr, X_te, y_te, seed, met_dir):
    banner("STEP 7  ·  VIF ON THE LOGISTIC DESIGN", "🔗")
    vif_before = compute_vif(X_tr)
    vif_before.to_csv(met_dir / "vif_before.csv", index=False)

    aliased = find_aliased_columns(X_tr)
    X_tr_r, X_te_r = drop_features(aliased, X_tr, X_te)

    vif_after = compute_vif(X_tr_r)
    vif_after.to_csv(met_dir / "vif_after.csv", index=False)
    assert_no_perfect_collinearity(vif_after)
    step_done(f"Removed {len(aliased)} aliased columns, no perfect collinearity left")

    sel = select_model(ModelFamily.LOGISTIC_REGRESSION, X_tr_r, y_tr, seed=seed)
    report = evaluate_model("logistic_regression [reduced]", sel.estimator, X_te_r, y_te)
    print_report(report)
    return X_tr_r, X_te_r, report


# ═══════════════════════════════════════════════════════════════════════════════
# STEP 9–10 : UPSAMPLING, THRESHOLD, BOOSTING
# ═══════════════════════════════════════════════════════════════════════════════
def step_upsampled(X_tr, y_tr, X_te, y_te, families, seed, met_dir):
    banner("STEP 9  ·  UPSAMPLE MINORITY CLASS (train only)", "⚖️")
    train_up, test_frame = upsample_split(join_xy(X_tr, y_tr), join_xy(X_te, y_te), seed=seed)
    X_up, y_up = split_xy(train_up)
    X_te, y_te = split_xy(test_frame)

    selections, reports = step_select_and_evaluate(
        X_up, y_up, X_te, y_te, families, "recall", seed, "STEP 9"
    )

    banner(f"STEP 10  ·  THRESHOLD {RECALL_THRESHOLD} + BOOSTING", "🎯")
    logreg = selections.get(ModelFamily.LOGISTIC_REGRESSION)
    if logreg is None:
        logreg = select_model(ModelFamily.LOGISTIC_REGRESSION, X_up, y_up, scoring="recall", seed=seed)
    thresholded = ThresholdClassifier.from_fitted(logreg.estimator, threshold=RECALL_THRESHOLD)
    t_report = evaluate_model(
        f"logistic_regression [upsampled, t={RECALL_THRESHOLD}]", thresholded, X_te, y_te
    )
    print_report(t_report)
    reports.append(t_report)

    sweep = threshold_sweep(y_te, positive_proba(logreg.estimator, X_te))
    sweep.to_csv(met_dir / "threshold_sweep.csv", index=False)
    for _, r in sweep.iterrows():
        if r["threshold"] in [0.1, 0.2, 0.3, 0.4, 0.5]:
            log.info(
                f"     t={r['threshold']:.2f}  recall={r['recall']:.3f}  "
                f"precision={r['precision']:.3f}  caught={r['leavers_caught']}  "
                f"missed={r['leavers_missed']}"
            )

    boost = train_boosting(X_up, y_up, seed=seed)
    b_report = evaluate_model("boosting [upsampled]", boost, X_te, y_te)
    print_report(b_report)
    reports.append(b_report)
    return reports


def main():
    parser = argparse.ArgumentParser(description="Employee Attrition ML Pipeline")
    parser.add_argument("--data", type=Path, default=DATA_FILE)
    parser.add_argument("--seed", type=int, default=SEED)
    parser.add_argument(
        "--skip-svm",
        action="store_true",
        help="Leave the SVM out of every selection pass (faster runs)",
    )
    args = parser.parse_args()

    met_dir = ROOT / MET_DIR
    met_dir.mkdir(parents=True, exist_ok=True)
    families = [f for f in TUNED_FAMILIES if not (args.skip_svm and f is ModelFamily.SVM)]
    start = time.time()

    log.info("")
    log.info("\033[1m\033[95m🚀  EMPLOYEE ATTRITION PIPELINE\033[0m")
    log.info(
        f"  ⚙️  Data: {args.data}  |  Seed: {args.seed}  |  "
        f"Models: {', '.join(f.value for f in families)} + boosting"
    )

    df, train, test = step_data(args.data, args.seed, met_dir)
    _, train_p, test_p = step_preprocess(train, test)
    step_odds_ratios(train_p, met_dir)

    X_tr, y_tr = split_xy(train_p)
    X_te, y_te = split_xy(test_p)

    all_reports = []
    _, reports = step_select_and_evaluate(
        X_tr, y_tr, X_te, y_te, families, "accuracy", args.seed, "STEP 6"
    )
    all_reports.extend(reports)

    X_tr, X_te, lr_report = step_collinearity(X_tr, y_tr, X_te, y_te, args.seed, met_dir)
    all_reports.append(lr_report)

    _, reports = step_select_and_evaluate(
        X_tr, y_tr, X_te, y_te, families, "recall", args.seed, "STEP 8"
    )
    all_reports.extend(reports)
    roc_sel = select_model(ModelFamily.LOGISTIC_REGRESSION, X_tr, y_tr, scoring="roc_auc", seed=args.seed)
    metric_log("logistic_regression", f"CV roc_auc={roc_sel.best_score:.4f}")

    all_reports.extend(step_upsampled(X_tr, y_tr, X_te, y_te, families, args.seed, met_dir))

    comp_df = compare_models(all_reports)
    comp_df.to_csv(met_dir / "comparison.csv", index=False)
    comp_df.to_json(met_dir / "comparison.json", orient="records", indent=2)

    elapsed = time.time() - start
    banner(f"COMPLETE in {elapsed / 60:.1f} minutes", "✅")
    log.info(f"  📋 Metrics → {met_dir}")

    print("\n" + "=" * 65)
    print("📊 RESULTS SUMMARY")
    print("=" * 65)
    with pd.option_context("display.width", 160):
        print(comp_df.to_string(index=False))


if __name__ == "__main__":
    main()
