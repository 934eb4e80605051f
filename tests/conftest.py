"""
Shared test fixtures — synthetic data so tests never depend on the real CSV.
"""

import numpy as np
import pandas as pd
import pytest

from attrition.features import CATEGORICAL_LEVELS


@pytest.fixture
def synthetic_data():
    """200-row synthetic dataset matching the IBM HR attrition schema (raw, before loading)."""
    rng = np.random.RandomState(42)
    n = 200
    overtime = rng.choice(["No", "Yes"], n, p=[0.7, 0.3])
    income = rng.randint(1000, 20000, n)
    # Attrition leans on overtime and low income so models have signal to find
    logit = -2.0 + 1.5 * (overtime == "Yes") - 0.0001 * (income - 6500)
    attrition = np.where(rng.uniform(size=n) < 1 / (1 + np.exp(-logit)), "Yes", "No")
    df = pd.DataFrame(
        {
            "Age": rng.randint(18, 61, n),
            "Attrition": attrition,
            "BusinessTravel": rng.choice(CATEGORICAL_LEVELS["BusinessTravel"], n),
            "DailyRate": rng.randint(100, 1500, n),
            "Department": rng.choice(CATEGORICAL_LEVELS["Department"], n),
            "DistanceFromHome": rng.randint(1, 30, n),
            "Education": rng.randint(1, 6, n),
            "EducationField": rng.choice(CATEGORICAL_LEVELS["EducationField"], n),
            "EmployeeCount": np.ones(n, dtype=int),
            "EmployeeNumber": np.arange(1, n + 1),
            "EnvironmentSatisfaction": rng.randint(1, 5, n),
            "Gender": rng.choice(CATEGORICAL_LEVELS["Gender"], n),
            "HourlyRate": rng.randint(30, 101, n),
            "JobInvolvement": rng.randint(1, 5, n),
            "JobLevel": rng.randint(1, 6, n),
            "JobRole": rng.choice(CATEGORICAL_LEVELS["JobRole"], n),
            "JobSatisfaction": rng.randint(1, 5, n),
            "MaritalStatus": rng.choice(CATEGORICAL_LEVELS["MaritalStatus"], n),
            "MonthlyIncome": income,
            "MonthlyRate": rng.randint(2000, 27000, n),
            "NumCompaniesWorked": rng.randint(0, 10, n),
            "Over18": ["Y"] * n,
            "OverTime": overtime,
            "PercentSalaryHike": rng.randint(11, 26, n),
            "PerformanceRating": rng.choice([3, 4], n, p=[0.85, 0.15]),
            "RelationshipSatisfaction": rng.randint(1, 5, n),
            "StandardHours": np.full(n, 80),
            "StockOptionLevel": rng.randint(0, 4, n),
            "TotalWorkingYears": rng.randint(0, 41, n),
            "TrainingTimesLastYear": rng.randint(0, 7, n),
            "WorkLifeBalance": rng.randint(1, 5, n),
            "YearsAtCompany": rng.randint(0, 41, n),
            "YearsInCurrentRole": rng.randint(0, 19, n),
            "YearsSinceLastPromotion": rng.randint(0, 16, n),
            "YearsWithCurrManager": rng.randint(0, 18, n),
        }
    )
    return df


@pytest.fixture
def raw_csv(tmp_path, synthetic_data):
    path = tmp_path / "attrition.csv"
    synthetic_data.to_csv(path, index=False)
    return path


@pytest.fixture
def loaded_data(raw_csv):
    from attrition.ingest import load_raw_data

    return load_raw_data(raw_csv)


@pytest.fixture
def prepared(loaded_data):
    """Split + preprocessed train/test frames with the label last."""
    from attrition.features import AttritionPreprocessor
    from attrition.split import stratified_split

    train, test = stratified_split(loaded_data)
    pre = AttritionPreprocessor()
    train_p = pre.fit_transform(train)
    test_p = pre.transform(test)
    return {"train": train, "test": test, "train_p": train_p, "test_p": test_p, "pre": pre}
