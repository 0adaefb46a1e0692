import numpy as np
import pandas as pd
import pytest
from scipy.special import expit
from sklearn.exceptions import NotFittedError
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.tree import DecisionTreeClassifier

from core.errors import HazardEvaluationError
from hazards.survival import build_survival_curve
from models import ConstantScoreClassifier, LogitLinearClassifier, SklearnHazardClassifier

FEATURES = ("installment", "fico")


@pytest.fixture(scope="module")
def loan_installment_table():
    rng = np.random.default_rng(7)
    n = 400
    X = pd.DataFrame(
        {
            "installment": rng.integers(1, 25, size=n),
            "fico": rng.integers(580, 820, size=n),
        }
    )
    # survived-the-installment coded as the positive class
    p_survive = expit(2.0 + 0.004 * (X["fico"] - 700) - 0.03 * X["installment"])
    y = (rng.random(n) < p_survive).astype(int)
    return X, y


@pytest.fixture(scope="module")
def fitted_logit(loan_installment_table):
    X, y = loan_installment_table
    return LogisticRegression(max_iter=1000).fit(X, y)


def test_constant_score():
    clf = ConstantScoreClassifier(1.5)
    assert clf.predict({"installment": 1}) == 1.5
    assert clf.predict({}) == 1.5


def test_logit_linear_score():
    clf = LogitLinearClassifier(intercept=1.0, coefficients={"installment": -0.5, "fico": 0.01})
    assert clf.predict({"installment": 2, "fico": 700, "channel": "retail"}) == pytest.approx(7.0)


def test_logit_linear_missing_feature():
    clf = LogitLinearClassifier(coefficients={"ltv": 1.0})
    with pytest.raises(KeyError):
        clf.predict({"installment": 1})


def test_sklearn_adapter_matches_decision_function(fitted_logit):
    clf = SklearnHazardClassifier(fitted_logit, FEATURES)
    expected = fitted_logit.decision_function(
        pd.DataFrame([[3, 700]], columns=list(FEATURES))
    )[0]
    assert clf.predict({"installment": 3, "fico": 700, "dti": 0.4}) == pytest.approx(expected)


def test_sklearn_adapter_batches_curve(fitted_logit):
    clf = SklearnHazardClassifier(fitted_logit, FEATURES)
    curve = build_survival_curve(clf, {"fico": 700}, 12, "default")

    X = pd.DataFrame({"installment": range(1, 13), "fico": [700] * 12})
    expected_hazards = expit(-fitted_logit.decision_function(X))
    assert curve.hazards == pytest.approx(tuple(expected_hazards))
    assert curve.survival[-1] == pytest.approx(float(np.prod(1.0 - expected_hazards)))


def test_sklearn_pipeline(loan_installment_table):
    X, y = loan_installment_table
    pipe = make_pipeline(StandardScaler(), LogisticRegression()).fit(X, y)
    clf = SklearnHazardClassifier(pipe, FEATURES)
    assert np.isfinite(clf.predict({"installment": 10, "fico": 650}))


def test_sklearn_requires_decision_function(loan_installment_table):
    X, y = loan_installment_table
    with pytest.raises(TypeError, match="decision_function"):
        SklearnHazardClassifier(DecisionTreeClassifier().fit(X, y), FEATURES)


def test_sklearn_requires_fitted_estimator():
    with pytest.raises(NotFittedError):
        SklearnHazardClassifier(LogisticRegression(), FEATURES)


def test_sklearn_missing_feature_fails_curve(fitted_logit):
    clf = SklearnHazardClassifier(fitted_logit, FEATURES)
    with pytest.raises(HazardEvaluationError) as exc_info:
        build_survival_curve(clf, {"dti": 0.3}, 6, "prepay")
    assert isinstance(exc_info.value.__cause__, KeyError)
