import math

import numpy as np
import pytest

from conftest import ALWAYS, NEVER
from core.config import HazardLink, ProjectionConfig
from core.errors import HazardEvaluationError, InvalidLoanTermsError
from hazards.base import HazardClassifier
from hazards.survival import (
    build_competing_curves,
    build_survival_curve,
    score_to_hazard,
    survival_from_hazards,
)
from models import ConstantScoreClassifier


def test_cumulative_product():
    curve = survival_from_hazards([0.1, 0.2, 0.0, 1.0, 0.5], "default")
    assert curve.survival == pytest.approx((0.9, 0.72, 0.72, 0.0, 0.0))
    assert curve.hazards == (0.1, 0.2, 0.0, 1.0, 0.5)
    assert curve.survival_at(0) == 1.0
    assert curve.survival_at(2) == pytest.approx(0.72)


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_survival_non_increasing_and_bounded(seed):
    hazards = np.random.default_rng(seed).uniform(0.0, 1.0, size=48)
    curve = survival_from_hazards(hazards, "prepay")
    values = curve.as_array()
    assert values[0] == 1.0
    assert np.all(np.diff(values) <= 0.0)
    assert np.all((values >= 0.0) & (values <= 1.0))


def test_hazard_out_of_range():
    with pytest.raises(HazardEvaluationError) as exc_info:
        survival_from_hazards([0.1, 1.5], "prepay")
    assert exc_info.value.installment == 2
    assert exc_info.value.event_name == "prepay"


def test_score_polarity():
    assert score_to_hazard(0.0) == 0.5
    assert score_to_hazard(2.0) == pytest.approx(1.0 / (1.0 + math.exp(2.0)))
    assert score_to_hazard(2.0, HazardLink.EVENT_POSITIVE) == pytest.approx(
        1.0 / (1.0 + math.exp(-2.0))
    )
    assert score_to_hazard(NEVER) == 0.0
    assert score_to_hazard(ALWAYS) == 1.0


def test_records_extend_covariates(covariates, scored_by_installment):
    clf = scored_by_installment({2: 0.0})
    original = dict(covariates)
    curve = build_survival_curve(clf, covariates, 4, "default")

    assert covariates == original
    assert [c["installment"] for c in clf.calls] == [1, 2, 3, 4]
    assert all(c["fico"] == 705 and c["channel"] == "retail" for c in clf.calls)
    assert curve.hazards == (0.0, 0.5, 0.0, 0.0)
    assert curve.survival == (1.0, 0.5, 0.5, 0.5)
    assert curve.event_name == "default"


def test_custom_installment_feature(covariates, scored_by_installment):
    clf = scored_by_installment({1: ALWAYS}, feature="loan_age")
    cfg = ProjectionConfig(installment_feature="loan_age")
    curve = build_survival_curve(clf, covariates, 3, "prepay", config=cfg)
    assert curve.survival == (0.0, 0.0, 0.0)
    assert "installment" not in clf.calls[0]


def test_event_positive_link(covariates):
    cfg = ProjectionConfig(hazard_link=HazardLink.EVENT_POSITIVE)
    curve = build_survival_curve(ConstantScoreClassifier(ALWAYS), covariates, 3, "default", config=cfg)
    assert curve.survival == (1.0, 1.0, 1.0)


def test_non_finite_score_identifies_installment(covariates, scored_by_installment):
    clf = scored_by_installment({3: float("nan")})
    with pytest.raises(HazardEvaluationError) as exc_info:
        build_survival_curve(clf, covariates, 5, "default")
    assert exc_info.value.installment == 3
    assert exc_info.value.event_name == "default"


def test_infinite_score_rejected(covariates):
    with pytest.raises(HazardEvaluationError):
        build_survival_curve(ConstantScoreClassifier(float("inf")), covariates, 2, "prepay")


def test_classifier_exception_is_wrapped(covariates):
    class Broken(HazardClassifier):
        def predict(self, record):
            if record["installment"] == 2:
                raise KeyError("ltv")
            return 0.0

    with pytest.raises(HazardEvaluationError) as exc_info:
        build_survival_curve(Broken(), covariates, 4, "prepay")
    assert exc_info.value.installment == 2
    assert isinstance(exc_info.value.__cause__, KeyError)


def test_batched_scores_used_in_installment_order(covariates):
    class Batched(HazardClassifier):
        def __init__(self):
            self.batches = 0

        def predict(self, record):
            raise AssertionError("predict_many should be used")

        def predict_many(self, records):
            self.batches += 1
            return [NEVER if r["installment"] % 2 else ALWAYS for r in records]

    clf = Batched()
    curve = build_survival_curve(clf, covariates, 4, "default")
    assert clf.batches == 1
    assert curve.hazards == (0.0, 1.0, 0.0, 1.0)


def test_batched_score_count_mismatch(covariates):
    class Short(HazardClassifier):
        def predict_many(self, records):
            return [0.0]

    with pytest.raises(HazardEvaluationError) as exc_info:
        build_survival_curve(Short(), covariates, 3, "default")
    assert exc_info.value.installment == 2


def test_duck_typed_classifier(covariates):
    class Plain:
        def predict(self, record):
            return 0.0

    curve = build_survival_curve(Plain(), covariates, 2, "prepay")
    assert curve.survival == (0.5, 0.25)


def test_invalid_term(covariates, no_event):
    with pytest.raises(InvalidLoanTermsError):
        build_survival_curve(no_event, covariates, 0, "default")


def test_competing_curves_are_independent(covariates, scored_by_installment):
    default_clf = scored_by_installment({1: 0.0})
    prepay_clf = scored_by_installment({2: 0.0})
    default_curve, prepay_curve = build_competing_curves(default_clf, prepay_clf, covariates, 3)
    assert default_curve.event_name == "default"
    assert prepay_curve.event_name == "prepay"
    assert default_curve.survival == (0.5, 0.5, 0.5)
    assert prepay_curve.survival == (1.0, 0.5, 0.5)
    assert len(default_clf.calls) == len(prepay_clf.calls) == 3


def test_numpy_integer_term(covariates, scored_by_installment):
    clf = scored_by_installment({2: 0.0})
    curve = build_survival_curve(clf, covariates, np.int64(3), "default")
    assert curve.survival == (1.0, 0.5, 0.5)
    assert [type(c["installment"]) for c in clf.calls] == [int, int, int]
