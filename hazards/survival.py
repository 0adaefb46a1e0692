"""
Hazard-to-survival conversion.

Each installment gets one classifier evaluation; the scores are collected in
installment order and the survival curve is the running product of (1 - h).
Default and prepayment curves are built independently.
"""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Iterable, Mapping, Optional, Tuple

from scipy.special import expit

from core.config import HazardLink, ProjectionConfig
from core.errors import HazardEvaluationError, InvalidLoanTermsError

from .base import HazardClassifier, SurvivalCurve

logger = logging.getLogger("LoanCash.Hazards")


def score_to_hazard(score: float, link: HazardLink = HazardLink.SURVIVAL_POSITIVE) -> float:
    """Inverse logit of a classifier score under the given polarity."""
    if link == HazardLink.SURVIVAL_POSITIVE:
        return float(expit(-score))
    if link == HazardLink.EVENT_POSITIVE:
        return float(expit(score))
    raise ValueError(f"Unknown hazard link {link!r}")


def survival_from_hazards(hazards: Iterable[float], event_name: str) -> SurvivalCurve:
    """Cumulative product S(i) = prod_{k<=i} (1 - h(k))."""
    hs = []
    surv = []
    s = 1.0
    for i, h in enumerate(hazards, start=1):
        h = float(h)
        if not (0.0 <= h <= 1.0):
            raise HazardEvaluationError(
                f"hazard {h!r} outside [0, 1]", installment=i, event_name=event_name
            )
        s *= 1.0 - h
        hs.append(h)
        surv.append(s)
    return SurvivalCurve(event_name=event_name, hazards=tuple(hs), survival=tuple(surv))


def _installment_records(
    covariates: Mapping[str, Any], loan_term: int, feature: str
) -> Tuple[dict, ...]:
    return tuple({**covariates, feature: i} for i in range(1, loan_term + 1))


def _score_all(classifier: HazardClassifier, records, event_name: str) -> Tuple[float, ...]:
    predict_many = getattr(classifier, "predict_many", None)
    if predict_many is not None:
        try:
            scores = list(predict_many(records))
        except Exception as exc:
            raise HazardEvaluationError(
                f"classifier failed on batched records: {exc}",
                installment=1, event_name=event_name,
            ) from exc
        if len(scores) != len(records):
            raise HazardEvaluationError(
                f"classifier returned {len(scores)} scores for {len(records)} installments",
                installment=min(len(scores), len(records)) + 1, event_name=event_name,
            )
    else:
        scores = []
        for i, record in enumerate(records, start=1):
            try:
                scores.append(classifier.predict(record))
            except Exception as exc:
                raise HazardEvaluationError(
                    f"classifier failed: {exc}", installment=i, event_name=event_name
                ) from exc

    out = []
    for i, score in enumerate(scores, start=1):
        try:
            value = float(score)
        except (TypeError, ValueError) as exc:
            raise HazardEvaluationError(
                f"score {score!r} is not a real number", installment=i, event_name=event_name
            ) from exc
        if not math.isfinite(value):
            raise HazardEvaluationError(
                f"non-finite score {value!r}", installment=i, event_name=event_name
            )
        out.append(value)
    return tuple(out)


def build_survival_curve(
    classifier: HazardClassifier,
    covariates: Mapping[str, Any],
    loan_term: int,
    event_name: str,
    *,
    config: Optional[ProjectionConfig] = None,
) -> SurvivalCurve:
    """
    Evaluate ``classifier`` at installments 1..loan_term and build the survival curve.

    The covariates are not modified; each installment gets a fresh copy with the
    installment feature added.
    """
    cfg = config or ProjectionConfig()
    if isinstance(loan_term, bool) or not isinstance(loan_term, numbers.Integral) or loan_term <= 0:
        raise InvalidLoanTermsError(f"loan_term must be a positive integer, got {loan_term!r}")
    loan_term = int(loan_term)

    records = _installment_records(covariates, loan_term, cfg.installment_feature)
    scores = _score_all(classifier, records, event_name)
    hazards = [score_to_hazard(s, cfg.hazard_link) for s in scores]
    curve = survival_from_hazards(hazards, event_name)

    logger.debug(
        "Built %s survival curve over %d installments; S(n)=%.6f",
        event_name, loan_term, curve.survival[-1],
    )
    return curve


def build_competing_curves(
    default_classifier: HazardClassifier,
    prepay_classifier: HazardClassifier,
    covariates: Mapping[str, Any],
    loan_term: int,
    *,
    config: Optional[ProjectionConfig] = None,
) -> Tuple[SurvivalCurve, SurvivalCurve]:
    """(default_curve, prepay_curve) built from two independent classifiers."""
    default_curve = build_survival_curve(
        default_classifier, covariates, loan_term, "default", config=config
    )
    prepay_curve = build_survival_curve(
        prepay_classifier, covariates, loan_term, "prepay", config=config
    )
    return default_curve, prepay_curve
