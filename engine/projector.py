"""
Expected cash per installment under competing default and prepayment risk.

For installment i (1-based), with c the level payment, c_i the payoff amount
(payment plus remaining principal), Sd/Sp the default/prepay survival curves
and hp the prepay hazard:

    E(Y_i) = c * Sd(i) * Sp(i) + c_i * Sd(i) * hp(i) * Sp(i-1)

The first term is "still current after i", the second "prepays exactly at i".
Conditioning on the loan being current through installment j divides every
survival term by its value at j; S(0) = 1, so j = 0 is the unconditioned case.
Default produces no cash (no recovery is modelled).

Nothing here is cached: every call recomputes from the schedule and curves it
is given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from core.config import ProjectionConfig
from core.errors import InvalidConditioningError
from core.schema import LoanTerms, PROJECTION_COLUMNS
from hazards.base import HazardClassifier, SurvivalCurve
from hazards.survival import build_competing_curves

from .amortization import AmortizationSchedule, amortize

logger = logging.getLogger("LoanCash.Projector")


@dataclass(frozen=True)
class ExpectedCashFlow:
    start_installment: int  # loan known current through this installment
    installments: Tuple[int, ...]
    amounts: Tuple[float, ...]
    total: float

    def __len__(self) -> int:
        return len(self.amounts)


@dataclass(frozen=True)
class ProjectionResult:
    schedule: AmortizationSchedule
    default_curve: SurvivalCurve
    prepay_curve: SurvivalCurve
    cash_flow: ExpectedCashFlow

    @property
    def expected_cash_by_installment(self) -> Tuple[float, ...]:
        return self.cash_flow.amounts

    @property
    def total_expected_cash(self) -> float:
        return self.cash_flow.total

    def to_frame(self) -> pd.DataFrame:
        """
        One row per projected installment (j+1..n) with the terms of the
        expected-cash formula, survival values already conditioned on j.
        """
        j = self.cash_flow.start_installment
        idx = np.asarray(self.cash_flow.installments, dtype=int)
        sd = self.default_curve.as_array()
        sp = self.prepay_curve.as_array()
        payments = self.schedule.column("payment_amount")
        payoffs = self.schedule.payoff_amounts
        return pd.DataFrame(
            {
                "installment": idx,
                "payment_amount": payments[idx - 1],
                "payoff_amount": payoffs[idx - 1],
                "default_survival": sd[idx] / sd[j],
                "prepay_survival": sp[idx] / sp[j],
                "prepay_survival_prev": sp[idx - 1] / sp[j],
                "prepay_hazard": [self.prepay_curve.hazard_at(i) for i in idx],
                "expected_cash": list(self.cash_flow.amounts),
            },
            columns=list(PROJECTION_COLUMNS),
        )


def check_conditioning_index(start_installment: int, loan_term: int) -> int:
    """Validate the conditioning installment against the term; needs no curves."""
    j = start_installment
    if isinstance(j, bool) or not isinstance(j, (int, np.integer)):
        raise InvalidConditioningError(f"must be an integer, got {j!r}", installment=j)
    if j < 0 or j >= loan_term:
        raise InvalidConditioningError(
            f"must be in 0..{loan_term - 1} for a {loan_term}-installment loan", installment=j
        )
    return int(j)


def check_conditioning(
    start_installment: int,
    loan_term: int,
    default_curve: SurvivalCurve,
    prepay_curve: SurvivalCurve,
) -> None:
    j = check_conditioning_index(start_installment, loan_term)
    if default_curve.survival_at(j) == 0.0:
        raise InvalidConditioningError("default survival is zero", installment=j)
    if prepay_curve.survival_at(j) == 0.0:
        raise InvalidConditioningError("prepay survival is zero", installment=j)


def expected_cash(
    schedule: AmortizationSchedule,
    default_curve: SurvivalCurve,
    prepay_curve: SurvivalCurve,
    start_installment: int = 0,
) -> ExpectedCashFlow:
    """Expected cash for installments start_installment+1..n given current at start_installment."""
    n = len(schedule)
    if len(default_curve) != n or len(prepay_curve) != n:
        raise ValueError(
            f"curve lengths ({len(default_curve)}, {len(prepay_curve)}) "
            f"do not match schedule length {n}"
        )
    check_conditioning(start_installment, n, default_curve, prepay_curve)
    j = int(start_installment)

    sd = default_curve.as_array()
    sp = prepay_curve.as_array()
    sd_j = sd[j]
    sp_j = sp[j]
    payments = schedule.column("payment_amount")
    payoffs = schedule.payoff_amounts

    installments = []
    amounts = []
    for i in range(j + 1, n + 1):
        sd_i = sd[i] / sd_j
        current = payments[i - 1] * sd_i * (sp[i] / sp_j)
        prepaid = payoffs[i - 1] * sd_i * prepay_curve.hazard_at(i) * (sp[i - 1] / sp_j)
        installments.append(i)
        amounts.append(float(current + prepaid))

    total = float(sum(amounts))
    return ExpectedCashFlow(
        start_installment=j,
        installments=tuple(installments),
        amounts=tuple(amounts),
        total=total,
    )


def project_from(
    start_installment: int,
    loan_term: int,
    loan_amount: float,
    payment_amount: float,
    covariates: Mapping[str, Any],
    default_classifier: HazardClassifier,
    prepay_classifier: HazardClassifier,
    *,
    config: Optional[ProjectionConfig] = None,
) -> ProjectionResult:
    """
    Re-project expected cash for a loan known to be current through
    ``start_installment``.

    Raises
    ------
    InvalidLoanTermsError, RateSolveError, HazardEvaluationError
        From the schedule and curve builders.
    InvalidConditioningError
        If ``start_installment`` is outside 0..loan_term-1 or either survival
        probability at it is zero.
    """
    cfg = config or ProjectionConfig()
    terms = LoanTerms(loan_amount=loan_amount, payment_amount=payment_amount, loan_term=loan_term)
    check_conditioning_index(start_installment, terms.loan_term)
    default_curve, prepay_curve = build_competing_curves(
        default_classifier, prepay_classifier, covariates, terms.loan_term, config=cfg
    )
    schedule = amortize(terms.loan_term, terms.loan_amount, terms.payment_amount, config=cfg)
    cash_flow = expected_cash(schedule, default_curve, prepay_curve, start_installment)
    logger.debug(
        "Projected %d installments from %d: total expected cash %.6f",
        len(cash_flow), cash_flow.start_installment, cash_flow.total,
    )
    return ProjectionResult(
        schedule=schedule,
        default_curve=default_curve,
        prepay_curve=prepay_curve,
        cash_flow=cash_flow,
    )


def project(
    loan_term: int,
    loan_amount: float,
    payment_amount: float,
    covariates: Mapping[str, Any],
    default_classifier: HazardClassifier,
    prepay_classifier: HazardClassifier,
    *,
    config: Optional[ProjectionConfig] = None,
) -> ProjectionResult:
    """Full projection from origination (no conditioning)."""
    return project_from(
        0, loan_term, loan_amount, payment_amount, covariates,
        default_classifier, prepay_classifier, config=config,
    )
