"""
Amortization schedule for a level-payment loan.

The recurrence is sequential: installment i starts from the remaining
principal left by installment i-1, so the schedule is built one installment
at a time and frozen once complete.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np
import pandas as pd

from core.config import ProjectionConfig
from core.schema import LoanTerms, SCHEDULE_COLUMNS
from core.utils import installment_dates

from .rate import RootSolver, solve_rate

logger = logging.getLogger("LoanCash.Amortization")


@dataclass(frozen=True)
class InstallmentRecord:
    installment: int  # 1-based
    payment_amount: float
    principal_payment: float
    interest_payment: float
    remaining_principal: float

    @property
    def payoff_amount(self) -> float:
        """Cash received if the loan is paid off in full at this installment."""
        return self.payment_amount + self.remaining_principal


@dataclass(frozen=True)
class AmortizationSchedule:
    terms: LoanTerms
    rate: float
    records: Tuple[InstallmentRecord, ...]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[InstallmentRecord]:
        return iter(self.records)

    def __getitem__(self, index):
        return self.records[index]

    @property
    def loan_term(self) -> int:
        return self.terms.loan_term

    def column(self, name: str) -> np.ndarray:
        """Read-only array of one record field (or ``payoff_amount``) in installment order."""
        arr = np.array([getattr(r, name) for r in self.records], dtype=float)
        arr.setflags(write=False)
        return arr

    @property
    def remaining_principal(self) -> np.ndarray:
        return self.column("remaining_principal")

    @property
    def payoff_amounts(self) -> np.ndarray:
        return self.column("payoff_amount")

    def to_frame(self, first_payment_date=None) -> pd.DataFrame:
        """
        Tabular view of the schedule, one row per installment.
        If ``first_payment_date`` is given a monthly ``payment_date`` column is added.
        """
        df = pd.DataFrame(
            {
                "installment": [r.installment for r in self.records],
                "payment_amount": self.column("payment_amount"),
                "interest_payment": self.column("interest_payment"),
                "principal_payment": self.column("principal_payment"),
                "remaining_principal": self.column("remaining_principal"),
                "payoff_amount": self.column("payoff_amount"),
            },
            columns=list(SCHEDULE_COLUMNS),
        )
        if first_payment_date is not None:
            df.insert(1, "payment_date", installment_dates(first_payment_date, len(df)))
        return df


def build_schedule(terms: LoanTerms, rate: float) -> AmortizationSchedule:
    """Run the amortization recurrence at a known per-period rate."""
    payment = float(terms.payment_amount)
    remaining = float(terms.loan_amount)
    records = []
    for i in range(1, terms.loan_term + 1):
        interest = remaining * rate
        principal = payment - interest
        remaining = remaining - principal
        # negative amortization is propagated, not clamped
        if principal < 0.0:
            logger.warning(
                "Negative principal %.6f at installment %d (payment %.6f < interest %.6f)",
                principal, i, payment, interest,
            )
        records.append(
            InstallmentRecord(
                installment=i,
                payment_amount=payment,
                principal_payment=principal,
                interest_payment=interest,
                remaining_principal=remaining,
            )
        )
    return AmortizationSchedule(terms=terms, rate=float(rate), records=tuple(records))


def amortize(
    loan_term: int,
    loan_amount: float,
    payment_amount: float,
    *,
    rate: Optional[float] = None,
    solver: Optional[RootSolver] = None,
    config: Optional[ProjectionConfig] = None,
) -> AmortizationSchedule:
    """
    Solve the implicit rate (unless ``rate`` is given) and build the full schedule.

    Raises InvalidLoanTermsError for non-positive terms and RateSolveError if the
    rate cannot be solved.
    """
    terms = LoanTerms(loan_amount=loan_amount, payment_amount=payment_amount, loan_term=loan_term)
    if rate is None:
        rate = solve_rate(
            terms.loan_term, terms.loan_amount, terms.payment_amount,
            solver=solver, config=config,
        )
    schedule = build_schedule(terms, rate)
    logger.debug(
        "Amortized %d installments at rate %.8g; final remaining principal %.3e",
        terms.loan_term, rate, schedule.records[-1].remaining_principal,
    )
    return schedule
