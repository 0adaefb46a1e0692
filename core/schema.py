from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidLoanTermsError

# Column order of the tabular views handed to reporting layers.
SCHEDULE_COLUMNS: Tuple[str, ...] = (
    "installment",
    "payment_amount",
    "interest_payment",
    "principal_payment",
    "remaining_principal",
    "payoff_amount",
)

PROJECTION_COLUMNS: Tuple[str, ...] = (
    "installment",
    "payment_amount",
    "payoff_amount",
    "default_survival",
    "prepay_survival",
    "prepay_survival_prev",
    "prepay_hazard",
    "expected_cash",
)


@dataclass(frozen=True)
class LoanTerms:
    """Contractual terms of a single level-payment installment loan."""

    loan_amount: float
    payment_amount: float
    loan_term: int

    def __post_init__(self) -> None:
        for name in ("loan_amount", "payment_amount"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidLoanTermsError(f"{name} must be a real number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise InvalidLoanTermsError(f"{name} must be positive and finite, got {value!r}")
        term = self.loan_term
        if isinstance(term, bool) or not isinstance(term, numbers.Integral) or term <= 0:
            raise InvalidLoanTermsError(f"loan_term must be a positive integer, got {term!r}")
        object.__setattr__(self, "loan_term", int(term))

    @property
    def straight_line_payment(self) -> float:
        """Payment that repays the principal at a zero rate."""
        return self.loan_amount / self.loan_term
