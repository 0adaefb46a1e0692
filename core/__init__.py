"""
Core package — loan terms, configuration, errors, and shared numeric helpers.
No projection logic lives here.
"""

from .config import HazardLink, ProjectionConfig
from .errors import (
    CashflowEngineError,
    HazardEvaluationError,
    InvalidConditioningError,
    InvalidLoanTermsError,
    RateSolveError,
)
from .schema import LoanTerms, SCHEDULE_COLUMNS, PROJECTION_COLUMNS
from .utils import annuity_factor, installment_dates

__all__ = [
    "HazardLink",
    "ProjectionConfig",
    "CashflowEngineError",
    "HazardEvaluationError",
    "InvalidConditioningError",
    "InvalidLoanTermsError",
    "RateSolveError",
    "LoanTerms",
    "SCHEDULE_COLUMNS",
    "PROJECTION_COLUMNS",
    "annuity_factor",
    "installment_dates",
]
