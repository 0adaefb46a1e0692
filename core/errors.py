"""
Exception hierarchy for the projection engine.

Every failure surfaces as a subclass of ``CashflowEngineError``; nothing is
retried internally and no partial result is returned alongside an error.
"""

from __future__ import annotations

from typing import Optional


class CashflowEngineError(Exception):
    """Base class for all projection engine errors."""


class InvalidLoanTermsError(CashflowEngineError, ValueError):
    """Raised when loan amount, payment amount or term is not positive."""


class RateSolveError(CashflowEngineError):
    """
    Raised when the implicit periodic rate cannot be solved.

    Attributes
    ----------
    residual : float
        Value of the annuity identity at the last iterate (``nan`` if never
        evaluated).
    iterations : int
        Iterations consumed by the root finder before giving up.
    """

    def __init__(self, message: str, *, residual: float, iterations: int):
        super().__init__(f"{message} (residual={residual:.3e}, iterations={iterations})")
        self.residual = residual
        self.iterations = iterations


class HazardEvaluationError(CashflowEngineError):
    """Raised when the hazard classifier fails or returns a non-finite score."""

    def __init__(self, message: str, *, installment: int, event_name: Optional[str] = None):
        label = f"{event_name} " if event_name else ""
        super().__init__(f"{label}installment {installment}: {message}")
        self.installment = installment
        self.event_name = event_name


class InvalidConditioningError(CashflowEngineError, ValueError):
    """Raised when a re-projection is conditioned on an impossible installment."""

    def __init__(self, message: str, *, installment: int):
        super().__init__(f"installment {installment}: {message}")
        self.installment = installment
