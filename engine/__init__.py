"""
Cashflow projection engine — rate solving, amortization, and expected cash
under competing default/prepayment risk.
"""

from .amortization import AmortizationSchedule, InstallmentRecord, amortize, build_schedule
from .projector import (
    ExpectedCashFlow,
    ProjectionResult,
    expected_cash,
    project,
    project_from,
)
from .rate import (
    BisectionSolver,
    BrentSolver,
    NewtonSolver,
    RootResult,
    RootSolver,
    solve_rate,
)

__all__ = [
    "AmortizationSchedule",
    "InstallmentRecord",
    "amortize",
    "build_schedule",
    "ExpectedCashFlow",
    "ProjectionResult",
    "expected_cash",
    "project",
    "project_from",
    "BisectionSolver",
    "BrentSolver",
    "NewtonSolver",
    "RootResult",
    "RootSolver",
    "solve_rate",
]
