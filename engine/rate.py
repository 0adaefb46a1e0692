"""
Implicit periodic rate of a level-payment loan.

Solves  loan_amount / sum_{i=1..n} (1+r)^-i - payment_amount = 0  for r.

The root finder sits behind a narrow ``RootSolver`` interface so Brent,
Newton/secant and bisection backends (all from ``scipy.optimize``) are
interchangeable without touching the amortization code.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from scipy import optimize

from core.config import ProjectionConfig
from core.errors import RateSolveError
from core.schema import LoanTerms
from core.utils import annuity_factor

logger = logging.getLogger("LoanCash.RateSolver")

# Smallest rate tried when bracketing from below; f(0+) has the sign of
# loan_amount / n - payment_amount.
_RATE_FLOOR = 1e-12


@dataclass(frozen=True)
class RootResult:
    root: float
    residual: float
    iterations: int
    converged: bool


class RootSolver:
    """Interface for one-dimensional root finders."""

    def solve(self, func: Callable[[float], float], initial_guess: float) -> RootResult:
        raise NotImplementedError


def _expand_bracket(
    func: Callable[[float], float],
    initial_guess: float,
    max_expansions: int,
) -> Tuple[float, float, int]:
    """
    Find [lo, hi] with f(lo) < 0 < f(hi) on the positive half line.

    The annuity residual is increasing in r, so the upper end is doubled from
    the initial guess and the lower end halved towards the floor.
    """
    hi = max(float(initial_guess), _RATE_FLOOR * 2)
    lo = min(hi / 2.0, 0.5)
    n = 0
    while func(hi) <= 0.0:
        if n >= max_expansions:
            raise RateSolveError(
                "could not bracket rate from above", residual=func(hi), iterations=n
            )
        lo = hi
        hi *= 2.0
        n += 1
    while func(lo) >= 0.0:
        if lo <= _RATE_FLOOR:
            raise RateSolveError(
                "could not bracket rate from below", residual=func(lo), iterations=n
            )
        hi = lo
        lo = max(lo / 16.0, _RATE_FLOOR)
        n += 1
    return lo, hi, n


@dataclass(frozen=True)
class BrentSolver(RootSolver):
    xtol: float = 1e-15
    max_iterations: int = 100
    max_expansions: int = 64

    def solve(self, func, initial_guess):
        lo, hi, n_expand = _expand_bracket(func, initial_guess, self.max_expansions)
        root, info = optimize.brentq(
            func, lo, hi, xtol=self.xtol, maxiter=self.max_iterations,
            full_output=True, disp=False,
        )
        return RootResult(
            root=float(root),
            residual=float(func(root)),
            iterations=int(info.iterations) + n_expand,
            converged=bool(info.converged),
        )


@dataclass(frozen=True)
class BisectionSolver(RootSolver):
    xtol: float = 1e-15
    max_iterations: int = 200
    max_expansions: int = 64

    def solve(self, func, initial_guess):
        lo, hi, n_expand = _expand_bracket(func, initial_guess, self.max_expansions)
        root, info = optimize.bisect(
            func, lo, hi, xtol=self.xtol, maxiter=self.max_iterations,
            full_output=True, disp=False,
        )
        return RootResult(
            root=float(root),
            residual=float(func(root)),
            iterations=int(info.iterations) + n_expand,
            converged=bool(info.converged),
        )


@dataclass(frozen=True)
class NewtonSolver(RootSolver):
    """Secant iteration seeded at the initial guess (no derivative required)."""

    tol: float = 1e-14
    max_iterations: int = 100

    def solve(self, func, initial_guess):
        try:
            root, info = optimize.newton(
                func, float(initial_guess), tol=self.tol, maxiter=self.max_iterations,
                full_output=True, disp=False,
            )
        except (ArithmeticError, ValueError) as exc:
            raise RateSolveError(
                f"secant iteration failed: {exc}", residual=float("nan"), iterations=0
            ) from exc
        root = float(root)
        residual = float(func(root)) if math.isfinite(root) and root > -1.0 else float("nan")
        return RootResult(
            root=root,
            residual=residual,
            iterations=int(info.iterations),
            converged=bool(info.converged),
        )


_SOLVERS = {
    "brent": BrentSolver,
    "newton": NewtonSolver,
    "bisect": BisectionSolver,
}


def make_solver(config: ProjectionConfig) -> RootSolver:
    try:
        cls = _SOLVERS[config.solver_method]
    except KeyError:
        raise ValueError(
            f"Unknown solver_method {config.solver_method!r}; expected one of {sorted(_SOLVERS)}"
        ) from None
    if cls is NewtonSolver:
        return NewtonSolver(max_iterations=config.max_iterations)
    return cls(max_iterations=config.max_iterations, max_expansions=config.max_bracket_expansions)


def annuity_residual(loan_term: int, loan_amount: float, payment_amount: float) -> Callable[[float], float]:
    """f(r) = loan_amount / annuity_factor(r, n) - payment_amount."""

    def f(rate: float) -> float:
        if rate <= -1.0:
            return -payment_amount
        factor = annuity_factor(rate, loan_term)
        if factor <= 0.0:
            return math.inf
        return loan_amount / factor - payment_amount

    return f


def solve_rate(
    loan_term: int,
    loan_amount: float,
    payment_amount: float,
    initial_guess: float = 1.0,
    *,
    solver: Optional[RootSolver] = None,
    config: Optional[ProjectionConfig] = None,
) -> float:
    """
    Solve the per-period rate implied by a level payment.

    Raises
    ------
    InvalidLoanTermsError
        If any of the terms is not positive.
    RateSolveError
        If no positive finite rate exists or the solver does not reach
        ``|f(r)| <= residual_tol * max(1, payment_amount)``.
    """
    cfg = config or ProjectionConfig()
    terms = LoanTerms(loan_amount=loan_amount, payment_amount=payment_amount, loan_term=loan_term)
    f = annuity_residual(terms.loan_term, float(terms.loan_amount), float(terms.payment_amount))

    if terms.payment_amount <= terms.straight_line_payment:
        raise RateSolveError(
            f"payment {terms.payment_amount!r} does not exceed loan_amount / loan_term "
            f"({terms.straight_line_payment!r}); no positive rate amortizes the loan",
            residual=f(0.0),
            iterations=0,
        )

    backend = solver or make_solver(cfg)
    result = backend.solve(f, initial_guess)

    tol = cfg.residual_tol * max(1.0, float(terms.payment_amount))
    if (
        not result.converged
        or not math.isfinite(result.root)
        or result.root <= 0.0
        or not math.isfinite(result.residual)
        or abs(result.residual) > tol
    ):
        raise RateSolveError(
            f"rate solver did not converge (last iterate {result.root!r})",
            residual=result.residual,
            iterations=result.iterations,
        )

    logger.debug(
        "Solved rate %.10g for term=%d amount=%s payment=%s in %d iterations (residual %.2e)",
        result.root, terms.loan_term, terms.loan_amount, terms.payment_amount,
        result.iterations, result.residual,
    )
    return result.root
