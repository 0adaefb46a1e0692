"""
Projection configuration.
Numeric tolerances for the rate solver and the score-to-hazard convention.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class HazardLink(str, Enum):
    """
    How a classifier score maps to a per-installment hazard.

    SURVIVAL_POSITIVE: the classifier was fit with "survived this installment"
    as the positive class, so larger scores mean smaller hazard:
    h = 1 / (1 + exp(score)).
    EVENT_POSITIVE: the event is the positive class: h = 1 / (1 + exp(-score)).
    """

    SURVIVAL_POSITIVE = "survival_positive"
    EVENT_POSITIVE = "event_positive"


@dataclass(frozen=True)
class ProjectionConfig:
    # feature name added to the covariates for each installment
    installment_feature: str = "installment"
    hazard_link: HazardLink = HazardLink.SURVIVAL_POSITIVE

    # rate solving
    solver_method: Literal["brent", "newton", "bisect"] = "brent"
    residual_tol: float = 1e-8  # scaled by max(1, payment_amount)
    max_iterations: int = 100
    max_bracket_expansions: int = 64
