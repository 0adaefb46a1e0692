"""
Hazard curves — turn classifier scores into per-installment hazards and
discrete survival curves for default and prepayment.
"""

from .base import HazardClassifier, SurvivalCurve
from .survival import (
    build_competing_curves,
    build_survival_curve,
    score_to_hazard,
    survival_from_hazards,
)

__all__ = [
    "HazardClassifier",
    "SurvivalCurve",
    "build_competing_curves",
    "build_survival_curve",
    "score_to_hazard",
    "survival_from_hazards",
]
