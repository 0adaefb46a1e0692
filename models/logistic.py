"""
LogitLinearClassifier — logistic hazard model with fixed coefficients.

score = intercept + sum(coef[name] * record[name])

Coefficients typically come from a model fitted elsewhere on a
loan-installment table (one row per loan per installment survived).
Features missing from the record raise KeyError; extra record fields
are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from hazards.base import HazardClassifier


@dataclass(frozen=True)
class LogitLinearClassifier(HazardClassifier):
    intercept: float = 0.0
    coefficients: Dict[str, float] = field(default_factory=dict)

    def predict(self, record: Mapping[str, Any]) -> float:
        score = float(self.intercept)
        for name, coef in self.coefficients.items():
            score += float(coef) * float(record[name])
        return score
