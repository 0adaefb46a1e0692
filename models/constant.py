"""
ConstantScoreClassifier — baseline classifier with the same score for all installments.
Useful to validate the plumbing before plugging in fitted models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from hazards.base import HazardClassifier


@dataclass(frozen=True)
class ConstantScoreClassifier(HazardClassifier):
    score: float = 0.0

    def predict(self, record: Mapping[str, Any]) -> float:
        return float(self.score)
