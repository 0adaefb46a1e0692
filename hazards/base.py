"""
Base types for hazard curves.
The classifier is only consumed through its ``predict`` contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple

import numpy as np


class HazardClassifier:
    """
    Interface for per-installment hazard classifiers.

    ``predict`` receives the loan covariates extended with the installment index
    and returns a link-function score (log-odds for a logistic model). It must be
    deterministic for identical input.

    Implementations that can score many rows at once may also define
    ``predict_many(records) -> sequence of float`` (same order as ``records``);
    the curve builder then makes a single batched call.
    """

    def predict(self, record: Mapping[str, Any]) -> float:
        raise NotImplementedError


@dataclass(frozen=True)
class SurvivalCurve:
    """
    Discrete survival curve for one event type.

    hazards[i-1]  = P(event at installment i | no event before i)
    survival[i-1] = P(T > i) = prod_{k<=i} (1 - hazards[k-1])
    """

    event_name: str
    hazards: Tuple[float, ...]
    survival: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.survival)

    def survival_at(self, installment: int) -> float:
        """P(T > installment), with P(T > 0) = 1."""
        if installment == 0:
            return 1.0
        if installment < 0 or installment > len(self.survival):
            raise IndexError(f"installment {installment} outside 0..{len(self.survival)}")
        return self.survival[installment - 1]

    def hazard_at(self, installment: int) -> float:
        if installment < 1 or installment > len(self.hazards):
            raise IndexError(f"installment {installment} outside 1..{len(self.hazards)}")
        return self.hazards[installment - 1]

    def as_array(self) -> np.ndarray:
        """Survival values with the conceptual P(T > 0) = 1 prepended (length n + 1)."""
        arr = np.concatenate(([1.0], np.asarray(self.survival, dtype=float)))
        arr.setflags(write=False)
        return arr
