"""Shared pytest fixtures."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

import pytest

from hazards.base import HazardClassifier
from models import ConstantScoreClassifier

# Scores whose inverse logit is exactly 0.0 / 1.0 in double precision.
NEVER = 1000.0
ALWAYS = -1000.0


class InstallmentScoreClassifier(HazardClassifier):
    """Scores looked up by installment index; records every call."""

    def __init__(self, scores: Mapping[int, float], default: float = NEVER, feature: str = "installment"):
        self.scores = dict(scores)
        self.default = default
        self.feature = feature
        self.calls: List[Dict[str, Any]] = []

    def predict(self, record):
        self.calls.append(dict(record))
        return self.scores.get(record[self.feature], self.default)


@pytest.fixture
def loan():
    return {"loan_term": 10, "loan_amount": 1000.0, "payment_amount": 120.0}


@pytest.fixture
def covariates():
    return {"fico": 705, "dti": 0.31, "channel": "retail"}


@pytest.fixture
def no_event():
    return ConstantScoreClassifier(NEVER)


@pytest.fixture
def scored_by_installment():
    return InstallmentScoreClassifier
