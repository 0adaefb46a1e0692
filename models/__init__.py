"""
Hazard classifier implementations.

Any object with ``predict(record) -> float`` satisfies the projection engine;
these cover the common cases:
  ConstantScoreClassifier  — same score every installment (plumbing baseline)
  LogitLinearClassifier    — fixed-coefficient logistic model
  SklearnHazardClassifier  — adapter around a fitted scikit-learn classifier
"""

from .constant import ConstantScoreClassifier
from .logistic import LogitLinearClassifier
from .sklearn_model import SklearnHazardClassifier

__all__ = [
    "ConstantScoreClassifier",
    "LogitLinearClassifier",
    "SklearnHazardClassifier",
]
