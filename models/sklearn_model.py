"""
SklearnHazardClassifier — adapter around a fitted scikit-learn binary classifier.

The estimator is trained elsewhere on a loan-installment table; here it is only
scored. The score is ``decision_function`` output (log-odds for
LogisticRegression), so the engine's inverse-logit link applies unchanged.
Which class is "positive" follows ``estimator.classes_[1]``; pick the
``hazard_link`` in ProjectionConfig to match.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.utils.validation import check_is_fitted

from hazards.base import HazardClassifier


class SklearnHazardClassifier(HazardClassifier):
    """
    Parameters
    ----------
    estimator :
        Fitted scikit-learn classifier (or Pipeline) exposing ``decision_function``.
    feature_names : sequence of str
        Columns passed to the estimator, in training order. Must include the
        installment feature.
    """

    def __init__(self, estimator, feature_names: Sequence[str]):
        if not hasattr(estimator, "decision_function"):
            raise TypeError(
                f"{type(estimator).__name__} has no decision_function; "
                "a link-function score is required"
            )
        # Pipelines are checked through their final step
        check_is_fitted(estimator[-1] if hasattr(estimator, "steps") else estimator)
        self.estimator = estimator
        self.feature_names: Tuple[str, ...] = tuple(feature_names)

    def _frame(self, records: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
        missing = [c for c in self.feature_names if c not in records[0]] if records else []
        if missing:
            raise KeyError(f"Missing required features: {missing}")
        return pd.DataFrame.from_records(
            [{c: r[c] for c in self.feature_names} for r in records],
            columns=list(self.feature_names),
        )

    def predict(self, record: Mapping[str, Any]) -> float:
        return float(self.predict_many([record])[0])

    def predict_many(self, records: Sequence[Mapping[str, Any]]) -> Sequence[float]:
        if len(records) == 0:
            return []
        scores = np.asarray(self.estimator.decision_function(self._frame(records)), dtype=float)
        return scores.reshape(-1).tolist()
