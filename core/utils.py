from __future__ import annotations

from datetime import date
from typing import List

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta


def annuity_factor(rate: float, n_periods: int) -> float:
    """Present value of 1 paid at the end of each of ``n_periods``: sum (1+r)^-i."""
    exponents = -np.arange(1, n_periods + 1, dtype=float)
    with np.errstate(over="ignore", under="ignore"):
        return float(np.power(1.0 + rate, exponents).sum())


def installment_dates(first_payment_date, n_installments: int) -> List[pd.Timestamp]:
    """
    Monthly payment dates starting at ``first_payment_date``.
    Day-of-month is kept where possible (Jan 31 -> Feb 28 -> Mar 31 ...).
    """
    first = pd.Timestamp(first_payment_date).to_pydatetime().date()
    out: List[pd.Timestamp] = []
    for k in range(n_installments):
        d: date = first + relativedelta(months=k)
        out.append(pd.Timestamp(d))
    return out
