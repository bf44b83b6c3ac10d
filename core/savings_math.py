"""Spareprognose med månedlig rentes rente"""
import math

import numpy as np
import pandas as pd

from config.settings import MAX_SAFE_OERE
from utils.money import round_half_up


def calc_savings_projection(
    initial_oere: int,
    monthly_contrib_oere: int,
    annual_return_pct: float,
    years: int,
) -> int:
    """Verdi etter N år med fast månedlig sparing (øre)"""
    months = years * 12
    r = annual_return_pct / 100 / 12
    if r == 0:
        return initial_oere + monthly_contrib_oere * months
    try:
        growth = (1 + r) ** months
        value = initial_oere * growth + monthly_contrib_oere * ((growth - 1) / r)
    except OverflowError:
        return MAX_SAFE_OERE
    if not math.isfinite(value):
        return MAX_SAFE_OERE
    return min(round_half_up(value), MAX_SAFE_OERE)


def savings_projection_series(
    initial_oere: int,
    monthly_contrib_oere: int,
    annual_return_pct: float,
    years: int,
) -> pd.DataFrame:
    """Saldo måned for måned, til grafer"""
    months = np.arange(0, years * 12 + 1)
    r = annual_return_pct / 100 / 12
    contributed = initial_oere + monthly_contrib_oere * months
    if r == 0:
        balance = contributed.astype(float)
    else:
        with np.errstate(over="ignore"):
            growth = np.power(1 + r, months.astype(float))
            balance = initial_oere * growth + monthly_contrib_oere * ((growth - 1) / r)
    balance = np.where(np.isfinite(balance), balance, float(MAX_SAFE_OERE))
    return pd.DataFrame({
        "month": months,
        "balance_oere": np.minimum(np.floor(balance + 0.5), MAX_SAFE_OERE).astype("int64"),
        "contributed_oere": contributed.astype("int64"),
    })
