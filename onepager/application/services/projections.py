"""Chart projections.

Year-by-year and month-by-month series behind the rent projection, income &
safety, and wealth-build charts. Each function returns a pandas DataFrame
with one row per period; rendering is left to the caller.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd

from onepager.core.exceptions import ProjectionError
from onepager.core.logging import get_logger
from onepager.core.settings import get_settings
from onepager.domain.calculator.financial import loan_balance_after
from onepager.domain.models.records import MortgageRecord

log = get_logger(__name__)


class SafetyGuidance(str, Enum):
    """Advice derived from the final-year free cash flow margin."""

    REFINANCE = "refinance"
    DISTRIBUTE = "distribute"
    MODERATE_RISK = "moderate_risk"
    RETAIN_CASH = "retain_cash"

    @property
    def message(self) -> str:
        return _GUIDANCE_MESSAGES[self]


_GUIDANCE_MESSAGES = {
    SafetyGuidance.REFINANCE: "Safe to refinance (>=30% margin)",
    SafetyGuidance.DISTRIBUTE: "Safe to distribute profits (20-30% margin)",
    SafetyGuidance.MODERATE_RISK: "Moderate risk (15-20% margin)",
    SafetyGuidance.RETAIN_CASH: "Retain cash; high risk (<15% margin)",
}


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5).astype(int)


def _check_horizon(name: str, value: int, minimum: int = 0) -> int:
    if value is None or int(value) < minimum:
        raise ProjectionError(name, value, f"must be >= {minimum}")
    return int(value)


def project_rent(
    current_rent: float,
    growth_rate_pct: float,
    years: int | None = None,
    start_year: int | None = None,
) -> pd.DataFrame:
    """Compounded rent for the current year and each of the next ``years``.

    Args:
        current_rent: Monthly rent today in $
        growth_rate_pct: Annual rent growth %
        years: Horizon (settings default 10); yields ``years + 1`` rows
        start_year: Calendar year of the first row (defaults to this year)

    Returns:
        DataFrame with columns ``year`` and ``rent`` (whole dollars)
    """
    horizon = _check_horizon("years", years if years is not None else get_settings().projection_years)
    first = start_year if start_year is not None else date.today().year

    offsets = np.arange(horizon + 1)
    rent = (current_rent or 0.0) * np.power(1 + (growth_rate_pct or 0.0) / 100.0, offsets)

    return pd.DataFrame({"year": first + offsets, "rent": _round_half_up(rent)})


def project_income_and_safety(
    current_rent: float,
    rent_growth_pct: float,
    opex_monthly: float,
    opex_inflation_pct: float,
    debt_service_monthly: float,
    years: int | None = None,
) -> pd.DataFrame:
    """Revenue, total expenses and free cash flow per year.

    Rent and OPEX compound at their own rates; debt service stays flat.
    ``margin_pct`` is free cash flow as a % of total expenses (0 when there
    are no expenses).

    Args:
        current_rent: Monthly rent in $
        rent_growth_pct: Annual rent growth %
        opex_monthly: Monthly OPEX in $
        opex_inflation_pct: Annual OPEX inflation %
        debt_service_monthly: Monthly mortgage payments in $
        years: Number of years (settings default 10), at least 1

    Returns:
        DataFrame with columns ``year``, ``revenue``, ``total_expenses``,
        ``free_cash_flow``, ``margin_pct``
    """
    horizon = _check_horizon("years", years if years is not None else get_settings().projection_years, minimum=1)

    i = np.arange(horizon)
    revenue = (current_rent or 0.0) * 12 * np.power(1 + (rent_growth_pct or 0.0) / 100.0, i)
    opex_total = (opex_monthly or 0.0) * 12 * np.power(1 + (opex_inflation_pct or 0.0) / 100.0, i)
    total_expenses = opex_total + (debt_service_monthly or 0.0) * 12
    free_cash_flow = revenue - total_expenses

    with np.errstate(divide="ignore", invalid="ignore"):
        margin = np.where(total_expenses != 0, free_cash_flow / total_expenses * 100, 0.0)

    return pd.DataFrame({
        "year": i + 1,
        "revenue": revenue,
        "total_expenses": total_expenses,
        "free_cash_flow": free_cash_flow,
        "margin_pct": margin,
    })


def safety_guidance(margin_pct: float) -> SafetyGuidance:
    """Map a free cash flow margin % to guidance."""
    if margin_pct >= 30:
        return SafetyGuidance.REFINANCE
    if margin_pct >= 20:
        return SafetyGuidance.DISTRIBUTE
    if margin_pct >= 15:
        return SafetyGuidance.MODERATE_RISK
    return SafetyGuidance.RETAIN_CASH


def guidance_for(projection: pd.DataFrame) -> SafetyGuidance:
    """Guidance from the last year of an income & safety projection."""
    if projection.empty:
        raise ProjectionError("projection", "empty", "needs at least one year")
    return safety_guidance(float(projection["margin_pct"].iloc[-1]))


def project_wealth_build(
    monthly_noi: float,
    cap_rate_pct: float,
    mortgages: Sequence[MortgageRecord | Mapping[str, Any]],
    months: int = 120,
    noi_growth_pct: float | None = None,
) -> pd.DataFrame:
    """Property value, loan balance and equity month by month.

    Value is NOI capitalised at today's cap rate, with NOI growing at a
    fixed annual rate (settings default 3%). Every loan is assumed to start
    at month 0.

    Args:
        monthly_noi: Current NOI per month in $
        cap_rate_pct: Cap rate % used to capitalise NOI
        mortgages: Mortgage rows (principal, interest_rate, term_months)
        months: Horizon in months; yields ``months + 1`` rows
        noi_growth_pct: Annual NOI growth %

    Returns:
        DataFrame with columns ``month``, ``property_value``, ``loan_balance``,
        ``equity`` (whole dollars)
    """
    horizon = _check_horizon("months", months)
    growth = noi_growth_pct if noi_growth_pct is not None else get_settings().noi_growth_pct
    loans = [m if isinstance(m, MortgageRecord) else MortgageRecord.model_validate(dict(m)) for m in mortgages]

    month = np.arange(horizon + 1)
    projected_noi = (monthly_noi or 0.0) * 12 * np.power(1 + growth / 100.0, month / 12.0)
    if cap_rate_pct and cap_rate_pct > 0:
        value = projected_noi / (cap_rate_pct / 100.0)
    else:
        value = np.zeros(len(month))

    balance = np.array([loan_balance_after(loans, int(m)) for m in month])
    equity = value - balance

    log.debug("wealth_build_projected", months=horizon, loans=len(loans), cap_rate=cap_rate_pct)

    return pd.DataFrame({
        "month": month,
        "property_value": _round_half_up(value),
        "loan_balance": _round_half_up(balance),
        "equity": _round_half_up(equity),
    })
