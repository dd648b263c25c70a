"""Loan calculation functions.

Payment and balance math for the mortgages table, used for debt service
and the wealth-build projection.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import numpy_financial as npf

from onepager.domain.models.records import MortgageRecord


def calculate_monthly_payment(
    principal: float,
    annual_rate_pct: float,
    term_months: int,
) -> float:
    """Calculate the amortizing monthly payment (principal + interest).

    Args:
        principal: Loan amount in $
        annual_rate_pct: Annual interest rate as percentage (e.g., 6.5 for 6.5%)
        term_months: Loan term in months

    Returns:
        Monthly payment amount in $
    """
    if principal <= 0 or term_months <= 0:
        return 0.0

    monthly_rate = (annual_rate_pct / 100.0) / 12.0

    if monthly_rate <= 0:
        return principal / term_months

    return float(-npf.pmt(monthly_rate, term_months, principal))


def calculate_remaining_balance(
    principal: float,
    annual_rate_pct: float,
    term_months: int,
    months_paid: int,
) -> float:
    """Calculate remaining loan balance after N monthly payments.

    Args:
        principal: Initial loan amount in $
        annual_rate_pct: Annual interest rate %
        term_months: Original loan term in months
        months_paid: Number of payments already made

    Returns:
        Remaining balance in $
    """
    if principal <= 0 or months_paid >= term_months:
        return 0.0

    if months_paid <= 0:
        return principal

    monthly_rate = (annual_rate_pct / 100.0) / 12.0

    if monthly_rate <= 0:
        return principal * (1 - months_paid / term_months)

    # Balance = P * [(1+r)^n - (1+r)^p] / [(1+r)^n - 1]
    factor_n = (1 + monthly_rate) ** term_months
    factor_p = (1 + monthly_rate) ** months_paid

    remaining = principal * (factor_n - factor_p) / (factor_n - 1)

    return max(0.0, remaining)


def _as_mortgage(row: MortgageRecord | Mapping[str, Any]) -> MortgageRecord:
    return row if isinstance(row, MortgageRecord) else MortgageRecord.model_validate(dict(row))


def mortgage_monthly_payment(mortgage: MortgageRecord | Mapping[str, Any]) -> float:
    """Stored payment if positive, else the amortizing payment from the loan terms."""
    m = _as_mortgage(mortgage)
    if m.monthly_payment is not None and m.monthly_payment > 0:
        return m.monthly_payment
    return calculate_monthly_payment(m.principal or 0.0, m.interest_rate or 0.0, m.term_months or 0)


def annual_debt_service(mortgages: Iterable[MortgageRecord | Mapping[str, Any]]) -> float:
    """Sum of monthly mortgage payments, annualised."""
    return sum(mortgage_monthly_payment(m) for m in mortgages) * 12


def total_principal(mortgages: Iterable[MortgageRecord | Mapping[str, Any]]) -> float:
    return sum(max(0.0, _as_mortgage(m).principal or 0.0) for m in mortgages)


def loan_balance_after(mortgages: Iterable[MortgageRecord | Mapping[str, Any]], months_paid: int) -> float:
    """Combined remaining balance of several loans after ``months_paid`` payments."""
    total = 0.0
    for row in mortgages:
        m = _as_mortgage(row)
        total += calculate_remaining_balance(
            m.principal or 0.0,
            m.interest_rate or 0.0,
            m.term_months or 0,
            months_paid,
        )
    return total
