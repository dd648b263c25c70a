"""OPEX, metrics and loan calculators."""

from .financial import (
    annual_debt_service,
    calculate_monthly_payment,
    calculate_remaining_balance,
    loan_balance_after,
    mortgage_monthly_payment,
    total_principal,
)
from .metrics import MetricsCalculator
from .opex import OpexCalculator

__all__ = [
    "OpexCalculator",
    "MetricsCalculator",
    "calculate_monthly_payment",
    "calculate_remaining_balance",
    "mortgage_monthly_payment",
    "annual_debt_service",
    "total_principal",
    "loan_balance_after",
]
