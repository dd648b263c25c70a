"""Data models for onepager."""

from .metrics import MetricsSummary, PortfolioTotals, PropertyMetrics
from .period_amount import Period, PeriodAmount, Source
from .property import OpexContext, PropertyLike, PropertyRecord
from .records import (
    ExpenseCategory,
    ExpenseRecord,
    LeaseRecord,
    LeaseStatus,
    MortgageRecord,
    PaymentRecord,
    PaymentStatus,
)
from .rent_roll import ExpenseTotals, LeaseRow, RenewalSuggestion, RentRollMetrics, RowStatus

__all__ = [
    "Period",
    "Source",
    "PeriodAmount",
    "PropertyLike",
    "OpexContext",
    "PropertyRecord",
    "LeaseRecord",
    "LeaseStatus",
    "PaymentRecord",
    "PaymentStatus",
    "MortgageRecord",
    "ExpenseRecord",
    "ExpenseCategory",
    "MetricsSummary",
    "PropertyMetrics",
    "PortfolioTotals",
    "LeaseRow",
    "RowStatus",
    "RenewalSuggestion",
    "RentRollMetrics",
    "ExpenseTotals",
]
