"""Rent roll records for the tenants and leases panel."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, computed_field

from .records import ExpenseCategory


class RowStatus(str, Enum):
    """Payment/renewal badge shown next to a lease."""

    PAID = "paid"
    OVERDUE = "overdue"
    EXPIRING = "expiring"


class LeaseRow(BaseModel):
    id: str | None = None
    tenant: str = "Unknown"
    unit: str = "Unknown"
    monthly_rent: float = 0.0
    status: RowStatus = RowStatus.PAID
    days_overdue: int = 0
    lease_end: date | None = None
    start_date: date | None = None
    deposit: float = 0.0
    collected: float = Field(default=0.0, description="Paid amount for the current month")


class RenewalSuggestion(BaseModel):
    lease_id: str | None = None
    tenant: str
    lease_end: date | None = None
    monthly_rent: float
    suggested_rent: float


class RentRollMetrics(BaseModel):
    """Header cards of the dashboard."""

    collected: float = 0.0
    expected: float = 0.0
    active_leases: int = 0
    total_units: int = 0
    mrr: float = 0.0
    net_cash_flow: float = 0.0
    rows: list[LeaseRow] = Field(default_factory=list)

    @computed_field
    @property
    def arr(self) -> float:
        return self.mrr * 12

    @computed_field
    @property
    def occupancy(self) -> str:
        return f"{self.active_leases}/{self.total_units}"

    @computed_field
    @property
    def fully_collected(self) -> bool:
        return self.collected >= self.expected


class ExpenseTotals(BaseModel):
    total: float = 0.0
    by_category: dict[ExpenseCategory, float] = Field(default_factory=dict)
