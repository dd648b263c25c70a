"""Rows of the hosted tables the dashboard reads.

Lease rows may arrive with their joins embedded (``tenant``, ``unit`` and
``payments``), the way the leases query selects them; those are flattened
on validation.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator, model_validator

from .fields import LenientDate, LenientFloat, LenientInt, LenientText


class LeaseStatus(str, Enum):
    ACTIVE = "active"
    EXPIRING = "expiring"
    EXPIRED = "expired"
    VACANT = "vacant"


class PaymentStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"
    PARTIAL = "partial"


class ExpenseCategory(str, Enum):
    REPAIRS = "repairs"
    PM = "pm"
    TAX = "tax"
    INSURANCE = "insurance"
    CAPEX = "capex"
    UTILITIES = "utilities"
    HOA = "hoa"
    ADVERTISING = "advertising"
    OTHER = "other"


def _enum_or(enum_cls: type[Enum], value: Any, default: Any) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


class PaymentRecord(BaseModel):
    """Row of the ``payments`` table."""

    id: LenientText = None
    lease_id: LenientText = None
    amount_due: LenientFloat = None
    due_date: LenientDate = None
    paid_amount: LenientFloat = None
    paid_date: LenientDate = None
    status: PaymentStatus | None = None

    model_config = {"extra": "allow"}

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        return None if v is None else _enum_or(PaymentStatus, v, None)


class LeaseRecord(BaseModel):
    """Row of the ``leases`` table, optionally with its joins."""

    id: LenientText = None
    unit_id: LenientText = None
    tenant_id: LenientText = None
    property_id: LenientText = Field(default=None, description="From the joined unit row")
    tenant_name: LenientText = None
    unit_label: LenientText = None

    monthly_rent: LenientFloat = None
    deposit: LenientFloat = None
    start_date: LenientDate = None
    end_date: LenientDate = None
    status: LeaseStatus | None = None
    vacancy_rate: LenientFloat = None

    payments: list[PaymentRecord] = Field(default_factory=list)

    model_config = {"extra": "allow"}

    @model_validator(mode="before")
    @classmethod
    def flatten_joins(cls, data: Any) -> Any:
        """Lift tenant name, unit label and property id out of joined rows."""
        if not isinstance(data, Mapping):
            return data
        row = dict(data)
        tenant = row.pop("tenant", None)
        unit = row.pop("unit", None)
        if isinstance(tenant, Mapping):
            row.setdefault("tenant_name", tenant.get("name"))
            row.setdefault("tenant_id", tenant.get("id"))
        if isinstance(unit, Mapping):
            row.setdefault("unit_label", unit.get("unit_label"))
            row.setdefault("unit_id", unit.get("id"))
            row.setdefault("property_id", unit.get("property_id"))
        if not isinstance(row.get("payments"), list):
            row["payments"] = []
        return row

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        return None if v is None else _enum_or(LeaseStatus, v, None)

    @property
    def rent(self) -> float:
        return self.monthly_rent or 0.0

    @property
    def is_occupied(self) -> bool:
        """Active and expiring leases count toward occupancy."""
        return self.status in (LeaseStatus.ACTIVE, LeaseStatus.EXPIRING)

    def payment_for_month(self, today: date, payments: list[PaymentRecord] | None = None) -> PaymentRecord | None:
        """First payment due in the same calendar month as ``today``."""
        for payment in payments if payments is not None else self.payments:
            due = payment.due_date
            if due is not None and due.year == today.year and due.month == today.month:
                return payment
        return None


class MortgageRecord(BaseModel):
    """Row of the ``mortgages`` table."""

    id: LenientText = None
    property_id: LenientText = None
    loan_name: LenientText = None
    principal: LenientFloat = None
    interest_rate: LenientFloat = Field(default=None, description="Annual rate %")
    term_months: LenientInt = None
    monthly_payment: LenientFloat = None
    start_date: LenientDate = None

    model_config = {"extra": "allow"}


class ExpenseRecord(BaseModel):
    """Row of the ``expenses`` table."""

    id: LenientText = None
    property_id: LenientText = None
    unit_id: LenientText = None
    amount: LenientFloat = None
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: LenientDate = None
    memo: LenientText = None

    model_config = {"extra": "allow"}

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        return _enum_or(ExpenseCategory, v, ExpenseCategory.OTHER)
