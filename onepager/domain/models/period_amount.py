"""Recurring cost line with billing period and provenance."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .fields import LenientFloat


class Period(str, Enum):
    MONTHLY = "monthly"
    ANNUAL = "annual"


class Source(str, Enum):
    """Where a cost figure came from."""

    DIRECT = "direct"
    ESTIMATED = "estimated"
    IN_MORTGAGE = "in_mortgage"
    UNKNOWN = "unknown"


class PeriodAmount(BaseModel):
    """One recurring cost (property tax, hazard insurance, ...).

    ``amount`` is kept as given; negative or unreadable amounts are
    neutralised when converted with ``OpexCalculator.to_monthly``.
    """

    amount: LenientFloat = Field(default=0.0, description="Dollar value in the stated period")
    period: Period = Field(default=Period.MONTHLY, description="Billing period")
    source: Source = Field(default=Source.UNKNOWN, description="Provenance of the amount")

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @field_validator("period", mode="before")
    @classmethod
    def normalize_period(cls, v: Any) -> Any:
        """Anything other than 'annual' is billed monthly."""
        if isinstance(v, Period):
            return v
        return Period.ANNUAL if str(v or "").strip().lower() == "annual" else Period.MONTHLY

    @field_validator("source", mode="before")
    @classmethod
    def normalize_source(cls, v: Any) -> Any:
        if isinstance(v, Source):
            return v
        try:
            return Source(str(v or "").strip().lower())
        except ValueError:
            return Source.UNKNOWN

    @classmethod
    def monthly(cls, amount: float | None, source: Source) -> PeriodAmount:
        """Shortcut for the monthly entries synthesised from legacy columns."""
        return cls(amount=amount, period=Period.MONTHLY, source=source)
