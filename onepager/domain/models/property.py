"""Property views used by the OPEX and metrics calculators.

``PropertyLike`` holds only the financial columns the calculators read, so
they stay independent of the full ``properties`` row. ``PropertyRecord`` is
that full row as the dashboard loads it.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator

from .fields import Flag, LenientFloat, LenientInt, LenientText
from .period_amount import PeriodAmount


class PropertyLike(BaseModel):
    """Read-only snapshot of a property's OPEX-relevant fields.

    A normalized ``taxes`` / ``hazard_insurance`` entry, when present, wins
    over the legacy scalar columns.
    """

    sale_price: LenientFloat = None
    mgmt_pct: LenientFloat = Field(default=None, description="Management fee, % of rent")
    maintenance_pct: LenientFloat = Field(default=None, description="Maintenance reserve, % of rent")

    # Legacy columns (monthly dollars)
    property_taxes: LenientFloat = None
    taxes_in_mortgage: Flag = False
    insurance: LenientFloat = None
    insurance_in_mortgage: Flag = False

    # Normalized shape
    taxes: PeriodAmount | None = None
    hazard_insurance: PeriodAmount | None = None

    model_config = {
        "frozen": True,
        "extra": "allow",
    }

    @field_validator("taxes", "hazard_insurance", mode="before")
    @classmethod
    def drop_unreadable_entries(cls, v: Any) -> Any:
        """Only mappings or PeriodAmount instances count as a normalized entry."""
        if isinstance(v, (PeriodAmount, Mapping)):
            return v
        return None

    @classmethod
    def coerce(cls, value: Any) -> PropertyLike:
        """Accept a model, a row mapping or None and return a snapshot."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        if isinstance(value, BaseModel):
            return cls.model_validate(value.model_dump())
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        return cls.model_validate(value, from_attributes=True)


class OpexContext(BaseModel):
    """Per-calculation parameters for OPEX.

    ``mortgage_includes_escrow`` is set when tax and insurance are paid
    through the mortgage servicer and must not appear again as OPEX.
    """

    monthly_rent: LenientFloat = Field(default=0.0, description="Rent basis for percentage expenses")
    mortgage_includes_escrow: Flag = False

    model_config = {
        "frozen": True,
        "extra": "ignore",
    }

    @field_validator("monthly_rent", mode="after")
    @classmethod
    def missing_rent_is_zero(cls, v: float | None) -> float:
        return v if v is not None else 0.0

    @classmethod
    def coerce(cls, value: Any) -> OpexContext:
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        return cls.model_validate(value, from_attributes=True)


class PropertyRecord(PropertyLike):
    """Row of the ``properties`` table."""

    id: LenientText = None
    address: LenientText = None
    alias: LenientText = None
    property_type: LenientText = Field(default=None, description="Single-Family, Multi-Family, ...")

    property_value: LenientFloat = None
    purchase_price: LenientFloat = None
    mortgage_payment: LenientFloat = Field(default=None, description="Monthly mortgage payment")
    total_units: LenientInt = None
    vacancy_pct: LenientFloat = None

    rent_growth_rate: LenientFloat = Field(default=None, description="Annual rent growth %")
    opex_inflation_rate: LenientFloat = Field(default=None, description="Annual OPEX inflation %")

    @property
    def label(self) -> str:
        """Alias if set, else address, else id."""
        return self.alias or self.address or self.id or "Unnamed property"

    @property
    def valuation(self) -> float:
        """Best available property value: appraisal, then sale, then purchase price."""
        for candidate in (self.property_value, self.sale_price, self.purchase_price):
            if candidate is not None and candidate > 0:
                return candidate
        return 0.0
