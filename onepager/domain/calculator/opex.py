"""Operating expense normalization.

Turns a property's tax, insurance and percentage-of-rent columns into one
monthly OPEX figure. Tax and insurance are counted either as a separate
OPEX line or inside the mortgage escrow, never both.

Every function here is total: missing or unreadable data counts as zero
(or as "not included") instead of raising.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Mapping, Optional

from onepager.domain.models.period_amount import Period, PeriodAmount, Source
from onepager.domain.models.property import OpexContext, PropertyLike

Resolver = Callable[[PropertyLike], Optional[PeriodAmount]]


# --- Legacy column adapters ---
# Each cost category is resolved by trying these steps in order; the first
# step that yields an entry wins:
#   normalized field > "in mortgage" flag > legacy scalar column

def _normalized_field(field: str) -> Resolver:
    def resolve(prop: PropertyLike) -> PeriodAmount | None:
        return getattr(prop, field, None)
    return resolve


def _in_mortgage_flag(flag: str) -> Resolver:
    def resolve(prop: PropertyLike) -> PeriodAmount | None:
        if getattr(prop, flag, False):
            # Amount is irrelevant, include() always drops in_mortgage lines
            return PeriodAmount.monthly(0.0, Source.IN_MORTGAGE)
        return None
    return resolve


def _scalar_column(field: str, missing_source: Source) -> Resolver:
    def resolve(prop: PropertyLike) -> PeriodAmount:
        value = getattr(prop, field, None)
        if value is None:
            return PeriodAmount.monthly(0.0, missing_source)
        return PeriodAmount.monthly(value, Source.DIRECT)
    return resolve


TAX_RESOLVERS: tuple[Resolver, ...] = (
    _normalized_field("taxes"),
    _in_mortgage_flag("taxes_in_mortgage"),
    _scalar_column("property_taxes", Source.ESTIMATED),
)

INSURANCE_RESOLVERS: tuple[Resolver, ...] = (
    _normalized_field("hazard_insurance"),
    _in_mortgage_flag("insurance_in_mortgage"),
    _scalar_column("insurance", Source.UNKNOWN),
)


def _resolve(prop: PropertyLike, resolvers: tuple[Resolver, ...]) -> PeriodAmount | None:
    for step in resolvers:
        entry = step(prop)
        if entry is not None:
            return entry
    return None


def _as_period_amount(value: Any) -> PeriodAmount | None:
    if value is None or isinstance(value, PeriodAmount):
        return value
    if isinstance(value, Mapping):
        return PeriodAmount.model_validate(dict(value))
    return None


def _percent_of_rent(pct: float | None, monthly_rent: float) -> float:
    return max(0.0, (pct or 0.0) / 100.0 * monthly_rent)


def _round_half_up(value: float) -> int:
    """Whole dollars, halves rounded up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


class OpexCalculator:
    """Conversion, inclusion rules and aggregation of monthly OPEX."""

    @staticmethod
    def to_monthly(period_amount: PeriodAmount | Mapping[str, Any] | None) -> float:
        """Convert a cost line to monthly dollars, never negative.

        Args:
            period_amount: Entry to convert; absent entries and unreadable
                amounts count as 0.

        Returns:
            Monthly amount in $ (annual amounts divided by 12).
        """
        pa = _as_period_amount(period_amount)
        if pa is None or pa.amount is None:
            return 0.0
        base = pa.amount / 12.0 if pa.period is Period.ANNUAL else pa.amount
        return max(0.0, base)

    @staticmethod
    def include(
        period_amount: PeriodAmount | Mapping[str, Any] | None,
        context: OpexContext | Mapping[str, Any] | None = None,
    ) -> bool:
        """Whether a cost line counts as separate OPEX.

        - absent entry: no
        - ``in_mortgage``: never, whatever the context says
        - escrow active and the line is ``direct`` or ``estimated``: no,
          the servicer already pays it
        - otherwise: yes
        """
        pa = _as_period_amount(period_amount)
        if pa is None:
            return False
        if pa.source is Source.IN_MORTGAGE:
            return False
        ctx = OpexContext.coerce(context)
        if ctx.mortgage_includes_escrow and pa.source in (Source.DIRECT, Source.ESTIMATED):
            return False
        return True

    @staticmethod
    def legacy_taxes(prop: PropertyLike | Mapping[str, Any] | None) -> PeriodAmount | None:
        """Tax entry from ``taxes``, ``taxes_in_mortgage`` or ``property_taxes``.

        A missing ``property_taxes`` value yields a zero ``estimated`` entry.
        """
        return _resolve(PropertyLike.coerce(prop), TAX_RESOLVERS)

    @staticmethod
    def legacy_insurance(prop: PropertyLike | Mapping[str, Any] | None) -> PeriodAmount | None:
        """Insurance entry from ``hazard_insurance``, ``insurance_in_mortgage`` or ``insurance``.

        Unlike taxes, a missing ``insurance`` value is tagged ``unknown``.
        """
        return _resolve(PropertyLike.coerce(prop), INSURANCE_RESOLVERS)

    @classmethod
    def monthly_for_property(
        cls,
        prop: PropertyLike | Mapping[str, Any] | None,
        context: OpexContext | Mapping[str, Any] | None,
    ) -> int:
        """Monthly OPEX for a property, in whole dollars.

        Sums taxes, hazard insurance, management fee and maintenance reserve
        (both as % of ``context.monthly_rent``). Intermediate math keeps full
        precision; only the total is rounded.

        Args:
            prop: Property snapshot or ``properties`` row
            context: Rent basis and escrow flag

        Returns:
            Non-negative integer dollars per month.
        """
        p = PropertyLike.coerce(prop)
        ctx = OpexContext.coerce(context)

        taxes_pa = cls.legacy_taxes(p)
        ins_pa = cls.legacy_insurance(p)

        taxes = cls.to_monthly(taxes_pa) if cls.include(taxes_pa, ctx) else 0.0
        ins = cls.to_monthly(ins_pa) if cls.include(ins_pa, ctx) else 0.0

        mgmt = _percent_of_rent(p.mgmt_pct, ctx.monthly_rent)
        maint = _percent_of_rent(p.maintenance_pct, ctx.monthly_rent)

        total = taxes + ins + mgmt + maint
        if not math.isfinite(total):
            return 0
        return _round_half_up(total)
