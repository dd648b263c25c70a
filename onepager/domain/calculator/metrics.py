"""Income-property KPIs.

NOI, cap rate, DCR, ROI, cash-on-cash and a closed-form 10-year IRR
estimate. All methods are pure; a zero or negative denominator yields 0
rather than an error, and ``None`` inputs count as 0.
"""

from __future__ import annotations

from typing import Any, Mapping

from onepager.domain.calculator.opex import OpexCalculator
from onepager.domain.models.fields import as_number
from onepager.domain.models.metrics import MetricsSummary
from onepager.domain.models.property import OpexContext, PropertyLike

# Fixed assumptions of the IRR approximation
IRR_APPRECIATION_RATE = 0.03
IRR_HORIZON_YEARS = 10


def _num(value: Any) -> float:
    number = as_number(value)
    return number if number is not None else 0.0


class MetricsCalculator:
    """Property and portfolio level financial metrics."""

    @staticmethod
    def noi_annual(
        monthly_rent: float,
        prop: PropertyLike | Mapping[str, Any] | None,
        context: OpexContext | Mapping[str, Any] | None,
    ) -> float:
        """Net operating income per year.

        Args:
            monthly_rent: Rent actually collected (vacancy-adjusted by the caller)
            prop: Property snapshot passed to the OPEX calculator
            context: OPEX context (rent basis, escrow flag)

        Returns:
            (monthly_rent - monthly OPEX) * 12
        """
        opex_monthly = OpexCalculator.monthly_for_property(prop, context)
        return (_num(monthly_rent) - opex_monthly) * 12

    @staticmethod
    def cap_rate(noi_annual: float, property_value: float) -> float:
        """Cap rate % = NOI / property value."""
        value = _num(property_value)
        return (_num(noi_annual) / value) * 100 if value > 0 else 0.0

    @staticmethod
    def roi_annual(cash_flow_annual: float, property_value: float) -> float:
        """Annual ROI % = annual cash flow / property value."""
        value = _num(property_value)
        return (_num(cash_flow_annual) / value) * 100 if value > 0 else 0.0

    @staticmethod
    def dcr(noi_annual: float, debt_service_annual: float) -> float:
        """Debt coverage ratio = NOI / annual debt service.

        The 1.25 "healthy" threshold is a presentation concern and is not
        applied here.
        """
        debt_service = _num(debt_service_annual)
        return _num(noi_annual) / debt_service if debt_service > 0 else 0.0

    @staticmethod
    def cash_on_cash(cash_flow_annual: float, invested_equity: float) -> float:
        """Cash-on-cash % = annual cash flow / invested equity."""
        equity = _num(invested_equity)
        return (_num(cash_flow_annual) / equity) * 100 if equity > 0 else 0.0

    @staticmethod
    def irr_10_year(property_value: float, cash_flow_annual: float, invested_equity: float) -> float:
        """Approximate 10-year IRR %.

        Not a discounted cash flow solve: the property appreciates 3%/yr, the
        current annual cash flow repeats unchanged for 10 years, and the sum
        is annualised against invested equity (floored at $1, so a missing
        equity gives a huge, obviously abnormal figure instead of 0).

        Returns 0 when value plus cash flow is negative, since that ratio
        has no real 10th root.
        """
        future_value = _num(property_value) * (1 + IRR_APPRECIATION_RATE) ** IRR_HORIZON_YEARS
        total_cf = _num(cash_flow_annual) * IRR_HORIZON_YEARS
        base = max(_num(invested_equity), 1.0)
        ratio = (future_value + total_cf) / base
        if ratio < 0:
            return 0.0
        return (ratio ** (1 / IRR_HORIZON_YEARS) - 1) * 100

    @classmethod
    def summary(
        cls,
        monthly_rent: float,
        prop: PropertyLike | Mapping[str, Any] | None,
        context: OpexContext | Mapping[str, Any] | None,
        property_value: float,
        debt_service_annual: float | None = None,
        invested_equity: float | None = None,
    ) -> MetricsSummary:
        """NOI, cap rate, DCR, ROI and cash-on-cash in one record.

        ROI and cash-on-cash are fed NOI, not NOI after debt service. Callers
        wanting levered returns pass ``cash_flow_annual`` to ``roi_annual`` /
        ``cash_on_cash`` themselves.
        """
        noi = cls.noi_annual(monthly_rent, prop, context)
        return MetricsSummary(
            noi=noi,
            cap=cls.cap_rate(noi, property_value),
            dcr=cls.dcr(noi, debt_service_annual or 0.0),
            roi=cls.roi_annual(noi, property_value),
            coc=cls.cash_on_cash(noi, invested_equity or 0.0),
        )
