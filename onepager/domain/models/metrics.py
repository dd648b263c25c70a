"""Computed metric records.

Nothing here is stored; these are return values handed to the dashboard.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field


class MetricsSummary(BaseModel):
    """Flat KPI bundle returned by ``MetricsCalculator.summary``."""

    noi: float = Field(..., description="Annual net operating income")
    cap: float = Field(..., description="Cap rate %")
    dcr: float = Field(..., description="Debt coverage ratio")
    roi: float = Field(..., description="Annual ROI %")
    coc: float = Field(..., description="Cash-on-cash return %")

    model_config = {"frozen": True}


class PropertyMetrics(BaseModel):
    """Everything the dashboard shows for one property."""

    property_id: str | None = None
    label: str = ""

    monthly_rent: float = Field(default=0.0, description="Vacancy-adjusted rent collected")
    opex_monthly: int = 0
    property_value: float = 0.0
    invested_equity: float = 0.0
    debt_service_annual: float = 0.0
    mortgage_includes_escrow: bool = False

    summary: MetricsSummary
    irr_10_year: float = 0.0
    dcr_healthy: bool = False

    @computed_field
    @property
    def cash_flow_annual(self) -> float:
        """NOI after debt service."""
        return self.summary.noi - self.debt_service_annual


class PortfolioTotals(BaseModel):
    """Sums across properties plus value-weighted ratios."""

    property_count: int = 0
    monthly_rent: float = 0.0
    opex_monthly: int = 0
    noi: float = 0.0
    debt_service_annual: float = 0.0
    property_value: float = 0.0
    invested_equity: float = 0.0
    cap: float = 0.0
    dcr: float = 0.0
    coc: float = 0.0

    @computed_field
    @property
    def cash_flow_annual(self) -> float:
        return self.noi - self.debt_service_annual
