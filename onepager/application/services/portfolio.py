"""Portfolio metrics service.

Assembles calculator inputs from store rows: collected rent from leases,
debt service and equity from mortgages, valuation from the property row.
Then runs the OPEX and metrics calculators per property and rolls the
results up for the portfolio header.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from onepager.core.logging import get_logger
from onepager.core.settings import AppSettings, get_settings
from onepager.domain.calculator.financial import annual_debt_service, total_principal
from onepager.domain.calculator.metrics import MetricsCalculator
from onepager.domain.calculator.opex import OpexCalculator
from onepager.domain.models.fields import as_number
from onepager.domain.models.metrics import PortfolioTotals, PropertyMetrics
from onepager.domain.models.property import OpexContext, PropertyRecord
from onepager.domain.models.records import LeaseRecord, MortgageRecord

log = get_logger(__name__)

PropertyInput = PropertyRecord | Mapping[str, Any]
LeaseInput = LeaseRecord | Mapping[str, Any]
MortgageInput = MortgageRecord | Mapping[str, Any]


def _as_property(row: PropertyInput) -> PropertyRecord:
    return row if isinstance(row, PropertyRecord) else PropertyRecord.model_validate(dict(row))


def _as_lease(row: LeaseInput) -> LeaseRecord:
    return row if isinstance(row, LeaseRecord) else LeaseRecord.model_validate(dict(row))


def _as_mortgage(row: MortgageInput) -> MortgageRecord:
    return row if isinstance(row, MortgageRecord) else MortgageRecord.model_validate(dict(row))


def estimate_property_taxes(sale_price: float | None, rate_pct: float | None = None) -> int | None:
    """Tax figure pre-filled by the properties table when not overridden.

    Args:
        sale_price: Sale price in $
        rate_pct: Estimate rate, % of sale price (defaults to settings, 1.3%)

    Returns:
        Whole dollars, or None without a positive sale price.
    """
    price = as_number(sale_price)
    if price is None or price <= 0:
        return None
    rate = rate_pct if rate_pct is not None else get_settings().tax_estimate_rate_pct
    return int(price * rate / 100.0 + 0.5)


def collected_rent(
    prop: PropertyInput,
    leases: Iterable[LeaseInput],
    default_vacancy_pct: float | None = None,
) -> float:
    """Monthly rent of occupied leases, reduced by the property's vacancy %.

    Args:
        prop: Property row (``vacancy_pct`` read from it)
        leases: Leases already scoped to this property
        default_vacancy_pct: Used when the row has no vacancy figure

    Returns:
        Vacancy-adjusted monthly rent in $
    """
    p = _as_property(prop)
    gross = sum(lease.rent for lease in map(_as_lease, leases) if lease.is_occupied)

    vacancy = p.vacancy_pct
    if vacancy is None:
        vacancy = default_vacancy_pct if default_vacancy_pct is not None else get_settings().default_vacancy_pct
    vacancy = min(100.0, max(0.0, vacancy))

    return gross * (1 - vacancy / 100.0)


def invested_equity(prop: PropertyInput, mortgages: Iterable[MortgageInput]) -> float:
    """Cash put in: purchase (or sale) price less borrowed principal."""
    p = _as_property(prop)
    basis = p.purchase_price or p.sale_price or 0.0
    return max(0.0, basis - total_principal(mortgages))


def compute_property_metrics(
    prop: PropertyInput,
    leases: Sequence[LeaseInput],
    mortgages: Sequence[MortgageInput],
    mortgage_includes_escrow: bool = False,
    settings: AppSettings | None = None,
) -> PropertyMetrics:
    """Compute every dashboard KPI for one property.

    Args:
        prop: Property row
        leases: Leases scoped to this property
        mortgages: Mortgages scoped to this property
        mortgage_includes_escrow: Tax and insurance paid through the servicer
        settings: Optional settings override

    Returns:
        PropertyMetrics with the calculator summary, debt service, equity and
        the 10-year IRR estimate.
    """
    cfg = settings or get_settings()
    p = _as_property(prop)
    loans = [_as_mortgage(m) for m in mortgages]

    rent = collected_rent(p, leases, cfg.default_vacancy_pct)
    ctx = OpexContext(monthly_rent=rent, mortgage_includes_escrow=mortgage_includes_escrow)
    opex = OpexCalculator.monthly_for_property(p, ctx)

    value = p.valuation
    if loans:
        debt_service = annual_debt_service(loans)
    else:
        # Older rows only carry a single mortgage_payment column
        debt_service = max(0.0, p.mortgage_payment or 0.0) * 12
    equity = invested_equity(p, loans)

    summary = MetricsCalculator.summary(
        rent,
        p,
        ctx,
        value,
        debt_service_annual=debt_service,
        invested_equity=equity,
    )
    cash_flow = summary.noi - debt_service
    irr = MetricsCalculator.irr_10_year(value, cash_flow, equity)

    log.debug(
        "property_metrics_computed",
        property_id=p.id,
        rent=round(rent, 2),
        opex=opex,
        noi=round(summary.noi, 2),
        dcr=round(summary.dcr, 3),
        escrow=mortgage_includes_escrow,
    )

    return PropertyMetrics(
        property_id=p.id,
        label=p.label,
        monthly_rent=rent,
        opex_monthly=opex,
        property_value=value,
        invested_equity=equity,
        debt_service_annual=debt_service,
        mortgage_includes_escrow=mortgage_includes_escrow,
        summary=summary,
        irr_10_year=irr,
        dcr_healthy=summary.dcr >= cfg.healthy_dcr,
    )


def _scope(rows: list[Any], prop: PropertyRecord, single: bool) -> list[Any]:
    """Rows of ``prop``; rows without a property id go to a lone property."""
    return [
        r for r in rows
        if (r.property_id is not None and r.property_id == prop.id) or (single and r.property_id is None)
    ]


def compute_portfolio_metrics(
    properties: Sequence[PropertyInput],
    leases: Sequence[LeaseInput],
    mortgages: Sequence[MortgageInput],
    escrow_by_property: Mapping[str, bool] | None = None,
    settings: AppSettings | None = None,
) -> tuple[list[PropertyMetrics], PortfolioTotals]:
    """Per-property metrics plus portfolio totals.

    Args:
        properties: Property rows
        leases: All lease rows (scoped through their ``property_id``)
        mortgages: All mortgage rows
        escrow_by_property: property id -> mortgage escrow flag
        settings: Optional settings override

    Returns:
        Tuple of (per-property metrics, totals)
    """
    cfg = settings or get_settings()
    escrow = escrow_by_property or {}
    props = [_as_property(p) for p in properties]
    lease_rows = [_as_lease(l) for l in leases]
    loan_rows = [_as_mortgage(m) for m in mortgages]
    single = len(props) == 1

    known_ids = {p.id for p in props if p.id is not None}
    orphans = [
        l.id for l in lease_rows
        if l.property_id not in known_ids and not (single and l.property_id is None)
    ]
    if orphans:
        log.debug("leases_without_property_skipped", count=len(orphans), lease_ids=orphans)

    results = [
        compute_property_metrics(
            p,
            _scope(lease_rows, p, single),
            _scope(loan_rows, p, single),
            mortgage_includes_escrow=bool(p.id and escrow.get(p.id, False)),
            settings=cfg,
        )
        for p in props
    ]

    noi = sum(r.summary.noi for r in results)
    debt_service = sum(r.debt_service_annual for r in results)
    value = sum(r.property_value for r in results)
    equity = sum(r.invested_equity for r in results)

    totals = PortfolioTotals(
        property_count=len(results),
        monthly_rent=sum(r.monthly_rent for r in results),
        opex_monthly=sum(r.opex_monthly for r in results),
        noi=noi,
        debt_service_annual=debt_service,
        property_value=value,
        invested_equity=equity,
        cap=MetricsCalculator.cap_rate(noi, value),
        dcr=MetricsCalculator.dcr(noi, debt_service),
        coc=MetricsCalculator.cash_on_cash(noi, equity),
    )

    log.info(
        "portfolio_metrics_computed",
        properties=totals.property_count,
        noi=round(noi, 2),
        cap=round(totals.cap, 2),
    )
    return results, totals
