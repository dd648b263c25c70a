"""Rent roll service.

Builds the tenants & leases panel and the header cards of the dashboard:
payment status per lease, collected vs expected rent, occupancy, MRR/ARR,
net cash flow, renewal suggestions and expense totals.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from onepager.core.logging import get_logger
from onepager.core.settings import get_settings
from onepager.domain.models.property import PropertyRecord
from onepager.domain.models.records import (
    ExpenseCategory,
    ExpenseRecord,
    LeaseRecord,
    PaymentRecord,
    PaymentStatus,
)
from onepager.domain.models.rent_roll import (
    ExpenseTotals,
    LeaseRow,
    RenewalSuggestion,
    RentRollMetrics,
    RowStatus,
)

log = get_logger(__name__)

STATUS_FILTERS = {"all", "paid", "overdue", "expiring"}


def _as_lease(row: LeaseRecord | Mapping[str, Any]) -> LeaseRecord:
    return row if isinstance(row, LeaseRecord) else LeaseRecord.model_validate(dict(row))


def _as_payment(row: PaymentRecord | Mapping[str, Any]) -> PaymentRecord:
    return row if isinstance(row, PaymentRecord) else PaymentRecord.model_validate(dict(row))


def _as_expense(row: ExpenseRecord | Mapping[str, Any]) -> ExpenseRecord:
    return row if isinstance(row, ExpenseRecord) else ExpenseRecord.model_validate(dict(row))


def _payments_of(lease: LeaseRecord, payments: Sequence[PaymentRecord] | None) -> list[PaymentRecord]:
    """Embedded payments, or the rows of ``payments`` belonging to the lease."""
    if payments is None:
        return list(lease.payments)
    return [p for p in payments if p.lease_id is not None and p.lease_id == lease.id]


def classify_lease(
    lease: LeaseRecord | Mapping[str, Any],
    payments: Sequence[PaymentRecord | Mapping[str, Any]] | None = None,
    today: date | None = None,
    expiring_window_days: int | None = None,
) -> LeaseRow:
    """Status badge and collected amount for one lease.

    Rules, in order:
    1. default status is ``paid``
    2. this month's payment: ``paid`` counts its paid amount as collected,
       ``overdue`` flags the lease and counts days since the due date
    3. a lease ending within the window (but not already ended) is
       ``expiring``, which wins over ``overdue``

    Args:
        lease: Lease row, optionally with embedded ``payments``
        payments: Payment rows to search instead of the embedded ones
        today: Reference date (defaults to today)
        expiring_window_days: Days before end flagged as expiring (settings default 60)

    Returns:
        LeaseRow for the rent roll table
    """
    row = _as_lease(lease)
    today = today or date.today()
    window = expiring_window_days if expiring_window_days is not None else get_settings().expiring_window_days
    own_payments = _payments_of(row, [_as_payment(p) for p in payments] if payments is not None else None)

    status = RowStatus.PAID
    days_overdue = 0
    collected = 0.0

    current = row.payment_for_month(today, own_payments)
    if current is not None:
        if current.status is PaymentStatus.PAID:
            collected = current.paid_amount or 0.0
        elif current.status is PaymentStatus.OVERDUE:
            status = RowStatus.OVERDUE
            if current.due_date is not None:
                days_overdue = max(0, (today - current.due_date).days)

    if row.end_date is not None:
        days_until_end = (row.end_date - today).days
        if 0 < days_until_end <= window:
            status = RowStatus.EXPIRING

    return LeaseRow(
        id=row.id,
        tenant=row.tenant_name or "Unknown",
        unit=row.unit_label or "Unknown",
        monthly_rent=row.rent,
        status=status,
        days_overdue=days_overdue,
        lease_end=row.end_date,
        start_date=row.start_date,
        deposit=row.deposit or 0.0,
        collected=collected,
    )


def expense_totals(expenses: Iterable[ExpenseRecord | Mapping[str, Any]]) -> ExpenseTotals:
    """Total spend and spend per category."""
    by_category: dict[ExpenseCategory, float] = defaultdict(float)
    for expense in map(_as_expense, expenses):
        by_category[expense.category] += expense.amount or 0.0
    return ExpenseTotals(total=sum(by_category.values()), by_category=dict(by_category))


def _total_units(prop: PropertyRecord | None, leases: Sequence[LeaseRecord]) -> int:
    if prop is not None and prop.total_units and prop.total_units > 0:
        return prop.total_units
    units = {l.unit_id or l.unit_label or l.id for l in leases}
    units.discard(None)
    return len(units) if units else len(leases)


def rent_roll_metrics(
    leases: Sequence[LeaseRecord | Mapping[str, Any]],
    payments: Sequence[PaymentRecord | Mapping[str, Any]] | None = None,
    expenses: Iterable[ExpenseRecord | Mapping[str, Any]] = (),
    prop: PropertyRecord | Mapping[str, Any] | None = None,
    today: date | None = None,
    expiring_window_days: int | None = None,
) -> RentRollMetrics:
    """Dashboard header cards and the classified lease rows.

    MRR counts every lease's rent (expected this month); collected counts
    only this month's paid amounts. Net cash flow subtracts all expenses
    and the property's monthly mortgage payment from collected rent.

    Args:
        leases: Lease rows
        payments: Payment rows, when not embedded in the leases
        expenses: Expense rows
        prop: Property row (``total_units`` and ``mortgage_payment``)
        today: Reference date (defaults to today)
        expiring_window_days: Window passed to ``classify_lease``

    Returns:
        RentRollMetrics
    """
    today = today or date.today()
    lease_rows = [_as_lease(l) for l in leases]
    payment_rows = [_as_payment(p) for p in payments] if payments is not None else None
    property_row = None
    if prop is not None:
        property_row = prop if isinstance(prop, PropertyRecord) else PropertyRecord.model_validate(dict(prop))

    rows = [
        classify_lease(l, payment_rows, today, expiring_window_days)
        for l in lease_rows
    ]

    mrr = sum(l.rent for l in lease_rows)
    collected = sum(r.collected for r in rows)
    spend = expense_totals(expenses).total
    mortgage = max(0.0, property_row.mortgage_payment or 0.0) if property_row is not None else 0.0

    metrics = RentRollMetrics(
        collected=collected,
        expected=mrr,
        active_leases=sum(1 for l in lease_rows if l.is_occupied),
        total_units=_total_units(property_row, lease_rows),
        mrr=mrr,
        net_cash_flow=collected - spend - mortgage,
        rows=rows,
    )
    log.debug(
        "rent_roll_computed",
        leases=len(rows),
        collected=collected,
        expected=mrr,
        occupancy=metrics.occupancy,
    )
    return metrics


def filter_leases(rows: Iterable[LeaseRow], status_filter: str = "all") -> list[LeaseRow]:
    """Rows matching a filter bar value; unknown values show everything."""
    key = (status_filter or "all").lower()
    if key not in STATUS_FILTERS or key == "all":
        return list(rows)
    return [r for r in rows if r.status.value == key]


def renewal_suggestions(
    rows: Iterable[LeaseRow],
    limit: int | None = None,
    bump_pct: float | None = None,
) -> list[RenewalSuggestion]:
    """Next renewals with a suggested rent increase.

    Args:
        rows: Classified lease rows, in display order
        limit: How many to return (settings default 3)
        bump_pct: Suggested increase % (settings default 5)

    Returns:
        Up to ``limit`` suggestions for expiring leases
    """
    cfg = get_settings()
    limit = limit if limit is not None else cfg.renewal_suggestion_limit
    bump = bump_pct if bump_pct is not None else cfg.renewal_bump_pct

    expiring = [r for r in rows if r.status is RowStatus.EXPIRING][: max(0, limit)]
    return [
        RenewalSuggestion(
            lease_id=r.id,
            tenant=r.tenant,
            lease_end=r.lease_end,
            monthly_rent=r.monthly_rent,
            suggested_rent=r.monthly_rent * (1 + bump / 100.0),
        )
        for r in expiring
    ]
