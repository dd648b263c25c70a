"""Unit tests for the portfolio metrics service."""

import pytest

from onepager.application.services.portfolio import (
    collected_rent,
    compute_portfolio_metrics,
    compute_property_metrics,
    estimate_property_taxes,
    invested_equity,
)
from onepager.domain.calculator.metrics import MetricsCalculator


def _lease(lease_id, rent, property_id="prop-1", status="active"):
    return {"id": lease_id, "monthly_rent": rent, "status": status, "unit": {"property_id": property_id}}


class TestEstimatePropertyTaxes:
    """Tests for estimate_property_taxes."""

    def test_default_rate(self, settings):
        assert estimate_property_taxes(300000, settings.tax_estimate_rate_pct) == 3900

    def test_rounds_half_up(self):
        assert estimate_property_taxes(50, 1.0) == 1

    @pytest.mark.parametrize("price", [None, 0, -100, "n/a"])
    def test_no_price(self, price):
        assert estimate_property_taxes(price, 1.3) is None


class TestInputs:
    """Tests for the rent and equity inputs."""

    def test_collected_rent_counts_occupied(self, property_row, lease_rows):
        assert collected_rent(property_row, lease_rows) == 2700

    def test_vacancy_applied(self, property_row, lease_rows):
        assert collected_rent(property_row | {"vacancy_pct": 10}, lease_rows) == pytest.approx(2430)

    def test_default_vacancy(self, property_row, lease_rows):
        row = property_row | {"vacancy_pct": None}
        assert collected_rent(row, lease_rows, default_vacancy_pct=5) == pytest.approx(2565)

    def test_vacancy_clamped(self, property_row, lease_rows):
        assert collected_rent(property_row | {"vacancy_pct": 150}, lease_rows) == 0
        assert collected_rent(property_row | {"vacancy_pct": -20}, lease_rows) == 2700

    def test_invested_equity(self, property_row, mortgage_rows):
        assert invested_equity(property_row, mortgage_rows) == 60000

    def test_equity_never_negative(self, property_row):
        assert invested_equity(property_row, [{"principal": 400000}]) == 0

    def test_equity_falls_back_to_sale_price(self):
        assert invested_equity({"sale_price": 200000}, []) == 200000


class TestComputePropertyMetrics:
    """Tests for compute_property_metrics."""

    def test_reference_property(self, property_row, mortgage_rows, settings):
        leases = [_lease("l1", 1000), _lease("l2", 1000)]
        m = compute_property_metrics(property_row, leases, mortgage_rows, settings=settings)
        assert m.monthly_rent == 2000
        assert m.opex_monthly == 560
        assert m.summary.noi == 17280
        assert m.summary.cap == pytest.approx(5.76)
        assert m.debt_service_annual == 18000
        assert m.summary.dcr == pytest.approx(0.96)
        assert m.dcr_healthy is False
        assert m.invested_equity == 60000
        assert m.summary.coc == pytest.approx(28.8)
        assert m.cash_flow_annual == -720
        assert m.label == "Elm"

    def test_fixture_leases(self, property_row, lease_rows, mortgage_rows, settings):
        m = compute_property_metrics(property_row, lease_rows, mortgage_rows, settings=settings)
        assert m.monthly_rent == 2700
        assert m.opex_monthly == 651
        assert m.summary.noi == 24588
        assert m.dcr_healthy is True
        assert m.irr_10_year == pytest.approx(MetricsCalculator.irr_10_year(300000, 24588 - 18000, 60000))

    def test_escrow_lowers_opex(self, property_row, lease_rows, mortgage_rows, settings):
        m = compute_property_metrics(property_row, lease_rows, mortgage_rows, mortgage_includes_escrow=True,
                                     settings=settings)
        assert m.opex_monthly == 351
        assert m.summary.noi == 28188
        assert m.mortgage_includes_escrow is True

    def test_legacy_mortgage_payment_column(self, property_row, lease_rows, settings):
        m = compute_property_metrics(property_row, lease_rows, [], settings=settings)
        assert m.debt_service_annual == 12000
        assert m.invested_equity == 300000

    def test_no_leases(self, property_row, settings):
        m = compute_property_metrics(property_row, [], [], settings=settings)
        assert m.monthly_rent == 0
        assert m.opex_monthly == 300
        assert m.summary.noi == -3600

    def test_appraised_value_used(self, property_row, lease_rows, mortgage_rows, settings):
        m = compute_property_metrics(property_row | {"property_value": 400000}, lease_rows, mortgage_rows,
                                     settings=settings)
        assert m.property_value == 400000
        assert m.summary.cap == pytest.approx(24588 / 400000 * 100)


class TestComputePortfolioMetrics:
    """Tests for compute_portfolio_metrics."""

    @pytest.fixture
    def second_property(self):
        return {
            "id": "prop-2",
            "alias": "Oak",
            "sale_price": 200000,
            "property_taxes": 150,
            "insurance": 80,
            "mgmt_pct": 10,
            "maintenance_pct": 5,
            "vacancy_pct": 0,
        }

    def test_scopes_rows_by_property(self, property_row, second_property, mortgage_rows, settings):
        leases = [_lease("l1", 1000), _lease("l2", 1000), _lease("l3", 1800, property_id="prop-2")]
        results, totals = compute_portfolio_metrics(
            [property_row, second_property], leases, mortgage_rows, settings=settings,
        )
        first, second = results
        assert first.monthly_rent == 2000
        assert second.monthly_rent == 1800
        assert second.debt_service_annual == 0
        assert second.summary.dcr == 0
        assert totals.property_count == 2
        assert totals.noi == first.summary.noi + second.summary.noi
        assert totals.debt_service_annual == 18000
        assert totals.property_value == 500000

    def test_totals_ratios(self, property_row, second_property, mortgage_rows, settings):
        leases = [_lease("l1", 1000), _lease("l2", 1000), _lease("l3", 1800, property_id="prop-2")]
        _, totals = compute_portfolio_metrics([property_row, second_property], leases, mortgage_rows,
                                              settings=settings)
        assert totals.cap == pytest.approx(totals.noi / totals.property_value * 100)
        assert totals.dcr == pytest.approx(totals.noi / 18000)
        assert totals.coc == pytest.approx(totals.noi / totals.invested_equity * 100)

    def test_escrow_per_property(self, property_row, second_property, settings):
        leases = [_lease("l1", 2000), _lease("l3", 1800, property_id="prop-2")]
        results, _ = compute_portfolio_metrics(
            [property_row, second_property], leases, [], escrow_by_property={"prop-2": True}, settings=settings,
        )
        assert results[0].mortgage_includes_escrow is False
        assert results[1].mortgage_includes_escrow is True
        assert results[1].opex_monthly == 270

    def test_unscoped_rows_go_to_single_property(self, property_row, settings):
        leases = [{"id": "l1", "monthly_rent": 2000, "status": "active"}]
        mortgages = [{"principal": 240000, "monthly_payment": 1500}]
        results, _ = compute_portfolio_metrics([property_row], leases, mortgages, settings=settings)
        assert results[0].monthly_rent == 2000
        assert results[0].debt_service_annual == 18000

    def test_orphan_leases_skipped(self, property_row, second_property, settings):
        leases = [_lease("l1", 2000), _lease("lx", 5000, property_id="gone"),
                  {"id": "ly", "monthly_rent": 700, "status": "active"}]
        results, totals = compute_portfolio_metrics([property_row, second_property], leases, [], settings=settings)
        assert totals.monthly_rent == 2000

    def test_empty_portfolio(self, settings):
        results, totals = compute_portfolio_metrics([], [], [], settings=settings)
        assert results == []
        assert totals.property_count == 0
        assert totals.cap == 0
        assert totals.dcr == 0
