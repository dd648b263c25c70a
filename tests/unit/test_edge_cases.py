"""Edge case tests for malformed store rows.

Rows come from a loosely typed hosted database. Every calculator must
stay total: missing, negative or unreadable inputs degrade to zero
instead of raising.
"""

import math

import pytest

from onepager.application.services.portfolio import compute_property_metrics
from onepager.application.services.rent_roll import classify_lease, rent_roll_metrics
from onepager.domain.calculator.metrics import MetricsCalculator
from onepager.domain.calculator.opex import OpexCalculator
from onepager.domain.models.period_amount import PeriodAmount, Source


class TestOpexEdgeCases:
    """Edge cases for OPEX."""

    def test_both_representations_present(self):
        """Normalized entries win even when the legacy flags disagree."""
        prop = {
            "taxes": {"amount": 1200, "period": "annual", "source": "direct"},
            "property_taxes": 999,
            "taxes_in_mortgage": True,
            "hazard_insurance": {"amount": 50, "source": "in_mortgage"},
            "insurance": 500,
        }
        assert OpexCalculator.monthly_for_property(prop, {"monthly_rent": 0}) == 100

    def test_negative_percentages(self):
        prop = {"mgmt_pct": -8, "maintenance_pct": -5, "property_taxes": 100}
        assert OpexCalculator.monthly_for_property(prop, {"monthly_rent": 2000}) == 100

    def test_negative_legacy_scalars(self):
        assert OpexCalculator.monthly_for_property({"property_taxes": -300, "insurance": -50}, {}) == 0

    def test_huge_values_stay_finite(self):
        prop = {"property_taxes": 1e12, "mgmt_pct": 100}
        result = OpexCalculator.monthly_for_property(prop, {"monthly_rent": 1e9})
        assert result == 1_001_000_000_000

    def test_numeric_strings(self):
        prop = {"mgmt_pct": "8", "maintenance_pct": "5", "property_taxes": "200", "insurance": "100"}
        assert OpexCalculator.monthly_for_property(prop, {"monthly_rent": "2000"}) == 560

    def test_flag_as_string(self):
        prop = {"property_taxes": 200, "taxes_in_mortgage": "true"}
        assert OpexCalculator.monthly_for_property(prop, {}) == 0

    def test_in_mortgage_entry_with_amount(self):
        """An in_mortgage amount never reaches OPEX, whatever its value."""
        prop = {"hazard_insurance": PeriodAmount(amount=5000, source=Source.IN_MORTGAGE)}
        assert OpexCalculator.monthly_for_property(prop, {}) == 0


class TestMetricsEdgeCases:
    """Edge cases for the ratio guards."""

    @pytest.mark.parametrize("denominator", [0, -1, None, float("nan"), "abc"])
    def test_guarded_denominators(self, denominator):
        assert MetricsCalculator.cap_rate(1000, denominator) == 0
        assert MetricsCalculator.dcr(1000, denominator) == 0
        assert MetricsCalculator.cash_on_cash(1000, denominator) == 0

    def test_irr_with_missing_inputs(self):
        """No value and no cash flow: the whole equity is lost."""
        result = MetricsCalculator.irr_10_year(None, None, None)
        assert result == pytest.approx(-100.0)
        assert math.isfinite(result)

    def test_summary_with_empty_property(self):
        result = MetricsCalculator.summary(0, None, None, 0)
        assert (result.noi, result.cap, result.dcr, result.roi, result.coc) == (0, 0, 0, 0, 0)


class TestServiceEdgeCases:
    """Edge cases at the service layer."""

    def test_property_with_only_an_id(self, settings):
        m = compute_property_metrics({"id": "p"}, [], [], settings=settings)
        assert m.summary.noi == 0
        assert m.irr_10_year == pytest.approx(-100.0)
        assert m.dcr_healthy is False

    def test_lease_with_garbage_dates(self, today):
        row = classify_lease({"id": "x", "end_date": "someday", "payments": [
            {"due_date": "??", "status": "overdue"},
        ]}, today=today)
        assert row.lease_end is None
        assert row.days_overdue == 0

    def test_payments_not_a_list(self, today):
        cards = rent_roll_metrics([{"id": "x", "monthly_rent": 100, "status": "active", "payments": "n/a"}], today=today)
        assert cards.collected == 0
        assert cards.mrr == 100
