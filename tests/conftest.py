"""Pytest fixtures for onepager tests."""

import os
import sys
from datetime import date

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from onepager.core.settings import AppSettings  # noqa: E402


@pytest.fixture
def scenario_property():
    """Property from the reference OPEX scenario ($560/month at $2,000 rent)."""
    return {
        "mgmt_pct": 8,
        "maintenance_pct": 5,
        "property_taxes": 200,
        "taxes_in_mortgage": False,
        "insurance": 100,
        "insurance_in_mortgage": False,
    }


@pytest.fixture
def settings():
    """Settings with the shipped defaults, independent of the environment."""
    return AppSettings(_env_file=None)


@pytest.fixture
def today():
    return date(2025, 3, 15)


@pytest.fixture
def property_row():
    """A ``properties`` row with one mortgage and two occupied units."""
    return {
        "id": "prop-1",
        "address": "12 Elm St",
        "alias": "Elm",
        "sale_price": 300000,
        "purchase_price": 300000,
        "property_value": None,
        "property_taxes": 200,
        "insurance": 100,
        "mgmt_pct": 8,
        "maintenance_pct": 5,
        "vacancy_pct": 0,
        "mortgage_payment": 1000,
        "total_units": 3,
    }


@pytest.fixture
def lease_rows():
    """Lease rows shaped like the joined leases query."""
    return [
        {
            "id": "lease-a",
            "monthly_rent": 1500,
            "deposit": 1500,
            "start_date": "2024-04-21",
            "end_date": "2025-04-20",
            "status": "active",
            "tenant": {"id": "t-a", "name": "Ana Ruiz"},
            "unit": {"id": "unit-a", "unit_label": "A", "property_id": "prop-1"},
            "payments": [
                {"id": "pay-a", "lease_id": "lease-a", "amount_due": 1500, "due_date": "2025-03-01",
                 "paid_amount": 1500, "status": "paid"},
            ],
        },
        {
            "id": "lease-b",
            "monthly_rent": 1200,
            "deposit": None,
            "start_date": "2025-01-01",
            "end_date": "2026-01-01",
            "status": "active",
            "tenant": {"id": "t-b", "name": "Ben Cole"},
            "unit": {"id": "unit-b", "unit_label": "B", "property_id": "prop-1"},
            "payments": [
                {"id": "pay-b", "lease_id": "lease-b", "amount_due": 1200, "due_date": "2025-03-01",
                 "paid_amount": None, "status": "overdue"},
            ],
        },
        {
            "id": "lease-c",
            "monthly_rent": 1000,
            "start_date": "2024-01-01",
            "end_date": "2025-12-31",
            "status": "expired",
            "tenant": None,
            "unit": {"id": "unit-c", "unit_label": "C", "property_id": "prop-1"},
        },
    ]


@pytest.fixture
def mortgage_rows():
    return [
        {
            "id": "mtg-1",
            "property_id": "prop-1",
            "loan_name": "First",
            "principal": 240000,
            "interest_rate": 6.0,
            "term_months": 360,
            "monthly_payment": 1500,
            "start_date": "2024-01-01",
        }
    ]
