"""Application services."""

from .exporter import SnapshotExporter
from .portfolio import compute_portfolio_metrics, compute_property_metrics
from .projections import (
    SafetyGuidance,
    project_income_and_safety,
    project_rent,
    project_wealth_build,
)
from .rent_roll import classify_lease, rent_roll_metrics

__all__ = [
    "SnapshotExporter",
    "compute_property_metrics",
    "compute_portfolio_metrics",
    "project_rent",
    "project_income_and_safety",
    "project_wealth_build",
    "SafetyGuidance",
    "classify_lease",
    "rent_roll_metrics",
]
