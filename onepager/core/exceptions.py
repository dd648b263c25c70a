"""Custom exceptions for onepager.

The calculators never raise for bad data (missing values degrade to 0);
these types cover caller mistakes and I/O in the service layer.
"""

from __future__ import annotations

from typing import Any


class OnePagerError(Exception):
    """Base exception for all onepager errors."""
    pass


# --- Data Errors ---

class DataLoadError(OnePagerError):
    """Failed to load or parse a dashboard snapshot."""
    pass


# --- Calculation Errors ---

class CalculationError(OnePagerError):
    """Error during a service-level calculation."""
    pass


class InvalidParameterError(OnePagerError):
    """Invalid parameter value provided."""

    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        msg = f"Invalid parameter '{param_name}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


class ProjectionError(InvalidParameterError, CalculationError):
    """Projection requested with an unusable horizon or schedule."""
    pass


# --- Output Errors ---

class ExportError(OnePagerError):
    """Snapshot could not be written."""
    pass
