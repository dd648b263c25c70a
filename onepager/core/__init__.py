"""Core configuration, logging and exception types."""

from .exceptions import (
    CalculationError,
    DataLoadError,
    ExportError,
    InvalidParameterError,
    OnePagerError,
    ProjectionError,
)
from .logging import configure_logging, get_logger
from .settings import AppSettings, get_settings

__all__ = [
    "configure_logging",
    "get_logger",
    "AppSettings",
    "get_settings",
    # Exceptions
    "OnePagerError",
    "DataLoadError",
    "CalculationError",
    "ProjectionError",
    "InvalidParameterError",
    "ExportError",
]
