"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    IngestionError,
    SystemParseError,
    BankStatementParseError,
    ConfigurationError,
    ReportGenerationError,
)
from .logging_config import setup_logging

__all__ = [
    "ReconciliationError",
    "IngestionError",
    "SystemParseError",
    "BankStatementParseError",
    "ConfigurationError",
    "ReportGenerationError",
    "setup_logging",
]
