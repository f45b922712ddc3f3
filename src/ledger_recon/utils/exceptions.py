"""Custom exceptions for the reconciliation application."""

from pathlib import Path
from typing import Optional, Union


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class IngestionError(ReconciliationError):
    """Error reading transactions from a source.

    Carries the source that failed so callers can report which file
    aborted the run.
    """

    def __init__(self, message: str, source: Optional[Union[str, Path]] = None):
        self.source = str(source) if source is not None else None
        if self.source:
            message = f"{self.source}: {message}"
        super().__init__(message)


class SystemParseError(IngestionError):
    """Error parsing a system transactions CSV file."""

    pass


class BankStatementParseError(IngestionError):
    """Error parsing a bank statement CSV file."""

    pass


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error writing a report."""

    pass
