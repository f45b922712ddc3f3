"""
Reconciliation service: ingestion, date filtering, matching and report assembly.
"""

from datetime import date
from pathlib import Path
from typing import Optional, Sequence, Union
import logging

from .config import ReconConfig
from .matching.engine import ReconciliationEngine
from .matching.filters import filter_by_date
from .models.report import ReconciliationReport
from .parsers.repository import TransactionRepository
from .reports.assembler import ReportAssembler
from .utils.exceptions import IngestionError

logger = logging.getLogger(__name__)

Source = Union[str, Path]


class ReconciliationService:
    """Runs a full reconciliation against a transaction repository."""

    def __init__(self, repository: TransactionRepository, config: Optional[ReconConfig] = None):
        """
        Initialize the service.

        Args:
            repository: Source of system and bank transactions
            config: Application configuration (defaults when omitted)
        """
        self.repository = repository
        self.config = config or ReconConfig()
        self.engine = ReconciliationEngine(self.config)
        self.assembler = ReportAssembler(self.config.matching.discrepancy_tolerance)

    def reconcile(
        self,
        system_source: Source,
        bank_sources: Sequence[Source],
        start: date,
        end: date,
    ) -> ReconciliationReport:
        """
        Reconcile one system source against one or more bank sources.

        Args:
            system_source: Where to read system transactions from
            bank_sources: Where to read bank transactions from; merged into one set
            start: First day of the window (inclusive)
            end: Last day of the window (inclusive)

        Returns:
            The reconciliation report

        Raises:
            IngestionError: If either side cannot be read completely, or holds
                two records with the same identity
        """
        system_transactions = self._load("system", self.repository.get_system_transactions, system_source)
        bank_transactions = self._load("bank", self.repository.get_bank_transactions, list(bank_sources))
        _check_unique_claims("system", system_transactions, system_source)
        _check_unique_claims("bank", bank_transactions, list(bank_sources))

        filtered_system = filter_by_date(system_transactions, start, end)
        filtered_bank = filter_by_date(bank_transactions, start, end)
        logger.info(
            f"Window {start.isoformat()}..{end.isoformat()}: "
            f"{len(filtered_system)}/{len(system_transactions)} system and "
            f"{len(filtered_bank)}/{len(bank_transactions)} bank transactions in range"
        )

        outcome = self.engine.match(filtered_system, filtered_bank)
        return self.assembler.assemble(start, end, filtered_system, filtered_bank, outcome)

    def _load(self, side: str, loader, source):
        try:
            return loader(source)
        except IngestionError:
            logger.error(f"Could not get {side} transactions from {source}")
            raise
        except Exception as e:
            logger.error(f"Could not get {side} transactions from {source}: {e}")
            raise IngestionError(f"could not get {side} transactions: {e}", source=_describe(source)) from e


def _describe(source) -> str:
    if isinstance(source, (list, tuple)):
        return ", ".join(str(s) for s in source)
    return str(source)


def _check_unique_claims(side: str, records, source) -> None:
    """Reject two records that share a claim key."""
    seen = set()
    for record in records:
        if record.claim_key in seen:
            logger.error(f"Duplicate {side} transaction {record.claim_key} in {_describe(source)}")
            raise IngestionError(
                f"duplicate {side} transaction {record.claim_key}", source=_describe(source)
            )
        seen.add(record.claim_key)
