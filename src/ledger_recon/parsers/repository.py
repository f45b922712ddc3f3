"""Transaction sources consumed by the reconciliation service."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence, Union

from ..config import ReconConfig
from ..models.transaction import BankTransaction, SystemTransaction
from .bank_parser import BankStatementParser
from .system_parser import SystemTransactionParser

Source = Union[str, Path]


class TransactionRepository(ABC):
    """
    Produces complete transaction lists for each side.

    Implementations either return every record of the requested sources
    or raise an IngestionError; partial results are never returned.
    """

    @abstractmethod
    def get_system_transactions(self, source: Source) -> list[SystemTransaction]:
        pass

    @abstractmethod
    def get_bank_transactions(self, sources: Sequence[Source]) -> list[BankTransaction]:
        pass


class CSVTransactionRepository(TransactionRepository):
    """Reads both sides from CSV files."""

    def __init__(self, config: ReconConfig):
        self.system_parser = SystemTransactionParser(config)
        self.bank_parser = BankStatementParser(config)

    def get_system_transactions(self, source: Source) -> list[SystemTransaction]:
        return self.system_parser.parse_file(source)

    def get_bank_transactions(self, sources: Sequence[Source]) -> list[BankTransaction]:
        return self.bank_parser.parse_files(sources)
