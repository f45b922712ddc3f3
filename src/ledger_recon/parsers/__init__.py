"""Parsers for system ledger and bank statement CSV files."""

from .bank_parser import BankStatementParser
from .repository import CSVTransactionRepository, TransactionRepository
from .system_parser import SystemTransactionParser

__all__ = [
    "BankStatementParser",
    "CSVTransactionRepository",
    "SystemTransactionParser",
    "TransactionRepository",
]
