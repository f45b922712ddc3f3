"""Data models for reconciliation."""

from .transaction import (
    BankTransaction,
    DiscrepancyDetail,
    MatchedPair,
    MatchPass,
    SystemTransaction,
    TransactionType,
)
from .report import (
    DiscrepantTransactions,
    ReconciliationReport,
    ReconciliationSummary,
    UnmatchedTransactions,
)

__all__ = [
    "BankTransaction",
    "DiscrepancyDetail",
    "MatchedPair",
    "MatchPass",
    "SystemTransaction",
    "TransactionType",
    "DiscrepantTransactions",
    "ReconciliationReport",
    "ReconciliationSummary",
    "UnmatchedTransactions",
]
