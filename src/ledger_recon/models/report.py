"""Report models for reconciliation results."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from .transaction import (
    BankTransaction,
    DiscrepancyDetail,
    MatchedPair,
    SystemTransaction,
)


@dataclass
class ReconciliationSummary:
    """High-level statistics of a reconciliation run."""

    # Window bounds formatted as YYYY-MM-DD
    timeframe_start: str
    timeframe_end: str

    # Post-filter set sizes
    total_system_transactions_processed: int = 0
    total_bank_transactions_processed: int = 0

    matched_transactions: int = 0

    # Pass name -> number of pairs it produced
    matches_by_pass: dict[str, int] = field(default_factory=dict)

    @property
    def match_rate_system(self) -> float:
        """Percentage of system transactions matched."""
        if self.total_system_transactions_processed == 0:
            return 0.0
        return (self.matched_transactions / self.total_system_transactions_processed) * 100

    @property
    def match_rate_bank(self) -> float:
        """Percentage of bank transactions matched."""
        if self.total_bank_transactions_processed == 0:
            return 0.0
        return (self.matched_transactions / self.total_bank_transactions_processed) * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeframe_start": self.timeframe_start,
            "timeframe_end": self.timeframe_end,
            "total_system_transactions_processed": self.total_system_transactions_processed,
            "total_bank_transactions_processed": self.total_bank_transactions_processed,
            "matched_transactions": self.matched_transactions,
            "matches_by_pass": dict(self.matches_by_pass),
        }


@dataclass
class DiscrepantTransactions:
    """Matched pairs whose amounts diverge."""

    count: int = 0
    total_discrepancy_value: Decimal = Decimal("0")
    details: list[DiscrepancyDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "total_discrepancy_value": float(self.total_discrepancy_value),
            "details": [detail.to_dict() for detail in self.details],
        }


@dataclass
class UnmatchedTransactions:
    """Records left without a counterpart after all passes."""

    system_missing_from_bank: list[SystemTransaction] = field(default_factory=list)

    # Source file tag -> unmatched bank records from that file
    bank_missing_from_system: dict[str, list[BankTransaction]] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.system_missing_from_bank) + sum(
            len(txns) for txns in self.bank_missing_from_system.values()
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "system_missing_from_bank": [t.to_dict() for t in self.system_missing_from_bank],
            "bank_missing_from_system": {
                source: [t.to_dict() for t in txns]
                for source, txns in self.bank_missing_from_system.items()
            },
        }


@dataclass
class ReconciliationReport:
    """Top-level result of a reconciliation run."""

    reconciliation_summary: ReconciliationSummary
    discrepant_transactions: DiscrepantTransactions = field(
        default_factory=DiscrepantTransactions
    )
    unmatched_transactions: UnmatchedTransactions = field(
        default_factory=UnmatchedTransactions
    )
    matched_pairs: list[MatchedPair] = field(default_factory=list)

    def to_dict(self, include_matches: bool = False) -> dict[str, Any]:
        """
        Render the report as JSON-compatible data.

        Args:
            include_matches: Also list every matched pair

        Returns:
            Dictionary with stable field names
        """
        data: dict[str, Any] = {
            "reconciliation_summary": self.reconciliation_summary.to_dict(),
            "discrepant_transactions": self.discrepant_transactions.to_dict(),
            "unmatched_transactions": self.unmatched_transactions.to_dict(),
        }
        if include_matches:
            data["matched_pairs"] = [pair.to_dict() for pair in self.matched_pairs]
        return data
