"""Assembles matcher and discrepancy output into a report."""

from datetime import date
from decimal import Decimal
from typing import Sequence
import logging

from ..matching.discrepancy import DEFAULT_TOLERANCE, DiscrepancyEvaluator
from ..matching.engine import MatchOutcome
from ..models.report import (
    ReconciliationReport,
    ReconciliationSummary,
    UnmatchedTransactions,
)
from ..models.transaction import BankTransaction, SystemTransaction

logger = logging.getLogger(__name__)


class ReportAssembler:
    """Folds a match outcome into a ReconciliationReport."""

    def __init__(self, discrepancy_tolerance: Decimal = DEFAULT_TOLERANCE):
        self.discrepancy_tolerance = discrepancy_tolerance

    def assemble(
        self,
        start: date,
        end: date,
        system_transactions: Sequence[SystemTransaction],
        bank_transactions: Sequence[BankTransaction],
        outcome: MatchOutcome,
    ) -> ReconciliationReport:
        """
        Build the report for one run.

        Args:
            start: First day of the reconciliation window
            end: Last day of the reconciliation window
            system_transactions: Post-filter system transactions
            bank_transactions: Post-filter bank transactions
            outcome: Matcher output for those records

        Returns:
            Report with summary, discrepancies and unmatched records
        """
        matches_by_pass: dict[str, int] = {}
        for pair in outcome.pairs:
            name = pair.match_pass.value
            matches_by_pass[name] = matches_by_pass.get(name, 0) + 1

        summary = ReconciliationSummary(
            timeframe_start=start.isoformat(),
            timeframe_end=end.isoformat(),
            total_system_transactions_processed=len(system_transactions),
            total_bank_transactions_processed=len(bank_transactions),
            matched_transactions=len(outcome.pairs),
            matches_by_pass=matches_by_pass,
        )

        evaluator = DiscrepancyEvaluator(self.discrepancy_tolerance)
        discrepancies = evaluator.evaluate_all(outcome.pairs)

        unmatched = UnmatchedTransactions(
            system_missing_from_bank=list(outcome.system_only),
            bank_missing_from_system={
                source: list(txns) for source, txns in outcome.bank_only.items()
            },
        )

        logger.debug(
            f"Report assembled: {summary.matched_transactions} matched, "
            f"{discrepancies.count} discrepancies, {unmatched.count} unmatched"
        )

        return ReconciliationReport(
            reconciliation_summary=summary,
            discrepant_transactions=discrepancies,
            unmatched_transactions=unmatched,
            matched_pairs=list(outcome.pairs),
        )
