"""Discrepancy evaluation for matched pairs."""

from decimal import Decimal
from typing import Iterable

from ..models.report import DiscrepantTransactions
from ..models.transaction import DiscrepancyDetail, MatchedPair

DEFAULT_TOLERANCE = Decimal("0.001")


class DiscrepancyEvaluator:
    """
    Flags matched pairs whose amounts differ by more than a tolerance.

    The system signed amount is compared with the bank normalized amount.
    Flagging never unmatches a pair; it only annotates it.
    """

    def __init__(self, tolerance: Decimal = DEFAULT_TOLERANCE):
        self.tolerance = tolerance
        self.result = DiscrepantTransactions()

    def evaluate(self, pair: MatchedPair) -> bool:
        """
        Evaluate one pair and accumulate it if divergent.

        Returns:
            True if the pair was recorded as a discrepancy
        """
        difference = pair.amount_difference
        if difference <= self.tolerance:
            return False

        self.result.count += 1
        self.result.total_discrepancy_value += difference
        self.result.details.append(
            DiscrepancyDetail(
                system_transaction=pair.system_transaction,
                bank_transaction=pair.bank_transaction,
                difference=difference,
            )
        )
        return True

    def evaluate_all(self, pairs: Iterable[MatchedPair]) -> DiscrepantTransactions:
        """Evaluate a full set of pairs, discarding totals from earlier calls."""
        self.result = DiscrepantTransactions()
        for pair in pairs:
            self.evaluate(pair)
        return self.result
