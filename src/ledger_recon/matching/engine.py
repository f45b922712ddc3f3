"""
Multi-pass matching engine for transaction reconciliation.
Runs the configured passes in priority order over the filtered records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence
import logging

from ..config import GROUPED_EXACT_TIER, REFERENCE_TIER, ReconConfig
from ..models.transaction import BankTransaction, MatchedPair, SystemTransaction
from .strategies import (
    ClaimSet,
    GroupedExactStrategy,
    MatchingStrategy,
    ReferenceMatchStrategy,
)

logger = logging.getLogger(__name__)


@dataclass
class MatchOutcome:
    """Partition of the filtered records produced by the matcher."""

    pairs: list[MatchedPair] = field(default_factory=list)
    system_only: list[SystemTransaction] = field(default_factory=list)

    # Source file tag -> unmatched bank records, in order of first appearance
    bank_only: dict[str, list[BankTransaction]] = field(default_factory=dict)

    @property
    def bank_only_count(self) -> int:
        return sum(len(txns) for txns in self.bank_only.values())

    @property
    def unmatched_count(self) -> int:
        return len(self.system_only) + self.bank_only_count


class ReconciliationEngine:
    """
    Orchestrates the matching passes.

    Every pass only sees records no earlier pass has claimed, and every
    record ends up in exactly one bucket: paired, system-only or
    bank-only. The engine performs no I/O and raises no errors.
    """

    def __init__(self, config: ReconConfig):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration
        """
        self.config = config
        self.strategies = self._build_strategies()

    def _build_strategies(self) -> list[tuple[str, MatchingStrategy]]:
        """
        Build matching strategies from configuration.

        Returns:
            List of (tier_name, strategy) tuples ordered by priority
        """
        matching_config = self.config.matching
        enabled_tiers = [t for t in matching_config.tiers if t.enabled]
        sorted_tiers = sorted(enabled_tiers, key=lambda t: t.priority)

        strategies: list[tuple[str, MatchingStrategy]] = []
        for tier in sorted_tiers:
            if tier.name == REFERENCE_TIER:
                strategy: MatchingStrategy = ReferenceMatchStrategy(
                    reference_prefix=matching_config.reference_prefix
                )
            elif tier.name == GROUPED_EXACT_TIER:
                strategy = GroupedExactStrategy(
                    amount_precision=matching_config.amount_precision
                )
            else:
                continue
            strategies.append((tier.name, strategy))
            logger.debug(f"Loaded matching tier: {tier.name}")

        return strategies

    def match(
        self,
        system_transactions: Sequence[SystemTransaction],
        bank_transactions: Sequence[BankTransaction],
    ) -> MatchOutcome:
        """
        Partition already-filtered records into pairs and residues.

        Args:
            system_transactions: Filtered system transactions
            bank_transactions: Filtered bank transactions (all files merged)

        Returns:
            Match outcome with pairs, system-only and bank-only records
        """
        start_time = datetime.now()
        logger.info(
            f"Starting matching: {len(system_transactions)} system txns, "
            f"{len(bank_transactions)} bank txns"
        )

        claims = ClaimSet()
        outcome = MatchOutcome()

        for tier_name, strategy in self.strategies:
            tier_matches = strategy.find_matches(system_transactions, bank_transactions, claims)
            outcome.pairs.extend(tier_matches)
            logger.debug(
                f"Tier {tier_name}: {len(tier_matches)} matches found, "
                f"{len(system_transactions) - len(claims.system_ids)} system and "
                f"{len(bank_transactions) - len(claims.bank_keys)} bank remaining"
            )

        outcome.system_only = claims.unclaimed(system_transactions)
        for bank_txn in claims.unclaimed(bank_transactions):
            outcome.bank_only.setdefault(bank_txn.bank_source, []).append(bank_txn)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Matching complete in {elapsed:.2f}s: {len(outcome.pairs)} matches, "
            f"{len(outcome.system_only)} system-only, {outcome.bank_only_count} bank-only"
        )

        return outcome
