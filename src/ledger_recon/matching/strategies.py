"""
Matching strategies for transaction reconciliation.
Each strategy implements one pass of the matcher.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple, Sequence, TypeVar, Union

from ..models.transaction import (
    BankTransaction,
    MatchedPair,
    MatchPass,
    SystemTransaction,
    TransactionType,
)

T = TypeVar("T", SystemTransaction, BankTransaction)


@dataclass
class ClaimSet:
    """
    Records already consumed by a matching pass.

    Each record is claimed at most once; claimed records are skipped by
    every later attempt.
    """

    system_ids: set[str] = field(default_factory=set)
    bank_keys: set[tuple[str, str]] = field(default_factory=set)

    def is_claimed(self, txn: Union[SystemTransaction, BankTransaction]) -> bool:
        if isinstance(txn, BankTransaction):
            return txn.claim_key in self.bank_keys
        return txn.claim_key in self.system_ids

    def claim(self, system_txn: SystemTransaction, bank_txn: BankTransaction) -> None:
        self.system_ids.add(system_txn.claim_key)
        self.bank_keys.add(bank_txn.claim_key)

    def unclaimed(self, txns: Sequence[T]) -> list[T]:
        """Return the records not yet claimed, in their original order."""
        return [txn for txn in txns if not self.is_claimed(txn)]


class GroupKey(NamedTuple):
    """Grouping key for exact matching."""

    day: date
    type: TransactionType
    cents: int


def quantize_amount(amount: Decimal, precision: int = 2) -> int:
    """
    Round an amount to ``precision`` decimal places and return it as an
    integer count of the smallest unit (cents for the default precision).

    Halves round away from zero.
    """
    exponent = Decimal(1).scaleb(-precision)
    rounded = amount.quantize(exponent, rounding=ROUND_HALF_UP)
    return int(rounded.scaleb(precision))


def group_key(txn: Union[SystemTransaction, BankTransaction], precision: int = 2) -> GroupKey:
    """Build the grouping key; bank records use their normalized amount."""
    if isinstance(txn, BankTransaction):
        amount = txn.normalized_amount
    else:
        amount = txn.amount
    return GroupKey(txn.day, txn.type, quantize_amount(amount, precision))


class MatchingStrategy(ABC):
    """Abstract base class for matching passes."""

    @abstractmethod
    def find_matches(
        self,
        system_txns: Sequence[SystemTransaction],
        bank_txns: Sequence[BankTransaction],
        claims: ClaimSet,
    ) -> list[MatchedPair]:
        """
        Pair unclaimed records and claim every record that gets paired.

        Args:
            system_txns: Filtered system transactions
            bank_txns: Filtered bank transactions
            claims: Records consumed by earlier passes; updated in place

        Returns:
            Pairs found by this pass, in discovery order
        """
        pass


class ReferenceMatchStrategy(MatchingStrategy):
    """
    Explicit reference matching.

    A bank record matches a system record when its description contains
    the prefix followed by the system trxID. Bank records are scanned in
    order and, for each, system records in order; the first qualifying
    pair wins, so a trxID referenced by several bank records pairs with
    the earliest of them.
    """

    def __init__(self, reference_prefix: str = "trxID:"):
        self.reference_prefix = reference_prefix

    def find_matches(
        self,
        system_txns: Sequence[SystemTransaction],
        bank_txns: Sequence[BankTransaction],
        claims: ClaimSet,
    ) -> list[MatchedPair]:
        matches: list[MatchedPair] = []
        candidates = claims.unclaimed(system_txns)

        for bank_txn in claims.unclaimed(bank_txns):
            for system_txn in candidates:
                if claims.is_claimed(system_txn):
                    continue
                if self.reference_prefix + system_txn.trx_id in bank_txn.description:
                    claims.claim(system_txn, bank_txn)
                    matches.append(MatchedPair(system_txn, bank_txn, MatchPass.REFERENCE))
                    break

        return matches


class GroupedExactStrategy(MatchingStrategy):
    """
    Exact matching on (day, type, rounded amount).

    Records sharing a key are grouped per side. A key is matched only when
    both sides hold the same number of records, pairing them by position;
    otherwise the whole group stays unmatched on both sides.
    """

    def __init__(self, amount_precision: int = 2):
        self.amount_precision = amount_precision

    def find_matches(
        self,
        system_txns: Sequence[SystemTransaction],
        bank_txns: Sequence[BankTransaction],
        claims: ClaimSet,
    ) -> list[MatchedPair]:
        system_groups = self._group(claims.unclaimed(system_txns))
        bank_groups = self._group(claims.unclaimed(bank_txns))

        matches: list[MatchedPair] = []
        for key, system_group in system_groups.items():
            bank_group = bank_groups.get(key)
            if not bank_group or len(bank_group) != len(system_group):
                continue

            match_pass = MatchPass.EXACT if len(system_group) == 1 else MatchPass.GROUP
            for system_txn, bank_txn in zip(system_group, bank_group):
                claims.claim(system_txn, bank_txn)
                matches.append(MatchedPair(system_txn, bank_txn, match_pass))

        return matches

    def _group(self, txns: Sequence[T]) -> dict[GroupKey, list[T]]:
        groups: dict[GroupKey, list[T]] = {}
        for txn in txns:
            groups.setdefault(group_key(txn, self.amount_precision), []).append(txn)
        return groups
