"""Data models for system and bank transactions and their matches."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class TransactionType(Enum):
    """Direction of a transaction."""

    DEBIT = "DEBIT"  # Money out
    CREDIT = "CREDIT"  # Money in


class MatchPass(Enum):
    """Matching pass that produced a pair."""

    REFERENCE = "reference"  # trxID reference found in the bank description
    EXACT = "exact"  # one-to-one on day, type and amount
    GROUP = "group"  # same-sized groups paired by position


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class SystemTransaction:
    """A transaction from the internal ledger."""

    trx_id: str

    # Signed amount as booked internally
    amount: Decimal

    type: TransactionType

    # May carry sub-day precision and a UTC offset
    transaction_time: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", _as_decimal(self.amount))

    @property
    def day(self) -> date:
        """Calendar day of the transaction time."""
        return self.transaction_time.date()

    @property
    def claim_key(self) -> str:
        return self.trx_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "trxID": self.trx_id,
            "amount": float(self.amount),
            "type": self.type.value,
            "transactionTime": self.transaction_time.isoformat(),
        }


@dataclass(frozen=True)
class BankTransaction:
    """
    A transaction from a bank statement file.

    The raw amount keeps the bank's own sign convention. The normalized
    amount and the transaction type are derived from it once, at
    construction, and are never recomputed afterwards.
    """

    unique_identifier: str

    # Raw signed amount as reported by the bank
    amount: Decimal

    date: date

    description: str

    # Base name of the statement file the record came from
    bank_source: str

    normalized_amount: Decimal = field(init=False)
    type: TransactionType = field(init=False)

    def __post_init__(self) -> None:
        amount = _as_decimal(self.amount)
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "normalized_amount", abs(amount))
        object.__setattr__(
            self,
            "type",
            TransactionType.DEBIT if amount < 0 else TransactionType.CREDIT,
        )

    @property
    def day(self) -> date:
        return self.date

    @property
    def claim_key(self) -> tuple[str, str]:
        """Identity of the record across all statement files.

        Bank identifiers are only unique within their originating file.
        """
        return (self.bank_source, self.unique_identifier)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unique_identifier": self.unique_identifier,
            "amount": float(self.amount),
            "date": self.date.isoformat(),
            "description": self.description,
            "bank_source": self.bank_source,
        }


@dataclass(frozen=True)
class MatchedPair:
    """A system transaction paired with exactly one bank transaction."""

    system_transaction: SystemTransaction
    bank_transaction: BankTransaction
    match_pass: MatchPass

    @property
    def amount_difference(self) -> Decimal:
        """Absolute difference between the system and normalized bank amounts."""
        return abs(self.system_transaction.amount - self.bank_transaction.normalized_amount)

    def to_dict(self) -> dict[str, Any]:
        return {
            "system_transaction": self.system_transaction.to_dict(),
            "bank_transaction": self.bank_transaction.to_dict(),
            "match_pass": self.match_pass.value,
        }


@dataclass(frozen=True)
class DiscrepancyDetail:
    """A matched pair whose amounts diverge beyond the tolerance."""

    system_transaction: SystemTransaction
    bank_transaction: BankTransaction
    difference: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "system_transaction": self.system_transaction.to_dict(),
            "bank_transaction": self.bank_transaction.to_dict(),
            "difference": float(self.difference),
        }
