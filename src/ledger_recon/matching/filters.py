"""Date-window filtering applied to both sides before matching."""

from datetime import date
from typing import Sequence, TypeVar, Union

from ..models.transaction import BankTransaction, SystemTransaction

T = TypeVar("T", SystemTransaction, BankTransaction)


def in_window(record: Union[SystemTransaction, BankTransaction], start: date, end: date) -> bool:
    """Check whether a record's calendar day lies within ``[start, end]``."""
    return start <= record.day <= end


def filter_by_date(records: Sequence[T], start: date, end: date) -> list[T]:
    """
    Keep the records dated within an inclusive calendar-day window.

    Comparison happens at day granularity, so a system transaction at
    23:59 on ``end`` is kept in full. Relative order is preserved.

    Args:
        records: System or bank transactions
        start: First day of the window
        end: Last day of the window

    Returns:
        Records whose day falls in the window (empty if none do)
    """
    return [record for record in records if in_window(record, start, end)]
