"""
System transactions CSV parser.
Reads the internal ledger export into SystemTransaction models.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional, Union
import logging
import re

import pandas as pd

from ..config import ReconConfig
from ..models.transaction import SystemTransaction, TransactionType
from ..utils.exceptions import SystemParseError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("trx_id", "amount", "type", "transaction_time")

RFC3339_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})[Tt]"
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


class SystemTransactionParser:
    """
    Parser for system transaction CSV exports.

    Any malformed row fails the whole file; no partial list is returned.
    """

    def __init__(self, config: ReconConfig):
        """
        Initialize the parser with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config
        self.input_config = config.input.system
        self.column_mappings = self.input_config.column_mappings

    def parse_file(self, file_path: Union[str, Path]) -> list[SystemTransaction]:
        """
        Parse a system transactions CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            Transactions in file order

        Raises:
            SystemParseError: If the file is unreadable or any row is malformed
        """
        file_path = Path(file_path)
        logger.info(f"Parsing system transactions file: {file_path}")

        try:
            df = pd.read_csv(
                file_path,
                encoding=self.input_config.encoding,
                delimiter=self.input_config.delimiter,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
            )
        except Exception as e:
            logger.error(f"Failed to read system transactions file: {e}")
            raise SystemParseError(f"Failed to read CSV file: {e}", source=file_path) from e

        columns = self._resolve_columns(df, file_path)
        transactions: list[SystemTransaction] = []
        first_seen: dict[str, int] = {}
        for idx, row in df.iterrows():
            txn = self._normalize_row(row, int(idx), columns, file_path)
            line = int(idx) + 2
            if txn.trx_id in first_seen:
                raise SystemParseError(
                    f"Line {line}: duplicate transaction id '{txn.trx_id}' "
                    f"(first seen on line {first_seen[txn.trx_id]})",
                    source=file_path,
                )
            first_seen[txn.trx_id] = line
            transactions.append(txn)
        logger.info(f"Extracted {len(transactions)} transactions from {file_path.name}")

        return transactions

    def _resolve_columns(self, df: pd.DataFrame, file_path: Path) -> dict[str, str]:
        columns = {name: self.column_mappings.get(name, name) for name in REQUIRED_FIELDS}
        missing = [col for col in columns.values() if col not in df.columns]
        if missing:
            raise SystemParseError(f"Missing required columns: {', '.join(missing)}", source=file_path)
        return columns

    def _normalize_row(
        self, row: pd.Series, idx: int, columns: dict[str, str], file_path: Path
    ) -> SystemTransaction:
        # Header is line 1, so data row idx sits on line idx + 2
        line = idx + 2

        trx_id = str(row[columns["trx_id"]]).strip()
        if not trx_id:
            raise SystemParseError(f"Line {line}: empty transaction id", source=file_path)

        raw_amount = str(row[columns["amount"]]).strip()
        try:
            amount = Decimal(raw_amount)
        except InvalidOperation as e:
            raise SystemParseError(
                f"Line {line}: could not parse amount '{raw_amount}'", source=file_path
            ) from e
        if not amount.is_finite():
            raise SystemParseError(
                f"Line {line}: could not parse amount '{raw_amount}'", source=file_path
            )

        raw_type = str(row[columns["type"]]).strip().upper()
        try:
            txn_type = TransactionType(raw_type)
        except ValueError as e:
            raise SystemParseError(
                f"Line {line}: unknown transaction type '{raw_type}'", source=file_path
            ) from e

        raw_time = str(row[columns["transaction_time"]]).strip()
        try:
            transaction_time = parse_timestamp(raw_time, self.input_config.time_format)
        except ValueError as e:
            raise SystemParseError(
                f"Line {line}: could not parse transactionTime '{raw_time}'", source=file_path
            ) from e

        return SystemTransaction(
            trx_id=trx_id,
            amount=amount,
            type=txn_type,
            transaction_time=transaction_time,
        )


def parse_timestamp(value: str, time_format: Optional[str] = None) -> datetime:
    """
    Parse a transaction timestamp such as ``2025-09-01T10:00:00Z``.

    Without ``time_format`` the value must be RFC 3339: a full date and time
    with an explicit ``Z`` or ``+HH:MM`` offset. Fractional seconds of any
    length are accepted and truncated to microseconds. With ``time_format``
    the value is read with ``strptime`` and must still carry an offset.

    Raises:
        ValueError: If the value is not a valid timestamp or has no offset
    """
    if not value:
        raise ValueError("empty timestamp")

    if time_format:
        parsed = datetime.strptime(value, time_format)
        if parsed.tzinfo is None:
            raise ValueError(f"timestamp '{value}' has no UTC offset")
        return parsed

    match = RFC3339_PATTERN.match(value)
    if not match:
        raise ValueError(f"timestamp '{value}' is not RFC 3339")

    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"timestamp '{value}' has an invalid UTC offset")
        delta = timedelta(hours=hours, minutes=minutes)
        tz = timezone(-delta if offset[0] == "-" else delta)

    return datetime(
        int(match.group("year")),
        int(match.group("month")),
        int(match.group("day")),
        int(match.group("hour")),
        int(match.group("minute")),
        int(match.group("second")),
        int(fraction),
        tzinfo=tz,
    )
