"""
Bank statement CSV parser.
Reads one or more statement files into BankTransaction models.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Union
import logging

import pandas as pd

from ..config import ReconConfig
from ..models.transaction import BankTransaction
from ..utils.exceptions import BankStatementParseError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("unique_identifier", "amount", "date")


class BankStatementParser:
    """
    Parser for bank statement CSV files.

    Each record is tagged with the base name of its file. Amounts keep the
    bank's sign; the normalized amount and type are derived by the model.
    """

    def __init__(self, config: ReconConfig):
        """
        Initialize the parser with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config
        self.input_config = config.input.bank
        self.column_mappings = self.input_config.column_mappings

    def parse_files(self, file_paths: Iterable[Union[str, Path]]) -> list[BankTransaction]:
        """
        Parse several statement files into one bank-side list.

        Files are read in the given order; the first failing file aborts.

        Raises:
            BankStatementParseError: If any file is unreadable or malformed
        """
        transactions: list[BankTransaction] = []
        for file_path in file_paths:
            transactions.extend(self.parse_file(file_path))
        return transactions

    def parse_file(self, file_path: Union[str, Path]) -> list[BankTransaction]:
        """
        Parse a single bank statement CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            Transactions in file order

        Raises:
            BankStatementParseError: If the file is unreadable or any row is malformed
        """
        file_path = Path(file_path)
        logger.info(f"Parsing bank statement file: {file_path}")

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
            logger.error(f"Failed to read bank statement file: {e}")
            raise BankStatementParseError(f"Failed to read CSV file: {e}", source=file_path) from e

        missing = [
            self.column_mappings.get(name, name)
            for name in REQUIRED_FIELDS
            if self.column_mappings.get(name, name) not in df.columns
        ]
        if missing:
            raise BankStatementParseError(
                f"Missing required columns: {', '.join(missing)}", source=file_path
            )

        transactions: list[BankTransaction] = []
        first_seen: dict[str, int] = {}
        for idx, row in df.iterrows():
            txn = self._normalize_row(row, int(idx), file_path)
            line = int(idx) + 2
            if txn.unique_identifier in first_seen:
                raise BankStatementParseError(
                    f"Line {line}: duplicate unique identifier '{txn.unique_identifier}' "
                    f"(first seen on line {first_seen[txn.unique_identifier]})",
                    source=file_path,
                )
            first_seen[txn.unique_identifier] = line
            transactions.append(txn)
        logger.info(f"Extracted {len(transactions)} transactions from {file_path.name}")

        return transactions

    def _normalize_row(self, row: pd.Series, idx: int, file_path: Path) -> BankTransaction:
        line = idx + 2
        id_col = self.column_mappings.get("unique_identifier", "unique_identifier")
        amount_col = self.column_mappings.get("amount", "amount")
        date_col = self.column_mappings.get("date", "date")
        desc_col = self.column_mappings.get("description", "description")

        identifier = str(row[id_col]).strip()
        if not identifier:
            raise BankStatementParseError(f"Line {line}: empty unique identifier", source=file_path)

        raw_amount = str(row[amount_col]).strip()
        try:
            amount = Decimal(raw_amount)
        except InvalidOperation as e:
            raise BankStatementParseError(
                f"Line {line}: could not parse amount '{raw_amount}'", source=file_path
            ) from e
        if not amount.is_finite():
            raise BankStatementParseError(
                f"Line {line}: could not parse amount '{raw_amount}'", source=file_path
            )

        raw_date = str(row[date_col]).strip()
        try:
            txn_date = self._parse_date(raw_date)
        except ValueError as e:
            raise BankStatementParseError(
                f"Line {line}: could not parse date '{raw_date}'", source=file_path
            ) from e

        description = str(row[desc_col]) if desc_col in row.index else ""

        return BankTransaction(
            unique_identifier=identifier,
            amount=amount,
            date=txn_date,
            description=description,
            bank_source=file_path.name,
        )

    def _parse_date(self, value: str) -> date:
        return datetime.strptime(value, self.input_config.date_format).date()
