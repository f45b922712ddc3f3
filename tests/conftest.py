"""Shared fixtures for the ledger reconciliation tests.

Record factories build models directly so the matching tests stay pure:
no files, no parsing.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Callable

import pytest

from ledger_recon.config import ReconConfig
from ledger_recon.models import BankTransaction, SystemTransaction, TransactionType

BASE_DAY = date(2025, 1, 1)


def day(offset: int) -> date:
    """Calendar day ``offset`` days after 2025-01-01."""
    return BASE_DAY + timedelta(days=offset)


def _system(
    trx_id: str,
    amount: str,
    txn_type: TransactionType = TransactionType.DEBIT,
    offset: int = 0,
    hour: int = 0,
) -> SystemTransaction:
    moment = datetime.combine(day(offset), datetime.min.time(), tzinfo=timezone.utc)
    return SystemTransaction(
        trx_id=trx_id,
        amount=Decimal(amount),
        type=txn_type,
        transaction_time=moment + timedelta(hours=hour),
    )


def _bank(
    identifier: str,
    amount: str,
    offset: int = 0,
    description: str = "",
    source: str = "bank_A.csv",
) -> BankTransaction:
    return BankTransaction(
        unique_identifier=identifier,
        amount=Decimal(amount),
        date=day(offset),
        description=description,
        bank_source=source,
    )


@pytest.fixture
def make_system() -> Callable[..., SystemTransaction]:
    return _system


@pytest.fixture
def make_bank() -> Callable[..., BankTransaction]:
    """Bank amounts are signed: negative means DEBIT."""
    return _bank


@pytest.fixture
def config() -> ReconConfig:
    return ReconConfig()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``content`` to ``tmp_path / name`` and return the path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """CLI runs attach handlers to CliRunner streams; drop them after each test."""
    yield
    logger = logging.getLogger("ledger_recon")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
