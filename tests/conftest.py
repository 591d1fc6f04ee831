"""Pytest configuration and fixtures for PocketLedger tests.

Unit tests build records in memory. SIT tests drive the CLI against a
ledger snapshot written to a temporary directory.
"""
from __future__ import annotations

from pathlib import Path
import sys

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src" / "python"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from pocketledger.ledger import Ledger  # noqa: E402
from pocketledger.models import Account, Category, Transaction  # noqa: E402
from pocketledger.snapshot import save_ledger  # noqa: E402

CREATED_AT = "2026-01-01T00:00:00.000Z"


def make_account(account_id: str = "acc-1", **overrides) -> Account:
    values = {
        "id": account_id,
        "name": "Everyday Checking",
        "type": "checking",
        "created_at": CREATED_AT,
    }
    values.update(overrides)
    return Account(**values)


def make_transaction(tx_id: str, amount: int, **overrides) -> Transaction:
    values = {
        "id": tx_id,
        "type": "expense" if amount < 0 else "income",
        "account_id": "acc-1",
        "date": "2026-02-10",
        "amount": amount,
        "created_at": CREATED_AT,
    }
    values.update(overrides)
    return Transaction(**values)


def make_category(category_id: str, group: str, sort_order: int, **overrides) -> Category:
    values = {
        "id": category_id,
        "name": category_id.title(),
        "group": group,
        "sort_order": sort_order,
    }
    values.update(overrides)
    return Category(**values)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config resolution at an empty temporary directory."""
    config_path = tmp_path / "config" / "config.json"
    monkeypatch.setenv("POCKETLEDGER_CONFIG", str(config_path))
    return config_path


@pytest.fixture()
def ledger_path(tmp_path: Path) -> Path:
    """Ledger snapshot seeded with the stock categories and no accounts."""
    path = tmp_path / "ledger.json"
    save_ledger(Ledger.empty(), path)
    return path


@pytest.fixture()
def sample_ledger() -> Ledger:
    """One checking account with a month of categorized activity."""
    categories = [
        make_category("inc-1", "Income", 1),
        make_category("fix-1", "Fixed", 1, assigned=150000),
        make_category("fix-2", "Fixed", 2, assigned=20000),
        make_category("dl-1", "Daily Living", 1, assigned=60000),
        make_category("per-1", "Personal", 1, assigned=40000),
    ]
    transactions = [
        make_transaction("t1", 500000, category_id="inc-1", date="2026-02-01"),
        make_transaction("t2", -150000, category_id="fix-1", date="2026-02-03"),
        make_transaction("t3", -35000, category_id="dl-1", date="2026-02-12"),
        make_transaction("t4", -5000, date="2026-02-20"),
    ]
    return Ledger(
        accounts=[make_account()],
        transactions=transactions,
        categories=categories,
    )
