"""Balance computation and the rules gating account and category removal."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from pocketledger.models import Transaction
from pocketledger.schema import UNCATEGORIZED


def compute_balance(transactions: Iterable[Transaction], account_id: str) -> int:
    """Sum every transaction amount on the account, regardless of type or date."""
    return sum(tx.amount for tx in transactions if tx.account_id == account_id)


def can_delete_account(transactions: Iterable[Transaction], account_id: str) -> bool:
    """An account may be deleted only when no transaction references it."""
    return not any(tx.account_id == account_id for tx in transactions)


def can_archive_account(transactions: Iterable[Transaction], account_id: str) -> bool:
    """An account may be archived only when its balance is exactly zero."""
    return compute_balance(transactions, account_id) == 0


def on_delete_category(
    transactions: Iterable[Transaction], category_id: str
) -> list[Transaction]:
    """Clear the category on every transaction that references it.

    No transaction is ever removed; matching rows get ``category_id = ""``.
    """
    return [
        replace(tx, category_id=UNCATEGORIZED) if tx.category_id == category_id else tx
        for tx in transactions
    ]
