"""JSON ledger snapshots used as command line input and output."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pocketledger.exceptions import ValidationError, ValidationIssue
from pocketledger.ledger import Ledger
from pocketledger.models import Account, Category, Transaction
from pocketledger.transfers import find_orphaned_legs

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

_COLLECTIONS = (
    ("accounts", Account),
    ("transactions", Transaction),
    ("categories", Category),
)


def ledger_from_dict(payload: dict[str, Any]) -> Ledger:
    """Build a ledger from a snapshot payload, validating every record.

    Issues are reported with the collection and index prefixed to the field
    path, e.g. ``("transactions", 3, "amount")``.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid snapshot", [ValidationIssue((), "Expected an object")])
    issues: list[ValidationIssue] = []
    collections: dict[str, list] = {}
    for name, model in _COLLECTIONS:
        rows = payload.get(name, [])
        if not isinstance(rows, list):
            issues.append(ValidationIssue((name,), "Expected a list"))
            continue
        records = []
        for index, row in enumerate(rows):
            try:
                records.append(model.from_dict(row))
            except ValidationError as exc:
                issues.extend(
                    ValidationIssue((name, index, *issue.path), issue.message)
                    for issue in exc.issues
                )
        collections[name] = records
    if issues:
        raise ValidationError("Invalid snapshot", issues)
    ledger = Ledger(**collections)
    orphans = find_orphaned_legs(ledger.transactions)
    if orphans:
        logger.warning(f"Snapshot has {len(orphans)} transfer legs with a broken pair")
    return ledger


def ledger_to_dict(ledger: Ledger) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "accounts": [account.to_dict() for account in ledger.accounts],
        "transactions": [tx.to_dict() for tx in ledger.transactions],
        "categories": [cat.to_dict() for cat in ledger.categories],
    }


def load_ledger(path: str | Path) -> Ledger:
    """Load and validate a ledger snapshot file."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    ledger = ledger_from_dict(payload)
    logger.debug(
        f"Loaded {path}: {len(ledger.accounts)} accounts, "
        f"{len(ledger.transactions)} transactions, {len(ledger.categories)} categories"
    )
    return ledger


def save_ledger(ledger: Ledger, path: str | Path) -> None:
    """Write a ledger snapshot file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(ledger_to_dict(ledger), handle, indent=2)
        handle.write("\n")
