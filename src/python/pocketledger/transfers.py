"""Bookkeeping for the two linked legs that make up a transfer."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
import logging
import uuid

from pocketledger.exceptions import BusinessRuleError
from pocketledger.models import Transaction, utc_timestamp
from pocketledger.schema import DEFAULT_SOURCE, NO_TRANSFER_PAIR, UNCATEGORIZED

logger = logging.getLogger(__name__)


def create_transfer_pair(
    from_account_id: str,
    to_account_id: str,
    amount: int,
    date: str,
    *,
    description: str = "",
    payee: str = "",
    notes: str = "",
) -> tuple[Transaction, Transaction]:
    """Build the outflow and inflow legs for a transfer.

    The sign of ``amount`` is ignored: the outflow leg on ``from_account_id``
    always carries ``-abs(amount)`` and the inflow leg on ``to_account_id``
    carries ``+abs(amount)``. Each leg's ``transfer_pair_id`` is the other
    leg's id.

    Returns:
        ``(outflow, inflow)``
    """
    magnitude = abs(amount)
    outflow_id = str(uuid.uuid4())
    inflow_id = str(uuid.uuid4())
    shared = {
        "type": "transfer",
        "date": date,
        "category_id": UNCATEGORIZED,
        "description": description,
        "payee": payee,
        "notes": notes,
        "source": DEFAULT_SOURCE,
        "created_at": utc_timestamp(),
    }
    outflow = Transaction(
        id=outflow_id,
        account_id=from_account_id,
        transfer_pair_id=inflow_id,
        amount=-magnitude,
        **shared,
    )
    inflow = Transaction(
        id=inflow_id,
        account_id=to_account_id,
        transfer_pair_id=outflow_id,
        amount=magnitude,
        **shared,
    )
    return outflow, inflow


def check_transfer_type_change(existing_type: str, new_type: str) -> None:
    """Reject any in-place change of a transaction to or from ``transfer``."""
    if existing_type == new_type:
        return
    if existing_type == "transfer" or new_type == "transfer":
        raise BusinessRuleError(
            f"Cannot change transaction type from {existing_type!r} to {new_type!r}; "
            "transfers cannot be converted in place"
        )


def propagate_transfer_update(
    transactions: Iterable[Transaction],
    updated_leg: Transaction,
) -> list[Transaction]:
    """Replace a patched leg and mirror its amount and date onto the sibling.

    Raises:
        BusinessRuleError: If the patch turns a transfer into another type or
            the reverse. Nothing is replaced in that case.
    """
    transactions = list(transactions)
    for tx in transactions:
        if tx.id == updated_leg.id:
            check_transfer_type_change(tx.type, updated_leg.type)
            break

    pair_id = updated_leg.transfer_pair_id
    result = []
    for tx in transactions:
        if tx.id == updated_leg.id:
            result.append(updated_leg)
        elif pair_id != NO_TRANSFER_PAIR and tx.id == pair_id:
            result.append(replace(tx, amount=-updated_leg.amount, date=updated_leg.date))
        else:
            result.append(tx)
    return result


def cascade_transfer_delete(
    transactions: Iterable[Transaction],
    transaction_id: str,
) -> list[Transaction]:
    """Remove a transaction and, when it is a transfer leg, its sibling too."""
    transactions = list(transactions)
    target = next((tx for tx in transactions if tx.id == transaction_id), None)
    doomed = {transaction_id}
    if target is not None and target.transfer_pair_id != NO_TRANSFER_PAIR:
        doomed.add(target.transfer_pair_id)
    logger.debug(f"Removing transactions {sorted(doomed)}")
    return [tx for tx in transactions if tx.id not in doomed]


def find_orphaned_legs(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return transfer legs whose pairing is broken.

    A leg is orphaned when its sibling is missing, is not a transfer, does not
    point back, or does not carry the negated amount.
    """
    transactions = list(transactions)
    by_id = {tx.id: tx for tx in transactions}
    orphans = []
    for tx in transactions:
        if not tx.is_transfer:
            continue
        sibling = by_id.get(tx.transfer_pair_id)
        if (
            sibling is None
            or sibling.id == tx.id
            or not sibling.is_transfer
            or sibling.transfer_pair_id != tx.id
            or sibling.amount != -tx.amount
        ):
            orphans.append(tx)
    return orphans
