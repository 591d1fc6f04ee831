"""Ledger state snapshot and the validated mutations applied to it.

A :class:`Ledger` is an immutable snapshot of the three collections. Every
mutation validates its input, enforces the business rules, and returns a
new snapshot that the caller swaps in as a whole; a failed mutation raises
and leaves the original snapshot untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
import logging
import os
from typing import Any, TypeVar
import uuid

from pocketledger.categories import default_categories
from pocketledger.exceptions import BusinessRuleError, NotFoundError, ValidationError, ValidationIssue
from pocketledger.lifecycle import can_archive_account, can_delete_account, on_delete_category
from pocketledger.models import (
    Account,
    Category,
    CategoryPatch,
    CreateAccountInput,
    CreateCategoryInput,
    CreateTransactionInput,
    Transaction,
    UpdateAccountInput,
    UpdateCategoryInput,
    UpdateTransactionInput,
    today_iso,
    utc_timestamp,
)
from pocketledger.reorder import apply_category_patches, compute_move
from pocketledger.schema import INCOME_GROUP, OPENING_BALANCE_DESCRIPTION, UNCATEGORIZED
from pocketledger.transfers import (
    cascade_transfer_delete,
    check_transfer_type_change,
    create_transfer_pair,
    propagate_transfer_update,
)

InputT = TypeVar("InputT")

# Configure logging
logger = logging.getLogger(__name__)
log_level = os.environ.get('LOGGING_LEVEL', 'INFO').upper()
logger.setLevel(getattr(logging, log_level, logging.INFO))
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('%(levelname)s - %(name)s - %(message)s'))
    logger.addHandler(handler)


@dataclass(frozen=True)
class Ledger:
    """Immutable snapshot of accounts, transactions and categories."""

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    categories: tuple[Category, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "accounts", tuple(self.accounts))
        object.__setattr__(self, "transactions", tuple(self.transactions))
        object.__setattr__(self, "categories", tuple(self.categories))

    @classmethod
    def empty(cls) -> Ledger:
        """Return a ledger with no accounts and the stock categories."""
        return cls(categories=default_categories())

    def get_account(self, account_id: str) -> Account:
        for account in self.accounts:
            if account.id == account_id:
                return account
        raise NotFoundError(f"Account not found: {account_id}")

    def get_transaction(self, transaction_id: str) -> Transaction:
        for tx in self.transactions:
            if tx.id == transaction_id:
                return tx
        raise NotFoundError(f"Transaction not found: {transaction_id}")

    def get_category(self, category_id: str) -> Category:
        for cat in self.categories:
            if cat.id == category_id:
                return cat
        raise NotFoundError(f"Category not found: {category_id}")

    def account_transactions(self, account_id: str) -> list[Transaction]:
        return [tx for tx in self.transactions if tx.account_id == account_id]


def _coerce(input_type: type[InputT], payload: InputT | Mapping[str, Any]) -> InputT:
    """Accept either a validated input DTO or a raw mapping."""
    if isinstance(payload, input_type):
        return payload
    return input_type.from_dict(payload)


def _replace_one(items: Iterable, updated: Any) -> tuple:
    return tuple(updated if item.id == updated.id else item for item in items)


def _ensure_category_ref(ledger: Ledger, category_id: str) -> None:
    if category_id != UNCATEGORIZED:
        ledger.get_category(category_id)


def _ensure_group_name(ledger: Ledger, group: str) -> None:
    """Reject a group named like a category id; both are drop targets when reordering."""
    if any(cat.id == group for cat in ledger.categories):
        raise ValidationError(
            "Invalid category group",
            [ValidationIssue(("group",), f"Group name clashes with category id {group!r}")],
        )


# -- Accounts --------------------------------------------------------------


def create_account(
    ledger: Ledger,
    payload: CreateAccountInput | Mapping[str, Any],
) -> tuple[Ledger, Account]:
    """Create an account plus its opening-balance transaction.

    A non-negative starting balance is recorded as income in the first active
    Income category; a negative one (credit cards, loans) as an uncategorized
    expense, so the transaction sign rules always hold.
    """
    parsed = _coerce(CreateAccountInput, payload)
    logger.debug(f"create_account called: name={parsed.name}, type={parsed.type}")
    now = utc_timestamp()
    account = Account(
        id=str(uuid.uuid4()),
        name=parsed.name,
        type=parsed.type,
        institution=parsed.institution,
        created_at=now,
    )
    income_category = next(
        (cat for cat in ledger.categories if cat.group == INCOME_GROUP and not cat.archived),
        None,
    )
    if parsed.starting_balance >= 0:
        tx_type = "income"
        category_id = income_category.id if income_category else UNCATEGORIZED
    else:
        tx_type = "expense"
        category_id = UNCATEGORIZED
    opening = Transaction(
        id=str(uuid.uuid4()),
        type=tx_type,
        account_id=account.id,
        date=today_iso(),
        amount=parsed.starting_balance,
        category_id=category_id,
        description=OPENING_BALANCE_DESCRIPTION,
        created_at=now,
    )
    logger.info(f"Created account {account.id} ({account.name})")
    return (
        replace(
            ledger,
            accounts=(*ledger.accounts, account),
            transactions=(*ledger.transactions, opening),
        ),
        account,
    )


def update_account(
    ledger: Ledger,
    account_id: str,
    payload: UpdateAccountInput | Mapping[str, Any],
) -> Ledger:
    """Patch an account; archiving requires a zero balance."""
    changes = _coerce(UpdateAccountInput, payload).changes()
    account = ledger.get_account(account_id)
    if not changes:
        return ledger
    if changes.get("archived") and not can_archive_account(ledger.transactions, account_id):
        logger.warning(f"Refusing to archive account {account_id} with non-zero balance")
        raise BusinessRuleError("Cannot archive account with non-zero balance")
    updated = replace(account, **changes)
    logger.info(f"Updated account {account_id}: {sorted(changes)}")
    return replace(ledger, accounts=_replace_one(ledger.accounts, updated))


def archive_account(ledger: Ledger, account_id: str, archived: bool = True) -> Ledger:
    """Archive or unarchive an account."""
    return update_account(ledger, account_id, UpdateAccountInput(archived=archived))


def delete_account(ledger: Ledger, account_id: str) -> Ledger:
    """Delete an account that no transaction references."""
    ledger.get_account(account_id)
    if not can_delete_account(ledger.transactions, account_id):
        logger.warning(f"Refusing to delete account {account_id} with transactions")
        raise BusinessRuleError("Cannot delete account that has transactions")
    logger.info(f"Deleted account {account_id}")
    return replace(
        ledger,
        accounts=tuple(account for account in ledger.accounts if account.id != account_id),
    )


# -- Transactions ----------------------------------------------------------


def create_transaction(
    ledger: Ledger,
    payload: CreateTransactionInput | Mapping[str, Any],
) -> tuple[Ledger, Transaction]:
    """Record an expense or income transaction.

    Transfers are only created as linked pairs through :func:`create_transfer`.
    """
    parsed = _coerce(CreateTransactionInput, payload)
    if parsed.type == "transfer":
        raise BusinessRuleError("Transfers must be created as a pair with create_transfer")
    ledger.get_account(parsed.account_id)
    _ensure_category_ref(ledger, parsed.category_id)
    transaction = Transaction(
        id=str(uuid.uuid4()),
        type=parsed.type,
        account_id=parsed.account_id,
        date=parsed.date,
        amount=parsed.amount,
        category_id=parsed.category_id,
        description=parsed.description,
        payee=parsed.payee,
        notes=parsed.notes,
        source=parsed.source,
        created_at=utc_timestamp(),
    )
    logger.info(f"Created {transaction.type} {transaction.id} on account {transaction.account_id}")
    return replace(ledger, transactions=(*ledger.transactions, transaction)), transaction


def create_transfer(
    ledger: Ledger,
    from_account_id: str,
    to_account_id: str,
    amount: int,
    date: str,
    *,
    description: str = "",
    payee: str = "",
    notes: str = "",
) -> tuple[Ledger, tuple[Transaction, Transaction]]:
    """Record a transfer as its outflow and inflow legs."""
    ledger.get_account(from_account_id)
    ledger.get_account(to_account_id)
    if from_account_id == to_account_id:
        raise ValidationError(
            "Invalid transfer",
            [ValidationIssue(("to_account_id",), "From account and to account must differ")],
        )
    pair = create_transfer_pair(
        from_account_id,
        to_account_id,
        amount,
        date,
        description=description,
        payee=payee,
        notes=notes,
    )
    logger.info(f"Created transfer {pair[0].id} -> {pair[1].id}")
    return replace(ledger, transactions=(*ledger.transactions, *pair)), pair


def update_transaction(
    ledger: Ledger,
    transaction_id: str,
    payload: UpdateTransactionInput | Mapping[str, Any],
) -> Ledger:
    """Patch a transaction, mirroring amount and date onto a transfer sibling.

    The merged record is validated as a whole, so an amount-only patch whose
    sign contradicts the stored type is rejected here.

    Raises:
        BusinessRuleError: If the patch changes the type to or from transfer
        ValidationError: If the patched record is invalid
        NotFoundError: If the transaction, account or category does not exist
    """
    changes = _coerce(UpdateTransactionInput, payload).changes()
    existing = ledger.get_transaction(transaction_id)
    if not changes:
        return ledger
    if "type" in changes:
        check_transfer_type_change(existing.type, changes["type"])
    if "account_id" in changes:
        ledger.get_account(changes["account_id"])
    if "category_id" in changes:
        _ensure_category_ref(ledger, changes["category_id"])
    updated = replace(existing, **changes)
    if existing.is_transfer:
        transactions = propagate_transfer_update(ledger.transactions, updated)
    else:
        transactions = list(_replace_one(ledger.transactions, updated))
    logger.info(f"Updated transaction {transaction_id}: {sorted(changes)}")
    return replace(ledger, transactions=transactions)


def delete_transaction(ledger: Ledger, transaction_id: str) -> Ledger:
    """Delete a transaction; deleting a transfer leg removes both legs."""
    ledger.get_transaction(transaction_id)
    transactions = cascade_transfer_delete(ledger.transactions, transaction_id)
    logger.info(
        f"Deleted transaction {transaction_id} "
        f"({len(ledger.transactions) - len(transactions)} removed)"
    )
    return replace(ledger, transactions=transactions)


# -- Categories ------------------------------------------------------------


def create_category(
    ledger: Ledger,
    payload: CreateCategoryInput | Mapping[str, Any],
) -> tuple[Ledger, Category]:
    parsed = _coerce(CreateCategoryInput, payload)
    _ensure_group_name(ledger, parsed.group)
    category = Category(
        id=str(uuid.uuid4()),
        name=parsed.name,
        group=parsed.group,
        assigned=parsed.assigned,
        sort_order=parsed.sort_order,
    )
    logger.info(f"Created category {category.id} ({category.name}) in {category.group}")
    return replace(ledger, categories=(*ledger.categories, category)), category


def update_category(
    ledger: Ledger,
    category_id: str,
    payload: UpdateCategoryInput | Mapping[str, Any],
) -> Ledger:
    changes = _coerce(UpdateCategoryInput, payload).changes()
    category = ledger.get_category(category_id)
    if not changes:
        return ledger
    if "group" in changes:
        _ensure_group_name(ledger, changes["group"])
    updated = replace(category, **changes)
    logger.info(f"Updated category {category_id}: {sorted(changes)}")
    return replace(ledger, categories=_replace_one(ledger.categories, updated))


def delete_category(ledger: Ledger, category_id: str) -> Ledger:
    """Delete a category, leaving its transactions uncategorized."""
    ledger.get_category(category_id)
    logger.info(f"Deleted category {category_id}")
    return replace(
        ledger,
        categories=tuple(cat for cat in ledger.categories if cat.id != category_id),
        transactions=on_delete_category(ledger.transactions, category_id),
    )


def reorder_categories(ledger: Ledger, patches: Iterable[CategoryPatch]) -> Ledger:
    """Apply reorder patches produced by the reorder engine."""
    patches = list(patches)
    if not patches:
        return ledger
    for patch in patches:
        if "group" in patch.changes:
            _ensure_group_name(ledger, patch.changes["group"])
    logger.info(f"Applying {len(patches)} category patches")
    return replace(ledger, categories=apply_category_patches(ledger.categories, patches))


def move_category(
    ledger: Ledger,
    category_id: str,
    over_id: str,
) -> tuple[Ledger, list[CategoryPatch]]:
    """Drop a category onto another category or container and apply the result."""
    patches = compute_move(ledger.categories, category_id, over_id)
    return reorder_categories(ledger, patches), patches
