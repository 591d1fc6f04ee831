"""Monthly budget aggregation."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from pocketledger.exceptions import ValidationError, ValidationIssue
from pocketledger.ledger import Ledger
from pocketledger.lifecycle import compute_balance
from pocketledger.models import (
    Account,
    Category,
    CategorySummary,
    GroupSummary,
    MonthlySummary,
    Transaction,
)
from pocketledger.schema import GROUP_ORDER, INCOME_GROUP, MONTH_PATTERN, UNCATEGORIZED


def _ensure_month(month: str) -> str:
    if isinstance(month, str) and MONTH_PATTERN.match(month) and 1 <= int(month[5:]) <= 12:
        return month
    raise ValidationError("Invalid month", [ValidationIssue(("month",), "Expected YYYY-MM")])


def _in_month(tx: Transaction, month: str) -> bool:
    return tx.date.startswith(f"{month}-")


def order_groups(names: Iterable[str]) -> list[str]:
    """Order group names canonically, then custom groups alphabetically."""
    names = set(names)
    known = [name for name in GROUP_ORDER if name in names]
    custom = sorted(name for name in names if name not in GROUP_ORDER)
    return known + custom


def compute_total_assigned(categories: Iterable[Category]) -> int:
    """Sum the plan across non-archived, non-income categories."""
    return sum(
        cat.assigned for cat in categories if not cat.archived and cat.group != INCOME_GROUP
    )


def compute_available_to_budget(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> int:
    """All-time balance of every non-archived account minus the total assigned.

    Neither term depends on the month: balances include every transaction
    ever recorded, and assigned amounts persist until reassigned.
    """
    transactions = list(transactions)
    funds = sum(
        compute_balance(transactions, account.id) for account in accounts if not account.archived
    )
    return funds - compute_total_assigned(categories)


def _summarize_group(
    name: str,
    categories: list[Category],
    spent_by_category: dict[str, int],
) -> GroupSummary:
    is_income = name == INCOME_GROUP
    summaries = []
    for cat in sorted(categories, key=lambda item: item.sort_order):
        spent = spent_by_category.get(cat.id, 0)
        if is_income:
            summaries.append(CategorySummary(cat.id, cat.name, 0, spent, 0))
        else:
            summaries.append(
                CategorySummary(cat.id, cat.name, cat.assigned, spent, cat.assigned + spent)
            )
    return GroupSummary(
        name=name,
        categories=tuple(summaries),
        total_assigned=sum(item.assigned for item in summaries),
        total_spent=sum(item.spent for item in summaries),
        total_available=sum(item.available for item in summaries),
    )


def compute_monthly_summary(ledger: Ledger, month: str) -> MonthlySummary:
    """Compute every budget figure shown for one calendar month.

    Spend figures only count transactions dated in ``month``; balances and
    assigned amounts are month independent.

    Args:
        ledger: Current accounts, transactions and categories
        month: Target month in YYYY-MM form

    Raises:
        ValidationError: If ``month`` is not a valid YYYY-MM value
    """
    month = _ensure_month(month)
    month_txs = [tx for tx in ledger.transactions if _in_month(tx, month)]

    spent_by_category: dict[str, int] = defaultdict(int)
    for tx in month_txs:
        if tx.category_id != UNCATEGORIZED:
            spent_by_category[tx.category_id] += tx.amount

    members: dict[str, list[Category]] = defaultdict(list)
    for cat in ledger.categories:
        if not cat.archived:
            members[cat.group].append(cat)

    groups = tuple(
        _summarize_group(name, members[name], spent_by_category)
        for name in order_groups(members)
    )

    uncategorized_spent = sum(
        tx.amount
        for tx in month_txs
        if tx.category_id == UNCATEGORIZED and not tx.is_transfer
    )
    total_income = sum(tx.amount for tx in month_txs if tx.type == "income")

    return MonthlySummary(
        month=month,
        available_to_budget=compute_available_to_budget(
            ledger.accounts, ledger.transactions, ledger.categories
        ),
        total_income=total_income,
        total_assigned=compute_total_assigned(ledger.categories),
        groups=groups,
        uncategorized_spent=uncategorized_spent,
    )
