"""Public PocketLedger package exports."""

from __future__ import annotations

from pocketledger.__version__ import __version__
from pocketledger.budget import compute_available_to_budget, compute_monthly_summary
from pocketledger.exceptions import (
    BusinessRuleError,
    NotFoundError,
    ValidationError,
    ValidationIssue,
)
from pocketledger.ledger import Ledger
from pocketledger.lifecycle import (
    can_archive_account,
    can_delete_account,
    compute_balance,
    on_delete_category,
)
from pocketledger.models import (
    UNSET,
    Account,
    AdapterConfig,
    BudgetMetadata,
    Category,
    CategoryPatch,
    CreateAccountInput,
    CreateCategoryInput,
    CreateTransactionInput,
    Currency,
    MonthlySummary,
    Transaction,
    UpdateAccountInput,
    UpdateCategoryInput,
    UpdateTransactionInput,
)
from pocketledger.money import format_money, format_money_decimal, parse_money
from pocketledger.reorder import (
    ARCHIVED_GROUP,
    build_container_items,
    compute_reorder,
    find_container,
)
from pocketledger.transfers import (
    cascade_transfer_delete,
    create_transfer_pair,
    propagate_transfer_update,
)

__all__ = [
    "__version__",
    "ARCHIVED_GROUP",
    "UNSET",
    "Account",
    "AdapterConfig",
    "BudgetMetadata",
    "BusinessRuleError",
    "Category",
    "CategoryPatch",
    "CreateAccountInput",
    "CreateCategoryInput",
    "CreateTransactionInput",
    "Currency",
    "Ledger",
    "MonthlySummary",
    "NotFoundError",
    "Transaction",
    "UpdateAccountInput",
    "UpdateCategoryInput",
    "UpdateTransactionInput",
    "ValidationError",
    "ValidationIssue",
    "build_container_items",
    "can_archive_account",
    "can_delete_account",
    "cascade_transfer_delete",
    "compute_available_to_budget",
    "compute_balance",
    "compute_monthly_summary",
    "compute_reorder",
    "create_transfer_pair",
    "find_container",
    "format_money",
    "format_money_decimal",
    "on_delete_category",
    "parse_money",
    "propagate_transfer_update",
]
