"""Domain constants shared by the ledger modules."""

from __future__ import annotations

import re

ACCOUNT_TYPES = (
    "cash",
    "checking",
    "savings",
    "credit_card",
    "loan",
    "asset",
    "crypto",
)

TRANSACTION_TYPES = ("expense", "income", "transfer")
TRANSACTION_SOURCES = ("manual", "ai_agent", "import")

DEFAULT_SOURCE = "manual"
UNCATEGORIZED = ""
NO_TRANSFER_PAIR = ""

INCOME_GROUP = "Income"
GROUP_ORDER = ("Income", "Fixed", "Daily Living", "Personal", "Irregular")

# Control characters cannot be typed into a group name, so this never
# collides with a real group.
ARCHIVED_GROUP = "\x00archived"

ADAPTER_TYPES = ("csv", "mongodb")

OPENING_BALANCE_DESCRIPTION = "Opening Balance"

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_PATTERN = re.compile(r"^\d{4}-\d{2}$")
