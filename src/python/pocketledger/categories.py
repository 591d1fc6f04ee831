"""Stock categories seeded into a new ledger."""

from __future__ import annotations

from pocketledger.models import Category

DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Income", "Income"),
    ("Housing", "Fixed"),
    ("Bills & Utilities", "Fixed"),
    ("Subscriptions", "Fixed"),
    ("Groceries", "Daily Living"),
    ("Dining Out", "Daily Living"),
    ("Transportation", "Daily Living"),
    ("Alcohol & Smoking", "Personal"),
    ("Health & Beauty", "Personal"),
    ("Clothing", "Personal"),
    ("Fun & Hobbies", "Personal"),
    ("Allowances", "Personal"),
    ("Education & Business", "Personal"),
    ("Gifts & Giving", "Personal"),
    ("Housekeeping & Maintenance", "Irregular"),
    ("Big Purchases", "Irregular"),
    ("Travel", "Irregular"),
    ("Taxes & Fees", "Irregular"),
)


def default_categories() -> list[Category]:
    """Return the stock categories with ids and sort order ``1..n``."""
    return [
        Category(id=str(index), name=name, group=group, sort_order=index)
        for index, (name, group) in enumerate(DEFAULT_CATEGORIES, start=1)
    ]
