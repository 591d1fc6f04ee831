"""Domain models, input DTOs and derived summary records.

Every record and input type is a frozen dataclass that validates itself in
``__post_init__``. Validation gathers every problem it finds and raises a
single :class:`~pocketledger.exceptions.ValidationError` whose ``issues`` list
names the offending field paths, so a caller can highlight each field.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import MISSING, asdict, dataclass, field, fields
import datetime as dt
from typing import Any

from pocketledger.exceptions import ValidationError, ValidationIssue
from pocketledger.schema import (
    ACCOUNT_TYPES,
    ADAPTER_TYPES,
    DATE_PATTERN,
    DEFAULT_SOURCE,
    NO_TRANSFER_PAIR,
    TRANSACTION_SOURCES,
    TRANSACTION_TYPES,
    UNCATEGORIZED,
)

FieldPath = tuple[str | int, ...]


class _Unset:
    """Marker for fields a partial update did not supply."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO 8601 string with millisecond precision."""
    now = dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def today_iso() -> str:
    """Return today's local date as YYYY-MM-DD."""
    return dt.date.today().isoformat()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _ensure_int(
    owner: Any,
    name: str,
    issues: list[ValidationIssue],
    *,
    minimum: int | None = None,
    nullable: bool = False,
    path: FieldPath | None = None,
) -> None:
    """Validate an integer field, normalizing integral floats to int."""
    value = getattr(owner, name)
    path = path or (name,)
    if value is None and nullable:
        return
    if isinstance(value, float) and value.is_integer():
        value = int(value)
        object.__setattr__(owner, name, value)
    if not _is_int(value):
        issues.append(ValidationIssue(path, "Expected an integer"))
        return
    if minimum is not None and value < minimum:
        if minimum == 0:
            message = "Must be a non-negative integer"
        else:
            message = f"Must be greater than or equal to {minimum}"
        issues.append(ValidationIssue(path, message))


def _ensure_text(value: Any, name: str, issues: list[ValidationIssue]) -> bool:
    if not isinstance(value, str):
        issues.append(ValidationIssue((name,), "Expected a string"))
        return False
    return True


def _ensure_non_empty(value: Any, name: str, issues: list[ValidationIssue]) -> None:
    """Validate required text fields."""
    if not _ensure_text(value, name, issues):
        return
    if not value.strip():
        issues.append(ValidationIssue((name,), f"{name} is required"))


def _ensure_choice(
    value: Any,
    choices: tuple[str, ...],
    name: str,
    issues: list[ValidationIssue],
) -> bool:
    if value not in choices:
        allowed = ", ".join(choices)
        issues.append(ValidationIssue((name,), f"Expected one of: {allowed}"))
        return False
    return True


def _ensure_bool(value: Any, name: str, issues: list[ValidationIssue]) -> None:
    if not isinstance(value, bool):
        issues.append(ValidationIssue((name,), "Expected a boolean"))


def _ensure_date(value: Any, name: str, issues: list[ValidationIssue]) -> None:
    """Validate a calendar date in YYYY-MM-DD form."""
    if not _ensure_text(value, name, issues):
        return
    if not DATE_PATTERN.match(value):
        issues.append(ValidationIssue((name,), "Expected YYYY-MM-DD"))
        return
    try:
        dt.date.fromisoformat(value)
    except ValueError:
        issues.append(ValidationIssue((name,), "Not a valid calendar date"))


def _ensure_timestamp(value: Any, name: str, issues: list[ValidationIssue]) -> None:
    """Validate an ISO 8601 timestamp."""
    if not _ensure_text(value, name, issues):
        return
    if "T" not in value:
        issues.append(ValidationIssue((name,), "Expected an ISO 8601 timestamp"))
        return
    try:
        dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        issues.append(ValidationIssue((name,), "Expected an ISO 8601 timestamp"))


def _check_transaction_rules(
    tx_type: Any,
    amount: Any,
    category_id: Any,
    issues: list[ValidationIssue],
) -> None:
    """Apply the per-type sign and category rules when both sides are known."""
    if tx_type is UNSET:
        return
    if tx_type == "transfer" and category_id is not UNSET and category_id != UNCATEGORIZED:
        issues.append(
            ValidationIssue(("category_id",), 'Transfer transactions must have category_id = ""')
        )
    if amount is UNSET or not _is_int(amount):
        return
    if tx_type == "income" and amount < 0:
        issues.append(
            ValidationIssue(("amount",), "Income transactions must have a non-negative amount")
        )
    if tx_type == "expense" and amount > 0:
        issues.append(
            ValidationIssue(("amount",), "Expense transactions must have a non-positive amount")
        )


class _Validated:
    """Shared construction and validation behavior for models and DTOs."""

    def __post_init__(self) -> None:
        issues: list[ValidationIssue] = []
        self._validate(issues)
        if issues:
            raise ValidationError(f"Invalid {type(self).__name__}", issues)

    def _validate(self, issues: list[ValidationIssue]) -> None:
        raise NotImplementedError

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]):
        """Build an instance from a raw mapping; unknown keys are dropped."""
        if not isinstance(payload, Mapping):
            raise ValidationError(
                f"Invalid {cls.__name__}", [ValidationIssue((), "Expected an object")]
            )
        known = {}
        missing = []
        for item in fields(cls):
            if item.name in payload:
                known[item.name] = payload[item.name]
            elif item.default is MISSING and item.default_factory is MISSING:
                missing.append(ValidationIssue((item.name,), "Required"))
        if missing:
            raise ValidationError(f"Invalid {cls.__name__}", missing)
        return cls(**known)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class _PartialInput(_Validated):
    """Partial update input where unsupplied fields hold ``UNSET``."""

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller supplied."""
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not UNSET
        }

    def to_dict(self) -> dict[str, Any]:
        return self.changes()

    def _supplied(self, name: str) -> bool:
        return getattr(self, name) is not UNSET


# -- Value objects ---------------------------------------------------------


@dataclass(frozen=True)
class Currency(_Validated):
    """Currency code with the number of minor-unit decimal digits."""

    code: str
    precision: int

    def _validate(self, issues: list[ValidationIssue]) -> None:
        _ensure_non_empty(self.code, "code", issues)
        _ensure_int(self, "precision", issues, minimum=0)


# -- Entities --------------------------------------------------------------


@dataclass(frozen=True)
class Account(_Validated):
    """Persisted account record."""

    id: str
    name: str
    type: str
    created_at: str
    institution: str = ""
    reported_balance: int | None = None
    reconciled_at: str = ""
    archived: bool = False

    def _validate(self, issues: list[ValidationIssue]) -> None:
        _ensure_non_empty(self.id, "id", issues)
        _ensure_non_empty(self.name, "name", issues)
        _ensure_choice(self.type, ACCOUNT_TYPES, "type", issues)
        _ensure_text(self.institution, "institution", issues)
        _ensure_int(self, "reported_balance", issues, nullable=True)
        if self.reconciled_at != "":
            _ensure_date(self.reconciled_at, "reconciled_at", issues)
        _ensure_bool(self.archived, "archived", issues)
        _ensure_timestamp(self.created_at, "created_at", issues)


@dataclass(frozen=True)
class Transaction(_Validated):
    """Persisted transaction record.

    The ``type`` field is the single discriminator: expense amounts are
    never positive, income amounts never negative, and transfers carry an
    empty ``category_id`` plus the id of their sibling leg in
    ``transfer_pair_id``.
    """

    id: str
    type: str
    account_id: str
    date: str
    amount: int
    created_at: str
    category_id: str = UNCATEGORIZED
    description: str = ""
    payee: str = ""
    notes: str = ""
    transfer_pair_id: str = NO_TRANSFER_PAIR
    source: str = DEFAULT_SOURCE

    @property
    def is_transfer(self) -> bool:
        return self.type == "transfer"

    def _validate(self, issues: list[ValidationIssue]) -> None:
        _ensure_non_empty(self.id, "id", issues)
        valid_type = _ensure_choice(self.type, TRANSACTION_TYPES, "type", issues)
        _ensure_non_empty(self.account_id, "account_id", issues)
        _ensure_date(self.date, "date", issues)
        _ensure_int(self, "amount", issues)
        for name in ("category_id", "description", "payee", "notes", "transfer_pair_id"):
            _ensure_text(getattr(self, name), name, issues)
        _ensure_choice(self.source, TRANSACTION_SOURCES, "source", issues)
        _ensure_timestamp(self.created_at, "created_at", issues)
        if valid_type:
            _check_transaction_rules(self.type, self.amount, self.category_id, issues)
            if self.type != "transfer" and self.transfer_pair_id != NO_TRANSFER_PAIR:
                issues.append(
                    ValidationIssue(
                        ("transfer_pair_id",),
                        "Only transfer transactions may reference a pair",
                    )
                )


@dataclass(frozen=True)
class Category(_Validated):
    """Budget category with its recurring monthly allocation."""

    id: str
    name: str
    group: str
    sort_order: int
    assigned: int = 0
    archived: bool = False

    def _validate(self, issues: list[ValidationIssue]) -> None:
        _ensure_non_empty(self.id, "id", issues)
        _ensure_non_empty(self.name, "name", issues)
        _ensure_non_empty(self.group, "group", issues)
        _ensure_int(self, "assigned", issues, minimum=0)
        _ensure_int(self, "sort_order", issues)
        _ensure_bool(self.archived, "archived", issues)


@dataclass(frozen=True)
class BudgetMetadata(_Validated):
    """Describes one budget instance as a whole."""

    name: str
    currency: Currency
    version: int = 1

    def _validate(self, issues: list[ValidationIssue]) -> None:
        _ensure_non_empty(self.name, "name", issues)
        if isinstance(self.currency, Mapping):
            try:
                object.__setattr__(self, "currency", Currency.from_dict(self.currency))
            except ValidationError as exc:
                issues.extend(
                    ValidationIssue(("currency", *issue.path), issue.message)
                    for issue in exc.issues
                )
        elif not isinstance(self.currency, Currency):
            issues.append(ValidationIssue(("currency",), "Expected a currency object"))
        _ensure_int(self, "version", issues, minimum=1)


@dataclass(frozen=True)
class AdapterConfig(_Validated):
    """Storage adapter configuration, discriminated by ``type``.

    Everything except ``type`` is adapter specific and kept verbatim in
    ``options``.
    """

    type: str
    options: dict[str, Any] = field(default_factory=dict)

    def _validate(self, issues: list[ValidationIssue]) -> None:
        _ensure_choice(self.type, ADAPTER_TYPES, "type", issues)
        if not isinstance(self.options, Mapping):
            issues.append(ValidationIssue(("options",), "Expected an object"))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> AdapterConfig:
        if not isinstance(payload, Mapping):
            raise ValidationError(
                "Invalid AdapterConfig", [ValidationIssue((), "Expected an object")]
            )
        if "type" not in payload:
            raise ValidationError("Invalid AdapterConfig", [ValidationIssue(("type",), "Required")])
        options = {key: value for key, value in payload.items() if key != "type"}
        return cls(type=payload["type"], options=options)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, **self.options}


# -- Inputs ----------------------------------------------------------------


@dataclass(frozen=True)
class CreateAccountInput(_Validated):
    """Validated account creation input."""

    name: str
    type: str
    institution: str = ""
    starting_balance: int = 0

    def _validate(self, issues: list[ValidationIssue]) -> None:
        _ensure_non_empty(self.name, "name", issues)
        _ensure_choice(self.type, ACCOUNT_TYPES, "type", issues)
        _ensure_text(self.institution, "institution", issues)
        _ensure_int(self, "starting_balance", issues)


@dataclass(frozen=True)
class UpdateAccountInput(_PartialInput):
    """Partial account update; every field is optional."""

    name: str = UNSET
    type: str = UNSET
    institution: str = UNSET
    reported_balance: int | None = UNSET
    archived: bool = UNSET

    def _validate(self, issues: list[ValidationIssue]) -> None:
        if self._supplied("name"):
            _ensure_non_empty(self.name, "name", issues)
        if self._supplied("type"):
            _ensure_choice(self.type, ACCOUNT_TYPES, "type", issues)
        if self._supplied("institution"):
            _ensure_text(self.institution, "institution", issues)
        if self._supplied("reported_balance"):
            _ensure_int(self, "reported_balance", issues, nullable=True)
        if self._supplied("archived"):
            _ensure_bool(self.archived, "archived", issues)


@dataclass(frozen=True)
class CreateTransactionInput(_Validated):
    """Validated transaction creation input."""

    type: str
    account_id: str
    date: str
    amount: int
    category_id: str = UNCATEGORIZED
    description: str = ""
    payee: str = ""
    notes: str = ""
    source: str = DEFAULT_SOURCE

    def _validate(self, issues: list[ValidationIssue]) -> None:
        valid_type = _ensure_choice(self.type, TRANSACTION_TYPES, "type", issues)
        _ensure_non_empty(self.account_id, "account_id", issues)
        _ensure_date(self.date, "date", issues)
        _ensure_int(self, "amount", issues)
        for name in ("category_id", "description", "payee", "notes"):
            _ensure_text(getattr(self, name), name, issues)
        _ensure_choice(self.source, TRANSACTION_SOURCES, "source", issues)
        if valid_type:
            _check_transaction_rules(self.type, self.amount, self.category_id, issues)


@dataclass(frozen=True)
class UpdateTransactionInput(_PartialInput):
    """Partial transaction update.

    Sign and category rules only run when ``type`` is supplied alongside the
    field it constrains; an ``amount``-only update is not checked against the
    stored type here.
    """

    type: str = UNSET
    account_id: str = UNSET
    date: str = UNSET
    category_id: str = UNSET
    description: str = UNSET
    payee: str = UNSET
    amount: int = UNSET
    notes: str = UNSET
    source: str = UNSET

    def _validate(self, issues: list[ValidationIssue]) -> None:
        valid_type = True
        if self._supplied("type"):
            valid_type = _ensure_choice(self.type, TRANSACTION_TYPES, "type", issues)
        if self._supplied("account_id"):
            _ensure_non_empty(self.account_id, "account_id", issues)
        if self._supplied("date"):
            _ensure_date(self.date, "date", issues)
        if self._supplied("amount"):
            _ensure_int(self, "amount", issues)
        for name in ("category_id", "description", "payee", "notes"):
            if self._supplied(name):
                _ensure_text(getattr(self, name), name, issues)
        if self._supplied("source"):
            _ensure_choice(self.source, TRANSACTION_SOURCES, "source", issues)
        if valid_type:
            _check_transaction_rules(self.type, self.amount, self.category_id, issues)


@dataclass(frozen=True)
class CreateCategoryInput(_Validated):
    """Validated category creation input."""

    name: str
    group: str
    sort_order: int
    assigned: int = 0

    def _validate(self, issues: list[ValidationIssue]) -> None:
        _ensure_non_empty(self.name, "name", issues)
        _ensure_non_empty(self.group, "group", issues)
        _ensure_int(self, "assigned", issues, minimum=0)
        _ensure_int(self, "sort_order", issues)


@dataclass(frozen=True)
class UpdateCategoryInput(_PartialInput):
    """Partial category update; every field is optional."""

    name: str = UNSET
    group: str = UNSET
    assigned: int = UNSET
    sort_order: int = UNSET
    archived: bool = UNSET

    def _validate(self, issues: list[ValidationIssue]) -> None:
        if self._supplied("name"):
            _ensure_non_empty(self.name, "name", issues)
        if self._supplied("group"):
            _ensure_non_empty(self.group, "group", issues)
        if self._supplied("assigned"):
            _ensure_int(self, "assigned", issues, minimum=0)
        if self._supplied("sort_order"):
            _ensure_int(self, "sort_order", issues)
        if self._supplied("archived"):
            _ensure_bool(self.archived, "archived", issues)


# -- Derived records -------------------------------------------------------


@dataclass(frozen=True)
class CategoryPatch:
    """Field changes for one category produced by a reorder."""

    id: str
    changes: dict[str, Any]


@dataclass(frozen=True)
class CategorySummary:
    """Budget figures for one category in one month."""

    id: str
    name: str
    assigned: int
    spent: int
    available: int


@dataclass(frozen=True)
class GroupSummary:
    """Budget figures for one category group in one month."""

    name: str
    categories: tuple[CategorySummary, ...]
    total_assigned: int
    total_spent: int
    total_available: int


@dataclass(frozen=True)
class MonthlySummary:
    """Headline figures, group breakdown and uncategorized spend for a month.

    Attributes:
        month: Target month in YYYY-MM form
        available_to_budget: Balance of every non-archived account minus total_assigned
        total_income: Sum of income transactions dated in the month
        total_assigned: Sum of assigned over non-archived, non-income categories
        groups: Group summaries in display order
        uncategorized_spent: Month total of non-transfer transactions with no category
    """

    month: str
    available_to_budget: int
    total_income: int
    total_assigned: int
    groups: tuple[GroupSummary, ...]
    uncategorized_spent: int

    def group(self, name: str) -> GroupSummary | None:
        for summary in self.groups:
            if summary.name == name:
                return summary
        return None
