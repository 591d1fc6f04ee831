"""Custom exception types for PocketLedger."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationIssue:
    """A single field problem found while validating input."""

    path: tuple[str | int, ...]
    message: str

    def __str__(self) -> str:
        location = ".".join(str(part) for part in self.path) or "<root>"
        return f"{location}: {self.message}"


class ValidationError(ValueError):
    """Raised when a record or input payload fails schema validation."""

    def __init__(self, message: str, issues: list[ValidationIssue]) -> None:
        detail = "; ".join(str(issue) for issue in issues)
        super().__init__(f"{message}: {detail}" if detail else message)
        self.issues = issues

    def paths(self) -> list[tuple[str | int, ...]]:
        """Return the field paths of every issue."""
        return [issue.path for issue in self.issues]


class BusinessRuleError(Exception):
    """Raised when a structurally valid operation is forbidden."""


class NotFoundError(Exception):
    """Raised when a requested record does not exist."""
