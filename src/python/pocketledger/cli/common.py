"""Shared CLI helpers."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import click

from pocketledger.config import AppConfig, load_config
from pocketledger.exceptions import BusinessRuleError, NotFoundError, ValidationError
from pocketledger.ledger import Ledger
from pocketledger.models import Currency
from pocketledger.money import parse_money
from pocketledger.schema import MONTH_PATTERN
from pocketledger.snapshot import load_ledger, save_ledger

DOMAIN_ERRORS = (ValidationError, BusinessRuleError, NotFoundError)


def parse_date(value: str | None, field_name: str) -> str | None:
    """Validate an ISO date string and return it unchanged."""
    if value is None:
        return None
    try:
        dt.date.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter("Use YYYY-MM-DD format.", param_hint=field_name) from exc
    return value


def parse_month(value: str | None, field_name: str) -> str:
    """Validate a YYYY-MM month, defaulting to the current month."""
    if value is None:
        return dt.date.today().strftime("%Y-%m")
    if not MONTH_PATTERN.match(value) or not 1 <= int(value[5:]) <= 12:
        raise click.BadParameter("Use YYYY-MM format.", param_hint=field_name)
    return value


def parse_amount(value: str | None, field_name: str, currency: Currency) -> int | None:
    """Parse decimal text into minor units at the currency precision."""
    if value is None:
        return None
    try:
        return parse_money(value, currency)
    except ValueError as exc:
        raise click.BadParameter("Use a valid amount.", param_hint=field_name) from exc


def get_config(ctx: click.Context) -> AppConfig:
    payload = ctx.obj or {}
    try:
        return load_config(payload.get("config_path"))
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc


def resolve_ledger_path(ctx: click.Context, config: AppConfig) -> Path:
    payload = ctx.obj or {}
    return payload.get("ledger_path") or config.ledger_path


class LedgerSession:
    """Load a ledger snapshot, apply mutations, and save on clean exit.

    Domain errors raised inside the block become ``click.ClickException``
    and the snapshot file is left untouched.
    """

    def __init__(self, path: Path, config: AppConfig) -> None:
        self.path = path
        self.config = config
        self.ledger: Ledger | None = None
        self.dirty = False

    @property
    def currency(self) -> Currency:
        return self.config.budget.currency

    def __enter__(self) -> "LedgerSession":
        if not self.path.exists():
            raise click.ClickException(
                f"Ledger file {self.path} not found. Run 'pocketledger init' first."
            )
        try:
            self.ledger = load_ledger(self.path)
        except ValidationError as exc:
            raise click.ClickException(f"Ledger file {self.path} is invalid: {exc}") from exc
        return self

    def apply(self, ledger: Ledger) -> None:
        """Replace the working snapshot with a mutated one."""
        if ledger is not self.ledger:
            self.ledger = ledger
            self.dirty = True

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is None:
            if self.dirty:
                save_ledger(self.ledger, self.path)
            return
        if isinstance(exc, DOMAIN_ERRORS):
            raise click.ClickException(str(exc)) from exc


def get_session(ctx: click.Context) -> LedgerSession:
    """Build a ledger session from Click context."""
    config = get_config(ctx)
    return LedgerSession(resolve_ledger_path(ctx, config), config)
