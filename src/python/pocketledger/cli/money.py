"""Money formatting CLI commands."""

from __future__ import annotations

import click

from pocketledger.cli.common import get_config
from pocketledger.exceptions import ValidationError
from pocketledger.models import Currency
from pocketledger.money import format_money, parse_money


def _resolve_currency(ctx: click.Context, code: str | None, precision: int | None) -> Currency:
    configured = get_config(ctx).budget.currency
    try:
        return Currency(
            code=code or configured.code,
            precision=configured.precision if precision is None else precision,
        )
    except ValidationError as exc:
        raise click.BadParameter(str(exc), param_hint="--currency/--precision") from exc


@click.group()
@click.option("--currency", "code", default=None, help="Currency code (defaults to the budget currency).")
@click.option("--precision", type=int, default=None, help="Minor-unit digits (defaults to the budget currency).")
@click.pass_context
def money(ctx: click.Context, code: str | None, precision: int | None) -> None:
    """Convert between minor units and display text."""
    ctx.obj = {**(ctx.obj or {}), "currency_code": code, "currency_precision": precision}


@money.command("format")
@click.argument("amount", type=int)
@click.pass_context
def format_amount(ctx: click.Context, amount: int) -> None:
    """Format an integer minor-unit AMOUNT, e.g. 123456 -> $1,234.56."""
    currency = _resolve_currency(ctx, ctx.obj["currency_code"], ctx.obj["currency_precision"])
    click.echo(format_money(amount, currency))


@money.command("parse")
@click.argument("text")
@click.pass_context
def parse_amount_text(ctx: click.Context, text: str) -> None:
    """Parse display TEXT into integer minor units, e.g. "$1,234.56" -> 123456."""
    currency = _resolve_currency(ctx, ctx.obj["currency_code"], ctx.obj["currency_precision"])
    try:
        click.echo(parse_money(text, currency))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="TEXT") from exc
