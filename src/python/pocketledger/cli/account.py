"""Account CLI commands."""

from __future__ import annotations

import click

from pocketledger import ledger as ops
from pocketledger.cli.common import get_session, parse_amount
from pocketledger.lifecycle import compute_balance
from pocketledger.money import format_money
from pocketledger.schema import ACCOUNT_TYPES


@click.group()
def account() -> None:
    """Account commands."""


@account.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include archived accounts.")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default=None, help="Filter by account type.")
@click.pass_context
def list_accounts(ctx: click.Context, show_all: bool, account_type: str | None) -> None:
    """List accounts with their computed balances.

    Examples:
        pocketledger account list
        pocketledger account list --type checking
        pocketledger account list --all
    """
    with get_session(ctx) as session:
        accounts = [
            item
            for item in session.ledger.accounts
            if (show_all or not item.archived)
            and (account_type is None or item.type == account_type)
        ]
        if not accounts:
            click.echo("No accounts found.")
            return

        click.echo("\nAccounts:")
        click.echo("-" * 96)
        click.echo(f"{'ID':<38} {'Name':<24} {'Type':<12} {'Balance':>18}")
        click.echo("-" * 96)
        for item in accounts:
            balance = format_money(
                compute_balance(session.ledger.transactions, item.id), session.currency
            )
            name = f"{item.name} (archived)" if item.archived else item.name
            click.echo(f"{item.id:<38} {name:<24} {item.type:<12} {balance:>18}")
        click.echo("-" * 96)


@account.command("add")
@click.option("--name", required=True, help="Account name.")
@click.option("--type", "account_type", required=True, type=click.Choice(ACCOUNT_TYPES), help="Account type.")
@click.option("--institution", default="", help="Bank or institution name.")
@click.option("--starting-balance", "starting_balance_str", default="0", help="Opening balance, e.g. 1250.00 or -300.")
@click.pass_context
def add_account(
    ctx: click.Context,
    name: str,
    account_type: str,
    institution: str,
    starting_balance_str: str,
) -> None:
    """Add an account and record its opening balance."""
    with get_session(ctx) as session:
        starting_balance = parse_amount(starting_balance_str, "--starting-balance", session.currency)
        ledger, record = ops.create_account(
            session.ledger,
            {
                "name": name,
                "type": account_type,
                "institution": institution,
                "starting_balance": starting_balance,
            },
        )
        session.apply(ledger)
    click.echo(f"Added account {record.id}")


@account.command("update")
@click.argument("account_id")
@click.option("--name", default=None, help="Updated name.")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default=None, help="Updated type.")
@click.option("--institution", default=None, help="Updated institution.")
@click.option("--reported-balance", "reported_balance_str", default=None, help="Externally reported balance.")
@click.pass_context
def update_account(
    ctx: click.Context,
    account_id: str,
    name: str | None,
    account_type: str | None,
    institution: str | None,
    reported_balance_str: str | None,
) -> None:
    """Update an account."""
    if name is None and account_type is None and institution is None and reported_balance_str is None:
        raise click.UsageError("Provide --name, --type, --institution, or --reported-balance.")
    with get_session(ctx) as session:
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = name
        if account_type is not None:
            changes["type"] = account_type
        if institution is not None:
            changes["institution"] = institution
        if reported_balance_str is not None:
            changes["reported_balance"] = parse_amount(
                reported_balance_str, "--reported-balance", session.currency
            )
        session.apply(ops.update_account(session.ledger, account_id, changes))
    click.echo(f"Updated account {account_id}")


@account.command("archive")
@click.argument("account_id")
@click.pass_context
def archive_account(ctx: click.Context, account_id: str) -> None:
    """Archive an account with a zero balance."""
    with get_session(ctx) as session:
        session.apply(ops.archive_account(session.ledger, account_id, True))
    click.echo(f"Archived account {account_id}")


@account.command("unarchive")
@click.argument("account_id")
@click.pass_context
def unarchive_account(ctx: click.Context, account_id: str) -> None:
    """Restore an archived account."""
    with get_session(ctx) as session:
        session.apply(ops.archive_account(session.ledger, account_id, False))
    click.echo(f"Unarchived account {account_id}")


@account.command("delete")
@click.argument("account_id")
@click.option("--yes", is_flag=True, help="Skip delete confirmation.")
@click.pass_context
def delete_account(ctx: click.Context, account_id: str, yes: bool) -> None:
    """Delete an account that has no transactions."""
    if not yes:
        confirm = click.confirm("Delete account?", default=False)
        if not confirm:
            click.echo("Delete cancelled.")
            return
    with get_session(ctx) as session:
        session.apply(ops.delete_account(session.ledger, account_id))
    click.echo(f"Deleted account {account_id}")
