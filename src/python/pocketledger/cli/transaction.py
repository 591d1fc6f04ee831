"""Transaction and transfer CLI commands."""

from __future__ import annotations

import click

from pocketledger import ledger as ops
from pocketledger.cli.common import get_session, parse_amount, parse_date, parse_month
from pocketledger.models import Transaction, today_iso
from pocketledger.money import format_money


def _signed_amount(tx_type: str, magnitude: int, reference: int = 0) -> int:
    """Apply the stored sign convention to an amount entered as a positive value."""
    magnitude = abs(magnitude)
    if tx_type == "expense":
        return -magnitude
    if tx_type == "transfer" and reference < 0:
        return -magnitude
    return magnitude


@click.group()
def transaction() -> None:
    """Transaction commands."""


@transaction.command("list")
@click.option("--account", "account_id", default=None, help="Filter by account id.")
@click.option("--month", default=None, help="Filter by month in YYYY-MM.")
@click.option("--limit", type=int, default=None, help="Limit results.")
@click.pass_context
def list_transactions(
    ctx: click.Context,
    account_id: str | None,
    month: str | None,
    limit: int | None,
) -> None:
    """List transactions, newest first."""
    prefix = f"{parse_month(month, '--month')}-" if month else None
    with get_session(ctx) as session:
        records: list[Transaction] = sorted(
            session.ledger.transactions,
            key=lambda item: (item.date, item.created_at),
            reverse=True,
        )
        if account_id:
            records = [record for record in records if record.account_id == account_id]
        if prefix:
            records = [record for record in records if record.date.startswith(prefix)]
        if limit is not None:
            records = records[:limit]
        for record in records:
            click.echo(
                f"{record.id}\t{record.date}\t{record.type}\t"
                f"{format_money(record.amount, session.currency)}\t{record.account_id}"
                f"\t{record.category_id}\t{record.description}"
            )


@transaction.command("add")
@click.option("--type", "tx_type", required=True, type=click.Choice(["expense", "income"]), help="Transaction type.")
@click.option("--account", "account_id", required=True, help="Account id.")
@click.option("--amount", "amount_str", required=True, help="Amount as a positive value, e.g. 45.50.")
@click.option("--date", "date_value", default=None, help="Transaction date in YYYY-MM-DD (defaults to today).")
@click.option("--category", "category_id", default="", help="Category id (empty for uncategorized).")
@click.option("--description", default="", help="Description.")
@click.option("--payee", default="", help="Payee.")
@click.option("--notes", default="", help="Notes.")
@click.pass_context
def add_transaction(
    ctx: click.Context,
    tx_type: str,
    account_id: str,
    amount_str: str,
    date_value: str | None,
    category_id: str,
    description: str,
    payee: str,
    notes: str,
) -> None:
    """Add an expense or income.

    Amounts are entered as positive values; expenses are stored negative.

    Examples:
        pocketledger transaction add --type expense --account ID --amount 45.50 --category 5
        pocketledger transaction add --type income --account ID --amount 3200 --date 2026-02-01
    """
    date = parse_date(date_value, "--date") or today_iso()
    with get_session(ctx) as session:
        amount = parse_amount(amount_str, "--amount", session.currency)
        ledger, record = ops.create_transaction(
            session.ledger,
            {
                "type": tx_type,
                "account_id": account_id,
                "date": date,
                "amount": _signed_amount(tx_type, amount),
                "category_id": category_id,
                "description": description,
                "payee": payee,
                "notes": notes,
            },
        )
        session.apply(ledger)
    click.echo(f"Added {tx_type} {record.id}")


@transaction.command("update")
@click.argument("transaction_id")
@click.option("--amount", "amount_str", default=None, help="Updated amount as a positive value.")
@click.option("--date", "date_value", default=None, help="Updated date in YYYY-MM-DD.")
@click.option("--category", "category_id", default=None, help="Updated category id.")
@click.option("--description", default=None, help="Updated description.")
@click.option("--payee", default=None, help="Updated payee.")
@click.option("--notes", default=None, help="Updated notes.")
@click.pass_context
def update_transaction(
    ctx: click.Context,
    transaction_id: str,
    amount_str: str | None,
    date_value: str | None,
    category_id: str | None,
    description: str | None,
    payee: str | None,
    notes: str | None,
) -> None:
    """Update a transaction; transfer updates are mirrored onto the other leg."""
    options = (amount_str, date_value, category_id, description, payee, notes)
    if all(value is None for value in options):
        raise click.UsageError(
            "Provide --amount, --date, --category, --description, --payee, or --notes."
        )
    date = parse_date(date_value, "--date")
    with get_session(ctx) as session:
        existing = session.ledger.get_transaction(transaction_id)
        changes: dict[str, object] = {}
        if amount_str is not None:
            amount = parse_amount(amount_str, "--amount", session.currency)
            changes["amount"] = _signed_amount(existing.type, amount, existing.amount)
        if date is not None:
            changes["date"] = date
        if category_id is not None:
            changes["category_id"] = category_id
        if description is not None:
            changes["description"] = description
        if payee is not None:
            changes["payee"] = payee
        if notes is not None:
            changes["notes"] = notes
        session.apply(ops.update_transaction(session.ledger, transaction_id, changes))
    click.echo(f"Updated transaction {transaction_id}")


@transaction.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Skip delete confirmation.")
@click.pass_context
def delete_transaction(ctx: click.Context, transaction_id: str, yes: bool) -> None:
    """Delete a transaction; deleting a transfer leg deletes both legs."""
    if not yes:
        confirm = click.confirm("Delete transaction?", default=False)
        if not confirm:
            click.echo("Delete cancelled.")
            return
    with get_session(ctx) as session:
        session.apply(ops.delete_transaction(session.ledger, transaction_id))
    click.echo(f"Deleted transaction {transaction_id}")


@click.group()
def transfer() -> None:
    """Transfer commands."""


@transfer.command("add")
@click.option("--from-account", required=True, help="Source account id.")
@click.option("--to-account", required=True, help="Destination account id.")
@click.option("--amount", "amount_str", required=True, help="Transfer amount.")
@click.option("--date", "date_value", default=None, help="Transfer date in YYYY-MM-DD (defaults to today).")
@click.option("--description", default="", help="Description.")
@click.option("--payee", default="", help="Payee.")
@click.option("--notes", default="", help="Notes.")
@click.pass_context
def add_transfer(
    ctx: click.Context,
    from_account: str,
    to_account: str,
    amount_str: str,
    date_value: str | None,
    description: str,
    payee: str,
    notes: str,
) -> None:
    """Add a transfer between two accounts."""
    date = parse_date(date_value, "--date") or today_iso()
    with get_session(ctx) as session:
        amount = parse_amount(amount_str, "--amount", session.currency)
        ledger, (outflow, inflow) = ops.create_transfer(
            session.ledger,
            from_account,
            to_account,
            amount,
            date,
            description=description,
            payee=payee,
            notes=notes,
        )
        session.apply(ledger)
    click.echo(f"Added transfer {outflow.id} -> {inflow.id}")
