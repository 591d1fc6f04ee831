"""Budget CLI commands."""

from __future__ import annotations

import click

from pocketledger.budget import compute_monthly_summary
from pocketledger.cli.common import get_session, parse_month
from pocketledger.money import format_money


@click.group()
def budget() -> None:
    """Budget commands."""


@budget.command("summary")
@click.option("--month", default=None, help="Month in YYYY-MM (defaults to the current month).")
@click.pass_context
def budget_summary(ctx: click.Context, month: str | None) -> None:
    """Show assigned, spent and available figures for a month.

    Examples:
        pocketledger budget summary
        pocketledger budget summary --month 2026-02
    """
    month = parse_month(month, "--month")
    with get_session(ctx) as session:
        summary = compute_monthly_summary(session.ledger, month)
        currency = session.currency

    def fmt(amount: int) -> str:
        return format_money(amount, currency)

    click.echo(f"\nBudget for {summary.month}")
    click.echo("=" * 80)
    click.echo(f"{'Available to budget:':<24} {fmt(summary.available_to_budget):>18}")
    click.echo(f"{'Income this month:':<24} {fmt(summary.total_income):>18}")
    click.echo(f"{'Total assigned:':<24} {fmt(summary.total_assigned):>18}")
    for group in summary.groups:
        click.echo(f"\n{group.name}:")
        click.echo("-" * 80)
        click.echo(f"{'Category':<26} {'Assigned':>16} {'Spent':>16} {'Available':>16}")
        click.echo("-" * 80)
        for item in group.categories:
            click.echo(
                f"{item.name:<26} {fmt(item.assigned):>16} "
                f"{fmt(item.spent):>16} {fmt(item.available):>16}"
            )
        click.echo("-" * 80)
        click.echo(
            f"{'Total':<26} {fmt(group.total_assigned):>16} "
            f"{fmt(group.total_spent):>16} {fmt(group.total_available):>16}"
        )
    if summary.uncategorized_spent:
        click.echo(f"\nUncategorized: {fmt(summary.uncategorized_spent)}")
