"""PocketLedger CLI entry point."""

from __future__ import annotations

from pathlib import Path

import click

from pocketledger.__version__ import __version__
from pocketledger.cli.account import account
from pocketledger.cli.budget import budget
from pocketledger.cli.category import category
from pocketledger.cli.common import get_config, resolve_ledger_path
from pocketledger.cli.money import money
from pocketledger.cli.transaction import transaction, transfer
from pocketledger.ledger import Ledger
from pocketledger.snapshot import save_ledger


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="pocketledger")
@click.option(
    "--ledger",
    "ledger_path",
    type=click.Path(path_type=Path),
    help="Path to the ledger snapshot file.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Path to the configuration file.",
)
@click.pass_context
def main(ctx: click.Context, ledger_path: Path | None, config_path: Path | None) -> None:
    """PocketLedger CLI entry point."""
    ctx.obj = {
        "ledger_path": ledger_path,
        "config_path": config_path,
    }


@main.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing ledger file.")
@click.pass_context
def init_ledger(ctx: click.Context, force: bool) -> None:
    """Create an empty ledger seeded with the default categories."""
    config = get_config(ctx)
    path = resolve_ledger_path(ctx, config)
    if path.exists() and not force:
        raise click.ClickException(f"Ledger file {path} already exists. Use --force to overwrite.")
    save_ledger(Ledger.empty(), path)
    click.echo(f"Created ledger {path}")


@main.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the resolved configuration."""
    config = get_config(ctx)
    budget_meta = config.budget
    click.echo(f"Config file: {config.source or '(defaults)'}")
    click.echo(f"Ledger file: {resolve_ledger_path(ctx, config)}")
    click.echo(f"Budget: {budget_meta.name} (version {budget_meta.version})")
    click.echo(
        f"Currency: {budget_meta.currency.code} (precision {budget_meta.currency.precision})"
    )
    if config.storage is None:
        click.echo("Storage: (none)")
    else:
        options = ", ".join(f"{key}={value}" for key, value in sorted(config.storage.options.items()))
        click.echo(f"Storage: {config.storage.type}" + (f" [{options}]" if options else ""))


main.add_command(account)
main.add_command(transaction)
main.add_command(transfer)
main.add_command(category)
main.add_command(budget)
main.add_command(money)


if __name__ == "__main__":
    main()
