"""Category CLI commands."""

from __future__ import annotations

import click

from pocketledger import ledger as ops
from pocketledger.budget import order_groups
from pocketledger.cli.common import get_session, parse_amount
from pocketledger.money import format_money
from pocketledger.reorder import build_container_items, compute_reorder, container_key
from pocketledger.schema import ARCHIVED_GROUP


@click.group()
def category() -> None:
    """Category commands."""


@category.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include archived categories.")
@click.pass_context
def list_categories(ctx: click.Context, show_all: bool) -> None:
    """List categories by group in display order.

    Examples:
        pocketledger category list
        pocketledger category list --all
    """
    with get_session(ctx) as session:
        by_id = {cat.id: cat for cat in session.ledger.categories}
        containers = build_container_items(session.ledger.categories)
        archived_ids = containers.pop(ARCHIVED_GROUP)
        if not containers and not (show_all and archived_ids):
            click.echo("No categories found.")
            return

        sections = [(name, containers[name]) for name in order_groups(containers)]
        if show_all:
            sections.append(("Archived", archived_ids))
        for name, ids in sections:
            click.echo(f"\n{name}:")
            click.echo("-" * 80)
            click.echo(f"{'Seq':<5} {'ID':<38} {'Name':<20} {'Assigned':>14}")
            click.echo("-" * 80)
            for item_id in ids:
                cat = by_id[item_id]
                assigned = format_money(cat.assigned, session.currency)
                click.echo(f"{cat.sort_order:<5} {cat.id:<38} {cat.name:<20} {assigned:>14}")


@category.command("add")
@click.option("--name", required=True, help="Category name.")
@click.option("--group", required=True, help="Group name, e.g. Fixed or Daily Living.")
@click.option("--assigned", "assigned_str", default="0", help="Planned monthly amount.")
@click.option("--sort-order", type=int, default=None, help="Position in the group (defaults to last).")
@click.pass_context
def add_category(
    ctx: click.Context,
    name: str,
    group: str,
    assigned_str: str,
    sort_order: int | None,
) -> None:
    """Add a category."""
    with get_session(ctx) as session:
        assigned = parse_amount(assigned_str, "--assigned", session.currency)
        if sort_order is None:
            members = build_container_items(session.ledger.categories).get(group, [])
            sort_order = len(members) + 1
        ledger, record = ops.create_category(
            session.ledger,
            {"name": name, "group": group, "assigned": assigned, "sort_order": sort_order},
        )
        session.apply(ledger)
    click.echo(f"Added category {record.id}")


@category.command("update")
@click.argument("category_id")
@click.option("--name", default=None, help="Updated name.")
@click.option("--assigned", "assigned_str", default=None, help="Updated planned monthly amount.")
@click.pass_context
def update_category(
    ctx: click.Context,
    category_id: str,
    name: str | None,
    assigned_str: str | None,
) -> None:
    """Rename a category or change its assigned amount.

    Use 'category move' to change its group or position.
    """
    if name is None and assigned_str is None:
        raise click.UsageError("Provide --name or --assigned.")
    with get_session(ctx) as session:
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = name
        if assigned_str is not None:
            changes["assigned"] = parse_amount(assigned_str, "--assigned", session.currency)
        session.apply(ops.update_category(session.ledger, category_id, changes))
    click.echo(f"Updated category {category_id}")


@category.command("delete")
@click.argument("category_id")
@click.option("--yes", is_flag=True, help="Skip delete confirmation.")
@click.pass_context
def delete_category(ctx: click.Context, category_id: str, yes: bool) -> None:
    """Delete a category; its transactions become uncategorized."""
    if not yes:
        confirm = click.confirm("Delete category?", default=False)
        if not confirm:
            click.echo("Delete cancelled.")
            return
    with get_session(ctx) as session:
        session.apply(ops.delete_category(session.ledger, category_id))
    click.echo(f"Deleted category {category_id}")


@category.command("move")
@click.argument("category_id")
@click.option("--before", "before_id", default=None, help="Place before this category id.")
@click.option("--to-group", default=None, help="Move to the end of this group.")
@click.option("--archive", is_flag=True, help="Move to the end of the archived categories.")
@click.pass_context
def move_category(
    ctx: click.Context,
    category_id: str,
    before_id: str | None,
    to_group: str | None,
    archive: bool,
) -> None:
    """Reorder a category, move it to another group, or archive it.

    Examples:
        pocketledger category move 4 --before 2
        pocketledger category move 4 --to-group "Daily Living"
        pocketledger category move 4 --archive
    """
    targets = [value for value in (before_id, to_group) if value is not None]
    if len(targets) + int(archive) != 1:
        raise click.UsageError("Provide exactly one of --before, --to-group, or --archive.")
    over_id = ARCHIVED_GROUP if archive else targets[0]
    with get_session(ctx) as session:
        active = session.ledger.get_category(category_id)
        containers = build_container_items(session.ledger.categories)
        if to_group is not None and to_group not in containers:
            # A group with no active members has no container to drop onto.
            source_group = container_key(active)
            patches = compute_reorder(
                session.ledger.categories,
                category_id,
                source_group,
                [item_id for item_id in containers[source_group] if item_id != category_id],
                to_group,
                [category_id],
            )
            session.apply(ops.reorder_categories(session.ledger, patches))
        else:
            if before_id is not None:
                session.ledger.get_category(before_id)
            ledger, patches = ops.move_category(session.ledger, category_id, over_id)
            session.apply(ledger)
    if not patches:
        click.echo("Nothing to move.")
        return
    click.echo(f"Moved category {category_id}")
