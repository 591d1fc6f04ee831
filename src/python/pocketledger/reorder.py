"""Category reordering across groups and the archived bucket.

A drag session sees one container per active group, keyed by group name,
plus the archived bucket keyed by :data:`ARCHIVED_GROUP`. Reordering
produces the smallest set of :class:`CategoryPatch` records that leaves
every touched container numbered ``1..n`` by ``sort_order``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
import logging

from pocketledger.models import Category, CategoryPatch
from pocketledger.schema import ARCHIVED_GROUP

logger = logging.getLogger(__name__)

ContainerItems = dict[str, list[str]]


def container_key(category: Category) -> str:
    """Return the container a category currently lives in."""
    return ARCHIVED_GROUP if category.archived else category.group


def build_container_items(categories: Iterable[Category]) -> ContainerItems:
    """Map each container key to its member ids ordered by ``sort_order``.

    Archived categories go to the archived bucket whatever their stored
    group. The archived bucket is always present, even when empty.
    """
    members: dict[str, list[Category]] = {}
    archived: list[Category] = []
    for cat in categories:
        if cat.archived:
            archived.append(cat)
        else:
            members.setdefault(cat.group, []).append(cat)
    containers: ContainerItems = {
        group: [cat.id for cat in sorted(cats, key=lambda item: item.sort_order)]
        for group, cats in members.items()
    }
    containers[ARCHIVED_GROUP] = [
        cat.id for cat in sorted(archived, key=lambda item: item.sort_order)
    ]
    return containers


def find_container(item_id: str, containers: ContainerItems) -> str | None:
    """Resolve an id to its owning container.

    An id that is itself a container key resolves to that container.
    """
    if item_id in containers:
        return item_id
    for key, ids in containers.items():
        if item_id in ids:
            return key
    return None


def move_item(containers: ContainerItems, active_id: str, over_id: str) -> ContainerItems:
    """Return a copy of ``containers`` with ``active_id`` dropped onto ``over_id``.

    Dropping onto an item places the moved id at that item's position;
    dropping onto a container key appends it. Unresolvable ids leave the
    copy unchanged.
    """
    moved = {key: list(ids) for key, ids in containers.items()}
    source = find_container(active_id, moved)
    target = find_container(over_id, moved)
    if source is None or target is None or active_id in moved:
        return moved

    source_ids = moved[source]
    target_ids = moved[target]
    old_index = source_ids.index(active_id)
    if source == target:
        new_index = len(target_ids) - 1 if over_id == target else target_ids.index(over_id)
        source_ids.insert(new_index, source_ids.pop(old_index))
        return moved

    source_ids.pop(old_index)
    if over_id == target:
        target_ids.append(active_id)
    else:
        target_ids.insert(target_ids.index(over_id), active_id)
    return moved


def _renumber(
    order: Sequence[str],
    by_id: dict[str, Category],
    patches: list[CategoryPatch],
) -> None:
    for position, item_id in enumerate(order, start=1):
        cat = by_id.get(item_id)
        if cat is None:
            continue
        existing = next((patch for patch in patches if patch.id == item_id), None)
        if existing is not None:
            existing.changes["sort_order"] = position
        elif cat.sort_order != position:
            patches.append(CategoryPatch(item_id, {"sort_order": position}))


def compute_reorder(
    categories: Iterable[Category],
    active_id: str,
    source_group: str,
    source_order: Sequence[str],
    target_group: str,
    target_order: Sequence[str],
) -> list[CategoryPatch]:
    """Compute the patches that realize a drag move.

    Args:
        categories: Current categories
        active_id: Id of the moved category
        source_group: Container the category started in
        source_order: Source container ids after the move (cross-container only)
        target_group: Container the category was dropped in
        target_order: Target container ids after the move

    Returns:
        The moved category's group/archived patch first (cross-container
        moves), then ``sort_order`` patches for the target and, for
        cross-container moves, the source container. An unknown
        ``active_id`` yields an empty list.
    """
    by_id = {cat.id: cat for cat in categories}
    patches: list[CategoryPatch] = []
    if active_id not in by_id:
        logger.debug(f"Ignoring reorder of unknown category {active_id}")
        return patches

    cross_container = source_group != target_group
    if cross_container:
        if target_group == ARCHIVED_GROUP:
            changes = {"archived": True}
        elif source_group == ARCHIVED_GROUP:
            changes = {"archived": False, "group": target_group}
        else:
            changes = {"group": target_group}
        patches.append(CategoryPatch(active_id, changes))

    _renumber(target_order, by_id, patches)
    if cross_container:
        _renumber(source_order, by_id, patches)
    return patches


def compute_move(
    categories: Iterable[Category],
    active_id: str,
    over_id: str,
) -> list[CategoryPatch]:
    """Compute patches for dropping ``active_id`` onto an item or container.

    Combines :func:`move_item` and :func:`compute_reorder` the way a finished
    drag gesture does.
    """
    categories = list(categories)
    active = next((cat for cat in categories if cat.id == active_id), None)
    if active is None:
        return []
    containers = build_container_items(categories)
    if over_id not in containers and find_container(over_id, containers) is None:
        return []
    moved = move_item(containers, active_id, over_id)
    source_group = container_key(active)
    target_group = find_container(active_id, moved)
    source_order = moved.get(source_group, []) if source_group != target_group else []
    return compute_reorder(
        categories,
        active_id,
        source_group,
        source_order,
        target_group,
        moved[target_group],
    )


def apply_category_patches(
    categories: Iterable[Category],
    patches: Iterable[CategoryPatch],
) -> list[Category]:
    """Return categories with every patch merged in."""
    changes_by_id: dict[str, dict] = {}
    for patch in patches:
        changes_by_id.setdefault(patch.id, {}).update(patch.changes)
    return [
        replace(cat, **changes_by_id[cat.id]) if cat.id in changes_by_id else cat
        for cat in categories
    ]
