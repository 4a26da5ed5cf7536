from __future__ import annotations

from potluck.auth.policy import CONTENT_WRITE
from potluck.core.errors import NotFoundError
from potluck.schemas.item import ItemAssign, ItemCreate, ItemDelete, ItemMove, ItemReorder, ItemToggle, ItemUpdate
from potluck.services.pipeline import MutationContext, MutationSpec


def _check_person(ctx: MutationContext, person_id: int | None) -> None:
    if person_id is not None:
        ctx.repos.people.get(ctx.event_id, person_id)


def _renumber(ctx: MutationContext, rows) -> None:
    items = ctx.repos.items
    for order, row in enumerate(rows):
        if row.order != order:
            ctx.update(items, row, {"order": order})


def create_item(ctx: MutationContext):
    payload: ItemCreate = ctx.payload
    meal = ctx.repos.meals.get(ctx.event_id, payload.meal_id)
    _check_person(ctx, payload.person_id)
    items = ctx.repos.items
    return ctx.create(
        items,
        {
            "meal_id": meal.id,
            "name": payload.name,
            "quantity": payload.quantity,
            "note": payload.note,
            "price": payload.price,
            "person_id": payload.person_id,
            "order": items.next_order(meal.id),
        },
    )


def update_item(ctx: MutationContext):
    items = ctx.repos.items
    item = items.get(ctx.event_id, ctx.payload.id)
    patch = ctx.patch(nullable=("quantity", "note", "price", "person_id"))
    _check_person(ctx, patch.get("person_id"))
    return ctx.update(items, item, patch)


def delete_item(ctx: MutationContext):
    items = ctx.repos.items
    item = items.get(ctx.event_id, ctx.payload.id)
    ctx.delete(items, item)
    return {"success": True}


def assign_item(ctx: MutationContext):
    payload: ItemAssign = ctx.payload
    items = ctx.repos.items
    item = items.get(ctx.event_id, payload.id)
    _check_person(ctx, payload.person_id)
    return ctx.update(items, item, {"person_id": payload.person_id})


def toggle_item(ctx: MutationContext):
    payload: ItemToggle = ctx.payload
    items = ctx.repos.items
    item = items.get(ctx.event_id, payload.id)
    return ctx.update(items, item, {"checked": payload.checked})


def reorder_items(ctx: MutationContext):
    payload: ItemReorder = ctx.payload
    meal = ctx.repos.meals.get(ctx.event_id, payload.meal_id)
    items = ctx.repos.items
    by_id = {item.id: item for item in items.siblings(meal.id)}
    for item_id in payload.item_ids:
        if item_id not in by_id:
            raise NotFoundError(items.table, item_id)
    for order, item_id in enumerate(payload.item_ids):
        ctx.update(items, by_id[item_id], {"order": order})
    return [by_id[item_id] for item_id in payload.item_ids]


def move_item(ctx: MutationContext):
    """Move an item to another meal of the same event, optionally at a given position."""

    payload: ItemMove = ctx.payload
    items = ctx.repos.items
    item = items.get(ctx.event_id, payload.item_id)
    target = ctx.repos.meals.get(ctx.event_id, payload.target_meal_id)
    source_meal_id = item.meal_id

    siblings = [row for row in items.siblings(target.id) if row.id != item.id]
    position = len(siblings) if payload.target_order is None else min(payload.target_order, len(siblings))

    ctx.update(items, item, {"meal_id": target.id, "order": position})
    siblings.insert(position, item)
    _renumber(ctx, siblings)
    if source_meal_id != target.id:
        _renumber(ctx, [row for row in items.siblings(source_meal_id) if row.id != item.id])
    return item


MUTATIONS = [
    MutationSpec("item.create", ItemCreate, create_item, CONTENT_WRITE),
    MutationSpec("item.update", ItemUpdate, update_item, CONTENT_WRITE),
    MutationSpec("item.delete", ItemDelete, delete_item, CONTENT_WRITE),
    MutationSpec("item.assign", ItemAssign, assign_item, CONTENT_WRITE),
    MutationSpec("item.toggle", ItemToggle, toggle_item, CONTENT_WRITE),
    MutationSpec("item.reorder", ItemReorder, reorder_items, CONTENT_WRITE),
    MutationSpec("item.move", ItemMove, move_item, CONTENT_WRITE),
]
