from __future__ import annotations

from potluck.auth.policy import CONTENT_WRITE
from potluck.schemas.ingredient import IngredientClear, IngredientCreate, IngredientDelete, IngredientUpdate
from potluck.services.pipeline import MutationContext, MutationSpec


def create_ingredient(ctx: MutationContext):
    payload: IngredientCreate = ctx.payload
    item = ctx.repos.items.get(ctx.event_id, payload.item_id)
    ingredients = ctx.repos.ingredients
    return ctx.create(
        ingredients,
        {
            "item_id": item.id,
            "name": payload.name,
            "quantity": payload.quantity,
            "order": ingredients.next_order(item.id),
        },
    )


def update_ingredient(ctx: MutationContext):
    ingredients = ctx.repos.ingredients
    ingredient = ingredients.get(ctx.event_id, ctx.payload.id)
    return ctx.update(ingredients, ingredient, ctx.patch(nullable=("quantity",)))


def delete_ingredient(ctx: MutationContext):
    ingredients = ctx.repos.ingredients
    ingredient = ingredients.get(ctx.event_id, ctx.payload.id)
    ctx.delete(ingredients, ingredient)
    return {"success": True}


def clear_ingredients(ctx: MutationContext):
    """Delete every ingredient of one item; each deletion is audited."""

    payload: IngredientClear = ctx.payload
    item = ctx.repos.items.get(ctx.event_id, payload.item_id)
    ingredients = ctx.repos.ingredients
    for ingredient in ingredients.siblings(item.id):
        ctx.delete(ingredients, ingredient)
    return {"success": True}


MUTATIONS = [
    MutationSpec("ingredient.create", IngredientCreate, create_ingredient, CONTENT_WRITE),
    MutationSpec("ingredient.update", IngredientUpdate, update_ingredient, CONTENT_WRITE),
    MutationSpec("ingredient.delete", IngredientDelete, delete_ingredient, CONTENT_WRITE),
    MutationSpec("ingredient.delete_all", IngredientClear, clear_ingredients, CONTENT_WRITE),
]
