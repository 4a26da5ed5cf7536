from __future__ import annotations

from potluck.auth.policy import CONTENT_WRITE
from potluck.core.errors import NotFoundError
from potluck.schemas.meal import MealCreate, MealDelete, MealReorder, MealUpdate
from potluck.services.pipeline import MutationContext, MutationSpec


def create_meal(ctx: MutationContext):
    payload: MealCreate = ctx.payload
    day = ctx.repos.days.get(ctx.event_id, payload.day_id)
    meals = ctx.repos.meals
    return ctx.create(
        meals,
        {
            "day_id": day.id,
            "title": payload.title,
            "time": payload.time,
            "address": payload.address,
            "adults": payload.adults,
            "children": payload.children,
            "order": meals.next_order(day.id),
        },
    )


def update_meal(ctx: MutationContext):
    meals = ctx.repos.meals
    meal = meals.get(ctx.event_id, ctx.payload.id)
    patch = ctx.patch(nullable=("time", "address"))
    target_day_id = patch.get("day_id")
    if target_day_id is not None and target_day_id != meal.day_id:
        ctx.repos.days.get(ctx.event_id, target_day_id)
        patch["order"] = meals.next_order(target_day_id)
    return ctx.update(meals, meal, patch)


def delete_meal(ctx: MutationContext):
    meals = ctx.repos.meals
    meal = meals.get(ctx.event_id, ctx.payload.id)
    ctx.delete(meals, meal)
    return {"success": True}


def reorder_meals(ctx: MutationContext):
    payload: MealReorder = ctx.payload
    day = ctx.repos.days.get(ctx.event_id, payload.day_id)
    meals = ctx.repos.meals
    by_id = {meal.id: meal for meal in meals.siblings(day.id)}
    for meal_id in payload.meal_ids:
        if meal_id not in by_id:
            raise NotFoundError(meals.table, meal_id)
    for order, meal_id in enumerate(payload.meal_ids):
        ctx.update(meals, by_id[meal_id], {"order": order})
    return [by_id[meal_id] for meal_id in payload.meal_ids]


MUTATIONS = [
    MutationSpec("meal.create", MealCreate, create_meal, CONTENT_WRITE),
    MutationSpec("meal.update", MealUpdate, update_meal, CONTENT_WRITE),
    MutationSpec("meal.delete", MealDelete, delete_meal, CONTENT_WRITE),
    MutationSpec("meal.reorder", MealReorder, reorder_meals, CONTENT_WRITE),
]
