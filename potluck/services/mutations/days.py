from __future__ import annotations

from potluck.auth.policy import CONTENT_WRITE
from potluck.schemas.day import DayCreate, DayDelete, DayUpdate
from potluck.services.pipeline import MutationContext, MutationSpec


def create_day(ctx: MutationContext):
    payload: DayCreate = ctx.payload
    days = ctx.repos.days
    return ctx.create(
        days,
        {
            "event_id": ctx.event_id,
            "date": payload.date,
            "title": payload.title,
            "order": days.next_order(ctx.event_id),
        },
    )


def update_day(ctx: MutationContext):
    days = ctx.repos.days
    day = days.get(ctx.event_id, ctx.payload.id)
    return ctx.update(days, day, ctx.patch(nullable=("title",)))


def delete_day(ctx: MutationContext):
    days = ctx.repos.days
    day = days.get(ctx.event_id, ctx.payload.id)
    ctx.delete(days, day)
    return {"success": True}


MUTATIONS = [
    MutationSpec("day.create", DayCreate, create_day, CONTENT_WRITE),
    MutationSpec("day.update", DayUpdate, update_day, CONTENT_WRITE),
    MutationSpec("day.delete", DayDelete, delete_day, CONTENT_WRITE),
]
