from __future__ import annotations

import uuid
from datetime import date

from potluck.auth.policy import EVENT_MANAGE
from potluck.models.user import User
from potluck.schemas.event import EventCreate, EventDelete, EventUpdate
from potluck.services.pipeline import MutationContext, MutationSpec
from potluck.services.sanitize import sanitize_slug, sanitize_strict_text

SLUG_MAX_LENGTH = 100
OWNER_EMOJI = "\U0001F451"
SEEDED_DAY_TITLE = "Repas complet"
# Literal path segments under /events.
RESERVED_SLUGS = frozenset({"mine"})

COURSES_BY_MODE = {
    "total": ["Aperitif", "Entree", "Plats", "Fromage", "Dessert", "Boissons", "Autre"],
    "classique": ["Entree", "Plats", "Dessert"],
    "apero": ["Aperitif", "Boissons"],
    "zero": [],
}


def generate_admin_key() -> str:
    return uuid.uuid4().hex


def unique_slug(ctx: MutationContext, requested: str) -> str:
    slug = requested
    counter = 1
    while slug in RESERVED_SLUGS or ctx.repos.events.slug_taken(slug):
        suffix = f"-{counter}"
        slug = sanitize_slug(requested[: SLUG_MAX_LENGTH - len(suffix)] + suffix, SLUG_MAX_LENGTH)
        counter += 1
    return slug


def _add_owner_as_person(ctx: MutationContext, event, user_id: int) -> None:
    user = ctx.db.get(User, user_id)
    if user is None:
        return
    name = sanitize_strict_text(user.name or "", 50) or "Utilisateur"
    ctx.create(ctx.repos.people, {"event_id": event.id, "name": name, "emoji": OWNER_EMOJI, "user_id": user_id})


def _seed_courses(ctx: MutationContext, event, mode: str | None, day_date: date | None) -> None:
    courses = COURSES_BY_MODE.get(mode or "zero", [])
    if not courses:
        return
    day = ctx.create(
        ctx.repos.days,
        {"event_id": event.id, "date": day_date or date.today(), "title": SEEDED_DAY_TITLE, "order": 0},
    )
    for order, title in enumerate(courses):
        ctx.create(
            ctx.repos.meals,
            {
                "day_id": day.id,
                "title": title,
                "adults": event.adults,
                "children": event.children,
                "order": order,
            },
        )


def create_event(ctx: MutationContext):
    payload: EventCreate = ctx.payload
    owner_id = ctx.credentials.user_id
    event = ctx.create(
        ctx.repos.events,
        {
            "slug": unique_slug(ctx, payload.slug),
            "name": payload.name,
            "description": payload.description,
            "admin_key": payload.key or generate_admin_key(),
            "owner_id": owner_id,
            "adults": payload.adults,
            "children": payload.children,
        },
    )
    ctx.event = event
    if owner_id is not None:
        _add_owner_as_person(ctx, event, owner_id)
    _seed_courses(ctx, event, payload.creation_mode, payload.date)
    return event


def update_event(ctx: MutationContext):
    return ctx.update(ctx.repos.events, ctx.event, ctx.patch(nullable=("description",)))


def delete_event(ctx: MutationContext):
    ctx.delete(ctx.repos.events, ctx.event)
    return {"success": True}


MUTATIONS = [
    MutationSpec("event.create", EventCreate, create_event),
    MutationSpec("event.update", EventUpdate, update_event, EVENT_MANAGE),
    MutationSpec("event.delete", EventDelete, delete_event, EVENT_MANAGE),
]
