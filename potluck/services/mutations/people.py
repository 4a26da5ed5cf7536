from __future__ import annotations

from potluck.auth.policy import CONTENT_WRITE, PERSON_DELETE, PERSON_UPDATE, is_event_manager
from potluck.core.errors import FORBIDDEN, AuthorizationError, ValidationError
from potluck.schemas.person import PersonClaim, PersonCreate, PersonDelete, PersonRsvp, PersonUpdate
from potluck.services.pipeline import MutationContext, MutationSpec


def _owned_person(ctx: MutationContext, person_id: int):
    person = ctx.repos.people.get(ctx.event_id, person_id)
    ctx.require(PERSON_UPDATE, person_id=person.id, person_user_id=person.user_id)
    return person


def create_person(ctx: MutationContext):
    payload: PersonCreate = ctx.payload
    return ctx.create(
        ctx.repos.people,
        {"event_id": ctx.event_id, "name": payload.name, "emoji": payload.emoji},
    )


def update_person(ctx: MutationContext):
    person = _owned_person(ctx, ctx.payload.id)
    return ctx.update(ctx.repos.people, person, ctx.patch(nullable=("emoji",)))


def delete_person(ctx: MutationContext):
    people = ctx.repos.people
    items = ctx.repos.items
    person = people.get(ctx.event_id, ctx.payload.id)
    for item in items.assigned_to(person.id):
        ctx.update(items, item, {"person_id": None})
    ctx.delete(people, person)
    return {"success": True}


def rsvp_person(ctx: MutationContext):
    person = _owned_person(ctx, ctx.payload.id)
    return ctx.update(ctx.repos.people, person, ctx.patch(nullable=("status",)))


def claim_person(ctx: MutationContext):
    user_id = ctx.require_session()
    people = ctx.repos.people
    person = people.get(ctx.event_id, ctx.payload.person_id)
    if person.user_id is not None and person.user_id != user_id:
        raise ValidationError("person_id", "Already linked to another account")
    return ctx.update(people, person, {"user_id": user_id})


def unclaim_person(ctx: MutationContext):
    user_id = ctx.require_session()
    people = ctx.repos.people
    person = people.get(ctx.event_id, ctx.payload.person_id)
    if person.user_id != user_id and not is_event_manager(ctx.context):
        raise AuthorizationError(FORBIDDEN)
    return ctx.update(people, person, {"user_id": None})


MUTATIONS = [
    MutationSpec("person.create", PersonCreate, create_person, CONTENT_WRITE),
    MutationSpec("person.update", PersonUpdate, update_person, CONTENT_WRITE),
    MutationSpec("person.delete", PersonDelete, delete_person, PERSON_DELETE),
    MutationSpec("person.rsvp", PersonRsvp, rsvp_person, CONTENT_WRITE),
    MutationSpec("person.claim", PersonClaim, claim_person, CONTENT_WRITE),
    MutationSpec("person.unclaim", PersonClaim, unclaim_person, CONTENT_WRITE),
]
