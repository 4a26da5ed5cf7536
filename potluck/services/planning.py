"""Read side of the planner: the event tree and the caller's access summary."""

from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import Session

from potluck.auth.policy import Admin, Decision, EventKeyHolder, EventOwner, GuestIdentity
from potluck.models.event import Event
from potluck.models.person import Person
from potluck.schemas.day import DayOut
from potluck.schemas.event import AccessOut, EventOut, EventTree
from potluck.schemas.ingredient import IngredientOut
from potluck.schemas.item import ItemOut
from potluck.schemas.meal import MealOut
from potluck.schemas.person import PersonOut

CONTEXT_NAMES = {
    Admin: "admin",
    EventOwner: "owner",
    EventKeyHolder: "key_holder",
    GuestIdentity: "guest",
}


def _ordered(rows):
    return sorted(rows, key=lambda row: (row.order, row.id))


def _item_out(item) -> ItemOut:
    ingredients = [IngredientOut.from_orm(ingredient) for ingredient in _ordered(item.ingredients)]
    return ItemOut(**ItemOut.from_orm(item).dict(exclude={"ingredients"}), ingredients=ingredients)


def build_event_tree(event: Event, revision: int = 0) -> EventTree:
    days = []
    for day in sorted(event.days, key=lambda row: (row.date, row.order, row.id)):
        meals = []
        for meal in _ordered(day.meals):
            items = [_item_out(item) for item in _ordered(meal.items)]
            meals.append(MealOut(**MealOut.from_orm(meal).dict(exclude={"items"}), items=items))
        days.append(DayOut(**DayOut.from_orm(day).dict(exclude={"meals"}), meals=meals))
    people = [PersonOut.from_orm(person) for person in sorted(event.people, key=lambda row: row.id)]
    return EventTree(**EventOut.from_orm(event).dict(), days=days, people=people, revision=revision)


def describe_access(decision: Decision) -> AccessOut:
    context = decision.context
    return AccessOut(
        can_write=decision.allowed,
        context=CONTEXT_NAMES.get(type(context), "anonymous"),
        person_id=getattr(context, "person_id", None),
        reason=decision.reason,
    )


def events_for_user(db: Session, user_id: int) -> list[Event]:
    joined = db.query(Person.event_id).filter(Person.user_id == user_id)
    return (
        db.query(Event)
        .filter(or_(Event.owner_id == user_id, Event.id.in_(joined)))
        .order_by(Event.created_at.desc(), Event.id.desc())
        .all()
    )


def list_events(db: Session) -> list[Event]:
    return db.query(Event).order_by(Event.created_at.desc(), Event.id.desc()).all()
