"""Event-scoped data access for the planner tables.

Every lookup goes through ``scoped(event_id)``, which joins up the foreign-key
chain to ``events``. A record that exists but belongs to another event is
reported as missing.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from potluck.core.errors import NotFoundError
from potluck.models.day import Day
from potluck.models.event import Event
from potluck.models.ingredient import Ingredient
from potluck.models.item import Item
from potluck.models.meal import Meal
from potluck.models.person import Person


class ScopedRepository:
    model: Any = None
    parent_attr: Optional[str] = None

    def __init__(self, db: Session) -> None:
        self.db = db

    @property
    def table(self) -> str:
        return self.model.__tablename__

    def scoped(self, event_id: int) -> Query:
        raise NotImplementedError

    def find(self, event_id: int, record_id: int):
        return self.scoped(event_id).filter(self.model.id == record_id).first()

    def get(self, event_id: int, record_id: int):
        row = self.find(event_id, record_id)
        if row is None:
            raise NotFoundError(self.table, record_id)
        return row

    def list(self, event_id: int) -> List[Any]:
        return self.scoped(event_id).order_by(self.model.id.asc()).all()

    def insert(self, values: Dict[str, Any]):
        row = self.model(**values)
        self.db.add(row)
        self.db.flush()
        return row

    def update(self, row, patch: Dict[str, Any]):
        for field, value in patch.items():
            setattr(row, field, value)
        return row

    def delete(self, row) -> None:
        self.db.delete(row)

    def siblings(self, parent_id: int) -> List[Any]:
        parent = getattr(self.model, self.parent_attr)
        return (
            self.db.query(self.model)
            .filter(parent == parent_id)
            .order_by(self.model.order.asc(), self.model.id.asc())
            .all()
        )

    def next_order(self, parent_id: int) -> int:
        parent = getattr(self.model, self.parent_attr)
        current = self.db.query(func.max(self.model.order)).filter(parent == parent_id).scalar()
        return 0 if current is None else current + 1


class EventRepository:
    table = Event.__tablename__

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_slug(self, slug: str) -> Optional[Event]:
        return self.db.query(Event).filter(Event.slug == slug).first()

    def get_by_slug(self, slug: str) -> Event:
        event = self.find_by_slug(slug)
        if event is None:
            raise NotFoundError(self.table, slug)
        return event

    def slug_taken(self, slug: str) -> bool:
        return self.db.query(Event.id).filter(Event.slug == slug).first() is not None

    def insert(self, values: Dict[str, Any]) -> Event:
        event = Event(**values)
        self.db.add(event)
        self.db.flush()
        return event

    def update(self, event: Event, patch: Dict[str, Any]) -> Event:
        for field, value in patch.items():
            setattr(event, field, value)
        return event

    def delete(self, event: Event) -> None:
        self.db.delete(event)


class DayRepository(ScopedRepository):
    model = Day
    parent_attr = "event_id"

    def scoped(self, event_id: int) -> Query:
        return self.db.query(Day).filter(Day.event_id == event_id)


class MealRepository(ScopedRepository):
    model = Meal
    parent_attr = "day_id"

    def scoped(self, event_id: int) -> Query:
        return self.db.query(Meal).join(Day, Meal.day_id == Day.id).filter(Day.event_id == event_id)


class ItemRepository(ScopedRepository):
    model = Item
    parent_attr = "meal_id"

    def scoped(self, event_id: int) -> Query:
        return (
            self.db.query(Item)
            .join(Meal, Item.meal_id == Meal.id)
            .join(Day, Meal.day_id == Day.id)
            .filter(Day.event_id == event_id)
        )

    def assigned_to(self, person_id: int) -> List[Item]:
        return self.db.query(Item).filter(Item.person_id == person_id).order_by(Item.id.asc()).all()


class IngredientRepository(ScopedRepository):
    model = Ingredient
    parent_attr = "item_id"

    def scoped(self, event_id: int) -> Query:
        return (
            self.db.query(Ingredient)
            .join(Item, Ingredient.item_id == Item.id)
            .join(Meal, Item.meal_id == Meal.id)
            .join(Day, Meal.day_id == Day.id)
            .filter(Day.event_id == event_id)
        )


class PersonRepository(ScopedRepository):
    model = Person
    parent_attr = "event_id"

    def scoped(self, event_id: int) -> Query:
        return self.db.query(Person).filter(Person.event_id == event_id)


class PeopleDirectory:
    """Resolves guest tokens and linked accounts to people of one event."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def person_for_token(self, event_id: int, token: str) -> Optional[int]:
        row = self.db.query(Person.id).filter(Person.event_id == event_id, Person.token == token).first()
        return row[0] if row else None

    def person_for_user(self, event_id: int, user_id: int) -> Optional[int]:
        row = (
            self.db.query(Person.id)
            .filter(Person.event_id == event_id, Person.user_id == user_id)
            .order_by(Person.id.asc())
            .first()
        )
        return row[0] if row else None


class Repositories:
    def __init__(self, db: Session) -> None:
        self.events = EventRepository(db)
        self.days = DayRepository(db)
        self.meals = MealRepository(db)
        self.items = ItemRepository(db)
        self.ingredients = IngredientRepository(db)
        self.people = PersonRepository(db)
