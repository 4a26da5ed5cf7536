from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from potluck.auth.deps import get_credentials, get_pipeline, get_request_meta
from potluck.auth.policy import Credentials
from potluck.schemas.day import DayOut
from potluck.schemas.event import EventCreated, EventOut
from potluck.schemas.ingredient import IngredientOut
from potluck.schemas.item import ItemOut
from potluck.schemas.meal import MealOut
from potluck.schemas.person import PersonCreated, PersonOut
from potluck.services.audit import RequestMeta
from potluck.services.mutations import run_mutation
from potluck.services.pipeline import MutationPipeline

router = APIRouter(prefix="/actions", tags=["actions"])

OUT_SCHEMAS = {
    "events": EventOut,
    "days": DayOut,
    "meals": MealOut,
    "items": ItemOut,
    "ingredients": IngredientOut,
    "people": PersonOut,
}

# Secrets are returned once, by the mutation that created them.
CREATED_SCHEMAS = {
    "event.create": EventCreated,
    "person.create": PersonCreated,
}


def serialize(name: str, value: Any) -> Any:
    if isinstance(value, list):
        return [serialize(name, entry) for entry in value]
    table = getattr(value, "__tablename__", None)
    if table is None:
        return value
    schema = CREATED_SCHEMAS.get(name) or OUT_SCHEMAS[table]
    return schema.from_orm(value).dict()


@router.post("/{name}")
def run_action(
    name: str,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> dict:
    result = run_mutation(pipeline, name, payload, credentials, meta)
    return {"success": True, "data": serialize(name, result.value), "revision": result.revision}
