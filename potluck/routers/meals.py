from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from potluck.auth.deps import get_credentials, get_pipeline, get_request_meta
from potluck.auth.policy import Credentials
from potluck.schemas.meal import MealOut
from potluck.services.audit import RequestMeta
from potluck.services.mutations import run_mutation
from potluck.services.pipeline import MutationPipeline

router = APIRouter(prefix="/events/{slug}/meals", tags=["meals"])


@router.post("", response_model=MealOut, status_code=status.HTTP_201_CREATED)
def create_meal(
    slug: str,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> MealOut:
    result = run_mutation(pipeline, "meal.create", payload, credentials, meta, slug=slug)
    return MealOut.from_orm(result.value)


@router.post("/reorder", response_model=list[MealOut])
def reorder_meals(
    slug: str,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> list[MealOut]:
    result = run_mutation(pipeline, "meal.reorder", payload, credentials, meta, slug=slug)
    return [MealOut.from_orm(meal) for meal in result.value]


@router.patch("/{meal_id}", response_model=MealOut)
def update_meal(
    slug: str,
    meal_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> MealOut:
    result = run_mutation(pipeline, "meal.update", payload, credentials, meta, slug=slug, id=meal_id)
    return MealOut.from_orm(result.value)


@router.delete("/{meal_id}")
def delete_meal(
    slug: str,
    meal_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> dict:
    result = run_mutation(pipeline, "meal.delete", payload, credentials, meta, slug=slug, id=meal_id)
    return result.value
