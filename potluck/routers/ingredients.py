from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from potluck.auth.deps import get_credentials, get_pipeline, get_request_meta
from potluck.auth.policy import Credentials
from potluck.schemas.ingredient import IngredientOut
from potluck.services.audit import RequestMeta
from potluck.services.mutations import run_mutation
from potluck.services.pipeline import MutationPipeline

router = APIRouter(prefix="/events/{slug}", tags=["ingredients"])


@router.post("/items/{item_id}/ingredients", response_model=IngredientOut, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    slug: str,
    item_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> IngredientOut:
    result = run_mutation(pipeline, "ingredient.create", payload, credentials, meta, slug=slug, item_id=item_id)
    return IngredientOut.from_orm(result.value)


@router.delete("/items/{item_id}/ingredients")
def clear_ingredients(
    slug: str,
    item_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> dict:
    result = run_mutation(pipeline, "ingredient.delete_all", payload, credentials, meta, slug=slug, item_id=item_id)
    return result.value


@router.patch("/ingredients/{ingredient_id}", response_model=IngredientOut)
def update_ingredient(
    slug: str,
    ingredient_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> IngredientOut:
    result = run_mutation(pipeline, "ingredient.update", payload, credentials, meta, slug=slug, id=ingredient_id)
    return IngredientOut.from_orm(result.value)


@router.delete("/ingredients/{ingredient_id}")
def delete_ingredient(
    slug: str,
    ingredient_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> dict:
    result = run_mutation(pipeline, "ingredient.delete", payload, credentials, meta, slug=slug, id=ingredient_id)
    return result.value
