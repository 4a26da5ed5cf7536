from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from potluck.auth.deps import get_credentials, get_pipeline, get_request_meta
from potluck.auth.policy import Credentials
from potluck.schemas.item import ItemOut
from potluck.services.audit import RequestMeta
from potluck.services.mutations import run_mutation
from potluck.services.pipeline import MutationPipeline

router = APIRouter(prefix="/events/{slug}/items", tags=["items"])


@router.post("", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
def create_item(
    slug: str,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> ItemOut:
    result = run_mutation(pipeline, "item.create", payload, credentials, meta, slug=slug)
    return ItemOut.from_orm(result.value)


@router.post("/reorder", response_model=list[ItemOut])
def reorder_items(
    slug: str,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> list[ItemOut]:
    result = run_mutation(pipeline, "item.reorder", payload, credentials, meta, slug=slug)
    return [ItemOut.from_orm(item) for item in result.value]


@router.patch("/{item_id}", response_model=ItemOut)
def update_item(
    slug: str,
    item_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> ItemOut:
    result = run_mutation(pipeline, "item.update", payload, credentials, meta, slug=slug, id=item_id)
    return ItemOut.from_orm(result.value)


@router.delete("/{item_id}")
def delete_item(
    slug: str,
    item_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> dict:
    result = run_mutation(pipeline, "item.delete", payload, credentials, meta, slug=slug, id=item_id)
    return result.value


@router.post("/{item_id}/assign", response_model=ItemOut)
def assign_item(
    slug: str,
    item_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> ItemOut:
    result = run_mutation(pipeline, "item.assign", payload, credentials, meta, slug=slug, id=item_id)
    return ItemOut.from_orm(result.value)


@router.post("/{item_id}/toggle", response_model=ItemOut)
def toggle_item(
    slug: str,
    item_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> ItemOut:
    result = run_mutation(pipeline, "item.toggle", payload, credentials, meta, slug=slug, id=item_id)
    return ItemOut.from_orm(result.value)


@router.post("/{item_id}/move", response_model=ItemOut)
def move_item(
    slug: str,
    item_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> ItemOut:
    result = run_mutation(pipeline, "item.move", payload, credentials, meta, slug=slug, item_id=item_id)
    return ItemOut.from_orm(result.value)
