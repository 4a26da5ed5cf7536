from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from potluck.auth.deps import get_credentials, get_pipeline, get_request_meta
from potluck.auth.policy import Credentials
from potluck.schemas.day import DayOut
from potluck.services.audit import RequestMeta
from potluck.services.mutations import run_mutation
from potluck.services.pipeline import MutationPipeline

router = APIRouter(prefix="/events/{slug}/days", tags=["days"])


@router.post("", response_model=DayOut, status_code=status.HTTP_201_CREATED)
def create_day(
    slug: str,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> DayOut:
    result = run_mutation(pipeline, "day.create", payload, credentials, meta, slug=slug)
    return DayOut.from_orm(result.value)


@router.patch("/{day_id}", response_model=DayOut)
def update_day(
    slug: str,
    day_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> DayOut:
    result = run_mutation(pipeline, "day.update", payload, credentials, meta, slug=slug, id=day_id)
    return DayOut.from_orm(result.value)


@router.delete("/{day_id}")
def delete_day(
    slug: str,
    day_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> dict:
    result = run_mutation(pipeline, "day.delete", payload, credentials, meta, slug=slug, id=day_id)
    return result.value
