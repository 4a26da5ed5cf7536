from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from potluck.auth.deps import get_credentials, get_pipeline, get_request_meta
from potluck.auth.policy import Credentials
from potluck.schemas.person import PersonCreated, PersonOut
from potluck.services.audit import RequestMeta
from potluck.services.mutations import run_mutation
from potluck.services.pipeline import MutationPipeline

router = APIRouter(prefix="/events/{slug}/people", tags=["people"])


@router.post("", response_model=PersonCreated, status_code=status.HTTP_201_CREATED)
def create_person(
    slug: str,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> PersonCreated:
    result = run_mutation(pipeline, "person.create", payload, credentials, meta, slug=slug)
    return PersonCreated.from_orm(result.value)


@router.patch("/{person_id}", response_model=PersonOut)
def update_person(
    slug: str,
    person_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> PersonOut:
    result = run_mutation(pipeline, "person.update", payload, credentials, meta, slug=slug, id=person_id)
    return PersonOut.from_orm(result.value)


@router.delete("/{person_id}")
def delete_person(
    slug: str,
    person_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> dict:
    result = run_mutation(pipeline, "person.delete", payload, credentials, meta, slug=slug, id=person_id)
    return result.value


@router.post("/{person_id}/rsvp", response_model=PersonOut)
def rsvp_person(
    slug: str,
    person_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> PersonOut:
    result = run_mutation(pipeline, "person.rsvp", payload, credentials, meta, slug=slug, id=person_id)
    return PersonOut.from_orm(result.value)


@router.post("/{person_id}/claim", response_model=PersonOut)
def claim_person(
    slug: str,
    person_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> PersonOut:
    result = run_mutation(pipeline, "person.claim", payload, credentials, meta, slug=slug, person_id=person_id)
    return PersonOut.from_orm(result.value)


@router.post("/{person_id}/unclaim", response_model=PersonOut)
def unclaim_person(
    slug: str,
    person_id: int,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> PersonOut:
    result = run_mutation(pipeline, "person.unclaim", payload, credentials, meta, slug=slug, person_id=person_id)
    return PersonOut.from_orm(result.value)
