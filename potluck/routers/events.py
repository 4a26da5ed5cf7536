from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query, Request, status
from sqlalchemy.orm import Session

from potluck.auth.deps import get_credentials, get_current_user, get_pipeline, get_request_meta, get_settings
from potluck.auth.policy import Credentials
from potluck.core.config import Settings
from potluck.core.db import get_db
from potluck.core.errors import AuthorizationError
from potluck.core.invalidation import event_scope
from potluck.models.user import User
from potluck.schemas.audit import ChangeLogOut
from potluck.schemas.event import AccessOut, EventCreated, EventOut, EventTree
from potluck.services.audit import AuditFilters, AuditStore, RequestMeta
from potluck.services.mutations import run_mutation
from potluck.services.pipeline import MutationPipeline
from potluck.services.planning import build_event_tree, describe_access, events_for_user
from potluck.services.repositories import EventRepository

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=EventCreated, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> EventCreated:
    result = run_mutation(pipeline, "event.create", payload, credentials, meta)
    return EventCreated.from_orm(result.value)


@router.get("/mine", response_model=list[EventOut])
def my_events(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[EventOut]:
    return [EventOut.from_orm(event) for event in events_for_user(db, user.id)]


@router.get("/{slug}", response_model=EventTree)
def get_event(slug: str, request: Request, db: Session = Depends(get_db)) -> EventTree:
    event = EventRepository(db).get_by_slug(slug)
    revision = request.app.state.invalidation.revision(event_scope(event.slug))
    return build_event_tree(event, revision)


@router.get("/{slug}/access", response_model=AccessOut)
def check_access(
    slug: str,
    db: Session = Depends(get_db),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
) -> AccessOut:
    event = EventRepository(db).get_by_slug(slug)
    return describe_access(pipeline.authorize(event, credentials))


@router.get("/{slug}/history", response_model=list[ChangeLogOut])
def event_history(
    slug: str,
    limit: int = Query(default=100, ge=1, le=100),
    db: Session = Depends(get_db),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    settings: Settings = Depends(get_settings),
) -> list[ChangeLogOut]:
    event = EventRepository(db).get_by_slug(slug)
    decision = pipeline.authorize(event, credentials)
    if not decision.allowed:
        raise AuthorizationError(decision.reason)
    records = AuditStore(db).query(AuditFilters(event_id=event.id), limit=min(limit, settings.AUDIT_QUERY_LIMIT))
    return [ChangeLogOut.from_orm(record) for record in records]


@router.patch("/{slug}", response_model=EventOut)
def update_event(
    slug: str,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> EventOut:
    result = run_mutation(pipeline, "event.update", payload, credentials, meta, slug=slug)
    return EventOut.from_orm(result.value)


@router.delete("/{slug}")
def delete_event(
    slug: str,
    payload: dict | None = Body(default=None),
    pipeline: MutationPipeline = Depends(get_pipeline),
    credentials: Credentials = Depends(get_credentials),
    meta: RequestMeta = Depends(get_request_meta),
) -> dict:
    result = run_mutation(pipeline, "event.delete", payload, credentials, meta, slug=slug)
    return result.value
