from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from potluck.auth.deps import get_settings, require_admin
from potluck.core.config import Settings
from potluck.core.db import get_db
from potluck.models.change_log import AUDIT_ACTIONS
from potluck.models.user import User
from potluck.schemas.audit import ChangeLogOut
from potluck.schemas.event import EventOut
from potluck.services.audit import AuditFilters, AuditStore
from potluck.services.planning import list_events

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/audit-logs", response_model=list[ChangeLogOut])
def list_audit_logs(
    *,
    table_name: str | None = Query(default=None, max_length=50),
    action: str | None = Query(default=None, pattern="^(" + "|".join(AUDIT_ACTIONS) + ")$"),
    user_id: int | None = Query(default=None, ge=1),
    record_id: int | None = Query(default=None, ge=1),
    limit: int = Query(default=100, ge=1, le=100),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _: User = Depends(require_admin),
) -> list[ChangeLogOut]:
    filters = AuditFilters(table_name=table_name, action=action, user_id=user_id, record_id=record_id)
    records = AuditStore(db).query(filters, limit=min(limit, settings.AUDIT_QUERY_LIMIT))
    return [ChangeLogOut.from_orm(record) for record in records]


@router.get("/events", response_model=list[EventOut])
def list_all_events(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[EventOut]:
    return [EventOut.from_orm(event) for event in list_events(db)]
