"""Append-only audit store: records are inserted and queried, never updated or deleted."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from potluck.core.errors import StorageError
from potluck.models.change_log import ChangeLog

REDACTED = "***"
SECRET_FIELDS = frozenset({"admin_key", "token", "hashed_password"})
MAX_QUERY_LIMIT = 100

# Column limits (match model)
_IP_LEN = 100
_USER_AGENT_LEN = 1000
_REFERER_LEN = 2000


@dataclass(frozen=True)
class RequestMeta:
    ip: str | None = None
    user_agent: str | None = None
    referer: str | None = None


@dataclass
class AuditEntry:
    action: str
    table_name: str
    record_id: int
    old_data: dict[str, Any] | None
    new_data: dict[str, Any] | None
    event_id: int | None = None
    user_id: int | None = None
    meta: RequestMeta = field(default_factory=RequestMeta)


@dataclass(frozen=True)
class AuditFilters:
    table_name: str | None = None
    action: str | None = None
    user_id: int | None = None
    record_id: int | None = None
    event_id: int | None = None


def _json_value(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, enum.Enum):
        return getattr(value, "value", str(value))
    if isinstance(value, dict):
        return {str(k): _json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_value(v) for v in value]
    return str(value)


def snapshot(row: Any, redact: bool = True) -> dict[str, Any]:
    """Detached JSON copy of a mapped row's columns, secrets redacted unless ``redact`` is off."""

    data: dict[str, Any] = {}
    for attr in inspect(row).mapper.column_attrs:
        value = getattr(row, attr.key)
        if redact and attr.key in SECRET_FIELDS and value is not None:
            value = REDACTED
        data[attr.key] = _json_value(value)
    return data


def _clip(value: str | None, limit: int) -> str | None:
    if not value:
        return None
    return str(value)[:limit]


class AuditStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def append(self, entry: AuditEntry) -> int:
        record = ChangeLog(
            action=entry.action,
            table_name=entry.table_name,
            record_id=entry.record_id,
            event_id=entry.event_id,
            user_id=entry.user_id,
            old_data=entry.old_data,
            new_data=entry.new_data,
            user_ip=_clip(entry.meta.ip, _IP_LEN),
            user_agent=_clip(entry.meta.user_agent, _USER_AGENT_LEN),
            referer=_clip(entry.meta.referer, _REFERER_LEN),
        )
        try:
            self.db.add(record)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(exc) from exc
        return record.id

    def query(self, filters: AuditFilters | None = None, limit: int = MAX_QUERY_LIMIT) -> list[ChangeLog]:
        filters = filters or AuditFilters()
        query = self.db.query(ChangeLog)
        if filters.table_name:
            query = query.filter(ChangeLog.table_name == filters.table_name)
        if filters.action:
            query = query.filter(ChangeLog.action == filters.action)
        if filters.user_id is not None:
            query = query.filter(ChangeLog.user_id == filters.user_id)
        if filters.record_id is not None:
            query = query.filter(ChangeLog.record_id == filters.record_id)
        if filters.event_id is not None:
            query = query.filter(ChangeLog.event_id == filters.event_id)
        limit = max(1, min(limit, MAX_QUERY_LIMIT))
        return query.order_by(ChangeLog.created_at.desc(), ChangeLog.id.desc()).limit(limit).all()
