"""Single entry point for every write against an event.

``MutationPipeline.execute`` validates the payload, resolves the caller's
context for the target event, lets the mutation handler apply its writes
through a ``MutationContext``, commits, then appends one audit record per
changed row and publishes an invalidation for the event.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import pydantic
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from potluck.auth.policy import (
    Anonymous,
    AuthContext,
    AuthorizationPolicy,
    Credentials,
    Decision,
    EventScope,
    permits,
)
from potluck.core.errors import (
    FORBIDDEN,
    UNAUTHENTICATED,
    AuthorizationError,
    PotluckError,
    StorageError,
    ValidationError,
    classify,
)
from potluck.core.invalidation import InvalidationBus, event_scope
from potluck.models.change_log import ACTION_CREATE, ACTION_DELETE, ACTION_UPDATE
from potluck.models.event import Event
from potluck.services.audit import AuditEntry, AuditStore, RequestMeta, snapshot
from potluck.services.repositories import PeopleDirectory, Repositories

logger = logging.getLogger(__name__)

Handler = Callable[["MutationContext"], Any]


@dataclass(frozen=True)
class MutationSpec:
    name: str
    schema: type
    handler: Handler
    # None marks a mutation that does not target an existing event (event.create).
    permission: Optional[str] = None

    @property
    def scoped(self) -> bool:
        return self.permission is not None


@dataclass
class Change:
    action: str
    row: Any
    table_name: str
    old_data: Optional[dict] = None
    new_data: Optional[dict] = None
    record_id: Optional[int] = None
    old_raw: Optional[dict] = None


@dataclass
class MutationResult:
    value: Any
    event: Optional[Event]
    changes: list[Change] = field(default_factory=list)
    audit_ids: list[int] = field(default_factory=list)
    revision: Optional[int] = None


def first_error(exc: pydantic.ValidationError) -> ValidationError:
    errors = exc.errors()
    if not errors:
        return ValidationError(None, "Invalid payload")
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
    return ValidationError(location or None, error.get("msg", "Invalid value"))


class MutationContext:
    """What a mutation handler sees: validated input, caller context and tracked writes."""

    def __init__(
        self,
        db: Session,
        payload: Any,
        credentials: Credentials,
        event: Optional[Event] = None,
        context: Optional[AuthContext] = None,
    ) -> None:
        self.db = db
        self.payload = payload
        self.credentials = credentials
        self.event = event
        self.context: AuthContext = context or Anonymous(user_id=credentials.user_id)
        self.repos = Repositories(db)
        self._changes: list[Change] = []
        self._tracked: dict[int, Change] = {}

    @property
    def event_id(self) -> int:
        return self.event.id

    def require(self, permission: str, **target: Any) -> None:
        if not permits(self.context, permission, **target):
            raise AuthorizationError(FORBIDDEN)

    def require_session(self) -> int:
        if self.credentials.user_id is None:
            raise AuthorizationError(UNAUTHENTICATED)
        return self.credentials.user_id

    def patch(self, *, nullable: tuple[str, ...] = (), exclude: tuple[str, ...] = ()) -> dict[str, Any]:
        """Fields the caller explicitly sent, minus the envelope and ``exclude``.

        An explicit null is kept only for columns listed in ``nullable``.
        """

        envelope = {"slug", "key", "token", "id"}
        values = self.payload.dict(exclude_unset=True)
        return {
            name: value
            for name, value in values.items()
            if name not in envelope and name not in exclude and (value is not None or name in nullable)
        }

    def create(self, repo, values: dict[str, Any]):
        row = repo.insert(values)
        self._record(Change(ACTION_CREATE, row, row.__tablename__))
        return row

    def update(self, repo, row, patch: dict[str, Any]):
        if id(row) not in self._tracked:
            self._record(
                Change(ACTION_UPDATE, row, row.__tablename__, old_data=snapshot(row), old_raw=snapshot(row, redact=False))
            )
        return repo.update(row, patch)

    def delete(self, repo, row) -> None:
        change = self._tracked.get(id(row))
        old_data = change.old_data if change is not None and change.action == ACTION_UPDATE else snapshot(row)
        if change is not None:
            self._changes.remove(change)
        if change is None or change.action != ACTION_CREATE:
            self._record(Change(ACTION_DELETE, row, row.__tablename__, old_data=old_data, record_id=row.id))
        repo.delete(row)

    def _record(self, change: Change) -> None:
        self._tracked[id(change.row)] = change
        self._changes.append(change)

    def settle(self) -> list[Change]:
        """Flush pending writes and capture the after-images; unchanged rows drop out."""

        self.db.flush()
        settled: list[Change] = []
        for change in self._changes:
            if change.action != ACTION_DELETE:
                self.db.refresh(change.row)
                change.record_id = change.row.id
                change.new_data = snapshot(change.row)
                if change.action == ACTION_UPDATE and snapshot(change.row, redact=False) == change.old_raw:
                    continue
            settled.append(change)
        return settled


class MutationPipeline:
    def __init__(
        self,
        db: Session,
        *,
        bus: InvalidationBus,
        write_key: Optional[str] = None,
        audit_store: Optional[AuditStore] = None,
    ) -> None:
        self.db = db
        self.bus = bus
        self.audit_store = audit_store or AuditStore(db)
        self.policy = AuthorizationPolicy(PeopleDirectory(db), write_key=write_key)

    def validate(self, mutation: MutationSpec, raw_input: Any):
        if not isinstance(raw_input, dict):
            raise ValidationError(None, "Payload must be a JSON object")
        try:
            return mutation.schema(**raw_input)
        except pydantic.ValidationError as exc:
            raise first_error(exc) from exc

    def authorize(self, event: Event, credentials: Credentials) -> Decision:
        return self.policy.authorize(EventScope.of(event), credentials)

    def execute(
        self,
        mutation: MutationSpec,
        raw_input: Any,
        credentials: Credentials,
        meta: Optional[RequestMeta] = None,
    ) -> MutationResult:
        payload = self.validate(mutation, raw_input)
        credentials = Credentials(
            user_id=credentials.user_id,
            role=credentials.role,
            key=getattr(payload, "key", None) or credentials.key,
            token=getattr(payload, "token", None) or credentials.token,
        )

        try:
            ctx = self._prepare(mutation, payload, credentials)
            value = mutation.handler(ctx)
            changes = ctx.settle()
            self.db.commit()
        except PotluckError:
            self.db.rollback()
            raise
        except IntegrityError as exc:
            self.db.rollback()
            raise ValidationError(None, "Conflicts with existing data") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            error = classify(exc)
            if isinstance(error, StorageError):
                logger.warning("storage_unavailable", extra={"mutation": mutation.name, "error": str(exc)})
            raise error from exc
        except Exception:
            self.db.rollback()
            raise

        event = ctx.event
        logger.info(
            "mutation_applied",
            extra={"mutation": mutation.name, "event_id": event.id if event else None, "changes": len(changes)},
        )
        result = MutationResult(value=value, event=event, changes=changes)
        result.audit_ids = self._emit(mutation, changes, event, credentials, meta or RequestMeta())
        if event is not None and event.slug:
            scope = event_scope(event.slug)
            tables = tuple(dict.fromkeys(change.table_name for change in changes))
            result.revision = self.bus.publish(scope, tables).revision
            if any(change.action == ACTION_DELETE and change.row is event for change in changes):
                self.bus.forget(scope)
        return result

    def _prepare(self, mutation: MutationSpec, payload: Any, credentials: Credentials) -> MutationContext:
        if not mutation.scoped:
            return MutationContext(self.db, payload, credentials)

        event = Repositories(self.db).events.get_by_slug(payload.slug)
        decision = self.authorize(event, credentials)
        if not decision.allowed:
            raise AuthorizationError(decision.reason)
        if not permits(decision.context, mutation.permission):
            raise AuthorizationError(FORBIDDEN)
        return MutationContext(self.db, payload, credentials, event=event, context=decision.context)

    def _emit(
        self,
        mutation: MutationSpec,
        changes: list[Change],
        event: Optional[Event],
        credentials: Credentials,
        meta: RequestMeta,
    ) -> list[int]:
        audit_ids: list[int] = []
        for change in changes:
            entry = AuditEntry(
                action=change.action,
                table_name=change.table_name,
                record_id=change.record_id,
                old_data=change.old_data,
                new_data=change.new_data,
                event_id=event.id if event else None,
                user_id=credentials.user_id,
                meta=meta,
            )
            try:
                audit_ids.append(self.audit_store.append(entry))
            except Exception:
                logger.exception(
                    "audit_append_failed",
                    extra={
                        "mutation": mutation.name,
                        "table_name": change.table_name,
                        "record_id": change.record_id,
                    },
                )
        return audit_ids
