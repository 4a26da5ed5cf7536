"""Error taxonomy shared by the mutation pipeline and the HTTP layer."""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError, TimeoutError as PoolTimeoutError

GENERIC_STORAGE_MESSAGE = "Service temporarily unavailable, retry shortly."
GENERIC_UNKNOWN_MESSAGE = "An unexpected error occurred."

UNAUTHENTICATED = "unauthenticated"
FORBIDDEN = "forbidden"

_STORAGE_KEYWORDS = (
    "connection refused",
    "connection timeout",
    "deadlock detected",
    "database does not exist",
    "role does not exist",
    "password authentication failed",
    "could not connect to server",
    "server closed the connection",
    "econnrefused",
    "etimedout",
    "enotfound",
    "timeout expired",
)


class PotluckError(Exception):
    status_code = 500
    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class ValidationError(PotluckError):
    status_code = 422
    code = "validation_error"

    def __init__(self, field: str | None, reason: str) -> None:
        super().__init__(f"{field}: {reason}" if field else reason)
        self.field = field
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code, "field": self.field, "reason": self.reason}


class AuthorizationError(PotluckError):
    code = "authorization_error"

    def __init__(self, reason: str = FORBIDDEN, message: str | None = None) -> None:
        if message is None:
            message = "Authentication required" if reason == UNAUTHENTICATED else "Access denied"
        super().__init__(message)
        self.reason = reason

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return 401 if self.reason == UNAUTHENTICATED else 403

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code, "reason": self.reason}


class NotFoundError(PotluckError):
    status_code = 404
    code = "not_found"

    def __init__(self, table: str, record_id: Any) -> None:
        super().__init__(f"{table} {record_id} not found")
        self.table = table
        self.record_id = record_id

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code, "table": self.table, "id": self.record_id}


class StorageError(PotluckError):
    status_code = 503
    code = "storage_unavailable"

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(GENERIC_STORAGE_MESSAGE)
        self.cause = cause


class UnknownError(PotluckError):
    code = "unknown_error"

    def __init__(self, cause: BaseException | None = None) -> None:
        super().__init__(GENERIC_UNKNOWN_MESSAGE)
        self.cause = cause


def is_storage_error(exc: BaseException) -> bool:
    """Return True when ``exc`` looks like the database being unreachable."""

    if isinstance(exc, StorageError):
        return True
    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)):
        return True
    text = str(exc).lower()
    return any(keyword in text for keyword in _STORAGE_KEYWORDS)


def classify(exc: BaseException) -> PotluckError:
    if isinstance(exc, PotluckError):
        return exc
    if is_storage_error(exc):
        return StorageError(exc)
    return UnknownError(exc)
