"""Write-access decisions for one event.

Every mutating call resolves exactly one ``AuthContext`` for the target event:

| Context          | How it is obtained                                   | Reach                       |
|------------------|------------------------------------------------------|-----------------------------|
| ``Admin``        | session with role ``admin``                          | every event                 |
| ``EventOwner``   | session user is the event's owner                    | that event                  |
| ``EventKeyHolder`` | key equal to the event's admin key                 | that event                  |
| ``GuestIdentity``| guest token (or linked account) of one of its people | that event, own person only |
| ``Anonymous``    | nothing above matched                                | read only                   |

Decisions are recomputed on every call and never cached.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Protocol, Union

from potluck.core.errors import FORBIDDEN, UNAUTHENTICATED
from potluck.models.user import ROLE_ADMIN

# Permissions checked after a context has been resolved.
CONTENT_WRITE = "content:write"
EVENT_MANAGE = "event:manage"
PERSON_UPDATE = "person:update"
PERSON_DELETE = "person:delete"


@dataclass(frozen=True)
class EventScope:
    event_id: int
    admin_key: str | None
    owner_id: int | None

    @classmethod
    def of(cls, event) -> "EventScope":
        return cls(event_id=event.id, admin_key=event.admin_key, owner_id=event.owner_id)


@dataclass(frozen=True)
class Credentials:
    user_id: int | None = None
    role: str | None = None
    key: str | None = None
    token: str | None = None

    @property
    def presented(self) -> bool:
        return bool(self.user_id is not None or self.key or self.token)


@dataclass(frozen=True)
class Admin:
    user_id: int


@dataclass(frozen=True)
class EventOwner:
    event_id: int
    user_id: int


@dataclass(frozen=True)
class EventKeyHolder:
    event_id: int
    user_id: int | None = None


@dataclass(frozen=True)
class GuestIdentity:
    event_id: int
    person_id: int
    user_id: int | None = None


@dataclass(frozen=True)
class Anonymous:
    user_id: int | None = None


AuthContext = Union[Admin, EventOwner, EventKeyHolder, GuestIdentity, Anonymous]


@dataclass(frozen=True)
class Decision:
    context: AuthContext
    reason: str | None = None

    @property
    def allowed(self) -> bool:
        return self.reason is None


class IdentityDirectory(Protocol):
    def person_for_token(self, event_id: int, token: str) -> int | None: ...

    def person_for_user(self, event_id: int, user_id: int) -> int | None: ...


def keys_match(provided: str | None, stored: str | None) -> bool:
    if not provided or not stored:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), stored.encode("utf-8"))


class AuthorizationPolicy:
    def __init__(self, directory: IdentityDirectory, *, write_key: str | None = None) -> None:
        self.directory = directory
        self.write_key = write_key or None

    def effective_key(self, scope: EventScope) -> str | None:
        # Events created before per-event keys fall back to the shared WRITE_KEY.
        return scope.admin_key or self.write_key

    def authorize(self, scope: EventScope, credentials: Credentials) -> Decision:
        user_id = credentials.user_id
        if user_id is not None and credentials.role == ROLE_ADMIN:
            return Decision(Admin(user_id=user_id))
        if user_id is not None and scope.owner_id is not None and scope.owner_id == user_id:
            return Decision(EventOwner(event_id=scope.event_id, user_id=user_id))
        if keys_match(credentials.key, self.effective_key(scope)):
            return Decision(EventKeyHolder(event_id=scope.event_id, user_id=user_id))
        if credentials.token:
            person_id = self.directory.person_for_token(scope.event_id, credentials.token)
            if person_id is not None:
                return Decision(GuestIdentity(event_id=scope.event_id, person_id=person_id, user_id=user_id))
        if user_id is not None:
            person_id = self.directory.person_for_user(scope.event_id, user_id)
            if person_id is not None:
                return Decision(GuestIdentity(event_id=scope.event_id, person_id=person_id, user_id=user_id))
        reason = FORBIDDEN if credentials.presented else UNAUTHENTICATED
        return Decision(Anonymous(user_id=user_id), reason=reason)


def is_event_manager(context: AuthContext) -> bool:
    return isinstance(context, (Admin, EventOwner, EventKeyHolder))


def owns_person(context: AuthContext, person_id: int, person_user_id: int | None = None) -> bool:
    if isinstance(context, GuestIdentity) and context.person_id == person_id:
        return True
    user_id = getattr(context, "user_id", None)
    return user_id is not None and person_user_id is not None and user_id == person_user_id


def permits(
    context: AuthContext,
    permission: str,
    *,
    person_id: int | None = None,
    person_user_id: int | None = None,
) -> bool:
    if isinstance(context, Anonymous):
        return False
    if is_event_manager(context):
        return True
    if permission == CONTENT_WRITE:
        return True
    if permission == PERSON_UPDATE and person_id is not None:
        return owns_person(context, person_id, person_user_id)
    return False
