from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Invalidation:
    scope: str
    revision: int
    tables: tuple[str, ...]


Subscriber = Callable[[Invalidation], None]


def event_scope(slug: str) -> str:
    return f"event:{slug}"


class InvalidationBus:
    """Per-scope revision counter that tells readers their cached views are stale."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._revisions: dict[str, int] = {}
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def revision(self, scope: str) -> int:
        with self._lock:
            return self._revisions.get(scope, 0)

    def publish(self, scope: str, tables: tuple[str, ...] = ()) -> Invalidation:
        with self._lock:
            revision = self._revisions.get(scope, 0) + 1
            self._revisions[scope] = revision
            subscribers = list(self._subscribers)
        notice = Invalidation(scope=scope, revision=revision, tables=tables)
        for callback in subscribers:
            try:
                callback(notice)
            except Exception:
                logger.exception("invalidation_subscriber_failed", extra={"scope": scope})
        return notice

    def forget(self, scope: str) -> None:
        """Drop the revision of a scope that no longer exists (a deleted event)."""

        with self._lock:
            self._revisions.pop(scope, None)
