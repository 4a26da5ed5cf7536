from __future__ import annotations

import logging

from sqlalchemy.orm import Session

import potluck.models  # noqa: F401
from potluck.core.config import settings
from potluck.core.db import Database
from potluck.models.change_log import ACTION_UPDATE
from potluck.models.event import Event
from potluck.services.audit import AuditEntry, AuditStore, snapshot

logger = logging.getLogger(__name__)


def backfill_admin_keys(db: Session, write_key: str) -> int:
    """Give every event without an admin key the legacy shared key. Returns the number updated."""

    events = db.query(Event).filter(Event.admin_key.is_(None)).order_by(Event.id.asc()).all()
    changes = []
    for event in events:
        old_data = snapshot(event)
        event.admin_key = write_key
        changes.append((event, old_data))
    db.commit()

    store = AuditStore(db)
    for event, old_data in changes:
        store.append(
            AuditEntry(
                action=ACTION_UPDATE,
                table_name=Event.__tablename__,
                record_id=event.id,
                old_data=old_data,
                new_data=snapshot(event),
                event_id=event.id,
            )
        )
    return len(changes)


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    if not settings.WRITE_KEY:
        raise SystemExit("WRITE_KEY is not configured")

    database = Database(settings.DATABASE_URL)
    try:
        with database.session() as db:
            count = backfill_admin_keys(db, settings.WRITE_KEY)
        logger.info("admin_keys_backfilled", extra={"count": count})
        print(f"Updated {count} event(s)")
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
