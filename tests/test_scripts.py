from __future__ import annotations

from potluck.auth.security import verify_password
from potluck.models.change_log import ChangeLog
from potluck.models.event import Event
from potluck.models.user import ROLE_ADMIN
from potluck.scripts.backfill_admin_keys import backfill_admin_keys
from potluck.scripts.create_admin import create_admin


def test_create_admin_creates_then_promotes(db_session, owner_user):
    fresh = create_admin(db_session, email="Root@Example.com", name="Root", password="long-password")
    assert fresh.email == "root@example.com"
    assert fresh.role == ROLE_ADMIN

    promoted = create_admin(db_session, email="owner@example.com", name="ignored", password="another-pass")
    assert promoted.id == owner_user.id
    assert promoted.role == ROLE_ADMIN
    assert verify_password("another-pass", promoted.hashed_password)


def test_backfill_admin_keys(db_session):
    legacy = Event(slug="ancien", name="Ancien", admin_key=None)
    modern = Event(slug="recent", name="Récent", admin_key="own-key")
    db_session.add_all([legacy, modern])
    db_session.commit()

    assert backfill_admin_keys(db_session, "LEGACY-KEY") == 1
    db_session.refresh(legacy)
    db_session.refresh(modern)
    assert legacy.admin_key == "LEGACY-KEY"
    assert modern.admin_key == "own-key"

    records = db_session.query(ChangeLog).filter(ChangeLog.record_id == legacy.id, ChangeLog.table_name == "events").all()
    assert len(records) == 1
    assert records[0].action == "update"
    assert records[0].old_data["admin_key"] is None
    assert records[0].new_data["admin_key"] == "***"
