from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from potluck.auth.deps import get_optional_user
from potluck.auth.security import hash_password
from potluck.core.config import Settings
from potluck.core.db import Base, Database
from potluck.core.invalidation import InvalidationBus
from potluck.main import create_app
from potluck.models.change_log import ChangeLog
from potluck.models.user import ROLE_ADMIN, ROLE_USER, User

SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
database = Database(engine=engine)
test_settings = Settings(
    DATABASE_URL=SQLALCHEMY_TEST_URL,
    JWT_SECRET="test-secret",
    WRITE_KEY=None,
    LOG_LEVEL="WARNING",
)
app = create_app(test_settings, database=database)

EVENT_KEY = "K1"


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = database.session()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    # No lifespan: shutdown would dispose the shared in-memory engine mid-test.
    app.dependency_overrides.clear()
    # Fresh revision counters per test, matching the per-test database.
    app.state.invalidation = InvalidationBus()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def authorize(client: TestClient):
    def _apply(user: User | None):
        if user is None:
            app.dependency_overrides.pop(get_optional_user, None)
        else:
            app.dependency_overrides[get_optional_user] = lambda: user

    yield _apply
    app.dependency_overrides.pop(get_optional_user, None)


def _make_user(session: Session, email: str, name: str, role: str = ROLE_USER) -> User:
    user = User(email=email, name=name, hashed_password=hash_password("secret-pass"), role=role, is_active=True)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture()
def owner_user(db_session: Session) -> User:
    return _make_user(db_session, "owner@example.com", "Olivia Owner")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    return _make_user(db_session, "other@example.com", "Oscar Other")


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    return _make_user(db_session, "admin@example.com", "Ada Admin", role=ROLE_ADMIN)


@pytest.fixture()
def event(client: TestClient) -> dict:
    resp = client.post("/events", json={"slug": "Dîner", "name": "Dîner", "key": EVENT_KEY})
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture()
def day(client: TestClient, event: dict) -> dict:
    resp = client.post(
        f"/events/{event['slug']}/days",
        json={"date": "2026-12-24", "title": "Réveillon", "key": EVENT_KEY},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture()
def meal(client: TestClient, event: dict, day: dict) -> dict:
    resp = client.post(
        f"/events/{event['slug']}/meals",
        json={"day_id": day["id"], "title": "Dîner", "time": "20:00", "key": EVENT_KEY},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture()
def guest(client: TestClient, event: dict) -> dict:
    resp = client.post(f"/events/{event['slug']}/people", json={"name": "Gaston", "key": EVENT_KEY})
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture()
def audit_rows(db_session: Session):
    def _query(**filters) -> list[ChangeLog]:
        db_session.expire_all()
        query = db_session.query(ChangeLog)
        for field, value in filters.items():
            query = query.filter(getattr(ChangeLog, field) == value)
        return query.order_by(ChangeLog.id.asc()).all()

    return _query
