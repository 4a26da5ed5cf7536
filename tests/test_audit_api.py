from __future__ import annotations

from tests.conftest import EVENT_KEY


def test_audit_logs_admin_only(client, authorize, owner_user, event):
    assert client.get("/admin/audit-logs").status_code == 401

    authorize(owner_user)
    assert client.get("/admin/audit-logs").status_code == 403


def test_audit_logs_filters_and_order(client, authorize, admin_user, event, day, meal):
    slug = event["slug"]
    client.patch(f"/events/{slug}/meals/{meal['id']}", json={"title": "Souper", "key": EVENT_KEY})

    authorize(admin_user)
    resp = client.get("/admin/audit-logs")
    assert resp.status_code == 200, resp.text
    rows = resp.json()
    assert [(row["table_name"], row["action"]) for row in rows] == [
        ("meals", "update"),
        ("meals", "create"),
        ("days", "create"),
        ("events", "create"),
    ]
    # Anonymous key holders leave no user id.
    assert rows[-1]["user_id"] is None

    meals_only = client.get("/admin/audit-logs", params={"table_name": "meals", "action": "update"}).json()
    assert len(meals_only) == 1
    assert meals_only[0]["old_data"]["title"] == "Dîner"
    assert meals_only[0]["new_data"]["title"] == "Souper"

    by_record = client.get("/admin/audit-logs", params={"record_id": day["id"], "table_name": "days"}).json()
    assert [row["action"] for row in by_record] == ["create"]


def test_audit_logs_reject_bad_filters(client, authorize, admin_user):
    authorize(admin_user)
    assert client.get("/admin/audit-logs", params={"action": "purge"}).status_code == 422
    assert client.get("/admin/audit-logs", params={"limit": 500}).status_code == 422


def test_audit_records_user_and_request_metadata(client, authorize, owner_user, audit_rows):
    authorize(owner_user)
    resp = client.post(
        "/events",
        json={"slug": "soiree", "name": "Soirée"},
        headers={"User-Agent": "pytest-agent", "Referer": "https://example.com/new", "X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
    )
    assert resp.status_code == 201, resp.text

    row = audit_rows(table_name="events")[0]
    assert row.user_id == owner_user.id
    assert row.user_ip == "203.0.113.9"
    assert row.user_agent == "pytest-agent"
    assert row.referer == "https://example.com/new"


def test_admin_lists_all_events(client, authorize, admin_user, event):
    client.post("/events", json={"slug": "brunch", "name": "Brunch"})
    authorize(admin_user)
    resp = client.get("/admin/events")
    assert resp.status_code == 200
    assert {row["slug"] for row in resp.json()} == {"diner", "brunch"}
