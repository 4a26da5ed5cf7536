from __future__ import annotations

from tests.conftest import EVENT_KEY


def test_meal_create_denied_update_delete_flow(client, event, day, audit_rows):
    slug = event["slug"]
    assert slug == "diner"

    create_resp = client.post(
        f"/events/{slug}/meals",
        json={"day_id": day["id"], "title": "Dîner", "key": EVENT_KEY},
    )
    assert create_resp.status_code == 201, create_resp.text
    meal_id = create_resp.json()["id"]

    created = audit_rows(table_name="meals", record_id=meal_id)
    assert len(created) == 1
    assert created[0].action == "create"
    assert created[0].old_data is None
    assert created[0].new_data["title"] == "Dîner"
    assert created[0].event_id == event["id"]

    denied = client.patch(f"/events/{slug}/meals/{meal_id}?key=WRONG", json={"title": "X"})
    assert denied.status_code == 403
    assert denied.json()["reason"] == "forbidden"
    assert len(audit_rows(table_name="meals", record_id=meal_id)) == 1

    tree = client.get(f"/events/{slug}").json()
    assert tree["days"][0]["meals"][0]["title"] == "Dîner"

    delete_resp = client.request("DELETE", f"/events/{slug}/meals/{meal_id}", json={"key": EVENT_KEY})
    assert delete_resp.status_code == 200, delete_resp.text
    history = audit_rows(table_name="meals", record_id=meal_id)
    assert [row.action for row in history] == ["create", "delete"]
    assert history[-1].new_data is None
    assert history[-1].old_data["title"] == "Dîner"

    missing = client.patch(f"/events/{slug}/meals/{meal_id}", json={"title": "Y", "key": EVENT_KEY})
    assert missing.status_code == 404
    assert missing.json()["table"] == "meals"


def test_meal_write_without_credentials_is_unauthenticated(client, event, day):
    resp = client.post(f"/events/{event['slug']}/meals", json={"day_id": day["id"], "title": "Brunch"})
    assert resp.status_code == 401
    assert resp.json()["reason"] == "unauthenticated"


def test_key_with_extra_characters_is_rejected(client, event, day, guest, audit_rows):
    slug = event["slug"]
    in_body = client.post(f"/events/{slug}/meals", json={"day_id": day["id"], "title": "Brunch", "key": EVENT_KEY + "!!<>"})
    assert in_body.status_code == 403
    assert in_body.json()["reason"] == "forbidden"

    in_query = client.post(f"/events/{slug}/meals?key={EVENT_KEY}!!", json={"day_id": day["id"], "title": "Brunch"})
    assert in_query.status_code == 403

    token = client.post(
        f"/events/{slug}/meals",
        json={"day_id": day["id"], "title": "Brunch", "token": " " + guest["token"] + "/"},
    )
    assert token.status_code == 403
    assert audit_rows(table_name="meals") == []


def test_meal_update_changes_fields_and_records_both_images(client, event, meal, audit_rows):
    resp = client.patch(
        f"/events/{event['slug']}/meals/{meal['id']}",
        json={"title": "Souper", "time": "21:30", "adults": 6, "key": EVENT_KEY},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["title"] == "Souper"
    assert body["time"] == "21:30"
    assert body["adults"] == 6

    update = audit_rows(table_name="meals", record_id=meal["id"], action="update")
    assert len(update) == 1
    assert update[0].old_data["title"] == "Dîner"
    assert update[0].new_data["title"] == "Souper"


def test_meal_update_with_same_values_writes_no_audit(client, event, meal, audit_rows):
    resp = client.patch(
        f"/events/{event['slug']}/meals/{meal['id']}",
        json={"title": meal["title"], "key": EVENT_KEY},
    )
    assert resp.status_code == 200, resp.text
    assert audit_rows(table_name="meals", record_id=meal["id"], action="update") == []


def test_meal_rejects_invalid_time(client, event, day):
    resp = client.post(
        f"/events/{event['slug']}/meals",
        json={"day_id": day["id"], "title": "Goûter", "time": "25:99", "key": EVENT_KEY},
    )
    assert resp.status_code == 422
    assert resp.json()["field"] == "time"


def test_meals_append_in_order_and_reorder(client, event, day, audit_rows):
    slug = event["slug"]
    ids = []
    for title in ("Apéritif", "Plat", "Dessert"):
        resp = client.post(f"/events/{slug}/meals", json={"day_id": day["id"], "title": title, "key": EVENT_KEY})
        assert resp.status_code == 201, resp.text
        ids.append(resp.json()["id"])
    orders = [client.get(f"/events/{slug}").json()["days"][0]["meals"][i]["order"] for i in range(3)]
    assert orders == [0, 1, 2]

    reorder = client.post(
        f"/events/{slug}/meals/reorder",
        json={"day_id": day["id"], "meal_ids": [ids[0], ids[2], ids[1]], "key": EVENT_KEY},
    )
    assert reorder.status_code == 200, reorder.text

    titles = [meal["title"] for meal in client.get(f"/events/{slug}").json()["days"][0]["meals"]]
    assert titles == ["Apéritif", "Dessert", "Plat"]
    # The first meal kept its position, so only two rows changed.
    updates = audit_rows(table_name="meals", action="update")
    assert sorted(row.record_id for row in updates) == sorted([ids[1], ids[2]])


def test_meal_reorder_rejects_duplicates(client, event, meal, day):
    resp = client.post(
        f"/events/{event['slug']}/meals/reorder",
        json={"day_id": day["id"], "meal_ids": [meal["id"], meal["id"]], "key": EVENT_KEY},
    )
    assert resp.status_code == 422


def test_meal_of_another_event_is_not_found(client, event, meal):
    other = client.post("/events", json={"slug": "brunch", "name": "Brunch", "key": "K2"})
    assert other.status_code == 201, other.text

    # Key of the other event, meal of this one: the meal is outside that scope.
    resp = client.patch(f"/events/brunch/meals/{meal['id']}", json={"title": "Hijack", "key": "K2"})
    assert resp.status_code == 404

    resp = client.patch(f"/events/{event['slug']}/meals/{meal['id']}", json={"title": "Hijack", "key": "K2"})
    assert resp.status_code == 403


def test_meal_moves_to_another_day_at_the_end(client, event, meal):
    slug = event["slug"]
    second_day = client.post(f"/events/{slug}/days", json={"date": "2026-12-25", "key": EVENT_KEY}).json()
    client.post(f"/events/{slug}/meals", json={"day_id": second_day["id"], "title": "Déjeuner", "key": EVENT_KEY})

    resp = client.patch(f"/events/{slug}/meals/{meal['id']}", json={"day_id": second_day["id"], "key": EVENT_KEY})
    assert resp.status_code == 200, resp.text
    assert resp.json()["day_id"] == second_day["id"]
    assert resp.json()["order"] == 1
