from __future__ import annotations

from tests.conftest import EVENT_KEY


def _add_item(client, slug, meal_id, name, **extra):
    payload = {"meal_id": meal_id, "name": name, "key": EVENT_KEY}
    payload.update(extra)
    resp = client.post(f"/events/{slug}/items", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_item_lifecycle(client, event, meal, guest, audit_rows):
    slug = event["slug"]
    item = _add_item(client, slug, meal["id"], "Bûche", quantity="1", price=12.5, person_id=guest["id"])
    assert item["order"] == 0
    assert item["person_id"] == guest["id"]
    assert item["checked"] is False

    toggled = client.post(f"/events/{slug}/items/{item['id']}/toggle", json={"checked": True, "key": EVENT_KEY})
    assert toggled.status_code == 200, toggled.text
    assert toggled.json()["checked"] is True

    cleared = client.patch(f"/events/{slug}/items/{item['id']}", json={"note": "Chocolat", "price": None, "key": EVENT_KEY})
    assert cleared.status_code == 200, cleared.text
    assert cleared.json()["note"] == "Chocolat"
    assert cleared.json()["price"] is None
    assert cleared.json()["quantity"] == "1"

    unassigned = client.post(f"/events/{slug}/items/{item['id']}/assign", json={"person_id": None, "key": EVENT_KEY})
    assert unassigned.status_code == 200, unassigned.text
    assert unassigned.json()["person_id"] is None

    deleted = client.request("DELETE", f"/events/{slug}/items/{item['id']}", json={"key": EVENT_KEY})
    assert deleted.status_code == 200

    actions = [row.action for row in audit_rows(table_name="items", record_id=item["id"])]
    assert actions == ["create", "update", "update", "update", "delete"]


def test_item_name_is_sanitized(client, event, meal):
    item = _add_item(client, event["slug"], meal["id"], "<b>Pain</b><script>alert(1)</script>")
    assert item["name"] == "Pain"


def test_item_cannot_be_assigned_to_person_of_another_event(client, event, meal):
    other = client.post("/events", json={"slug": "brunch", "name": "Brunch", "key": "K2"}).json()
    stranger = client.post(f"/events/{other['slug']}/people", json={"name": "Stranger", "key": "K2"}).json()

    resp = client.post(
        f"/events/{event['slug']}/items",
        json={"meal_id": meal["id"], "name": "Vin", "person_id": stranger["id"], "key": EVENT_KEY},
    )
    assert resp.status_code == 404
    assert resp.json()["table"] == "people"


def test_guest_token_can_add_items(client, event, meal, guest, audit_rows):
    resp = client.post(
        f"/events/{event['slug']}/items",
        json={"meal_id": meal["id"], "name": "Fromage", "token": guest["token"]},
    )
    assert resp.status_code == 201, resp.text
    assert len(audit_rows(table_name="items", action="create")) == 1


def test_item_reorder(client, event, meal):
    slug = event["slug"]
    first = _add_item(client, slug, meal["id"], "Pain")
    second = _add_item(client, slug, meal["id"], "Beurre")
    assert (first["order"], second["order"]) == (0, 1)

    resp = client.post(
        f"/events/{slug}/items/reorder",
        json={"meal_id": meal["id"], "item_ids": [second["id"], first["id"]], "key": EVENT_KEY},
    )
    assert resp.status_code == 200, resp.text
    names = [item["name"] for item in client.get(f"/events/{slug}").json()["days"][0]["meals"][0]["items"]]
    assert names == ["Beurre", "Pain"]


def test_item_reorder_rejects_items_of_other_meals(client, event, day, meal):
    slug = event["slug"]
    other_meal = client.post(f"/events/{slug}/meals", json={"day_id": day["id"], "title": "Midi", "key": EVENT_KEY}).json()
    stray = _add_item(client, slug, other_meal["id"], "Salade")

    resp = client.post(
        f"/events/{slug}/items/reorder",
        json={"meal_id": meal["id"], "item_ids": [stray["id"]], "key": EVENT_KEY},
    )
    assert resp.status_code == 404


def test_item_move_between_meals(client, event, day, meal):
    slug = event["slug"]
    target = client.post(f"/events/{slug}/meals", json={"day_id": day["id"], "title": "Midi", "key": EVENT_KEY}).json()
    moving = _add_item(client, slug, meal["id"], "Chips")
    staying = _add_item(client, slug, meal["id"], "Olives")
    resident = _add_item(client, slug, target["id"], "Salade")

    resp = client.post(
        f"/events/{slug}/items/{moving['id']}/move",
        json={"target_meal_id": target["id"], "target_order": 0, "key": EVENT_KEY},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["meal_id"] == target["id"]
    assert resp.json()["order"] == 0

    meals = {m["id"]: m for m in client.get(f"/events/{slug}").json()["days"][0]["meals"]}
    assert [(i["id"], i["order"]) for i in meals[target["id"]]["items"]] == [(moving["id"], 0), (resident["id"], 1)]
    assert [(i["id"], i["order"]) for i in meals[meal["id"]]["items"]] == [(staying["id"], 0)]


def test_item_move_to_meal_of_another_event_is_not_found(client, event, meal):
    item = _add_item(client, event["slug"], meal["id"], "Chips")
    other = client.post("/events", json={"slug": "brunch", "name": "Brunch", "key": "K2", "creation_mode": "apero"})
    assert other.status_code == 201, other.text
    foreign_meal = client.get("/events/brunch").json()["days"][0]["meals"][0]

    resp = client.post(
        f"/events/{event['slug']}/items/{item['id']}/move",
        json={"target_meal_id": foreign_meal["id"], "key": EVENT_KEY},
    )
    assert resp.status_code == 404
