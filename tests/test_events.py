from conftest import register


def create_event(client, user, **payload):
    payload.setdefault("title", "Jazz night")
    payload.setdefault("startsAt", "2030-06-01T19:00:00Z")
    r = client.post("/api/events", json=payload, headers=user["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_create_event(client):
    alice = register(client, "Alice")
    event = create_event(client, alice, category="music", maxAttendees=2)
    assert event["organizer"]["id"] == alice["id"]
    assert event["isFree"] is True
    assert event["attendeesCount"] == 0
    assert event["isFull"] is False

    r = client.post("/api/events", json={"title": "No date"}, headers=alice["headers"])
    assert r.status_code == 422
    r = client.post(
        "/api/events",
        json={"title": "Bad", "startsAt": "2030-06-01T19:00:00Z", "price": -1},
        headers=alice["headers"],
    )
    assert r.status_code == 422


def test_join_until_full(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    carol = register(client, "Carol")
    dave = register(client, "Dave")
    event = create_event(client, alice, maxAttendees=2)

    r = client.post(f"/api/events/{event['id']}/join", headers=bob["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["isAttending"] is True
    assert client.post(f"/api/events/{event['id']}/join", headers=bob["headers"]).status_code == 409

    r = client.post(f"/api/events/{event['id']}/join", headers=carol["headers"])
    assert r.json()["data"]["isFull"] is True
    assert client.post(f"/api/events/{event['id']}/join", headers=dave["headers"]).status_code == 409

    attendees = client.get(f"/api/events/{event['id']}/attendees", headers=alice["headers"]).json()
    assert {a["user"]["id"] for a in attendees["data"]} == {bob["id"], carol["id"]}
    assert attendees["pagination"]["total"] == 2

    r = client.post(f"/api/events/{event['id']}/leave", headers=bob["headers"])
    assert r.json()["data"]["attendeesCount"] == 1
    assert client.post(f"/api/events/{event['id']}/leave", headers=bob["headers"]).status_code == 400
    assert client.post(f"/api/events/{event['id']}/join", headers=dave["headers"]).status_code == 200


def test_list_filters_and_sort(client):
    alice = register(client, "Alice")
    create_event(client, alice, title="Late gig", category="music", startsAt="2030-09-01T19:00:00Z", price=20)
    create_event(client, alice, title="Early run", category="sports", startsAt="2030-03-01T07:00:00Z")

    by_date = client.get("/api/events", headers=alice["headers"]).json()["data"]
    assert [e["title"] for e in by_date] == ["Early run", "Late gig"]

    by_price = client.get("/api/events?sort=price-high", headers=alice["headers"]).json()["data"]
    assert [e["title"] for e in by_price] == ["Late gig", "Early run"]
    assert by_price[0]["isFree"] is False

    music = client.get("/api/events?category=music", headers=alice["headers"]).json()["data"]
    assert [e["title"] for e in music] == ["Late gig"]
    found = client.get("/api/events?search=run", headers=alice["headers"]).json()["data"]
    assert [e["title"] for e in found] == ["Early run"]


def test_only_organizer_can_change(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    event = create_event(client, alice)

    assert client.patch(f"/api/events/{event['id']}", json={"title": "Mine"}, headers=bob["headers"]).status_code == 403
    r = client.patch(f"/api/events/{event['id']}", json={"location": "Blue Note"}, headers=alice["headers"])
    assert r.json()["data"]["location"] == "Blue Note"

    client.post(f"/api/events/{event['id']}/join", headers=bob["headers"])
    mine = client.get("/api/events/my", headers=bob["headers"]).json()["data"]
    assert [e["id"] for e in mine] == [event["id"]]

    assert client.delete(f"/api/events/{event['id']}", headers=bob["headers"]).status_code == 403
    assert client.delete(f"/api/events/{event['id']}", headers=alice["headers"]).status_code == 200
    assert client.get(f"/api/events/{event['id']}", headers=alice["headers"]).status_code == 404


def test_event_tags_and_images(client):
    alice = register(client, "Alice")
    event = create_event(
        client,
        alice,
        title="Hack day",
        tags=["#Python", "python", " Open Source "],
        images=["http://img/a.png", "http://img/b.png"],
    )
    assert event["tags"] == ["python", "open source"]
    assert event["images"] == ["http://img/a.png", "http://img/b.png"]

    plain = create_event(client, alice, title="Quiz")
    assert plain["tags"] == [] and plain["images"] == []

    r = client.patch(f"/api/events/{event['id']}", json={"tags": ["#AI"], "images": []}, headers=alice["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["tags"] == ["ai"]
    assert r.json()["data"]["images"] == []

    found = client.get("/api/events?search=ai", headers=alice["headers"]).json()["data"]
    assert [e["id"] for e in found] == [event["id"]]
