from conftest import register


def friend_request(client, sender, receiver):
    r = client.post(f"/api/friends/request/{receiver['id']}", headers=sender["headers"])
    assert r.status_code == 201


def test_mark_one_read(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    carol = register(client, "Carol")
    friend_request(client, bob, alice)
    friend_request(client, carol, alice)

    notifications = client.get("/api/notifications", headers=alice["headers"]).json()["data"]
    assert len(notifications) == 2
    assert all(n["type"] == "friend_request" for n in notifications)
    assert client.get("/api/notifications/unread-count", headers=alice["headers"]).json()["data"] == {"count": 2}

    target = notifications[0]["id"]
    r = client.patch("/api/notifications/mark-read", json={"notificationIds": [target]}, headers=alice["headers"])
    assert r.json()["data"] == {"updated": 1}

    read = client.get("/api/notifications?isRead=true", headers=alice["headers"]).json()["data"]
    assert [n["id"] for n in read] == [target]
    assert read[0]["isRead"] is True
    assert read[0]["readAt"] is not None
    assert client.get("/api/notifications/unread-count", headers=alice["headers"]).json()["data"] == {"count": 1}


def test_mark_all_only_affects_recipient(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    carol = register(client, "Carol")
    friend_request(client, bob, alice)
    friend_request(client, carol, bob)

    r = client.patch("/api/notifications/mark-read", json={"markAll": True}, headers=alice["headers"])
    assert r.json()["data"] == {"updated": 1}
    assert client.get("/api/notifications/unread-count", headers=alice["headers"]).json()["data"]["count"] == 0
    assert client.get("/api/notifications/unread-count", headers=bob["headers"]).json()["data"]["count"] == 1


def test_mark_read_cannot_touch_other_users_notifications(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    friend_request(client, alice, bob)
    bobs = client.get("/api/notifications", headers=bob["headers"]).json()["data"]

    r = client.patch("/api/notifications/mark-read", json={"notificationIds": [bobs[0]["id"]]}, headers=alice["headers"])
    assert r.json()["data"] == {"updated": 0}
    assert client.delete(f"/api/notifications/{bobs[0]['id']}", headers=alice["headers"]).status_code == 404


def test_mark_read_requires_ids_or_all(client):
    alice = register(client, "Alice")
    r = client.patch("/api/notifications/mark-read", json={}, headers=alice["headers"])
    assert r.status_code == 400


def test_delete_notification(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    friend_request(client, alice, bob)
    notification = client.get("/api/notifications", headers=bob["headers"]).json()["data"][0]

    assert client.delete(f"/api/notifications/{notification['id']}", headers=bob["headers"]).status_code == 200
    assert client.get("/api/notifications", headers=bob["headers"]).json()["data"] == []
