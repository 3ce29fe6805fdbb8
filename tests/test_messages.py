from conftest import register


def send(client, sender, receiver, content="hello", **extra):
    r = client.post(f"/api/messages/send/{receiver['id']}", json={"content": content, **extra}, headers=sender["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_send_and_history(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    first = send(client, alice, bob, "hi bob")
    second = send(client, bob, alice, "hi alice", replyTo=first["id"])
    assert second["replyTo"] == first["id"]
    assert first["sender"]["id"] == alice["id"]
    assert first["receiver"]["id"] == bob["id"]
    assert first["isRead"] is False

    history = client.get(f"/api/messages/{bob['id']}", headers=alice["headers"]).json()
    assert [m["id"] for m in history["data"]] == [first["id"], second["id"]]
    assert history["pagination"]["total"] == 2


def test_send_validation(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    assert client.post(f"/api/messages/send/{alice['id']}", json={"content": "me"}, headers=alice["headers"]).status_code == 400
    assert client.post("/api/messages/send/missing", json={"content": "x"}, headers=alice["headers"]).status_code == 404
    assert client.post(f"/api/messages/send/{bob['id']}", json={"content": " "}, headers=alice["headers"]).status_code == 400

    image = send(client, alice, bob, None, image="http://img/cat.png")
    assert image["type"] == "image"

    client.post(f"/api/users/block/{alice['id']}", headers=bob["headers"])
    assert client.post(f"/api/messages/send/{bob['id']}", json={"content": "x"}, headers=alice["headers"]).status_code == 403


def test_read_conversation_clears_unread(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    send(client, alice, bob, "one")
    send(client, alice, bob, "two")
    send(client, bob, alice, "reply")

    conversations = client.get("/api/messages/conversations", headers=bob["headers"]).json()["data"]
    assert len(conversations) == 1
    assert conversations[0]["user"]["id"] == alice["id"]
    assert conversations[0]["unreadCount"] == 2
    assert conversations[0]["lastMessage"]["content"] == "reply"

    r = client.patch(f"/api/messages/{alice['id']}/read", headers=bob["headers"])
    assert r.json()["data"] == {"updated": 2}

    conversations = client.get("/api/messages/conversations", headers=bob["headers"]).json()["data"]
    assert conversations[0]["unreadCount"] == 0
    history = client.get(f"/api/messages/{alice['id']}", headers=bob["headers"]).json()["data"]
    incoming = [m for m in history if m["sender"]["id"] == alice["id"]]
    assert all(m["isRead"] and m["readAt"] for m in incoming)
    # Bob's own message stays unread for Alice
    conversations = client.get("/api/messages/conversations", headers=alice["headers"]).json()["data"]
    assert conversations[0]["unreadCount"] == 1


def test_edit_and_delete_own_messages(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    message = send(client, alice, bob, "typo")

    assert client.patch(f"/api/messages/edit/{message['id']}", json={"content": "x"}, headers=bob["headers"]).status_code == 403
    r = client.patch(f"/api/messages/edit/{message['id']}", json={"content": " \n "}, headers=alice["headers"])
    assert r.status_code == 400
    r = client.patch(f"/api/messages/edit/{message['id']}", json={"content": "fixed"}, headers=alice["headers"])
    assert r.json()["data"]["content"] == "fixed"
    assert r.json()["data"]["isEdited"] is True

    assert client.delete(f"/api/messages/{message['id']}", headers=bob["headers"]).status_code == 403
    assert client.delete(f"/api/messages/{message['id']}", headers=alice["headers"]).status_code == 200
    assert client.get(f"/api/messages/{bob['id']}", headers=alice["headers"]).json()["data"] == []


def test_message_creates_notification(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    send(client, alice, bob)
    notifications = client.get("/api/notifications", headers=bob["headers"]).json()["data"]
    assert [n["type"] for n in notifications] == ["message"]
