import pytest
from starlette.websockets import WebSocketDisconnect

from conftest import register


def test_rejects_invalid_token(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws?token=bogus"):
            pass
    assert exc.value.code == 4401

    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws"):
            pass
    assert exc.value.code == 4401


def test_presence_and_ping(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")

    with client.websocket_connect(f"/ws?token={alice['token']}") as ws:
        assert ws.receive_json() == {"event": "onlineUsers", "data": [alice["id"]]}

        ws.send_json({"event": "ping"})
        assert ws.receive_json() == {"event": "pong"}

        online = client.get("/api/users/online", headers=bob["headers"]).json()["data"]
        assert [u["id"] for u in online] == [alice["id"]]
        assert online[0]["isOnline"] is True
        assert client.get("/api/users/online", headers=alice["headers"]).json()["data"] == []

        ws.send_text("not json")
        assert ws.receive_json() == {"event": "error", "data": "Invalid JSON"}


def test_typing_is_relayed_to_peer(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")

    with client.websocket_connect(f"/ws?token={alice['token']}") as alice_ws:
        alice_ws.receive_json()
        with client.websocket_connect(f"/ws?token={bob['token']}") as bob_ws:
            online = bob_ws.receive_json()
            assert online["event"] == "onlineUsers"
            assert set(online["data"]) == {alice["id"], bob["id"]}

            alice_ws.send_json({"event": "typing", "data": {"userId": bob["id"], "isTyping": True}})
            assert bob_ws.receive_json() == {
                "event": "typing",
                "data": {"userId": alice["id"], "isTyping": True},
            }


def test_new_message_and_notification_are_pushed(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")

    with client.websocket_connect(f"/ws?token={bob['token']}") as ws:
        ws.receive_json()
        sent = client.post(f"/api/messages/send/{bob['id']}", json={"content": "hey"}, headers=alice["headers"])
        assert sent.status_code == 201

        frame = ws.receive_json()
        assert frame["event"] == "newMessage"
        assert frame["data"]["id"] == sent.json()["data"]["id"]
        assert frame["data"]["sender"]["id"] == alice["id"]

        frame = ws.receive_json()
        assert frame["event"] == "newNotification"
        assert frame["data"]["type"] == "message"
