from conftest import befriend, register


def test_request_accept_scenario(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")

    r = client.post(f"/api/friends/request/{bob['id']}", json={"message": "hi"}, headers=alice["headers"])
    assert r.status_code == 201
    request_id = r.json()["data"]["id"]

    r = client.get("/api/friends/requests", headers=bob["headers"])
    pending = r.json()["data"]
    assert len(pending) == 1
    assert pending[0]["id"] == request_id
    assert pending[0]["sender"]["id"] == alice["id"]
    assert pending[0]["message"] == "hi"
    assert pending[0]["status"] == "pending"

    r = client.post(f"/api/friends/accept/{request_id}", headers=bob["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "accepted"

    alice_friends = client.get("/api/friends/list", headers=alice["headers"]).json()["data"]
    bob_friends = client.get("/api/friends/list", headers=bob["headers"]).json()["data"]
    assert [f["id"] for f in alice_friends] == [bob["id"]]
    assert [f["id"] for f in bob_friends] == [alice["id"]]

    r = client.post(f"/api/friends/accept/{request_id}", headers=bob["headers"])
    assert r.status_code == 404
    assert len(client.get("/api/friends/list", headers=alice["headers"]).json()["data"]) == 1


def test_duplicate_pending_request_conflicts(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    assert client.post(f"/api/friends/request/{bob['id']}", headers=alice["headers"]).status_code == 201

    assert client.post(f"/api/friends/request/{bob['id']}", headers=alice["headers"]).status_code == 409
    # The reverse direction is pending too
    assert client.post(f"/api/friends/request/{alice['id']}", headers=bob["headers"]).status_code == 409


def test_request_edge_cases(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    assert client.post(f"/api/friends/request/{alice['id']}", headers=alice["headers"]).status_code == 400
    assert client.post("/api/friends/request/missing", headers=alice["headers"]).status_code == 404

    befriend(client, alice, bob)
    assert client.post(f"/api/friends/request/{bob['id']}", headers=alice["headers"]).status_code == 409


def test_only_receiver_can_accept(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    request_id = client.post(f"/api/friends/request/{bob['id']}", headers=alice["headers"]).json()["data"]["id"]
    assert client.post(f"/api/friends/accept/{request_id}", headers=alice["headers"]).status_code == 404


def test_reject_and_request_again(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    request_id = client.post(f"/api/friends/request/{bob['id']}", headers=alice["headers"]).json()["data"]["id"]

    r = client.post(f"/api/friends/reject/{request_id}", headers=bob["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "rejected"
    assert client.get("/api/friends/requests", headers=bob["headers"]).json()["data"] == []

    assert client.post(f"/api/friends/request/{bob['id']}", headers=alice["headers"]).status_code == 201


def test_cancel_sent_request(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    request_id = client.post(f"/api/friends/request/{bob['id']}", headers=alice["headers"]).json()["data"]["id"]

    sent = client.get("/api/friends/requests/sent", headers=alice["headers"]).json()["data"]
    assert [s["id"] for s in sent] == [request_id]

    assert client.delete(f"/api/friends/request/{request_id}", headers=bob["headers"]).status_code == 404
    assert client.delete(f"/api/friends/request/{request_id}", headers=alice["headers"]).status_code == 200
    assert client.get("/api/friends/requests", headers=bob["headers"]).json()["data"] == []


def test_remove_friend(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    befriend(client, alice, bob)

    assert client.delete(f"/api/friends/remove/{bob['id']}", headers=alice["headers"]).status_code == 200
    assert client.get("/api/friends/list", headers=bob["headers"]).json()["data"] == []
    assert client.delete(f"/api/friends/remove/{bob['id']}", headers=alice["headers"]).status_code == 404
    # Friendship can be re-established afterwards
    befriend(client, alice, bob)


def test_friend_list_search_and_pagination(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    carol = register(client, "Carol")
    befriend(client, alice, bob)
    befriend(client, alice, carol)

    body = client.get("/api/friends/list?searchTerm=car", headers=alice["headers"]).json()
    assert [f["id"] for f in body["data"]] == [carol["id"]]

    body = client.get("/api/friends/list?limit=1", headers=alice["headers"]).json()
    assert len(body["data"]) == 1
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}


def test_suggestions_rank_mutual_friends(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    carol = register(client, "Carol")
    dave = register(client, "Dave")
    befriend(client, alice, bob)
    befriend(client, bob, carol)

    suggestions = client.get("/api/friends/suggestions", headers=alice["headers"]).json()["data"]
    ids = [s["id"] for s in suggestions]
    assert ids[0] == carol["id"]
    assert suggestions[0]["mutualFriends"] == 1
    assert dave["id"] in ids
    assert bob["id"] not in ids and alice["id"] not in ids


def test_block_severs_friendship(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    befriend(client, alice, bob)

    assert client.post(f"/api/users/block/{bob['id']}", headers=alice["headers"]).status_code == 200
    assert client.post(f"/api/users/block/{bob['id']}", headers=alice["headers"]).status_code == 409
    assert client.get("/api/friends/list", headers=alice["headers"]).json()["data"] == []
    assert client.post(f"/api/friends/request/{alice['id']}", headers=bob["headers"]).status_code == 403
    assert client.get(f"/api/users/{alice['id']}", headers=bob["headers"]).status_code == 404

    assert client.post(f"/api/users/unblock/{bob['id']}", headers=alice["headers"]).status_code == 200
    assert client.post(f"/api/users/unblock/{bob['id']}", headers=alice["headers"]).status_code == 404
    assert client.post(f"/api/friends/request/{alice['id']}", headers=bob["headers"]).status_code == 201
