from conftest import register


def create_group(client, user, **payload):
    payload.setdefault("name", "Hikers")
    r = client.post("/api/groups/create", json=payload, headers=user["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_create_and_join_public_group(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    group = create_group(client, alice, category="sports", tags=["Outdoors"])
    assert group["admin"]["id"] == alice["id"]
    assert group["isMember"] is True
    assert group["role"] == "admin"
    assert group["membersCount"] == 1
    assert group["tags"] == ["outdoors"]

    r = client.post(f"/api/groups/{group['id']}/join", headers=bob["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "joined"
    assert r.json()["data"]["group"]["membersCount"] == 2
    assert client.post(f"/api/groups/{group['id']}/join", headers=bob["headers"]).status_code == 409

    mine = client.get("/api/groups/user", headers=bob["headers"]).json()["data"]
    assert [g["id"] for g in mine] == [group["id"]]

    members = client.get(f"/api/groups/{group['id']}/members", headers=bob["headers"]).json()["data"]
    assert {m["user"]["id"]: m["role"] for m in members} == {alice["id"]: "admin", bob["id"]: "member"}

    assert client.post(f"/api/groups/{group['id']}/leave", headers=bob["headers"]).status_code == 200
    assert client.post(f"/api/groups/{group['id']}/leave", headers=bob["headers"]).status_code == 400
    assert client.post(f"/api/groups/{group['id']}/leave", headers=alice["headers"]).status_code == 400


def test_private_group_join_requests(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    group = create_group(client, alice, privacy="private")

    r = client.post(f"/api/groups/{group['id']}/join", json={"message": "let me in"}, headers=bob["headers"])
    assert r.json()["data"]["status"] == "pending"
    assert r.json()["data"]["group"]["hasPendingRequest"] is True
    assert client.post(f"/api/groups/{group['id']}/join", headers=bob["headers"]).status_code == 409
    assert client.get(f"/api/groups/{group['id']}/posts", headers=bob["headers"]).status_code == 403

    assert client.get(f"/api/groups/{group['id']}/requests", headers=bob["headers"]).status_code == 403
    requests = client.get(f"/api/groups/{group['id']}/requests", headers=alice["headers"]).json()["data"]
    assert requests[0]["user"]["id"] == bob["id"]
    assert requests[0]["message"] == "let me in"

    assert client.post(f"/api/groups/{group['id']}/requests/{bob['id']}/approve", headers=alice["headers"]).status_code == 200
    fetched = client.get(f"/api/groups/{group['id']}", headers=bob["headers"]).json()["data"]
    assert fetched["isMember"] is True
    assert fetched["pendingRequestsCount"] == 0
    assert client.get(f"/api/groups/{group['id']}/posts", headers=bob["headers"]).status_code == 200


def test_reject_join_request(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    group = create_group(client, alice, privacy="private")
    client.post(f"/api/groups/{group['id']}/join", headers=bob["headers"])

    assert client.post(f"/api/groups/{group['id']}/requests/{bob['id']}/reject", headers=alice["headers"]).status_code == 200
    assert client.post(f"/api/groups/{group['id']}/requests/{bob['id']}/reject", headers=alice["headers"]).status_code == 404


def test_group_posts_stay_out_of_feed(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    group = create_group(client, alice)

    r = client.post("/api/posts", json={"content": "in group", "groupId": group["id"]}, headers=bob["headers"])
    assert r.status_code == 403
    client.post(f"/api/groups/{group['id']}/join", headers=bob["headers"])
    post = client.post("/api/posts", json={"content": "in group", "groupId": group["id"]}, headers=bob["headers"]).json()["data"]
    assert post["group"] == group["id"]

    group_posts = client.get(f"/api/groups/{group['id']}/posts", headers=alice["headers"]).json()["data"]
    assert [p["id"] for p in group_posts] == [post["id"]]
    assert client.get("/api/posts", headers=bob["headers"]).json()["data"] == []


def test_moderators_and_updates(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    group = create_group(client, alice)
    client.post(f"/api/groups/{group['id']}/join", headers=bob["headers"])

    assert client.patch(f"/api/groups/{group['id']}", json={"description": "x"}, headers=bob["headers"]).status_code == 403
    assert client.post(f"/api/groups/{group['id']}/moderators/{bob['id']}", headers=alice["headers"]).status_code == 200
    assert client.post(f"/api/groups/{group['id']}/moderators/{bob['id']}", headers=alice["headers"]).status_code == 409

    r = client.patch(f"/api/groups/{group['id']}", json={"description": "Weekend trails"}, headers=bob["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["description"] == "Weekend trails"
    assert r.json()["data"]["moderators"] == [bob["id"]]

    assert client.delete(f"/api/groups/{group['id']}", headers=bob["headers"]).status_code == 403
    assert client.delete(f"/api/groups/{group['id']}/moderators/{bob['id']}", headers=alice["headers"]).status_code == 200
    assert client.delete(f"/api/groups/{group['id']}", headers=alice["headers"]).status_code == 200
    assert client.get(f"/api/groups/{group['id']}", headers=alice["headers"]).status_code == 404


def test_list_suggest_and_invite(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    public = create_group(client, alice, name="Chess Club", category="games")
    create_group(client, alice, name="Secret", privacy="private")

    listed = client.get("/api/groups?privacy=public", headers=bob["headers"]).json()["data"]
    assert [g["id"] for g in listed] == [public["id"]]
    found = client.get("/api/groups?search=chess", headers=bob["headers"]).json()["data"]
    assert [g["id"] for g in found] == [public["id"]]

    suggestions = client.get("/api/groups/suggestions", headers=bob["headers"]).json()["data"]
    assert [g["id"] for g in suggestions] == [public["id"]]

    assert client.post(f"/api/groups/{public['id']}/invite/{alice['id']}", headers=bob["headers"]).status_code == 403
    assert client.post(f"/api/groups/{public['id']}/invite/{bob['id']}", headers=alice["headers"]).status_code == 200
    notifications = client.get("/api/notifications", headers=bob["headers"]).json()["data"]
    assert notifications[0]["type"] == "group_invite"
    assert notifications[0]["relatedGroup"] == public["id"]
