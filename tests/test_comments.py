from conftest import register


def setup_post(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    post = client.post("/api/posts", json={"content": "hi", "visibility": "public"}, headers=alice["headers"]).json()["data"]
    return alice, bob, post


def comment(client, user, post_id, **payload):
    r = client.post(f"/api/comments/post/{post_id}", json=payload, headers=user["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_comment_and_counter(client):
    alice, bob, post = setup_post(client)
    created = comment(client, bob, post["id"], content="nice post")
    assert created["author"]["id"] == bob["id"]
    assert created["post"] == post["id"]

    fetched = client.get(f"/api/posts/{post['id']}", headers=alice["headers"]).json()["data"]
    assert fetched["commentsCount"] == 1

    listed = client.get(f"/api/comments/post/{post['id']}", headers=alice["headers"]).json()
    assert [c["id"] for c in listed["data"]] == [created["id"]]

    notifications = client.get("/api/notifications", headers=alice["headers"]).json()["data"]
    assert notifications[0]["type"] == "comment"
    assert notifications[0]["relatedComment"] == created["id"]


def test_empty_comment_rejected(client):
    alice, bob, post = setup_post(client)
    r = client.post(f"/api/comments/post/{post['id']}", json={"content": "  "}, headers=bob["headers"])
    assert r.status_code == 400


def test_replies_are_one_level_deep(client):
    alice, bob, post = setup_post(client)
    top = comment(client, bob, post["id"], content="top")
    reply = comment(client, alice, post["id"], content="reply", parentCommentId=top["id"])
    nested = comment(client, bob, post["id"], content="nested", parentCommentId=reply["id"])
    assert nested["parentComment"] == top["id"]

    replies = client.get(f"/api/comments/{top['id']}/replies", headers=bob["headers"]).json()["data"]
    assert [r["id"] for r in replies] == [reply["id"], nested["id"]]

    top_level = client.get(f"/api/comments/post/{post['id']}", headers=bob["headers"]).json()["data"]
    assert [c["id"] for c in top_level] == [top["id"]]
    assert top_level[0]["repliesCount"] == 2


def test_delete_thread_decrements_counter(client):
    alice, bob, post = setup_post(client)
    top = comment(client, bob, post["id"], content="top")
    comment(client, alice, post["id"], content="reply", parentCommentId=top["id"])

    # The post author may moderate comments on their post
    assert client.delete(f"/api/comments/{top['id']}", headers=alice["headers"]).status_code == 200
    fetched = client.get(f"/api/posts/{post['id']}", headers=alice["headers"]).json()["data"]
    assert fetched["commentsCount"] == 0
    assert client.get(f"/api/comments/{top['id']}", headers=alice["headers"]).status_code == 404


def test_update_comment_only_by_author(client):
    alice, bob, post = setup_post(client)
    created = comment(client, bob, post["id"], content="typo")
    assert client.patch(f"/api/comments/{created['id']}", json={"content": "x"}, headers=alice["headers"]).status_code == 403

    r = client.patch(f"/api/comments/{created['id']}", json={"content": "   "}, headers=bob["headers"])
    assert r.status_code == 400

    r = client.patch(f"/api/comments/{created['id']}", json={"content": "fixed"}, headers=bob["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["content"] == "fixed"
    assert r.json()["data"]["isEdited"] is True


def test_comment_reactions_use_per_user_sets(client):
    alice, bob, post = setup_post(client)
    created = comment(client, bob, post["id"], content="react to me")

    data = client.post(f"/api/comments/{created['id']}/react", json={"type": "haha"}, headers=alice["headers"]).json()["data"]
    assert data["reactions"]["haha"] == [alice["id"]]
    assert data["totalReactions"] == 1

    data = client.post(f"/api/comments/{created['id']}/react", json={"type": "haha"}, headers=alice["headers"]).json()["data"]
    assert data["totalReactions"] == 0
    assert data["userReaction"] is None
