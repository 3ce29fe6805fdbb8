import pytest

from conftest import befriend, register


def create_post(client, user, **payload):
    payload.setdefault("content", "Hello world")
    r = client.post("/api/posts", json=payload, headers=user["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_create_post(client):
    alice = register(client, "Alice")
    post = create_post(client, alice, tags=["#Python", "python", " Fun "], visibility="public")
    assert post["author"]["id"] == alice["id"]
    assert post["type"] == "text"
    assert post["tags"] == ["python", "fun"]
    assert post["totalReactions"] == 0
    assert set(post["reactions"]) == {"like", "love", "haha", "wow", "sad", "angry"}

    post = create_post(client, alice, content=None, images=["http://img/1.png"])
    assert post["type"] == "image"
    assert post["visibility"] == "friends"

    r = client.post("/api/posts", json={"content": "   "}, headers=alice["headers"])
    assert r.status_code == 400


def test_feed_visibility(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    carol = register(client, "Carol")
    befriend(client, alice, bob)

    public = create_post(client, bob, content="public", visibility="public")
    friends_only = create_post(client, bob, content="friends", visibility="friends")
    private = create_post(client, bob, content="private", visibility="private")

    alice_feed = [p["id"] for p in client.get("/api/posts", headers=alice["headers"]).json()["data"]]
    assert public["id"] in alice_feed and friends_only["id"] in alice_feed
    assert private["id"] not in alice_feed

    carol_feed = [p["id"] for p in client.get("/api/posts", headers=carol["headers"]).json()["data"]]
    assert carol_feed == [public["id"]]

    assert client.get(f"/api/posts/{friends_only['id']}", headers=carol["headers"]).status_code == 403
    assert client.get(f"/api/posts/{private['id']}", headers=bob["headers"]).status_code == 200
    assert client.get("/api/posts/missing", headers=bob["headers"]).status_code == 404


def test_feed_sort_and_search(client):
    alice = register(client, "Alice")
    first = create_post(client, alice, content="first post")
    second = create_post(client, alice, content="second post", tags=["news"])

    newest = client.get("/api/posts?sort=-createdAt", headers=alice["headers"]).json()
    assert [p["id"] for p in newest["data"]] == [second["id"], first["id"]]
    assert newest["pagination"]["total"] == 2

    oldest = client.get("/api/posts?sort=oldest", headers=alice["headers"]).json()["data"]
    assert [p["id"] for p in oldest] == [first["id"], second["id"]]

    found = client.get("/api/posts?search=news", headers=alice["headers"]).json()["data"]
    assert [p["id"] for p in found] == [second["id"]]


@pytest.mark.parametrize(
    "sequence, expected_total",
    [
        (["like"], 1),
        (["like", "like"], 0),
        (["like", "love"], 1),
        (["wow", "sad", "sad"], 0),
    ],
)
def test_react_toggles_and_total_matches_sets(client, sequence, expected_total):
    alice = register(client, "Alice")
    post = create_post(client, alice, visibility="public")

    for reaction in sequence:
        r = client.post(f"/api/posts/{post['id']}/react", json={"type": reaction}, headers=alice["headers"])
        assert r.status_code == 200
        data = r.json()["data"]
        assert data["totalReactions"] == sum(len(ids) for ids in data["reactions"].values())
    assert data["totalReactions"] == expected_total


def test_reactions_from_several_users(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    post = create_post(client, alice, visibility="public")

    client.post(f"/api/posts/{post['id']}/react", json={"type": "love"}, headers=alice["headers"])
    data = client.post(f"/api/posts/{post['id']}/react", json={"type": "like"}, headers=bob["headers"]).json()["data"]
    assert data["reactions"]["like"] == [bob["id"]]
    assert data["reactions"]["love"] == [alice["id"]]
    assert data["userReaction"] == "like"
    assert data["totalReactions"] == 2

    detailed = client.get(f"/api/posts/{post['id']}/reactions", headers=alice["headers"]).json()["data"]
    assert detailed["reactions"]["like"][0]["name"] == "Bob"

    fetched = client.get(f"/api/posts/{post['id']}", headers=alice["headers"]).json()["data"]
    assert fetched["userReaction"] == "love"

    # Bob's reaction notified the author
    notifications = client.get("/api/notifications", headers=alice["headers"]).json()["data"]
    assert [n["type"] for n in notifications] == ["like"]


def test_share_is_flattened_to_original(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    carol = register(client, "Carol")
    original = create_post(client, alice, content="original", visibility="public")

    r = client.post(f"/api/posts/{original['id']}/share", json={"content": "look", "visibility": "public"}, headers=bob["headers"])
    assert r.status_code == 201
    share = r.json()["data"]
    assert share["type"] == "shared"
    assert share["sharedPost"]["id"] == original["id"]

    reshare = client.post(f"/api/posts/{share['id']}/share", headers=carol["headers"]).json()["data"]
    assert reshare["sharedPost"]["id"] == original["id"]

    fetched = client.get(f"/api/posts/{original['id']}", headers=alice["headers"]).json()["data"]
    assert fetched["sharesCount"] == 2

    client.delete(f"/api/posts/{reshare['id']}", headers=carol["headers"])
    fetched = client.get(f"/api/posts/{original['id']}", headers=alice["headers"]).json()["data"]
    assert fetched["sharesCount"] == 1


def test_update_and_delete_post(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    post = create_post(client, alice, visibility="public")

    assert client.patch(f"/api/posts/{post['id']}", json={"content": "x"}, headers=bob["headers"]).status_code == 403
    r = client.patch(f"/api/posts/{post['id']}", json={"content": "edited"}, headers=alice["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["content"] == "edited"
    assert r.json()["data"]["isEdited"] is True

    assert client.delete(f"/api/posts/{post['id']}", headers=bob["headers"]).status_code == 403
    assert client.delete(f"/api/posts/{post['id']}", headers=alice["headers"]).status_code == 200
    assert client.get(f"/api/posts/{post['id']}", headers=alice["headers"]).status_code == 404


def test_user_posts_respect_visibility(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    create_post(client, alice, content="public", visibility="public")
    create_post(client, alice, content="friends", visibility="friends")

    assert client.get(f"/api/posts/user/{alice['id']}", headers=bob["headers"]).json()["pagination"]["total"] == 1
    befriend(client, alice, bob)
    assert client.get(f"/api/posts/user/{alice['id']}", headers=bob["headers"]).json()["pagination"]["total"] == 2
    assert client.get(f"/api/posts/user/{alice['id']}", headers=alice["headers"]).json()["pagination"]["total"] == 2


def test_share_cannot_widen_original_audience(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    carol = register(client, "Carol")
    befriend(client, alice, bob)
    befriend(client, bob, carol)
    original = create_post(client, alice, content="for friends", visibility="friends")

    r = client.post(f"/api/posts/{original['id']}/share", json={"visibility": "public"}, headers=bob["headers"])
    assert r.status_code == 400

    # Without an explicit audience the share falls back to the original's
    client.patch("/api/users/me", json={"privacy": {"postVisibility": "public"}}, headers=bob["headers"])
    share = client.post(f"/api/posts/{original['id']}/share", headers=bob["headers"]).json()["data"]
    assert share["visibility"] == "friends"
    r = client.patch(f"/api/posts/{share['id']}", json={"visibility": "public"}, headers=bob["headers"])
    assert r.status_code == 400

    # Carol is Bob's friend but not Alice's: she sees the share, not the original
    seen = client.get(f"/api/posts/{share['id']}", headers=carol["headers"]).json()["data"]
    assert seen["sharedPost"] is None
    assert seen["sharedPostUnavailable"] is True
    feed = client.get("/api/posts", headers=carol["headers"]).json()["data"]
    assert [p["sharedPost"] for p in feed if p["id"] == share["id"]] == [None]
    assert "for friends" not in str(feed)

    seen = client.get(f"/api/posts/{share['id']}", headers=bob["headers"]).json()["data"]
    assert seen["sharedPost"]["content"] == "for friends"
    assert seen["sharedPostUnavailable"] is False


def test_share_hides_original_from_blocked_viewer(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    carol = register(client, "Carol")
    original = create_post(client, alice, content="alice only", visibility="public")
    share = client.post(
        f"/api/posts/{original['id']}/share", json={"visibility": "public"}, headers=bob["headers"]
    ).json()["data"]

    client.post(f"/api/users/block/{carol['id']}", headers=alice["headers"])

    seen = client.get(f"/api/posts/{share['id']}", headers=carol["headers"]).json()["data"]
    assert seen["author"]["id"] == bob["id"]
    assert seen["sharedPost"] is None
    assert seen["sharedPostUnavailable"] is True
    assert client.get(f"/api/posts/{original['id']}", headers=carol["headers"]).status_code == 403
    assert client.post(f"/api/posts/{share['id']}/share", headers=carol["headers"]).status_code == 403


def test_saved_posts(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    public = create_post(client, alice, content="keep this", visibility="public")
    other = create_post(client, alice, content="and this", visibility="public")
    hidden = create_post(client, alice, content="secret", visibility="private")

    r = client.post(f"/api/posts/{public['id']}/save", headers=bob["headers"])
    assert r.status_code == 201
    assert r.json()["data"]["isSaved"] is True
    assert client.post(f"/api/posts/{public['id']}/save", headers=bob["headers"]).status_code == 409
    assert client.post(f"/api/posts/{hidden['id']}/save", headers=bob["headers"]).status_code == 403
    assert client.post("/api/posts/missing/save", headers=bob["headers"]).status_code == 404
    client.post(f"/api/posts/{other['id']}/save", headers=bob["headers"])

    saved = client.get("/api/posts/saved", headers=bob["headers"]).json()
    assert saved["pagination"]["total"] == 2
    assert {p["id"] for p in saved["data"]} == {public["id"], other["id"]}
    assert all(p["savedAt"] and p["isSaved"] for p in saved["data"])
    assert client.get("/api/posts/saved", headers=alice["headers"]).json()["data"] == []

    fetched = client.get(f"/api/posts/{public['id']}", headers=bob["headers"]).json()["data"]
    assert fetched["isSaved"] is True
    assert fetched["savedAt"] is None

    # Once the author narrows the audience the saved post is withheld
    client.patch(f"/api/posts/{other['id']}", json={"visibility": "private"}, headers=alice["headers"])
    saved = client.get("/api/posts/saved", headers=bob["headers"]).json()["data"]
    assert [p["id"] for p in saved] == [public["id"]]

    assert client.delete(f"/api/posts/{public['id']}/save", headers=bob["headers"]).status_code == 200
    assert client.delete(f"/api/posts/{public['id']}/save", headers=bob["headers"]).status_code == 404
    fetched = client.get(f"/api/posts/{public['id']}", headers=bob["headers"]).json()["data"]
    assert fetched["isSaved"] is False

    # Deleting a saved post drops it from every saved list
    client.post(f"/api/posts/{public['id']}/save", headers=bob["headers"])
    client.delete(f"/api/posts/{public['id']}", headers=alice["headers"])
    assert client.get("/api/posts/saved", headers=bob["headers"]).json()["data"] == []
