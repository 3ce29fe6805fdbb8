from conftest import register


def create_listing(client, user, **payload):
    payload.setdefault("title", "Road bike")
    payload.setdefault("price", 250)
    r = client.post("/api/trading/listings", json=payload, headers=user["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_create_and_view_listing(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    listing = create_listing(client, alice, category="sports", condition="like_new")
    assert listing["status"] == "active"
    assert listing["seller"]["id"] == alice["id"]
    assert listing["views"] == 0

    assert client.get(f"/api/trading/listings/{listing['id']}", headers=alice["headers"]).json()["data"]["views"] == 0
    assert client.get(f"/api/trading/listings/{listing['id']}", headers=bob["headers"]).json()["data"]["views"] == 1

    r = client.post("/api/trading/listings", json={"title": "Free?", "price": -5}, headers=alice["headers"])
    assert r.status_code == 422


def test_filters_sort_and_categories(client):
    alice = register(client, "Alice")
    create_listing(client, alice, title="Laptop", price=900, category="electronics")
    create_listing(client, alice, title="Novel", price=10, category="books")
    sold = create_listing(client, alice, title="Phone", price=300, category="electronics")
    client.patch(f"/api/trading/listings/{sold['id']}", json={"status": "sold"}, headers=alice["headers"])

    listed = client.get("/api/trading/listings?sort=price-low", headers=alice["headers"]).json()
    assert [item["title"] for item in listed["data"]] == ["Novel", "Laptop"]
    assert listed["pagination"]["total"] == 2

    cheap = client.get("/api/trading/listings?maxPrice=100", headers=alice["headers"]).json()["data"]
    assert [item["title"] for item in cheap] == ["Novel"]
    electronics = client.get("/api/trading/listings?category=electronics&minPrice=500", headers=alice["headers"]).json()["data"]
    assert [item["title"] for item in electronics] == ["Laptop"]
    sold_items = client.get("/api/trading/listings?status=sold", headers=alice["headers"]).json()["data"]
    assert [item["title"] for item in sold_items] == ["Phone"]

    mine = client.get("/api/trading/listings/my", headers=alice["headers"]).json()["data"]
    assert len(mine) == 3

    categories = {c["key"]: c for c in client.get("/api/trading/categories", headers=alice["headers"]).json()["data"]}
    assert categories["electronics"]["count"] == 1
    assert categories["books"]["count"] == 1
    assert categories["home_garden"]["label"] == "Home & Garden"
    assert categories["fashion"]["count"] == 0


def test_only_seller_can_manage(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    listing = create_listing(client, alice)

    assert client.patch(f"/api/trading/listings/{listing['id']}", json={"price": 1}, headers=bob["headers"]).status_code == 403
    r = client.patch(f"/api/trading/listings/{listing['id']}", json={"price": 200}, headers=alice["headers"])
    assert r.json()["data"]["price"] == 200
    assert client.delete(f"/api/trading/listings/{listing['id']}", headers=bob["headers"]).status_code == 403
    assert client.delete(f"/api/trading/listings/{listing['id']}", headers=alice["headers"]).status_code == 200
    assert client.get(f"/api/trading/listings/{listing['id']}", headers=alice["headers"]).status_code == 404


def test_contact_seller_sends_direct_message(client):
    alice = register(client, "Alice")
    bob = register(client, "Bob")
    listing = create_listing(client, alice)

    r = client.post(
        f"/api/trading/listings/{listing['id']}/contact",
        json={"message": "Is it still available?"},
        headers=bob["headers"],
    )
    assert r.status_code == 200
    assert r.json()["data"]["content"] == "[Road bike] Is it still available?"

    history = client.get(f"/api/messages/{bob['id']}", headers=alice["headers"]).json()["data"]
    assert history[-1]["content"] == "[Road bike] Is it still available?"

    own = client.post(f"/api/trading/listings/{listing['id']}/contact", json={"message": "hi"}, headers=alice["headers"])
    assert own.status_code == 400
    client.patch(f"/api/trading/listings/{listing['id']}", json={"status": "sold"}, headers=alice["headers"])
    sold = client.post(f"/api/trading/listings/{listing['id']}/contact", json={"message": "hi"}, headers=bob["headers"])
    assert sold.status_code == 400
