def _add(client, product_id="1", size_id="medium", material_id="metal", quantity=1):
    return client.post("/api/v1/cart/items", json={
        "productId": product_id, "sizeId": size_id, "materialId": material_id, "quantity": quantity,
    })


def test_empty_cart(client):
    data = client.get("/api/v1/cart").json()
    assert data["items"] == []
    assert data["itemCount"] == 0
    assert data["total"] == 0
    assert data["currency"] == "USD"


def test_add_item_prices_from_catalog(client):
    resp = _add(client, quantity=2)
    assert resp.status_code == 200
    data = resp.json()
    assert data["result"] == "added"
    item = data["items"][0]
    assert item["unitPrice"] == 160
    assert item["productName"] == "Abstract Sunset"
    assert item["sizeDimensions"] == "40x60"
    assert item["materialName"] == "Metal Print"
    assert data["subtotal"] == 320
    assert data["total"] == 330


def test_cart_survives_between_requests(client):
    _add(client)
    assert _add(client).json()["result"] == "merged"
    assert client.get("/api/v1/cart").json()["itemCount"] == 2


def test_add_unknown_product_or_option(client):
    assert _add(client, product_id="999").status_code == 404
    assert _add(client, size_id="xl").status_code == 400


def test_cart_limit_is_409(client):
    _add(client, product_id="1", quantity=10)
    _add(client, product_id="2", quantity=10)
    resp = _add(client, product_id="3", quantity=1)
    assert resp.status_code == 409
    assert resp.json()["error"] == "Cart limit reached"
    assert client.get("/api/v1/cart").json()["itemCount"] == 20


def test_update_remove_and_clear(client):
    item_id = _add(client, quantity=3).json()["items"][0]["id"]
    assert client.patch(f"/api/v1/cart/items/{item_id}", json={"quantity": 5}).json()["itemCount"] == 5
    assert client.patch(f"/api/v1/cart/items/{item_id}", json={"quantity": 0}).json()["items"] == []

    _add(client)
    item_id = client.get("/api/v1/cart").json()["items"][0]["id"]
    assert client.delete(f"/api/v1/cart/items/{item_id}").json()["items"] == []
    # suppression idempotente
    assert client.delete(f"/api/v1/cart/items/{item_id}").status_code == 200

    _add(client)
    assert client.delete("/api/v1/cart").json()["itemCount"] == 0


def test_display_currency(client):
    _add(client)
    resp = client.put("/api/v1/cart/currency", json={"currency": "ils"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["currency"] == "ILS"
    assert data["display"]["subtotal"] == "₪592"
    # les montants de référence restent en USD
    assert data["subtotal"] == 160
    assert client.put("/api/v1/cart/currency", json={"currency": "EUR"}).status_code == 400


def test_patch_quantity_is_held_to_the_total_cap(client):
    ids = [_add(client, product_id=pid).json()["items"][-1]["id"] for pid in ("1", "2", "3")]
    for item_id in ids:
        resp = client.patch(f"/api/v1/cart/items/{item_id}", json={"quantity": 10})
        assert resp.status_code == 200
    data = client.get("/api/v1/cart").json()
    assert data["itemCount"] == 20
    assert sorted(i["quantity"] for i in data["items"]) == [1, 9, 10]
