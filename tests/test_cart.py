import asyncio


def _add(client, headers, product_id, quantity=None):
    body = {"productId": product_id}
    if quantity is not None:
        body["quantity"] = quantity
    return client.post("/cart/add", json=body, headers=headers)


def _update(client, headers, product_id, quantity):
    return client.put("/cart/update", json={"productId": product_id, "quantity": quantity}, headers=headers)


def _remove(client, headers, product_id):
    return client.request("DELETE", "/cart/remove", json={"productId": product_id}, headers=headers)


def test_cart_requires_authentication(client):
    assert client.get("/cart").status_code == 401
    assert client.post("/cart/add", json={"productId": "x"}).status_code == 401


def test_empty_cart_view(client, user_headers):
    resp = client.get("/cart", headers=user_headers)

    assert resp.status_code == 200
    assert resp.json() == {"cart": [], "totalItems": 0, "totalPrice": 0}


def test_add_defaults_to_one_and_resolves_product_fields(client, user_headers, make_product):
    product = make_product(name="Mouse", price=25, category="Electronics", stock=4, image="mouse.png")

    resp = _add(client, user_headers, product["_id"])

    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Item added to cart successfully"
    assert data["cart"] == [
        {
            "product": {
                "id": product["_id"],
                "name": "Mouse",
                "price": 25,
                "image": "mouse.png",
                "category": "Electronics",
                "stock": 4,
            },
            "quantity": 1,
        }
    ]
    assert data["totalItems"] == 1
    assert data["totalPrice"] == 25


def test_add_sums_with_existing_and_checks_combined_stock(client, user_headers, make_product):
    """stock 5: add 3 ok, add 3 rejected, add 2 reaches exactly 5."""
    product = make_product(stock=5)

    first = _add(client, user_headers, product["_id"], 3)
    assert first.status_code == 200
    assert first.json()["cart"][0]["quantity"] == 3

    second = _add(client, user_headers, product["_id"], 3)
    assert second.status_code == 400
    assert second.json()["message"] == "Insufficient stock for requested quantity"

    third = _add(client, user_headers, product["_id"], 2)
    assert third.status_code == 200
    cart = third.json()["cart"]
    assert len(cart) == 1
    assert cart[0]["quantity"] == 5


def test_add_more_than_stock_is_rejected(client, user_headers, make_product):
    product = make_product(stock=2)

    resp = _add(client, user_headers, product["_id"], 3)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Insufficient stock"
    assert client.get("/cart", headers=user_headers).json()["cart"] == []


def test_add_unknown_product_is_404(client, user_headers):
    resp = _add(client, user_headers, "no-such-product")

    assert resp.status_code == 404
    assert resp.json()["message"] == "Product not found"


def test_add_zero_quantity_is_bad_request(client, user_headers, make_product):
    product = make_product()

    assert _add(client, user_headers, product["_id"], 0).status_code == 400


def test_missing_product_id_is_bad_request(client, user_headers):
    resp = client.post("/cart/add", json={"quantity": 1}, headers=user_headers)

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "productId"


def test_totals_follow_sum_of_quantities_and_prices(client, user_headers, make_product):
    a = make_product(price=2.5, stock=10)
    b = make_product(price=10, stock=10)

    _add(client, user_headers, a["_id"], 4)
    data = _add(client, user_headers, b["_id"], 3).json()

    assert data["totalItems"] == 7
    assert data["totalPrice"] == 40
    assert [line["product"]["id"] for line in data["cart"]] == [a["_id"], b["_id"]]


def test_total_price_uses_current_price(client, user_headers, admin_headers, make_product):
    product = make_product(price=10, stock=10)
    _add(client, user_headers, product["_id"], 2)

    client.put(f"/products/{product['_id']}", json={"price": 15}, headers=admin_headers)

    assert client.get("/cart", headers=user_headers).json()["totalPrice"] == 30


def test_deleted_product_drops_out_of_view(client, user_headers, admin_headers, make_product):
    kept = make_product(price=3)
    gone = make_product(price=100)
    _add(client, user_headers, kept["_id"])
    _add(client, user_headers, gone["_id"])

    client.delete(f"/products/{gone['_id']}", headers=admin_headers)

    data = client.get("/cart", headers=user_headers).json()
    assert [line["product"]["id"] for line in data["cart"]] == [kept["_id"]]
    assert data["totalPrice"] == 3


def test_update_sets_quantity_exactly(client, user_headers, make_product):
    product = make_product(stock=10)
    _add(client, user_headers, product["_id"], 4)

    resp = _update(client, user_headers, product["_id"], 2)

    assert resp.status_code == 200
    assert resp.json()["cart"][0]["quantity"] == 2
    assert resp.json()["totalItems"] == 2


def test_update_to_zero_removes_item(client, user_headers, make_product):
    product = make_product()
    _add(client, user_headers, product["_id"], 2)

    resp = _update(client, user_headers, product["_id"], 0)

    assert resp.status_code == 200
    assert resp.json()["cart"] == []
    assert client.get("/cart", headers=user_headers).json()["totalItems"] == 0


def test_update_negative_quantity_is_bad_request(client, user_headers, make_product):
    product = make_product()

    resp = _update(client, user_headers, product["_id"], -1)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Quantity cannot be negative"


def test_update_negative_quantity_is_bad_request_for_unknown_product(client, user_headers):
    assert _update(client, user_headers, "anything", -1).status_code == 400


def test_update_above_stock_is_rejected(client, user_headers, make_product):
    product = make_product(stock=3)
    _add(client, user_headers, product["_id"], 1)

    resp = _update(client, user_headers, product["_id"], 4)

    assert resp.status_code == 400
    assert client.get("/cart", headers=user_headers).json()["cart"][0]["quantity"] == 1


def test_update_item_not_in_cart_is_404(client, user_headers, make_product):
    product = make_product()

    resp = _update(client, user_headers, product["_id"], 1)

    assert resp.status_code == 404
    assert resp.json()["message"] == "Item not found in cart"


def test_remove_item(client, user_headers, make_product):
    a = make_product()
    b = make_product()
    _add(client, user_headers, a["_id"])
    _add(client, user_headers, b["_id"])

    resp = _remove(client, user_headers, a["_id"])

    assert resp.status_code == 200
    assert [line["product"]["id"] for line in resp.json()["cart"]] == [b["_id"]]


def test_remove_never_added_is_404_and_cart_unchanged(client, user_headers, make_product):
    kept = make_product()
    other = make_product()
    _add(client, user_headers, kept["_id"], 2)
    before = client.get("/cart", headers=user_headers).json()

    resp = _remove(client, user_headers, other["_id"])

    assert resp.status_code == 404
    assert client.get("/cart", headers=user_headers).json() == before


def test_clear_empties_cart_and_is_idempotent(client, user_headers, make_product):
    product = make_product(price=9)
    _add(client, user_headers, product["_id"], 3)

    for _ in range(2):
        resp = client.delete("/cart/clear", headers=user_headers)
        assert resp.status_code == 200
        assert resp.json()["cart"] == []
        assert resp.json()["totalItems"] == 0
        assert resp.json()["totalPrice"] == 0

    assert client.get("/cart", headers=user_headers).json()["totalItems"] == 0


def test_carts_are_per_user(client, make_user, make_product):
    _, alice = make_user(email="alice@mail.com")
    _, bob = make_user(email="bob@mail.com")
    product = make_product()

    _add(client, alice, product["_id"], 2)

    assert client.get("/cart", headers=bob).json()["cart"] == []


def test_cart_is_stored_in_its_own_collection(client, database, make_user, make_product):
    user, headers = make_user()
    product = make_product()

    _add(client, headers, product["_id"], 2)

    stored = asyncio.run(database.carts.find_one({"_id": user["_id"]}))
    assert stored["items"] == [{"product_id": product["_id"], "quantity": 2}]
    assert stored["version"] == 1
    assert "cart" not in asyncio.run(database.users.find_one({"_id": user["_id"]}))
