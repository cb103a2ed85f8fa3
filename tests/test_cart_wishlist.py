"""Tests for shopping carts and wishlists."""

from conftest import data


class TestCart:
    def test_empty_cart_is_created(self, client, user):
        cart = data(client.get(f"/api/cart/user/{user['id']}"))
        assert cart["userId"] == user["id"]
        assert cart["items"] == []
        assert cart["totalValue"] == 0.0

    def test_unknown_user(self, client):
        response = client.get("/api/cart/user/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404

    def test_add_merges_lines(self, client, user, make_product):
        product = make_product(price=2.50, stock=10)
        url = f"/api/cart/user/{user['id']}/items"
        client.post(url, json={"productId": product["id"], "quantity": 2})
        cart = data(client.post(url, json={"productId": product["id"], "quantity": 3}))

        assert len(cart["items"]) == 1
        assert cart["items"][0]["quantity"] == 5
        assert cart["items"][0]["subtotal"] == 12.5
        assert cart["totalItems"] == 5
        assert cart["totalValue"] == 12.5
        assert data(client.get(f"/api/cart/user/{user['id']}/count")) == 5

    def test_cannot_exceed_stock(self, client, user, make_product):
        product = make_product(stock=2)
        url = f"/api/cart/user/{user['id']}/items"
        client.post(url, json={"productId": product["id"], "quantity": 2})

        response = client.post(url, json={"productId": product["id"], "quantity": 1})
        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["message"]

    def test_inactive_product(self, client, user, product):
        client.patch(f"/api/products/{product['id']}/deactivate")
        response = client.post(f"/api/cart/user/{user['id']}/items", json={"productId": product["id"], "quantity": 1})
        assert response.status_code == 400

    def test_update_remove_clear(self, client, user, make_product):
        first = make_product(stock=10)
        second = make_product(stock=10)
        url = f"/api/cart/user/{user['id']}/items"
        client.post(url, json={"productId": first["id"], "quantity": 1})
        cart = data(client.post(url, json={"productId": second["id"], "quantity": 1}))
        item = next(i for i in cart["items"] if i["productId"] == first["id"])

        cart = data(client.put(f"{url}/{item['id']}", json={"quantity": 4}))
        assert next(i for i in cart["items"] if i["id"] == item["id"])["quantity"] == 4

        cart = data(client.delete(f"{url}/{item['id']}"))
        assert [i["productId"] for i in cart["items"]] == [second["id"]]

        cart = data(client.delete(f"/api/cart/user/{user['id']}"))
        assert cart["items"] == []

    def test_item_of_another_cart(self, client, make_user, product):
        owner = make_user()
        other = make_user()
        cart = data(client.post(f"/api/cart/user/{owner['id']}/items", json={"productId": product["id"], "quantity": 1}))

        response = client.delete(f"/api/cart/user/{other['id']}/items/{cart['items'][0]['id']}")
        assert response.status_code == 404


class TestWishlist:
    def test_add_and_list(self, client, user, product):
        item = data(client.post("/api/wishlist", json={"userId": user["id"], "productId": product["id"]}))
        assert item["productName"] == product["name"]
        assert item["inStock"] is True

        assert data(client.get(f"/api/wishlist/user/{user['id']}"))["totalElements"] == 1
        assert data(client.get(f"/api/wishlist/user/{user['id']}/product/{product['id']}")) is True
        assert data(client.get(f"/api/wishlist/user/{user['id']}/count")) == 1

    def test_duplicate(self, client, user, product):
        payload = {"userId": user["id"], "productId": product["id"]}
        data(client.post("/api/wishlist", json=payload))
        assert client.post("/api/wishlist", json=payload).status_code == 409

    def test_move_to_cart(self, client, user, product):
        item = data(client.post("/api/wishlist", json={"userId": user["id"], "productId": product["id"]}))

        cart = data(client.post(f"/api/wishlist/{item['id']}/move-to-cart"))
        assert [(i["productId"], i["quantity"]) for i in cart["items"]] == [(product["id"], 1)]
        assert data(client.get(f"/api/wishlist/user/{user['id']}/count")) == 0

    def test_remove_and_clear(self, client, user, make_product):
        first = make_product()
        second = make_product()
        item = data(client.post("/api/wishlist", json={"userId": user["id"], "productId": first["id"]}))
        data(client.post("/api/wishlist", json={"userId": user["id"], "productId": second["id"]}))

        client.delete(f"/api/wishlist/{item['id']}")
        assert data(client.get(f"/api/wishlist/user/{user['id']}/product/{first['id']}")) is False

        assert data(client.delete(f"/api/wishlist/user/{user['id']}")) == 1
        assert data(client.get(f"/api/wishlist/user/{user['id']}/count")) == 0
