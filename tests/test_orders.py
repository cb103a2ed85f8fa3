"""Tests for order placement, lifecycle and editing over REST."""

import pytest

from conftest import data
from storefront.config import settings
from storefront.services import order_service


def stock_of(client, product):
    return data(client.get(f"/api/products/{product['id']}"))["stockQuantity"]


class TestCreateOrder:
    def test_totals_and_stock(self, client, make_product, place_order):
        product = make_product(price=10.00, stock=5)

        response = place_order((product, 2))
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Order created successfully"
        assert body["statusCode"] == 201
        assert "errors" not in body

        order = body["data"]
        assert order["subtotal"] == 20.0
        assert order["shippingCost"] == 0.0
        assert order["total"] == 20.0
        assert order["status"] == "pending"
        assert order["paymentStatus"] == "pending"
        assert order["itemCount"] == 2
        assert order["customerName"].startswith("Ada ")
        assert order["orderNumber"].startswith("ORD-")
        assert order["items"][0]["unitPrice"] == 10.0
        assert order["items"][0]["totalPrice"] == 20.0
        assert stock_of(client, product) == 3

    def test_subtotal_sums_lines(self, make_product, place_order):
        first = make_product(price=10.00, stock=5)
        second = make_product(price=2.50, stock=10)

        order = data(place_order((first, 1), (second, 4)))
        assert order["subtotal"] == 20.0
        assert order["total"] == order["subtotal"] + order["shippingCost"]
        assert len(order["items"]) == 2

    def test_insufficient_stock_leaves_stock_untouched(self, client, make_product, place_order):
        plenty = make_product(stock=10)
        scarce = make_product(stock=1)

        response = place_order((plenty, 3), (scarce, 2))
        assert response.status_code == 400
        body = response.json()
        assert body["status"] is False
        assert "Insufficient stock" in body["message"]
        assert body["path"] == "/api/orders"
        assert body["errors"][0]["field"] == "quantity"

        assert stock_of(client, plenty) == 10
        assert stock_of(client, scarce) == 1
        assert data(client.get("/api/orders/count")) == 0

    def test_repeated_product_lines_cannot_overdraw_stock(self, client, make_product, place_order):
        product = make_product(stock=5)

        # Each line alone fits the stock, together they do not
        response = place_order((product, 3), (product, 3))
        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["message"]
        assert stock_of(client, product) == 5
        assert data(client.get("/api/orders/count")) == 0

    def test_unknown_user(self, product, place_order):
        response = place_order((product, 1), user_id="00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert response.json()["message"].startswith("User not found with id")

    def test_unknown_shipping_method(self, product, place_order):
        response = place_order((product, 1), shippingMethodId="00000000-0000-0000-0000-000000000001")
        assert response.status_code == 404

    def test_empty_items_rejected(self, client, user):
        response = client.post("/api/orders", json={"userId": user["id"], "items": []})
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"][0]["field"] == "items"

    def test_shipping_references_are_returned(self, client, user, product, place_order):
        address = data(client.post("/api/addresses", json={
            "userId": user["id"], "addressLine": "1 Main St", "city": "Accra", "country": "Ghana",
        }))
        method = data(client.post("/api/shipping-methods", json={
            "name": "Express", "price": 15.00, "estimatedDays": 2,
        }))

        order = data(place_order(
            (product, 1), shippingAddressId=address["id"], shippingMethodId=method["id"],
            customerNotes="Leave at the door",
        ))
        assert order["shippingAddress"]["fullAddress"] == "1 Main St, Accra, Ghana"
        assert order["shippingMethod"]["estimatedDelivery"] == "2 days"
        assert order["customerNotes"] == "Leave at the door"
        assert order["shippingCost"] == 0.0


class TestOrderNumbers:
    def test_taken_number_is_regenerated(self, client, monkeypatch, make_product, place_order):
        product = make_product(stock=5)
        first = data(place_order((product, 1)))
        numbers = iter([first["orderNumber"], "ORD-20240101-000042"])
        monkeypatch.setattr(order_service, "generate_order_number", lambda: next(numbers))

        second = data(place_order((product, 1)))
        assert second["orderNumber"] == "ORD-20240101-000042"

    def test_gives_up_after_max_attempts(self, client, monkeypatch, make_product, place_order):
        product = make_product(stock=5)
        taken = data(place_order((product, 1)))["orderNumber"]
        calls = []

        def same_number():
            calls.append(taken)
            return taken

        monkeypatch.setattr(order_service, "generate_order_number", same_number)

        response = place_order((product, 1))
        assert response.status_code == 500
        body = response.json()
        assert body["status"] is False
        assert body["message"] == "Could not generate a unique order number"
        assert len(calls) == settings.order_number_max_attempts
        assert stock_of(client, product) == 4
        assert data(client.get("/api/orders/count")) == 1


class TestLookup:
    def test_by_id_and_number(self, client, product, place_order):
        order = data(place_order((product, 1)))

        assert data(client.get(f"/api/orders/{order['id']}"))["orderNumber"] == order["orderNumber"]
        assert data(client.get(f"/api/orders/number/{order['orderNumber']}"))["id"] == order["id"]

    def test_missing_order(self, client):
        response = client.get("/api/orders/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404
        assert response.json()["message"] == (
            "Order not found with id: '00000000-0000-0000-0000-000000000000'"
        )

    def test_lists_and_counts(self, client, user, make_product, place_order):
        product = make_product(stock=50)
        for _ in range(3):
            place_order((product, 1))

        page = data(client.get("/api/orders", params={"page": 0, "size": 2}))
        assert page["totalElements"] == 3
        assert page["totalPages"] == 2
        assert page["hasNext"] is True
        assert len(page["content"]) == 2

        assert data(client.get(f"/api/orders/user/{user['id']}"))["totalElements"] == 3
        assert data(client.get("/api/orders/status/PENDING"))["totalElements"] == 3
        assert data(client.get("/api/orders/count/status/pending")) == 3
        assert data(client.get("/api/orders/count")) == 3

    def test_unknown_status(self, client):
        response = client.get("/api/orders/status/lost")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid order status: 'lost'"


class TestStatusTransitions:
    def test_full_lifecycle(self, client, product, place_order):
        order = data(place_order((product, 1)))
        for status in ("confirmed", "processing", "shipped", "delivered"):
            response = client.patch(f"/api/orders/{order['id']}/status", params={"status": status})
            assert data(response)["status"] == status

    def test_skipping_is_rejected(self, client, product, place_order):
        order = data(place_order((product, 1)))

        response = client.patch(f"/api/orders/{order['id']}/status", params={"status": "delivered"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid status transition from 'pending' to 'delivered'"
        assert data(client.get(f"/api/orders/{order['id']}"))["status"] == "pending"

    def test_same_status_is_noop(self, client, product, place_order):
        order = data(place_order((product, 1)))

        updated = data(client.patch(f"/api/orders/{order['id']}/status", params={"status": "pending"}))
        assert updated["status"] == "pending"
        assert updated["orderNumber"] == order["orderNumber"]

    def test_cancel_through_status_restores_stock(self, client, make_product, place_order):
        product = make_product(stock=5)
        order = data(place_order((product, 2)))

        updated = data(client.patch(f"/api/orders/{order['id']}/status", params={"status": "cancelled"}))
        assert updated["status"] == "cancelled"
        assert updated["cancelledAt"] is not None
        assert stock_of(client, product) == 5


class TestPaymentStatus:
    def test_paid_confirms_pending_order(self, client, product, place_order):
        order = data(place_order((product, 1)))

        response = client.patch(f"/api/orders/{order['id']}/payment-status", params={"paymentStatus": "paid"})
        body = response.json()
        assert body["data"]["paymentStatus"] == "paid"
        assert body["data"]["status"] == "confirmed"
        assert "also confirms the order" in body["message"]

    def test_paid_leaves_later_status(self, client, product, place_order):
        order = data(place_order((product, 1)))
        client.patch(f"/api/orders/{order['id']}/status", params={"status": "confirmed"})
        client.patch(f"/api/orders/{order['id']}/status", params={"status": "processing"})

        updated = data(client.patch(f"/api/orders/{order['id']}/payment-status", params={"paymentStatus": "paid"}))
        assert updated["status"] == "processing"

    def test_invalid_payment_status(self, client, product, place_order):
        order = data(place_order((product, 1)))
        response = client.patch(f"/api/orders/{order['id']}/payment-status", params={"paymentStatus": "maybe"})
        assert response.status_code == 400

    def test_operation_description_mentions_coupling(self, client):
        openapi = client.get("/openapi.json").json()
        operation = openapi["paths"]["/api/orders/{order_id}/payment-status"]["patch"]
        assert "also confirms the order" in operation["description"]


class TestCancel:
    def test_cancel_restores_stock(self, client, make_product, place_order):
        product = make_product(price=10.00, stock=5)
        order = data(place_order((product, 2)))
        assert stock_of(client, product) == 3

        response = client.post(f"/api/orders/{order['id']}/cancel")
        assert response.json()["message"] == "Order cancelled successfully"
        assert response.json()["data"]["status"] == "cancelled"
        assert stock_of(client, product) == 5

    @pytest.mark.parametrize("path", [
        ["confirmed", "processing", "shipped"],
        ["confirmed", "processing", "shipped", "delivered"],
    ])
    def test_cannot_cancel_after_shipping(self, client, make_product, place_order, path):
        product = make_product(stock=5)
        order = data(place_order((product, 1)))
        for status in path:
            client.patch(f"/api/orders/{order['id']}/status", params={"status": status})

        response = client.post(f"/api/orders/{order['id']}/cancel")
        assert response.status_code == 400
        assert response.json()["message"] == f"Order cannot be cancelled. Current status: {path[-1]}"
        assert stock_of(client, product) == 4

    def test_cannot_cancel_twice(self, client, make_product, place_order):
        product = make_product(stock=5)
        order = data(place_order((product, 2)))
        client.post(f"/api/orders/{order['id']}/cancel")

        response = client.post(f"/api/orders/{order['id']}/cancel")
        assert response.status_code == 400
        assert stock_of(client, product) == 5


class TestUpdateOrder:
    def test_notes_only(self, client, make_product, place_order):
        product = make_product(stock=5)
        order = data(place_order((product, 2)))

        updated = data(client.put(f"/api/orders/{order['id']}", json={"customerNotes": "Ring twice"}))
        assert updated["customerNotes"] == "Ring twice"
        assert [(i["productId"], i["quantity"]) for i in updated["items"]] == [
            (i["productId"], i["quantity"]) for i in order["items"]
        ]
        assert updated["total"] == order["total"]
        assert stock_of(client, product) == 3

    def test_change_quantity_moves_stock(self, client, make_product, place_order):
        product = make_product(price=10.00, stock=5)
        order = data(place_order((product, 2)))
        item = order["items"][0]

        updated = data(client.put(f"/api/orders/{order['id']}", json={
            "items": [{"id": item["id"], "quantity": 4}],
        }))
        assert updated["subtotal"] == 40.0
        assert stock_of(client, product) == 1

    def test_remove_and_add_lines(self, client, make_product, place_order):
        first = make_product(price=10.00, stock=5)
        second = make_product(price=3.00, stock=5)
        third = make_product(price=1.00, stock=5)
        order = data(place_order((first, 1), (second, 1)))
        first_line = next(i for i in order["items"] if i["productId"] == first["id"])

        updated = data(client.put(f"/api/orders/{order['id']}", json={
            "items": [
                {"id": first_line["id"], "quantity": 0},
                {"productId": third["id"], "quantity": 2},
            ],
        }))
        assert sorted(i["productId"] for i in updated["items"]) == sorted([second["id"], third["id"]])
        assert updated["subtotal"] == 5.0
        assert stock_of(client, first) == 5
        assert stock_of(client, third) == 3

    def test_raising_quantity_past_stock_changes_nothing(self, client, make_product, place_order):
        product = make_product(stock=5)
        order = data(place_order((product, 2)))
        item = order["items"][0]

        response = client.put(f"/api/orders/{order['id']}", json={
            "customerNotes": "Leave at the door",
            "items": [{"id": item["id"], "quantity": 9}],
        })
        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["message"]

        current = data(client.get(f"/api/orders/{order['id']}"))
        assert [(i["productId"], i["quantity"]) for i in current["items"]] == [(product["id"], 2)]
        assert current["customerNotes"] == order["customerNotes"]
        assert stock_of(client, product) == 3

    def test_removing_every_line_is_rejected(self, client, make_product, place_order):
        product = make_product(stock=5)
        order = data(place_order((product, 2)))

        response = client.put(f"/api/orders/{order['id']}", json={
            "items": [{"id": order["items"][0]["id"], "quantity": 0}],
        })
        assert response.status_code == 400
        assert "at least one item" in response.json()["message"]
        assert len(data(client.get(f"/api/orders/{order['id']}"))["items"]) == 1
        assert stock_of(client, product) == 3

    def test_items_frozen_after_shipping(self, client, product, place_order):
        order = data(place_order((product, 1)))
        for status in ("confirmed", "processing", "shipped"):
            client.patch(f"/api/orders/{order['id']}/status", params={"status": status})

        response = client.put(f"/api/orders/{order['id']}", json={
            "items": [{"id": order["items"][0]["id"], "quantity": 2}],
        })
        assert response.status_code == 400


class TestDeleteOrder:
    def test_delete(self, client, make_product, place_order):
        product = make_product(stock=5)
        order = data(place_order((product, 2)))

        response = client.delete(f"/api/orders/{order['id']}")
        assert response.json()["message"] == "Order deleted successfully"
        assert client.get(f"/api/orders/{order['id']}").status_code == 404
        assert client.get(f"/api/orders/number/{order['orderNumber']}").status_code == 404
        assert stock_of(client, product) == 3
