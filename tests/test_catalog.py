"""Tests for categories, products, reviews, addresses and payment/shipping methods."""

from uuid import UUID

from conftest import data
from storefront.repositories.product_repository import ProductRepository


class TestCategories:
    def test_tree_and_subcategories(self, client, category):
        phones = data(client.post("/api/categories", json={
            "categoryName": "Phones", "parentCategoryId": category["id"],
        }))

        tree = data(client.get("/api/categories/tree"))
        assert [c["categoryName"] for c in tree] == ["Electronics"]
        assert tree[0]["subcategories"][0]["id"] == phones["id"]
        assert [c["id"] for c in data(client.get("/api/categories/root"))] == [category["id"]]
        assert [c["id"] for c in data(client.get(f"/api/categories/{category['id']}/subcategories"))] == [phones["id"]]

    def test_duplicate_name(self, client, category):
        response = client.post("/api/categories", json={"categoryName": "Electronics"})
        assert response.status_code == 409

    def test_own_parent_rejected(self, client, category):
        response = client.put(f"/api/categories/{category['id']}", json={"parentCategoryId": category["id"]})
        assert response.status_code == 400

    def test_delete_guarded_by_products(self, client, category, product):
        response = client.delete(f"/api/categories/{category['id']}")
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete category with existing products"

        client.delete(f"/api/products/{product['id']}")
        assert client.delete(f"/api/categories/{category['id']}").status_code == 200
        assert client.get(f"/api/categories/{category['id']}").status_code == 404

    def test_rename_shows_on_products(self, client, category, product):
        data(client.get(f"/api/products/{product['id']}"))
        client.put(f"/api/categories/{category['id']}", json={"categoryName": "Gadgets"})
        assert data(client.get(f"/api/products/{product['id']}"))["categoryName"] == "Gadgets"


class TestProducts:
    def test_create(self, client, category, product):
        assert product["categoryName"] == "Electronics"
        assert product["inStock"] is True
        assert product["price"] == 10.0

    def test_duplicate_sku(self, client, make_product, product):
        response = client.post("/api/products", json={
            "categoryId": product["categoryId"], "name": "Copy", "sku": product["sku"], "price": 1.00,
        })
        assert response.status_code == 409

    def test_negative_price_rejected(self, client, category):
        response = client.post("/api/products", json={
            "categoryId": category["id"], "name": "Free lunch", "price": -1,
        })
        assert response.status_code == 400

    def test_listings(self, client, make_product):
        make_product(price=5.00, stock=0, name="Cable")
        make_product(price=50.00, stock=3, name="Charger")
        hidden = make_product(price=500.00, stock=3, name="Laptop")
        client.patch(f"/api/products/{hidden['id']}/deactivate")

        assert data(client.get("/api/products"))["totalElements"] == 3
        assert data(client.get("/api/products/active"))["totalElements"] == 2
        assert [p["name"] for p in data(client.get("/api/products/in-stock"))["content"]] == ["Charger"]
        in_range = data(client.get("/api/products/price-range", params={"minPrice": 10, "maxPrice": 100}))
        assert [p["name"] for p in in_range["content"]] == ["Charger"]
        assert data(client.get("/api/products/search", params={"keyword": "CHAR"}))["totalElements"] == 1
        assert data(client.get("/api/products/count")) == 3

    def test_inverted_price_range(self, client):
        response = client.get("/api/products/price-range", params={"minPrice": 10, "maxPrice": 1})
        assert response.status_code == 400

    def test_adjust_stock(self, client, product):
        assert data(client.patch(f"/api/products/{product['id']}/stock", params={"quantityChange": 4}))[
            "stockQuantity"] == 9
        assert data(client.patch(f"/api/products/{product['id']}/stock", params={"quantityChange": -9}))[
            "stockQuantity"] == 0

        response = client.patch(f"/api/products/{product['id']}/stock", params={"quantityChange": -1})
        assert response.status_code == 400
        assert data(client.get(f"/api/products/{product['id']}"))["stockQuantity"] == 0

    def test_partial_update(self, client, product):
        updated = data(client.put(f"/api/products/{product['id']}", json={"price": 12.50}))
        assert updated["price"] == 12.5
        assert updated["name"] == product["name"]
        assert updated["sku"] == product["sku"]

    def test_update_sets_stock_only_when_given(self, client, product):
        renamed = data(client.put(f"/api/products/{product['id']}", json={"name": "Renamed"}))
        assert renamed["stockQuantity"] == 5

        restocked = data(client.put(f"/api/products/{product['id']}", json={"stockQuantity": 7}))
        assert restocked["stockQuantity"] == 7
        assert restocked["name"] == "Renamed"

    def test_edit_from_stale_read_keeps_stock_movement(self, db, product):
        product_id = UUID(product["id"])
        stale = ProductRepository.find_by_id(db, product_id)
        assert ProductRepository.decrement_stock(db, product_id, 2)

        stale.name = "Renamed"
        ProductRepository.update(db, stale)
        db.commit()

        stored = ProductRepository.find_by_id(db, product_id)
        assert stored.name == "Renamed"
        assert stored.stock_quantity == 3


class TestReviews:
    def test_verified_purchase(self, client, user, make_product, place_order):
        bought = make_product()
        browsed = make_product()
        place_order((bought, 1))

        verified = data(client.post("/api/reviews", json={
            "userId": user["id"], "productId": bought["id"], "rating": 5, "title": "Great",
        }))
        unverified = data(client.post("/api/reviews", json={
            "userId": user["id"], "productId": browsed["id"], "rating": 2,
        }))
        assert verified["isVerifiedPurchase"] is True
        assert verified["userName"] == user["fullName"]
        assert unverified["isVerifiedPurchase"] is False

    def test_one_review_per_product(self, client, user, product):
        payload = {"userId": user["id"], "productId": product["id"], "rating": 4}
        data(client.post("/api/reviews", json=payload))
        assert client.post("/api/reviews", json=payload).status_code == 409
        assert data(client.get(f"/api/reviews/user/{user['id']}/product/{product['id']}/exists")) is True

    def test_rating_out_of_range(self, client, user, product):
        response = client.post("/api/reviews", json={"userId": user["id"], "productId": product["id"], "rating": 6})
        assert response.status_code == 400

    def test_average(self, client, make_user, product):
        for rating in (5, 4, 4):
            reviewer = make_user()
            data(client.post("/api/reviews", json={
                "userId": reviewer["id"], "productId": product["id"], "rating": rating,
            }))

        summary = data(client.get(f"/api/reviews/product/{product['id']}/average"))
        assert summary["reviewCount"] == 3
        assert summary["averageRating"] == 4.33
        assert data(client.get(f"/api/reviews/product/{product['id']}"))["totalElements"] == 3
        assert data(client.get(f"/api/reviews/product/{product['id']}/count")) == 3

    def test_update_and_delete(self, client, user, product):
        review = data(client.post("/api/reviews", json={
            "userId": user["id"], "productId": product["id"], "rating": 3,
        }))
        assert data(client.put(f"/api/reviews/{review['id']}", json={"rating": 1}))["rating"] == 1
        assert data(client.get(f"/api/reviews/{review['id']}"))["rating"] == 1

        client.delete(f"/api/reviews/{review['id']}")
        assert client.get(f"/api/reviews/{review['id']}").status_code == 404


class TestAddresses:
    def address(self, client, user, **extra):
        payload = {"userId": user["id"], "addressLine": "1 Main St", "city": "Lagos", "country": "Nigeria"}
        payload.update(extra)
        return data(client.post("/api/addresses", json=payload))

    def test_default_replaces_previous(self, client, user):
        first = self.address(client, user, isDefault=True)
        second = self.address(client, user, isDefault=True, addressLine="2 Side St")

        assert data(client.get(f"/api/addresses/user/{user['id']}/default"))["id"] == second["id"]
        assert data(client.get(f"/api/addresses/{first['id']}"))["isDefault"] is False

        data(client.patch(f"/api/addresses/{first['id']}/default"))
        assert data(client.get(f"/api/addresses/user/{user['id']}/default"))["id"] == first["id"]

    def test_by_type(self, client, user):
        self.address(client, user)
        self.address(client, user, addressType="billing")

        assert len(data(client.get(f"/api/addresses/user/{user['id']}"))) == 2
        billing = data(client.get(f"/api/addresses/user/{user['id']}/type/billing"))
        assert [a["addressType"] for a in billing] == ["billing"]
        assert client.get(f"/api/addresses/user/{user['id']}/type/pickup").status_code == 400

    def test_no_default(self, client, user):
        self.address(client, user)
        assert client.get(f"/api/addresses/user/{user['id']}/default").status_code == 404

    def test_update_and_delete(self, client, user):
        address = self.address(client, user)
        updated = data(client.put(f"/api/addresses/{address['id']}", json={"city": "Abuja"}))
        assert updated["fullAddress"] == "1 Main St, Abuja, Nigeria"

        client.delete(f"/api/addresses/{address['id']}")
        assert client.get(f"/api/addresses/{address['id']}").status_code == 404


class TestPaymentAndShippingMethods:
    def test_account_number_is_masked(self, client, user):
        method = data(client.post("/api/payment-methods", json={
            "userId": user["id"], "paymentType": "card", "provider": "Visa", "accountNumber": "4111111111111111",
        }))
        assert method["maskedAccountNumber"] == "****1111"
        assert "accountNumber" not in method

        listed = data(client.get(f"/api/payment-methods/user/{user['id']}"))
        assert listed["content"][0]["maskedAccountNumber"] == "****1111"

    def test_payment_method_crud(self, client, user):
        method = data(client.post("/api/payment-methods", json={
            "userId": user["id"], "paymentType": "card", "accountNumber": "5500000000000004",
        }))
        assert data(client.put(f"/api/payment-methods/{method['id']}", json={"provider": "Mastercard"}))[
            "provider"] == "Mastercard"
        client.delete(f"/api/payment-methods/{method['id']}")
        assert client.get(f"/api/payment-methods/{method['id']}").status_code == 404

    def test_shipping_method_crud(self, client):
        method = data(client.post("/api/shipping-methods", json={"name": "Standard", "price": 4.99}))
        assert method["price"] == 4.99
        assert method["estimatedDelivery"] is None

        updated = data(client.put(f"/api/shipping-methods/{method['id']}", json={"estimatedDays": 5}))
        assert updated["estimatedDelivery"] == "5 days"
        assert data(client.get("/api/shipping-methods"))["totalElements"] == 1

        client.delete(f"/api/shipping-methods/{method['id']}")
        assert client.get(f"/api/shipping-methods/{method['id']}").status_code == 404
