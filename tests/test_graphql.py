"""Tests for the GraphQL order surface."""

import pytest

from conftest import data

ORDER_FIELDS = "id orderNumber status paymentStatus subtotal total itemCount items { id productId quantity }"


@pytest.fixture
def gql(client):
    def _run(query, **variables):
        response = client.post("/graphql", json={"query": query, "variables": variables})
        assert response.status_code == 200, response.text
        return response.json()

    return _run


def create_order(gql, user, product, quantity):
    result = gql(
        f"""
        mutation($input: CreateOrderInput!) {{
            createOrder(input: $input) {{ {ORDER_FIELDS} }}
        }}
        """,
        input={"userId": user["id"], "items": [{"productId": product["id"], "quantity": quantity}]},
    )
    assert "errors" not in result, result
    return result["data"]["createOrder"]


class TestOrderMutations:
    def test_create_and_query(self, client, gql, user, make_product):
        product = make_product(price=10.00, stock=5)
        order = create_order(gql, user, product, 2)
        assert order["status"] == "pending"
        assert order["itemCount"] == 2
        assert float(order["total"]) == 20.0
        assert data(client.get(f"/api/products/{product['id']}"))["stockQuantity"] == 3

        fetched = gql(
            f"query($number: String!) {{ orderByNumber(orderNumber: $number) {{ {ORDER_FIELDS} }} }}",
            number=order["orderNumber"],
        )["data"]["orderByNumber"]
        assert fetched["id"] == order["id"]

        page = gql("{ orders(page: 0, size: 5) { totalElements hasNext content { id } } }")["data"]["orders"]
        assert page["totalElements"] == 1
        assert page["content"][0]["id"] == order["id"]

    def test_payment_confirms_order(self, gql, user, product):
        order = create_order(gql, user, product, 1)
        result = gql(
            """
            mutation($id: UUID!) {
                updatePaymentStatus(id: $id, paymentStatus: "paid") { status paymentStatus }
            }
            """,
            id=order["id"],
        )
        assert result["data"]["updatePaymentStatus"] == {"status": "confirmed", "paymentStatus": "paid"}

    def test_invalid_transition_is_an_error(self, gql, user, product):
        order = create_order(gql, user, product, 1)
        result = gql(
            'mutation($id: UUID!) { updateOrderStatus(id: $id, status: "delivered") { status } }',
            id=order["id"],
        )
        assert result["data"] is None
        assert result["errors"][0]["message"] == "Invalid status transition from 'pending' to 'delivered'"

    def test_cancel_and_delete(self, client, gql, user, make_product):
        product = make_product(stock=5)
        order = create_order(gql, user, product, 3)

        cancelled = gql('mutation($id: UUID!) { cancelOrder(id: $id) { status } }', id=order["id"])
        assert cancelled["data"]["cancelOrder"]["status"] == "cancelled"
        assert data(client.get(f"/api/products/{product['id']}"))["stockQuantity"] == 5

        deleted = gql('mutation($id: UUID!) { deleteOrder(id: $id) }', id=order["id"])
        assert deleted["data"]["deleteOrder"] is True
        assert client.get(f"/api/orders/{order['id']}").status_code == 404

    def test_update_notes(self, gql, user, product):
        order = create_order(gql, user, product, 1)
        result = gql(
            """
            mutation($id: UUID!, $input: UpdateOrderInput!) {
                updateOrder(id: $id, input: $input) { customerNotes itemCount }
            }
            """,
            id=order["id"],
            input={"customerNotes": "Gift wrap"},
        )
        assert result["data"]["updateOrder"] == {"customerNotes": "Gift wrap", "itemCount": 1}

    def test_payment_description(self, gql):
        result = gql('{ __type(name: "Mutation") { fields { name description } } }')
        fields = {f["name"]: f["description"] for f in result["data"]["__type"]["fields"]}
        assert "also confirms the order" in fields["updatePaymentStatus"]


class TestCatalogQueries:
    def test_products_and_categories(self, gql, category, product):
        result = gql(
            """
            query($id: UUID!) {
                product(id: $id) { name categoryName inStock }
                searchProducts(keyword: "product") { totalElements }
                categories { categoryName }
            }
            """,
            id=product["id"],
        )
        assert "errors" not in result, result
        assert result["data"]["product"] == {"name": product["name"], "categoryName": "Electronics", "inStock": True}
        assert result["data"]["searchProducts"]["totalElements"] == 1
        assert result["data"]["categories"] == [{"categoryName": "Electronics"}]

    def test_create_catalog_entries(self, gql, user):
        category = gql(
            'mutation { createCategory(input: { categoryName: "Books" }) { id categoryName } }'
        )["data"]["createCategory"]
        product = gql(
            """
            mutation($input: CreateProductInput!) {
                createProduct(input: $input) { id name stockQuantity }
            }
            """,
            input={"categoryId": category["id"], "name": "Dune", "price": "9.99", "stockQuantity": 4},
        )["data"]["createProduct"]
        assert product["stockQuantity"] == 4

        review = gql(
            """
            mutation($input: CreateReviewInput!) {
                createReview(input: $input) { rating isVerifiedPurchase }
            }
            """,
            input={"productId": product["id"], "userId": user["id"], "rating": 5},
        )["data"]["createReview"]
        assert review == {"rating": 5, "isVerifiedPurchase": False}

        reviews = gql(
            "query($id: UUID!) { reviewsByProduct(productId: $id) { totalElements } }", id=product["id"]
        )["data"]["reviewsByProduct"]
        assert reviews["totalElements"] == 1

    def test_users(self, gql, user):
        result = gql("query($id: UUID!) { user(id: $id) { fullName } users { totalElements } }", id=user["id"])
        assert result["data"]["user"]["fullName"] == user["fullName"]
        assert result["data"]["users"]["totalElements"] == 1

    def test_not_found(self, gql):
        result = gql('{ product(id: "00000000-0000-0000-0000-000000000000") { name } }')
        assert result["errors"][0]["message"].startswith("Product not found with id")
