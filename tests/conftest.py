"""Shared fixtures: a fresh in-memory database and empty caches per test."""

import itertools
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OTEL_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from storefront.cache import caches
from storefront.db import database
from storefront.main import app


def data(response):
    """Unwrap the ``data`` field of a successful envelope."""
    assert response.status_code in (200, 201), response.text
    body = response.json()
    assert body["status"] is True
    return body["data"]


@pytest.fixture
def db_engine():
    database.init_database("sqlite://")
    database.create_tables()
    caches.clear_all()
    yield database.engine
    database.drop_tables()
    caches.clear_all()


@pytest.fixture
def db(db_engine):
    session = database.SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db_engine):
    return TestClient(app)


@pytest.fixture
def make_user(client):
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        payload = {
            "emailAddress": f"user{n}@example.com",
            "firstName": "Ada",
            "lastName": f"Buyer{n}",
            "password": "s3cret-pass",
        }
        payload.update(overrides)
        return data(client.post("/api/users", json=payload))

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def category(client):
    return data(client.post("/api/categories", json={"categoryName": "Electronics"}))


@pytest.fixture
def make_product(client, category):
    counter = itertools.count(1)

    def _make(price=10.00, stock=5, **overrides):
        n = next(counter)
        payload = {
            "categoryId": category["id"],
            "name": f"Product {n}",
            "sku": f"SKU-{n:04d}",
            "price": price,
            "stockQuantity": stock,
        }
        payload.update(overrides)
        return data(client.post("/api/products", json=payload))

    return _make


@pytest.fixture
def product(make_product):
    return make_product()


@pytest.fixture
def place_order(client, user):
    def _place(*lines, user_id=None, **extra):
        payload = {
            "userId": user_id or user["id"],
            "items": [{"productId": p["id"], "quantity": q} for p, q in lines],
        }
        payload.update(extra)
        return client.post("/api/orders", json=payload)

    return _place
