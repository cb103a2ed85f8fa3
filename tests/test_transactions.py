"""Tests for transaction boundaries and cache coherence."""

import pytest

from conftest import data
from storefront.cache import PRODUCTS_CACHE, CacheManager, cached, caches
from storefront.db.database import after_commit, transactional


class TestAfterCommit:
    def test_runs_after_outer_commit(self, db):
        calls = []

        @transactional
        def inner(session):
            after_commit(session, lambda: calls.append("inner"))
            assert calls == []

        @transactional
        def outer(session):
            inner(session)
            assert calls == []
            return "done"

        assert outer(db) == "done"
        assert calls == ["inner"]

    def test_dropped_on_rollback(self, db):
        calls = []

        @transactional
        def failing(session):
            after_commit(session, lambda: calls.append("never"))
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            failing(db)
        assert calls == []

        @transactional
        def succeeding(session):
            after_commit(session, lambda: calls.append("ok"))

        succeeding(db)
        assert calls == ["ok"]

    def test_runs_immediately_outside_transaction(self, db):
        calls = []
        after_commit(db, lambda: calls.append("now"))
        assert calls == ["now"]


class TestCacheManager:
    def test_refresh_replaces_stale_keys(self):
        manager = CacheManager(["things"], maxsize=10, ttl=60)
        manager.refresh("things", "v1", ["id:1", "sku:A"])
        manager.refresh("things", "v2", ["id:1", "sku:B"], stale_keys=["sku:A"])

        cache = manager.get_cache("things")
        assert cache.get("id:1") == "v2"
        assert cache.get("sku:B") == "v2"
        assert "sku:A" not in cache

    def test_unknown_bucket(self):
        with pytest.raises(KeyError):
            CacheManager(["things"], maxsize=10, ttl=60).get_cache("other")

    def test_cached_does_not_store_failures(self):
        manager = CacheManager(["things"], maxsize=10, ttl=60)
        calls = []

        @cached("things", key=lambda x: f"id:{x}", manager=manager)
        def load(x):
            calls.append(x)
            if x < 0:
                raise ValueError(x)
            return x * 2

        assert load(2) == 4
        assert load(2) == 4
        assert calls == [2]
        with pytest.raises(ValueError):
            load(-1)
        assert "id:-1" not in manager.get_cache("things")


class TestProductCacheCoherence:
    def test_sku_change_drops_old_key(self, client, product):
        assert data(client.get(f"/api/products/sku/{product['sku']}"))["id"] == product["id"]

        updated = data(client.put(f"/api/products/{product['id']}", json={"sku": "NEW-SKU"}))
        assert updated["sku"] == "NEW-SKU"

        assert client.get(f"/api/products/sku/{product['sku']}").status_code == 404
        assert data(client.get("/api/products/sku/NEW-SKU"))["id"] == product["id"]
        assert data(client.get(f"/api/products/{product['id']}"))["sku"] == "NEW-SKU"

    def test_order_refreshes_cached_stock(self, client, make_product, place_order):
        product = make_product(stock=5)
        assert data(client.get(f"/api/products/{product['id']}"))["stockQuantity"] == 5

        place_order((product, 2))
        assert data(client.get(f"/api/products/{product['id']}"))["stockQuantity"] == 3

    def test_failed_write_keeps_cache(self, client, make_product):
        first = make_product()
        second = make_product()
        data(client.get(f"/api/products/{first['id']}"))

        response = client.put(f"/api/products/{first['id']}", json={"sku": second["sku"]})
        assert response.status_code == 409
        cache = caches.get_cache(PRODUCTS_CACHE)
        assert cache.get(f"id:{first['id']}").sku == first["sku"]
