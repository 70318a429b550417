"""
Storefront Backend: API Endpoint Tests
========================================

What we test:
    ✅ Store and product CRUD through the HTTP surface
    ✅ Paginated, sorted, searched listings (global and store-scoped)
    ✅ Error envelopes for validation, not-found and malformed input
    ✅ Orphaned products hidden from listings
    ✅ Health check and request ID propagation

How:
    Real application, real SQLite database (one file per test under tmp_path),
    driven in-process with HTTPX's ASGITransport.
"""

import logging
import re
from datetime import datetime, timezone

import pytest

from storefront.models.product import Product

STORE = {
    "name": "Acme",
    "address": "1 Main",
    "phone": "555",
    "operational_time_start": 8,
    "operational_time_end": 20,
}


async def _create_store(client, **overrides) -> dict:
    response = await client.post("/store", json={**STORE, **overrides})
    assert response.status_code == 200, response.text
    return response.json()["data"]


async def _create_product(client, store_id: str, name: str = "Widget", price: float = 9.99) -> dict:
    response = await client.post(
        "/product",
        json={"name": name, "price": price, "description": "x", "store_id": store_id},
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]


class TestStoreEndpoints:

    @pytest.mark.asyncio
    async def test_create_store(self, test_client):
        response = await test_client.post("/store", json=STORE)

        assert response.status_code == 200
        body = response.json()
        assert body["code"] == "0000"
        assert body["message"] == "Success"
        assert body["data"]["slug"] == "acme"
        assert body["data"]["operational_time_start"] == 8

    @pytest.mark.asyncio
    async def test_create_store_missing_name(self, test_client):
        response = await test_client.post("/store", json={**STORE, "name": ""})

        assert response.status_code == 400
        assert response.json() == {"code": "4000", "message": "missing name"}

    @pytest.mark.asyncio
    async def test_create_store_bad_hour(self, test_client):
        response = await test_client.post("/store", json={**STORE, "operational_time_end": 24})

        assert response.status_code == 400
        assert response.json()["message"] == "missing operational time end (0-23)"

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client):
        response = await test_client.post(
            "/store", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "4000"

    @pytest.mark.asyncio
    async def test_get_store(self, test_client):
        store = await _create_store(test_client)

        response = await test_client.get(f"/store/{store['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == store["id"]

    @pytest.mark.asyncio
    async def test_get_unknown_store(self, test_client):
        response = await test_client.get("/store/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"code": "4004", "message": "store not found"}

    @pytest.mark.asyncio
    async def test_update_store(self, test_client):
        store = await _create_store(test_client)

        response = await test_client.put(
            f"/store/{store['id']}", json={**STORE, "name": "Acme Two"}
        )
        assert response.status_code == 200
        assert "data" not in response.json()

        updated = (await test_client.get(f"/store/{store['id']}")).json()["data"]
        assert updated["name"] == "Acme Two"
        assert updated["slug"] == "acme-two"
        assert updated["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_update_unknown_store(self, test_client):
        response = await test_client.put("/store/nope", json=STORE)
        assert response.status_code == 404


class TestProductEndpoints:

    @pytest.mark.asyncio
    async def test_create_product_embeds_store(self, test_client):
        store = await _create_store(test_client)

        product = await _create_product(test_client, store["id"])

        assert re.fullmatch(r"widget-\d+", product["slug"])
        assert product["price"] == 9.99
        assert product["store"]["id"] == store["id"]
        assert product["store"]["slug"] == "acme"

    @pytest.mark.asyncio
    async def test_create_product_unknown_store(self, test_client):
        response = await test_client.post(
            "/product",
            json={"name": "Widget", "price": 1, "description": "x", "store_id": "nope"},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "store not found"
        listing = (await test_client.get("/product")).json()["data"]
        assert listing["totalData"] == 0

    @pytest.mark.asyncio
    async def test_create_product_negative_price(self, test_client):
        response = await test_client.post(
            "/product",
            json={"name": "Widget", "price": -1, "description": "x", "store_id": "s1"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "missing price"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    async def test_create_product_non_finite_price(self, test_client, literal):
        store = await _create_store(test_client)
        body = (
            '{"name": "Widget", "price": %s, "description": "x", "store_id": "%s"}'
            % (literal, store["id"])
        )

        response = await test_client.post(
            "/product", content=body.encode(), headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"code": "4000", "message": "missing price"}
        listing = await test_client.get("/product")
        assert listing.status_code == 200
        assert listing.json()["data"]["totalData"] == 0

    @pytest.mark.asyncio
    async def test_get_by_slug_and_id(self, test_client):
        store = await _create_store(test_client)
        product = await _create_product(test_client, store["id"])

        by_slug = await test_client.get(f"/product/{product['slug']}")
        by_id = await test_client.get(f"/product/id/{product['id']}")

        assert by_slug.status_code == 200
        assert by_id.status_code == 200
        assert by_slug.json()["data"]["id"] == product["id"]
        assert by_id.json()["data"]["slug"] == product["slug"]

    @pytest.mark.asyncio
    async def test_get_unknown_slug(self, test_client):
        response = await test_client.get("/product/no-such-widget")
        assert response.status_code == 404
        assert response.json()["message"] == "product not found"

    @pytest.mark.asyncio
    async def test_update_product_keeps_slug(self, test_client):
        store = await _create_store(test_client)
        product = await _create_product(test_client, store["id"])

        response = await test_client.put(
            f"/product/{product['id']}",
            json={"name": "Gadget", "price": 2.5, "description": "y", "store_id": store["id"]},
        )
        assert response.status_code == 200

        updated = (await test_client.get(f"/product/id/{product['id']}")).json()["data"]
        assert updated["name"] == "Gadget"
        assert updated["price"] == 2.5
        assert updated["slug"] == product["slug"]

    @pytest.mark.asyncio
    async def test_update_unknown_product(self, test_client):
        store = await _create_store(test_client)

        response = await test_client.put(
            "/product/nope",
            json={"name": "Gadget", "price": 2.5, "description": "y", "store_id": store["id"]},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "product not found"
        assert (await test_client.get("/product")).json()["data"]["totalData"] == 0

    @pytest.mark.asyncio
    async def test_delete_twice(self, test_client):
        store = await _create_store(test_client)
        product = await _create_product(test_client, store["id"])

        first = await test_client.delete(f"/product/{product['id']}")
        second = await test_client.delete(f"/product/{product['id']}")

        assert first.status_code == 200
        assert first.json() == {"code": "0000", "message": "Success"}
        assert second.status_code == 404
        assert second.json()["code"] == "4004"


class TestListings:

    @pytest.mark.asyncio
    async def test_sorted_by_price(self, test_client):
        store = await _create_store(test_client)
        for name, price in [("Five", 5), ("One", 1), ("Three", 3)]:
            await _create_product(test_client, store["id"], name=name, price=price)

        response = await test_client.get(
            "/product", params={"limit": 10, "page": 1, "sortBy": "price", "sortDirection": "ASC"}
        )

        assert response.status_code == 200
        page = response.json()["data"]
        assert [item["price"] for item in page["data"]] == [1, 3, 5]
        assert page["totalData"] == 3
        assert page["totalPages"] == 1
        assert page["nextPage"] == 0
        assert "offset" not in page

    @pytest.mark.asyncio
    async def test_paging_and_search(self, test_client):
        store = await _create_store(test_client)
        for name in ["Red Widget", "Blue Widget", "Green Widget", "Gadget"]:
            await _create_product(test_client, store["id"], name=name)

        first = (
            await test_client.get(
                "/product", params={"limit": 2, "page": 1, "search": "WIDGET", "sortBy": "name"}
            )
        ).json()["data"]
        second = (
            await test_client.get(
                "/product", params={"limit": 2, "page": 2, "search": "WIDGET", "sortBy": "name"}
            )
        ).json()["data"]

        assert first["totalData"] == 3
        assert first["totalPages"] == 2
        assert first["nextPage"] == 2
        assert [item["name"] for item in first["data"]] == ["Red Widget", "Green Widget"]
        assert [item["name"] for item in second["data"]] == ["Blue Widget"]
        assert second["nextPage"] == 0

    @pytest.mark.asyncio
    async def test_non_integer_limit(self, test_client):
        response = await test_client.get("/product", params={"limit": "abc"})
        assert response.status_code == 400
        assert response.json()["code"] == "4000"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params",
        [
            {"limit": str(10**20)},
            {"page": str(10**19)},
            {"limit": "1001"},
            {"page": str(2**31)},
        ],
    )
    async def test_oversized_paging_rejected(self, test_client, params):
        response = await test_client.get("/product", params=params)
        assert response.status_code == 400
        assert response.json()["code"] == "4000"

    @pytest.mark.asyncio
    async def test_largest_paging_accepted(self, test_client):
        response = await test_client.get(
            "/product", params={"limit": 1000, "page": 2**31 - 1, "sortBy": "price"}
        )
        assert response.status_code == 200
        page = response.json()["data"]
        assert page["data"] == []
        assert page["nextPage"] == 0

    @pytest.mark.asyncio
    async def test_oversized_paging_rejected_for_store_listing(self, test_client):
        store = await _create_store(test_client)
        response = await test_client.get(
            f"/store/{store['id']}/products", params={"limit": str(10**20)}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_store_scoped_listing(self, test_client):
        acme = await _create_store(test_client)
        other = await _create_store(test_client, name="Other")
        await _create_product(test_client, acme["id"], name="Acme Thing")
        await _create_product(test_client, other["id"], name="Other Thing")

        response = await test_client.get(f"/store/{acme['id']}/products")

        page = response.json()["data"]
        assert page["totalData"] == 1
        assert page["data"][0]["name"] == "Acme Thing"
        assert page["data"][0]["store"]["id"] == acme["id"]

    @pytest.mark.asyncio
    async def test_store_scoped_listing_unknown_store(self, test_client):
        response = await test_client.get("/store/nope/products")
        assert response.status_code == 404
        assert response.json()["message"] == "store not found"

    @pytest.mark.asyncio
    async def test_orphaned_product_hidden(self, app, test_client):
        store = await _create_store(test_client)
        await _create_product(test_client, store["id"], name="Kept")

        # SQLite does not enforce the foreign key, so an orphan can be inserted directly
        session_factory = app.state.dependencies.session_factory
        async with session_factory() as session:
            async with session.begin():
                session.add(
                    Product(
                        id="orphan-1",
                        store_id="ghost-store",
                        name="Orphan",
                        slug="orphan-1",
                        price=1.0,
                        description="x",
                        created_at=datetime.now(timezone.utc),
                    )
                )

        page = (await test_client.get("/product")).json()["data"]

        assert [item["name"] for item in page["data"]] == ["Kept"]
        assert page["totalData"] == 2


class TestHealthAndMiddleware:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["database_backend"] == "sqlite"
        assert body["database_latency_ms"] >= 0

    @pytest.mark.asyncio
    async def test_access_log_uses_route_template(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="storefront.access"):
            await test_client.get("/store/abc-123", headers={"X-Request-ID": "rid-1"})

        records = [r for r in caplog.records if r.name == "storefront.access"]
        assert len(records) == 1
        assert records[0].getMessage().startswith("GET /store/{store_id} 404")
        assert "[rid-1]" in records[0].getMessage()
        assert records[0].levelno == logging.WARNING

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/store/nope")
        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_unknown_route_uses_envelope(self, test_client):
        response = await test_client.get("/nowhere")
        assert response.status_code == 404
        assert response.json()["code"] == "4004"


class TestAppFactory:

    def test_import_builds_no_application(self):
        import storefront.main

        assert not hasattr(storefront.main, "app")

    @pytest.mark.asyncio
    async def test_each_app_gets_its_own_dependencies(self, test_settings):
        from storefront.database import dispose_engine
        from storefront.main import create_app

        first = create_app(test_settings)
        second = create_app(test_settings)
        try:
            assert first.state.dependencies is not second.state.dependencies
            assert first.state.dependencies.engine is not second.state.dependencies.engine
            assert first.state.dependencies.settings is test_settings
        finally:
            await dispose_engine(first.state.dependencies.engine)
            await dispose_engine(second.state.dependencies.engine)
