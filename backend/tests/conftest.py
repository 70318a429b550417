"""
Storefront Backend: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_store_repository / mock_product_repository: AsyncMock repositories
    ├── store_service / product_service: services wired to the mocks
    ├── make_store / make_product: unsaved ORM instances with sensible defaults
    ├── test_settings: Settings pointing at a throwaway SQLite file
    ├── app: application built from test_settings, tables created
    └── test_client: HTTPX AsyncClient talking to `app` in-process
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Settings() falls back to these wherever a test builds it without arguments
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./storefront_test.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENVIRONMENT"] = "test"

from storefront.config import Settings  # noqa: E402
from storefront.database import create_tables, dispose_engine  # noqa: E402
from storefront.models.product import Product  # noqa: E402
from storefront.models.store import Store  # noqa: E402
from storefront.repositories.product_repository import ProductRepository  # noqa: E402
from storefront.repositories.store_repository import StoreRepository  # noqa: E402
from storefront.services.product_service import ProductService  # noqa: E402
from storefront.services.store_service import StoreService  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Model Factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_store():
    """Build an unsaved Store; override any column with keyword arguments."""

    def _make(**overrides) -> Store:
        values = {
            "id": str(uuid4()),
            "name": "Acme",
            "slug": "acme",
            "address": "1 Main",
            "phone": "555",
            "operational_time_start": 8,
            "operational_time_end": 20,
            "created_at": datetime.now(timezone.utc),
            "updated_at": None,
        }
        values.update(overrides)
        return Store(**values)

    return _make


@pytest.fixture
def make_product():
    """Build an unsaved Product; `store_id` defaults to a random id."""

    def _make(**overrides) -> Product:
        values = {
            "id": str(uuid4()),
            "store_id": str(uuid4()),
            "name": "Widget",
            "slug": f"widget-{uuid4().hex[:8]}",
            "price": 9.99,
            "description": "x",
            "created_at": datetime.now(timezone.utc),
            "updated_at": None,
        }
        values.update(overrides)
        return Product(**values)

    return _make


# ══════════════════════════════════════════════════════════════════════════
# Mocked Repositories and Services
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_store_repository():
    """
    StoreRepository double.

    Usage:
        mock_store_repository.get_store_by_id.return_value = store
    """
    repo = MagicMock(spec=StoreRepository)
    repo.create_store = AsyncMock(side_effect=lambda store: store)
    repo.get_store_by_id = AsyncMock(return_value=None)
    repo.update_store = AsyncMock()
    return repo


@pytest.fixture
def mock_product_repository():
    """ProductRepository double; listing methods return an empty page by default."""
    repo = MagicMock(spec=ProductRepository)
    repo.count_products = AsyncMock(return_value=0)
    repo.list_products = AsyncMock(return_value=[])
    repo.create_product = AsyncMock(side_effect=lambda product: product)
    repo.get_product_by_id = AsyncMock(return_value=None)
    repo.get_product_by_slug = AsyncMock(return_value=None)
    repo.update_product = AsyncMock()
    repo.delete_product = AsyncMock()
    return repo


@pytest.fixture
def store_service(mock_store_repository):
    return StoreService(mock_store_repository)


@pytest.fixture
def product_service(mock_product_repository, store_service):
    return ProductService(mock_product_repository, store_service)


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures (real SQLite database)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    """Settings for an isolated SQLite file under pytest's tmp_path."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        environment="test",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """
    Application wired to the test database, with tables created.

    ASGITransport does not run the lifespan, so the schema is created and
    the engine disposed here.
    """
    from storefront.main import create_app

    application = create_app(test_settings)
    engine = application.state.dependencies.engine
    await create_tables(engine)
    yield application
    await dispose_engine(engine)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
