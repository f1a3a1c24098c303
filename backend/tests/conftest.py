"""
Pytest fixtures and configuration for Wanka's Backend tests

This file provides shared fixtures that can be used across all test modules.
No test touches Supabase, Claude or Gemini: every external client is mocked.

Author: Wanka's
Date: 2025-06-06
"""
import os

# Settings are read at import time; make auth usable and keep the real
# databases out of reach before any wankas module is imported
os.environ["AUTH_SECRET"] = "test-secret-for-wankas"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = ""
os.environ["DATABASE_URL"] = ""
os.environ["STORE_TIMEZONE"] = "America/Lima"
os.environ["DEFAULT_LOCALE"] = "es"

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from wankas.core.rate_limit import rate_limiter
from wankas.domain.order import EnrichedOrder, EnrichedOrderItem
from wankas.domain.product import Product


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Every test starts with empty rate limit windows"""
    rate_limiter.reset()
    yield
    rate_limiter.reset()


def make_supabase_mock(data=None):
    """
    Supabase client mock where every query builder call chains and
    .execute() returns a response with `data`.

    Returns:
        (client, query) so tests can inspect the builder calls
    """
    client = MagicMock()
    query = MagicMock()
    client.table.return_value = query
    for method in ("select", "eq", "in_", "order", "limit", "update", "insert", "delete"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data)
    return client, query


@pytest.fixture
def supabase_mock():
    return make_supabase_mock


@pytest.fixture
def sample_product():
    """
    Provides a sample catalog product
    """
    return Product(
        id="prod-papa",
        name="Papa Amarilla",
        description="Papa amarilla por kilo",
        price=Decimal("4.80"),
        image_url="https://placehold.co/600x400.png",
        category="Verduras",
        stock=25,
    )


@pytest.fixture
def catalog():
    """Small catalog used by matching and pantry tests"""
    return [
        Product(id="p-cebolla", name="Cebolla Roja", price=Decimal("3.20"), category="Verduras", stock=40),
        Product(id="p-aji", name="Ají Amarillo", price=Decimal("3.50"), category="Verduras", stock=15),
        Product(id="p-pollo", name="Pollo Entero", price=Decimal("11.90"), category="Carnes", stock=8),
        Product(id="p-leche", name="Leche Evaporada", price=Decimal("4.20"), category="Lácteos", stock=0),
        Product(id="p-tomate", name="Tomate", price=Decimal("5.10"), category="Verduras", stock=30),
    ]


@pytest.fixture
def enriched_order():
    """A pending order with two items, as shown in the order history"""
    return EnrichedOrder(
        id="8c1f2a34-5b6d-4e7f-8a9b-0c1d2e3f4a5b",
        user_id="user-1",
        location_id="loc-1",
        order_date=datetime(2025, 6, 4, 15, 30, tzinfo=timezone.utc),
        pickup_date=datetime(2025, 6, 5, 15, 0, tzinfo=timezone.utc),
        status="pending",
        total_price=Decimal("20.40"),
        items=[
            EnrichedOrderItem(
                order_id="8c1f2a34-5b6d-4e7f-8a9b-0c1d2e3f4a5b",
                product_id="p-cebolla",
                quantity=2,
                price_at_purchase=Decimal("3.20"),
                product_name="Cebolla Roja",
            ),
            EnrichedOrderItem(
                order_id="8c1f2a34-5b6d-4e7f-8a9b-0c1d2e3f4a5b",
                product_id="p-aji",
                quantity=4,
                price_at_purchase=Decimal("3.50"),
                product_name="Ají Amarillo",
            ),
        ],
        location_name="Wanka's Huancayo Centro",
        location_address="Jr. Real 123, Huancayo",
    )


# ============================================================================
# API fixtures
# ============================================================================

@pytest.fixture
def client():
    """FastAPI test client over the full app (middleware included)"""
    from fastapi.testclient import TestClient
    from wankas.main import app

    return TestClient(app)


@pytest.fixture
def auth_headers():
    """Bearer token for user-1 signed with the test secret"""
    from wankas.core.auth import create_access_token

    token = create_access_token("user-1", "ana@gmail.com", "Ana")
    return {"Authorization": f"Bearer {token}"}
