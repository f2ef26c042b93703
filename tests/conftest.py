"""Shared test fixtures for the payment allocator tests."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from payopt.core.config import Settings
from payopt.schemas.order import Order
from payopt.schemas.payment_method import PaymentMethod
from payopt.services.allocation.catalog import PaymentCatalog

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def _order(order_id: str, value: str, promotions=None) -> Order:
    return Order(id=order_id, value=Decimal(value), promotions=promotions)


def _method(method_id: str, discount: int, limit: str) -> PaymentMethod:
    return PaymentMethod(id=method_id, discount=discount, limit=Decimal(limit))


@pytest.fixture
def config() -> Settings:
    """Settings with defaults, independent of any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def methods() -> list[PaymentMethod]:
    """The three payment methods from data/paymentmethods.json."""
    return [
        _method("PUNKTY", 15, "100.00"),
        _method("mZysk", 10, "180.00"),
        _method("BosBankrut", 5, "200.00"),
    ]


@pytest.fixture
def orders() -> list[Order]:
    """The four orders from data/orders.json."""
    return [
        _order("ORDER1", "100.00", ["mZysk"]),
        _order("ORDER2", "200.00", ["BosBankrut"]),
        _order("ORDER3", "150.00", ["mZysk", "BosBankrut"]),
        _order("ORDER4", "50.00"),
    ]


@pytest.fixture
def catalog(methods, config) -> PaymentCatalog:
    return PaymentCatalog(methods, config.points_method_id)


@pytest.fixture
def client():
    """FastAPI test client."""
    from payopt.main import app

    with TestClient(app) as c:
        yield c
