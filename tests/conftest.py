"""Shared pytest fixtures and configuration for all tests."""

import os
import random
from datetime import UTC, datetime
from decimal import Decimal

import pytest

# Keep main.py and lambda_handler.py from building real AWS clients on import
os.environ.setdefault("ENVIRONMENT", "test")

from restaurant_order_service.models.catalog_models import Customer, MenuItem  # noqa: E402
from restaurant_order_service.services.order_id_generator import OrderIdGenerator  # noqa: E402
from restaurant_order_service.services.order_service import OrderService  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemoryCustomerDirectory,
    InMemoryMenuCatalog,
    InMemoryOrderStore,
    TickingClock,
)


@pytest.fixture
def registered_customer() -> Customer:
    """Fixture providing the registered test customer."""
    return Customer(
        customer_id="cust_1",
        name="John Doe",
        email="john@example.com",
        phone_number="9951402390",
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def menu_items() -> list[MenuItem]:
    """Fixture providing sample menu items, one of them unavailable."""
    return [
        MenuItem(
            menu_item_id=1,
            name="Margherita Pizza",
            description="Classic pizza with tomato sauce, mozzarella, and basil",
            price=Decimal("12.99"),
            category="Pizza",
            available=True,
        ),
        MenuItem(
            menu_item_id=2,
            name="Caesar Salad",
            description="Fresh romaine lettuce with Caesar dressing",
            price=Decimal("9.99"),
            category="Salad",
            available=True,
        ),
        MenuItem(
            menu_item_id=3,
            name="Iced Tea",
            description="Refreshing iced tea with lemon",
            price=Decimal("0.10"),
            category="Beverages",
            available=True,
        ),
        MenuItem(
            menu_item_id=4,
            name="Chocolate Brownie",
            description="Warm chocolate brownie with vanilla ice cream",
            price=Decimal("6.99"),
            category="Dessert",
            available=False,
        ),
    ]


@pytest.fixture
def order_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(datetime(2024, 1, 15, 10, 30, tzinfo=UTC))


@pytest.fixture
def order_service(
    order_store: InMemoryOrderStore,
    registered_customer: Customer,
    menu_items: list[MenuItem],
    clock: TickingClock,
) -> OrderService:
    """Fixture providing an OrderService over in-memory collaborators."""
    return OrderService(
        order_repository=order_store,
        customer_directory=InMemoryCustomerDirectory([registered_customer]),
        menu_catalog=InMemoryMenuCatalog(menu_items),
        id_generator=OrderIdGenerator(rng=random.Random(42)),
        clock=clock,
    )
