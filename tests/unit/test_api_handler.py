"""Unit tests for the order API endpoints."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from restaurant_order_service.handlers.api_handler import create_app
from restaurant_order_service.models.catalog_models import Customer, MenuItem
from restaurant_order_service.models.order_models import Order, OrderItem, OrderStatus
from restaurant_order_service.services.errors import (
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
)
from restaurant_order_service.services.order_service import OrderService


def make_order(status: OrderStatus = OrderStatus.PENDING) -> Order:
    customer = Customer(
        customer_id="cust_1",
        name="John Doe",
        email="john@example.com",
        phone_number="9951402390",
    )
    pizza = MenuItem(menu_item_id=1, name="Margherita Pizza", price=Decimal("12.99"))
    order = Order.place(
        "ORD12345",
        customer,
        [OrderItem.snapshot(pizza, 2)],
        datetime(2024, 1, 15, 10, 30, tzinfo=UTC),
    )
    return order.model_copy(update={"status": status})


@pytest.fixture
def client() -> TestClient:
    """Create a test client over a mocked order service."""
    app = create_app(order_service=MagicMock(spec=OrderService))
    return TestClient(app)


@pytest.mark.unit
class TestHealthEndpoint:
    """Test suite for health check endpoint."""

    def test_health_check(self, client: TestClient) -> None:
        """Test health check endpoint returns 200."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


@pytest.mark.unit
class TestCreateOrderEndpoints:
    """Test suite for the order creation endpoints."""

    def test_create_by_name(self, client: TestClient) -> None:
        """Test creating an order by item name returns the order view."""
        client.app.state.order_service.create_order_by_name = AsyncMock(return_value=make_order())

        response = client.post(
            "/api/orders/by-name",
            json={
                "customer_phone": "9951402390",
                "items": [{"menu_item_name": "margherita pizza", "quantity": 2}],
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "ORD12345"
        assert data["order_number"] == "ORD12345"
        assert data["customer_name"] == "John Doe"
        assert data["status"] == "PENDING"
        assert Decimal(data["total_amount"]) == Decimal("25.98")
        assert data["items"] == [
            {
                "menu_item_name": "Margherita Pizza",
                "quantity": 2,
                "price": "12.99",
                "subtotal": "25.98",
            }
        ]

        phone, items = client.app.state.order_service.create_order_by_name.call_args.args
        assert phone == "9951402390"
        assert items[0].menu_item_name == "margherita pizza"
        assert items[0].quantity == 2

    def test_create_by_id(self, client: TestClient) -> None:
        """Test creating an order by menu item id."""
        client.app.state.order_service.create_order_by_id = AsyncMock(return_value=make_order())

        response = client.post(
            "/api/orders",
            json={
                "customer_phone": "9951402390",
                "order_items": [{"menu_item_id": 1, "quantity": 2}],
            },
        )

        assert response.status_code == 201
        assert response.json()["id"] == "ORD12345"
        _, items = client.app.state.order_service.create_order_by_id.call_args.args
        assert items[0].menu_item_id == 1

    def test_business_rule_violation_is_400(self, client: TestClient) -> None:
        """Test that a BadRequestError maps to 400 with its message."""
        client.app.state.order_service.create_order_by_name = AsyncMock(
            side_effect=BadRequestError("menu item 'Sushi' not found")
        )

        response = client.post(
            "/api/orders/by-name",
            json={
                "customer_phone": "9951402390",
                "items": [{"menu_item_name": "Sushi", "quantity": 1}],
            },
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "bad_request",
            "detail": "menu item 'Sushi' not found",
        }

    def test_exhausted_id_retries_is_409(self, client: TestClient) -> None:
        """Test that a ConflictError maps to 409."""
        client.app.state.order_service.create_order_by_id = AsyncMock(
            side_effect=ConflictError("order id ORD12345 already exists")
        )

        response = client.post(
            "/api/orders",
            json={
                "customer_phone": "9951402390",
                "order_items": [{"menu_item_id": 1, "quantity": 1}],
            },
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_storage_failure_is_500(self, client: TestClient) -> None:
        """Test that an InternalError maps to 500."""
        client.app.state.order_service.create_order_by_id = AsyncMock(
            side_effect=InternalError("failed to save order")
        )

        response = client.post(
            "/api/orders",
            json={
                "customer_phone": "9951402390",
                "order_items": [{"menu_item_id": 1, "quantity": 1}],
            },
        )

        assert response.status_code == 500
        assert response.json()["error"] == "internal"

    def test_malformed_body_is_400(self, client: TestClient) -> None:
        """Test that schema validation failures answer 400 rather than 422."""
        response = client.post(
            "/api/orders",
            json={
                "customer_phone": "9951402390",
                "order_items": [{"menu_item_id": "pizza", "quantity": 1}],
            },
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "bad_request"
        assert data["detail"][0]["loc"][:2] == ["body", "order_items"]


@pytest.mark.unit
class TestOrderQueryEndpoints:
    """Test suite for the order read endpoints."""

    def test_get_order(self, client: TestClient) -> None:
        """Test fetching an order by id."""
        client.app.state.order_service.get_order = AsyncMock(return_value=make_order())

        response = client.get("/api/orders/ORD12345")

        assert response.status_code == 200
        assert response.json()["id"] == "ORD12345"
        client.app.state.order_service.get_order.assert_called_once_with("ORD12345")

    def test_get_order_not_found(self, client: TestClient) -> None:
        """Test that an unknown id answers 404."""
        client.app.state.order_service.get_order = AsyncMock(return_value=None)

        response = client.get("/api/orders/ORD00000")

        assert response.status_code == 404
        assert response.json() == {
            "error": "not_found",
            "detail": "order not found with id ORD00000",
        }

    def test_get_all_orders(self, client: TestClient) -> None:
        """Test listing all orders."""
        client.app.state.order_service.get_all_orders = AsyncMock(return_value=[make_order()])

        response = client.get("/api/orders")

        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_get_orders_by_customer_phone(self, client: TestClient) -> None:
        """Test listing orders for a phone number."""
        client.app.state.order_service.get_orders_by_customer_phone = AsyncMock(
            return_value=[make_order()]
        )

        response = client.get("/api/orders/customer/phone/9951402390")

        assert response.status_code == 200
        assert response.json()[0]["customer_phone"] == "9951402390"

    def test_get_latest_order(self, client: TestClient) -> None:
        """Test fetching the latest order for a phone number."""
        client.app.state.order_service.get_latest_order_by_customer_phone = AsyncMock(
            return_value=make_order()
        )

        response = client.get("/api/orders/customer/phone/9951402390/latest")

        assert response.status_code == 200
        assert response.json()["id"] == "ORD12345"

    def test_get_latest_order_none(self, client: TestClient) -> None:
        """Test that a phone without orders answers 404."""
        client.app.state.order_service.get_latest_order_by_customer_phone = AsyncMock(
            return_value=None
        )

        response = client.get("/api/orders/customer/phone/9951402390/latest")

        assert response.status_code == 404
        assert response.json() == {
            "error": "not_found",
            "detail": "no orders for phone 9951402390",
        }

    def test_get_orders_by_status_ignores_case(self, client: TestClient) -> None:
        """Test that status path values are parsed case-insensitively."""
        client.app.state.order_service.get_orders_by_status = AsyncMock(
            return_value=[make_order(OrderStatus.READY)]
        )

        response = client.get("/api/orders/status/ready")

        assert response.status_code == 200
        assert response.json()[0]["status"] == "READY"
        client.app.state.order_service.get_orders_by_status.assert_called_once_with(
            OrderStatus.READY
        )

    def test_count_orders_by_status(self, client: TestClient) -> None:
        """Test counting orders in a status."""
        client.app.state.order_service.count_orders_by_status = AsyncMock(return_value=3)

        response = client.get("/api/orders/status/PENDING/count")

        assert response.status_code == 200
        assert response.json() == 3

    def test_unknown_status_is_400(self, client: TestClient) -> None:
        """Test that an unknown status name answers 400."""
        response = client.get("/api/orders/status/shipped")

        assert response.status_code == 400
        assert response.json() == {
            "error": "bad_request",
            "detail": "unknown order status 'shipped'",
        }


@pytest.mark.unit
class TestUpdateStatusEndpoint:
    """Test suite for the status update endpoint."""

    def test_update_status(self, client: TestClient) -> None:
        """Test moving an order to a new status."""
        client.app.state.order_service.update_order_status = AsyncMock(
            return_value=make_order(OrderStatus.COMPLETED)
        )

        response = client.put("/api/orders/ORD12345/status", json={"status": "completed"})

        assert response.status_code == 200
        assert response.json()["status"] == "COMPLETED"
        client.app.state.order_service.update_order_status.assert_called_once_with(
            "ORD12345", OrderStatus.COMPLETED
        )

    def test_update_status_missing_order(self, client: TestClient) -> None:
        """Test that a NotFoundError maps to 404."""
        client.app.state.order_service.update_order_status = AsyncMock(
            side_effect=NotFoundError("order not found with id ORD00000")
        )

        response = client.put("/api/orders/ORD00000/status", json={"status": "READY"})

        assert response.status_code == 404
        assert response.json() == {
            "error": "not_found",
            "detail": "order not found with id ORD00000",
        }

    def test_update_status_unknown_value(self, client: TestClient) -> None:
        """Test that an unknown status in the body answers 400."""
        client.app.state.order_service.update_order_status = AsyncMock()

        response = client.put("/api/orders/ORD12345/status", json={"status": "shipped"})

        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"
        client.app.state.order_service.update_order_status.assert_not_called()


@pytest.mark.unit
class TestOrderFlowOverInMemoryStore:
    """Exercise the API against a real OrderService with in-memory collaborators."""

    def test_create_then_read_back(self, order_service: OrderService) -> None:
        """Test that a created order is visible through every read endpoint."""
        client = TestClient(create_app(order_service=order_service))

        created = client.post(
            "/api/orders/by-name",
            json={
                "customer_phone": "9951402390",
                "items": [
                    {"menu_item_name": "MARGHERITA PIZZA", "quantity": 2},
                    {"menu_item_name": "iced tea", "quantity": 3},
                ],
            },
        )

        assert created.status_code == 201
        order_id = created.json()["id"]
        assert Decimal(created.json()["total_amount"]) == Decimal("26.28")

        assert client.get(f"/api/orders/{order_id}").json()["id"] == order_id
        assert client.get("/api/orders/customer/phone/9951402390/latest").json()["id"] == order_id
        assert client.get("/api/orders/status/pending/count").json() == 1

        updated = client.put(f"/api/orders/{order_id}/status", json={"status": "ready"})

        assert updated.status_code == 200
        assert updated.json()["status"] == "READY"
        assert Decimal(updated.json()["total_amount"]) == Decimal("26.28")
        assert client.get("/api/orders/status/PENDING/count").json() == 0

    def test_quantity_too_large_to_price(self, order_service: OrderService) -> None:
        """Test that an unpriceable quantity answers 400 rather than 500."""
        client = TestClient(create_app(order_service=order_service))

        response = client.post(
            "/api/orders/by-name",
            json={
                "customer_phone": "9951402390",
                "items": [{"menu_item_name": "Margherita Pizza", "quantity": 10**26}],
            },
        )

        assert response.status_code == 400
        assert response.json() == {
            "error": "bad_request",
            "detail": f"invalid quantity {10**26} for menu item Margherita Pizza",
        }
        assert client.get("/api/orders").json() == []

    def test_unregistered_customer(self, order_service: OrderService) -> None:
        """Test that an unknown phone answers 404."""
        client = TestClient(create_app(order_service=order_service))

        response = client.post(
            "/api/orders",
            json={
                "customer_phone": "0000000000",
                "order_items": [{"menu_item_id": 1, "quantity": 1}],
            },
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "customer with phone 0000000000 is not registered"
