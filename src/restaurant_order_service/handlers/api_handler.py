"""FastAPI application for the order endpoints."""

import logging
from datetime import datetime
from decimal import Decimal

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from restaurant_order_service.models.order_models import Order, OrderItem, OrderStatus
from restaurant_order_service.models.order_requests import (
    CreateOrderByIdRequest,
    CreateOrderByNameRequest,
    UpdateStatusRequest,
)
from restaurant_order_service.services.errors import (
    BadRequestError,
    NotFoundError,
    OrderServiceError,
)
from restaurant_order_service.services.order_service import OrderService

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    "bad_request": 400,
    "not_found": 404,
    "conflict": 409,
    "internal": 500,
}


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class OrderItemResponse(BaseModel):
    """One line of an order view."""

    menu_item_name: str
    quantity: int
    price: Decimal
    subtotal: Decimal

    @classmethod
    def from_order_item(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            menu_item_name=item.menu_item_name,
            quantity=item.quantity,
            price=item.unit_price,
            subtotal=item.total_price,
        )


class OrderResponse(BaseModel):
    """Materialized order view returned by every order endpoint."""

    id: str
    order_number: str
    customer_name: str
    customer_phone: str
    order_date: datetime
    status: OrderStatus
    total_amount: Decimal
    items: list[OrderItemResponse]

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.order_id,
            order_number=order.order_id,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            order_date=order.ordered_at,
            status=order.status,
            total_amount=order.total_amount,
            items=[OrderItemResponse.from_order_item(item) for item in order.items],
        )


def parse_status(status: str) -> OrderStatus:
    """Parse a status path/body value, answering 400 when it is unknown."""
    try:
        return OrderStatus.parse(status)
    except ValueError:
        raise BadRequestError(f"unknown order status '{status}'") from None


def create_app(order_service: OrderService) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        order_service: Service implementing the order workflow

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Restaurant Order Service API",
        description="Order placement and status tracking for the restaurant back office",
        version="1.0.0",
    )

    # Store services in app state for access in route handlers
    app.state.order_service = order_service

    @app.exception_handler(OrderServiceError)
    async def handle_order_service_error(_request: Request, exc: OrderServiceError) -> JSONResponse:
        status_code = ERROR_STATUS_CODES.get(exc.kind, 500)
        if status_code >= 500:
            logger.error(f"Order request failed: {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.kind, "detail": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "bad_request", "detail": jsonable_errors(exc)},
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    @app.post(
        "/api/orders/by-name",
        response_model=OrderResponse,
        status_code=201,
        tags=["Orders"],
    )
    async def create_order_by_name(request: CreateOrderByNameRequest) -> OrderResponse:
        """Create an order from menu item names."""
        logger.info(f"Order by name requested for {request.customer_phone}")
        order = await app.state.order_service.create_order_by_name(
            request.customer_phone, request.items
        )
        return OrderResponse.from_order(order)

    @app.post("/api/orders", response_model=OrderResponse, status_code=201, tags=["Orders"])
    async def create_order_by_id(request: CreateOrderByIdRequest) -> OrderResponse:
        """Create an order from menu item ids."""
        logger.info(f"Order by id requested for {request.customer_phone}")
        order = await app.state.order_service.create_order_by_id(
            request.customer_phone, request.order_items
        )
        return OrderResponse.from_order(order)

    @app.get("/api/orders", response_model=list[OrderResponse], tags=["Orders"])
    async def get_all_orders() -> list[OrderResponse]:
        """List every order."""
        orders = await app.state.order_service.get_all_orders()
        return [OrderResponse.from_order(order) for order in orders]

    @app.get(
        "/api/orders/customer/phone/{phone_number}",
        response_model=list[OrderResponse],
        tags=["Orders"],
    )
    async def get_orders_by_customer_phone(phone_number: str) -> list[OrderResponse]:
        """List orders placed with a phone number."""
        orders = await app.state.order_service.get_orders_by_customer_phone(phone_number)
        return [OrderResponse.from_order(order) for order in orders]

    @app.get(
        "/api/orders/customer/phone/{phone_number}/latest",
        response_model=OrderResponse,
        tags=["Orders"],
    )
    async def get_latest_order_by_customer_phone(phone_number: str) -> OrderResponse:
        """Get the most recent order for a phone number.

        Raises:
            NotFoundError: If the customer has no orders
        """
        order = await app.state.order_service.get_latest_order_by_customer_phone(phone_number)
        if order is None:
            raise NotFoundError(f"no orders for phone {phone_number}")
        return OrderResponse.from_order(order)

    @app.get("/api/orders/status/{status}", response_model=list[OrderResponse], tags=["Orders"])
    async def get_orders_by_status(status: str) -> list[OrderResponse]:
        """List orders currently in a status."""
        orders = await app.state.order_service.get_orders_by_status(parse_status(status))
        return [OrderResponse.from_order(order) for order in orders]

    @app.get("/api/orders/status/{status}/count", response_model=int, tags=["Orders"])
    async def count_orders_by_status(status: str) -> int:
        """Count orders currently in a status."""
        count: int = await app.state.order_service.count_orders_by_status(parse_status(status))
        return count

    @app.get("/api/orders/{order_id}", response_model=OrderResponse, tags=["Orders"])
    async def get_order(order_id: str) -> OrderResponse:
        """Get an order by id.

        Raises:
            NotFoundError: If the order does not exist
        """
        order = await app.state.order_service.get_order(order_id)
        if order is None:
            raise NotFoundError(f"order not found with id {order_id}")
        return OrderResponse.from_order(order)

    @app.put("/api/orders/{order_id}/status", response_model=OrderResponse, tags=["Orders"])
    async def update_order_status(order_id: str, request: UpdateStatusRequest) -> OrderResponse:
        """Move an order to a new status."""
        order = await app.state.order_service.update_order_status(
            order_id, parse_status(request.status)
        )
        return OrderResponse.from_order(order)

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Reduce pydantic error details to JSON-safe location/message pairs."""
    return [
        {"loc": list(error.get("loc", ())), "msg": str(error.get("msg", ""))}
        for error in exc.errors()
    ]
