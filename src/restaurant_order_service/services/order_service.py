"""Order workflow: creation, status changes and order queries."""

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from decimal import InvalidOperation
from typing import TypeVar

from restaurant_order_service.models.catalog_models import Customer, MenuItem
from restaurant_order_service.models.order_models import Order, OrderItem, OrderStatus
from restaurant_order_service.models.order_requests import (
    OrderItemByIdRequest,
    OrderItemByNameRequest,
)
from restaurant_order_service.observability import traced
from restaurant_order_service.observability.metrics import (
    record_order_created,
    record_order_id_conflict,
    record_order_rejected,
    record_status_change,
)
from restaurant_order_service.repositories.base import CustomerDirectory, MenuCatalog, OrderStore
from restaurant_order_service.services.errors import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    OrderServiceError,
)
from restaurant_order_service.services.order_id_generator import OrderIdGenerator

logger = logging.getLogger(__name__)

ItemRequest = TypeVar("ItemRequest", OrderItemByNameRequest, OrderItemByIdRequest)

DEFAULT_MAX_CREATE_ATTEMPTS = 3


def utc_now() -> datetime:
    return datetime.now(UTC)


class OrderService:
    """Service for placing orders and tracking their status.

    Both creation paths validate the request, resolve every line against the
    menu catalog with a path-specific lookup, snapshot the current prices and
    write the whole order in one atomic operation. A generated id that is
    already taken is replaced and the write retried, up to max_create_attempts.
    """

    def __init__(
        self,
        order_repository: OrderStore,
        customer_directory: CustomerDirectory,
        menu_catalog: MenuCatalog,
        id_generator: OrderIdGenerator | None = None,
        max_create_attempts: int = DEFAULT_MAX_CREATE_ATTEMPTS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the OrderService.

        Args:
            order_repository: Store for order aggregates
            customer_directory: Lookup of registered customers
            menu_catalog: Lookup of menu items
            id_generator: Source of order ids
            max_create_attempts: Writes attempted before an id conflict is surfaced
            clock: Returns the current time for ordered_at/updated_at
        """
        if max_create_attempts < 1:
            raise ValueError("max_create_attempts must be at least 1")

        self.order_repository = order_repository
        self.customer_directory = customer_directory
        self.menu_catalog = menu_catalog
        self.id_generator = id_generator or OrderIdGenerator()
        self.max_create_attempts = max_create_attempts
        self.clock = clock

    @traced("order.create_by_name")
    async def create_order_by_name(
        self,
        customer_phone: str | None,
        items: Sequence[OrderItemByNameRequest],
    ) -> Order:
        """Create an order from menu item names.

        Args:
            customer_phone: Phone number of a registered customer
            items: Requested lines; names must be distinct

        Returns:
            The persisted order

        Raises:
            BadRequestError: Missing phone, empty or duplicate items, unknown or
                unavailable menu item, quantity that is non-positive or too large to price,
                total beyond the supported amount
            NotFoundError: Phone number is not registered
            ConflictError: No free order id within the retry budget
        """
        try:
            self._require_phone_and_items(customer_phone, items)

            names = [item.menu_item_name for item in items]
            if len(set(names)) != len(names):
                raise BadRequestError("duplicate menu items in order")

            customer = self._get_registered_customer(customer_phone)
            lines = self._resolve_items(items, self._find_available_by_name)
            order = self._place_order(customer, lines)
        except OrderServiceError as e:
            record_order_rejected("by_name", e.kind)
            raise

        record_order_created("by_name", order.total_amount)
        return order

    @traced("order.create_by_id")
    async def create_order_by_id(
        self,
        customer_phone: str | None,
        items: Sequence[OrderItemByIdRequest],
    ) -> Order:
        """Create an order from menu item ids.

        Same contract as create_order_by_name, except that items are resolved
        by id among available menu items and duplicate lines are allowed.
        """
        try:
            self._require_phone_and_items(customer_phone, items)
            customer = self._get_registered_customer(customer_phone)
            lines = self._resolve_items(items, self._find_available_by_id)
            order = self._place_order(customer, lines)
        except OrderServiceError as e:
            record_order_rejected("by_id", e.kind)
            raise

        record_order_created("by_id", order.total_amount)
        return order

    @traced("order.update_status")
    async def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        """Move an order to a new status.

        Any status may follow any other. The total is left untouched.

        Raises:
            NotFoundError: No order has this id
        """
        order = self.order_repository.update_status(order_id, status, self.clock())
        if order is None:
            raise NotFoundError(f"order not found with id {order_id}")

        logger.info(f"Order {order_id} moved to {status.value}")
        record_status_change(status.value)
        return order

    async def get_order(self, order_id: str) -> Order | None:
        return self.order_repository.find_order_by_id(order_id)

    async def get_orders_by_customer_phone(self, phone_number: str) -> list[Order]:
        return self.order_repository.find_orders_by_customer_phone(phone_number)

    async def get_latest_order_by_customer_phone(self, phone_number: str | None) -> Order | None:
        """Get the most recent order for a phone number.

        Raises:
            BadRequestError: If the phone number is empty or blank
        """
        if phone_number is None or not phone_number.strip():
            raise BadRequestError("phone number cannot be empty")

        order = self.order_repository.find_latest_order_by_customer_phone(phone_number)
        logger.info(
            f"Latest order for phone {phone_number}: {order.order_id if order else 'not found'}"
        )
        return order

    async def get_all_orders(self) -> list[Order]:
        return self.order_repository.find_all_orders()

    async def get_orders_by_status(self, status: OrderStatus) -> list[Order]:
        return self.order_repository.find_orders_by_status(status)

    async def count_orders_by_status(self, status: OrderStatus) -> int:
        return self.order_repository.count_orders_by_status(status)

    def _require_phone_and_items(self, customer_phone: str | None, items: Sequence[object]) -> None:
        if customer_phone is None or not customer_phone.strip():
            raise BadRequestError("customer phone required")
        if not items:
            raise BadRequestError("order must contain at least one item")

    def _get_registered_customer(self, customer_phone: str) -> Customer:
        customer = self.customer_directory.find_by_phone(customer_phone)
        if customer is None:
            raise NotFoundError(f"customer with phone {customer_phone} is not registered")
        return customer

    def _find_available_by_name(self, request: OrderItemByNameRequest) -> MenuItem:
        menu_item = self.menu_catalog.find_by_name_case_insensitive(request.menu_item_name)
        if menu_item is None:
            raise BadRequestError(f"menu item '{request.menu_item_name}' not found")
        if not menu_item.available:
            raise BadRequestError(f"menu item '{menu_item.name}' is currently not available")
        return menu_item

    def _find_available_by_id(self, request: OrderItemByIdRequest) -> MenuItem:
        # The catalog only returns available items by id
        menu_item = self.menu_catalog.find_by_id(request.menu_item_id)
        if menu_item is None:
            raise BadRequestError(f"menu item with id {request.menu_item_id} not found")
        return menu_item

    def _resolve_items(
        self,
        requests: Sequence[ItemRequest],
        lookup: Callable[[ItemRequest], MenuItem],
    ) -> list[OrderItem]:
        """Turn requested lines into priced order items, in request order.

        Args:
            requests: Requested lines
            lookup: Resolves one line to its menu item or raises BadRequestError

        Returns:
            Order items with unit prices captured from the catalog
        """
        lines: list[OrderItem] = []
        for request in requests:
            menu_item = lookup(request)
            invalid = BadRequestError(
                f"invalid quantity {request.quantity} for menu item {menu_item.name}"
            )
            if request.quantity <= 0:
                raise invalid
            try:
                lines.append(OrderItem.snapshot(menu_item, request.quantity))
            except InvalidOperation as e:
                # Line total does not fit the decimal context
                raise invalid from e
        return lines

    def _place_order(self, customer: Customer, lines: list[OrderItem]) -> Order:
        """Build the aggregate and persist it, regenerating the id on conflict."""
        try:
            order = Order.place(
                order_id=self.id_generator.generate(),
                customer=customer,
                items=lines,
                ordered_at=self.clock(),
            )
        except InvalidOperation as e:
            raise BadRequestError("order total exceeds the supported amount") from e

        for attempt in range(1, self.max_create_attempts + 1):
            try:
                saved = self.order_repository.save_order(order)
            except ConflictError:
                record_order_id_conflict()
                if attempt == self.max_create_attempts:
                    logger.error(
                        f"Giving up on order for {customer.phone_number} after {attempt} id conflicts"
                    )
                    raise
                logger.warning(f"Order id {order.order_id} taken, retrying with a new id")
                order = order.with_order_id(self.id_generator.generate())
                continue

            logger.info(
                f"Created order {saved.order_id} for {customer.phone_number} "
                f"with {len(saved.items)} items, total {saved.total_amount}"
            )
            return saved

        # Loop always returns or raises; kept for type checkers
        raise ConflictError("could not allocate an order id")
