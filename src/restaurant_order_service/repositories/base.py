"""Collaborator interfaces used by the order service.

Lookups return None when a record is absent. Unexpected store failures are raised as InternalError, and
a rejected order write is raised as ConflictError.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from restaurant_order_service.models.catalog_models import Customer, MenuItem
from restaurant_order_service.models.order_models import Order, OrderStatus


class CustomerDirectory(ABC):
    """Read access to registered customers."""

    @abstractmethod
    def find_by_phone(self, phone_number: str) -> Customer | None:
        """Look up a customer by phone number.

        Args:
            phone_number: Customer phone number

        Returns:
            Customer if registered, None otherwise
        """
        pass


class MenuCatalog(ABC):
    """Read access to menu items."""

    @abstractmethod
    def find_by_name_case_insensitive(self, name: str) -> MenuItem | None:
        """Look up a menu item by name, ignoring case.

        Returns the item whether or not it is available, so callers can tell
        "unknown" apart from "not available".
        """
        pass

    @abstractmethod
    def find_by_id(self, menu_item_id: int) -> MenuItem | None:
        """Look up a currently available menu item by id.

        Returns:
            MenuItem if it exists and is available, None otherwise
        """
        pass


class OrderStore(ABC):
    """Persistence for order aggregates."""

    @abstractmethod
    def save_order(self, order: Order) -> Order:
        """Write a new order with all of its items in one atomic operation.

        Raises:
            ConflictError: If an order with the same id already exists
            InternalError: On any other store failure
        """
        pass

    @abstractmethod
    def find_order_by_id(self, order_id: str) -> Order | None:
        pass

    @abstractmethod
    def find_orders_by_customer_phone(self, phone_number: str) -> list[Order]:
        pass

    @abstractmethod
    def find_latest_order_by_customer_phone(self, phone_number: str) -> Order | None:
        """Return the newest order for a phone number.

        Orders are ranked by ordered_at descending; equal timestamps fall back
        to the higher order id.
        """
        pass

    @abstractmethod
    def find_all_orders(self) -> list[Order]:
        pass

    @abstractmethod
    def find_orders_by_status(self, status: OrderStatus) -> list[Order]:
        pass

    @abstractmethod
    def count_orders_by_status(self, status: OrderStatus) -> int:
        pass

    @abstractmethod
    def update_status(
        self, order_id: str, status: OrderStatus, updated_at: datetime
    ) -> Order | None:
        """Set status and updated_at on an existing order.

        Never creates an order.

        Returns:
            The updated Order, or None if no order has this id
        """
        pass
