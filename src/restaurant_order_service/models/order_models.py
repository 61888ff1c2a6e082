"""Order aggregate models.

An Order owns its OrderItems by value. The whole aggregate is stored as one
DynamoDB item, so writing an order always writes all of its items with it.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from restaurant_order_service.models.catalog_models import PRICE_SCALE, Customer, MenuItem


class OrderStatus(str, Enum):
    """Enumeration of order status values."""

    PENDING = "PENDING"
    RECEIVED = "RECEIVED"
    PREPARING = "PREPARING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value: str) -> "OrderStatus":
        """Parse a status name case-insensitively.

        Raises:
            ValueError: If the value is not a known status
        """
        return cls(value.strip().upper())


class OrderItem(BaseModel):
    """A single line of an order with its price frozen at creation time."""

    model_config = ConfigDict(frozen=True)

    menu_item_id: int = Field(..., description="Menu item this line refers to")
    menu_item_name: str = Field(..., description="Menu item name at order time")
    quantity: int = Field(..., description="Number of units ordered", gt=0)
    unit_price: Decimal = Field(..., description="Unit price snapshot", ge=0)
    total_price: Decimal = Field(..., description="unit_price * quantity", ge=0)

    @field_validator("unit_price", "total_price")
    @classmethod
    def quantize_money(cls, v: Decimal) -> Decimal:
        """Keep money at a fixed two-digit scale."""
        return v.quantize(PRICE_SCALE)

    @classmethod
    def snapshot(cls, menu_item: MenuItem, quantity: int) -> "OrderItem":
        """Capture the menu item's current price into a new order line.

        Args:
            menu_item: Catalog item being ordered
            quantity: Number of units

        Returns:
            OrderItem: Line whose price no longer follows the catalog
        """
        return cls(
            menu_item_id=menu_item.menu_item_id,
            menu_item_name=menu_item.name,
            quantity=quantity,
            unit_price=menu_item.price,
            total_price=menu_item.price * quantity,
        )

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to the map stored inside the order item."""
        return {
            "menu_item_id": self.menu_item_id,
            "menu_item_name": self.menu_item_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "OrderItem":
        """Create OrderItem from a stored map."""
        return cls(
            menu_item_id=int(item["menu_item_id"]),
            menu_item_name=item["menu_item_name"],
            quantity=int(item["quantity"]),
            unit_price=Decimal(str(item["unit_price"])),
            total_price=Decimal(str(item["total_price"])),
        )


def calculate_total_amount(items: list[OrderItem]) -> Decimal:
    """Sum line totals with exact decimal arithmetic."""
    return sum((item.total_price for item in items), Decimal("0")).quantize(PRICE_SCALE)


class Order(BaseModel):
    """Order aggregate.

    Stored in DynamoDB with order_id as partition key. The customer fields are
    a snapshot taken when the order was placed, so reads never need a join.
    """

    order_id: str = Field(..., description="Short external order identifier")
    customer_id: str = Field(..., description="Owning customer")
    customer_name: str = Field(..., description="Customer name at order time")
    customer_phone: str = Field(..., description="Customer phone at order time")
    status: OrderStatus = Field(default=OrderStatus.PENDING, description="Current status")
    total_amount: Decimal = Field(..., description="Sum of line totals", ge=0)
    items: list[OrderItem] = Field(..., description="Order lines in insertion order", min_length=1)
    ordered_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last modification timestamp")

    @field_validator("total_amount")
    @classmethod
    def quantize_total(cls, v: Decimal) -> Decimal:
        """Keep the total at a fixed two-digit scale."""
        return v.quantize(PRICE_SCALE)

    @classmethod
    def place(
        cls,
        order_id: str,
        customer: Customer,
        items: list[OrderItem],
        ordered_at: datetime,
    ) -> "Order":
        """Build a new PENDING order whose total is derived from its items.

        Args:
            order_id: Generated order identifier
            customer: Owning customer
            items: Validated order lines
            ordered_at: Creation timestamp, also used as updated_at

        Returns:
            Order: Aggregate ready to be persisted
        """
        return cls(
            order_id=order_id,
            customer_id=customer.customer_id,
            customer_name=customer.name,
            customer_phone=customer.phone_number,
            status=OrderStatus.PENDING,
            total_amount=calculate_total_amount(items),
            items=list(items),
            ordered_at=ordered_at,
            updated_at=ordered_at,
        )

    def with_order_id(self, order_id: str) -> "Order":
        """Return a copy of this order under a different id."""
        return self.model_copy(update={"order_id": order_id})

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "order_id": self.order_id,
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "status": self.status.value,
            "total_amount": self.total_amount,
            "items": [item.to_dynamodb_item() for item in self.items],
            "ordered_at": self.ordered_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Order":
        """Create Order from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Order: Parsed model instance
        """
        return cls(
            order_id=item["order_id"],
            customer_id=item["customer_id"],
            customer_name=item["customer_name"],
            customer_phone=item["customer_phone"],
            status=OrderStatus(item["status"]),
            total_amount=Decimal(str(item["total_amount"])),
            items=[OrderItem.from_dynamodb_item(line) for line in item["items"]],
            ordered_at=datetime.fromisoformat(item["ordered_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )
