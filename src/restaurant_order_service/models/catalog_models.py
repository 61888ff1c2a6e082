"""Customer and menu item models.

These models represent records owned by the customer directory and the menu
catalog. The order service only reads them; registration and menu editing
happen elsewhere.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

PRICE_SCALE = Decimal("0.01")


class Customer(BaseModel):
    """Registered customer."""

    customer_id: str = Field(..., description="Unique identifier for the customer")
    name: str = Field(..., min_length=1, description="Customer display name")
    email: str = Field(..., min_length=1, description="Unique email address")
    phone_number: str = Field(..., min_length=1, description="Unique phone number")
    created_at: datetime | None = Field(None, description="Registration timestamp")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Customer":
        """Create Customer from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Customer: Parsed model instance
        """
        data: dict[str, Any] = {
            "customer_id": item["customer_id"],
            "name": item["name"],
            "email": item["email"],
            "phone_number": item["phone_number"],
        }

        if "created_at" in item:
            data["created_at"] = datetime.fromisoformat(item["created_at"])

        return cls(**data)


class MenuItem(BaseModel):
    """Menu item model."""

    menu_item_id: int = Field(..., description="Unique identifier for the menu item")
    name: str = Field(..., description="Item name")
    description: str | None = Field(None, description="Item description")
    price: Decimal = Field(..., description="Item price", ge=0)
    category: str | None = Field(None, description="Menu category")
    available: bool = Field(default=True, description="Whether item is currently available")

    @field_validator("price")
    @classmethod
    def quantize_price(cls, v: Decimal) -> Decimal:
        """Store prices at a fixed two-digit scale."""
        return v.quantize(PRICE_SCALE)

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        DynamoDB returns numbers as Decimal, so the id is converted back to int
        and the price is kept as an exact Decimal.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        return cls(
            menu_item_id=int(item["menu_item_id"]),
            name=item["name"],
            description=item.get("description"),
            price=Decimal(str(item["price"])),
            category=item.get("category"),
            available=bool(item.get("available", False)),
        )
