"""Request models for order creation and status updates.

Quantities are plain integers here. Range checks happen in the order service
so that every creation path reports them the same way.
"""

from pydantic import BaseModel, Field


class OrderItemByNameRequest(BaseModel):
    """Order line referring to a menu item by name."""

    menu_item_name: str = Field(..., description="Menu item name, matched case-insensitively")
    quantity: int = Field(..., description="Number of units")


class OrderItemByIdRequest(BaseModel):
    """Order line referring to a menu item by id."""

    menu_item_id: int = Field(..., description="Menu item identifier")
    quantity: int = Field(..., description="Number of units")


class CreateOrderByNameRequest(BaseModel):
    """Request body for creating an order from menu item names."""

    customer_phone: str | None = Field(None, description="Registered customer phone number")
    items: list[OrderItemByNameRequest] = Field(default_factory=list)


class CreateOrderByIdRequest(BaseModel):
    """Request body for creating an order from menu item ids."""

    customer_phone: str | None = Field(None, description="Registered customer phone number")
    order_items: list[OrderItemByIdRequest] = Field(default_factory=list)


class UpdateStatusRequest(BaseModel):
    """Request body for changing an order's status."""

    status: str = Field(..., min_length=1, description="Target status name, any case")
