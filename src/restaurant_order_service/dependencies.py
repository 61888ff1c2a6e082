"""Factories that build the service graph from environment configuration."""

import logging
import os
from typing import Any

import boto3

from restaurant_order_service.repositories.catalog_repositories import (
    CustomerRepository,
    MenuItemRepository,
)
from restaurant_order_service.repositories.order_repositories import OrderRepository
from restaurant_order_service.services.order_service import (
    DEFAULT_MAX_CREATE_ATTEMPTS,
    OrderService,
)

logger = logging.getLogger(__name__)


def create_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # Local DynamoDB - credentials come from the environment
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # Production - boto3 will use default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=region)


def create_order_service(dynamodb_resource: Any) -> OrderService:
    """Wire repositories into an OrderService using table names from the environment.

    Args:
        dynamodb_resource: Boto3 DynamoDB resource

    Returns:
        Configured OrderService

    Raises:
        ValueError: If ORDER_ID_MAX_ATTEMPTS is not a positive integer
    """
    orders_table = os.getenv("DYNAMODB_ORDERS_TABLE", "restaurant-orders")
    customers_table = os.getenv("DYNAMODB_CUSTOMERS_TABLE", "restaurant-customers")
    menu_items_table = os.getenv("DYNAMODB_MENU_ITEMS_TABLE", "restaurant-menu-items")
    max_attempts = int(os.getenv("ORDER_ID_MAX_ATTEMPTS", str(DEFAULT_MAX_CREATE_ATTEMPTS)))

    logger.info(
        f"Repositories configured - orders: {orders_table}, customers: {customers_table}, "
        f"menu items: {menu_items_table}"
    )

    return OrderService(
        order_repository=OrderRepository(dynamodb_resource, orders_table),
        customer_directory=CustomerRepository(dynamodb_resource, customers_table),
        menu_catalog=MenuItemRepository(dynamodb_resource, menu_items_table),
        max_create_attempts=max_attempts,
    )
