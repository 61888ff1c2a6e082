"""Shared dependency factory for the Lambda handler.

Dependencies are created once and reused across invocations within the same
Lambda container to keep warm starts cheap.
"""

import logging
import os
from typing import Any

from fastapi import FastAPI

from restaurant_order_service.dependencies import create_dynamodb_resource, create_order_service
from restaurant_order_service.handlers.api_handler import create_app
from restaurant_order_service.observability import configure_logging, setup_observability
from restaurant_order_service.services.order_service import OrderService

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_dynamodb_resource: Any | None = None
_order_service: OrderService | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource."""
    global _dynamodb_resource

    if _dynamodb_resource is None:
        _dynamodb_resource = create_dynamodb_resource()

    return _dynamodb_resource


def get_order_service() -> OrderService:
    """Create or retrieve cached order service."""
    global _order_service

    if _order_service is None:
        _order_service = create_order_service(get_dynamodb_resource())
        logger.info("Order service initialized")

    return _order_service


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application."""
    global _fastapi_app

    if _fastapi_app is None:
        _fastapi_app = create_app(order_service=get_order_service())
        setup_observability(_fastapi_app)
        logger.info("FastAPI application initialized")

    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging.

    Should be called once during Lambda cold start.
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
