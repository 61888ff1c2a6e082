"""Main application entry point for the restaurant order service.

This module provides the FastAPI application factory for running the service
locally or behind a process manager.
"""

import logging
import os

from fastapi import FastAPI

from restaurant_order_service.dependencies import create_dynamodb_resource, create_order_service
from restaurant_order_service.handlers.api_handler import create_app
from restaurant_order_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the DynamoDB resource and repositories
    3. Creates the order service
    4. Creates the FastAPI app and sets up observability

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing restaurant order service...")

    order_service = create_order_service(create_dynamodb_resource())
    app = create_app(order_service=order_service)
    setup_observability(app)

    logger.info("Restaurant order service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
