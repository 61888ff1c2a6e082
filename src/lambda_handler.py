"""AWS Lambda handler for API Gateway requests.

API Gateway events are passed to the FastAPI application through the Mangum
ASGI adapter.
"""

import logging
import os
from typing import Any

from mangum import Mangum

from lambda_dependencies import get_fastapi_app, initialize_lambda_environment

# Initialize Lambda environment during cold start (skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()

logger = logging.getLogger(__name__)

# Create FastAPI app and Mangum adapter (cached for warm starts, skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    mangum_handler = Mangum(get_fastapi_app(), lifespan="off")
else:
    mangum_handler = None  # type: ignore


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point for API Gateway requests.

    Args:
        event: The API Gateway event payload
        context: The Lambda context object

    Returns:
        API Gateway response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    try:
        result: dict[str, Any] = mangum_handler(event, context)
        return result
    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "body": "Internal server error",
        }
