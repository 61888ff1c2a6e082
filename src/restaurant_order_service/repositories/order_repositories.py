"""DynamoDB repository for order aggregates.

Each order, items included, is a single DynamoDB item keyed by order_id.
Creation is a conditional put, so a colliding id is rejected by the store
rather than overwriting an existing order.
"""

import logging
from datetime import datetime
from typing import Any

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_order_service.models.order_models import Order, OrderStatus
from restaurant_order_service.repositories.base import OrderStore
from restaurant_order_service.services.errors import ConflictError, InternalError

logger = logging.getLogger(__name__)

CUSTOMER_PHONE_INDEX = "customer_phone-index"
STATUS_INDEX = "status-index"


def ordered_sort_key(order: Order) -> str:
    """Sort key used by both GSIs: creation time, then order id."""
    return f"{order.ordered_at.isoformat(timespec='microseconds')}#{order.order_id}"


def is_conditional_check_failure(error: ClientError) -> bool:
    """Whether a ClientError came from a failed ConditionExpression."""
    return error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


class OrderRepository(OrderStore):
    """Repository for order CRUD operations.

    Table layout:
        partition key ``order_id``
        GSI ``customer_phone-index``: customer_phone / ordered_key
        GSI ``status-index``: status / ordered_key
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def save_order(self, order: Order) -> Order:
        """Write a new order and all of its items in one conditional put.

        Args:
            order: Order aggregate to persist

        Returns:
            Order: The persisted order

        Raises:
            ConflictError: If the order id is already taken
            InternalError: On any other DynamoDB failure
        """
        item = order.to_dynamodb_item()
        item["ordered_key"] = ordered_sort_key(order)

        try:
            self.table.put_item(
                Item=item,
                ConditionExpression="attribute_not_exists(order_id)",
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                logger.warning(f"Order id {order.order_id} already exists")
                raise ConflictError(f"order id {order.order_id} already exists") from e
            logger.error(f"Failed to save order {order.order_id}: {e}")
            raise InternalError("failed to save order") from e

        return order

    def find_order_by_id(self, order_id: str) -> Order | None:
        """Retrieve an order by id.

        Args:
            order_id: Order identifier

        Returns:
            Order if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"order_id": order_id})
        except ClientError as e:
            logger.error(f"Failed to get order {order_id}: {e}")
            raise InternalError("failed to read order") from e

        if "Item" not in response:
            return None

        return Order.from_dynamodb_item(response["Item"])

    def find_orders_by_customer_phone(self, phone_number: str) -> list[Order]:
        """List all orders placed with a phone number, oldest first."""
        items = self._query_all(
            IndexName=CUSTOMER_PHONE_INDEX,
            KeyConditionExpression="customer_phone = :phone",
            ExpressionAttributeValues={":phone": phone_number},
        )
        return [Order.from_dynamodb_item(item) for item in items]

    def find_latest_order_by_customer_phone(self, phone_number: str) -> Order | None:
        """Return the newest order for a phone number.

        The index sort key is ``<ordered_at>#<order_id>``, so equal timestamps
        fall back to the higher order id.
        """
        try:
            response = self.table.query(
                IndexName=CUSTOMER_PHONE_INDEX,
                KeyConditionExpression="customer_phone = :phone",
                ExpressionAttributeValues={":phone": phone_number},
                ScanIndexForward=False,  # Most recent first
                Limit=1,
            )
        except ClientError as e:
            logger.error(f"Failed to query latest order for {phone_number}: {e}")
            raise InternalError("failed to read orders") from e

        items = response.get("Items", [])
        if not items:
            return None

        return Order.from_dynamodb_item(items[0])

    def find_all_orders(self) -> list[Order]:
        """List every order in the table."""
        items: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {}

        try:
            while True:
                response = self.table.scan(**kwargs)
                items.extend(response.get("Items", []))
                if "LastEvaluatedKey" not in response:
                    break
                kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        except ClientError as e:
            logger.error(f"Failed to scan orders: {e}")
            raise InternalError("failed to read orders") from e

        return [Order.from_dynamodb_item(item) for item in items]

    def find_orders_by_status(self, status: OrderStatus) -> list[Order]:
        """List all orders currently in a status, oldest first."""
        items = self._query_all(
            IndexName=STATUS_INDEX,
            KeyConditionExpression="#status = :status",
            ExpressionAttributeNames={"#status": "status"},
            ExpressionAttributeValues={":status": status.value},
        )
        return [Order.from_dynamodb_item(item) for item in items]

    def count_orders_by_status(self, status: OrderStatus) -> int:
        """Count orders currently in a status."""
        count = 0
        kwargs: dict[str, Any] = {
            "IndexName": STATUS_INDEX,
            "KeyConditionExpression": "#status = :status",
            "ExpressionAttributeNames": {"#status": "status"},
            "ExpressionAttributeValues": {":status": status.value},
            "Select": "COUNT",
        }

        try:
            while True:
                response = self.table.query(**kwargs)
                count += response.get("Count", 0)
                if "LastEvaluatedKey" not in response:
                    break
                kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        except ClientError as e:
            logger.error(f"Failed to count orders with status {status.value}: {e}")
            raise InternalError("failed to count orders") from e

        return count

    def update_status(
        self, order_id: str, status: OrderStatus, updated_at: datetime
    ) -> Order | None:
        """Set status and updated_at on an existing order.

        The update is conditional on the order existing, so a missing id never
        creates a partial item.

        Args:
            order_id: Order identifier
            status: New status
            updated_at: Modification timestamp

        Returns:
            The updated Order, or None if no order has this id
        """
        try:
            response = self.table.update_item(
                Key={"order_id": order_id},
                UpdateExpression="SET #status = :status, updated_at = :updated_at",
                ConditionExpression="attribute_exists(order_id)",
                ExpressionAttributeNames={"#status": "status"},
                ExpressionAttributeValues={
                    ":status": status.value,
                    ":updated_at": updated_at.isoformat(),
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if is_conditional_check_failure(e):
                return None
            logger.error(f"Failed to update status for order {order_id}: {e}")
            raise InternalError("failed to update order status") from e

        return Order.from_dynamodb_item(response["Attributes"])

    def _query_all(self, **kwargs: Any) -> list[dict[str, Any]]:
        """Run a query and follow pagination until exhausted."""
        items: list[dict[str, Any]] = []

        try:
            while True:
                response = self.table.query(**kwargs)
                items.extend(response.get("Items", []))
                if "LastEvaluatedKey" not in response:
                    break
                kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        except ClientError as e:
            logger.error(f"Failed to query orders on {kwargs.get('IndexName')}: {e}")
            raise InternalError("failed to read orders") from e

        return items
