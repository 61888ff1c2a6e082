"""DynamoDB lookups for the customer directory and the menu catalog.

The order service only reads these tables. Registering customers and editing
the menu belong to other services.
"""

import logging

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from restaurant_order_service.models.catalog_models import Customer, MenuItem
from restaurant_order_service.repositories.base import CustomerDirectory, MenuCatalog
from restaurant_order_service.services.errors import InternalError

logger = logging.getLogger(__name__)

MENU_NAME_INDEX = "name_lower-index"


class CustomerRepository(CustomerDirectory):
    """Customer lookups on a table keyed by phone_number."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def find_by_phone(self, phone_number: str) -> Customer | None:
        """Retrieve a customer by phone number.

        Args:
            phone_number: Customer phone number

        Returns:
            Customer if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"phone_number": phone_number})
        except ClientError as e:
            logger.error(f"Failed to get customer by phone: {e}")
            raise InternalError("failed to read customer") from e

        if "Item" not in response:
            return None

        return Customer.from_dynamodb_item(response["Item"])


class MenuItemRepository(MenuCatalog):
    """Menu item lookups.

    Table keyed by menu_item_id, with a GSI on the lower-cased name for
    case-insensitive lookups.
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

    def find_by_name_case_insensitive(self, name: str) -> MenuItem | None:
        """Retrieve a menu item by name, ignoring case and availability.

        Args:
            name: Menu item name as entered by the customer

        Returns:
            MenuItem if found, None otherwise
        """
        try:
            response = self.table.query(
                IndexName=MENU_NAME_INDEX,
                KeyConditionExpression="name_lower = :name",
                ExpressionAttributeValues={":name": name.lower()},
                Limit=1,
            )
        except ClientError as e:
            logger.error(f"Failed to query menu item by name: {e}")
            raise InternalError("failed to read menu item") from e

        items = response.get("Items", [])
        if not items:
            return None

        return MenuItem.from_dynamodb_item(items[0])

    def find_by_id(self, menu_item_id: int) -> MenuItem | None:
        """Retrieve an available menu item by id.

        Args:
            menu_item_id: Menu item identifier

        Returns:
            MenuItem if found and available, None otherwise
        """
        try:
            response = self.table.get_item(Key={"menu_item_id": menu_item_id})
        except ClientError as e:
            logger.error(f"Failed to get menu item {menu_item_id}: {e}")
            raise InternalError("failed to read menu item") from e

        if "Item" not in response:
            return None

        menu_item = MenuItem.from_dynamodb_item(response["Item"])
        return menu_item if menu_item.available else None
