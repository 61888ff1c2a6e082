"""Custom metrics for the restaurant order service."""

from decimal import Decimal

from opentelemetry import metrics

# Get meter for order service
meter = metrics.get_meter("order-svc")

orders_created_counter = meter.create_counter(
    name="orders_created_total",
    description="Total number of orders created by creation path",
    unit="1",
)

orders_rejected_counter = meter.create_counter(
    name="orders_rejected_total",
    description="Total number of order requests rejected by error kind",
    unit="1",
)

order_id_conflict_counter = meter.create_counter(
    name="order_id_conflicts_total",
    description="Total number of generated order ids rejected as duplicates",
    unit="1",
)

status_change_counter = meter.create_counter(
    name="order_status_changes_total",
    description="Total number of order status updates by target status",
    unit="1",
)

order_total_histogram = meter.create_histogram(
    name="order_total_amount",
    description="Total amount of created orders",
    unit="1",
)


def record_order_created(path: str, total_amount: Decimal) -> None:
    """Record a successfully created order.

    Args:
        path: Creation path ("by_name" or "by_id")
        total_amount: Order total
    """
    orders_created_counter.add(1, {"path": path})
    order_total_histogram.record(float(total_amount), {"path": path})


def record_order_rejected(path: str, error_kind: str) -> None:
    """Record an order request that failed.

    Args:
        path: Creation path ("by_name" or "by_id")
        error_kind: Kind of the raised error
    """
    orders_rejected_counter.add(1, {"path": path, "error_kind": error_kind})


def record_order_id_conflict() -> None:
    """Record a generated order id that was already taken."""
    order_id_conflict_counter.add(1)


def record_status_change(status: str) -> None:
    """Record an order status update.

    Args:
        status: The new status
    """
    status_change_counter.add(1, {"status": status})
