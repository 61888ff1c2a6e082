"""OpenTelemetry tracing decorators."""

import asyncio
import functools
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable[..., Any])


def _record_failure(span: Span, error: Exception) -> None:
    span.set_attribute("success", False)
    span.set_attribute("error.type", type(error).__name__)
    span.set_attribute("error.message", str(error))
    # Domain errors carry a kind that maps to an HTTP status
    kind = getattr(error, "kind", None)
    if kind is not None:
        span.set_attribute("error.kind", kind)
    span.record_exception(error)


def traced(span_name: str | None = None, service_name: str = "order-svc") -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a function.

    Creates a new span around the decorated function and records the outcome
    on it. Sync and async functions are both supported.

    Args:
        span_name: Name for the span (defaults to function name if not provided)
        service_name: Service name for span attributes

    Returns:
        Decorated function with tracing

    Example:
        @traced("order.create_by_name")
        async def create_order_by_name(self, customer_phone, items) -> Order:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with tracer.start_as_current_span(name) as span:
                    span.set_attribute("service.name", service_name)
                    span.set_attribute("function.name", func.__name__)
                    try:
                        result = await func(*args, **kwargs)
                    except Exception as e:
                        _record_failure(span, e)
                        raise
                    span.set_attribute("success", True)
                    return result

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(name) as span:
                span.set_attribute("service.name", service_name)
                span.set_attribute("function.name", func.__name__)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        return sync_wrapper  # type: ignore

    return decorator
