"""
Centralized error handling for backend calls made from views.

Every call site converts backend failures into a toast and a fallback
value; nothing is retried. A 401 is re-raised so the app-level handler can
end the session and send the user to the login page.
"""

import logging
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from portal.notifications import Notifier, toast_error, toast_success
from portal.services.base import ApiError, ApiHTTPError, ApiTransportError

T = TypeVar("T")


def describe_error(error: ApiError, default: str) -> str:
    """User-facing text for a backend failure."""
    if isinstance(error, ApiTransportError):
        return "Network error. Please check your connection and try again."
    if isinstance(error, ApiHTTPError) and error.message and not error.message.startswith("Request failed"):
        return error.message
    return default


def safe_api_call(
    func: Callable[..., T],
    *args,
    operation_name: str = "backend call",
    error_message: Optional[str] = None,
    fallback: T = None,
    logger: Optional[logging.Logger] = None,
    notify: Notifier = toast_error,
    **kwargs,
) -> T:
    """
    Execute a backend call, converting ApiError into a toast and fallback.

    Usage:
        jobs = safe_api_call(
            jobs_service.get_active_job_listings,
            operation_name="load active jobs",
            error_message="Failed to load jobs",
            fallback=[],
        )
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    try:
        return func(*args, **kwargs)
    except ApiError as e:
        if isinstance(e, ApiHTTPError) and e.is_unauthorized:
            raise
        logger.warning(f"[{operation_name}] Failed: {e}")
        notify(describe_error(e, error_message or f"Failed to {operation_name}"))
        return fallback


def api_operation(
    operation_name: str,
    error_message: Optional[str] = None,
    fallback_value: Any = None,
    success_message: Optional[str] = None,
):
    """
    Decorator form of safe_api_call for helpers that only talk to the backend.

    Usage:
        @api_operation("update offer status", error_message="Failed to update offer")
        def _respond(service, offer_id, status):
            return service.update_offer_status(offer_id, status)
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            logger = logging.getLogger(func.__module__)
            sentinel = object()
            result = safe_api_call(
                func,
                *args,
                operation_name=operation_name,
                error_message=error_message,
                fallback=sentinel,
                logger=logger,
                **kwargs,
            )
            if result is sentinel:
                return fallback_value
            if success_message:
                toast_success(success_message)
            logger.info(f"[{operation_name}] completed")
            return result

        return wrapper

    return decorator
