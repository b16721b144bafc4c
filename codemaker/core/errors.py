"""Error logging decorators for service operations."""

import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from codemaker.core.client import UnauthorizedError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

UNAUTHORIZED_MESSAGE = (
    "Unauthorized request. Configure the API key with "
    "'codemaker config set api_key <key>' or the CODEMAKER_API_KEY "
    "environment variable."
)


def log_unauthorized(error: UnauthorizedError) -> None:
    """Log an authorization failure with the remediation hint."""
    logger.error(UNAUTHORIZED_MESSAGE, exc_info=error)


def log_service_errors(operation_name: str) -> Callable[[F], F]:
    """Decorator that logs failures of an async service operation and re-raises.

    Cancellation passes through untouched.

    Usage:
        @log_service_errors("process assistant completion")
        async def assistant_completion(self, message: str): ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except UnauthorizedError as e:
                log_unauthorized(e)
                raise
            except Exception:
                logger.error(f"Failed to {operation_name}.", exc_info=True)
                raise

        return wrapper

    return decorator
