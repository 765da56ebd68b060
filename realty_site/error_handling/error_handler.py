"""
Error types and handler for the realty site.

Failures are caught at the operation boundary and turned into local state;
the handler logs them with diagnostic context.
"""

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional


# Configure logging
logger = logging.getLogger(__name__)


class RealtySiteError(Exception):
    """Base class for all errors raised by this package."""


class StoreError(RealtySiteError):
    """
    Raised when the external data store rejects or fails a request.

    Attributes:
        status: HTTP status returned by the store (0 when no response arrived)
        message: Error message reported by the store
    """

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        if self.status:
            return f"Store error {self.status}: {self.message}"
        return f"Store error: {self.message}"


class CriteriaError(RealtySiteError):
    """Raised when raw search form input cannot be turned into criteria."""


class ValidationError(RealtySiteError):
    """Raised when a form fails validation; the message is shown to the user."""


class NotAuthorizedError(RealtySiteError):
    """Raised when no admin session exists or the user is not an admin."""


class ErrorHandler:
    """
    Logs failures with context and converts them into fallbacks.

    Nothing here retries: a failed store call is reported once and the
    caller decides what the user sees.
    """

    def __init__(self, component: str = "realty_site"):
        """
        Initialize the handler.

        Args:
            component: Name used to tag log lines from this handler
        """
        self.component = component

    async def fail_open(
        self,
        operation: Callable[..., Awaitable[Any]],
        *args,
        fallback: Any = None,
        level: int = logging.WARNING,
        **kwargs
    ) -> Any:
        """
        Run an async operation, returning ``fallback`` if it raises.

        Args:
            operation: Async callable to execute
            *args: Positional arguments for the operation
            fallback: Value returned when the operation fails
            level: Logging level used for the failure
            **kwargs: Keyword arguments for the operation

        Returns:
            The operation's result, or ``fallback`` on failure
        """
        try:
            return await operation(*args, **kwargs)
        except Exception as e:
            self.log_failure(
                operation_name=getattr(operation, "__name__", repr(operation)),
                error=e,
                level=level,
                args=args,
                kwargs=kwargs,
            )
            return fallback

    def log_failure(
        self,
        operation_name: str,
        error: Exception,
        level: int = logging.ERROR,
        args: tuple = (),
        kwargs: Optional[dict] = None
    ) -> Dict[str, Any]:
        """
        Log error with timestamp, context, and diagnostic data.

        Args:
            operation_name: Name of the operation that failed
            error: The exception that occurred
            level: Logging level for the summary line
            args: Positional arguments passed to the operation
            kwargs: Keyword arguments passed to the operation

        Returns:
            The context dictionary that was logged
        """
        context = {
            'timestamp': datetime.now().isoformat(),
            'component': self.component,
            'operation': operation_name,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'args': str(args) if args else 'None',
            'kwargs': {k: str(v) for k, v in kwargs.items()} if kwargs else {}
        }

        logger.log(
            level,
            f"Operation failed: {self.component}.{operation_name} | "
            f"Error: {type(error).__name__}: {str(error)}"
        )
        logger.debug(f"Full error context: {context}")
        return context
