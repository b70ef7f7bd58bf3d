"""
Core exceptions for the petclinic-core package.

This module defines the exception hierarchy raised by the query layer and
the repository facades built on top of it.
"""

import logging
import time
from typing import Any, Dict, Optional


class PetClinicException(Exception):
    """
    Base exception class for all petclinic-core exceptions.

    Provides a consistent interface for error handling across the package.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": time.time(),
        }

    def log_error(
        self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR
    ) -> None:
        """
        Log the exception with appropriate level and context.

        Args:
            logger: Logger instance to use (creates default if None)
            level: Logging level to use
        """
        if logger is None:
            logger = logging.getLogger(__name__)

        log_data = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

        logger.log(
            level,
            f"Exception occurred: {self.message}",
            extra={"exception_data": log_data},
        )

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class QueryError(PetClinicException):
    """
    Exception raised when a query request is malformed.

    Covers missing or unknown sort keys, invalid page bounds and nested fetch
    specs whose correlation column is not part of the parent projection.
    These are caller errors and are never retried.
    """

    def __init__(
        self,
        message: str = "Invalid query",
        reason: Optional[str] = None,
        column: Optional[str] = None,
    ):
        """
        Initialize query exception.

        Args:
            message: Error message
            reason: Short machine-readable reason (e.g. "empty_sort_keys")
            column: Name of the offending column, if any
        """
        details: Dict[str, Any] = {}
        if reason:
            details["reason"] = reason
        if column:
            details["column"] = column

        super().__init__(
            message=message,
            error_code="QUERY_ERROR",
            details=details,
        )

    @property
    def reason(self) -> Optional[str]:
        return self.details.get("reason")


class StoreError(PetClinicException):
    """Exception raised when the backing store fails to execute a statement."""

    def __init__(
        self,
        message: str = "Data store operation failed",
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """
        Initialize store exception.

        Args:
            message: Error message
            operation: Description of the failed operation
            original_error: Original exception raised by the driver
        """
        details: Dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if original_error is not None:
            details["original_error"] = str(original_error)

        super().__init__(
            message=message,
            error_code="STORE_ERROR",
            details=details,
        )
        self.original_error = original_error


def create_error_response(
    exception: PetClinicException, include_debug: bool = False
) -> Dict[str, Any]:
    """
    Create a standardized error response from an exception.

    Args:
        exception: The exception to format
        include_debug: Whether to include the module and class of the error

    Returns:
        Standardized error response dictionary
    """
    response: Dict[str, Any] = {
        "success": False,
        "error": {
            "type": exception.__class__.__name__,
            "code": exception.error_code,
            "message": exception.message,
        },
    }

    if exception.details:
        response["error"]["details"] = exception.details

    if include_debug:
        response["debug"] = {
            "module": exception.__class__.__module__,
            "class_name": exception.__class__.__name__,
        }

    return response
