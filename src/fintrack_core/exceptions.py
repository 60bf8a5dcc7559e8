"""Custom exceptions for the fintrack analytics engine.

This module provides a hierarchy of exception classes for consistent error
handling across the engine. All exceptions inherit from FintrackError,
making it easy to catch all engine-specific errors at an operation boundary.

Example:
    try:
        summary = aggregator.sum_by_type(user_id, window)
    except DataAccessError as e:
        if e.recoverable:
            # Degrade to an empty summary for advisory callers
            summary = empty_summary()
        else:
            raise
    except FintrackError as e:
        logger.error("analysis_failed", error=str(e))
"""

from typing import Any, Optional


class FintrackError(Exception):
    """Base exception for all fintrack engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the caller can degrade instead of failing.

    Example:
        >>> raise FintrackError("Something went wrong", details={"user_id": "u1"})
        FintrackError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize FintrackError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error can be absorbed by returning a
                degraded result. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class DataAccessError(FintrackError):
    """Error raised when a read against the finance store fails.

    Attributes:
        operation: The store method that failed (e.g. "list_transactions").
        user_id: The user whose data was being read (if known).

    Example:
        >>> raise DataAccessError(
        ...     "Transaction query failed",
        ...     operation="list_transactions",
        ...     user_id="u1",
        ... )
        DataAccessError: Transaction query failed
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize DataAccessError.

        Args:
            message: Human-readable error description.
            operation: Name of the store operation that failed.
            user_id: Identifier of the user whose data was requested.
            details: Optional dictionary with additional context.
            recoverable: Defaults to True since advisory operations can
                fall back to a default answer.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.operation = operation
        self.user_id = user_id

        if operation:
            self.details["operation"] = operation
        if user_id:
            self.details["user_id"] = user_id


class AnalysisError(FintrackError):
    """Error raised when an aggregation or statistical step fails.

    Attributes:
        component: The analytics component that failed (e.g. "forecaster").
        step: The computation step being attempted.
    """

    def __init__(
        self,
        message: str,
        *,
        component: Optional[str] = None,
        step: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize AnalysisError.

        Args:
            message: Human-readable error description.
            component: Name of the component that raised the error.
            step: The specific computation step.
            details: Optional dictionary with additional context.
            recoverable: Defaults to True; analytics are advisory.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.component = component
        self.step = step

        if component:
            self.details["component"] = component
        if step:
            self.details["step"] = step


class ConfigurationError(FintrackError):
    """Error raised when engine configuration is invalid.

    Configuration errors are not recoverable: a misconfigured engine would
    produce wrong advice rather than degraded advice.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Raised by :func:`fintrack_core.config.load_config` when a setting from
    the environment or ``.env`` fails validation.

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid configuration: Input should be greater than 0",
        ...     config_key="high_threshold",
        ...     actual="0",
        ... )
        ConfigurationError: Invalid configuration: Input should be greater than 0
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "FintrackError",
    "DataAccessError",
    "AnalysisError",
    "ConfigurationError",
]
