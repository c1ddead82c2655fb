"""
Custom exception classes for the indicator store.

This module defines domain-specific exceptions that separate structural
failures (an indicator template that was never registered) from
computational ones (an indicator's calculation misbehaving).

Structural errors propagate to the caller. Computational errors are caught
per instance by the recompute path and reported as boolean flags.
"""


class IndicatorStoreError(Exception):
    """
    Base exception for indicator store errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize IndicatorStoreError.

        Args:
            message: Error description.
            context: Optional dictionary with error details.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class UnknownTemplateError(IndicatorStoreError):
    """
    Raised when an indicator is requested whose template was never registered.

    Attributes:
        name: Name of the unknown template.
        available: Names of the registered templates.

    Examples:
        >>> raise UnknownTemplateError("BOLL", available=["MA", "VOL"])
        Traceback (most recent call last):
        ...
        UnknownTemplateError: Unknown indicator template 'BOLL'. Available: MA, VOL
    """

    def __init__(self, name: str, available: list[str] | None = None):
        """
        Initialize UnknownTemplateError.

        Args:
            name: Name of the unknown template.
            available: Registered template names, if known.
        """
        self.name = name
        self.available = list(available or [])
        listing = ", ".join(sorted(self.available)) or "none"
        super().__init__(
            f"Unknown indicator template '{name}'. Available: {listing}"
        )


class CalculationError(IndicatorStoreError):
    """
    Raised by an indicator calculation that cannot produce a result.

    Built-in calculations raise it for unusable input (missing columns,
    invalid periods). The recompute path catches it, logs it and reports
    the recomputation as failed; the instance keeps its previous result.

    Attributes:
        indicator_name: Name of the indicator whose calculation failed.
    """

    def __init__(self, message: str, indicator_name: str | None = None):
        """
        Initialize CalculationError.

        Args:
            message: Error description.
            indicator_name: Name of the failing indicator, if known.
        """
        context = {"indicator": indicator_name} if indicator_name else None
        super().__init__(message, context=context)
        self.indicator_name = indicator_name


class CalculationTimeoutError(CalculationError):
    """
    Raised when an indicator calculation exceeds the configured deadline.

    Attributes:
        timeout: Deadline in seconds that was exceeded.
    """

    def __init__(self, indicator_name: str, timeout: float):
        """
        Initialize CalculationTimeoutError.

        Args:
            indicator_name: Name of the indicator that timed out.
            timeout: Deadline in seconds.
        """
        super().__init__(
            f"Calculation timed out after {timeout}s",
            indicator_name=indicator_name,
        )
        self.timeout = timeout
