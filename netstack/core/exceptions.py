"""
Exception hierarchy for netstack planning.

Every planning failure is fatal for the provisioning run: nothing is declared
once one of these is raised. All exceptions carry a details dict for logging.

Dependencies: None (pure domain layer)
"""

from typing import Any


class NetstackError(Exception):
    """Base exception for all netstack errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class PlanningError(NetstackError):
    """Base exception for network planning and graph construction failures."""

    pass


class AddressSpaceExhausted(PlanningError):
    """Raised when a subnet block would fall outside the usable address range."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        tier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if index is not None:
            details["index"] = index
        if tier is not None:
            details["tier"] = tier
        super().__init__(message, details)


class NoZonesAvailable(PlanningError):
    """Raised when the region reports no usable availability zones."""

    def __init__(self, region: str | None = None, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        if region:
            details["region"] = region
        super().__init__("No availability zones available", details)


class InsufficientPrivateSubnets(PlanningError):
    """Raised when the database tier is requested without a private subnet."""

    pass


class InsufficientPublicSubnets(PlanningError):
    """Raised when the compute tier is requested without a public subnet."""

    pass


class InvalidNetworkConfig(PlanningError):
    """Raised when network settings break a range or cardinality invariant."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DependencyResolutionFailure(PlanningError):
    """Raised when a required upstream reference cannot be resolved."""

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if resource:
            details["resource"] = resource
        super().__init__(message, details)
