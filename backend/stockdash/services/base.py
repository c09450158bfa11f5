"""
Base Service Interface

All services inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for all services.

    Each service:
    - Has a defined input type
    - Has a defined output type
    - Can check its health
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the service's main function.

        Args:
            input_data: Validated input conforming to InputT schema

        Returns:
            Output conforming to OutputT schema

        Raises:
            ServiceError: If execution fails
        """
        pass

    async def health_check(self) -> bool:
        """Check if service is healthy and can process requests."""
        return True


class ServiceError(Exception):
    """Base exception for service errors."""

    status_code = 500

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None,
        status_code: Optional[int] = None,
    ):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(f"[{service_name}] {message}")


class ValidationError(ServiceError):
    """Input validation error."""

    status_code = 400


class NotFoundError(ServiceError):
    """Requested record does not exist."""

    status_code = 404


class ConfigurationError(ServiceError):
    """Server is missing required settings."""

    status_code = 500


class ExternalAPIError(ServiceError):
    """External API call failed."""

    status_code = 502
