"""
Base Service Interface

Async services (the strategy service) inherit from BaseService.
The pure pipeline stages are plain functions and only share the
exception hierarchy below.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for async services.

    Each service:
    - Has a defined input type
    - Has a defined output type
    - Can check its health
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging and error reports."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Execute the service's main function.

        Args:
            input_data: Request conforming to InputT

        Returns:
            Output conforming to OutputT

        Raises:
            ServiceError: If execution fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if service is healthy and can process requests."""
        pass


class ServiceError(Exception):
    """Base exception for service and pipeline errors."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")

    def to_detail(self) -> dict:
        """Error payload for API responses."""
        return {"service": self.service_name, "message": self.message, **self.details}


class ValidationError(ServiceError):
    """Input rejected before analysis."""
    pass


class InvalidCandleSequenceError(ValidationError):
    """Candle sequence is empty or its timestamps are not strictly increasing."""
    pass


class InsufficientDataError(ValidationError):
    """Fewer candles than the calling layer requires for a meaningful signal."""
    pass


class DataProviderError(ServiceError):
    """Market data collaborator failed to deliver candles."""
    pass
