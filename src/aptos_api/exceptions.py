"""Exception hierarchy for the Aptos node API client."""

from typing import Any


class AptosApiError(Exception):
    """Base exception for all Aptos client errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(AptosApiError):
    """Raised when caller-supplied options or arguments are invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class NetworkError(AptosApiError):
    """Raised when the node returns a non-success status or cannot be reached."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class TransactionTimeoutError(AptosApiError):
    """Raised when transactions do not reach a terminal state before the deadline."""

    def __init__(
        self,
        message: str,
        hashes: list[str] | None = None,
        timeout: float | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.hashes = hashes or []
        self.timeout = timeout


class DecodingError(AptosApiError):
    """Raised when a node response does not have the expected shape."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        index: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.index = index


class UnconfiguredClientError(AptosApiError):
    """Raised when an operation needs a collaborator that was not configured."""

    def __init__(self, component: str):
        super().__init__(f"The {component} client is not configured for this network")
        self.component = component
