"""Exceptions raised by the Schema Registry client."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """Error codes documented by the Schema Registry REST API."""
    SUBJECT_NOT_FOUND = 40401
    VERSION_NOT_FOUND = 40402
    SCHEMA_NOT_FOUND = 40403
    INVALID_SCHEMA = 42201
    INVALID_VERSION = 42202
    INVALID_COMPATIBILITY_LEVEL = 42203
    BACKEND_STORE_ERROR = 50001            # Error in the backend data store
    OPERATION_TIMED_OUT = 50002
    FORWARD_TO_MASTER_ERROR = 50003        # Error while forwarding the request to the master


class SchemaRegistryError(Exception):
    """Base exception for Schema Registry client operations."""


class InvalidEndpointError(SchemaRegistryError):
    """Raised when the endpoint URL is not a well-formed absolute URL."""

    def __init__(self, endpoint: object, reason: str):
        super().__init__(f"invalid endpoint URL: {endpoint!r}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class TransportError(SchemaRegistryError):
    """Raised when the HTTP round trip itself fails."""

    def __init__(self, method: str, url: str, cause: BaseException):
        super().__init__(f"error in {method} {url}: {cause}")
        self.method = method
        self.url = url
        self.cause = cause


class ResponseDecodeError(SchemaRegistryError):
    """Raised when a response body cannot be decoded into the expected shape."""

    def __init__(self, message: str, status_code: int, cause: Optional[BaseException] = None):
        super().__init__(f"{message}, status={status_code}")
        self.status_code = status_code
        self.cause = cause


class APIError(SchemaRegistryError):
    """Structured error returned by the Schema Registry.

    ``code`` is the domain error code from the response body, not the HTTP
    status. It is kept as a plain integer because the registry also passes
    raw HTTP statuses (e.g. 409) through as codes.
    """

    def __init__(self, code: int, message: str, status_code: Optional[int] = None):
        super().__init__(f"Schema Registry API error, code: {code} message: {message}")
        self.code = code
        self.message = message
        self.status_code = status_code

    @property
    def error_code(self) -> Optional[ErrorCode]:
        """Documented ``ErrorCode`` for ``code``, or None for undocumented codes."""
        try:
            return ErrorCode(self.code)
        except ValueError:
            return None
