"""Client bindings for the Schema Registry REST API."""

from __future__ import annotations

from .client import MEDIA_TYPE, Registry, SchemaRegistryClient, new, validate_endpoint
from .config import DEFAULT_ENDPOINT, RegistryClientConfig
from .errors import (
    APIError,
    ErrorCode,
    InvalidEndpointError,
    ResponseDecodeError,
    SchemaRegistryError,
    TransportError,
)
from .models import LATEST_VERSION, Compatibility, Config, SubjectSchema

__version__ = "0.1.0"

__all__ = [
    "Registry",
    "SchemaRegistryClient",
    "new",
    "validate_endpoint",
    "MEDIA_TYPE",
    "RegistryClientConfig",
    "DEFAULT_ENDPOINT",
    "SubjectSchema",
    "Compatibility",
    "Config",
    "LATEST_VERSION",
    "ErrorCode",
    "SchemaRegistryError",
    "InvalidEndpointError",
    "TransportError",
    "ResponseDecodeError",
    "APIError",
]
