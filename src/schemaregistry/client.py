"""Schema Registry REST client.

Each operation maps to a single HTTP round trip against the registry's REST
API (see https://docs.confluent.io/platform/current/schema-registry/develop/api.html).
Responses are classified uniformly:

* a failure inside the transport raises :class:`TransportError`;
* HTTP 200 is decoded into the operation's result, and a body that does not
  match the expected shape raises :class:`ResponseDecodeError`;
* any other status is decoded as ``{"error_code", "message"}`` and raised as
  :class:`APIError` carrying the registry's domain code.

Nothing is cached or retried, and a client holds no mutable state after
construction, so a single instance can be shared between threads.
"""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar
from urllib.parse import urlparse

import requests

from .config import RegistryClientConfig
from .errors import APIError, InvalidEndpointError, ResponseDecodeError, TransportError
from .logging import StructuredLogger, create_logger
from .models import Config, SubjectSchema, version_segment

MEDIA_TYPE = "application/vnd.schemaregistry.v1+json"

_T = TypeVar("_T")

# json.loads raises RecursionError on deeply nested documents
_DECODE_ERRORS = (ValueError, KeyError, TypeError, RecursionError)


class Registry(ABC):
    """Operations exposed by a Schema Registry."""

    @abstractmethod
    def get_schema(self, schema_id: int) -> str:
        """Get the schema string identified by the globally unique ``schema_id``."""

    @abstractmethod
    def get_subjects(self) -> List[str]:
        """Get the list of registered subjects."""

    @abstractmethod
    def get_subject_versions(self, subject: str) -> List[int]:
        """Get the versions registered under ``subject``."""

    @abstractmethod
    def get_subject_version(self, subject: str, version: int) -> str:
        """Get a specific version of the schema registered under ``subject``.

        ``LATEST_VERSION`` selects the most recent version.
        """

    @abstractmethod
    def register_subject_schema(self, subject: str, schema: str) -> int:
        """Register ``schema`` under ``subject`` and return its schema id.

        The id is global: registering the same schema under another subject
        returns the same id, possibly with a different version. The schema must
        be compatible with the subject's previous schemas under the configured
        compatibility level (``get_subject_config``, falling back to
        ``get_config``).
        """

    @abstractmethod
    def check_subject_schema(self, subject: str, schema: str) -> SubjectSchema:
        """Return the registration of ``schema`` under ``subject`` if it exists."""

    @abstractmethod
    def test_compatibility(self, subject: str, version: int, schema: str) -> bool:
        """Test ``schema`` against a version of the subject's schema.

        The compatibility level applied is the subject's, or the global level
        when the subject's was never changed.
        """

    @abstractmethod
    def set_config(self, config: Config) -> Config:
        """Update the global compatibility level."""

    @abstractmethod
    def get_config(self) -> Config:
        """Get the global compatibility level."""

    @abstractmethod
    def set_subject_config(self, subject: str, config: Config) -> Config:
        """Update the compatibility level of ``subject``."""

    @abstractmethod
    def get_subject_config(self, subject: str) -> Config:
        """Get the compatibility level of ``subject``."""


def validate_endpoint(endpoint: Any) -> str:
    """Check that ``endpoint`` is an absolute URL and return it without a trailing slash.

    Raises:
        InvalidEndpointError: If the endpoint is not a well-formed absolute URL
    """
    if not isinstance(endpoint, str):
        raise InvalidEndpointError(endpoint, "endpoint must be a string")
    try:
        parsed = urlparse(endpoint)
        # Accessing the port validates it
        parsed.port
    except ValueError as exc:
        raise InvalidEndpointError(endpoint, str(exc)) from exc
    if not parsed.scheme:
        raise InvalidEndpointError(endpoint, "missing URL scheme")
    if not parsed.netloc or not parsed.hostname:
        raise InvalidEndpointError(endpoint, "missing host")
    if any(ch.isspace() for ch in endpoint):
        raise InvalidEndpointError(endpoint, "URL contains whitespace")
    return endpoint.rstrip("/")


class SchemaRegistryClient(Registry):
    """Default :class:`Registry` implementation backed by ``requests``."""

    def __init__(
        self,
        endpoint: str,
        *,
        session: Optional[requests.Session] = None,
        timeout_seconds: Optional[float] = None,
        auth: Optional[Tuple[str, str]] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        """Initialize a client for the registry at ``endpoint``.

        No request is sent until an operation is called.

        Args:
            endpoint: Absolute base URL of the registry
            session: HTTP transport to use; a new ``requests.Session`` otherwise
            timeout_seconds: Timeout forwarded to every request
            auth: Basic auth credentials installed on a session created here
            logger: Structured logger for API call events

        Raises:
            InvalidEndpointError: If ``endpoint`` is not a well-formed absolute URL
        """
        self._endpoint = validate_endpoint(endpoint)
        self._timeout_seconds = timeout_seconds
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            if auth is not None:
                session.auth = auth
        self._session = session
        self._logger = logger or create_logger("client")

    @classmethod
    def from_config(
        cls,
        config: RegistryClientConfig,
        *,
        session: Optional[requests.Session] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> "SchemaRegistryClient":
        auth = (config.username, config.password) if config.has_credentials else None
        return cls(
            config.endpoint,
            session=session,
            timeout_seconds=config.timeout_seconds,
            auth=auth,
            logger=logger,
        )

    @classmethod
    def from_env(cls, *, logger: Optional[StructuredLogger] = None) -> "SchemaRegistryClient":
        return cls.from_config(RegistryClientConfig.from_env(), logger=logger)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(endpoint={self._endpoint!r})"

    def __enter__(self) -> "SchemaRegistryClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session if it was created by this client."""
        if self._owns_session:
            self._session.close()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def get_schema(self, schema_id: int) -> str:
        return self._call(
            "get_schema",
            "GET",
            f"/schemas/ids/{schema_id}",
            decode=_decode_schema_string,
        )

    def get_subjects(self) -> List[str]:
        return self._call("get_subjects", "GET", "/subjects", decode=_decode_subjects)

    def get_subject_versions(self, subject: str) -> List[int]:
        return self._call(
            "get_subject_versions",
            "GET",
            f"/subjects/{subject}/versions",
            decode=_decode_versions,
        )

    def get_subject_version(self, subject: str, version: int) -> str:
        return self._call(
            "get_subject_version",
            "GET",
            f"/subjects/{subject}/versions/{version_segment(version)}",
            decode=_decode_schema_string,
        )

    def register_subject_schema(self, subject: str, schema: str) -> int:
        return self._call(
            "register_subject_schema",
            "POST",
            f"/subjects/{subject}/versions",
            payload={"schema": schema},
            decode=_decode_schema_id,
        )

    def check_subject_schema(self, subject: str, schema: str) -> SubjectSchema:
        return self._call(
            "check_subject_schema",
            "POST",
            f"/subjects/{subject}",
            payload={"schema": schema},
            decode=SubjectSchema.from_dict,
        )

    def test_compatibility(self, subject: str, version: int, schema: str) -> bool:
        return self._call(
            "test_compatibility",
            "POST",
            f"/subjects/{subject}/versions/{version_segment(version)}",
            payload={"schema": schema},
            decode=_decode_is_compatible,
        )

    def set_config(self, config: Config) -> Config:
        return self._call("set_config", "PUT", "/config", payload=config.to_dict(), decode=Config.from_dict)

    def get_config(self) -> Config:
        return self._call("get_config", "GET", "/config", decode=Config.from_dict)

    def set_subject_config(self, subject: str, config: Config) -> Config:
        return self._call(
            "set_subject_config",
            "PUT",
            f"/config/{subject}",
            payload=config.to_dict(),
            decode=Config.from_dict,
        )

    def get_subject_config(self, subject: str) -> Config:
        return self._call("get_subject_config", "GET", f"/config/{subject}", decode=Config.from_dict)

    # ------------------------------------------------------------------
    # Request/response handling
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._endpoint}{path}"

    def _call(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        decode: Callable[[Any], _T],
        payload: Optional[Mapping[str, Any]] = None,
    ) -> _T:
        """Perform one round trip and classify the response.

        Raises:
            TransportError: If the request could not be completed
            APIError: If the registry answered with a non-200 status
            ResponseDecodeError: If a response body had an unexpected shape
        """
        url = self._url(path)
        headers: Dict[str, str] = {"Accept": MEDIA_TYPE}
        data: Optional[str] = None
        if payload is not None:
            data = json.dumps(payload)
            headers["Content-Type"] = MEDIA_TYPE

        started = time.perf_counter()
        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers=headers,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            self._logger.log_error(exc, context=f"{operation} failed", method=method, endpoint=url)
            raise TransportError(method, url, exc) from exc

        self._logger.log_api_call(
            url,
            method=method,
            status_code=response.status_code,
            response_time_ms=(time.perf_counter() - started) * 1000,
            operation=operation,
        )

        if response.status_code != requests.codes.ok:
            raise self._api_error(operation, url, response)

        try:
            return decode(response.json())
        except _DECODE_ERRORS as exc:
            error = ResponseDecodeError(
                f"error decoding response in {operation}", response.status_code, exc
            )
            self._logger.log_error(error, context=operation, endpoint=url)
            raise error from exc

    def _api_error(self, operation: str, url: str, response: requests.Response) -> APIError:
        status_code = response.status_code
        try:
            body = response.json()
            if not isinstance(body, Mapping):
                raise TypeError(f"error body is a {type(body).__name__}, not an object")
            code = body["error_code"]
            message = body.get("message") or ""
            if not isinstance(code, int) or isinstance(code, bool):
                raise TypeError(f"error_code must be an integer, got {code!r}")
            if not isinstance(message, str):
                raise TypeError(f"message must be a string, got {message!r}")
        except _DECODE_ERRORS as exc:
            error = ResponseDecodeError("error decoding error response", status_code, exc)
            self._logger.log_error(error, context=operation, endpoint=url)
            raise error from exc
        return APIError(code, message, status_code=status_code)


def new(endpoint: str, **kwargs: Any) -> SchemaRegistryClient:
    """Return the default :class:`Registry` implementation for ``endpoint``.

    Raises:
        InvalidEndpointError: If ``endpoint`` is not a well-formed absolute URL
    """
    return SchemaRegistryClient(endpoint, **kwargs)


def _decode_schema_id(body: Any) -> int:
    schema_id = body["id"]
    if not isinstance(schema_id, int) or isinstance(schema_id, bool):
        raise TypeError(f"id must be an integer, got {schema_id!r}")
    return schema_id


def _decode_schema_string(body: Any) -> str:
    schema = body["schema"]
    if not isinstance(schema, str):
        raise TypeError(f"schema must be a string, got {type(schema).__name__}")
    return schema


def _decode_subjects(body: Any) -> List[str]:
    if not isinstance(body, list) or not all(isinstance(item, str) for item in body):
        raise TypeError("expected a JSON array of subject names")
    return list(body)


def _decode_versions(body: Any) -> List[int]:
    if not isinstance(body, list) or not all(
        isinstance(item, int) and not isinstance(item, bool) for item in body
    ):
        raise TypeError("expected a JSON array of version numbers")
    return list(body)


def _decode_is_compatible(body: Any) -> bool:
    is_compatible = body["is_compatible"]
    if not isinstance(is_compatible, bool):
        raise TypeError(f"is_compatible must be a boolean, got {is_compatible!r}")
    return is_compatible
