"""Client-side settings for connecting to a Schema Registry."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_ENDPOINT = "http://localhost:8081"


@dataclass(frozen=True)
class RegistryClientConfig:
    """Configuration for a Schema Registry client.

    ``timeout_seconds`` is handed to the HTTP transport unchanged; the client
    itself imposes no deadline.
    """
    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: Optional[float] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    @classmethod
    def from_env(cls) -> "RegistryClientConfig":
        endpoint = os.getenv("SCHEMA_REGISTRY_URL", DEFAULT_ENDPOINT)
        raw_timeout = os.getenv("SCHEMA_REGISTRY_TIMEOUT_SECONDS")
        timeout_seconds: Optional[float] = None
        if raw_timeout:
            try:
                timeout_seconds = float(raw_timeout)
            except ValueError as exc:
                raise ValueError(
                    f"SCHEMA_REGISTRY_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}"
                ) from exc
        return cls(
            endpoint=endpoint,
            timeout_seconds=timeout_seconds,
            username=os.getenv("SCHEMA_REGISTRY_USERNAME") or None,
            password=os.getenv("SCHEMA_REGISTRY_PASSWORD") or None,
        )
