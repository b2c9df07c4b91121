"""Connection settings for an Elasticsearch/OpenSearch endpoint.

The endpoint is a single URL (``ELASTIC_HOST``), falling back to a local
node when unset. Settings are read once, when :func:`load_config` runs,
and the resulting :class:`ConnectionConfig` is immutable.

All settings can be overridden via environment variables (or a ``.env``
file) or by passing values directly to ``load_config``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Optional

from dotenv import load_dotenv

DEFAULT_URL = "http://localhost:9200"


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection configuration for one cluster endpoint."""

    url: str = DEFAULT_URL
    user: Optional[str] = None
    password: Optional[str] = None
    verify_certs: bool = True
    ca_certs: Optional[str] = None
    timeout: int = 30
    max_retries: int = 3
    retry_on_timeout: bool = False
    http_compress: bool = False

    @property
    def http_auth(self) -> Optional[tuple[str, str]]:
        if self.user and self.password:
            return (self.user, self.password)
        return None

    @property
    def hosts(self) -> list[str]:
        """Return hosts list in the format expected by opensearch-py."""
        return [self.url]


# env var -> (field, parser)
_ENV_FIELDS = {
    "ELASTIC_HOST": ("url", str),
    "ELASTIC_USER": ("user", str),
    "ELASTIC_PASSWORD": ("password", str),
    "ELASTIC_VERIFY_CERTS": ("verify_certs", _parse_bool),
    "ELASTIC_CA_CERTS": ("ca_certs", str),
    "ELASTIC_TIMEOUT": ("timeout", int),
    "ELASTIC_MAX_RETRIES": ("max_retries", int),
    "ELASTIC_RETRY_ON_TIMEOUT": ("retry_on_timeout", _parse_bool),
    "ELASTIC_HTTP_COMPRESS": ("http_compress", _parse_bool),
}


def load_config(**overrides: Any) -> ConnectionConfig:
    """Build a ConnectionConfig with env-var and keyword overrides.

    Resolution order (later wins):
      1. Dataclass defaults
      2. Environment variables (``ELASTIC_HOST``, etc.), including a ``.env``
         file in the working directory
      3. Explicit keyword arguments

    Supported env vars:
      - ELASTIC_HOST  (full URL, e.g. ``http://localhost:9200``)
      - ELASTIC_USER / ELASTIC_PASSWORD
      - ELASTIC_VERIFY_CERTS  ("true"/"false")
      - ELASTIC_CA_CERTS
      - ELASTIC_TIMEOUT
      - ELASTIC_MAX_RETRIES
      - ELASTIC_RETRY_ON_TIMEOUT ("true"/"false")
      - ELASTIC_HTTP_COMPRESS ("true"/"false")
    """
    load_dotenv()

    values: dict[str, Any] = {}

    # Env-var layer
    for env_name, (field_name, parse) in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is None or raw == "":
            continue
        values[field_name] = parse(raw)

    # Explicit overrides layer
    known = {f.name for f in fields(ConnectionConfig)}
    for key, value in overrides.items():
        if key not in known:
            raise TypeError(f"Unknown config key: {key!r}")
        values[key] = value

    return ConnectionConfig(**values)
