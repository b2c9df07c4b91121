"""Client factory for Elasticsearch / OpenSearch connections."""

from __future__ import annotations

import logging
from typing import Any, Optional

from opensearchpy import OpenSearch
from opensearchpy.exceptions import ImproperlyConfigured

from .connection_settings import ConnectionConfig, load_config
from .errors import ConnectionFailedError
from .transport import Transport

logger = logging.getLogger(__name__)


def create_client(
    config: Optional[ConnectionConfig] = None,
    **overrides: Any,
) -> OpenSearch:
    """Create and return an opensearch-py client.

    Args:
        config: An explicit :class:`ConnectionConfig`.  When ``None``,
            one is built via :func:`load_config` (env vars + *overrides*).
        **overrides: Passed to :func:`load_config` when *config* is ``None``.

    Raises:
        ConnectionFailedError: if the client cannot be built from the config.
    """
    if config is None:
        config = load_config(**overrides)

    kwargs: dict[str, Any] = {
        "hosts": config.hosts,
        "verify_certs": config.verify_certs,
        "timeout": config.timeout,
        "max_retries": config.max_retries,
        "retry_on_timeout": config.retry_on_timeout,
        "http_compress": config.http_compress,
    }

    http_auth = config.http_auth
    if http_auth:
        kwargs["http_auth"] = http_auth

    if config.ca_certs:
        kwargs["ca_certs"] = config.ca_certs

    try:
        client = OpenSearch(**kwargs)
    except (ImproperlyConfigured, ValueError) as exc:
        raise ConnectionFailedError(str(exc)) from exc

    logger.debug("Created client for %s", config.url)
    return client


def create_transport(
    config: Optional[ConnectionConfig] = None,
    **overrides: Any,
) -> Transport:
    """Build the shared :class:`Transport` handle for *config*."""
    if config is None:
        config = load_config(**overrides)
    return Transport(
        create_client(config),
        max_retries=config.max_retries,
        retry_on_timeout=config.retry_on_timeout,
    )
