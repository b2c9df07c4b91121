"""Transport handle: one request in, one ``(status, body)`` pair out.

The handle borrows the connection pool and serializer of an opensearch-py
client but never interprets status codes itself: every HTTP answer is
handed back as a :class:`RawResponse`. Network failures are raised as the
opensearch-py connection exceptions and classified by the decoder.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence
from urllib.parse import quote

from opensearchpy.exceptions import ConnectionError as TransportConnectionError
from opensearchpy.exceptions import ConnectionTimeout

logger = logging.getLogger(__name__)

NDJSON_CONTENT_TYPE = "application/x-ndjson"

# Let every status through to the caller instead of raising.
_PASS_THROUGH_STATUSES = range(100, 600)


@dataclass
class RawResponse:
    """An HTTP answer whose status and body have not been interpreted."""

    status: int
    text: str
    headers: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.text)


def make_path(*parts: Optional[str]) -> str:
    """Join URL path segments, percent-encoding each one."""
    return "/" + "/".join(quote(str(p), safe=",*") for p in parts if p not in (None, ""))


def join_indices(indices: str | Sequence[str]) -> str:
    if isinstance(indices, str):
        return indices
    return ",".join(indices)


def refresh_param(refresh: bool | str | None) -> Optional[str]:
    """Render a refresh policy as the query-string value the store expects.

    ``None`` leaves the parameter out so the store default applies.
    """
    if refresh is None:
        return None
    if refresh is True:
        return "true"
    if refresh is False:
        return "false"
    if refresh in ("true", "false", "wait_for"):
        return refresh
    raise ValueError(f"Invalid refresh policy: {refresh!r}")


class Transport:
    """Reusable, stateless-per-call request sender.

    Safe to share between threads; the only state is the borrowed
    opensearch-py connection pool.
    """

    def __init__(
        self,
        client: Any,
        max_retries: int = 3,
        retry_on_timeout: bool = False,
    ) -> None:
        self.client = client
        self.max_retries = max_retries
        self.retry_on_timeout = retry_on_timeout

    @property
    def _transport(self) -> Any:
        return self.client.transport

    def _encode(self, body: Any, ndjson: bool) -> Optional[bytes]:
        if body is None:
            return None
        serializer = self._transport.serializer
        if ndjson:
            text = "".join(serializer.dumps(line) + "\n" for line in body)
        else:
            text = serializer.dumps(body)
        return text.encode("utf-8", "surrogatepass")

    def perform_request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        ndjson: bool = False,
    ) -> RawResponse:
        """Send one request and return the unread status and body.

        ``body`` is serialized as JSON, or as newline-delimited JSON lines
        when ``ndjson`` is set. Raises the opensearch-py
        ``SerializationError`` when the body cannot be encoded and
        ``ConnectionError`` (or a subclass) once retries are exhausted.
        """
        payload = self._encode(body, ndjson)
        headers = {"content-type": NDJSON_CONTENT_TYPE} if ndjson else None
        query = {k: v for k, v in (params or {}).items() if v is not None}

        attempt = 0
        while True:
            connection = self._transport.get_connection()
            try:
                status, response_headers, text = connection.perform_request(
                    method,
                    path,
                    params=query or None,
                    body=payload,
                    headers=headers,
                    ignore=_PASS_THROUGH_STATUSES,
                )
            except ConnectionTimeout:
                if not self.retry_on_timeout or attempt >= self.max_retries:
                    raise
                logger.warning("Timeout on %s %s, retrying (%d/%d)", method, path, attempt + 1, self.max_retries)
            except TransportConnectionError:
                self._transport.mark_dead(connection)
                if attempt >= self.max_retries:
                    raise
                logger.warning("Connection failed on %s %s, retrying (%d/%d)", method, path, attempt + 1, self.max_retries)
            else:
                logger.debug("%s %s -> %s", method, path, status)
                return RawResponse(
                    status=int(status),
                    text=text or "",
                    headers=dict(response_headers or {}),
                )
            attempt += 1
