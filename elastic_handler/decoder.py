"""Response decoding: the only place status codes and body shapes are read.

Decoding runs in a fixed order:

1. transport failure            -> ``ConnectionFailedError`` / ``SendError``
2. 404 (when ``not_found`` set) -> ``NotFoundError``
3. unexpected status            -> ``StatusError(status, body_text)``
4. body is not JSON             -> ``JsonParseError(parser message)``
5. JSON does not fit ``shape``  -> ``JsonParseError(received JSON text)``

Step 1 lives in :func:`send`, steps 2-5 in :func:`decode`, so a transport
failure never reaches body parsing and a malformed 200 is never reported
as a connection problem.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Collection, Mapping, Optional

from opensearchpy.exceptions import ConnectionError as TransportConnectionError
from opensearchpy.exceptions import ImproperlyConfigured, SerializationError
from pydantic import TypeAdapter, ValidationError

from .errors import (
    ConnectionFailedError,
    JsonParseError,
    NotFoundError,
    SendError,
    StatusError,
)
from .transport import RawResponse

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def send(
    transport: Any,
    method: str,
    path: str,
    *,
    body: Any = None,
    params: Optional[Mapping[str, Any]] = None,
    ndjson: bool = False,
) -> RawResponse:
    """Perform one request, classifying transport-level failures."""
    try:
        return transport.perform_request(
            method, path, body=body, params=params, ndjson=ndjson
        )
    except TransportConnectionError as exc:
        raise ConnectionFailedError(str(exc)) from exc
    except (SerializationError, ImproperlyConfigured) as exc:
        raise SendError(str(exc)) from exc


def coerce(value: Any, shape: Any) -> Any:
    """Validate an already-parsed JSON value against ``shape``."""
    try:
        return _adapter(shape).validate_python(value)
    except ValidationError as exc:
        logger.debug("Response did not match %r: %s", shape, exc)
        raise JsonParseError(
            json.dumps(value, ensure_ascii=False, default=str), received=value
        ) from exc


def decode(
    response: RawResponse,
    shape: Any,
    *,
    expected: Collection[int] = (200,),
    not_found: Optional[str] = None,
) -> Any:
    """Turn a raw response into a value of type ``shape`` or raise.

    Args:
        response: The unread HTTP answer.
        shape: Any type pydantic can validate (a model, ``dict[str, Any]``,
            ``Any``...).
        expected: Status codes counted as success.
        not_found: When set, a 404 raises ``NotFoundError(not_found)``
            before the generic status check.
    """
    check_status(response, expected=expected, not_found=not_found)

    try:
        value = json.loads(response.text)
    except ValueError as exc:
        raise JsonParseError(str(exc)) from exc

    return coerce(value, shape)


def check_status(
    response: RawResponse,
    *,
    expected: Collection[int] = (200,),
    not_found: Optional[str] = None,
) -> None:
    """Steps 2-3 only, for operations whose success carries no body."""
    if not_found is not None and response.status == 404:
        raise NotFoundError(not_found)
    if response.status not in expected:
        raise StatusError(response.status, response.text)
