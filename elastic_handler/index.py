"""Index management operations."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .decoder import decode, send
from .errors import NotFoundError
from .models import RefreshResponse
from .transport import Transport, make_path

logger = logging.getLogger(__name__)


def require_index(transport: Transport, index: str) -> None:
    """Return if the index exists, raise ``NotFoundError(index)`` otherwise.

    Any status other than 200 is reported as ``NotFoundError``, including
    server errors, so a ``NotFoundError`` here does not prove the index is
    absent: the check itself may have failed. Transport failures still
    raise ``ConnectionFailedError``.
    """
    response = send(transport, "HEAD", make_path(index))
    if response.status != 200:
        raise NotFoundError(index)


def index_exists(transport: Transport, index: str) -> bool:
    """Boolean form of :func:`require_index`."""
    try:
        require_index(transport, index)
    except NotFoundError:
        return False
    return True


def create_index(
    transport: Transport,
    index: str,
    body: Optional[dict[str, Any]] = None,
) -> bool:
    """Create an index from a mappings/settings body.

    Returns ``True`` only when the store answered exactly 200.
    """
    response = send(transport, "PUT", make_path(index), body=body)
    created = response.status == 200
    if created:
        logger.info("Created index: %s", index)
    else:
        logger.info("Index %s not created (status %s)", index, response.status)
    return created


def delete_index(transport: Transport, index: str) -> bool:
    """Delete an index. Returns ``True`` when the store answered 200."""
    response = send(transport, "DELETE", make_path(index))
    deleted = response.status == 200
    if deleted:
        logger.info("Deleted index: %s", index)
    return deleted


def recreate_index(
    transport: Transport,
    index: str,
    body: Optional[dict[str, Any]] = None,
) -> bool:
    """Drop the index if present, then create it again.

    Not atomic: a failure between delete and create leaves the index
    absent.
    """
    try:
        require_index(transport, index)
    except NotFoundError:
        pass
    else:
        logger.info("Recreating index: %s", index)
        delete_index(transport, index)
    return create_index(transport, index, body)


def refresh_index(transport: Transport, index: str) -> RefreshResponse:
    """Make recent writes to *index* visible to search."""
    response = send(transport, "POST", make_path(index, "_refresh"))
    return decode(response, RefreshResponse)
