"""Single-document CRUD against one index."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from .decoder import check_status, decode, send
from .errors import NotFoundError
from .models import Document
from .transport import RawResponse, Transport, make_path, refresh_param

logger = logging.getLogger(__name__)


def to_jsonable(source: Any) -> Any:
    """Dump pydantic models to plain JSON data; pass anything else through."""
    if isinstance(source, BaseModel):
        return source.model_dump(mode="json", by_alias=True)
    return source


def get_document(
    transport: Transport,
    index: str,
    doc_id: str,
    model: Any = Any,
) -> Document:
    """Fetch a document with its metadata, ``_source`` validated as *model*.

    Raises:
        NotFoundError: the id (or the index) does not exist.
        StatusError: any other non-200 answer.
        JsonParseError: the body is not JSON or does not fit ``Document[model]``.
    """
    response = send(transport, "GET", make_path(index, "_doc", doc_id))
    return decode(response, Document[model], not_found=doc_id)


def get_source(
    transport: Transport,
    index: str,
    doc_id: str,
    model: Any = Any,
) -> Any:
    """Fetch only the stored payload of a document, validated as *model*."""
    response = send(transport, "GET", make_path(index, "_source", doc_id))
    return decode(response, model, not_found=doc_id)


def index_document(
    transport: Transport,
    index: str,
    doc_id: str,
    source: Any,
    refresh: bool | str | None = None,
) -> None:
    """Create or fully replace a document (accepts 200 and 201)."""
    response = send(
        transport,
        "PUT",
        make_path(index, "_doc", doc_id),
        body=to_jsonable(source),
        params={"refresh": refresh_param(refresh)},
    )
    check_status(response, expected=(200, 201), not_found=doc_id)


def update_document(
    transport: Transport,
    index: str,
    doc_id: str,
    partial: Any,
    refresh: bool | str | None = None,
) -> None:
    """Merge *partial* into an existing document (accepts 200 only).

    Raises ``NotFoundError(doc_id)`` when the document is absent; no
    document is created.
    """
    response = send(
        transport,
        "POST",
        make_path(index, "_update", doc_id),
        body={"doc": to_jsonable(partial)},
        params={"refresh": refresh_param(refresh)},
    )
    check_status(response, expected=(200,), not_found=doc_id)


def delete_document(
    transport: Transport,
    index: str,
    doc_id: str,
    refresh: bool | str | None = None,
) -> RawResponse:
    """Delete a document and hand back the raw answer.

    The status is not interpreted: a 404 means the document was already
    absent, which callers usually treat as success.
    """
    return send(
        transport,
        "DELETE",
        make_path(index, "_doc", doc_id),
        params={"refresh": refresh_param(refresh)},
    )


def update_or_create(
    transport: Transport,
    index: str,
    doc_id: str,
    source: Any,
    refresh: bool | str | None = None,
) -> None:
    """Update the document, inserting it only if the update hit ``NotFound``.

    Any other failure from the update is re-raised and no insert is tried.
    """
    try:
        update_document(transport, index, doc_id, source, refresh=refresh)
    except NotFoundError:
        logger.debug("Document %s/%s absent, inserting", index, doc_id)
        index_document(transport, index, doc_id, source, refresh=refresh)
