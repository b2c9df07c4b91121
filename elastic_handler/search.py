"""Search and scroll pagination.

Search paths treat a transport failure as "no result": ``search``,
``scroll`` and ``first_search`` return ``None`` when the request could not
be sent or the cluster could not be reached, and only raise for answers
that arrived but could not be decoded. This differs from every other
operation in the package, which raises ``ConnectionFailedError``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional, Sequence

from .decoder import decode, send
from .errors import ConnectionFailedError, SendError
from .models import CountResponse, Hit, SearchResponse
from .query import QueryBuilder
from .transport import RawResponse, Transport, join_indices, make_path

logger = logging.getLogger(__name__)


def _send_or_none(
    transport: Transport,
    method: str,
    path: str,
    **kwargs: Any,
) -> Optional[RawResponse]:
    try:
        return send(transport, method, path, **kwargs)
    except (ConnectionFailedError, SendError) as exc:
        logger.warning("%s %s failed, returning no result: %s", method, path, exc)
        return None


def search(
    transport: Transport,
    indices: str | Sequence[str],
    query: QueryBuilder,
    model: Any = Any,
) -> Optional[SearchResponse]:
    """Run *query* and return the first page, typed as ``SearchResponse[model]``.

    When the query carries a scroll lifetime the page also carries a
    ``scroll_id`` for :func:`scroll`.
    """
    params: dict[str, Any] = {"from": query.get_from(), "size": query.get_size()}
    lifetime = query.get_scroll()
    if lifetime:
        params["scroll"] = lifetime

    response = _send_or_none(
        transport,
        "POST",
        make_path(join_indices(indices), "_search"),
        body=query.build(),
        params=params,
    )
    if response is None:
        return None
    return decode(response, SearchResponse[model])


def scroll(
    transport: Transport,
    scroll_id: str,
    lifetime: str,
    model: Any = Any,
) -> Optional[SearchResponse]:
    """Fetch the next page of an open scroll cursor.

    An expired or unknown cursor is answered by the store with an error
    status and raises ``StatusError``; an exhausted one yields a page
    without hits.
    """
    response = _send_or_none(
        transport,
        "POST",
        make_path("_search", "scroll"),
        body={"scroll": lifetime, "scroll_id": scroll_id},
    )
    if response is None:
        return None
    return decode(response, SearchResponse[model])


def first_search(
    transport: Transport,
    index: str | Sequence[str],
    query: QueryBuilder,
    model: Any = Any,
) -> Optional[Hit]:
    """Return the top hit for *query*, or ``None`` when there is none."""
    response = _send_or_none(
        transport,
        "POST",
        make_path(join_indices(index), "_search"),
        body=query.build(),
        params={"size": 1},
    )
    if response is None:
        return None

    page = decode(response, SearchResponse[model])
    if page.hits is None or not page.hits.hits:
        return None
    return page.hits.hits[0]


def clear_scroll(transport: Transport, scroll_ids: str | Sequence[str]) -> bool:
    """Release server-side cursors. Returns ``True`` when the store answered 200."""
    ids = [scroll_ids] if isinstance(scroll_ids, str) else list(scroll_ids)
    response = send(
        transport,
        "DELETE",
        make_path("_search", "scroll"),
        body={"scroll_id": ids},
    )
    return response.status == 200


def iter_pages(
    transport: Transport,
    indices: str | Sequence[str],
    query: QueryBuilder,
    model: Any = Any,
) -> Iterator[SearchResponse]:
    """Yield pages of a scrolling search until one comes back empty.

    Pages are yielded as the store returns them: no re-sorting, no
    de-duplication. The cursor is left to expire; call
    :func:`clear_scroll` to release it early.
    """
    lifetime = query.get_scroll()
    if not lifetime:
        raise ValueError("iter_pages requires a query with a scroll lifetime")

    page = search(transport, indices, query, model)
    while page is not None and page.hit_list():
        yield page
        if page.scroll_id is None:
            return
        page = scroll(transport, page.scroll_id, lifetime, model)


def count_documents(
    transport: Transport,
    indices: str | Sequence[str],
    query: Optional[dict[str, Any]] = None,
) -> int:
    """Count documents, optionally restricted by a query clause."""
    body = {"query": query} if query else None
    response = send(
        transport,
        "POST",
        make_path(join_indices(indices), "_count"),
        body=body,
    )
    return decode(response, CountResponse).count
