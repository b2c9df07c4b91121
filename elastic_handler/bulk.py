"""Bulk requests: many actions in one newline-delimited JSON body.

Each action is an action line (``{"index": {...}}``, ``{"create": {...}}``,
``{"update": {...}}`` or ``{"delete": {...}}``) followed, except for
delete, by exactly one payload line. Lines are sent in input order and the
store answers with one item per action in the same order, so inputs can be
zipped positionally with :meth:`BulkResponse.outcomes`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from .decoder import decode, send
from .document import to_jsonable
from .models import BulkResponse
from .transport import RawResponse, Transport, make_path, refresh_param

ACTIONS = ("index", "create", "update", "delete")


@dataclass(frozen=True)
class BulkAction:
    """One create/index/update/delete instruction of a bulk batch."""

    action: str
    source: Any = None
    index: Optional[str] = None
    doc_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.action not in ACTIONS:
            raise ValueError(f"Unknown bulk action: {self.action!r}")
        if self.action == "delete":
            if self.source is not None:
                raise ValueError("delete actions take no payload")
            if self.doc_id is None:
                raise ValueError("delete actions need a doc_id")
        elif self.source is None:
            raise ValueError(f"{self.action} actions need a payload")

    @classmethod
    def index_(cls, source: Any, index: Optional[str] = None, doc_id: Optional[str] = None) -> "BulkAction":
        return cls("index", source, index, doc_id)

    @classmethod
    def create(cls, source: Any, index: Optional[str] = None, doc_id: Optional[str] = None) -> "BulkAction":
        return cls("create", source, index, doc_id)

    @classmethod
    def update(cls, partial: Any, doc_id: str, index: Optional[str] = None) -> "BulkAction":
        return cls("update", {"doc": to_jsonable(partial)}, index, doc_id)

    @classmethod
    def delete(cls, doc_id: str, index: Optional[str] = None) -> "BulkAction":
        return cls("delete", None, index, doc_id)

    def lines(self) -> list[Any]:
        meta: dict[str, Any] = {}
        if self.index is not None:
            meta["_index"] = self.index
        if self.doc_id is not None:
            meta["_id"] = self.doc_id
        out: list[Any] = [{self.action: meta}]
        if self.action != "delete":
            out.append(to_jsonable(self.source))
        return out


BulkItem = Union[BulkAction, Mapping[str, Any]]


def bulk_lines(actions: Iterable[BulkItem]) -> list[Any]:
    """Flatten actions into body lines, keeping their order.

    ``BulkAction`` objects expand to their action/payload lines; mappings
    are taken as pre-built lines and sent verbatim.
    """
    lines: list[Any] = []
    for item in actions:
        if isinstance(item, BulkAction):
            lines.extend(item.lines())
        else:
            lines.append(to_jsonable(item))
    return lines


def bulk(
    transport: Transport,
    actions: Iterable[BulkItem],
    refresh: bool | str | None = None,
) -> BulkResponse:
    """Send a batch and decode the envelope.

    Only the envelope status is checked; per-item failures are reported in
    ``BulkResponse.items`` for the caller to inspect.
    """
    response = send(
        transport,
        "POST",
        make_path("_bulk"),
        body=bulk_lines(actions),
        params={"refresh": refresh_param(refresh)},
        ndjson=True,
    )
    return decode(response, BulkResponse)


def insert_indexed(
    transport: Transport,
    index: str,
    sources: Sequence[Any],
    refresh: bool | str | None = None,
) -> RawResponse:
    """Index every source into *index*, letting the store assign ids."""
    actions = [BulkAction.index_(source) for source in sources]
    return send(
        transport,
        "POST",
        make_path(index, "_bulk"),
        body=bulk_lines(actions),
        params={"refresh": refresh_param(refresh)},
        ndjson=True,
    )


def insert_indexed_by_id(
    transport: Transport,
    index: str,
    doc_id: str,
    source: Any,
    refresh: bool | str | None = None,
) -> RawResponse:
    """Index one source under *doc_id* through the bulk endpoint."""
    return send(
        transport,
        "POST",
        make_path(index, "_bulk"),
        body=BulkAction.index_(source, doc_id=doc_id).lines(),
        params={"refresh": refresh_param(refresh)},
        ndjson=True,
    )
