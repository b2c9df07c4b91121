"""Search request bodies and their pagination parameters."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class QueryBuilder(Protocol):
    """What the search operations need from a query object."""

    def build(self) -> dict[str, Any]: ...

    def get_from(self) -> Optional[int]: ...

    def get_size(self) -> Optional[int]: ...

    def get_scroll(self) -> str: ...


@dataclass
class SearchQuery:
    """A search body plus offset/size/scroll.

    Pagination values are sent as URL parameters, not in the body.
    ``scroll`` is a cursor lifetime such as ``"1m"``; empty means no scroll.
    """

    query: Optional[dict[str, Any]] = None
    sort: Optional[list[Any]] = None
    aggs: Optional[dict[str, Any]] = None
    source: Optional[Any] = None
    extra: dict[str, Any] = field(default_factory=dict)
    from_: Optional[int] = None
    size: Optional[int] = None
    scroll: str = ""

    def set_query(self, query: dict[str, Any]) -> "SearchQuery":
        self.query = query
        return self

    def set_sort(self, sort: list[Any]) -> "SearchQuery":
        self.sort = sort
        return self

    def set_aggs(self, aggs: dict[str, Any]) -> "SearchQuery":
        self.aggs = aggs
        return self

    def with_page(
        self,
        from_: Optional[int] = None,
        size: Optional[int] = None,
        scroll: Optional[str] = None,
    ) -> "SearchQuery":
        """Return a copy with different pagination."""
        return replace(
            self,
            from_=from_ if from_ is not None else self.from_,
            size=size if size is not None else self.size,
            scroll=scroll if scroll is not None else self.scroll,
        )

    def build(self) -> dict[str, Any]:
        body: dict[str, Any] = dict(self.extra)
        if self.query is not None:
            body["query"] = self.query
        if self.sort is not None:
            body["sort"] = self.sort
        if self.aggs is not None:
            body["aggs"] = self.aggs
        if self.source is not None:
            body["_source"] = self.source
        return body

    def get_from(self) -> Optional[int]:
        return self.from_

    def get_size(self) -> Optional[int]:
        return self.size

    def get_scroll(self) -> str:
        return self.scroll or ""
