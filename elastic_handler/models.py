"""Typed envelopes for the engine's JSON responses.

Payloads are generic over the caller's document type ``T``, so
``Document[User]`` validates ``_source`` into a ``User``. The engine's
underscore-prefixed keys are exposed under plain names via aliases.
"""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class _Envelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Shards(_Envelope):
    total: Optional[int] = None
    successful: Optional[int] = None
    skipped: Optional[int] = None
    failed: Optional[int] = None


class TotalHits(_Envelope):
    value: int
    relation: Optional[str] = None


class Document(_Envelope, Generic[T]):
    """A single document fetched by id, with its store metadata."""

    index: Optional[str] = Field(default=None, alias="_index")
    id: Optional[str] = Field(default=None, alias="_id")
    version: Optional[int] = Field(default=None, alias="_version")
    seq_no: Optional[int] = Field(default=None, alias="_seq_no")
    primary_term: Optional[int] = Field(default=None, alias="_primary_term")
    found: Optional[bool] = None
    source: Optional[T] = Field(default=None, alias="_source")


class Hit(_Envelope, Generic[T]):
    index: Optional[str] = Field(default=None, alias="_index")
    id: Optional[str] = Field(default=None, alias="_id")
    score: Optional[float] = Field(default=None, alias="_score")
    source: Optional[T] = Field(default=None, alias="_source")
    sort: Optional[list[Any]] = None
    highlight: Optional[dict[str, list[str]]] = None


class Hits(_Envelope, Generic[T]):
    # ES 6 reports a bare integer, ES 7+ an object.
    total: Optional[Union[TotalHits, int]] = None
    max_score: Optional[float] = None
    hits: Optional[list[Hit[T]]] = None


class SearchResponse(_Envelope, Generic[T]):
    """One page of search results."""

    took: Optional[int] = None
    timed_out: Optional[bool] = None
    shards: Optional[Shards] = Field(default=None, alias="_shards")
    hits: Optional[Hits[T]] = None
    scroll_id: Optional[str] = Field(default=None, alias="_scroll_id")
    aggregations: Optional[dict[str, Any]] = None

    def hit_list(self) -> list[Hit[T]]:
        if self.hits is None or self.hits.hits is None:
            return []
        return list(self.hits.hits)

    def sources(self) -> list[T]:
        return [hit.source for hit in self.hit_list() if hit.source is not None]

    def total_value(self) -> int:
        if self.hits is None or self.hits.total is None:
            return 0
        total = self.hits.total
        if isinstance(total, TotalHits):
            return total.value
        return int(total)


class RefreshResponse(_Envelope):
    shards: Optional[Shards] = Field(default=None, alias="_shards")


class CountResponse(_Envelope):
    count: int
    shards: Optional[Shards] = Field(default=None, alias="_shards")


class BulkItemResult(_Envelope):
    """Outcome of one action inside a bulk request."""

    index: Optional[str] = Field(default=None, alias="_index")
    id: Optional[str] = Field(default=None, alias="_id")
    version: Optional[int] = Field(default=None, alias="_version")
    result: Optional[str] = None
    status: int
    error: Optional[dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status < 300


class BulkResponse(_Envelope):
    took: Optional[int] = None
    errors: bool = False
    items: list[dict[str, BulkItemResult]] = Field(default_factory=list)

    def outcomes(self) -> list[tuple[str, BulkItemResult]]:
        """Return ``(action, result)`` pairs in request order."""
        return [next(iter(item.items())) for item in self.items]
