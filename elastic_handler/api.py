"""``ElasticApi``: every operation as a method over one shared transport."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional, Sequence

from . import bulk as bulk_ops
from . import document, index, search
from .client import create_transport
from .connection_settings import ConnectionConfig
from .models import BulkResponse, Document, Hit, RefreshResponse, SearchResponse
from .query import QueryBuilder
from .transport import RawResponse, Transport


class ElasticApi:
    """Client value owning one :class:`Transport`.

    The transport holds no per-call state, so one instance can serve many
    threads at once.

    Usage:
        >>> api = ElasticApi.from_config()
        >>> api.create_index("users", {"mappings": {"properties": {"name": {"type": "keyword"}}}})
        >>> api.index("users", "1", User(name="a"), refresh="wait_for")
        >>> api.get("users", "1", User).source
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    @classmethod
    def from_config(
        cls,
        config: Optional[ConnectionConfig] = None,
        **overrides: Any,
    ) -> "ElasticApi":
        return cls(create_transport(config, **overrides))

    # documents

    def get(self, index_name: str, doc_id: str, model: Any = Any) -> Document:
        return document.get_document(self.transport, index_name, doc_id, model)

    def get_source(self, index_name: str, doc_id: str, model: Any = Any) -> Any:
        return document.get_source(self.transport, index_name, doc_id, model)

    def index(
        self,
        index_name: str,
        doc_id: str,
        source: Any,
        refresh: bool | str | None = None,
    ) -> None:
        document.index_document(self.transport, index_name, doc_id, source, refresh)

    def update(
        self,
        index_name: str,
        doc_id: str,
        partial: Any,
        refresh: bool | str | None = None,
    ) -> None:
        document.update_document(self.transport, index_name, doc_id, partial, refresh)

    def update_or_create(
        self,
        index_name: str,
        doc_id: str,
        source: Any,
        refresh: bool | str | None = None,
    ) -> None:
        document.update_or_create(self.transport, index_name, doc_id, source, refresh)

    def delete(
        self,
        index_name: str,
        doc_id: str,
        refresh: bool | str | None = None,
    ) -> RawResponse:
        return document.delete_document(self.transport, index_name, doc_id, refresh)

    # indices

    def exists(self, index_name: str) -> None:
        index.require_index(self.transport, index_name)

    def index_exists(self, index_name: str) -> bool:
        return index.index_exists(self.transport, index_name)

    def create_index(self, index_name: str, body: Optional[dict[str, Any]] = None) -> bool:
        return index.create_index(self.transport, index_name, body)

    def delete_index(self, index_name: str) -> bool:
        return index.delete_index(self.transport, index_name)

    def recreate_index(self, index_name: str, body: Optional[dict[str, Any]] = None) -> bool:
        return index.recreate_index(self.transport, index_name, body)

    def refresh(self, index_name: str) -> RefreshResponse:
        return index.refresh_index(self.transport, index_name)

    # search

    def search(
        self,
        indices: str | Sequence[str],
        query: QueryBuilder,
        model: Any = Any,
    ) -> Optional[SearchResponse]:
        return search.search(self.transport, indices, query, model)

    def scroll(self, scroll_id: str, lifetime: str, model: Any = Any) -> Optional[SearchResponse]:
        return search.scroll(self.transport, scroll_id, lifetime, model)

    def first_search(
        self,
        index_name: str | Sequence[str],
        query: QueryBuilder,
        model: Any = Any,
    ) -> Optional[Hit]:
        return search.first_search(self.transport, index_name, query, model)

    def clear_scroll(self, scroll_ids: str | Sequence[str]) -> bool:
        return search.clear_scroll(self.transport, scroll_ids)

    def iter_pages(
        self,
        indices: str | Sequence[str],
        query: QueryBuilder,
        model: Any = Any,
    ) -> Iterator[SearchResponse]:
        return search.iter_pages(self.transport, indices, query, model)

    def count(self, indices: str | Sequence[str], query: Optional[dict[str, Any]] = None) -> int:
        return search.count_documents(self.transport, indices, query)

    # bulk

    def bulk(
        self,
        actions: Iterable[bulk_ops.BulkItem],
        refresh: bool | str | None = None,
    ) -> BulkResponse:
        return bulk_ops.bulk(self.transport, actions, refresh)

    def insert_indexed(
        self,
        index_name: str,
        sources: Sequence[Any],
        refresh: bool | str | None = None,
    ) -> RawResponse:
        return bulk_ops.insert_indexed(self.transport, index_name, sources, refresh)

    def insert_indexed_by_id(
        self,
        index_name: str,
        doc_id: str,
        source: Any,
        refresh: bool | str | None = None,
    ) -> RawResponse:
        return bulk_ops.insert_indexed_by_id(
            self.transport, index_name, doc_id, source, refresh
        )
