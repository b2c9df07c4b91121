"""Typed Elasticsearch / OpenSearch access layer."""

from .api import ElasticApi
from .bulk import BulkAction, bulk_lines, insert_indexed, insert_indexed_by_id
from .client import create_client, create_transport
from .connection_settings import ConnectionConfig, load_config
from .decoder import decode, send
from .document import (
    delete_document,
    get_document,
    get_source,
    index_document,
    update_document,
    update_or_create,
)
from .errors import (
    ConnectionFailedError,
    ElasticError,
    ErrorKind,
    JsonParseError,
    NotFoundError,
    SendError,
    StatusError,
)
from .index import (
    create_index,
    delete_index,
    index_exists,
    recreate_index,
    refresh_index,
    require_index,
)
from .models import (
    BulkItemResult,
    BulkResponse,
    Document,
    Hit,
    Hits,
    RefreshResponse,
    SearchResponse,
    Shards,
    TotalHits,
)
from .query import QueryBuilder, SearchQuery
from .search import (
    clear_scroll,
    count_documents,
    first_search,
    iter_pages,
    scroll,
)
from .transport import RawResponse, Transport

__all__ = [
    # api
    "ElasticApi",
    # client
    "create_client",
    "create_transport",
    "Transport",
    "RawResponse",
    # config
    "ConnectionConfig",
    "load_config",
    # errors
    "ErrorKind",
    "ElasticError",
    "ConnectionFailedError",
    "SendError",
    "StatusError",
    "JsonParseError",
    "NotFoundError",
    # decoding
    "send",
    "decode",
    # models
    "Document",
    "Hit",
    "Hits",
    "TotalHits",
    "SearchResponse",
    "Shards",
    "RefreshResponse",
    "BulkItemResult",
    "BulkResponse",
    # query
    "QueryBuilder",
    "SearchQuery",
    # document
    "get_document",
    "get_source",
    "index_document",
    "update_document",
    "update_or_create",
    "delete_document",
    # index
    "require_index",
    "index_exists",
    "create_index",
    "delete_index",
    "recreate_index",
    "refresh_index",
    # search (``search.search`` and ``bulk.bulk`` stay in their modules)
    "scroll",
    "first_search",
    "clear_scroll",
    "iter_pages",
    "count_documents",
    # bulk
    "BulkAction",
    "bulk_lines",
    "insert_indexed",
    "insert_indexed_by_id",
]
