from __future__ import annotations

import copy
import itertools
import json
import os
import sys
from pathlib import Path
from typing import Any, NamedTuple, Optional
from urllib.parse import unquote

import pytest

# Make package importable when running tests from the repository root.
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from elastic_handler.transport import RawResponse  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: tests that require a running Elasticsearch/OpenSearch cluster",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.getenv("ELASTIC_RUN_INTEGRATION") == "1":
        return

    skip_integration = pytest.mark.skip(
        reason="Set ELASTIC_RUN_INTEGRATION=1 to run integration tests"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


class Call(NamedTuple):
    method: str
    path: str
    body: Any
    params: dict
    ndjson: bool


def _clean(params: Optional[dict]) -> dict:
    return {k: v for k, v in (params or {}).items() if v is not None}


def respond(body: Any = None, status: int = 200, text: Optional[str] = None) -> RawResponse:
    """Build a RawResponse from a JSON-able body (or verbatim text)."""
    if text is None:
        text = "" if body is None else json.dumps(body)
    return RawResponse(status=status, text=text)


class ScriptedTransport:
    """Hands out canned outcomes in order and records every request."""

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[Call] = []

    def perform_request(self, method, path, *, body=None, params=None, ndjson=False):
        self.calls.append(Call(method, path, body, _clean(params), ndjson))
        if not self.outcomes:
            raise AssertionError(f"unexpected request {method} {path}")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeEngine:
    """In-memory stand-in for a single-node cluster.

    Reads by id are real-time; searches only see documents made visible by a
    refresh (the ``_refresh`` endpoint or a ``refresh`` write parameter).
    Searches support ``match_all`` and single-field ``term`` queries and
    return hits in insertion order unless sorted by one field.
    """

    def __init__(self) -> None:
        self.indices: dict[str, dict[str, Any]] = {}
        self.calls: list[Call] = []
        self._cursors: dict[str, dict[str, Any]] = {}
        self._cursor_ids = itertools.count(1)
        self._auto_ids = itertools.count(1)

    # transport contract

    def perform_request(self, method, path, *, body=None, params=None, ndjson=False):
        params = _clean(params)
        self.calls.append(Call(method, path, copy.deepcopy(body), params, ndjson))
        parts = [unquote(p) for p in path.strip("/").split("/") if p]
        status, payload = self._route(method, parts, body, params)
        if method == "HEAD":
            return RawResponse(status=status, text="")
        return respond(payload, status=status)

    def calls_to(self, method: str, marker: str) -> list[Call]:
        return [c for c in self.calls if c.method == method and marker in c.path]

    # routing

    def _route(self, method, parts, body, params):
        if parts == ["_bulk"]:
            return self._bulk(None, body, params)
        if parts == ["_search", "scroll"]:
            if method == "DELETE":
                for scroll_id in body["scroll_id"]:
                    self._cursors.pop(scroll_id, None)
                return 200, {"succeeded": True}
            return self._scroll(body)

        name, rest = parts[0], parts[1:]
        if not rest:
            return self._index_admin(method, name, body)

        endpoint = rest[0]
        if endpoint == "_refresh":
            if name not in self.indices:
                return self._missing_index(name)
            self._refresh(name)
            return 200, {"_shards": {"total": 1, "successful": 1, "failed": 0}}
        if endpoint == "_bulk":
            return self._bulk(name, body, params)
        if endpoint == "_search":
            return self._search(name, body or {}, params)
        if endpoint == "_count":
            if name not in self.indices:
                return self._missing_index(name)
            return 200, {"count": len(self.indices[name]["visible"])}
        if endpoint == "_doc" and method == "PUT":
            return self._put_doc(name, rest[1], body, params)
        if endpoint == "_doc" and method == "GET":
            return self._get_doc(name, rest[1])
        if endpoint == "_doc" and method == "DELETE":
            return self._delete_doc(name, rest[1], params)
        if endpoint == "_source":
            status, doc = self._get_doc(name, rest[1])
            return status, doc.get("_source") if status == 200 else doc
        if endpoint == "_update":
            return self._update_doc(name, rest[1], body, params)
        return 400, {"error": f"unsupported {method} {'/'.join(parts)}"}

    # indices

    def _missing_index(self, name):
        return 404, {
            "error": {"type": "index_not_found_exception", "index": name},
            "status": 404,
        }

    def _index_admin(self, method, name, body):
        if method == "HEAD":
            return (200 if name in self.indices else 404), None
        if method == "PUT":
            if name in self.indices:
                return 400, {
                    "error": {"type": "resource_already_exists_exception", "index": name},
                    "status": 400,
                }
            self._create(name, body)
            return 200, {"acknowledged": True, "shards_acknowledged": True, "index": name}
        if method == "DELETE":
            if name not in self.indices:
                return self._missing_index(name)
            del self.indices[name]
            return 200, {"acknowledged": True}
        return 405, {"error": "method not allowed"}

    def _create(self, name, body=None):
        self.indices[name] = {"mappings": (body or {}).get("mappings", {}), "docs": {}, "visible": {}}

    def _refresh(self, name):
        idx = self.indices[name]
        idx["visible"] = copy.deepcopy(idx["docs"])

    def _maybe_refresh(self, name, params):
        if params.get("refresh") in ("true", "wait_for"):
            self._refresh(name)

    # documents

    def _write(self, name, doc_id, source, create_only=False):
        if name not in self.indices:
            self._create(name)
        docs = self.indices[name]["docs"]
        if create_only and doc_id in docs:
            return 409, {"type": "version_conflict_engine_exception"}
        current = docs.get(doc_id)
        version = current["_version"] + 1 if current else 1
        docs[doc_id] = {"_version": version, "_source": copy.deepcopy(source)}
        result = "updated" if current else "created"
        return (200 if current else 201), {
            "_index": name,
            "_id": doc_id,
            "_version": version,
            "result": result,
        }

    def _put_doc(self, name, doc_id, body, params):
        status, payload = self._write(name, doc_id, body)
        self._maybe_refresh(name, params)
        return status, payload

    def _get_doc(self, name, doc_id):
        if name not in self.indices:
            return self._missing_index(name)
        doc = self.indices[name]["docs"].get(doc_id)
        if doc is None:
            return 404, {"_index": name, "_id": doc_id, "found": False}
        return 200, {
            "_index": name,
            "_id": doc_id,
            "_version": doc["_version"],
            "_seq_no": doc["_version"] - 1,
            "_primary_term": 1,
            "found": True,
            "_source": copy.deepcopy(doc["_source"]),
        }

    def _update_doc(self, name, doc_id, body, params):
        docs = self.indices.get(name, {}).get("docs", {})
        if doc_id not in docs:
            return 404, {
                "error": {"type": "document_missing_exception", "reason": f"[{doc_id}]: document missing"},
                "status": 404,
            }
        merged = dict(docs[doc_id]["_source"])
        merged.update(body["doc"])
        status, payload = self._write(name, doc_id, merged)
        self._maybe_refresh(name, params)
        return 200, payload

    def _delete_doc(self, name, doc_id, params):
        docs = self.indices.get(name, {}).get("docs", {})
        if doc_id not in docs:
            return 404, {"_index": name, "_id": doc_id, "result": "not_found"}
        del docs[doc_id]
        self._maybe_refresh(name, params)
        return 200, {"_index": name, "_id": doc_id, "result": "deleted"}

    # bulk

    def _bulk(self, default_index, lines, params):
        items = []
        touched = set()
        lines = list(lines)
        i = 0
        while i < len(lines):
            (action, meta), = lines[i].items()
            i += 1
            name = meta.get("_index", default_index)
            doc_id = meta.get("_id")
            touched.add(name)
            if action == "delete":
                status, payload = self._delete_doc(name, doc_id, {})
            else:
                source = lines[i]
                i += 1
                if doc_id is None:
                    doc_id = f"auto-{next(self._auto_ids)}"
                if action == "update":
                    status, payload = self._update_doc(name, doc_id, source, {})
                else:
                    status, payload = self._write(name, doc_id, source, create_only=action == "create")
            item = {"_index": name, "_id": doc_id, "status": status}
            if status >= 300:
                item["error"] = payload
            else:
                item["result"] = payload.get("result")
            items.append({action: item})
        for name in touched:
            if name in self.indices:
                self._maybe_refresh(name, params)
        return 200, {
            "took": 1,
            "errors": any("error" in next(iter(item.values())) for item in items),
            "items": items,
        }

    # search

    def _matches(self, source, query):
        if not query or "match_all" in query:
            return True
        if "term" in query:
            (field, value), = query["term"].items()
            return source.get(field) == value
        return False

    def _page(self, name, hits, total, scroll_id=None):
        page = {
            "took": 1,
            "timed_out": False,
            "_shards": {"total": 1, "successful": 1, "skipped": 0, "failed": 0},
            "hits": {
                "total": {"value": total, "relation": "eq"},
                "max_score": 1.0 if hits else None,
                "hits": hits,
            },
        }
        if scroll_id is not None:
            page["_scroll_id"] = scroll_id
        return page

    def _search(self, name, body, params):
        if name not in self.indices:
            return self._missing_index(name)
        visible = self.indices[name]["visible"]
        hits = [
            {"_index": name, "_id": doc_id, "_score": 1.0, "_source": copy.deepcopy(doc["_source"])}
            for doc_id, doc in visible.items()
            if self._matches(doc["_source"], body.get("query"))
        ]
        for clause in reversed(body.get("sort") or []):
            (field, order), = clause.items()
            if isinstance(order, dict):
                order = order.get("order", "asc")
            hits.sort(key=lambda h: h["_source"].get(field), reverse=order == "desc")
            for hit in hits:
                hit["sort"] = [hit["_source"].get(field)]
        total = len(hits)
        offset = int(params.get("from", 0))
        size = int(params.get("size", 10))
        if "scroll" in params:
            scroll_id = f"cursor-{next(self._cursor_ids)}"
            self._cursors[scroll_id] = {"hits": hits[offset + size:], "size": size, "total": total}
            return 200, self._page(name, hits[offset:offset + size], total, scroll_id)
        return 200, self._page(name, hits[offset:offset + size], total)

    def _scroll(self, body):
        cursor = self._cursors.get(body["scroll_id"])
        if cursor is None:
            return 404, {
                "error": {"type": "search_context_missing_exception", "reason": "No search context found"},
                "status": 404,
            }
        page, cursor["hits"] = cursor["hits"][: cursor["size"]], cursor["hits"][cursor["size"]:]
        return 200, self._page(None, page, cursor["total"], body["scroll_id"])


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()
