"""Error taxonomy shared by every operation.

Each failure is classified into one :class:`ErrorKind` and raised as the
matching :class:`ElasticError` subclass, so callers can either branch on
``err.kind`` or catch the concrete class.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    CONNECTION = "connection"
    SEND = "send"
    STATUS = "status"
    JSON_PARSE = "json_parse"
    NOT_FOUND = "not_found"


class ElasticError(Exception):
    """Base class for every error raised by ``elastic_handler``."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConnectionFailedError(ElasticError):
    """The transport could not be built or could not reach the cluster."""

    kind = ErrorKind.CONNECTION


class SendError(ElasticError):
    """The request could not be dispatched (e.g. an unserializable body)."""

    kind = ErrorKind.SEND


class StatusError(ElasticError):
    """The cluster answered with a status the operation does not accept."""

    kind = ErrorKind.STATUS

    def __init__(self, status: int, body: str) -> None:
        super().__init__(body)
        self.status = status
        self.body = body

    def __repr__(self) -> str:
        return f"StatusError(status={self.status!r}, body={self.body!r})"


class JsonParseError(ElasticError):
    """The body was not JSON, or the JSON did not match the expected shape.

    ``received`` holds the decoded value when parsing succeeded but
    validation did not; it is ``None`` for plain parser failures.
    """

    kind = ErrorKind.JSON_PARSE

    def __init__(self, detail: str, received: Optional[Any] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.received = received


class NotFoundError(ElasticError):
    """A document or index does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, identifier: str) -> None:
        super().__init__(identifier)
        self.identifier = identifier

    def __repr__(self) -> str:
        return f"NotFoundError({self.identifier!r})"
