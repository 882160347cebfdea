"""Mattermost REST API client package.

Provides a small HTTP client for the Mattermost v3 REST API that returns
validated response types. Every call opens its own connection and fails
with a specific exception kind.

Exports:
    MattermostClient: Client with one method per API operation.
    ConnectionData: Immutable connection settings.
    make_connection_data: Validating constructor for ConnectionData.
    types: Module containing Pydantic models for requests and responses.
    exceptions: Module containing the error taxonomy.
    events: Module containing request/response log events.
"""

from . import events, exceptions, types
from .client import MattermostClient
from .connection import DEFAULT_TIMEOUT, ConnectionData, make_connection_data, with_connection
from .events import LogEvent, Logger, no_logger, structlog_logger
from .exceptions import (
    ConnectionException,
    ContentTypeException,
    HeaderNotFoundException,
    HTTPResponseException,
    JSONDecodeException,
    LoginFailureException,
    MattermostError,
    URIParseException,
)
from .pipeline import id_string
from .types import Login, Token, make_pending_post

__all__ = [
    "DEFAULT_TIMEOUT",
    "ConnectionData",
    "ConnectionException",
    "ContentTypeException",
    "HTTPResponseException",
    "HeaderNotFoundException",
    "JSONDecodeException",
    "LogEvent",
    "Logger",
    "Login",
    "LoginFailureException",
    "MattermostClient",
    "MattermostError",
    "Token",
    "URIParseException",
    "events",
    "exceptions",
    "id_string",
    "make_connection_data",
    "make_pending_post",
    "no_logger",
    "structlog_logger",
    "types",
    "with_connection",
]
