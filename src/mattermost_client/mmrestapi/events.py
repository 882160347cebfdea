"""Request/response events emitted by the API pipeline.

A :data:`Logger` is an optional sink called synchronously with one
:class:`LogEvent` before a request is sent and one after its response has
been decoded. ``None`` (:data:`no_logger`) disables event logging.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

import structlog


@dataclass(frozen=True)
class HttpRequest:
    """An outgoing request, with its JSON payload if it has one."""

    method: str
    path: str
    body: Any | None = None


@dataclass(frozen=True)
class HttpResponse:
    """A decoded response, with the untyped JSON body."""

    status: int
    path: str
    body: Any | None = None


LogEventType: TypeAlias = HttpRequest | HttpResponse


@dataclass(frozen=True)
class LogEvent:
    """An event tagged with the name of the API function that produced it."""

    function: str
    event_type: LogEventType


Logger: TypeAlias = Callable[[LogEvent], None]

no_logger: Logger | None = None


def run_logger(logger: Logger | None, function: str, event_type: LogEventType) -> None:
    """Hand an event to the sink, if one is configured."""
    if logger is not None:
        logger(LogEvent(function=function, event_type=event_type))


def structlog_logger(logger: Any = None) -> Logger:
    """Create a sink that renders events through structlog.

    Args:
        logger: Bound structlog logger to write to. Defaults to this
            module's logger.

    Returns:
        A Logger suitable for MattermostClient.
    """
    log = logger or structlog.get_logger(__name__)

    def sink(event: LogEvent) -> None:
        ev = event.event_type
        if isinstance(ev, HttpRequest):
            log.info(
                "HTTP request",
                function=event.function,
                method=ev.method,
                path=ev.path,
                body=ev.body,
            )
        else:
            log.info(
                "HTTP response",
                function=event.function,
                status=ev.status,
                path=ev.path,
                body=ev.body,
            )

    return sink
