"""Tests for request/response events and the structlog sink."""

from unittest.mock import MagicMock

from mattermost_client.mmrestapi import events


def test_run_logger_without_sink_is_noop():
    events.run_logger(events.no_logger, "get_me", events.HttpRequest("GET", "/x"))


def test_run_logger_tags_event_with_function():
    seen = []

    events.run_logger(seen.append, "get_me", events.HttpResponse(200, "/x", {"a": 1}))

    assert seen == [events.LogEvent("get_me", events.HttpResponse(200, "/x", {"a": 1}))]


def test_structlog_logger_renders_request():
    log = MagicMock()
    sink = events.structlog_logger(log)

    sink(events.LogEvent("login", events.HttpRequest("GET", "/api/v3/users/login", {"k": 1})))

    log.info.assert_called_once_with(
        "HTTP request",
        function="login",
        method="GET",
        path="/api/v3/users/login",
        body={"k": 1},
    )


def test_structlog_logger_renders_response():
    log = MagicMock()
    sink = events.structlog_logger(log)

    sink(events.LogEvent("get_me", events.HttpResponse(200, "/api/v3/users/me", None)))

    log.info.assert_called_once_with(
        "HTTP response",
        function="get_me",
        status=200,
        path="/api/v3/users/me",
        body=None,
    )


def test_structlog_logger_default_logger_does_not_raise():
    sink = events.structlog_logger()

    sink(events.LogEvent("get_me", events.HttpRequest("GET", "/api/v3/users/me")))
