"""Tests for path building and response validation helpers.

Endpoint-level behaviour is covered in test_client.py; these tests pin the
edge cases of the individual pipeline steps that are awkward to reach
through the client.
"""

import httpx
import pytest

from mattermost_client.mmrestapi import pipeline
from mattermost_client.mmrestapi.connection import ConnectionData
from mattermost_client.mmrestapi.exceptions import (
    ContentTypeException,
    HeaderNotFoundException,
    HTTPResponseException,
    JSONDecodeException,
    LoginFailureException,
    URIParseException,
)
from mattermost_client.mmrestapi.types import Login, Team, Token, User

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "path",
    [
        "/api/v3/users/me",
        "/api/v3/teams/t1/channels/",
        "/api/v3/users/a%2Fb/get",
        "relative/path?x=1",
    ],
)
def test_parse_path_accepts_relative_references(path: str):
    assert pipeline.parse_path(path) == path


@pytest.mark.parametrize(
    "path",
    [
        "http://evil.example.com/api",
        "//evil.example.com/api",
        "/api/v3/users/with space",
        "/api/v3/%zz",
        "/api/v3/é",
    ],
)
def test_parse_path_rejects_malformed_paths(path: str):
    """Absolute or malformed paths raise URIParseException carrying the path."""
    with pytest.raises(URIParseException) as exc_info:
        pipeline.parse_path(path)

    assert exc_info.value.path == path


def test_build_path_encodes_each_segment():
    """Reserved characters inside a segment cannot add path components."""
    path = pipeline.build_path("api", "v3", "users", "../admin?x=1", "get")

    assert path == "/api/v3/users/..%2Fadmin%3Fx%3D1/get"


def test_build_path_accepts_ints_records_and_trailing_slash():
    team = Team(id="t1")

    path = pipeline.build_path("teams", team, "page", 0, 20, trailing_slash=True)

    assert path == "/teams/t1/page/0/20/"


def test_id_string():
    assert pipeline.id_string("abc") == "abc"
    assert pipeline.id_string(Team(id="t9")) == "t9"


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------


def test_encode_payload_uses_serialization_aliases():
    content = pipeline.encode_payload(Login(username="a", password="b", team_name="c"))

    assert content == b'{"login_id": "a", "password": "b", "name": "c"}'


def test_build_headers_unauthenticated_post():
    cd = ConnectionData(hostname="chat.example.com", port=443)
    content = b'{"a": 1}'

    headers = pipeline.build_headers(cd, content=content)

    assert headers == {
        "Host": "chat.example.com",
        "User-Agent": pipeline.USER_AGENT,
        "Content-Type": "application/json",
        "Content-Length": str(len(content)),
        "Connection": "close",
    }


def test_build_headers_authenticated_get():
    cd = ConnectionData(hostname="chat.example.com", port=8065, auto_close=False)

    headers = pipeline.build_headers(cd, token=Token("t0k"))

    assert headers == {
        "Authorization": "Bearer t0k",
        "Host": "chat.example.com:8065",
        "User-Agent": pipeline.USER_AGENT,
    }


# ---------------------------------------------------------------------------
# Response validation
# ---------------------------------------------------------------------------


def test_check_status_passes_200():
    response = httpx.Response(200)
    assert pipeline.check_status(response, "ctx") is response


def test_check_status_rejects_other_2xx():
    """Only 200 exactly is accepted."""
    with pytest.raises(HTTPResponseException) as exc_info:
        pipeline.check_status(httpx.Response(201), "ctx")

    assert exc_info.value.status == 201


def test_check_login_status_raises_login_failure():
    with pytest.raises(LoginFailureException) as exc_info:
        pipeline.check_login_status(httpx.Response(401))

    assert exc_info.value.status == 401


def test_get_header_is_case_insensitive():
    response = httpx.Response(200, headers={"Token": "abc"})

    assert pipeline.get_header(response, "token", "ctx") == "abc"


def test_get_header_missing():
    with pytest.raises(HeaderNotFoundException) as exc_info:
        pipeline.get_header(httpx.Response(200), "Token", "ctx")

    assert exc_info.value.header_name == "Token"
    assert exc_info.value.context == "ctx"


# ---------------------------------------------------------------------------
# JSON decoding
# ---------------------------------------------------------------------------


def test_get_json_body_returns_raw_and_typed():
    body = {"id": "u1", "username": "alice", "unknown_field": 1}
    response = httpx.Response(200, json=body)

    raw, user = pipeline.get_json_body(response, User, "ctx")

    assert raw == body
    assert isinstance(user, User)
    assert user.username == "alice"


def test_get_json_body_rejects_non_json_content_type():
    response = httpx.Response(
        200,
        content=b"not even close",
        headers={"Content-Type": "text/plain"},
    )

    with pytest.raises(ContentTypeException) as exc_info:
        pipeline.get_json_body(response, User, "ctx")

    assert exc_info.value.observed == "text/plain"


def test_get_json_body_invalid_json_carries_raw_text():
    response = httpx.Response(
        200,
        content=b"[1, 2",
        headers={"Content-Type": "application/json"},
    )

    with pytest.raises(JSONDecodeException) as exc_info:
        pipeline.get_json_body(response, list[int], "ctx")

    assert exc_info.value.raw_body == "[1, 2"
    assert exc_info.value.message.startswith("ctx: ")


@pytest.mark.parametrize(
    "content_type",
    ["application/json-patch+json", "application/jsonp", "text/application/json"],
)
def test_get_json_body_rejects_lookalike_media_types(content_type: str):
    """Only the application/json media type itself is accepted."""
    response = httpx.Response(200, content=b"{}", headers={"Content-Type": content_type})

    with pytest.raises(ContentTypeException) as exc_info:
        pipeline.get_json_body(response, dict, "ctx")

    assert exc_info.value.observed == content_type


@pytest.mark.parametrize(
    "content_type",
    ["application/json", "Application/JSON", "application/json; charset=utf-8"],
)
def test_get_json_body_accepts_json_media_type(content_type: str):
    response = httpx.Response(200, content=b"{}", headers={"Content-Type": content_type})

    raw, value = pipeline.get_json_body(response, dict, "ctx")

    assert raw == value == {}
