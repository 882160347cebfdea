"""Request building and response validation shared by every API call.

Paths are built from percent-encoded segments and checked before any
network I/O. Responses are accepted only with status 200 and a JSON content
type; the body is parsed once into an untyped JSON value and then projected
onto the caller's declared type.
"""

import json
import re
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import pydantic

from .. import __version__
from .connection import ConnectionData
from .exceptions import (
    ContentTypeException,
    HeaderNotFoundException,
    HTTPResponseException,
    JSONDecodeException,
    LoginFailureException,
    URIParseException,
)
from .types import HasId, Token

T = TypeVar("T")

USER_AGENT = f"mattermost-client/{__version__}"
JSON_CONTENT_TYPE = "application/json"

# Characters allowed in a relative reference (RFC 3986) plus escapes
_RELATIVE_REF = re.compile(r"^(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2})*$")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+\-.]*:")


def id_string(value: str | HasId) -> str:
    """Return the canonical string form of an identifier or a record's id."""
    if isinstance(value, str):
        return value
    return str(value.id)


def parse_path(path: str) -> str:
    """Check that ``path`` is a well-formed relative URI.

    Raises:
        URIParseException: If the path is absolute or malformed.
    """
    if not _RELATIVE_REF.match(path) or _SCHEME.match(path) or path.startswith("//"):
        raise URIParseException(path)
    return path


def build_path(*segments: str | int | HasId, trailing_slash: bool = False) -> str:
    """Join identifier and literal segments into an absolute API path.

    Every segment is percent-encoded on its own, so an identifier can never
    introduce extra path components or a query string.

    Example:
        >>> build_path("api", "v3", "users", "a b")
        '/api/v3/users/a%20b'
    """
    parts = []
    for segment in segments:
        text = str(segment) if isinstance(segment, int) else id_string(segment)
        parts.append(quote(text, safe=""))
    path = "/" + "/".join(parts)
    if trailing_slash:
        path += "/"
    return parse_path(path)


def encode_payload(payload: Any) -> bytes:
    """Encode a request payload as UTF-8 JSON.

    Pydantic models are dumped with their serialization aliases.
    """
    if isinstance(payload, pydantic.BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True)
    return json.dumps(payload).encode("utf-8")


def build_headers(
    cd: ConnectionData,
    token: Token | None = None,
    content: bytes | None = None,
) -> dict[str, str]:
    """Assemble request headers.

    Args:
        cd: Connection settings (Host header and close policy).
        token: Bearer token; omitted for the login call.
        content: Request body; when given, JSON content type and length
            headers are added.

    Returns:
        Header mapping in send order.
    """
    headers: dict[str, str] = {}
    if token is not None:
        headers["Authorization"] = f"Bearer {token.value}"
    headers["Host"] = cd.host_header
    headers["User-Agent"] = USER_AGENT
    if content is not None:
        headers["Content-Type"] = JSON_CONTENT_TYPE
        headers["Content-Length"] = str(len(content))
    if cd.auto_close:
        headers["Connection"] = "close"
    return headers


def check_status(response: httpx.Response, context: str) -> httpx.Response:
    """Require status 200 on an authenticated call.

    Raises:
        HTTPResponseException: For any other status.
    """
    if response.status_code != httpx.codes.OK:
        raise HTTPResponseException(response.status_code, context)
    return response


def check_login_status(response: httpx.Response) -> httpx.Response:
    """Require status 200 on the login call.

    Raises:
        LoginFailureException: For any other status.
    """
    if response.status_code != httpx.codes.OK:
        raise LoginFailureException(response.status_code)
    return response


def get_header(response: httpx.Response, name: str, context: str) -> str:
    """Look up a response header case-insensitively.

    Raises:
        HeaderNotFoundException: If the header is absent.
    """
    value = response.headers.get(name)
    if value is None:
        raise HeaderNotFoundException(name, context)
    return value


def get_json_body(response: httpx.Response, target: Any, context: str) -> tuple[Any, Any]:
    """Decode a JSON response into its raw value and a typed value.

    The body is parsed once; the typed value is validated from the parsed
    tree with pydantic.

    Args:
        response: Response with a validated status.
        target: Type to project the body onto (model, container or Any).
        context: Name of the calling API function, for error messages.

    Returns:
        Tuple of (raw, value): the untyped JSON and the typed projection.

    Raises:
        HeaderNotFoundException: If there is no Content-Type header.
        ContentTypeException: If the content type is not JSON.
        JSONDecodeException: If the body cannot be parsed or validated.
    """
    content_type = get_header(response, "Content-Type", context)
    media_type = content_type.split(";")[0].strip().lower()
    if media_type != JSON_CONTENT_TYPE:
        raise ContentTypeException(content_type, context)

    try:
        raw = response.json()
    except ValueError as exc:
        msg = f"{context}: {exc}"
        raise JSONDecodeException(msg, response.text) from exc

    try:
        value = pydantic.TypeAdapter(target).validate_python(raw)
    except pydantic.ValidationError as exc:
        msg = f"{context}: {exc}"
        raise JSONDecodeException(msg, response.text) from exc
    return raw, value
