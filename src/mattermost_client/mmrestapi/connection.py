"""Connection settings and the per-request transport.

Every request opens its own httpx client, sends exactly one request and
closes the client again, whatever happens in between. Nothing is pooled or
reused across calls.
"""

import contextlib
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TypeVar

import httpx
import structlog

from .exceptions import ConnectionException

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

T = TypeVar("T")


@dataclass(frozen=True)
class ConnectionData:
    """How to reach the server.

    Immutable; created once and shared by every request.
    """

    hostname: str
    port: int
    use_tls: bool = True
    auto_close: bool = True
    timeout: float = DEFAULT_TIMEOUT

    @property
    def scheme(self) -> str:
        return "https" if self.use_tls else "http"

    @property
    def _default_port(self) -> bool:
        return self.port == (443 if self.use_tls else 80)

    @property
    def host_header(self) -> str:
        """Value of the Host header for this server."""
        if self._default_port:
            return self.hostname
        return f"{self.hostname}:{self.port}"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host_header}"


def make_connection_data(
    hostname: str,
    port: int,
    use_tls: bool = True,
    auto_close: bool = True,
    timeout: float = DEFAULT_TIMEOUT,
) -> ConnectionData:
    """Validate settings and build a ConnectionData.

    Raises:
        ValueError: If hostname is empty, port is out of range or timeout
            is not positive.
    """
    if not hostname:
        msg = "hostname cannot be empty"
        raise ValueError(msg)
    if not 0 < port < 65536:  # noqa: PLR2004
        msg = f"port out of range: {port}"
        raise ValueError(msg)
    if timeout <= 0:
        msg = "timeout must be positive"
        raise ValueError(msg)
    return ConnectionData(
        hostname=hostname,
        port=port,
        use_tls=use_tls,
        auto_close=auto_close,
        timeout=timeout,
    )


@contextlib.contextmanager
def open_connection(cd: ConnectionData) -> Iterator[httpx.Client]:
    """Open a client configured for ``cd`` and close it on exit."""
    client = httpx.Client(base_url=cd.base_url, timeout=cd.timeout)
    try:
        yield client
    finally:
        client.close()


def with_connection(cd: ConnectionData, action: Callable[[httpx.Client], T]) -> T:
    """Run ``action`` with a fresh connection, closing it afterwards.

    The connection is closed even when ``action`` raises.
    """
    with open_connection(cd) as client:
        return action(client)


def send(
    cd: ConnectionData,
    method: str,
    path: str,
    headers: dict[str, str],
    content: bytes | None = None,
) -> httpx.Response:
    """Send a single request over a fresh connection.

    The response body is read in full before the connection is closed.

    Args:
        cd: Connection settings.
        method: HTTP method.
        path: Validated relative path.
        headers: Complete set of request headers.
        content: Request body, if any.

    Raises:
        ConnectionException: If connecting, sending, receiving or decoding
            the response body fails.
    """

    def action(client: httpx.Client) -> httpx.Response:
        request = client.build_request(method, path, headers=headers, content=content)
        return client.send(request)

    start_time = time.time()
    try:
        logger.debug("Making API request", method=method, path=path)
        response = with_connection(cd, action)
    except httpx.RequestError as exc:
        duration = time.time() - start_time
        logger.error(
            "API request failed",
            method=method,
            path=path,
            error=str(exc),
            duration_seconds=round(duration, 3),
        )
        raise ConnectionException(exc) from exc

    duration = time.time() - start_time
    logger.debug(
        "API request completed",
        status=response.status_code,
        duration_seconds=round(duration, 3),
    )
    return response
