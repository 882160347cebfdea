"""Mattermost REST API client.

Provides one method per API operation. Every call runs the same linear
pipeline: build path, log request, send over a fresh connection, validate,
decode, log response, return.
"""

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
import structlog

from . import pipeline
from .connection import ConnectionData, send
from .events import HttpRequest, HttpResponse, Logger, run_logger
from .exceptions import HeaderNotFoundException, JSONDecodeException
from .types import (
    Channel,
    ChannelList,
    ChannelResponse,
    Channels,
    HasId,
    InitialLoad,
    Login,
    PendingPost,
    Post,
    Posts,
    SingleChannel,
    Team,
    TeamId,
    Token,
    User,
    UserId,
    UserProfile,
)

logger = structlog.get_logger(__name__)

A = TypeVar("A")

API_PREFIX = ("api", "v3")


def _unwrap_single_channel(response: SingleChannel | ChannelList) -> Channel:
    if isinstance(response, SingleChannel):
        return response.channel
    msg = f"get_channel: expected a single channel, got {type(response).__name__}"
    raise JSONDecodeException(msg, response.model_dump_json())


class MattermostClient:
    """HTTP client for the Mattermost v3 REST API.

    Holds only immutable state: the connection settings and an optional
    event sink. The caller keeps the Token returned by :meth:`login` and
    passes it to every authenticated call, so one client can be shared
    freely between threads.
    """

    def __init__(self, connection: ConnectionData, logger: Logger | None = None):
        """Initialize the client.

        Args:
            connection: How to reach the server.
            logger: Optional sink for request/response events.
        """
        self.connection = connection
        self._logger = logger

    def with_logger(self, logger: Logger | None) -> "MattermostClient":
        """Return a client for the same server that reports to ``logger``."""
        return MattermostClient(self.connection, logger=logger)

    # Generic pipeline

    def _get(self, token: Token, path: str, context: str) -> httpx.Response:
        headers = pipeline.build_headers(self.connection, token=token)
        response = send(self.connection, "GET", path, headers)
        return pipeline.check_status(response, context)

    def _post_raw(
        self,
        token: Token,
        path: str,
        content: bytes,
        context: str,
    ) -> httpx.Response:
        headers = pipeline.build_headers(self.connection, token=token, content=content)
        response = send(self.connection, "POST", path, headers, content)
        return pipeline.check_status(response, context)

    def _post(self, token: Token, path: str, payload: Any, context: str) -> httpx.Response:
        return self._post_raw(token, path, pipeline.encode_payload(payload), context)

    def with_request(
        self,
        fn_name: str,
        token: Token,
        path: str,
        target: Any,
        action: Callable[[Any], A],
    ) -> A:
        """Make an authenticated GET and pass the typed body to ``action``.

        Args:
            fn_name: Name of the API function, used in events and errors.
            token: Bearer token from login.
            path: Relative request path.
            target: Type to decode the body into.
            action: Continuation applied to the decoded value.

        Returns:
            Whatever ``action`` returns.

        Raises:
            URIParseException: If the path is malformed.
            ConnectionException: If the transport fails.
            HTTPResponseException: If the status is not 200.
            ContentTypeException: If the body is not JSON.
            JSONDecodeException: If the body does not decode into ``target``.
        """
        path = pipeline.parse_path(path)
        run_logger(self._logger, fn_name, HttpRequest("GET", path))
        response = self._get(token, path, fn_name)
        raw, value = pipeline.get_json_body(response, target, fn_name)
        run_logger(self._logger, fn_name, HttpResponse(200, path, raw))
        return action(value)

    def do_request(self, fn_name: str, token: Token, path: str, target: Any) -> Any:
        """Make an authenticated GET and return the typed body."""
        return self.with_request(fn_name, token, path, target, lambda value: value)

    # API calls

    def login(self, login: Login) -> tuple[Token, User]:
        """Log in and return the session token with the user record.

        Raises:
            LoginFailureException: If the server rejects the credentials.
            HeaderNotFoundException: If the response carries no Token header
                or an empty one.
        """
        fn_name = "login"
        path = pipeline.build_path(*API_PREFIX, "users", "login")
        content = pipeline.encode_payload(login)
        # Logged with method GET, as the login event has always been recorded.
        run_logger(
            self._logger,
            fn_name,
            HttpRequest("GET", path, login.model_dump(mode="json", by_alias=True)),
        )
        headers = pipeline.build_headers(self.connection, content=content)
        response = send(self.connection, "POST", path, headers, content)
        pipeline.check_login_status(response)

        token = pipeline.get_header(response, "Token", fn_name)
        if not token.strip():
            raise HeaderNotFoundException("Token", fn_name)
        raw, user = pipeline.get_json_body(response, User, fn_name)
        run_logger(self._logger, fn_name, HttpResponse(200, path, raw))
        logger.info("Logged in", user_id=user.id, username=user.username)
        return Token(token), user

    def get_initial_load(self, token: Token) -> InitialLoad:
        """Fetch everything the web client loads right after login."""
        path = pipeline.build_path(*API_PREFIX, "users", "initial_load")
        return self.do_request("get_initial_load", token, path, InitialLoad)

    def get_teams(self, token: Token) -> dict[TeamId, Team]:
        """Return every team the user can see, keyed by team id."""
        path = pipeline.build_path(*API_PREFIX, "teams", "all")
        return self.do_request("get_teams", token, path, dict[TeamId, Team])

    def get_channels(self, token: Token, team: str | HasId) -> Channels:
        """Return the channels of a team the user belongs to."""
        path = pipeline.build_path(*API_PREFIX, "teams", team, "channels", trailing_slash=True)
        return self.do_request("get_channels", token, path, Channels)

    def get_channel(self, token: Token, team: str | HasId, channel: str | HasId) -> Channel:
        """Return the details of one channel."""
        path = pipeline.build_path(
            *API_PREFIX, "teams", team, "channels", channel, trailing_slash=True
        )
        return self.with_request(
            "get_channel", token, path, ChannelResponse, _unwrap_single_channel
        )

    def update_last_viewed_at(
        self,
        token: Token,
        team: str | HasId,
        channel: str | HasId,
    ) -> None:
        """Mark a channel as viewed now. Safe to repeat."""
        fn_name = "update_last_viewed_at"
        path = pipeline.build_path(
            *API_PREFIX, "teams", team, "channels", channel, "update_last_viewed_at"
        )
        run_logger(self._logger, fn_name, HttpRequest("POST", path))
        self._post_raw(token, path, b"", fn_name)
        run_logger(self._logger, fn_name, HttpResponse(200, path))

    def get_posts(
        self,
        token: Token,
        team: str | HasId,
        channel: str | HasId,
        offset: int,
        limit: int,
    ) -> Posts:
        """Return a page of posts from a channel.

        Args:
            token: Bearer token from login.
            team: Team id or record.
            channel: Channel id or record.
            offset: Offset in the backlog, 0 is the most recent post.
            limit: Maximum number of posts to fetch.
        """
        if offset < 0 or limit < 0:
            msg = "offset and limit must not be negative"
            raise ValueError(msg)
        path = pipeline.build_path(
            *API_PREFIX, "teams", team, "channels", channel, "posts", "page", offset, limit
        )
        return self.do_request("get_posts", token, path, Posts)

    def get_user(self, token: Token, user: str | HasId) -> User:
        path = pipeline.build_path(*API_PREFIX, "users", user, "get")
        return self.do_request("get_user", token, path, User)

    def get_team_members(self, token: Token, team: str | HasId) -> Any:
        path = pipeline.build_path(*API_PREFIX, "teams", "members", team)
        return self.do_request("get_team_members", token, path, Any)

    def get_profiles_for_dm_list(
        self,
        token: Token,
        team: str | HasId,
    ) -> dict[UserId, UserProfile]:
        path = pipeline.build_path(*API_PREFIX, "users", "profiles_for_dm_list", team)
        return self.do_request(
            "get_profiles_for_dm_list", token, path, dict[UserId, UserProfile]
        )

    def get_me(self, token: Token) -> Any:
        path = pipeline.build_path(*API_PREFIX, "users", "me")
        return self.do_request("get_me", token, path, Any)

    def get_profiles(self, token: Token, team: str | HasId) -> dict[UserId, UserProfile]:
        path = pipeline.build_path(*API_PREFIX, "users", "profiles", team)
        return self.do_request("get_profiles", token, path, dict[UserId, UserProfile])

    def create_post(self, token: Token, team: str | HasId, post: PendingPost) -> Post:
        """Create a post in the pending post's channel and return it."""
        fn_name = "create_post"
        path = pipeline.build_path(
            *API_PREFIX, "teams", team, "channels", post.channel_id, "posts", "create"
        )
        payload = post.model_dump(mode="json")
        run_logger(self._logger, fn_name, HttpRequest("POST", path, payload))
        response = self._post(token, path, payload, fn_name)
        raw, created = pipeline.get_json_body(response, Post, fn_name)
        run_logger(self._logger, fn_name, HttpResponse(200, path, raw))
        return created
