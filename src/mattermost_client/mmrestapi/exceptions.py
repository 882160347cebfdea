"""Exceptions raised by the Mattermost REST API pipeline.

Every failure surfaces as one of the specific kinds below; callers can catch
:class:`MattermostError` to handle the whole family.
"""


class MattermostError(Exception):
    """Base class for all Mattermost client errors."""


class URIParseException(MattermostError):
    """Raised when a relative request path cannot be parsed."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Unable to parse request path: {path!r}")


class ConnectionException(MattermostError):
    """Raised when the transport fails to connect, send or receive."""

    def __init__(self, underlying: Exception):
        self.underlying = underlying
        super().__init__(f"Connection failed: {underlying}")


class HTTPResponseException(MattermostError):
    """Raised when an authenticated call gets a status other than 200."""

    def __init__(self, status: int, context: str = ""):
        self.status = status
        self.context = context
        super().__init__(f"{context}: expected 200 response but got: {status}")


class LoginFailureException(MattermostError):
    """Raised when the login call gets a status other than 200."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"Login failed with status {status}")


class ContentTypeException(MattermostError):
    """Raised when a response body is not declared as JSON."""

    def __init__(self, observed: str, context: str = ""):
        self.observed = observed
        self.context = context
        super().__init__(
            f"{context}: expected content type 'application/json' found {observed!r}",
        )


class HeaderNotFoundException(MattermostError):
    """Raised when a required response header is missing."""

    def __init__(self, header_name: str, context: str = ""):
        self.header_name = header_name
        self.context = context
        super().__init__(f"{context}: header not found: {header_name}")


class JSONDecodeException(MattermostError):
    """Raised when a response body does not decode into the expected shape.

    Carries the decoder's message and the raw body text.
    """

    def __init__(self, message: str, raw_body: str):
        self.message = message
        self.raw_body = raw_body
        super().__init__(message)
