"""API request and response types for the Mattermost v3 REST API.

Pydantic models representing the structure of data sent to and returned by
the server with minimal processing. Timestamps are milliseconds since the
epoch, exactly as the server reports them.
"""

import time
from dataclasses import dataclass, field
from typing import Annotated, Any, NewType, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag

TeamId = NewType("TeamId", str)
ChannelId = NewType("ChannelId", str)
UserId = NewType("UserId", str)
PostId = NewType("PostId", str)


@runtime_checkable
class HasId(Protocol):
    """Anything carrying a server-assigned identifier."""

    id: str


@dataclass(frozen=True)
class Token:
    """Opaque bearer credential returned by login."""

    value: str = field(repr=False)

    def __str__(self) -> str:
        return self.value


class Login(BaseModel):
    """Credentials for the login endpoint.

    Serialized with the server's field names: ``login_id`` for the username
    or email and ``name`` for the team name.
    """

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(serialization_alias="login_id")
    password: str
    team_name: str = Field("", serialization_alias="name")


class Team(BaseModel):
    """Team record."""

    id: TeamId
    create_at: int = 0
    update_at: int = 0
    delete_at: int = 0
    display_name: str = ""
    name: str = ""
    email: str = ""
    type: str = ""
    company_name: str = ""
    allowed_domains: str = ""
    invite_id: str = ""
    allow_open_invite: bool = False


class Channel(BaseModel):
    """Channel record."""

    id: ChannelId
    create_at: int = 0
    update_at: int = 0
    delete_at: int = 0
    team_id: TeamId | None = None
    type: str = ""
    display_name: str = ""
    name: str = ""
    header: str = ""
    purpose: str = ""
    last_post_at: int = 0
    total_msg_count: int = 0
    extra_update_at: int = 0
    creator_id: UserId | None = None


class Channels(BaseModel):
    """Channels of a team together with the caller's membership data."""

    channels: list[Channel] = []
    members: dict[ChannelId, Any] = {}


class SingleChannel(BaseModel):
    """A single channel response with the caller's membership data."""

    channel: Channel
    member: dict[str, Any] | None = None


class ChannelList(BaseModel):
    """A channel response that carries a list of channels."""

    channels: list[Channel] = []


def _channel_response_tag(value: Any) -> str:
    if isinstance(value, dict):
        return "single" if "channel" in value else "list"
    return "single" if isinstance(value, SingleChannel) else "list"


ChannelResponse = Annotated[
    Union[Annotated[SingleChannel, Tag("single")], Annotated[ChannelList, Tag("list")]],
    Discriminator(_channel_response_tag),
]


class User(BaseModel):
    """Full user record as returned by login and the user lookup endpoint."""

    id: UserId
    create_at: int = 0
    update_at: int = 0
    delete_at: int = 0
    username: str = ""
    auth_data: str = ""
    auth_service: str = ""
    email: str = ""
    email_verified: bool = False
    nickname: str = ""
    first_name: str = ""
    last_name: str = ""
    roles: str = ""
    notify_props: dict[str, Any] = {}
    last_password_update: int = 0
    last_picture_update: int = 0
    locale: str = ""


class UserProfile(BaseModel):
    """Public profile of another user."""

    id: UserId
    username: str = ""
    email: str = ""
    nickname: str = ""
    first_name: str = ""
    last_name: str = ""
    auth_service: str = ""
    roles: str = ""
    locale: str = ""


class InitialLoad(BaseModel):
    """Everything the server hands a freshly logged-in client."""

    user: User
    teams: list[Team] = []
    team_members: list[Any] = []
    direct_profiles: dict[UserId, UserProfile] = {}
    preferences: list[Any] = []
    client_cfg: dict[str, Any] = {}
    license_cfg: dict[str, Any] = {}
    no_access: bool = False


class Post(BaseModel):
    """A message posted to a channel."""

    id: PostId
    create_at: int = 0
    update_at: int = 0
    delete_at: int = 0
    user_id: UserId | None = None
    channel_id: ChannelId
    root_id: str = ""
    parent_id: str = ""
    original_id: str = ""
    message: str = ""
    type: str = ""
    props: dict[str, Any] = {}
    hashtags: str = ""
    filenames: list[str] = []
    pending_post_id: str = ""


class Posts(BaseModel):
    """A page of posts keyed by id, with the server's display order."""

    order: list[PostId] = []
    posts: dict[PostId, Post] = {}

    def ordered(self) -> list[Post]:
        """Return the posts in the server's order, skipping unknown ids."""
        return [self.posts[post_id] for post_id in self.order if post_id in self.posts]


class PendingPost(BaseModel):
    """A post that has not been created on the server yet."""

    channel_id: ChannelId
    user_id: UserId
    message: str
    create_at: int
    pending_post_id: str
    filenames: list[str] = []


def make_pending_post(message: str, user_id: UserId, channel_id: ChannelId) -> PendingPost:
    """Build a PendingPost stamped with the current time.

    The pending id is ``"{user_id}:{create_at}"``, which the server echoes
    back so the caller can match the created post to its request.
    """
    create_at = int(time.time() * 1000)
    return PendingPost(
        channel_id=channel_id,
        user_id=user_id,
        message=message,
        create_at=create_at,
        pending_post_id=f"{user_id}:{create_at}",
    )
