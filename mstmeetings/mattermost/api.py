"""
Mattermost Plugin API Surface

Types exchanged with Mattermost and the capability set the command
dispatcher depends on. Anything that implements PluginAPI can back the
dispatcher: the REST-backed PluginServices in production, a Mock in tests.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


CHANNEL_TYPE_OPEN = "O"
CHANNEL_TYPE_PRIVATE = "P"
CHANNEL_TYPE_DIRECT = "D"
CHANNEL_TYPE_GROUP = "G"

# Meeting card status values understood by the webapp
POST_STATUS_STARTED = "STARTED"
POST_STATUS_ENDED = "ENDED"
POST_STATUS_RECENTLY_CREATED = "RECENTLY_CREATED"
POST_STATUS_DIALOG_WARN = "DIALOG_WARN"


@dataclass
class User:
    """Mattermost user."""

    id: str
    username: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.username

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data.get("id", ""),
            username=data.get("username", ""),
            email=data.get("email", ""),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
        )


@dataclass
class Channel:
    """Mattermost channel."""

    id: str
    type: str
    name: str = ""
    display_name: str = ""
    team_id: str = ""

    def is_group_or_direct(self) -> bool:
        """Direct and group messages have a small, fixed set of participants."""
        return self.type in (CHANNEL_TYPE_DIRECT, CHANNEL_TYPE_GROUP)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Channel":
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            name=data.get("name", ""),
            display_name=data.get("display_name", ""),
            team_id=data.get("team_id", ""),
        )


@dataclass
class ChannelMember:
    """Membership of one user in a channel."""

    channel_id: str
    user_id: str
    roles: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChannelMember":
        return cls(
            channel_id=data.get("channel_id", ""),
            user_id=data.get("user_id", ""),
            roles=data.get("roles", ""),
        )


@dataclass
class MeetingPostProps:
    """
    Structured properties of a meeting card post.

    The webapp renders posts of the plugin's custom type from these
    properties, so the keys produced by to_props() are part of the wire
    contract.
    """

    status: str
    is_personal: bool
    creator_name: str
    provider_name: str
    message: str

    def to_props(self, post_type: str) -> Dict[str, Any]:
        return {
            "type": post_type,
            "meeting_status": self.status,
            "meeting_personal": self.is_personal,
            "meeting_creator_username": self.creator_name,
            "meeting_provider": self.provider_name,
            "message": self.message,
        }


@dataclass
class Post:
    """Mattermost post."""

    user_id: str
    channel_id: str
    message: str
    type: str = ""
    props: Dict[str, Any] = field(default_factory=dict)
    id: str = ""
    root_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "user_id": self.user_id,
            "channel_id": self.channel_id,
            "message": self.message,
        }
        if self.type:
            data["type"] = self.type
        if self.props:
            data["props"] = self.props
        if self.id:
            data["id"] = self.id
        if self.root_id:
            data["root_id"] = self.root_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Post":
        return cls(
            user_id=data.get("user_id", ""),
            channel_id=data.get("channel_id", ""),
            message=data.get("message", ""),
            type=data.get("type", ""),
            props=data.get("props") or {},
            id=data.get("id", ""),
            root_id=data.get("root_id", ""),
        )


@dataclass
class CommandResponse:
    """Acknowledgment returned to Mattermost for a slash command."""

    response_type: str = ""
    text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        if self.response_type:
            data["response_type"] = self.response_type
        if self.text:
            data["text"] = self.text
        return data


class PluginAPI(Protocol):
    """
    Capabilities the command dispatcher needs from its host.

    Lookups and post creation raise PlatformAPIError subclasses on failure,
    disconnect raises ProviderDisconnectError. send_ephemeral_post and
    track_event are fire-and-forget.
    """

    def get_user(self, user_id: str) -> User:
        ...

    def get_channel(self, channel_id: str) -> Channel:
        ...

    def get_channel_members(self, channel_id: str, offset: int, limit: int) -> List[ChannelMember]:
        ...

    def create_post(self, post: Post) -> Post:
        ...

    def send_ephemeral_post(self, user_id: str, post: Post) -> None:
        ...

    def disconnect(self, user_id: str) -> None:
        ...

    def track_event(self, event: str, user_id: str, properties: Optional[Dict[str, Any]] = None) -> None:
        ...
