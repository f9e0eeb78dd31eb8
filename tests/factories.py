"""
Test data factories for generating realistic Mattermost API responses.
"""

from typing import Any, Dict, List, Optional
import uuid

from mstmeetings.commands.parser import CommandInvocation
from mstmeetings.mattermost.api import Channel, ChannelMember, User


def new_id() -> str:
    """Mattermost IDs are 26 lowercase alphanumerics."""
    return uuid.uuid4().hex[:26]


class MattermostTestFactory:
    """Factory for creating realistic Mattermost REST payloads."""

    @staticmethod
    def create_user(
        username: str = "jane.doe",
        email: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create a /users/{id} response.

        Args:
            username: Mattermost username
            email: Email address, or None to derive from username
            user_id: User ID, or None to generate

        Returns:
            Dictionary matching the Mattermost user JSON
        """
        first, _, last = username.partition(".")
        return {
            "id": user_id or new_id(),
            "username": username,
            "email": email or f"{username}@example.com",
            "first_name": first.title(),
            "last_name": last.title(),
            "roles": "system_user",
            "locale": "en",
        }

    @staticmethod
    def create_channel(channel_type: str = "O", channel_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a /channels/{id} response.

        Args:
            channel_type: O (open), P (private), D (direct) or G (group)
            channel_id: Channel ID, or None to generate

        Returns:
            Dictionary matching the Mattermost channel JSON
        """
        channel_id = channel_id or new_id()
        return {
            "id": channel_id,
            "type": channel_type,
            "name": f"channel-{channel_id[:6]}",
            "display_name": "Town Square" if channel_type == "O" else "",
            "team_id": new_id() if channel_type in ("O", "P") else "",
        }

    @staticmethod
    def create_channel_members(channel_id: str, count: int) -> List[Dict[str, Any]]:
        """Create a /channels/{id}/members response with count members."""
        return [
            {"channel_id": channel_id, "user_id": new_id(), "roles": "channel_user"}
            for _ in range(count)
        ]

    @staticmethod
    def create_post(channel_id: str, user_id: str, message: str = "", **extra) -> Dict[str, Any]:
        """Create a /posts response."""
        post = {
            "id": new_id(),
            "create_at": 1700000000000,
            "user_id": user_id,
            "channel_id": channel_id,
            "message": message,
            "type": "",
            "props": {},
        }
        post.update(extra)
        return post


class PluginTestFactory:
    """Factory for domain objects used by dispatcher tests."""

    @staticmethod
    def user(**kwargs) -> User:
        return User.from_dict(MattermostTestFactory.create_user(**kwargs))

    @staticmethod
    def channel(channel_type: str = "O", channel_id: Optional[str] = None) -> Channel:
        return Channel.from_dict(MattermostTestFactory.create_channel(channel_type, channel_id))

    @staticmethod
    def members(channel_id: str, count: int) -> List[ChannelMember]:
        return [ChannelMember.from_dict(m) for m in MattermostTestFactory.create_channel_members(channel_id, count)]

    @staticmethod
    def invocation(raw_text: str, user_id: str = "caller-id", channel_id: str = "channel-id") -> CommandInvocation:
        return CommandInvocation(raw_text=raw_text, user_id=user_id, channel_id=channel_id)
