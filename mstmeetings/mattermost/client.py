"""
Mattermost REST API Client

Provides bot-token authenticated access to the Mattermost v4 REST API.
Covers the calls the slash command needs: user, channel and membership
lookups, post creation, ephemeral replies and command registration.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from .api import Channel, ChannelMember, Post, User
from ..commands.parser import CommandDefinition
from ..core.config import MattermostConfig
from ..core.exceptions import NotFoundError, PlatformAPIError, PlatformAuthenticationError


logger = logging.getLogger(__name__)


class MattermostClient:
    """
    Mattermost API client authenticated as the plugin's bot account.

    Failed requests are not retried; every non-2xx response is mapped to a
    PlatformAPIError subclass carrying the server's message.

    Usage:
        config = MattermostConfig(url='https://chat.example.com', bot_token='...')
        client = MattermostClient(config)
        user = client.get_user('8k3n...')
    """

    def __init__(self, config: MattermostConfig):
        """
        Initialize Mattermost API client.

        Args:
            config: MattermostConfig with server URL and bot token
        """
        self.config = config
        self.base_url = config.api_url

        logger.info(f"MattermostClient initialized (server: {config.url})")

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> requests.Response:
        """
        Make authenticated request to the Mattermost API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint relative to /api/v4 (e.g., '/users/me')
            params: Query parameters
            json: JSON body

        Returns:
            requests.Response object

        Raises:
            PlatformAuthenticationError: If the bot token is rejected (401/403)
            NotFoundError: If the resource does not exist (404)
            PlatformAPIError: For any other failure
        """
        url = f"{self.base_url}{endpoint}" if endpoint.startswith("/") else f"{self.base_url}/{endpoint}"

        headers = {
            "Authorization": f"Bearer {self.config.bot_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Requested-With": "XMLHttpRequest",
        }

        logger.debug(f"{method} {url}")

        try:
            response = requests.request(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise PlatformAPIError(f"Mattermost request failed: {e}") from e

        if response.status_code < 400:
            return response

        error_msg = f"Mattermost API request failed: {response.status_code} - {self._error_detail(response)}"
        logger.error(f"{method} {url} failed: {error_msg}")

        if response.status_code in (401, 403):
            raise PlatformAuthenticationError(error_msg, status_code=response.status_code)
        if response.status_code == 404:
            raise NotFoundError(error_msg, status_code=response.status_code)
        raise PlatformAPIError(error_msg, status_code=response.status_code)

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """Extract Mattermost's AppError message, falling back to the raw body."""
        try:
            return response.json().get("message") or response.text
        except ValueError:
            return response.text

    @staticmethod
    def _json(response: requests.Response) -> Any:
        """Decode a successful response body."""
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Mattermost returned a non-JSON body ({response.status_code}): {response.text[:200]}")
            raise PlatformAPIError(
                f"Mattermost returned an invalid response: {e}", status_code=response.status_code
            ) from e

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._request("GET", endpoint, params=params)
        return self._json(response)

    def post(self, endpoint: str, json: Optional[Any] = None) -> Any:
        response = self._request("POST", endpoint, json=json)
        return self._json(response) if response.content else {}

    def get_me(self) -> User:
        """Get the bot account the token belongs to."""
        return User.from_dict(self.get("/users/me"))

    def get_user(self, user_id: str) -> User:
        return User.from_dict(self.get(f"/users/{user_id}"))

    def get_channel(self, channel_id: str) -> Channel:
        return Channel.from_dict(self.get(f"/channels/{channel_id}"))

    def get_channel_members(self, channel_id: str, offset: int, limit: int) -> List[ChannelMember]:
        """
        Get one page of channel members.

        Mattermost pages by page number, so offset is converted to the page
        containing it.

        Args:
            channel_id: Channel ID
            offset: Index of the first member wanted
            limit: Page size

        Returns:
            List of ChannelMember
        """
        params = {"page": offset // limit if limit else 0, "per_page": limit}
        members = self.get(f"/channels/{channel_id}/members", params=params)
        logger.debug(f"Fetched {len(members)} members of channel {channel_id}")
        return [ChannelMember.from_dict(m) for m in members]

    def create_post(self, post: Post) -> Post:
        created = Post.from_dict(self.post("/posts", json=post.to_dict()))
        logger.info(f"Created post {created.id} in channel {post.channel_id}")
        return created

    def send_ephemeral_post(self, user_id: str, post: Post) -> Post:
        payload = {"user_id": user_id, "post": post.to_dict()}
        return Post.from_dict(self.post("/posts/ephemeral", json=payload))

    def register_command(self, definition: CommandDefinition, team_id: str, url: str) -> Dict[str, Any]:
        """
        Register the slash command as a custom command pointing at this service.

        Args:
            definition: Command registration record
            team_id: Team the command is created in
            url: Public URL of the /command endpoint

        Returns:
            Created command as returned by Mattermost (includes the verification token)
        """
        payload = definition.to_dict()
        payload.update({"team_id": team_id, "method": "P", "url": url})
        command = self.post("/commands", json=payload)
        logger.info(f"Registered /{definition.trigger} in team {team_id} -> {url}")
        return command

    def test_connection(self) -> bool:
        """
        Test the Mattermost connection by resolving the bot account.

        Returns:
            True if connection successful

        Raises:
            PlatformAPIError: If connection fails
        """
        logger.info("Testing Mattermost connection...")
        me = self.get_me()
        logger.info(f"✓ Mattermost connection successful (bot: {me.username})")
        return True
