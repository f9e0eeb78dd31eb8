"""
MS Teams Meeting Provider

Holds users' Microsoft identity sessions in an MSAL token cache and tears
them down on disconnect.
"""

import logging
import os
from typing import List

from msal import ConfidentialClientApplication, SerializableTokenCache

from ..core.config import GraphAPIConfig
from ..core.exceptions import ProviderDisconnectError


logger = logging.getLogger(__name__)


class MSTeamsProvider:
    """
    MS Teams session store backed by MSAL.

    Accounts land in the cache when users connect through the OAuth flow;
    disconnect removes them (and their refresh tokens) again. When
    token_cache_path is configured the cache is persisted in MSAL's own
    serialization format.

    Usage:
        provider = MSTeamsProvider(config.graph_api)
        provider.disconnect("user@example.com")
    """

    def __init__(self, config: GraphAPIConfig):
        """
        Initialize provider.

        Args:
            config: GraphAPIConfig with app credentials and token cache path
        """
        self.config = config
        self.token_cache = SerializableTokenCache()
        self._load_cache()

        self._msal_client = ConfidentialClientApplication(
            client_id=config.client_id,
            client_credential=config.client_secret,
            authority=config.authority,
            token_cache=self.token_cache,
        )

        logger.info(f"MSTeamsProvider initialized (tenant: {config.tenant_id[:8]}...)")

    def _load_cache(self):
        path = self.config.token_cache_path
        if path and os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                self.token_cache.deserialize(f.read())
            logger.debug(f"Loaded MSAL token cache from {path}")

    def _save_cache(self):
        path = self.config.token_cache_path
        if path and self.token_cache.has_state_changed:
            with open(path, "w", encoding="utf-8") as f:
                f.write(self.token_cache.serialize())
            logger.debug(f"Saved MSAL token cache to {path}")

    def _accounts_for(self, username: str) -> List[dict]:
        return self._msal_client.get_accounts(username=username)

    def is_connected(self, username: str) -> bool:
        return bool(username) and bool(self._accounts_for(username))

    def disconnect(self, username: str) -> None:
        """
        Remove every cached account of a user.

        Args:
            username: Microsoft sign-in name (the user's email)

        Raises:
            ProviderDisconnectError: If the user has no session or removal fails
        """
        if not username:
            raise ProviderDisconnectError("user has no email address")

        try:
            accounts = self._accounts_for(username)
            if not accounts:
                raise ProviderDisconnectError("user is not connected to MS Teams Meetings")

            for account in accounts:
                self._msal_client.remove_account(account)

            self._save_cache()
        except ProviderDisconnectError:
            raise
        except Exception as e:
            logger.error(f"Failed to remove MSAL accounts for {username}: {e}", exc_info=True)
            raise ProviderDisconnectError(f"could not remove session: {e}") from e

        logger.info(f"Disconnected {username} from MS Teams ({len(accounts)} account(s) removed)")
