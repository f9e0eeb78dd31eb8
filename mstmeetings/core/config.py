"""
Configuration management for the MS Teams Meetings slash-command service.

Loads configuration from:
1. .env file (secrets - never committed)
2. config.yaml (runtime settings)
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging
import os
import yaml
from dotenv import load_dotenv

from .logging_config import LOG_FORMATS, LOG_LEVELS


logger = logging.getLogger(__name__)


@dataclass
class MattermostConfig:
    """Mattermost server connection used by the bot account."""

    url: str = "http://localhost:8065"
    bot_token: str = ""
    timeout_seconds: int = 30

    @property
    def api_url(self) -> str:
        """Base URL of the v4 REST API."""
        return f"{self.url.rstrip('/')}/api/v4"


@dataclass
class GraphAPIConfig:
    """Microsoft identity configuration for the MS Teams meeting provider."""

    client_id: str
    client_secret: str
    tenant_id: str
    authority: str = ""
    scopes: List[str] = field(
        default_factory=lambda: [
            "OnlineMeetings.ReadWrite"  # Delegated permission
        ]
    )
    token_cache_path: str = ""

    def __post_init__(self):
        """Build authority URL from tenant ID if not provided."""
        if self.tenant_id and not self.authority:
            self.authority = f"https://login.microsoftonline.com/{self.tenant_id}"


@dataclass(frozen=True)
class PluginSettings:
    """
    Immutable settings injected into the command dispatcher.

    Attributes:
        trigger: Slash command trigger word (without the leading slash)
        bot_user_id: Mattermost user ID of the plugin's bot account
        provider_name: Meeting provider name recorded on meeting posts
        post_type: Custom post type of the "start meeting" card
        members_page_limit: Page size used when counting channel members
    """

    trigger: str = "mstmeetings"
    bot_user_id: str = ""
    provider_name: str = "Microsoft Teams Meetings"
    post_type: str = "custom_mstmeetings"
    members_page_limit: int = 100


@dataclass
class AppConfig:
    """Runtime application configuration (from config.yaml)."""

    # Analytics
    telemetry_enabled: bool = True

    # Verification token Mattermost sends with each slash command request
    command_token: str = ""

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_format: str = "standard"

    # Web server
    web_host: str = "0.0.0.0"
    web_port: int = 8080


class ConfigManager:
    """Central configuration manager.

    Loads configuration from:
    - .env file for secrets (Mattermost bot token, MS Teams app credentials)
    - config.yaml for runtime settings
    """

    def __init__(self, env_file: Optional[str] = None, config_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            env_file: Path to .env file (default: .env in project root)
            config_file: Path to config.yaml file (default: config.yaml in project root)
        """
        if env_file is None:
            env_file = ".env"
        load_dotenv(env_file)

        if config_file is None:
            config_file = "config.yaml"
        self.config_file = config_file

        self._load_env_config()
        self._load_yaml_config()

    def _load_env_config(self):
        """Load secrets from .env file."""

        self.mattermost = MattermostConfig(
            url=os.getenv("MM_URL", "http://localhost:8065"),
            bot_token=os.getenv("MM_BOT_TOKEN", ""),
            timeout_seconds=int(os.getenv("MM_TIMEOUT_SECONDS", "30")),
        )

        self.graph_api = GraphAPIConfig(
            client_id=os.getenv("MSTEAMS_CLIENT_ID", ""),
            client_secret=os.getenv("MSTEAMS_CLIENT_SECRET", ""),
            tenant_id=os.getenv("MSTEAMS_TENANT_ID", ""),
            authority=os.getenv("MSTEAMS_AUTHORITY", ""),
            token_cache_path=os.getenv("MSTEAMS_TOKEN_CACHE", ""),
        )

        self.plugin = PluginSettings(
            trigger=os.getenv("MSTEAMS_TRIGGER", "mstmeetings"),
            bot_user_id=os.getenv("MM_BOT_USER_ID", ""),
        )

    def _load_yaml_config(self):
        """Load runtime configuration from config.yaml."""
        if os.path.exists(self.config_file):
            try:
                with open(self.config_file, "r") as f:
                    data = yaml.safe_load(f) or {}
                self.app = AppConfig(**data)
            except (yaml.YAMLError, TypeError) as e:
                logger.warning(f"Failed to load {self.config_file}: {e}, using default configuration")
                self.app = AppConfig()
        else:
            self.app = AppConfig()

    def reload_yaml_config(self):
        """Reload runtime configuration from config.yaml."""
        self._load_yaml_config()

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.mattermost.url:
            errors.append("MM_URL not set in .env")
        if not self.mattermost.bot_token:
            errors.append("MM_BOT_TOKEN not set in .env")

        if not self.graph_api.client_id:
            errors.append("MSTEAMS_CLIENT_ID not set in .env")
        if not self.graph_api.client_secret:
            errors.append("MSTEAMS_CLIENT_SECRET not set in .env")
        if not self.graph_api.tenant_id:
            errors.append("MSTEAMS_TENANT_ID not set in .env")

        if not self.plugin.trigger or " " in self.plugin.trigger:
            errors.append("MSTEAMS_TRIGGER must be a single word")
        if self.plugin.members_page_limit < 1:
            errors.append("members_page_limit must be >= 1")

        if self.app.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(LOG_LEVELS)}")
        if self.app.log_format not in LOG_FORMATS:
            errors.append(f"log_format must be one of: {', '.join(LOG_FORMATS)}")

        if self.app.web_port < 1:
            errors.append("web_port must be >= 1")

        return errors


# Global singleton instance
_config: Optional[ConfigManager] = None


def get_config(env_file: Optional[str] = None, config_file: Optional[str] = None) -> ConfigManager:
    """
    Get global configuration manager instance (singleton).

    Args:
        env_file: Path to .env file (only used on first call)
        config_file: Path to config.yaml file (only used on first call)

    Returns:
        ConfigManager instance
    """
    global _config
    if _config is None:
        _config = ConfigManager(env_file=env_file, config_file=config_file)
    return _config


def reload_config():
    """Reload configuration from files."""
    global _config
    if _config is not None:
        _config.reload_yaml_config()
