"""
FastAPI Application Factory

Serves the slash command endpoint Mattermost calls for /mstmeetings and a
health check.
"""

import hmac
import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Form, HTTPException

from ..commands.parser import CommandInvocation
from ..core.config import get_config
from ..core.exceptions import ConfigurationError
from ..plugin import MSTeamsMeetingsPlugin, create_plugin


logger = logging.getLogger(__name__)


def create_app(plugin: Optional[MSTeamsMeetingsPlugin] = None, verification_token: Optional[str] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        plugin: Plugin instance (default: wired from get_config())
        verification_token: Expected slash command token (default: app.command_token)

    Returns:
        Configured FastAPI app

    Raises:
        ConfigurationError: If no verification token is configured
    """
    if verification_token is None:
        verification_token = get_config().app.command_token
    if not verification_token:
        raise ConfigurationError(
            "command_token not set in config.yaml; /command would accept requests from anyone"
        )

    if plugin is None:
        plugin = create_plugin(get_config())

    app = FastAPI(
        title="MS Teams Meetings",
        description="Mattermost slash command for MS Teams Meetings",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
    )
    app.state.plugin = plugin

    @app.post("/command")
    def execute_command(
        command: str = Form(...),
        text: str = Form(""),
        user_id: str = Form(...),
        channel_id: str = Form(...),
        team_id: str = Form(""),
        root_id: str = Form(""),
        token: str = Form(""),
    ):
        """
        Handle a Mattermost slash command request.

        Returns:
            CommandResponse JSON (always empty; replies are posted separately)
        """
        if not hmac.compare_digest(token, verification_token):
            logger.warning(f"Rejected slash command from user {user_id}: bad token")
            raise HTTPException(status_code=401, detail="Invalid command token")

        invocation = CommandInvocation.from_slash_request(
            command=command,
            text=text,
            user_id=user_id,
            channel_id=channel_id,
            root_id=root_id,
            team_id=team_id,
        )
        response = app.state.plugin.execute_command(None, invocation)
        return response.to_dict()

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "service": "mstmeetings",
        }

    logger.info(f"FastAPI application created (trigger: /{plugin.settings.trigger})")
    return app
