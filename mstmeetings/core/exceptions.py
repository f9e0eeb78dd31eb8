"""
Custom exceptions for the MS Teams Meetings slash-command service.
"""


class MSTeamsMeetingsException(Exception):
    """Base exception for all custom exceptions."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(MSTeamsMeetingsException):
    """Configuration is invalid or missing."""

    pass


# ============================================================================
# Command Exceptions
# ============================================================================


class CommandError(MSTeamsMeetingsException):
    """Slash command could not be handled."""

    pass


class InvalidCommandError(CommandError):
    """Command line is empty or does not target this plugin."""

    pass


# ============================================================================
# Mattermost API Exceptions
# ============================================================================


class PlatformAPIError(MSTeamsMeetingsException):
    """Error communicating with the Mattermost API."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class PlatformAuthenticationError(PlatformAPIError):
    """Bot token was rejected by Mattermost."""

    pass


class NotFoundError(PlatformAPIError):
    """Requested Mattermost resource does not exist."""

    pass


class LookupFailure(PlatformAPIError):
    """User, channel or membership lookup failed."""

    pass


class UserLookupError(LookupFailure):
    """Calling user could not be resolved."""

    pass


# ============================================================================
# Meeting Provider Exceptions
# ============================================================================


class ProviderError(MSTeamsMeetingsException):
    """Error talking to the MS Teams meeting provider."""

    pass


class ProviderDisconnectError(ProviderError):
    """User session could not be torn down."""

    pass
