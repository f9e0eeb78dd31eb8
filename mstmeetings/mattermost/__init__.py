"""
Mattermost Integration Module

Platform types, the plugin capability interface and the REST client.
"""

from .api import Channel, ChannelMember, CommandResponse, MeetingPostProps, PluginAPI, Post, User
from .client import MattermostClient

__all__ = [
    "Channel",
    "ChannelMember",
    "CommandResponse",
    "MattermostClient",
    "MeetingPostProps",
    "PluginAPI",
    "Post",
    "User",
]
