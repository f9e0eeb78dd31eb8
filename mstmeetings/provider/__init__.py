"""
Meeting Provider Module

MS Teams session management.
"""

from .msteams import MSTeamsProvider

__all__ = ["MSTeamsProvider"]
