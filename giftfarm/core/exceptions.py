"""Exception hierarchy for the gift farm.

Hierarchy::

    GiftFarmError
    ├── SettingsError
    │   ├── SettingsNotFoundError
    │   ├── SettingsMalformedError
    │   └── SettingsWriteError
    ├── HarvestError
    │   ├── UpstreamRejectedError   (status, message)
    │   └── UnexpectedStatusError   (status)
    ├── ChatConnectionError
    │   ├── AuthenticationError
    │   ├── JoinError               (channel)
    │   └── ProtocolError
    └── SessionError
"""

from __future__ import annotations

from pathlib import Path


class GiftFarmError(Exception):
    """Base class for all gift farm exceptions."""


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class SettingsError(GiftFarmError):
    """Raised when the persisted settings document cannot be used."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class SettingsNotFoundError(SettingsError):
    """The settings file does not exist or cannot be opened."""


class SettingsMalformedError(SettingsError):
    """The settings file exists but does not parse or validate."""


class SettingsWriteError(SettingsError):
    """The settings file could not be written."""


# ---------------------------------------------------------------------------
# Harvest
# ---------------------------------------------------------------------------


class HarvestError(GiftFarmError):
    """Raised when a catalog request fails; fatal to the whole harvest."""


class UpstreamRejectedError(HarvestError):
    """The catalog answered 400 with a structured error payload.

    Args:
        message: Human-readable description including the upstream message.
        status: Status code reported in the payload.
        upstream_message: The raw ``message`` field of the payload.
    """

    def __init__(self, message: str, status: int, upstream_message: str) -> None:
        super().__init__(message)
        self.status = status
        self.upstream_message = upstream_message


class UnexpectedStatusError(HarvestError):
    """The catalog answered with a non-success status other than 400."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.status = status


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatConnectionError(GiftFarmError):
    """Raised when the chat connection cannot be opened or is unusable."""


class AuthenticationError(ChatConnectionError):
    """The chat server rejected the configured credentials."""


class JoinError(ChatConnectionError):
    """A channel join was refused or the connection dropped while joining."""

    def __init__(self, message: str, channel: str) -> None:
        super().__init__(message)
        self.channel = channel


class ProtocolError(ChatConnectionError):
    """An inbound chat line could not be parsed."""


class SessionError(GiftFarmError):
    """Raised when the chat session reaches a state it never expects."""
