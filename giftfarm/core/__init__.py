"""Core modules for the gift farm."""

from .config import DEFAULT_CONFIG_FILE, KRAKEN_BASE, TWITCH_IRC_WS, AppConfig, load_app_config
from .exceptions import (
    AuthenticationError,
    ChatConnectionError,
    GiftFarmError,
    HarvestError,
    JoinError,
    ProtocolError,
    SessionError,
    SettingsError,
    SettingsMalformedError,
    SettingsNotFoundError,
    SettingsWriteError,
    UnexpectedStatusError,
    UpstreamRejectedError,
)
from .logging import setup_logging
from .store import Credentials, FarmSettings, SettingsStore

__all__ = [
    # Config
    "AppConfig",
    "load_app_config",
    "DEFAULT_CONFIG_FILE",
    "KRAKEN_BASE",
    "TWITCH_IRC_WS",
    # Settings store
    "Credentials",
    "FarmSettings",
    "SettingsStore",
    # Setup functions
    "setup_logging",
    # Errors
    "GiftFarmError",
    "SettingsError",
    "SettingsNotFoundError",
    "SettingsMalformedError",
    "SettingsWriteError",
    "HarvestError",
    "UpstreamRejectedError",
    "UnexpectedStatusError",
    "ChatConnectionError",
    "AuthenticationError",
    "JoinError",
    "ProtocolError",
    "SessionError",
]
