"""Gift farm runtime configuration"""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# === Path Configuration ===
DEFAULT_CONFIG_FILE = Path.home() / ".config" / "twitch-gift-farm" / "config.json"

# === Twitch endpoints ===
TWITCH_IRC_WS = "wss://irc-ws.chat.twitch.tv:443"
KRAKEN_BASE = "https://api.twitch.tv/kraken"
KRAKEN_CLIENT_ID = "34afn666979w6kmmr6b1bcnagfv6s3"


class AppConfig(BaseSettings):
    """Process tunables, read from ``GIFT_FARM_*`` variables or ``.env``"""

    model_config = SettingsConfigDict(
        env_prefix="GIFT_FARM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Persisted settings document (username, token, channels)
    config_file: Path = Field(
        default=DEFAULT_CONFIG_FILE, description="Path of the persisted settings file"
    )

    # Chat
    chat_url: str = Field(default=TWITCH_IRC_WS, description="Chat WebSocket endpoint")
    join_timeout: float = Field(default=30.0, gt=0, description="Seconds to wait for a join")
    # max 20 join attempts per 10 seconds per user (2000 for verified bots)
    join_interval: float = Field(default=0.0, ge=0, description="Pause after each join")
    connect_timeout: float = Field(default=30.0, gt=0, description="Chat handshake timeout")
    heartbeat: float = Field(default=60.0, gt=0, description="Seconds between socket pings")

    # Catalog
    catalog_url: str = Field(default=KRAKEN_BASE, description="Catalog API base URL")
    client_id: str = Field(default=KRAKEN_CLIENT_ID, description="Catalog Client-ID header")
    request_timeout: float = Field(default=10.0, gt=0, description="Per-request timeout")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("config_file")
    @classmethod
    def expand_config_file(cls, v: Path) -> Path:
        """Expand ``~`` in the settings path"""
        return v.expanduser()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper


def load_app_config(config_file: Path | None = None, log_level: str | None = None) -> AppConfig:
    """Build the config, letting command-line values win over the environment"""
    overrides: dict[str, object] = {}
    if config_file is not None:
        overrides["config_file"] = config_file
    if log_level is not None:
        overrides["log_level"] = log_level
    return AppConfig(**overrides)  # type: ignore[arg-type]
