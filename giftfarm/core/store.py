"""Persisted settings: recipient username, chat token and known channels."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .exceptions import SettingsMalformedError, SettingsNotFoundError, SettingsWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """Read-only login view handed to the chat session."""

    username: str
    token: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, token='***')"


class FarmSettings(BaseModel):
    """The settings document.

    ``username`` is both the chat login and the gift recipient the session
    watches for.
    """

    username: str = Field(..., min_length=1)
    token: str = Field(..., min_length=1)
    channels: list[str] = Field(default_factory=list)

    @property
    def credentials(self) -> Credentials:
        return Credentials(username=self.username, token=self.token)


class SettingsStore:
    """Loads and saves :class:`FarmSettings` as pretty-printed JSON."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> FarmSettings:
        logger.debug(f"Loading config from {self.path}")
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise SettingsNotFoundError(
                f"Could not open config file {self.path}: {e}", self.path
            ) from e

        try:
            return FarmSettings.model_validate_json(raw)
        except ValidationError as e:
            raise SettingsMalformedError(
                f"Could not parse config file {self.path}: {e}", self.path
            ) from e

    def save(self, settings: FarmSettings) -> None:
        logger.debug(f"Saving config to {self.path}")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(settings.model_dump_json(indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise SettingsWriteError(
                f"Could not write config file {self.path}: {e}", self.path
            ) from e
