"""Tests for the get-streams and twitch-gift-farm command-line entry points."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import respx

from giftfarm import get_streams
from giftfarm import main as farm
from giftfarm.core.config import AppConfig
from giftfarm.core.exceptions import AuthenticationError, HarvestError, SettingsWriteError
from giftfarm.core.store import FarmSettings, SettingsStore

BASE = "https://catalog.test/kraken"


def stored_channels(path: Path) -> list[str]:
    return json.loads(path.read_text(encoding="utf-8"))["channels"]


class TestSaveChannels:
    def test_merges_and_saves(self, settings_file: Path) -> None:
        store = SettingsStore(settings_file)
        settings = store.load()

        result = get_streams.save_channels(store, settings, ["c", "a", "d", "c"])

        assert result.added == 2
        assert result.total == 4
        assert stored_channels(settings_file) == ["a", "b", "c", "d"]
        assert store.load().username == "giftee"

    def test_nothing_new(self, settings_file: Path) -> None:
        store = SettingsStore(settings_file)

        result = get_streams.save_channels(store, store.load(), [])

        assert result.added == 0
        assert stored_channels(settings_file) == ["a", "b"]


class TestCollectStreams:
    @pytest.mark.asyncio
    async def test_harvests_through_the_catalog(self) -> None:
        def streams_page(request: httpx.Request) -> httpx.Response:
            offset = request.url.params["offset"]
            streams = [{"channel": {"name": f"live{offset}"}}] if offset in ("0", "100") else []
            return httpx.Response(200, json={"streams": streams})

        async with respx.mock(base_url=BASE) as mock:
            mock.get("/games/top").mock(
                return_value=httpx.Response(200, json={"top": [{"game": {"name": "Chess"}}]})
            )
            streams = mock.get("/streams").mock(side_effect=streams_page)

            channels = await get_streams.collect_streams(AppConfig(catalog_url=BASE))

        assert channels == ["live0", "live100"]
        assert streams.call_count == 10


class TestGetStreamsMain:
    def test_success_updates_settings(self, settings_file: Path) -> None:
        with (
            patch.object(get_streams, "setup_logging"),
            patch.object(get_streams, "collect_streams", AsyncMock(return_value=["z", "a"])),
        ):
            get_streams.main(["--config", str(settings_file)])

        assert stored_channels(settings_file) == ["a", "b", "z"]

    def test_harvest_failure_leaves_settings_untouched(self, settings_file: Path) -> None:
        before = settings_file.read_text(encoding="utf-8")
        failing = AsyncMock(side_effect=HarvestError("Could not get streams: HTTP 503"))

        with (
            patch.object(get_streams, "setup_logging"),
            patch.object(get_streams, "collect_streams", failing),
        ):
            with pytest.raises(SystemExit) as exc_info:
                get_streams.main(["--config", str(settings_file)])

        assert exc_info.value.code == 1
        assert settings_file.read_text(encoding="utf-8") == before

    def test_save_failure_exits(self, settings_file: Path) -> None:
        write_failure = SettingsWriteError("Could not write config file: disk full", settings_file)

        with (
            patch.object(get_streams, "setup_logging"),
            patch.object(get_streams, "collect_streams", AsyncMock(return_value=["z"])),
            patch.object(SettingsStore, "save", side_effect=write_failure),
        ):
            with pytest.raises(SystemExit) as exc_info:
                get_streams.main(["--config", str(settings_file)])

        assert exc_info.value.code == 1
        assert stored_channels(settings_file) == ["b", "a"]

    def test_missing_settings_skips_harvest(self, tmp_path: Path) -> None:
        collect = AsyncMock(return_value=[])

        with (
            patch.object(get_streams, "setup_logging"),
            patch.object(get_streams, "collect_streams", collect),
        ):
            with pytest.raises(SystemExit) as exc_info:
                get_streams.main(["--config", str(tmp_path / "missing.json")])

        assert exc_info.value.code == 1
        collect.assert_not_called()


class TestFarmMain:
    def test_missing_settings(self, tmp_path: Path) -> None:
        with patch.object(farm, "setup_logging"):
            with pytest.raises(SystemExit) as exc_info:
                farm.main(["--config", str(tmp_path / "missing.json")])

        assert exc_info.value.code == 1

    def test_session_failure_exits(self, settings_file: Path) -> None:
        session = MagicMock()
        session.run = AsyncMock(side_effect=AuthenticationError("Login authentication failed"))

        with (
            patch.object(farm, "setup_logging"),
            patch.object(farm.ChatSession, "from_settings", return_value=session) as from_settings,
        ):
            with pytest.raises(SystemExit) as exc_info:
                farm.main(["--config", str(settings_file), "--log-level", "debug"])

        assert exc_info.value.code == 1
        settings, config = from_settings.call_args.args
        assert settings == FarmSettings(username="giftee", token="oauth:secret", channels=["b", "a"])
        assert config.log_level == "DEBUG"

    def test_interrupt_is_a_clean_stop(self, settings_file: Path) -> None:
        session = MagicMock()
        session.run = AsyncMock(side_effect=KeyboardInterrupt)

        with (
            patch.object(farm, "setup_logging"),
            patch.object(farm.ChatSession, "from_settings", return_value=session),
        ):
            farm.main(["--config", str(settings_file)])

        session.run.assert_awaited_once()
