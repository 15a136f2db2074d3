"""get-streams: add every channel currently live in the top categories to the settings."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from giftfarm.core import (
    AppConfig,
    FarmSettings,
    GiftFarmError,
    HarvestError,
    SettingsStore,
    load_app_config,
    setup_logging,
)
from giftfarm.harvest import CatalogClient, PaginationHarvester
from giftfarm.registry import ChannelRegistry, MergeResult

LOGGER: logging.Logger = logging.getLogger("giftfarm")


async def collect_streams(config: AppConfig) -> list[str]:
    async with CatalogClient(
        config.catalog_url, config.client_id, timeout=config.request_timeout
    ) as client:
        return await PaginationHarvester(client).harvest()


def save_channels(store: SettingsStore, settings: FarmSettings, channels: list[str]) -> MergeResult:
    """Merge *channels* into the stored list and write the settings back."""
    result = ChannelRegistry.merge(settings.channels, channels)

    LOGGER.info(f"Saving {result.added} new channels for a total of {result.total}")

    store.save(settings.model_copy(update={"channels": result.channels}))
    return result


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Discover live channels and merge them into the settings file"
    )
    parser.add_argument("--config", type=Path, help="Settings file (username, token, channels)")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    config = load_app_config(args.config, args.log_level)
    setup_logging(config.log_level)

    store = SettingsStore(config.config_file)
    try:
        settings = store.load()
        channels = asyncio.run(collect_streams(config))

        LOGGER.info(f"Found {len(channels)} channels currently streaming")

        save_channels(store, settings, channels)
    except HarvestError as e:
        LOGGER.error(f"Harvest failed, settings left unchanged: {e}")
        sys.exit(1)
    except GiftFarmError as e:
        LOGGER.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")
        sys.exit(1)


if __name__ == "__main__":
    main()
