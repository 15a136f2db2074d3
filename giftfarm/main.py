"""twitch-gift-farm: watch joined channels for gift subscriptions to our user."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from giftfarm.chat import ChatSession
from giftfarm.core import GiftFarmError, SettingsStore, load_app_config, setup_logging

LOGGER: logging.Logger = logging.getLogger("giftfarm")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Join the configured channels and log gift subscriptions to your account"
    )
    parser.add_argument("--config", type=Path, help="Settings file (username, token, channels)")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    config = load_app_config(args.config, args.log_level)
    setup_logging(config.log_level)

    try:
        settings = SettingsStore(config.config_file).load()
    except GiftFarmError as e:
        LOGGER.error(str(e))
        sys.exit(1)

    session = ChatSession.from_settings(settings, config)

    try:
        asyncio.run(session.run())
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")
    except GiftFarmError as e:
        LOGGER.error(f"Stopping: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
