"""Twitch gift farm: channel discovery and gift-subscription watcher."""

__version__ = "0.1.0"
