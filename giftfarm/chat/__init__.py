"""Twitch chat: protocol adapter, gift notices and the long-lived session."""

from .connection import ChatConnection, ChatEvent, Connection, Disconnected, Quit
from .notices import (
    GiftKind,
    NoticeEvent,
    SubPlan,
    classify_gift_kind,
    classify_plan,
    describe,
    is_relevant,
    normalize_plan_label,
)
from .protocol import IRCMessage, parse_irc_message
from .session import ChatSession, SessionState

__all__ = [
    # Connection
    "ChatConnection",
    "ChatEvent",
    "Connection",
    "Disconnected",
    "Quit",
    "IRCMessage",
    "parse_irc_message",
    # Notices
    "GiftKind",
    "NoticeEvent",
    "SubPlan",
    "classify_gift_kind",
    "classify_plan",
    "describe",
    "is_relevant",
    "normalize_plan_label",
    # Session
    "ChatSession",
    "SessionState",
]
