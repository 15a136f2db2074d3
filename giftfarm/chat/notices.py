"""Gift-subscription notices: event type, classification and log lines."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .protocol import IRCMessage

UNKNOWN_PLAN_LABEL = "unknown"


class GiftKind(Enum):
    SUB_GIFT = "sub gift"
    ANON_SUB_GIFT = "anonymous sub gift"
    UNKNOWN = "unknown"


class SubPlan(Enum):
    PRIME = "prime"
    TIER1 = "tier1"
    TIER2 = "tier2"
    TIER3 = "tier3"
    UNKNOWN = "Unknown"


_GIFT_KINDS = {
    "subgift": GiftKind.SUB_GIFT,
    "anonsubgift": GiftKind.ANON_SUB_GIFT,
}

_SUB_PLANS = {
    "Prime": SubPlan.PRIME,
    "1000": SubPlan.TIER1,
    "2000": SubPlan.TIER2,
    "3000": SubPlan.TIER3,
}


@dataclass(frozen=True)
class NoticeEvent:
    """One inbound ``USERNOTICE``, reduced to the fields the farm reads."""

    channel: str
    kind: str | None = None
    plan: str | None = None
    plan_name: str | None = None
    display_name: str | None = None
    login: str | None = None
    recipient: str | None = None
    recipient_display_name: str | None = None

    @classmethod
    def from_message(cls, message: IRCMessage) -> NoticeEvent:
        return cls(
            channel=message.channel or "",
            kind=message.tag("msg-id"),
            plan=message.tag("msg-param-sub-plan"),
            plan_name=message.tag("msg-param-sub-plan-name"),
            display_name=message.tag("display-name"),
            login=message.tag("login"),
            recipient=message.tag("msg-param-recipient-user-name"),
            recipient_display_name=message.tag("msg-param-recipient-display-name"),
        )


def classify_gift_kind(raw_kind: str | None) -> GiftKind:
    return _GIFT_KINDS.get(raw_kind or "", GiftKind.UNKNOWN)


def classify_plan(raw_plan: str | None) -> SubPlan:
    return _SUB_PLANS.get(raw_plan or "", SubPlan.UNKNOWN)


def normalize_plan_label(raw_label: str | None) -> str:
    """Turn the escaped plan name into display text.

    ``"Channel\\sSubscription"`` becomes ``"Channel Subscription"``.
    """
    if raw_label is None:
        return UNKNOWN_PLAN_LABEL
    return raw_label.replace("\\s", " ")


def is_relevant(notice: NoticeEvent, recipient: str) -> bool:
    """True only for notices explicitly addressed to *recipient*.

    The comparison is exact; notices without a recipient never match.
    """
    return notice.recipient is not None and notice.recipient == recipient


def describe(notice: NoticeEvent) -> str:
    recipient = notice.recipient_display_name or "unknown"
    sender = notice.display_name or notice.login or "anonymous"
    return (
        f"[{recipient}] {notice.channel} received a "
        f"{classify_plan(notice.plan).value} {classify_gift_kind(notice.kind).value} "
        f"from {sender}. Subscription Plan: {normalize_plan_label(notice.plan_name)}"
    )
