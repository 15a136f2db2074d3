"""IRC line parsing for Twitch chat.

Lines have the shape ``[@tags] [:prefix] COMMAND [params...] [:trailing]``.
Tag values are kept exactly as received (``\\s`` stays ``\\s``); unescaping
is left to whoever presents the value.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from giftfarm.core.exceptions import ProtocolError


@dataclass
class IRCMessage:
    command: str
    params: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)
    prefix: str | None = None

    @property
    def nick(self) -> str | None:
        """Nickname part of the prefix (``nick!user@host``)."""
        if not self.prefix:
            return None
        return self.prefix.split("!", 1)[0]

    @property
    def channel(self) -> str | None:
        """Channel name without ``#`` when the first param is a channel."""
        if self.params and self.params[0].startswith("#"):
            return self.params[0][1:]
        return None

    @property
    def trailing(self) -> str:
        return self.params[-1] if self.params else ""

    def tag(self, key: str) -> str | None:
        """Tag value, with empty values reported as missing."""
        return self.tags.get(key) or None


def _parse_tags(raw: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for item in raw.split(";"):
        if not item:
            continue
        key, _, value = item.partition("=")
        tags[key] = value
    return tags


def parse_irc_message(line: str) -> IRCMessage:
    """Parse one IRC line (without the trailing CRLF)."""
    rest = line.rstrip("\r\n")
    if not rest.strip():
        raise ProtocolError("empty IRC line")

    tags: dict[str, str] = {}
    prefix: str | None = None

    if rest.startswith("@"):
        raw_tags, _, rest = rest[1:].partition(" ")
        tags = _parse_tags(raw_tags)
        rest = rest.lstrip(" ")

    if rest.startswith(":"):
        prefix, _, rest = rest[1:].partition(" ")
        rest = rest.lstrip(" ")

    if not rest:
        raise ProtocolError(f"IRC line without command: {line!r}")

    trailing: str | None = None
    if " :" in rest:
        rest, _, trailing = rest.partition(" :")
    elif rest.startswith(":"):
        raise ProtocolError(f"IRC line without command: {line!r}")

    command, *params = rest.split()
    if trailing is not None:
        params.append(trailing)

    return IRCMessage(command=command.upper(), params=params, tags=tags, prefix=prefix)


def split_lines(payload: str) -> list[str]:
    """Split a WebSocket text frame into its IRC lines."""
    return [line for line in payload.split("\r\n") if line.strip()]
