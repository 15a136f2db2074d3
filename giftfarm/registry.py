"""Merging of discovered channel names into the persisted channel list."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class MergeResult:
    """Outcome of a merge: the new channel list and how many entries are new."""

    channels: list[str]
    added: int

    @property
    def total(self) -> int:
        return len(self.channels)


class ChannelRegistry:
    """Keeps the known channel names sorted and free of duplicates.

    Names are compared exactly: no case folding, no whitespace trimming.
    """

    @staticmethod
    def merge(existing: Sequence[str], incoming: Iterable[str]) -> MergeResult:
        """Concatenate, sort and drop duplicates.

        ``added`` is ``len(merged) - len(existing)``, which stays correct when
        *incoming* repeats itself or repeats names already in *existing*.
        """
        merged = sorted([*existing, *incoming])
        deduped = [name for i, name in enumerate(merged) if i == 0 or name != merged[i - 1]]
        return MergeResult(channels=deduped, added=len(deduped) - len(existing))
