"""
Recently opened sets and the three-slot pack selector.

INVARIANT: History holds at most RECENT_PACKS_LIMIT entries,
all unique, most-recent-first.

INVARIANT: History only changes when a pack is opened. Selecting a set
changes the active selection, never the history.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from pocketpacks.config import RECENT_PACKS_LIMIT


@dataclass
class RecencyHistory:
    """Bounded, deduplicated most-recently-opened set codes."""

    entries: list[str] = field(default_factory=list)
    limit: int = RECENT_PACKS_LIMIT

    def touch(self, set_code: str) -> None:
        """Move (or insert) a set code to the front, then truncate."""
        self.entries = [set_code, *(code for code in self.entries if code != set_code)]
        del self.entries[self.limit :]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __contains__(self, set_code: object) -> bool:
        return set_code in self.entries

    def to_list(self) -> list[str]:
        return list(self.entries)

    @classmethod
    def from_iterable(
        cls, set_codes: Iterable[object], limit: int = RECENT_PACKS_LIMIT
    ) -> "RecencyHistory":
        """
        Build from stored data, keeping the first occurrence of each
        string code and dropping anything beyond the limit.
        """
        entries: list[str] = []
        for code in set_codes:
            if isinstance(code, str) and code and code not in entries:
                entries.append(code)
        return cls(entries=entries[:limit], limit=limit)


@dataclass(frozen=True, slots=True)
class DisplaySlots:
    """The three pack selector positions."""

    left: str
    center: str
    right: str

    def as_tuple(self) -> tuple[str, str, str]:
        return (self.left, self.center, self.right)


def project_display(active_set: str, history: Iterable[str]) -> DisplaySlots:
    """
    Project history into [left, center, right] for the pack selector.

    Center is always the active set. Sides come from history with the
    active set removed; with one candidate it fills both sides, with
    none the active set fills all three.
    """
    candidates = [code for code in history if code != active_set]

    if not candidates:
        return DisplaySlots(left=active_set, center=active_set, right=active_set)
    if len(candidates) == 1:
        return DisplaySlots(left=candidates[0], center=active_set, right=candidates[0])
    return DisplaySlots(left=candidates[0], center=active_set, right=candidates[1])
