"""
Collection ledger - per-set, per-variant ownership records.

INVARIANT: A record exists if and only if its variant has been acquired
at least once. Records are only removed by clear_set() / clear_all().

INVARIANT: Every record has count >= 1.
"""

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any

from pocketpacks.config import CARD_BACK_URL, UNKNOWN_CARD_NAME
from pocketpacks.models.card import CatalogEntry, VariantKey, VariantKind

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def collector_sort_key(collector_number: str | None) -> int:
    """
    Numeric sort key for a collector number.

    Leading digits are used ("12a" -> 12). Missing or non-numeric
    numbers sort as 0.
    """
    if not collector_number:
        return 0
    match = _LEADING_INT.match(collector_number)
    return int(match.group(1)) if match else 0


@dataclass
class CollectionRecord:
    """
    Ownership record for one variant of one card.

    Field names in the save document are kept stable across versions
    (img, backImg, fullart, collectorNum) so older saves stay readable.
    """

    name: str
    rarity: str
    front_image: str
    back_image: str = CARD_BACK_URL
    count: int = 1
    is_full_art: bool = False
    is_masterpiece: bool = False
    is_spotlight: bool = False
    collector_number: str | None = None

    @property
    def is_regular(self) -> bool:
        """Neither a full-art nor a masterpiece rendition."""
        return not (self.is_full_art or self.is_masterpiece)

    def to_document(self) -> dict[str, Any]:
        """Serialize for the save document."""
        return {
            "name": self.name,
            "rarity": self.rarity,
            "img": self.front_image,
            "backImg": self.back_image,
            "count": self.count,
            "fullart": self.is_full_art,
            "masterpiece": self.is_masterpiece,
            "spotlight": self.is_spotlight,
            "collectorNum": self.collector_number,
        }

    @classmethod
    def from_entry(
        cls, entry: CatalogEntry, kind: VariantKind, is_spotlight: bool = False
    ) -> "CollectionRecord":
        """First-acquisition record for drawing `entry` as `kind`."""
        return cls(
            name=entry.name,
            rarity=entry.rarity,
            front_image=entry.images.front,
            back_image=entry.images.back,
            is_full_art=kind is VariantKind.FULL_ART,
            is_masterpiece=kind is VariantKind.MASTERPIECE,
            is_spotlight=is_spotlight,
            collector_number=entry.collector_number,
        )

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "CollectionRecord":
        """Build from a (migrated) save document entry."""
        collector = data.get("collectorNum")
        return cls(
            name=data.get("name") or UNKNOWN_CARD_NAME,
            rarity=data.get("rarity") or "common",
            front_image=data.get("img") or CARD_BACK_URL,
            back_image=data.get("backImg") or CARD_BACK_URL,
            count=max(1, int(data.get("count", 1))),
            is_full_art=bool(data.get("fullart", False)),
            is_masterpiece=bool(data.get("masterpiece", False)),
            is_spotlight=bool(data.get("spotlight", False)),
            collector_number=str(collector) if collector is not None else None,
        )


@dataclass
class Ledger:
    """
    Mapping set_code -> VariantKey -> CollectionRecord.

    The ledger never shares record objects with callers on insert:
    increment() stores a copy of the seed record.
    """

    sets: dict[str, dict[VariantKey, CollectionRecord]] = field(default_factory=dict)
    # Stored entries that could not be read: a set code maps to either the
    # raw non-object value or a dict of its unreadable records.
    unparsed: dict[str, Any] = field(default_factory=dict)

    def increment(
        self, set_code: str, key: VariantKey, seed: CollectionRecord
    ) -> CollectionRecord:
        """
        Record one acquisition of a variant.

        Inserts a copy of `seed` with count=1 on first acquisition,
        otherwise increments the existing count.

        Returns:
            The post-increment record.
        """
        records = self.sets.setdefault(set_code, {})
        record = records.get(key)
        if record is None:
            record = replace(seed, count=1)
            records[key] = record
        else:
            record.count += 1
        return record

    def get(self, set_code: str, key: VariantKey) -> CollectionRecord | None:
        """Get the record for a variant, or None if never acquired."""
        return self.sets.get(set_code, {}).get(key)

    def owns(self, set_code: str, key: VariantKey) -> bool:
        """Whether the variant has been acquired at least once."""
        return self.get(set_code, key) is not None

    def get_all(self, set_code: str) -> dict[VariantKey, CollectionRecord]:
        """All records for a set (a shallow copy of the mapping)."""
        return dict(self.sets.get(set_code, {}))

    def sorted_records(self, set_code: str) -> list[tuple[VariantKey, CollectionRecord]]:
        """Records for a set ordered by numeric collector number, ascending."""
        return sorted(
            self.sets.get(set_code, {}).items(),
            key=lambda item: collector_sort_key(item[1].collector_number),
        )

    def set_codes(self) -> Iterator[str]:
        """Set codes with at least one record."""
        return (code for code, records in self.sets.items() if records)

    def aggregate_total_count(self, set_code: str) -> int:
        """Sum of counts over all records in a set, duplicates included."""
        return sum(record.count for record in self.sets.get(set_code, {}).values())

    def aggregate_unique_count(
        self,
        set_code: str,
        predicate: Callable[[CollectionRecord], bool] = lambda _record: True,
    ) -> int:
        """Number of distinct card names among records matching `predicate`."""
        return len(
            {
                record.name
                for record in self.sets.get(set_code, {}).values()
                if predicate(record)
            }
        )

    def clear_set(self, set_code: str) -> bool:
        """
        Remove every record for a set, unreadable stored entries included.

        Returns True if anything was removed.
        """
        removed = set_code in self.sets or set_code in self.unparsed
        self.sets.pop(set_code, None)
        self.unparsed.pop(set_code, None)
        return removed

    def clear_all(self) -> None:
        """Remove every record in every set."""
        self.sets.clear()
        self.unparsed.clear()

    def to_document(self) -> dict[str, Any]:
        """
        Serialize to the `cards` field of the save document.

        Stored entries that could not be read are written back unchanged;
        readable records take precedence over them when keys or set codes
        collide.
        """
        cards: dict[str, Any] = {}
        for set_code, raw in self.unparsed.items():
            cards[set_code] = dict(raw) if isinstance(raw, dict) else raw
        for set_code, records in self.sets.items():
            encoded = {key.encode(): record.to_document() for key, record in records.items()}
            existing = cards.get(set_code)
            if isinstance(existing, dict):
                existing.update(encoded)
            else:
                cards[set_code] = encoded
        return cards

    @classmethod
    def from_document(cls, cards: dict[str, Any]) -> "Ledger":
        """
        Load from the `cards` field of a migrated save document.

        Entries that still cannot be interpreted are kept aside in
        `unparsed` with a warning, so saving never drops them.
        """
        ledger = cls()
        for set_code, records in cards.items():
            if not isinstance(records, dict):
                logger.warning("ledger_set_skipped", extra={"set_code": set_code})
                ledger.unparsed[set_code] = records
                continue
            loaded: dict[VariantKey, CollectionRecord] = {}
            kept: dict[str, Any] = {}
            for encoded, data in records.items():
                try:
                    key = VariantKey.decode(encoded)
                    loaded[key] = CollectionRecord.from_document(data)
                except (TypeError, ValueError, AttributeError):
                    logger.warning(
                        "ledger_record_skipped",
                        extra={"set_code": set_code, "variant_key": encoded},
                    )
                    kept[encoded] = data
            if loaded:
                ledger.sets[set_code] = loaded
            if kept:
                ledger.unparsed[set_code] = kept
        return ledger

