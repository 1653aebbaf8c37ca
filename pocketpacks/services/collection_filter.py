"""
Named views over one set's owned records.

Every view is ordered by numeric collector number, like the unfiltered
listing.
"""

from collections.abc import Callable
from enum import Enum

from pocketpacks.models.card import VariantKey
from pocketpacks.models.ledger import CollectionRecord, Ledger


class CollectionFilter(str, Enum):
    ALL = "all"
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    MYTHIC = "mythic"
    FULLART = "fullart"
    SPOTLIGHT = "spotlight"
    SECRETS = "secrets"


def _rarity_view(rarity: str) -> Callable[[CollectionRecord], bool]:
    return lambda record: record.is_regular and record.rarity == rarity


# Rarity views cover regular renditions only; secrets are masterpieces.
_PREDICATES: dict[CollectionFilter, Callable[[CollectionRecord], bool]] = {
    CollectionFilter.ALL: lambda _record: True,
    CollectionFilter.COMMON: _rarity_view("common"),
    CollectionFilter.UNCOMMON: _rarity_view("uncommon"),
    CollectionFilter.RARE: _rarity_view("rare"),
    CollectionFilter.MYTHIC: _rarity_view("mythic"),
    CollectionFilter.FULLART: lambda record: record.is_full_art,
    CollectionFilter.SPOTLIGHT: lambda record: record.is_spotlight,
    CollectionFilter.SECRETS: lambda record: record.is_masterpiece,
}


def filter_records(
    ledger: Ledger, set_code: str, view: CollectionFilter = CollectionFilter.ALL
) -> list[tuple[VariantKey, CollectionRecord]]:
    """Records of a set matching `view`, ascending by collector number."""
    predicate = _PREDICATES[view]
    return [(key, record) for key, record in ledger.sorted_records(set_code) if predicate(record)]
