"""
Collection statistics for one set.

Counts are split so variants never inflate the "unique cards" figure:
- per-rarity progress counts regular records only, deduplicated by name
- full-art, spotlight and masterpiece records are counted separately
- total_collected sums every copy of every variant
"""

from dataclasses import dataclass, field

from pocketpacks.models.card import CardPools, Rarity
from pocketpacks.models.ledger import CollectionRecord, Ledger

RARITY_ORDER: tuple[Rarity, ...] = (Rarity.COMMON, Rarity.UNCOMMON, Rarity.RARE, Rarity.MYTHIC)


def calculate_percentage(owned: int, total: int) -> int:
    """Completion percentage rounded to the nearest int; 0 when total is 0."""
    if total == 0:
        return 0
    return round(owned / total * 100)


@dataclass(frozen=True, slots=True)
class Progress:
    owned: int
    total: int

    @property
    def percentage(self) -> int:
        return calculate_percentage(self.owned, self.total)


@dataclass
class SetStats:
    """Completion and count figures for one set."""

    set_code: str
    by_rarity: dict[str, Progress] = field(default_factory=dict)
    full_art: Progress = Progress(0, 0)
    spotlight: Progress = Progress(0, 0)
    masterpiece_owned: int = 0
    total_collected: int = 0
    unique_cards: int = 0


def _is_regular(record: CollectionRecord) -> bool:
    return record.is_regular


def compute_set_stats(ledger: Ledger, set_code: str, pools: CardPools | None = None) -> SetStats:
    """
    Compute statistics for a set.

    Args:
        ledger: The collection ledger
        set_code: Set to report on
        pools: Catalog pools for totals; totals are 0 when not supplied
    """
    pools = pools or CardPools()
    records = list(ledger.get_all(set_code).values())

    by_rarity: dict[str, Progress] = {}
    for rarity in RARITY_ORDER:
        owned = ledger.aggregate_unique_count(
            set_code, lambda r, rarity=rarity: r.is_regular and r.rarity == rarity.value
        )
        by_rarity[rarity.value] = Progress(owned=owned, total=len(pools.tier_pool(rarity)))

    full_art_owned = sum(1 for r in records if r.is_full_art)
    spotlight_owned = sum(1 for r in records if r.is_spotlight)
    masterpiece_owned = sum(1 for r in records if r.is_masterpiece)
    regular_names = ledger.aggregate_unique_count(set_code, _is_regular)

    return SetStats(
        set_code=set_code,
        by_rarity=by_rarity,
        full_art=Progress(owned=full_art_owned, total=len(pools.full_art)),
        spotlight=Progress(owned=spotlight_owned, total=len(pools.spotlight)),
        masterpiece_owned=masterpiece_owned,
        total_collected=ledger.aggregate_total_count(set_code),
        unique_cards=regular_names + full_art_owned + spotlight_owned + masterpiece_owned,
    )
