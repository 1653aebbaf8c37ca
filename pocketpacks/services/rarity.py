"""
Rarity resolution for weighted pack slots.

A slot's rarity comes from a uniform roll in [0, 100) compared against
cumulative thresholds. A roll exactly on a threshold belongs to the
next, less rare tier.

If the rolled tier has no cards, a fixed fallback order is tried:
common, uncommon, rare, mythic (skipping the tier already tried).
The order does not depend on which tier was rolled.
"""

from collections.abc import Mapping

from pocketpacks.config import RARITY_THRESHOLDS
from pocketpacks.models.card import CardPools, CatalogEntry, Rarity
from pocketpacks.models.failure import NoCardsAvailableError

FALLBACK_ORDER: tuple[Rarity, ...] = (
    Rarity.COMMON,
    Rarity.UNCOMMON,
    Rarity.RARE,
    Rarity.MYTHIC,
)

# Tiers with an explicit threshold, rarest first. Common is the remainder.
_THRESHOLD_TIERS: tuple[Rarity, ...] = (Rarity.MYTHIC, Rarity.RARE, Rarity.UNCOMMON)


class RarityResolver:
    """Maps rolls to rarity tiers and tiers to non-empty pools."""

    def __init__(self, thresholds: Mapping[str, float] | None = None) -> None:
        thresholds = dict(RARITY_THRESHOLDS if thresholds is None else thresholds)

        bounds: list[tuple[Rarity, float]] = []
        previous = 0.0
        for tier in _THRESHOLD_TIERS:
            if tier.value not in thresholds:
                raise ValueError(f"Missing rarity threshold for '{tier.value}'")
            bound = float(thresholds[tier.value])
            if not previous <= bound <= 100.0:
                raise ValueError(
                    f"Rarity thresholds must ascend within [0, 100], got {tier.value}={bound}"
                )
            bounds.append((tier, bound))
            previous = bound

        self._bounds = tuple(bounds)

    def resolve(self, roll: float) -> Rarity:
        """Resolve a roll in [0, 100) to a rarity tier."""
        for tier, bound in self._bounds:
            if roll < bound:
                return tier
        return Rarity.COMMON

    def fallback(self, tier: Rarity, pools: CardPools) -> Rarity:
        """
        First tier with cards, starting from `tier`.

        Raises:
            NoCardsAvailableError: If every tier pool is empty.
        """
        if pools.tier_pool(tier):
            return tier
        for candidate in FALLBACK_ORDER:
            if candidate is not tier and pools.tier_pool(candidate):
                return candidate
        raise NoCardsAvailableError(tier.value)

    def draw_pool(self, roll: float, pools: CardPools) -> tuple[Rarity, tuple[CatalogEntry, ...]]:
        """
        Resolve a roll and return the tier actually used plus its pool.

        Raises:
            NoCardsAvailableError: If every tier pool is empty.
        """
        tier = self.fallback(self.resolve(roll), pools)
        return tier, pools.tier_pool(tier)
