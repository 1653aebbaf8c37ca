"""
Pack composer - one "open pack" transaction.

Gate order is fixed and significant:
    1. god pack   (replaces everything below)
    2. base slots (one rarity roll each)
    3. bonus      (extra full-art slot)
    4. secret     (extra masterpiece slot, only evaluated if bonus fired)

INVARIANT: A refused open mutates nothing.
INVARIANT: is_new is computed before the slot is committed, so the first
copy of a variant drawn twice in one pack is new and the second is not.
INVARIANT: Exactly one ledger commit per produced slot.
"""

import logging
import random
from dataclasses import dataclass, replace

from pocketpacks.config import Settings, settings
from pocketpacks.models.card import CardPools, CatalogEntry, VariantKind
from pocketpacks.models.failure import FailureKind, NoCardsAvailableError
from pocketpacks.models.history import RecencyHistory
from pocketpacks.models.ledger import CollectionRecord, Ledger
from pocketpacks.models.pack import PackOpenOutcome, PackResult, PackSlot
from pocketpacks.models.points import PointsAccount
from pocketpacks.services.card_identity import is_owned, variant_key_for
from pocketpacks.services.rarity import RarityResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PackRules:
    """Economy and probability settings for pack opening."""

    cost: int = 6
    size: int = 5
    godpack_chance: float = 0.015
    bonus_chance: float = 0.10
    masterpiece_chance: float = 0.25

    def __post_init__(self) -> None:
        if self.cost < 0:
            raise ValueError(f"Pack cost must be non-negative, got {self.cost}")
        if self.size < 1:
            raise ValueError(f"Pack size must be at least 1, got {self.size}")
        for name in ("godpack_chance", "bonus_chance", "masterpiece_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "PackRules":
        return cls(
            cost=config.pack_cost,
            size=config.pack_size,
            godpack_chance=config.godpack_chance,
            bonus_chance=config.bonus_chance,
            masterpiece_chance=config.masterpiece_chance,
        )


@dataclass(frozen=True, slots=True)
class _Draw:
    """A drawn card before it is committed to the ledger."""

    entry: CatalogEntry
    kind: VariantKind
    is_spotlight: bool = False
    is_bonus: bool = False
    is_secret: bool = False
    is_god_pack: bool = False


class PackComposer:
    """
    Draws packs and commits them to a ledger.

    The random source is injectable; by default it is an unseeded
    random.Random, so draws are not reproducible.
    """

    def __init__(
        self,
        rules: PackRules | None = None,
        resolver: RarityResolver | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.rules = rules or PackRules()
        self.resolver = resolver or RarityResolver()
        self.rng = rng or random.Random()

    def open_pack(
        self,
        set_code: str,
        pools: CardPools,
        ledger: Ledger,
        points: PointsAccount,
        history: RecencyHistory,
        free_mode: bool = False,
    ) -> PackOpenOutcome:
        """
        Open one pack of `set_code`.

        Returns a refused outcome (not an exception) when the account
        cannot pay. Otherwise draws, commits every slot, touches the
        history, charges the account and returns the ordered result.
        """
        cost = self.rules.cost
        if not free_mode and not points.can_afford(cost):
            logger.info(
                "pack_open_refused",
                extra={"set_code": set_code, "points": points.points, "cost": cost},
            )
            return PackOpenOutcome.refused(
                FailureKind.INSUFFICIENT_FUNDS,
                f"pack costs {cost} points, {points.points} available",
            )

        draws, dropped = self.draw(pools)
        slots = self._commit(set_code, draws, ledger)

        history.touch(set_code)

        spent = 0
        if not free_mode:
            points.spend(cost)
            spent = cost

        result = PackResult(
            set_code=set_code, slots=slots, dropped_slots=dropped, points_spent=spent
        )
        logger.info(
            "pack_opened",
            extra={
                "set_code": set_code,
                "slot_count": len(slots),
                "dropped_slots": dropped,
                "new_count": result.new_count,
                "god_pack": result.is_god_pack,
                "free_mode": free_mode,
            },
        )
        return PackOpenOutcome.opened(result)

    def draw(self, pools: CardPools) -> tuple[list[_Draw], int]:
        """
        Draw the slots of one pack without touching any state.

        Returns:
            Tuple of (draws in order, number of base slots dropped).
        """
        if self._chance(self.rules.godpack_chance) and pools.full_art:
            god_pack = [
                _Draw(
                    entry=self.rng.choice(pools.full_art),
                    kind=VariantKind.FULL_ART,
                    is_god_pack=True,
                )
                for _ in range(self.rules.size)
            ]
            return god_pack, 0

        draws: list[_Draw] = []
        dropped = 0
        for _ in range(self.rules.size):
            roll = self.rng.random() * 100
            try:
                _, tier_pool = self.resolver.draw_pool(roll, pools)
            except NoCardsAvailableError as e:
                dropped += 1
                logger.warning(
                    "pack_slot_dropped",
                    extra={"roll": roll, "requested_tier": e.requested_tier},
                )
                continue
            entry = self.rng.choice(tier_pool)
            draws.append(
                _Draw(entry=entry, kind=VariantKind.REGULAR, is_spotlight=pools.is_spotlight(entry))
            )

        got_bonus = False
        if self._chance(self.rules.bonus_chance) and pools.full_art:
            draws.append(
                _Draw(
                    entry=self.rng.choice(pools.full_art),
                    kind=VariantKind.FULL_ART,
                    is_bonus=True,
                )
            )
            got_bonus = True

        if got_bonus and self._chance(self.rules.masterpiece_chance) and pools.masterpiece:
            draws.append(
                _Draw(
                    entry=self.rng.choice(pools.masterpiece),
                    kind=VariantKind.MASTERPIECE,
                    is_secret=True,
                )
            )

        return draws, dropped

    def _chance(self, probability: float) -> bool:
        return self.rng.random() < probability

    def _commit(self, set_code: str, draws: list[_Draw], ledger: Ledger) -> list[PackSlot]:
        slots: list[PackSlot] = []
        for draw in draws:
            key = variant_key_for(draw.entry, draw.kind)
            is_new = not is_owned(ledger, set_code, key)
            seed = CollectionRecord.from_entry(draw.entry, draw.kind, draw.is_spotlight)
            record = ledger.increment(set_code, key, seed)
            slots.append(
                PackSlot(
                    key=key,
                    record=replace(record),
                    is_new=is_new,
                    is_bonus=draw.is_bonus,
                    is_secret=draw.is_secret,
                    is_god_pack=draw.is_god_pack,
                )
            )
        return slots

