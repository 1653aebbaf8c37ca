"""Tests for pack composition and the open-pack transaction."""

import pytest

from conftest import ScriptedRandom, make_entry
from pocketpacks.config import Settings
from pocketpacks.models.card import CardPools, VariantKey, VariantKind
from pocketpacks.models.failure import FailureKind
from pocketpacks.models.history import RecencyHistory
from pocketpacks.models.ledger import Ledger
from pocketpacks.models.points import PointsAccount
from pocketpacks.services.pack_composer import PackComposer, PackRules

NO_EXTRAS = PackRules(godpack_chance=0.0, bonus_chance=0.0, masterpiece_chance=0.0)

# Rolls (before * 100) for each tier under the default thresholds.
MYTHIC_ROLL = 0.01
RARE_ROLL = 0.05
UNCOMMON_ROLL = 0.2
COMMON_ROLL = 0.5


def _open(
    composer: PackComposer,
    pools: CardPools,
    ledger: Ledger | None = None,
    points: PointsAccount | None = None,
    history: RecencyHistory | None = None,
    free_mode: bool = False,
):
    ledger = ledger if ledger is not None else Ledger()
    points = points if points is not None else PointsAccount(points=6)
    history = history if history is not None else RecencyHistory()
    outcome = composer.open_pack("BLB", pools, ledger, points, history, free_mode)
    return outcome, ledger, points, history


class TestPackRules:
    def test_defaults(self) -> None:
        rules = PackRules()
        assert rules.cost == 6
        assert rules.size == 5

    @pytest.mark.parametrize(
        "kwargs",
        [{"cost": -1}, {"size": 0}, {"godpack_chance": 1.5}, {"bonus_chance": -0.1}],
    )
    def test_invalid_rules(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            PackRules(**kwargs)

    def test_from_settings(self) -> None:
        rules = PackRules.from_settings(Settings(pack_cost=3, pack_size=2, bonus_chance=1.0))
        assert rules.cost == 3
        assert rules.size == 2
        assert rules.bonus_chance == 1.0


class TestAffordability:
    def test_refused_when_points_short(self, full_pools: CardPools) -> None:
        composer = PackComposer(NO_EXTRAS, rng=ScriptedRandom())
        outcome, ledger, points, history = _open(
            composer, full_pools, points=PointsAccount(points=5, last_regen_ms=123)
        )

        assert not outcome.accepted
        assert outcome.refusal is FailureKind.INSUFFICIENT_FUNDS
        assert points.points == 5
        assert points.last_regen_ms == 123
        assert ledger.sets == {}
        assert len(history) == 0

    def test_accepted_at_exact_cost(self, full_pools: CardPools) -> None:
        composer = PackComposer(NO_EXTRAS, rng=ScriptedRandom([COMMON_ROLL] * 7))
        outcome, ledger, points, history = _open(composer, full_pools)

        assert outcome.accepted
        assert outcome.result is not None
        assert points.points == 0
        assert outcome.result.points_spent == 6
        assert len(outcome.result) == 5
        assert ledger.aggregate_total_count("BLB") == 5
        assert history.to_list() == ["BLB"]

    def test_free_mode_skips_cost(self, full_pools: CardPools) -> None:
        composer = PackComposer(NO_EXTRAS, rng=ScriptedRandom())
        outcome, _, points, _ = _open(
            composer, full_pools, points=PointsAccount(points=0), free_mode=True
        )

        assert outcome.accepted
        assert outcome.result is not None
        assert outcome.result.points_spent == 0
        assert points.points == 0


class TestBaseSlots:
    def test_slot_rarities_follow_rolls(self, full_pools: CardPools) -> None:
        rolls = [0.99, MYTHIC_ROLL, RARE_ROLL, UNCOMMON_ROLL, COMMON_ROLL, COMMON_ROLL, 0.99]
        composer = PackComposer(rng=ScriptedRandom(rolls))
        outcome, _, _, _ = _open(composer, full_pools)

        assert outcome.result is not None
        rarities = [slot.record.rarity for slot in outcome.result.slots]
        assert rarities == ["mythic", "rare", "uncommon", "common", "common"]
        assert all(slot.kind is VariantKind.REGULAR for slot in outcome.result.slots)

    def test_empty_tier_falls_back(self) -> None:
        pools = CardPools(main=(make_entry("c1"),))
        rolls = [0.0, MYTHIC_ROLL] + [COMMON_ROLL] * 5
        composer = PackComposer(NO_EXTRAS, rng=ScriptedRandom(rolls))
        outcome, _, _, _ = _open(composer, pools)

        assert outcome.result is not None
        assert len(outcome.result) == 5
        assert {slot.key.base_id for slot in outcome.result.slots} == {"c1"}

    def test_slots_dropped_when_every_tier_empty(self) -> None:
        pools = CardPools(full_art=(make_entry("f1"),))
        composer = PackComposer(NO_EXTRAS, rng=ScriptedRandom())
        outcome, ledger, points, history = _open(composer, pools)

        assert outcome.accepted
        assert outcome.result is not None
        assert len(outcome.result) == 0
        assert outcome.result.dropped_slots == 5
        assert ledger.aggregate_total_count("BLB") == 0
        assert points.points == 0
        assert history.to_list() == ["BLB"]

    def test_spotlight_flag_comes_from_pool(self) -> None:
        spot = make_entry("s1", "Spotlight Card")
        pools = CardPools(main=(spot,), spotlight=(spot,))
        composer = PackComposer(NO_EXTRAS, rng=ScriptedRandom())
        outcome, _, _, _ = _open(composer, pools)

        assert outcome.result is not None
        assert all(slot.record.is_spotlight for slot in outcome.result.slots)


class TestGodPack:
    def test_god_pack_is_all_full_art(self, full_pools: CardPools) -> None:
        rules = PackRules(godpack_chance=1.0, bonus_chance=1.0, masterpiece_chance=1.0)
        composer = PackComposer(rules, rng=ScriptedRandom())
        outcome, ledger, _, _ = _open(composer, full_pools)

        assert outcome.result is not None
        slots = outcome.result.slots
        assert len(slots) == 5
        assert all(slot.kind is VariantKind.FULL_ART for slot in slots)
        assert all(slot.is_god_pack for slot in slots)
        assert not any(slot.is_bonus or slot.is_secret for slot in slots)
        assert outcome.result.is_god_pack
        assert ledger.get("BLB", VariantKey("f1", VariantKind.FULL_ART)).count == 5

    def test_no_god_pack_without_full_art_pool(self, full_pools: CardPools) -> None:
        pools = CardPools(main=full_pools.main)
        rules = PackRules(godpack_chance=1.0, bonus_chance=0.0)
        composer = PackComposer(rules, rng=ScriptedRandom())
        outcome, _, _, _ = _open(composer, pools)

        assert outcome.result is not None
        assert len(outcome.result) == 5
        assert not outcome.result.is_god_pack


class TestExtraSlots:
    def test_bonus_then_secret_in_draw_order(self, full_pools: CardPools) -> None:
        rules = PackRules(godpack_chance=0.0, bonus_chance=1.0, masterpiece_chance=1.0)
        composer = PackComposer(rules, rng=ScriptedRandom())
        outcome, _, _, _ = _open(composer, full_pools)

        assert outcome.result is not None
        slots = outcome.result.slots
        assert len(slots) == 7
        assert [slot.kind for slot in slots[:5]] == [VariantKind.REGULAR] * 5
        assert slots[5].kind is VariantKind.FULL_ART
        assert slots[5].is_bonus
        assert slots[6].kind is VariantKind.MASTERPIECE
        assert slots[6].is_secret

    def test_secret_requires_bonus(self, full_pools: CardPools) -> None:
        rules = PackRules(godpack_chance=0.0, bonus_chance=0.0, masterpiece_chance=1.0)
        composer = PackComposer(rules, rng=ScriptedRandom())
        outcome, _, _, _ = _open(composer, full_pools)

        assert outcome.result is not None
        assert len(outcome.result) == 5
        assert not any(slot.is_secret for slot in outcome.result.slots)

    def test_bonus_skipped_without_full_art_pool(self, full_pools: CardPools) -> None:
        pools = CardPools(main=full_pools.main, masterpiece=full_pools.masterpiece)
        rules = PackRules(godpack_chance=0.0, bonus_chance=1.0, masterpiece_chance=1.0)
        composer = PackComposer(rules, rng=ScriptedRandom())
        outcome, _, _, _ = _open(composer, pools)

        assert outcome.result is not None
        assert len(outcome.result) == 5

    def test_secret_skipped_without_masterpiece_pool(self, full_pools: CardPools) -> None:
        pools = CardPools(main=full_pools.main, full_art=full_pools.full_art)
        rules = PackRules(godpack_chance=0.0, bonus_chance=1.0, masterpiece_chance=1.0)
        composer = PackComposer(rules, rng=ScriptedRandom())
        outcome, _, _, _ = _open(composer, pools)

        assert outcome.result is not None
        assert len(outcome.result) == 6
        assert outcome.result.slots[-1].is_bonus


class TestCommit:
    def test_duplicate_in_one_pack_is_new_once(self) -> None:
        pools = CardPools(main=(make_entry("c1"),))
        composer = PackComposer(NO_EXTRAS, rng=ScriptedRandom())
        outcome, ledger, _, _ = _open(composer, pools)

        assert outcome.result is not None
        assert [slot.is_new for slot in outcome.result.slots] == [True, False, False, False, False]
        assert [slot.record.count for slot in outcome.result.slots] == [1, 2, 3, 4, 5]
        assert ledger.get("BLB", VariantKey("c1")).count == 5

    def test_previously_owned_is_not_new(self) -> None:
        pools = CardPools(main=(make_entry("c1"),))
        composer = PackComposer(NO_EXTRAS, rng=ScriptedRandom())
        _, ledger, _, _ = _open(composer, pools)
        outcome, _, _, _ = _open(composer, pools, ledger=ledger)

        assert outcome.result is not None
        assert outcome.result.new_count == 0
        assert ledger.get("BLB", VariantKey("c1")).count == 10

    def test_full_art_of_owned_card_is_new(self) -> None:
        entry = make_entry("c1")
        pools = CardPools(main=(entry,), full_art=(entry,))
        ledger = Ledger()
        _open(PackComposer(NO_EXTRAS, rng=ScriptedRandom()), pools, ledger=ledger)

        rules = PackRules(godpack_chance=0.0, bonus_chance=1.0)
        outcome, _, _, _ = _open(PackComposer(rules, rng=ScriptedRandom()), pools, ledger=ledger)

        assert outcome.result is not None
        bonus = outcome.result.slots[-1]
        assert bonus.is_bonus
        assert bonus.is_new
        assert bonus.record.is_full_art

    def test_one_commit_per_slot(self, full_pools: CardPools) -> None:
        rules = PackRules(godpack_chance=0.0, bonus_chance=1.0, masterpiece_chance=1.0)
        composer = PackComposer(rules, rng=ScriptedRandom())
        outcome, ledger, _, _ = _open(composer, full_pools)

        assert outcome.result is not None
        assert ledger.aggregate_total_count("BLB") == len(outcome.result) == 7

    def test_history_touched_on_open(self, full_pools: CardPools) -> None:
        composer = PackComposer(NO_EXTRAS, rng=ScriptedRandom())
        history = RecencyHistory(["DSK", "FDN", "BLB"])
        _open(composer, full_pools, history=history, points=PointsAccount(points=6))

        assert history.to_list() == ["BLB", "DSK", "FDN"]
