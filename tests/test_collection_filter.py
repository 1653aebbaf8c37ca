"""Tests for the named collection views."""

import pytest

from conftest import make_entry
from pocketpacks.models.card import VariantKey, VariantKind
from pocketpacks.models.ledger import CollectionRecord, Ledger
from pocketpacks.services.collection_filter import CollectionFilter, filter_records


def _add(
    ledger: Ledger,
    card_id: str,
    rarity: str,
    number: str,
    kind: VariantKind = VariantKind.REGULAR,
    spotlight: bool = False,
) -> None:
    entry = make_entry(card_id, rarity=rarity, collector_number=number)
    ledger.increment(
        "BLB", VariantKey(card_id, kind), CollectionRecord.from_entry(entry, kind, spotlight)
    )


@pytest.fixture
def ledger() -> Ledger:
    ledger = Ledger()
    _add(ledger, "m1", "mythic", "30")
    _add(ledger, "c2", "common", "2", spotlight=True)
    _add(ledger, "c1", "common", "1")
    _add(ledger, "u1", "uncommon", "10")
    _add(ledger, "f1", "common", "301", kind=VariantKind.FULL_ART)
    _add(ledger, "x1", "mythic", "401", kind=VariantKind.MASTERPIECE)
    return ledger


def _ids(records) -> list[str]:
    return [key.base_id for key, _ in records]


class TestFilterRecords:
    def test_all_is_sorted_by_collector_number(self, ledger: Ledger) -> None:
        assert _ids(filter_records(ledger, "BLB")) == ["c1", "c2", "u1", "m1", "f1", "x1"]

    @pytest.mark.parametrize(
        ("view", "expected"),
        [
            (CollectionFilter.COMMON, ["c1", "c2"]),
            (CollectionFilter.UNCOMMON, ["u1"]),
            (CollectionFilter.RARE, []),
            (CollectionFilter.MYTHIC, ["m1"]),
            (CollectionFilter.FULLART, ["f1"]),
            (CollectionFilter.SPOTLIGHT, ["c2"]),
            (CollectionFilter.SECRETS, ["x1"]),
        ],
    )
    def test_views(self, ledger: Ledger, view: CollectionFilter, expected: list[str]) -> None:
        assert _ids(filter_records(ledger, "BLB", view)) == expected

    def test_rarity_views_exclude_variants(self, ledger: Ledger) -> None:
        # The full-art and masterpiece records share rarities with regular ones.
        commons = filter_records(ledger, "BLB", CollectionFilter.COMMON)
        assert all(record.is_regular for _, record in commons)

    def test_unknown_set_is_empty(self, ledger: Ledger) -> None:
        assert filter_records(ledger, "DSK", CollectionFilter.ALL) == []
