"""
Card identity and catalog models.

A printed card can be collected in several renditions (variants). Each
variant is tracked as its own ledger entry, keyed by a VariantKey.

INVARIANT: VariantKey encoding is total and reversible.
    VariantKey.decode(key.encode()) == key for every key.
"""

from dataclasses import dataclass, field
from enum import Enum


class VariantKind(str, Enum):
    """Rendition of a card within a set."""

    REGULAR = "regular"
    FULL_ART = "fullart"
    MASTERPIECE = "masterpiece"


class Rarity(str, Enum):
    """Rarity tiers used for weighted pack slots, rarest first."""

    MYTHIC = "mythic"
    RARE = "rare"
    UNCOMMON = "uncommon"
    COMMON = "common"


_KEY_SEPARATOR = ":"
_KINDS_BY_VALUE = {kind.value: kind for kind in VariantKind}


@dataclass(frozen=True, slots=True)
class VariantKey:
    """
    Composite ledger key: the catalog id plus the variant kind.

    Encoded form is "<kind>:<base_id>". Decoding splits on the first
    separator only, so base ids may themselves contain colons.
    """

    base_id: str
    kind: VariantKind = VariantKind.REGULAR

    def __post_init__(self) -> None:
        if not self.base_id:
            raise ValueError("VariantKey requires a non-empty base_id")

    def encode(self) -> str:
        """Serialize to the string form stored in save documents."""
        return f"{self.kind.value}{_KEY_SEPARATOR}{self.base_id}"

    @classmethod
    def decode(cls, key: str) -> "VariantKey":
        """
        Parse an encoded key.

        Raises:
            ValueError: If the key has no known kind prefix or no base id.
        """
        prefix, sep, base_id = key.partition(_KEY_SEPARATOR)
        kind = _KINDS_BY_VALUE.get(prefix)
        if not sep or kind is None:
            raise ValueError(f"Not an encoded variant key: {key!r}")
        return cls(base_id=base_id, kind=kind)


@dataclass(frozen=True, slots=True)
class ImagePair:
    """Front and back image references. Both are always present."""

    front: str
    back: str


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """
    A card as supplied by the catalog, already normalized.

    Attributes:
        id: Catalog id (Scryfall UUID)
        name: Card name
        rarity: Printed rarity (common, uncommon, rare, mythic, or other)
        collector_number: Collector number within the set, may be non-numeric
        images: Normalized front/back image references
    """

    id: str
    name: str
    rarity: str
    images: ImagePair
    collector_number: str | None = None


@dataclass(frozen=True, slots=True)
class CardPools:
    """
    The four finite draw pools for one set.

    Pools are immutable for the lifetime of a session. The main pool feeds
    the rarity-weighted slots; full-art and masterpiece pools feed the
    god-pack, bonus and secret slots; the spotlight pool only tags main
    pool entries.
    """

    main: tuple[CatalogEntry, ...] = ()
    full_art: tuple[CatalogEntry, ...] = ()
    masterpiece: tuple[CatalogEntry, ...] = ()
    spotlight: tuple[CatalogEntry, ...] = ()
    _spotlight_ids: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_spotlight_ids", frozenset(e.id for e in self.spotlight))

    def tier_pool(self, rarity: Rarity) -> tuple[CatalogEntry, ...]:
        """Main pool entries of exactly this rarity."""
        return tuple(entry for entry in self.main if entry.rarity == rarity.value)

    def is_spotlight(self, entry: CatalogEntry) -> bool:
        """Whether a main pool entry is also a spotlight card."""
        return entry.id in self._spotlight_ids
