"""
Pack opening results.

A PackResult is ephemeral: only its effect on the ledger is persisted.
"""

from dataclasses import dataclass, field

from pocketpacks.models.card import VariantKey, VariantKind
from pocketpacks.models.failure import FailureKind
from pocketpacks.models.ledger import CollectionRecord


@dataclass(frozen=True, slots=True)
class PackSlot:
    """
    One drawn card, in draw order.

    Attributes:
        key: Ledger key of the drawn variant
        record: Snapshot of the ledger record after this draw was committed
        is_new: True if the variant was not owned before this draw
        is_bonus: The extra full-art slot
        is_secret: The extra masterpiece slot
        is_god_pack: Part of an all-full-art pack
    """

    key: VariantKey
    record: CollectionRecord
    is_new: bool = False
    is_bonus: bool = False
    is_secret: bool = False
    is_god_pack: bool = False

    @property
    def kind(self) -> VariantKind:
        return self.key.kind


@dataclass
class PackResult:
    """Ordered slots produced by one pack open."""

    set_code: str
    slots: list[PackSlot] = field(default_factory=list)
    dropped_slots: int = 0
    points_spent: int = 0

    @property
    def is_god_pack(self) -> bool:
        return any(slot.is_god_pack for slot in self.slots)

    @property
    def new_count(self) -> int:
        return sum(1 for slot in self.slots if slot.is_new)

    def __len__(self) -> int:
        return len(self.slots)


@dataclass(frozen=True, slots=True)
class PackOpenOutcome:
    """
    Result of a pack-open request.

    Exactly one of `result` / `refusal` is set. A refusal is an expected
    outcome (e.g. not enough points), not an error.
    """

    result: PackResult | None = None
    refusal: FailureKind | None = None
    refusal_detail: str | None = None

    @property
    def accepted(self) -> bool:
        return self.result is not None

    @classmethod
    def opened(cls, result: PackResult) -> "PackOpenOutcome":
        return cls(result=result)

    @classmethod
    def refused(cls, kind: FailureKind, detail: str) -> "PackOpenOutcome":
        return cls(refusal=kind, refusal_detail=detail)
