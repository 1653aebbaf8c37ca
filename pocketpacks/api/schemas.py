"""
Response schemas shared by the API routers.
"""

from pydantic import BaseModel, Field

from pocketpacks.models.card import VariantKey
from pocketpacks.models.history import DisplaySlots
from pocketpacks.models.ledger import CollectionRecord
from pocketpacks.models.pack import PackSlot


class CardView(BaseModel):
    """A ledger record as shown to the client."""

    key: str = Field(..., description="Encoded variant key, e.g. 'fullart:<id>'")
    base_id: str
    kind: str
    name: str
    rarity: str
    front_image: str
    back_image: str
    count: int
    is_full_art: bool = False
    is_masterpiece: bool = False
    is_spotlight: bool = False
    collector_number: str | None = None

    @classmethod
    def from_record(cls, key: VariantKey, record: CollectionRecord) -> "CardView":
        return cls(
            key=key.encode(),
            base_id=key.base_id,
            kind=key.kind.value,
            name=record.name,
            rarity=record.rarity,
            front_image=record.front_image,
            back_image=record.back_image,
            count=record.count,
            is_full_art=record.is_full_art,
            is_masterpiece=record.is_masterpiece,
            is_spotlight=record.is_spotlight,
            collector_number=record.collector_number,
        )


class SlotView(CardView):
    """A drawn card with its per-pack flags."""

    is_new: bool = False
    is_bonus: bool = False
    is_secret: bool = False
    is_god_pack: bool = False

    @classmethod
    def from_slot(cls, slot: PackSlot) -> "SlotView":
        base = CardView.from_record(slot.key, slot.record)
        return cls(
            **base.model_dump(),
            is_new=slot.is_new,
            is_bonus=slot.is_bonus,
            is_secret=slot.is_secret,
            is_god_pack=slot.is_god_pack,
        )


class DisplayView(BaseModel):
    """Three-slot pack selector."""

    left: str
    center: str
    right: str

    @classmethod
    def from_slots(cls, slots: DisplaySlots) -> "DisplayView":
        return cls(left=slots.left, center=slots.center, right=slots.right)
