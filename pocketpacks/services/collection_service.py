"""
Collection service - the state of one save slot.

Owns the ledger, points account and recency history for a save, plus the
session-only active selection. All mutation goes through its methods.

INVARIANT: The active selection is never persisted and never changes
the history.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pocketpacks.config import settings
from pocketpacks.models.card import CardPools, VariantKey, VariantKind
from pocketpacks.models.failure import CardNotFoundError
from pocketpacks.models.history import DisplaySlots, RecencyHistory, project_display
from pocketpacks.models.ledger import CollectionRecord, Ledger
from pocketpacks.models.pack import PackOpenOutcome
from pocketpacks.models.points import PointsAccount, current_time_ms
from pocketpacks.services.card_identity import variant_key_for
from pocketpacks.services.pack_composer import PackComposer
from pocketpacks.services.schema_migrator import (
    CURRENT_SCHEMA_VERSION,
    MigrationReport,
    migrate_document,
)

logger = logging.getLogger(__name__)


def default_document(now_ms: int) -> dict[str, Any]:
    """A fresh save document."""
    return {
        "points": 0,
        "last": now_ms,
        "cards": {},
        "lastPack": None,
        "recentPacks": [],
    }


@dataclass
class CollectionService:
    """In-memory, authoritative state for one save slot."""

    ledger: Ledger = field(default_factory=Ledger)
    points: PointsAccount = field(default_factory=PointsAccount)
    history: RecencyHistory = field(default_factory=RecencyHistory)
    last_pack: str | None = None
    active_set: str | None = None
    composer: PackComposer = field(default_factory=PackComposer)
    regen_interval_ms: int = settings.regen_interval_ms
    clock: Callable[[], int] = current_time_ms
    dirty: bool = False
    # Bumped on every persisted-state change; a save only clears `dirty`
    # if no change happened after its snapshot was taken.
    revision: int = 0

    # --- Loading / saving ---

    @classmethod
    def load(
        cls,
        document: Any,
        schema_version: int = 0,
        **kwargs: Any,
    ) -> tuple["CollectionService", MigrationReport]:
        """
        Build a service from a stored document, migrating it first.

        A document that is not an object is replaced by a fresh one.
        The service is marked dirty if migration changed anything.
        """
        service = cls(**kwargs)
        now_ms = service.clock()

        if not isinstance(document, dict):
            if document is not None:
                logger.warning(
                    "save_document_replaced",
                    extra={"reason": f"expected object, got {type(document).__name__}"},
                )
            document = default_document(now_ms)
            schema_version = 0

        report = migrate_document(document, schema_version, now_ms)

        service.ledger = Ledger.from_document(document["cards"])
        service.points = PointsAccount(points=document["points"], last_regen_ms=document["last"])
        service.history = RecencyHistory.from_iterable(document["recentPacks"])
        last_pack = document.get("lastPack")
        service.last_pack = last_pack if isinstance(last_pack, str) else None
        service.dirty = report.needs_save
        return service, report

    def to_document(self) -> dict[str, Any]:
        """Serialize the persisted state (never the active selection)."""
        return {
            "points": self.points.points,
            "last": self.points.last_regen_ms,
            "cards": self.ledger.to_document(),
            "lastPack": self.last_pack,
            "recentPacks": self.history.to_list(),
        }

    @property
    def schema_version(self) -> int:
        return CURRENT_SCHEMA_VERSION

    def mark_changed(self) -> None:
        self.dirty = True
        self.revision += 1

    def mark_saved(self, revision: int | None = None) -> None:
        """
        Record a successful write of the state at `revision`.

        Stays dirty if the state changed after that snapshot.
        """
        if revision is None or revision == self.revision:
            self.dirty = False

    # --- Pack opening ---

    def open_pack(
        self, set_code: str, pools: CardPools, free_mode: bool = False
    ) -> PackOpenOutcome:
        """Open a pack; refusals leave the state untouched."""
        outcome = self.composer.open_pack(
            set_code=set_code,
            pools=pools,
            ledger=self.ledger,
            points=self.points,
            history=self.history,
            free_mode=free_mode,
        )
        if outcome.accepted:
            self.last_pack = set_code
            self.mark_changed()
        return outcome

    def can_open(self, free_mode: bool = False) -> bool:
        return free_mode or self.points.can_afford(self.composer.rules.cost)

    def add_card(
        self, set_code: str, pools: CardPools, collector_number: str
    ) -> tuple[VariantKey, CollectionRecord]:
        """
        Add one regular copy of a main pool card by collector number.

        Goes through the same ledger commit as a drawn card. Points and
        history are untouched.

        Raises:
            CardNotFoundError: If no main pool card has that number.
        """
        entry = next(
            (card for card in pools.main if card.collector_number == collector_number), None
        )
        if entry is None:
            raise CardNotFoundError(set_code, collector_number)

        key = variant_key_for(entry, VariantKind.REGULAR)
        record = self.ledger.increment(
            set_code,
            key,
            CollectionRecord.from_entry(entry, VariantKind.REGULAR, pools.is_spotlight(entry)),
        )
        self.mark_changed()
        logger.info(
            "collection_card_added",
            extra={"set_code": set_code, "collector_number": collector_number},
        )
        return key, record

    # --- Points ---

    def regenerate(self, now_ms: int | None = None) -> int:
        """Award points for elapsed intervals. Returns points awarded."""
        awarded = self.points.regenerate(
            self.clock() if now_ms is None else now_ms, self.regen_interval_ms
        )
        if awarded:
            self.mark_changed()
        return awarded

    def ms_until_next_point(self, now_ms: int | None = None) -> int:
        return self.points.ms_until_next(
            self.clock() if now_ms is None else now_ms, self.regen_interval_ms
        )

    # --- Selection ---

    def select_set(self, set_code: str) -> DisplaySlots:
        """Make `set_code` the active selection and return the new display."""
        self.active_set = set_code
        return project_display(set_code, self.history)

    def display(self) -> DisplaySlots | None:
        """
        Current selector display.

        Without an explicit selection, the most recently opened set is
        used; with no history either there is nothing to display.
        """
        active = self.active_set or (self.history.entries[0] if self.history.entries else None)
        if active is None:
            return None
        return project_display(active, self.history)

    # --- Destructive operations ---

    def clear_set(self, set_code: str) -> bool:
        removed = self.ledger.clear_set(set_code)
        if removed:
            self.mark_changed()
            logger.info("collection_set_cleared", extra={"set_code": set_code})
        return removed

    def clear_all(self) -> None:
        self.ledger.clear_all()
        self.mark_changed()
        logger.info("collection_cleared")
