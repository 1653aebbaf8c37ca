"""
Save document schema migration.

Save documents carry an explicit schema version. On load, every step with
a version above the stored one runs in order. Each step is independently
idempotent: running it on data it has already migrated changes nothing.

Versions:
    0 -> 1  fill_record_defaults  containers and per-record field defaults
    1 -> 2  rekey_variants        legacy "<id>_fullart" keys -> "fullart:<id>"
    2 -> 3  normalize_points      points / timestamp coerced to ints

INVARIANT: Migration never fails because of one bad record. Malformed
sets and records are skipped and reported; everything else is migrated.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pocketpacks.config import CARD_BACK_URL, UNKNOWN_CARD_NAME
from pocketpacks.models.card import VariantKind
from pocketpacks.services.card_identity import decode_any_key, is_encoded_key

logger = logging.getLogger(__name__)


@dataclass
class MigrationContext:
    """Inputs and bookkeeping shared by the steps of one migration run."""

    now_ms: int
    skipped: list[str] = field(default_factory=list)

    def skip(self, location: str) -> None:
        if location not in self.skipped:
            self.skipped.append(location)
            logger.warning("migration_entry_skipped", extra={"location": location})


# A step mutates the document in place and returns the number of changes made.
StepFn = Callable[[dict[str, Any], MigrationContext], int]


@dataclass(frozen=True, slots=True)
class MigrationStep:
    version: int
    name: str
    apply: StepFn


@dataclass
class MigrationReport:
    """Outcome of migrating one save document."""

    from_version: int
    to_version: int
    changes: dict[str, int] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)

    @property
    def change_count(self) -> int:
        return sum(self.changes.values())

    @property
    def needs_save(self) -> bool:
        """Persist if any field changed or the version moved forward."""
        return self.change_count > 0 or self.to_version != self.from_version


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _iter_set_records(
    document: dict[str, Any], context: MigrationContext
) -> list[tuple[str, dict[str, Any]]]:
    """Well-formed (set_code, records) pairs; malformed sets are skipped."""
    cards = document.get("cards")
    if not isinstance(cards, dict):
        return []
    valid = []
    for set_code, records in cards.items():
        if not isinstance(records, dict):
            context.skip(f"cards.{set_code}")
            continue
        valid.append((set_code, records))
    return valid


def fill_record_defaults(document: dict[str, Any], context: MigrationContext) -> int:
    """
    Ensure top-level containers exist and every record has every field.

    - cards: created if missing
    - recentPacks: created if missing or not a list, seeded from lastPack
    - per record: fullart / masterpiece flags inferred from the key,
      backImg and img default to the card back, non-numeric count
      becomes 1, missing name becomes "Unknown Card"
    """
    changes = 0

    if not isinstance(document.get("cards"), dict):
        document["cards"] = {}
        changes += 1

    if "lastPack" not in document:
        document["lastPack"] = None
        changes += 1

    if not isinstance(document.get("recentPacks"), list):
        last_pack = document.get("lastPack")
        document["recentPacks"] = [last_pack] if isinstance(last_pack, str) and last_pack else []
        changes += 1

    for set_code, records in _iter_set_records(document, context):
        for card_key, record in records.items():
            if not isinstance(record, dict):
                context.skip(f"cards.{set_code}.{card_key}")
                continue
            try:
                changes += _fill_record(card_key, record)
            except ValueError:
                context.skip(f"cards.{set_code}.{card_key}")

    return changes


def _fill_record(card_key: str, record: dict[str, Any]) -> int:
    changes = 0
    kind = decode_any_key(card_key).kind

    if record.get("fullart") is None:
        record["fullart"] = kind is VariantKind.FULL_ART
        changes += 1
    if record.get("masterpiece") is None:
        record["masterpiece"] = kind is VariantKind.MASTERPIECE
        changes += 1
    if record.get("backImg") is None:
        record["backImg"] = CARD_BACK_URL
        changes += 1
    count = record.get("count")
    if not _is_number(count) or (isinstance(count, float) and not math.isfinite(count)):
        record["count"] = 1
        changes += 1
    if not record.get("name"):
        record["name"] = UNKNOWN_CARD_NAME
        changes += 1
    if not record.get("img"):
        record["img"] = CARD_BACK_URL
        changes += 1

    return changes


def rekey_variants(document: dict[str, Any], context: MigrationContext) -> int:
    """
    Rewrite legacy suffix keys into the explicit "<kind>:<base_id>" form.

    If both a legacy and a current key exist for the same variant, the
    counts are merged into the current record.
    """
    changes = 0
    for set_code, records in _iter_set_records(document, context):
        if all(is_encoded_key(card_key) for card_key in records):
            continue

        rekeyed: dict[str, Any] = {}
        for card_key, record in records.items():
            if not isinstance(record, dict):
                context.skip(f"cards.{set_code}.{card_key}")
                rekeyed[card_key] = record
                continue
            try:
                new_key = decode_any_key(card_key).encode()
            except ValueError:
                context.skip(f"cards.{set_code}.{card_key}")
                rekeyed[card_key] = record
                continue
            if new_key != card_key:
                changes += 1

            existing = rekeyed.get(new_key)
            if existing is None:
                rekeyed[new_key] = record
            elif isinstance(existing, dict):
                existing_count = existing.get("count", 1)
                extra_count = record.get("count", 1)
                if _is_number(existing_count) and _is_number(extra_count):
                    existing["count"] = int(existing_count) + int(extra_count)
            else:
                # Readable records win over unreadable data under the same key.
                context.skip(f"cards.{set_code}.{new_key}")
                rekeyed[new_key] = record

        document["cards"][set_code] = rekeyed
    return changes


def normalize_points(document: dict[str, Any], context: MigrationContext) -> int:
    """Coerce points to a non-negative int and the regen anchor to an int."""
    changes = 0

    points = document.get("points")
    if _is_number(points) and math.isfinite(points):
        normalized = max(0, int(points))
    else:
        normalized = 0
    if type(points) is not int or points != normalized:
        document["points"] = normalized
        changes += 1

    last = document.get("last")
    if not _is_number(last) or not math.isfinite(last):
        document["last"] = context.now_ms
        changes += 1
    elif not isinstance(last, int):
        document["last"] = int(last)
        changes += 1

    return changes


MIGRATIONS: tuple[MigrationStep, ...] = (
    MigrationStep(version=1, name="fill_record_defaults", apply=fill_record_defaults),
    MigrationStep(version=2, name="rekey_variants", apply=rekey_variants),
    MigrationStep(version=3, name="normalize_points", apply=normalize_points),
)

CURRENT_SCHEMA_VERSION = MIGRATIONS[-1].version


def migrate_document(
    document: dict[str, Any],
    from_version: int,
    now_ms: int,
) -> MigrationReport:
    """
    Migrate a save document in place.

    Args:
        document: Parsed save document (mutated)
        from_version: Schema version the document was stored with
        now_ms: Current time, used as the regen anchor if none is stored

    Returns:
        MigrationReport describing what changed and what was skipped.
    """
    context = MigrationContext(now_ms=now_ms)
    report = MigrationReport(from_version=from_version, to_version=from_version)

    for step in MIGRATIONS:
        if step.version <= from_version:
            continue
        changed = step.apply(document, context)
        report.changes[step.name] = changed
        report.to_version = step.version
        if changed:
            logger.info(
                "migration_applied",
                extra={"step": step.name, "version": step.version, "changes": changed},
            )

    report.skipped = list(context.skipped)
    return report
