"""
PocketPacks services.

Business logic for pack opening and collection management.
"""

from pocketpacks.services.card_identity import (
    decode_legacy_key,
    decode_variant_key,
    encode_variant_key,
    is_owned,
    variant_key_for,
)
from pocketpacks.services.catalog import CatalogRegistry
from pocketpacks.services.collection_filter import CollectionFilter, filter_records
from pocketpacks.services.collection_service import CollectionService, default_document
from pocketpacks.services.collection_stats import Progress, SetStats, compute_set_stats
from pocketpacks.services.pack_composer import PackComposer, PackRules
from pocketpacks.services.rarity import FALLBACK_ORDER, RarityResolver
from pocketpacks.services.schema_migrator import (
    CURRENT_SCHEMA_VERSION,
    MIGRATIONS,
    MigrationReport,
    migrate_document,
)
from pocketpacks.services.session_registry import SessionRegistry

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "CatalogRegistry",
    "CollectionFilter",
    "CollectionService",
    "FALLBACK_ORDER",
    "MIGRATIONS",
    "MigrationReport",
    "PackComposer",
    "PackRules",
    "Progress",
    "RarityResolver",
    "SessionRegistry",
    "SetStats",
    "compute_set_stats",
    "decode_legacy_key",
    "decode_variant_key",
    "default_document",
    "encode_variant_key",
    "filter_records",
    "is_owned",
    "migrate_document",
    "variant_key_for",
]
