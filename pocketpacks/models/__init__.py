from pocketpacks.models.card import (
    CardPools,
    CatalogEntry,
    ImagePair,
    Rarity,
    VariantKey,
    VariantKind,
)
from pocketpacks.models.failure import (
    STANDARD_MESSAGES,
    STANDARD_SUGGESTIONS,
    ApiResponse,
    FailureDetail,
    FailureKind,
    CardNotFoundError,
    KnownError,
    NoCardsAvailableError,
    OutcomeType,
    SetNotLoadedError,
    create_refusal,
    create_success,
    create_unknown_failure,
    finalize_response,
)
from pocketpacks.models.history import DisplaySlots, RecencyHistory, project_display
from pocketpacks.models.ledger import CollectionRecord, Ledger, collector_sort_key
from pocketpacks.models.pack import PackOpenOutcome, PackResult, PackSlot
from pocketpacks.models.points import InsufficientPointsError, PointsAccount, current_time_ms

__all__ = [
    "ApiResponse",
    "CardNotFoundError",
    "CardPools",
    "CatalogEntry",
    "CollectionRecord",
    "DisplaySlots",
    "FailureDetail",
    "FailureKind",
    "ImagePair",
    "InsufficientPointsError",
    "KnownError",
    "Ledger",
    "NoCardsAvailableError",
    "OutcomeType",
    "PackOpenOutcome",
    "PackResult",
    "PackSlot",
    "PointsAccount",
    "Rarity",
    "RecencyHistory",
    "STANDARD_MESSAGES",
    "STANDARD_SUGGESTIONS",
    "SetNotLoadedError",
    "VariantKey",
    "VariantKind",
    "collector_sort_key",
    "create_refusal",
    "create_success",
    "create_unknown_failure",
    "current_time_ms",
    "finalize_response",
    "project_display",
]
