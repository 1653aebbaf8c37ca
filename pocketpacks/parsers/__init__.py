from pocketpacks.parsers.scryfall import (
    build_pools,
    extract_images,
    load_set_pools,
    normalize_card,
    normalize_cards,
)

__all__ = [
    "build_pools",
    "extract_images",
    "load_set_pools",
    "normalize_card",
    "normalize_cards",
]
