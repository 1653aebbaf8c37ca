"""
Scryfall card normalization.

Scryfall card objects come in several shapes: single-faced cards carry
top-level `image_uris`, double-faced cards carry images per face in
`card_faces`, and some cards carry both. This module is the only place
that looks at those shapes. Everything downstream sees CatalogEntry with
an ImagePair that is always fully populated.

Card data: https://scryfall.com/docs/api/cards
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any, TypedDict

from pocketpacks.config import CARD_BACK_URL
from pocketpacks.models.card import CardPools, CatalogEntry, ImagePair

IMAGE_SIZE = "normal"


class SetPoolsData(TypedDict, total=False):
    """Raw pool lists for one set, as stored on disk or posted to the API."""

    main: list[dict[str, Any]]
    full_art: list[dict[str, Any]]
    masterpiece: list[dict[str, Any]]
    spotlight: list[dict[str, Any]]


def _face_image(face: Any) -> str | None:
    if not isinstance(face, dict):
        return None
    uris = face.get("image_uris")
    if isinstance(uris, dict) and uris.get(IMAGE_SIZE):
        return str(uris[IMAGE_SIZE])
    return None


def extract_images(card: dict[str, Any]) -> ImagePair:
    """
    Extract front and back images from a Scryfall card object.

    Single-faced cards use top-level image_uris for the front and the
    second face (if any) for the back. Multi-faced cards use their first
    and second faces. Anything missing falls back to the card back.
    """
    faces = card.get("card_faces")
    faces = faces if isinstance(faces, list) else []
    back = _face_image(faces[1]) if len(faces) > 1 else None

    front = _face_image(card)
    if front is None and faces:
        front = _face_image(faces[0])

    return ImagePair(front=front or CARD_BACK_URL, back=back or CARD_BACK_URL)


def normalize_card(card: dict[str, Any]) -> CatalogEntry:
    """
    Normalize one Scryfall card object.

    Raises:
        ValueError: If the card has no id or no name.
    """
    card_id = card.get("id")
    name = card.get("name")
    if not card_id or not name:
        raise ValueError(f"Card is missing id or name: {card.get('id')!r}")

    collector_number = card.get("collector_number")
    return CatalogEntry(
        id=str(card_id),
        name=str(name),
        rarity=str(card.get("rarity") or "common"),
        images=extract_images(card),
        collector_number=str(collector_number) if collector_number is not None else None,
    )


def normalize_cards(cards: Iterable[dict[str, Any]]) -> tuple[CatalogEntry, ...]:
    """Normalize a list of cards, keeping their order."""
    return tuple(normalize_card(card) for card in cards)


def build_pools(data: SetPoolsData) -> CardPools:
    """Build CardPools from raw pool lists. Missing pools are empty."""
    return CardPools(
        main=normalize_cards(data.get("main", [])),
        full_art=normalize_cards(data.get("full_art", [])),
        masterpiece=normalize_cards(data.get("masterpiece", [])),
        spotlight=normalize_cards(data.get("spotlight", [])),
    )


def load_set_pools(path: Path) -> CardPools:
    """
    Load a set's pools from a JSON file.

    The file holds an object with `main`, `full_art`, `masterpiece` and
    `spotlight` lists of Scryfall card objects.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Set pool file not found at {path}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    return build_pools(data)
