"""
Card identity service.

Maps catalog entries to ledger keys and answers ownership questions.
Also reads the legacy suffix-encoded keys ("<id>_fullart") found in
old save documents; those are only ever decoded, never written.
"""

from pocketpacks.models.card import CatalogEntry, VariantKey, VariantKind
from pocketpacks.models.ledger import Ledger

LEGACY_SUFFIXES: dict[VariantKind, str] = {
    VariantKind.FULL_ART: "_fullart",
    VariantKind.MASTERPIECE: "_masterpiece",
}


def encode_variant_key(base_id: str, kind: VariantKind = VariantKind.REGULAR) -> str:
    """Encode a (base id, kind) pair to its stored string form."""
    return VariantKey(base_id=base_id, kind=kind).encode()


def decode_variant_key(key: str) -> VariantKey:
    """
    Decode a stored key.

    Raises:
        ValueError: If the key is not in the current encoding.
    """
    return VariantKey.decode(key)


def variant_key_for(entry: CatalogEntry, kind: VariantKind) -> VariantKey:
    """Ledger key for drawing `entry` as the given variant."""
    return VariantKey(base_id=entry.id, kind=kind)


def is_encoded_key(key: str) -> bool:
    """Whether a stored key already uses the current encoding."""
    try:
        VariantKey.decode(key)
    except ValueError:
        return False
    return True


def decode_legacy_key(key: str) -> VariantKey:
    """
    Decode a legacy suffix-encoded key.

    "<id>_fullart" and "<id>_masterpiece" map to their variant kinds;
    anything else is a regular card id.
    """
    for kind, suffix in LEGACY_SUFFIXES.items():
        if key.endswith(suffix) and len(key) > len(suffix):
            return VariantKey(base_id=key[: -len(suffix)], kind=kind)
    return VariantKey(base_id=key, kind=VariantKind.REGULAR)


def decode_any_key(key: str) -> VariantKey:
    """Decode a key in either the current or the legacy encoding."""
    if is_encoded_key(key):
        return VariantKey.decode(key)
    return decode_legacy_key(key)


def is_owned(ledger: Ledger, set_code: str, key: VariantKey) -> bool:
    """Whether the variant has been acquired at least once in this set."""
    return ledger.owns(set_code, key)
