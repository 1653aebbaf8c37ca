"""
Catalog registry.

Holds the resolved card pools per set for the lifetime of the process.
The catalog is read-only to the pack composer; pools are only replaced
by registering the set again.
"""

import logging

from pocketpacks.models.card import CardPools
from pocketpacks.models.failure import SetNotLoadedError

logger = logging.getLogger(__name__)


class CatalogRegistry:
    """In-memory map of set code -> CardPools."""

    def __init__(self) -> None:
        self._pools: dict[str, CardPools] = {}

    def register(self, set_code: str, pools: CardPools) -> None:
        replaced = set_code in self._pools
        self._pools[set_code] = pools
        logger.info(
            "catalog_registered",
            extra={
                "set_code": set_code,
                "replaced": replaced,
                "main": len(pools.main),
                "full_art": len(pools.full_art),
                "masterpiece": len(pools.masterpiece),
                "spotlight": len(pools.spotlight),
            },
        )

    def get(self, set_code: str) -> CardPools:
        """
        Get the pools for a set.

        Raises:
            SetNotLoadedError: If the set has not been registered.
        """
        pools = self._pools.get(set_code)
        if pools is None:
            raise SetNotLoadedError(set_code)
        return pools

    def __contains__(self, set_code: object) -> bool:
        return set_code in self._pools

    def set_codes(self) -> list[str]:
        return sorted(self._pools)
