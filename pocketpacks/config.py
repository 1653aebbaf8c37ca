from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "PocketPacks"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./pocketpacks.db"

    # Pack economy
    pack_cost: int = 6
    pack_size: int = 5

    # Gate probabilities, evaluated in this order: god pack, bonus, secret
    godpack_chance: float = 0.015
    bonus_chance: float = 0.10
    masterpiece_chance: float = 0.25

    # One point per interval (1 hour in ms)
    regen_interval_ms: int = 3_600_000
    regen_tick_seconds: float = 1.0


settings = Settings()


# =============================================================================
# RARITY THRESHOLDS
# =============================================================================

# Cumulative exclusive upper bounds on a roll in [0, 100).
# Anything at or above the last bound is common.
RARITY_THRESHOLDS: dict[str, float] = {
    "mythic": 3.0,
    "rare": 10.0,
    "uncommon": 30.0,
}

# =============================================================================
# COLLECTION CONSTANTS
# =============================================================================

CARD_BACK_URL = "https://files.mtg.wiki/Magic_card_back.jpg"

UNKNOWN_CARD_NAME = "Unknown Card"

# Most-recently-opened sets kept for the pack selector
RECENT_PACKS_LIMIT = 3
