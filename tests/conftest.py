import random
from collections.abc import Iterable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pocketpacks.api.dependencies import get_catalog, get_registry
from pocketpacks.main import app
from pocketpacks.models.card import CardPools, CatalogEntry, ImagePair
from pocketpacks.models.db import Base
from pocketpacks.services.catalog import CatalogRegistry
from pocketpacks.services.pack_composer import PackComposer, PackRules
from pocketpacks.services.session_registry import SessionRegistry

CARD_BACK = "https://files.mtg.wiki/Magic_card_back.jpg"
HOUR_MS = 3_600_000


class ScriptedRandom(random.Random):
    """
    Random source whose random() calls return queued values.

    choice() keeps using the seeded bit generator, so scripting a draw
    only needs the gate and rarity rolls.
    """

    def __init__(self, values: Iterable[float] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self._values = list(values)

    def random(self) -> float:
        if self._values:
            return self._values.pop(0)
        return super().random()

    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


def make_entry(
    card_id: str,
    name: str | None = None,
    rarity: str = "common",
    collector_number: str | None = "1",
) -> CatalogEntry:
    return CatalogEntry(
        id=card_id,
        name=name or f"Card {card_id}",
        rarity=rarity,
        images=ImagePair(front=f"https://img.example/{card_id}.jpg", back=CARD_BACK),
        collector_number=collector_number,
    )


@pytest.fixture
def full_pools() -> CardPools:
    """A small set with every pool populated."""
    main = (
        make_entry("c1", "Forest Bear", "common", "1"),
        make_entry("c2", "Shock", "common", "2"),
        make_entry("u1", "Counterspell", "uncommon", "10"),
        make_entry("r1", "Llanowar Elves", "rare", "20"),
        make_entry("m1", "Dragon Lord", "mythic", "30"),
    )
    return CardPools(
        main=main,
        full_art=(make_entry("f1", "Forest Bear", "common", "301"),),
        masterpiece=(make_entry("x1", "Sol Ring", "mythic", "401"),),
        spotlight=(main[1],),
    )


@pytest.fixture
def sample_scryfall_cards() -> list[dict]:
    """Scryfall-shaped card objects in the shapes the catalog produces."""
    return [
        {
            "id": "aaa",
            "name": "Lightning Bolt",
            "rarity": "common",
            "collector_number": "141",
            "image_uris": {"normal": "https://img.example/aaa.jpg"},
        },
        {
            "id": "bbb",
            "name": "Delver of Secrets // Insectile Aberration",
            "rarity": "uncommon",
            "collector_number": "51",
            "card_faces": [
                {"image_uris": {"normal": "https://img.example/bbb-front.jpg"}},
                {"image_uris": {"normal": "https://img.example/bbb-back.jpg"}},
            ],
        },
        {
            "id": "ccc",
            "name": "Imageless Wonder",
            "rarity": "rare",
        },
    ]


class FakeClock:
    """Settable millisecond clock."""

    def __init__(self, now_ms: int = 1_700_000_000_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine shared by every session."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(session_factory, clock: FakeClock) -> SessionRegistry:
    """Registry whose packs never roll god packs or extra slots."""
    rules = PackRules(godpack_chance=0.0, bonus_chance=0.0, masterpiece_chance=0.0)
    return SessionRegistry(
        session_factory,
        composer_factory=lambda: PackComposer(rules, rng=ScriptedRandom()),
        clock=clock,
        regen_interval_ms=HOUR_MS,
    )


@pytest.fixture
def catalog(full_pools: CardPools) -> CatalogRegistry:
    catalog = CatalogRegistry()
    catalog.register("BLB", full_pools)
    return catalog


@pytest.fixture
async def client(session_factory, registry: SessionRegistry, catalog: CatalogRegistry):
    """Provide an async test client with overridden registry and catalog."""
    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_catalog] = lambda: catalog

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
