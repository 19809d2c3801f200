from collections.abc import Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardtable.db.database import get_session
from cardtable.main import app
from cardtable.models.card import (
    CardColor,
    CatalogCard,
    CollectionCard,
    Player,
    PlayerTeam,
    Series,
    Team,
)
from cardtable.models.db import Base

TeamSpec = tuple[int, str, str]

ANGELS: TeamSpec = (7, "Los Angeles Angels", "LAA")
DODGERS: TeamSpec = (12, "Los Angeles Dodgers", "LAD")


def _player_team(player: tuple[str, str], team: TeamSpec) -> PlayerTeam:
    team_id, name, abbreviation = team
    return PlayerTeam(
        player=Player(first_name=player[0], last_name=player[1]),
        team=Team(team_id=team_id, name=name, abbreviation=abbreviation),
    )


def _common_fields(
    card_number: str,
    player: tuple[str, str],
    team: TeamSpec,
    series: str,
    color: str | None,
) -> dict[str, Any]:
    return {
        "card_number": card_number,
        "player_teams": (_player_team(player, team),),
        "series": Series(name=series),
        "color": CardColor(name=color) if color else None,
    }


@pytest.fixture
def make_catalog_card() -> Callable[..., CatalogCard]:
    """Build a catalog card with sensible defaults; keyword overrides pass through."""

    def build(
        card_id: int | str = 1,
        card_number: str = "1",
        *,
        player: tuple[str, str] = ("Mike", "Trout"),
        team: TeamSpec = ANGELS,
        series: str = "2024 Topps Chrome",
        color: str | None = None,
        **fields: Any,
    ) -> CatalogCard:
        return CatalogCard(
            id=card_id,
            **_common_fields(card_number, player, team, series, color),
            **fields,
        )

    return build


@pytest.fixture
def make_collection_card() -> Callable[..., CollectionCard]:
    """Build an owned copy with sensible defaults; keyword overrides pass through."""

    def build(
        card_id: int | str = 1,
        card_number: str = "1",
        *,
        player: tuple[str, str] = ("Shohei", "Ohtani"),
        team: TeamSpec = DODGERS,
        series: str = "2024 Topps Chrome",
        color: str | None = None,
        **fields: Any,
    ) -> CollectionCard:
        return CollectionCard(
            id=card_id,
            **_common_fields(card_number, player, team, series, color),
            **fields,
        )

    return build


@pytest.fixture
def wire_catalog_card() -> dict[str, Any]:
    """One catalog record as the card API returns it."""
    return {
        "card_id": 101,
        "card_number": "12",
        "card_player_teams": [
            {
                "player": {"first_name": "Mike", "last_name": "Trout"},
                "team": {
                    "team_id": 7,
                    "name": "Los Angeles Angels",
                    "abbreviation": "LAA",
                    "primary_color": "#BA0021",
                },
            }
        ],
        "series_rel": {
            "name": "2024 Topps Chrome Gold Refractor",
            "slug": "2024-topps-chrome-gold-refractor",
            "production_code": "CMP100",
        },
        "color_rel": {"color": "Gold", "hex_color": "#FFD700"},
        "print_run": 50,
        "is_rookie": False,
        "is_autograph": True,
        "is_relic": False,
        "is_short_print": False,
        "user_card_count": 2,
        "sort_order": 12,
    }


@pytest.fixture
def wire_collection_card() -> dict[str, Any]:
    """One owned copy as the collection endpoint returns it."""
    return {
        "user_card_id": 9001,
        "card_id": 101,
        "random_code": "X7K2",
        "card_number": "US250",
        "card_player_teams": [
            {
                "player_team_rel": {
                    "player_rel": {"first_name": "Shohei", "last_name": "Ohtani"},
                    "team_rel": {
                        "team_id": 12,
                        "name": "Los Angeles Dodgers",
                        "abbreviation": "LAD",
                    },
                }
            }
        ],
        "series_rel": {"name": "2024 Topps Update"},
        "color_rel": None,
        "print_run": None,
        "serial_number": None,
        "is_rookie": True,
        "is_autograph": False,
        "purchase_price": "12.50",
        "estimated_value": 20,
        "current_value": None,
        "location_name": "Binder 3",
        "grade": 9.5,
        "grading_agency_abbr": "BGS",
        "grading_agency_name": "Beckett",
        "is_special": True,
        "aftermarket_autograph": False,
        "date_added": "2024-03-15T18:30:00Z",
        "photo_count": 2,
        "notes": 'Pulled at the "card show"',
    }


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
async def client(async_engine):
    """Provide an async test client with overridden database session."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
