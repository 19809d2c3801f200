"""Tests for database CRUD operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from cardtable.db.operations import (
    delete_table_preference,
    get_table_preference,
    save_table_preference,
)


class TestTablePreferenceOperations:
    async def test_get_missing(self, session: AsyncSession) -> None:
        """No saved row returns None."""
        assert await get_table_preference(session, "user-123", "card_table") is None

    async def test_save_creates(self, session: AsyncSession) -> None:
        preference, created = await save_table_preference(
            session, "user-123", "card_table", ["card_number", "player", "series"]
        )

        assert created is True
        assert preference.id is not None
        assert preference.visible_columns == ["card_number", "player", "series"]
        assert preference.column_order is None

    async def test_save_updates_existing(self, session: AsyncSession) -> None:
        """Saving twice keeps one row per user and table."""
        first, _ = await save_table_preference(
            session, "user-123", "collection_table", ["card_number", "player"]
        )
        await session.commit()

        second, created = await save_table_preference(
            session,
            "user-123",
            "collection_table",
            ["card_number", "player", "location"],
            ["location"],
        )
        await session.commit()

        assert created is False
        assert second.id == first.id

        loaded = await get_table_preference(session, "user-123", "collection_table")
        assert loaded is not None
        assert loaded.visible_columns == ["card_number", "player", "location"]
        assert loaded.column_order == ["location"]

    async def test_preferences_scoped_by_user_and_table(self, session: AsyncSession) -> None:
        await save_table_preference(session, "user-1", "card_table", ["notes"])
        await save_table_preference(session, "user-1", "collection_table", ["grade"])
        await save_table_preference(session, "user-2", "card_table", ["series"])
        await session.commit()

        pref = await get_table_preference(session, "user-1", "card_table")

        assert pref is not None
        assert pref.visible_columns == ["notes"]

    async def test_delete(self, session: AsyncSession) -> None:
        await save_table_preference(session, "user-123", "card_table", ["series"])
        await session.commit()

        deleted = await delete_table_preference(session, "user-123", "card_table")
        await session.commit()

        assert deleted is True
        assert await get_table_preference(session, "user-123", "card_table") is None

    async def test_delete_missing(self, session: AsyncSession) -> None:
        assert await delete_table_preference(session, "user-123", "card_table") is False
