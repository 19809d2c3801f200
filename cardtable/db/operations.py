"""
Database CRUD operations for table preferences.

Callers pass table names already validated against TableName; column ids
are stored as given.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cardtable.models.db import UserTablePreferenceDB


async def get_table_preference(
    session: AsyncSession, user_id: str, table_name: str
) -> UserTablePreferenceDB | None:
    """
    Get a user's saved preference for one table.

    Returns None if the user never saved one (or reset it).
    """
    result = await session.execute(
        select(UserTablePreferenceDB).where(
            UserTablePreferenceDB.user_id == user_id,
            UserTablePreferenceDB.table_name == table_name,
        )
    )
    return result.scalar_one_or_none()


async def save_table_preference(
    session: AsyncSession,
    user_id: str,
    table_name: str,
    visible_columns: list[str],
    column_order: list[str] | None = None,
) -> tuple[UserTablePreferenceDB, bool]:
    """
    Insert or update a user's preference for one table.

    Updates the existing row when there is one, otherwise inserts.

    Returns:
        Tuple of (preference, created) where created is True if new.
    """
    existing = await get_table_preference(session, user_id, table_name)

    if existing:
        existing.visible_columns = list(visible_columns)
        existing.column_order = list(column_order) if column_order is not None else None
        await session.flush()
        return existing, False

    preference = UserTablePreferenceDB(
        user_id=user_id,
        table_name=table_name,
        visible_columns=list(visible_columns),
        column_order=list(column_order) if column_order is not None else None,
    )
    session.add(preference)
    await session.flush()
    return preference, True


async def delete_table_preference(session: AsyncSession, user_id: str, table_name: str) -> bool:
    """
    Delete a user's preference for one table.

    Returns True if a row was deleted, False if none existed.
    """
    result = await session.execute(
        delete(UserTablePreferenceDB).where(
            UserTablePreferenceDB.user_id == user_id,
            UserTablePreferenceDB.table_name == table_name,
        )
    )
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount) > 0  # type: ignore[attr-defined]
