"""
Table preference API endpoints.

Stores which columns each user shows in each customizable table. A user
with no saved row gets nulls back and the client falls back to the column
registry defaults.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardtable.api.deps import get_current_user_id
from cardtable.db import delete_table_preference, get_table_preference, save_table_preference
from cardtable.db.database import get_session
from cardtable.models.columns import TableName, sanitize_visible_columns

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user/table-preferences", tags=["table-preferences"])

VALID_TABLES = ", ".join(t.value for t in TableName)


class TablePreferenceResponse(BaseModel):
    """Saved preference for one table; nulls mean "use defaults"."""

    visible_columns: list[str] | None = None
    column_order: list[str] | None = None
    message: str | None = None


class SavePreferenceRequest(BaseModel):
    """Request model for saving a table preference."""

    table_name: str = Field(
        ...,
        description="Table to configure",
        examples=["collection_table"],
    )
    visible_columns: list[str] = Field(
        ...,
        description="Column ids to show, left to right",
        examples=[["card_number", "player", "series", "serial_number"]],
    )
    column_order: list[str] | None = Field(
        default=None,
        description="Optional explicit column order",
    )


class SavePreferenceResponse(BaseModel):
    """Response model for a saved preference."""

    message: str
    table_name: str
    visible_columns: list[str]
    column_order: list[str] | None = None


class DeletePreferenceResponse(BaseModel):
    """Response model for a preference reset."""

    table_name: str
    deleted: bool
    message: str = ""


def _validate_table(table_name: str) -> TableName:
    try:
        return TableName(table_name)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid table name. Must be one of: {VALID_TABLES}",
        ) from e


@router.get("/{table_name}", response_model=TablePreferenceResponse)
async def get_preference(
    table_name: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> TablePreferenceResponse:
    """Get the caller's saved columns for a table."""
    table = _validate_table(table_name)
    preference = await get_table_preference(session, user_id, table.value)

    if preference is None:
        return TablePreferenceResponse(message="No preferences found, using defaults")

    return TablePreferenceResponse(
        visible_columns=preference.visible_columns,
        column_order=preference.column_order,
    )


@router.post("", response_model=SavePreferenceResponse)
async def save_preference(
    request: SavePreferenceRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SavePreferenceResponse:
    """
    Save the caller's columns for a table.

    Unknown column ids are dropped and always-visible columns are added back
    before saving.
    """
    table = _validate_table(request.table_name)

    if not request.visible_columns:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="visible_columns must be a non-empty array",
        )

    visible = sanitize_visible_columns(table, request.visible_columns)
    column_order = (
        [c for c in request.column_order if c in visible]
        if request.column_order is not None
        else None
    )

    _, created = await save_table_preference(session, user_id, table.value, visible, column_order)
    logger.info(
        "%s %s preference for user %s (%d columns)",
        "Created" if created else "Updated",
        table.value,
        user_id,
        len(visible),
    )

    return SavePreferenceResponse(
        message="Preferences saved successfully",
        table_name=table.value,
        visible_columns=visible,
        column_order=column_order,
    )


@router.delete("/{table_name}", response_model=DeletePreferenceResponse)
async def reset_preference(
    table_name: str,
    user_id: Annotated[str, Depends(get_current_user_id)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeletePreferenceResponse:
    """Delete the caller's saved columns so the table falls back to defaults."""
    table = _validate_table(table_name)
    deleted = await delete_table_preference(session, user_id, table.value)

    return DeletePreferenceResponse(
        table_name=table.value,
        deleted=deleted,
        message="Preferences reset to defaults",
    )
