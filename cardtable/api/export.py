"""
CSV export endpoint.

Takes the records a page is showing (in the card API's wire format) plus
the table state, runs them through the table engine and returns a CSV
attachment.
"""

import logging
from typing import Any

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from cardtable.models.card import CardKind
from cardtable.parsers.card_records import parse_card_records
from cardtable.table.engine import CardTableEngine
from cardtable.table.filtering import StatFilter, StructuralFilters
from cardtable.table.options import TableConfig, ViewMode
from cardtable.table.sorting import SortDirection

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cards", tags=["export"])


class ExportRequest(BaseModel):
    """Request model for a CSV export."""

    cards: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Card records as returned by the card API",
    )
    view_mode: ViewMode = Field(
        default=ViewMode.CATALOG,
        description="Hosting view; collection exports get the Code column",
    )
    columns: list[str] | None = Field(
        default=None,
        description="Visible column ids, left to right. Defaults to the table defaults.",
    )
    query: str = Field(default="", description="Search text applied before export")
    team_ids: list[int] = Field(default_factory=list)
    stat_filter: StatFilter | None = None
    sort_field: str | None = None
    sort_direction: SortDirection = SortDirection.ASC
    filename: str | None = Field(
        default=None,
        description="Download name; .csv is appended if missing",
        examples=["my-collection"],
    )


@router.post(
    "/export",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_cards(request: ExportRequest) -> Response:
    """
    Export cards as CSV.

    Rows are filtered and sorted exactly as the table would show them.
    """
    config = TableConfig(view_mode=request.view_mode)
    kind = CardKind.COLLECTION if config.is_collection_view else None
    records = parse_card_records(request.cards, kind)

    engine = CardTableEngine(config, records, visible_columns=request.columns)
    engine.set_search_query(request.query)
    engine.set_filters(StructuralFilters.build(request.team_ids, request.stat_filter))
    if request.sort_field:
        engine.set_sort(request.sort_field, request.sort_direction)

    blob = engine.export(request.filename)
    logger.info("Serving %s (%d records)", blob.filename, len(records))

    return Response(
        content=blob.content,
        media_type=blob.media_type,
        headers={"Content-Disposition": f'attachment; filename="{blob.filename}"'},
    )
