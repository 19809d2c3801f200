"""
Export a card endpoint to a CSV file.

Fetches the whole record set (full-load mode), applies the same search and
sort the table would, and writes the CSV the table's download button
produces:

    python -m cardtable.jobs.export_cards \\
        --endpoint /api/user/cards --table collection_table \\
        --query auto --sort print_run --desc --output my-autos.csv
"""

import argparse
import asyncio
import logging
from pathlib import Path

from cardtable.config import settings
from cardtable.models.columns import TableName
from cardtable.models.failure import KnownError
from cardtable.table.engine import CardTableEngine, card_source_full_loader
from cardtable.table.options import TableConfig
from cardtable.table.sorting import SortDirection

logger = logging.getLogger(__name__)


async def run_export(
    endpoint: str,
    output: Path,
    table: TableName = TableName.CARD_TABLE,
    query: str = "",
    sort_field: str | None = None,
    descending: bool = False,
    token: str | None = None,
) -> int:
    """
    Fetch, filter, sort and write one CSV.

    Returns:
        Number of rows written
    """
    if table == TableName.COLLECTION_TABLE:
        config = TableConfig.collection()
    else:
        config = TableConfig.catalog()

    failures: list[str] = []
    engine = CardTableEngine(
        config,
        load_all=card_source_full_loader(endpoint, token=token),
        notify=failures.append,
    )
    await engine.load()
    if failures:
        raise RuntimeError(failures[-1])

    engine.set_search_query(query)
    if sort_field:
        engine.set_sort(sort_field, SortDirection.DESC if descending else SortDirection.ASC)

    blob = engine.export(output.name)
    output.write_text(blob.content, encoding="utf-8")

    rows = len(engine.rows())
    logger.info("Wrote %d rows to %s", rows, output)
    return rows


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export card records to CSV")
    parser.add_argument("--endpoint", required=True, help="Card endpoint path or URL")
    parser.add_argument("--output", required=True, type=Path, help="CSV file to write")
    parser.add_argument(
        "--table",
        default=TableName.CARD_TABLE.value,
        choices=[t.value for t in TableName],
        help="Column registry to use",
    )
    parser.add_argument("--query", default="", help="Search text")
    parser.add_argument("--sort", default=None, help="Column id or record field to sort by")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    try:
        asyncio.run(
            run_export(
                endpoint=args.endpoint,
                output=args.output,
                table=TableName(args.table),
                query=args.query,
                sort_field=args.sort,
                descending=args.desc,
                token=settings.api_token,
            )
        )
    except (KnownError, RuntimeError, OSError) as e:
        logger.error("Export failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
