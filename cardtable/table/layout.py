"""
Column layout state: widths, resize drags and the visible-columns set.

Widths are per engine instance and are not persisted. Visible columns are
persisted server-side per user and table (see services.preferences_client).
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass

from cardtable.config import MIN_COLUMN_WIDTH
from cardtable.models.columns import ColumnDef, ColumnWidth, TableName, get_table_columns

logger = logging.getLogger(__name__)

# Width assumed for an "auto" column when the caller does not measure it
AUTO_COLUMN_FALLBACK_WIDTH = 150


@dataclass(frozen=True, slots=True)
class ResizeState:
    """An in-progress drag on one column's resize handle."""

    column_id: str
    start_x: float
    start_width: int


class ColumnLayout:
    """
    Column widths plus the single active resize drag.

    During a drag the column width is max(min_width, start_width + dx).
    Only one column resizes at a time; beginning a new drag replaces the
    active one.
    """

    def __init__(
        self,
        widths: Mapping[str, ColumnWidth] | None = None,
        min_widths: Mapping[str, int] | None = None,
    ):
        self._widths: dict[str, ColumnWidth] = dict(widths or {})
        self._min_widths: dict[str, int] = dict(min_widths or {})
        self._resize: ResizeState | None = None

    @classmethod
    def for_columns(cls, columns: Iterable[ColumnDef]) -> "ColumnLayout":
        """Start from the registry's declared widths."""
        return cls({col.id: col.width for col in columns})

    @property
    def widths(self) -> dict[str, ColumnWidth]:
        return dict(self._widths)

    @property
    def is_resizing(self) -> bool:
        return self._resize is not None

    @property
    def resizing_column(self) -> str | None:
        return self._resize.column_id if self._resize else None

    def width_of(self, column_id: str) -> ColumnWidth:
        return self._widths.get(column_id, "auto")

    def min_width_of(self, column_id: str) -> int:
        return self._min_widths.get(column_id, MIN_COLUMN_WIDTH)

    def set_width(self, column_id: str, width: ColumnWidth) -> None:
        if width != "auto":
            width = max(self.min_width_of(column_id), int(width))
        self._widths[column_id] = width

    def begin_resize(
        self,
        column_id: str,
        pointer_x: float,
        start_width: int | None = None,
    ) -> None:
        """
        Start dragging a column's resize handle.

        Args:
            column_id: Column being resized
            pointer_x: Pointer x coordinate at mouse-down
            start_width: Rendered width, required to resize "auto" columns
                accurately. Defaults to the stored width.
        """
        if self._resize is not None:
            logger.debug(
                "Resize of %s replaced by resize of %s", self._resize.column_id, column_id
            )

        if start_width is None:
            current = self.width_of(column_id)
            start_width = AUTO_COLUMN_FALLBACK_WIDTH if current == "auto" else int(current)

        self._resize = ResizeState(
            column_id=column_id,
            start_x=pointer_x,
            start_width=int(start_width),
        )

    def update_resize(self, pointer_x: float) -> int | None:
        """
        Apply pointer movement to the active drag.

        Returns:
            The new width, or None when no drag is active.
        """
        if self._resize is None:
            return None

        state = self._resize
        delta = pointer_x - state.start_x
        width = max(self.min_width_of(state.column_id), int(round(state.start_width + delta)))
        self._widths[state.column_id] = width
        return width

    def end_resize(self) -> None:
        self._resize = None

    @contextmanager
    def resize_session(
        self,
        column_id: str,
        pointer_x: float,
        start_width: int | None = None,
    ) -> Iterator["ColumnLayout"]:
        """
        Scope a drag from mouse-down to mouse-up.

        The drag always ends when the block exits, including on error:

            with layout.resize_session("player", event.x):
                for move in pointer_moves:
                    layout.update_resize(move.x)
        """
        self.begin_resize(column_id, pointer_x, start_width)
        try:
            yield self
        finally:
            self.end_resize()


class VisibleColumns:
    """
    The set of visible columns for one table.

    Always a subset of the registry, always includes the always-visible
    columns, and iterates in registry order.
    """

    def __init__(self, table_name: TableName | str, visible: Iterable[str] | None = None):
        self.table_name = TableName(table_name)
        self._columns = get_table_columns(self.table_name)
        self._visible: set[str] = set()
        if visible is None:
            self.reset()
        else:
            self.replace(visible)

    def __contains__(self, column_id: object) -> bool:
        return column_id in self._visible

    def __iter__(self) -> Iterator[str]:
        return iter(self.ordered())

    def __len__(self) -> int:
        return len(self._visible)

    def ordered(self) -> list[str]:
        """Visible column ids in render order."""
        return [col_id for col_id in self._columns if col_id in self._visible]

    def definitions(self) -> list[ColumnDef]:
        """Visible column definitions in render order."""
        return [self._columns[col_id] for col_id in self.ordered()]

    def is_always_visible(self, column_id: str) -> bool:
        col = self._columns.get(column_id)
        return col is not None and col.always_visible

    def replace(self, column_ids: Iterable[str]) -> None:
        """Replace the whole set, e.g. with preferences loaded from the server."""
        requested = set(column_ids)
        unknown = requested - self._columns.keys()
        if unknown:
            logger.debug("Ignoring unknown columns for %s: %s", self.table_name.value, unknown)
        self._visible = {
            col.id for col in self._columns.values() if col.always_visible or col.id in requested
        }

    def reset(self) -> None:
        """Back to the registry defaults."""
        self._visible = {
            col.id for col in self._columns.values() if col.default_visible or col.always_visible
        }

    def show(self, column_id: str) -> bool:
        """Show a column. Returns True if the set changed."""
        if column_id not in self._columns or column_id in self._visible:
            return False
        self._visible.add(column_id)
        return True

    def hide(self, column_id: str) -> bool:
        """Hide a column. Always-visible columns are never hidden. Returns True if changed."""
        if column_id not in self._visible or self.is_always_visible(column_id):
            return False
        self._visible.discard(column_id)
        return True

    def toggle(self, column_id: str) -> bool:
        """Flip a column's visibility. Returns True if the set changed."""
        if column_id in self._visible:
            return self.hide(column_id)
        return self.show(column_id)
