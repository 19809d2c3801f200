"""
Row actions and bulk selection.

The dispatcher decides which actions a row offers in the current context
and forwards a chosen action to the host's callback. It performs no I/O;
whatever the callback does (API call, modal, navigation) is the host's
concern.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cardtable.models.card import CardBase
from cardtable.models.failure import ActionNotAvailableError
from cardtable.table.options import ViewMode

logger = logging.getLogger(__name__)


class RowAction(str, Enum):
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"
    FAVORITE = "favorite"
    REMOVE_FROM_LIST = "remove_from_list"
    SHARE = "share"


ActionCallback = Callable[[CardBase], Any]


@dataclass
class ActionContext:
    """
    What the hosting page knows about the viewer and the table.

    Attributes:
        is_authenticated: A user is signed in
        view_mode: Catalog, collection or list-detail page
        bulk_selection_mode: Rows show checkboxes instead of per-row add
        show_remove_from_list: The host offers "remove from list"
        removing_ids: Rows whose removal request is in flight
    """

    is_authenticated: bool = False
    view_mode: ViewMode = ViewMode.CATALOG
    bulk_selection_mode: bool = False
    show_remove_from_list: bool = False
    removing_ids: set[int | str] = field(default_factory=set)


class RowActionDispatcher:
    """Gates and forwards per-row actions."""

    def __init__(
        self,
        context: ActionContext | None = None,
        callbacks: Mapping[RowAction, ActionCallback] | None = None,
    ):
        self.context = context or ActionContext()
        self._callbacks: dict[RowAction, ActionCallback] = dict(callbacks or {})

    def register(self, action: RowAction, callback: ActionCallback) -> None:
        self._callbacks[RowAction(action)] = callback

    def available_actions(self, record: CardBase) -> tuple[RowAction, ...]:
        """Actions shown for a row, in display order."""
        ctx = self.context
        in_collection = ctx.view_mode == ViewMode.COLLECTION

        actions: list[RowAction] = []
        if ctx.is_authenticated and not ctx.bulk_selection_mode:
            actions.append(RowAction.ADD)
        if ctx.is_authenticated and in_collection:
            actions.extend([RowAction.EDIT, RowAction.DELETE, RowAction.FAVORITE])
        if ctx.show_remove_from_list:
            actions.append(RowAction.REMOVE_FROM_LIST)
        actions.append(RowAction.SHARE)
        return tuple(actions)

    def is_enabled(self, action: RowAction, record: CardBase) -> bool:
        """Shown and not blocked by an in-flight removal of this row."""
        action = RowAction(action)
        if action not in self.available_actions(record):
            return False
        if action == RowAction.REMOVE_FROM_LIST:
            return record.id not in self.context.removing_ids
        return True

    def dispatch(self, action: RowAction | str, record: CardBase) -> Any:
        """
        Run the host callback for an action on a row.

        Returns:
            Whatever the callback returns, or None when no callback is
            registered.

        Raises:
            ActionNotAvailableError: If the action is hidden or disabled
                for this row.
        """
        action = RowAction(action)
        if not self.is_enabled(action, record):
            raise ActionNotAvailableError(action.value, record.id)

        callback = self._callbacks.get(action)
        if callback is None:
            logger.debug("No callback registered for %s", action.value)
            return None
        return callback(record)

    def begin_removal(self, record_id: int | str) -> None:
        self.context.removing_ids.add(record_id)

    def end_removal(self, record_id: int | str) -> None:
        self.context.removing_ids.discard(record_id)


class BulkSelection:
    """
    Checkbox selection across rows.

    Selecting only works while the mode is on; switching the mode either
    way clears the selection.
    """

    def __init__(self) -> None:
        self.enabled = False
        self._selected: set[int | str] = set()

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._selected

    @property
    def selected_ids(self) -> frozenset[int | str]:
        return frozenset(self._selected)

    def set_mode(self, enabled: bool) -> None:
        self.enabled = enabled
        self._selected.clear()

    def toggle_mode(self) -> bool:
        """Flip bulk mode. Returns the new mode."""
        self.set_mode(not self.enabled)
        return self.enabled

    def select(self, record_id: int | str) -> bool:
        if not self.enabled or record_id in self._selected:
            return False
        self._selected.add(record_id)
        return True

    def deselect(self, record_id: int | str) -> bool:
        if record_id not in self._selected:
            return False
        self._selected.discard(record_id)
        return True

    def toggle(self, record_id: int | str) -> bool:
        """Flip one row. Returns True if the row is now selected."""
        if record_id in self._selected:
            self.deselect(record_id)
            return False
        return self.select(record_id)

    def select_all(self, records: Iterable[CardBase]) -> int:
        """Select every given row. Returns how many were newly selected."""
        if not self.enabled:
            return 0
        before = len(self._selected)
        self._selected.update(r.id for r in records)
        return len(self._selected) - before

    def clear(self) -> None:
        self._selected.clear()
