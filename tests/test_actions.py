"""Tests for row actions and bulk selection."""

from collections.abc import Callable

import pytest

from cardtable.models.card import CatalogCard
from cardtable.models.failure import ActionNotAvailableError
from cardtable.table.actions import ActionContext, BulkSelection, RowAction, RowActionDispatcher
from cardtable.table.options import ViewMode

CatalogFactory = Callable[..., CatalogCard]


@pytest.fixture
def card(make_catalog_card: CatalogFactory) -> CatalogCard:
    return make_catalog_card(42)


class TestAvailableActions:
    def test_anonymous_only_shares(self, card: CatalogCard) -> None:
        dispatcher = RowActionDispatcher(ActionContext())

        assert dispatcher.available_actions(card) == (RowAction.SHARE,)

    def test_signed_in_catalog(self, card: CatalogCard) -> None:
        dispatcher = RowActionDispatcher(ActionContext(is_authenticated=True))

        assert dispatcher.available_actions(card) == (RowAction.ADD, RowAction.SHARE)

    def test_signed_in_collection(self, card: CatalogCard) -> None:
        context = ActionContext(is_authenticated=True, view_mode=ViewMode.COLLECTION)

        actions = RowActionDispatcher(context).available_actions(card)

        assert actions == (
            RowAction.ADD,
            RowAction.EDIT,
            RowAction.DELETE,
            RowAction.FAVORITE,
            RowAction.SHARE,
        )

    def test_bulk_mode_hides_add(self, card: CatalogCard) -> None:
        context = ActionContext(is_authenticated=True, bulk_selection_mode=True)

        actions = RowActionDispatcher(context).available_actions(card)

        assert RowAction.ADD not in actions

    def test_remove_from_list_when_requested(self, card: CatalogCard) -> None:
        context = ActionContext(view_mode=ViewMode.LIST, show_remove_from_list=True)

        actions = RowActionDispatcher(context).available_actions(card)

        assert actions == (RowAction.REMOVE_FROM_LIST, RowAction.SHARE)


class TestRemoval:
    def test_disabled_while_in_flight(self, card: CatalogCard) -> None:
        dispatcher = RowActionDispatcher(ActionContext(show_remove_from_list=True))

        dispatcher.begin_removal(card.id)

        assert not dispatcher.is_enabled(RowAction.REMOVE_FROM_LIST, card)
        assert RowAction.REMOVE_FROM_LIST in dispatcher.available_actions(card)

        dispatcher.end_removal(card.id)

        assert dispatcher.is_enabled(RowAction.REMOVE_FROM_LIST, card)

    def test_other_rows_unaffected(self, make_catalog_card: CatalogFactory) -> None:
        dispatcher = RowActionDispatcher(ActionContext(show_remove_from_list=True))
        dispatcher.begin_removal(1)

        assert dispatcher.is_enabled(RowAction.REMOVE_FROM_LIST, make_catalog_card(2))


class TestDispatch:
    def test_calls_callback(self, card: CatalogCard) -> None:
        seen: list[int | str] = []
        dispatcher = RowActionDispatcher(
            ActionContext(is_authenticated=True),
            {RowAction.ADD: lambda r: seen.append(r.id) or "added"},
        )

        result = dispatcher.dispatch("add", card)

        assert result == "added"
        assert seen == [42]

    def test_unavailable_action_raises(self, card: CatalogCard) -> None:
        dispatcher = RowActionDispatcher(ActionContext())

        with pytest.raises(ActionNotAvailableError) as exc_info:
            dispatcher.dispatch(RowAction.DELETE, card)

        assert exc_info.value.action == "delete"
        assert exc_info.value.record_id == 42
        assert exc_info.value.status_code == 409

    def test_disabled_removal_raises(self, card: CatalogCard) -> None:
        calls: list[CatalogCard] = []
        dispatcher = RowActionDispatcher(ActionContext(show_remove_from_list=True))
        dispatcher.register(RowAction.REMOVE_FROM_LIST, calls.append)
        dispatcher.begin_removal(card.id)

        with pytest.raises(ActionNotAvailableError):
            dispatcher.dispatch(RowAction.REMOVE_FROM_LIST, card)

        assert calls == []

    def test_missing_callback_returns_none(self, card: CatalogCard) -> None:
        dispatcher = RowActionDispatcher()

        assert dispatcher.dispatch(RowAction.SHARE, card) is None

    def test_unknown_action_name(self, card: CatalogCard) -> None:
        with pytest.raises(ValueError):
            RowActionDispatcher().dispatch("archive", card)


class TestBulkSelection:
    def test_select_requires_mode(self) -> None:
        bulk = BulkSelection()

        assert bulk.select(1) is False
        assert len(bulk) == 0

    def test_select_and_toggle(self) -> None:
        bulk = BulkSelection()
        bulk.set_mode(True)

        assert bulk.select(1) is True
        assert bulk.select(1) is False
        assert bulk.toggle(2) is True
        assert bulk.toggle(1) is False

        assert bulk.selected_ids == frozenset({2})
        assert 2 in bulk

    def test_mode_change_clears(self) -> None:
        bulk = BulkSelection()
        bulk.set_mode(True)
        bulk.select(1)

        assert bulk.toggle_mode() is False
        assert len(bulk) == 0

    def test_select_all(self, make_catalog_card: CatalogFactory) -> None:
        bulk = BulkSelection()
        bulk.set_mode(True)
        bulk.select(1)

        added = bulk.select_all([make_catalog_card(i) for i in (1, 2, 3)])

        assert added == 2
        assert bulk.selected_ids == frozenset({1, 2, 3})

    def test_select_all_disabled(self, make_catalog_card: CatalogFactory) -> None:
        bulk = BulkSelection()

        assert bulk.select_all([make_catalog_card(1)]) == 0

    def test_deselect_and_clear(self) -> None:
        bulk = BulkSelection()
        bulk.set_mode(True)
        bulk.select(1)
        bulk.select(2)

        assert bulk.deselect(1) is True
        assert bulk.deselect(1) is False

        bulk.clear()

        assert bulk.selected_ids == frozenset()
        assert bulk.enabled is True
