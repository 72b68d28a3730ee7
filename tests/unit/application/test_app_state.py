"""Tests for the AppState state machine."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import pytest

from crypto_tracker.application.app_state import AppState
from crypto_tracker.application.view_state import InputMode, Tab
from crypto_tracker.domain.exceptions import PersistenceError, PriceFetchError
from crypto_tracker.domain.services.command_processor import INVALID_FLAG
from crypto_tracker.domain.services.sorting import SortColumn
from crypto_tracker.models.market_data import MarketSnapshot


@pytest.fixture
def state(sample_portfolio, fake_provider, fake_repository) -> AppState:
    return AppState(
        config=sample_portfolio,
        provider=fake_provider,
        api_key="test-key",
        store=fake_repository,
    )


def type_command(state: AppState, text: str) -> None:
    state.enter_edit_mode()
    for char in text:
        state.push_char(char)
    state.submit_command()


class TestDefaults:

    def test_initial_state(self, state: AppState) -> None:
        assert state.input_mode == InputMode.NORMAL
        assert state.view.tab == Tab.WATCHLIST
        assert state.view.sort_columns[Tab.WATCHLIST] == SortColumn.MARKET_CAP
        assert state.view.sort_columns[Tab.PORTFOLIO] == SortColumn.CURRENT_VALUE
        assert state.view.ascending is False
        assert state.last_update is None
        assert state.row_count() == 0


class TestEditMode:

    def test_enter_clears_buffer(self, state: AppState) -> None:
        state.enter_edit_mode()
        state.push_char("x")
        state.cancel_edit()
        state.enter_edit_mode()
        assert state.edit_buffer == ""
        assert state.is_editing

    def test_push_and_pop(self, state: AppState) -> None:
        state.enter_edit_mode()
        for char in "abc":
            state.push_char(char)
        state.pop_char()
        assert state.edit_buffer == "ab"

    def test_chars_ignored_in_normal_mode(self, state: AppState) -> None:
        state.push_char("a")
        state.pop_char()
        assert state.edit_buffer == ""

    def test_cancel_discards_buffer(self, state: AppState, fake_repository) -> None:
        state.enter_edit_mode()
        state.push_char("a")
        state.cancel_edit()
        assert state.input_mode == InputMode.NORMAL
        assert state.edit_buffer == ""
        assert fake_repository.saved == []

    def test_navigation_is_noop_while_editing(self, state: AppState, fake_provider) -> None:
        state.apply_snapshot(fake_provider.snapshot)
        state.enter_edit_mode()

        state.select_next()
        state.next_tab()
        state.cycle_sort_column()
        state.toggle_sort_direction()
        state.manual_refresh()

        assert state.view.selected == 0
        assert state.view.tab == Tab.WATCHLIST
        assert state.view.sort_column == SortColumn.MARKET_CAP
        assert state.view.ascending is False
        assert fake_provider.calls == []


class TestSubmitCommand:

    def test_success_persists_then_refreshes(self, state: AppState, fake_repository, fake_provider) -> None:
        type_command(state, "add cardano -w")

        assert state.input_mode == InputMode.NORMAL
        assert state.edit_buffer == ""
        assert state.config.find("cardano") is not None
        assert len(fake_repository.saved) == 1
        assert fake_repository.saved[0].find("cardano") is not None
        assert fake_provider.calls == [("bitcoin", "ethereum", "solana", "cardano")]
        assert state.last_update is not None

    def test_invalid_command_sets_error_only(self, state: AppState, fake_repository, fake_provider) -> None:
        before = state.config.copy()
        type_command(state, "add bitcoin -x")

        assert state.last_error == INVALID_FLAG
        assert state.config == before
        assert fake_repository.saved == []
        assert fake_provider.calls == []
        assert state.input_mode == InputMode.NORMAL

    def test_refresh_failure_after_command_sets_error(self, state: AppState, fake_provider, fake_repository) -> None:
        state.apply_snapshot(fake_provider.snapshot)
        fake_provider.error = PriceFetchError("down")
        type_command(state, "add cardano")

        assert state.last_error == "down"
        assert state.config.find("cardano") is not None
        assert len(fake_repository.saved) == 1
        assert fake_repository.saved[0].find("cardano") is not None
        assert len(state.snapshot) == 3
        assert state.input_mode == InputMode.NORMAL

    def test_persistence_error_propagates_without_rollback(self, state: AppState, fake_repository) -> None:
        fake_repository.fail = True
        state.enter_edit_mode()
        for char in "add cardano":
            state.push_char(char)

        with pytest.raises(PersistenceError):
            state.submit_command()

        assert state.config.find("cardano") is not None
        assert state.input_mode == InputMode.NORMAL

    def test_pipeline_names_follow_edits(self, sample_portfolio, fake_provider, fake_repository) -> None:
        pipeline = MagicMock()
        state = AppState(sample_portfolio, fake_provider, "k", fake_repository, pipeline=pipeline)

        type_command(state, "rm bitcoin")

        pipeline.update_token_names.assert_called_once_with(("ethereum", "solana"))


class TestNavigation:

    def test_select_wraps(self, state: AppState, fake_provider) -> None:
        state.apply_snapshot(fake_provider.snapshot)
        assert state.row_count() == 3

        state.select_previous()
        assert state.view.selected == 2
        state.select_next()
        assert state.view.selected == 0

    def test_select_on_empty_table(self, state: AppState) -> None:
        state.select_next()
        assert state.view.selected == 0
        state.select_previous()
        assert state.view.selected == 0

    def test_tab_cycle(self, state: AppState) -> None:
        tabs = []
        for _ in range(3):
            state.next_tab()
            tabs.append(state.view.tab)
        assert tabs == [Tab.PORTFOLIO, Tab.MARKET, Tab.WATCHLIST]

    def test_selection_clamped_on_tab_switch(self, state: AppState, fake_provider) -> None:
        state.apply_snapshot(fake_provider.snapshot)
        state.select_previous()  # watchlist row 2
        state.next_tab()  # portfolio has two rows
        assert state.view.selected == 1
        state.next_tab()  # market has none
        assert state.view.selected == 0

    def test_selection_clamped_on_new_snapshot(self, state: AppState, fake_provider, btc) -> None:
        state.apply_snapshot(fake_provider.snapshot)
        state.select_previous()
        state.apply_snapshot(MarketSnapshot(listings={btc.id: btc}))
        assert state.view.selected == 0

    def test_selection_clamped_when_refresh_empties_table(self, state: AppState, fake_provider) -> None:
        state.apply_snapshot(fake_provider.snapshot)
        state.select_previous()  # watchlist row 2
        assert state.view.selected == 2

        state.apply_snapshot(MarketSnapshot.empty())

        assert state.view.tab == Tab.WATCHLIST
        assert state.row_count() == 0
        assert state.view.selected == 0
        state.select_next()
        assert state.view.selected == 0
        state.select_previous()
        assert state.view.selected == 0

    def test_sort_cycle_watchlist(self, state: AppState) -> None:
        state.cycle_sort_column()
        assert state.view.sort_column == SortColumn.SYMBOL
        state.cycle_sort_column()
        assert state.view.sort_column == SortColumn.PRICE

    def test_sort_cycle_portfolio_wraps(self, state: AppState) -> None:
        state.next_tab()
        seen = []
        for _ in range(9):
            state.cycle_sort_column()
            seen.append(state.view.sort_column)
        assert seen[-1] == SortColumn.CURRENT_VALUE
        assert len(set(seen)) == 9

    def test_sort_cycle_market_is_noop(self, state: AppState) -> None:
        state.next_tab()
        state.next_tab()
        state.cycle_sort_column()
        assert state.view.sort_column is None

    def test_direction_is_shared(self, state: AppState) -> None:
        state.toggle_sort_direction()
        state.next_tab()
        assert state.view.ascending is True

    def test_rows_follow_sort(self, state: AppState, fake_provider) -> None:
        state.apply_snapshot(fake_provider.snapshot)
        assert [r.symbol for r in state.watchlist_rows()] == ["BTC", "ETH", "SOL"]
        state.toggle_sort_direction()
        assert [r.symbol for r in state.watchlist_rows()] == ["SOL", "ETH", "BTC"]


class TestRefresh:

    def test_manual_refresh_success(self, state: AppState, fake_provider) -> None:
        state.manual_refresh()
        assert state.snapshot is fake_provider.snapshot
        assert isinstance(state.last_update, datetime)

    def test_manual_refresh_failure_keeps_snapshot(self, state: AppState, fake_provider) -> None:
        state.manual_refresh()
        previous = state.snapshot
        stamp = state.last_update

        fake_provider.error = PriceFetchError("API Error: invalid key")
        state.manual_refresh()

        assert state.snapshot is previous
        assert state.last_update == stamp
        assert state.last_error == "API Error: invalid key"

    def test_successful_snapshot_clears_error(self, state: AppState, fake_provider) -> None:
        state.apply_fetch_error(PriceFetchError("down"))
        state.apply_snapshot(fake_provider.snapshot)
        assert state.last_error is None
