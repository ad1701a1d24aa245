"""Tests for the interactive menu."""

from datetime import datetime
from io import StringIO
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from tidymac.config import BIG_FILE_PRESETS, DEFAULT_SETTINGS, OLD_FILE_PRESETS, Settings
from tidymac.display import ordered_targets
from tidymac.menu import MenuSession, MenuState, parse_selection
from tidymac.models import BigFile, CleanResult, DuplicateGroup, OldFile
from tidymac.sudo import ElevationError


def make_session(inputs):
    """A menu session fed scripted input, with scanning and cleaning mocked out."""
    console = MagicMock()
    console.input.side_effect = list(inputs)
    menu = MenuSession(console=console)
    menu.scanner = MagicMock()
    menu.cleaner = MagicMock()
    menu.session = MagicMock()
    return menu


class TestParseSelection:
    def test_single_number(self):
        assert parse_selection("3", 5) == [2]

    def test_comma_list(self):
        assert parse_selection("1,4", 5) == [0, 3]

    def test_range(self):
        assert parse_selection("2-5", 5) == [1, 2, 3, 4]

    def test_spaces_ignored(self):
        assert parse_selection(" 1 , 2 ", 5) == [0, 1]

    def test_out_of_range_dropped(self):
        assert parse_selection("0,6,3", 5) == [2]
        assert parse_selection("4-9", 5) == [3, 4]

    def test_malformed_dropped(self):
        assert parse_selection("x,2,a-b,", 5) == [1]

    def test_empty(self):
        assert parse_selection("", 5) == []


class TestMainMenu:
    def test_exit(self):
        menu = make_session(["0"])
        menu.run()
        menu.session.close.assert_called_once()

    def test_invalid_choices_reprompt(self):
        menu = make_session(["", "x", "9", "0"])
        menu.run()
        assert menu.console.input.call_count == 4

    def test_keyboard_interrupt_exits(self):
        menu = make_session([])
        menu.console.input.side_effect = KeyboardInterrupt
        menu.run()
        menu.session.close.assert_called_once()

    @pytest.mark.parametrize(
        "choice,state",
        [
            ("1", MenuState.CLEANUP),
            ("2", MenuState.BIG_FILES),
            ("3", MenuState.DUPLICATES),
            ("4", MenuState.OLD_FILES),
        ],
    )
    def test_choice_changes_state(self, choice, state):
        menu = make_session([choice])
        assert menu._main_menu() is True
        assert menu.state == state


class TestCleanupFlow:
    def test_toggle_scan_and_clean(self):
        menu = make_session(["1", "1", "s", "c", "y", "", "0"])
        first = ordered_targets(menu.targets)[0]
        menu.cleaner.clean_targets.return_value = ([CleanResult(target=first.name, actual=10)], 10)

        menu.run()

        assert first.selected
        menu.scanner.scan_targets.assert_called_once()
        menu.cleaner.clean_targets.assert_called_once()
        assert menu.state == MenuState.MAIN

    def test_scan_requires_selection(self):
        menu = make_session(["1", "s", "b", "0"])
        menu.run()
        menu.scanner.scan_targets.assert_not_called()

    def test_select_all_and_none(self):
        menu = make_session(["a"])
        menu.state = MenuState.CLEANUP
        menu._cleanup_menu()
        assert all(t.selected for t in menu.targets)

        menu.console.input.side_effect = ["n"]
        menu._cleanup_menu()
        assert not any(t.selected for t in menu.targets)

    def test_declined_confirmation_cleans_nothing(self):
        menu = make_session(["c", "n"])
        menu.state = MenuState.SCAN_RESULTS
        menu.targets[0].selected = True
        menu._scan_results_menu()
        menu.cleaner.clean_targets.assert_not_called()

    def test_elevation_failure_keeps_results_screen(self):
        menu = make_session(["c", "y", ""])
        menu.state = MenuState.SCAN_RESULTS
        menu.targets[0].selected = True
        menu.cleaner.clean_targets.side_effect = ElevationError("sudo authentication failed")

        menu._scan_results_menu()

        assert menu.state == MenuState.SCAN_RESULTS
        printed = " ".join(str(c.args[0]) for c in menu.console.print.call_args_list if c.args)
        assert "Cleanup aborted" in printed


class TestFileMenus:
    def test_big_files_select_and_delete(self):
        menu = make_session(["1", "1", "d", "y", ""])
        big = BigFile(path="/Users/me/movie.mov", size=BIG_FILE_PRESETS[0], mod_time=datetime.now())
        menu.scanner.scan_big_files.return_value = [big]
        menu.cleaner.delete_big_files.return_value = big.size

        menu._big_files_menu()

        menu.scanner.scan_big_files.assert_called_once()
        assert menu.scanner.scan_big_files.call_args[0][0] == BIG_FILE_PRESETS[0]
        args = menu.cleaner.delete_big_files.call_args[0]
        assert args[1] == {"/Users/me/movie.mov"}
        assert menu.state == MenuState.MAIN

    def test_big_files_none_found(self):
        menu = make_session(["2", ""])
        menu.scanner.scan_big_files.return_value = []
        menu._big_files_menu()
        menu.cleaner.delete_big_files.assert_not_called()
        assert menu.state == MenuState.MAIN

    def test_duplicates_select_all(self):
        menu = make_session(["1", "a", "d", "y", ""])
        group = DuplicateGroup(hash="abc", size=2 * 1024**2, files=["/a", "/b"])
        menu.scanner.scan_duplicates.return_value = ([group], group.reclaimable)
        menu.cleaner.delete_duplicates.return_value = group.reclaimable

        menu._duplicates_menu()

        args = menu.cleaner.delete_duplicates.call_args[0]
        assert args[1] == {group.key}

    def test_delete_with_nothing_selected(self):
        menu = make_session(["1", "d", "b"])
        group = DuplicateGroup(hash="abc", size=2 * 1024**2, files=["/a", "/b"])
        menu.scanner.scan_duplicates.return_value = ([group], group.reclaimable)

        menu._duplicates_menu()

        menu.cleaner.delete_duplicates.assert_not_called()

    def test_toggle_twice_deselects(self):
        menu = make_session(["4", "1", "1", "b"])
        old = OldFile(path="/Users/me/old.txt", size=10, last_access=datetime(2020, 1, 1))
        menu.scanner.scan_old_files.return_value = [old]

        menu._old_files_menu()

        assert menu.scanner.scan_old_files.call_args[0][0] == OLD_FILE_PRESETS[3]
        assert menu.selected == set()
        menu.cleaner.delete_old_files.assert_not_called()

    def test_old_files_back(self):
        menu = make_session(["0"])
        menu._old_files_menu()
        menu.scanner.scan_old_files.assert_not_called()
        assert menu.state == MenuState.MAIN


class TestMenuSession:
    def test_default_settings(self):
        menu = MenuSession(console=MagicMock())
        assert menu.settings is DEFAULT_SETTINGS
        assert menu.scanner.settings is DEFAULT_SETTINGS

    def test_custom_settings_reach_scanner_and_cleaner(self):
        settings = Settings(settle_delay=0)
        menu = MenuSession(console=MagicMock(), settings=settings)
        assert menu.scanner.settings is settings
        assert menu.cleaner.settings is settings

    def test_sessions_do_not_share_targets(self):
        first = MenuSession(console=MagicMock())
        second = MenuSession(console=MagicMock())
        first.targets[0].selected = True
        assert not second.targets[0].selected

    def test_tables_drawn_on_menu_console(self):
        buffer = StringIO()
        console = Console(file=buffer, width=200, color_system=None)
        console.input = MagicMock(side_effect=["1", "b", "0"])
        menu = MenuSession(console=console)
        menu.session = MagicMock()

        menu.run()

        text = buffer.getvalue()
        assert "Main Menu" in text
        assert "Cleanup Targets" in text
        assert "User Caches" in text
