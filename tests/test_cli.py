"""Tests for CLI interface."""

from datetime import datetime
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from tidymac.cli import app
from tidymac.models import BigFile, CleanResult, DuplicateGroup, OldFile
from tidymac.sudo import ElevationError

runner = CliRunner()


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "tidymac version" in result.stdout

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "tidymac version" in result.stdout


class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "clean" in result.stdout
        assert "big-files" in result.stdout
        assert "duplicates" in result.stdout
        assert "old-files" in result.stdout

    def test_clean_help(self):
        result = runner.invoke(app, ["clean", "--help"])
        assert result.exit_code == 0
        assert "--target" in result.stdout
        assert "--all" in result.stdout


class TestMenu:
    @patch("tidymac.menu.start_menu")
    def test_no_command_starts_menu(self, mock_menu):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        mock_menu.assert_called_once()

    @patch("tidymac.menu.start_menu")
    def test_menu_command(self, mock_menu):
        result = runner.invoke(app, ["menu"])
        assert result.exit_code == 0
        mock_menu.assert_called_once()


class TestList:
    def test_list_command(self):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "Available Targets" in result.stdout
        assert "npm_cache" in result.stdout
        assert "Cache:" in result.stdout


class TestScan:
    @patch("tidymac.cli.Scanner")
    def test_scan_one_target(self, mock_scanner_cls):
        result = runner.invoke(app, ["scan", "-t", "npm_cache"])

        assert result.exit_code == 0
        targets = mock_scanner_cls.return_value.scan_targets.call_args[0][0]
        assert [t.id for t in targets if t.selected] == ["npm_cache"]

    @patch("tidymac.cli.Scanner")
    def test_scan_defaults_to_all(self, mock_scanner_cls):
        result = runner.invoke(app, ["scan"])

        assert result.exit_code == 0
        targets = mock_scanner_cls.return_value.scan_targets.call_args[0][0]
        assert all(t.selected for t in targets)

    def test_scan_unknown_target(self):
        result = runner.invoke(app, ["scan", "-t", "nonexistent"])
        assert result.exit_code == 1
        assert "Unknown target: nonexistent" in result.stdout


class TestClean:
    def test_clean_without_options(self):
        """Should require --target or --all."""
        result = runner.invoke(app, ["clean"])
        assert result.exit_code == 1
        assert "Specify --target or --all" in result.stdout

    def test_clean_unknown_target(self):
        result = runner.invoke(app, ["clean", "--target", "nonexistent"])
        assert result.exit_code == 1
        assert "Unknown target" in result.stdout

    @patch("tidymac.cli.confirm_action", return_value=False)
    @patch("tidymac.cli.Cleaner")
    @patch("tidymac.cli.Scanner")
    def test_clean_cancelled(self, mock_scanner_cls, mock_cleaner_cls, mock_confirm):
        result = runner.invoke(app, ["clean", "-t", "npm_cache"])

        assert result.exit_code == 0
        assert "Cancelled" in result.stdout
        mock_cleaner_cls.return_value.clean_targets.assert_not_called()

    @patch("tidymac.cli.Cleaner")
    @patch("tidymac.cli.Scanner")
    def test_clean_with_yes(self, mock_scanner_cls, mock_cleaner_cls):
        mock_cleaner_cls.return_value.clean_targets.return_value = (
            [CleanResult(target="NPM Cache", requested=2048, actual=2048)],
            2048,
        )

        result = runner.invoke(app, ["clean", "-t", "npm_cache", "-y"])

        assert result.exit_code == 0
        assert "NPM Cache" in result.stdout
        assert "Cleanup Complete!" in result.stdout
        targets = mock_cleaner_cls.return_value.clean_targets.call_args[0][0]
        assert [t.id for t in targets if t.selected] == ["npm_cache"]

    @patch("tidymac.cli.Cleaner")
    @patch("tidymac.cli.Scanner")
    def test_clean_elevation_denied(self, mock_scanner_cls, mock_cleaner_cls):
        mock_cleaner_cls.return_value.clean_targets.side_effect = ElevationError("sudo authentication failed")

        result = runner.invoke(app, ["clean", "--all", "-y"])

        assert result.exit_code == 1
        assert "Cleanup aborted" in result.stdout


class TestReports:
    @patch("tidymac.cli.Scanner")
    def test_big_files(self, mock_scanner_cls):
        mock_scanner_cls.return_value.scan_big_files.return_value = [
            BigFile(path="/Users/me/movie.mov", size=2 * 1024**3, mod_time=datetime(2024, 1, 1))
        ]

        result = runner.invoke(app, ["big-files", "--min-size-mb", "100"])

        assert result.exit_code == 0
        assert "movie.mov" in result.stdout
        assert mock_scanner_cls.return_value.scan_big_files.call_args[0][0] == 100 * 1024**2

    @patch("tidymac.cli.Scanner")
    def test_big_files_none(self, mock_scanner_cls):
        mock_scanner_cls.return_value.scan_big_files.return_value = []
        result = runner.invoke(app, ["big-files"])
        assert result.exit_code == 0
        assert "No large files found" in result.stdout

    @patch("tidymac.cli.Scanner")
    def test_duplicates(self, mock_scanner_cls):
        group = DuplicateGroup(hash="abc", size=2 * 1024**2, files=["/a/x.bin", "/b/x.bin"])
        mock_scanner_cls.return_value.scan_duplicates.return_value = ([group], group.reclaimable)

        result = runner.invoke(app, ["duplicates"])

        assert result.exit_code == 0
        assert "1 groups, 2.0 MB reclaimable" in result.stdout

    @patch("tidymac.cli.Scanner")
    def test_duplicates_none(self, mock_scanner_cls):
        mock_scanner_cls.return_value.scan_duplicates.return_value = ([], 0)
        result = runner.invoke(app, ["duplicates"])
        assert "No duplicate files found" in result.stdout

    @patch("tidymac.cli.Scanner")
    def test_old_files(self, mock_scanner_cls):
        mock_scanner_cls.return_value.scan_old_files.return_value = [
            OldFile(path="/Users/me/old.txt", size=100, last_access=datetime(2019, 6, 1))
        ]

        result = runner.invoke(app, ["old-files", "--days", "30"])

        assert result.exit_code == 0
        assert "old.txt" in result.stdout
        mock_scanner_cls.return_value.scan_old_files.assert_called_once()
        assert mock_scanner_cls.return_value.scan_old_files.call_args[0][0] == 30


class TestVerbose:
    @patch("tidymac.cli.logging.basicConfig")
    def test_verbose_count(self, mock_config):
        runner.invoke(app, ["-VV", "list"])
        assert mock_config.call_args.kwargs["level"] == 10

    @patch("tidymac.cli.logging.basicConfig")
    def test_default_warning(self, mock_config):
        runner.invoke(app, ["list"])
        assert mock_config.call_args.kwargs["level"] == 30


class TestReportSessions:
    @patch("tidymac.cli.SudoSession")
    @patch("tidymac.cli.Scanner")
    def test_big_files_closes_session(self, mock_scanner_cls, mock_session_cls):
        mock_scanner_cls.return_value.scan_big_files.return_value = []
        runner.invoke(app, ["big-files"])
        session = mock_session_cls.return_value
        mock_scanner_cls.assert_called_once_with(session.__enter__.return_value)
        session.__exit__.assert_called_once()

    @patch("tidymac.cli.SudoSession")
    @patch("tidymac.cli.Scanner")
    def test_duplicates_closes_session(self, mock_scanner_cls, mock_session_cls):
        mock_scanner_cls.return_value.scan_duplicates.return_value = ([], 0)
        runner.invoke(app, ["duplicates"])
        mock_session_cls.return_value.__exit__.assert_called_once()

    @patch("tidymac.cli.SudoSession")
    @patch("tidymac.cli.Scanner")
    def test_old_files_closes_session(self, mock_scanner_cls, mock_session_cls):
        mock_scanner_cls.return_value.scan_old_files.return_value = []
        runner.invoke(app, ["old-files"])
        mock_session_cls.return_value.__exit__.assert_called_once()
