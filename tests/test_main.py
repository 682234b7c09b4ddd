"""Tests for CLI argument handling in main.py."""
import socket
from unittest.mock import patch

from click.testing import CliRunner

from cloudclip.config import StoreConfig
from cloudclip.main import main


class TestCLIArguments:
    """Tests for command-line argument validation."""

    def test_no_mode_specified_exits_with_code_2(self):
        """Test that missing --daemon or --view gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--socket", "/tmp/test.sock"])
        assert result.exit_code == 2
        assert "must be specified" in result.output

    def test_both_modes_specified_exits_with_code_2(self):
        """Test that both --daemon and --view gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--daemon", "--view", "--socket", "/tmp/test.sock"])
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_missing_socket_exits_with_code_2(self):
        """Test that missing --socket gives usage error."""
        runner = CliRunner()
        result = runner.invoke(main, ["--daemon"])
        assert result.exit_code == 2
        assert "socket" in result.output.lower()

    def test_select_requires_view(self):
        """Test that --select is rejected in daemon mode."""
        runner = CliRunner()
        result = runner.invoke(main, ["--daemon", "--socket", "/tmp/test.sock", "--select", "0"])
        assert result.exit_code == 2
        assert "--select" in result.output

    def test_help_exits_with_code_0(self):
        """Test that --help exits cleanly with code 0."""
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "daemon" in result.output.lower()
        assert "view" in result.output.lower()


class TestDispatch:
    """Tests for dispatching to daemon and viewer modes."""

    def test_daemon_reads_credentials_from_environment(self):
        """Test credentials are taken from SUPABASE_URL and SUPABASE_ANON_KEY."""
        runner = CliRunner()
        env = {"SUPABASE_URL": "https://example.supabase.co", "SUPABASE_ANON_KEY": "anon"}
        with patch("cloudclip.main._run_daemon_with_cleanup") as mock_run:
            result = runner.invoke(main, ["--daemon", "--socket", "/tmp/test.sock"], env=env)
        assert result.exit_code == 0
        mock_run.assert_called_once_with(
            "/tmp/test.sock",
            StoreConfig(url="https://example.supabase.co", key="anon", table="clipboard"),
            1.0,
        )

    def test_daemon_without_credentials_runs_degraded(self):
        """Test missing credentials still start the daemon, with no store config."""
        runner = CliRunner()
        env = {"SUPABASE_URL": "", "SUPABASE_ANON_KEY": ""}
        with patch("cloudclip.main._run_daemon_with_cleanup") as mock_run:
            result = runner.invoke(main, ["--daemon", "--socket", "/tmp/test.sock"], env=env)
        assert result.exit_code == 0
        mock_run.assert_called_once_with("/tmp/test.sock", None, 1.0)

    def test_view_unreachable_daemon_exits_with_code_1(self):
        """Test a connection error in select mode is reported on stderr."""
        runner = CliRunner()
        with patch("cloudclip.viewer.fetch_history_once", side_effect=ConnectionError("refused")):
            result = runner.invoke(main, ["--view", "--socket", "/tmp/test.sock", "--select", "0"])
        assert result.exit_code == 1
        assert "Error: refused" in result.output

    def test_daemon_refuses_socket_of_running_daemon(self, tmp_path):
        """Test a second daemon exits with code 1 and leaves the live socket in place."""
        socket_path = tmp_path / "live.sock"
        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        listener.bind(str(socket_path))
        listener.listen(1)
        runner = CliRunner()
        try:
            with patch("cloudclip.daemon.run_daemon") as mock_run:
                result = runner.invoke(main, ["--daemon", "--socket", str(socket_path)])
            assert result.exit_code == 1
            assert "already in use" in result.output
            mock_run.assert_not_called()
            assert socket_path.exists()
        finally:
            listener.close()
