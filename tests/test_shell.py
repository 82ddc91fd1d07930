"""Tests for the interactive shell loop."""

import io
from unittest.mock import Mock, patch

import click
import pytest
from rich.console import Console

from pyazfile.output import OutputFormatter
from pyazfile.shell import FileShell, ShellState

BASE_URI = "https://testaccount.file.core.windows.net"


@pytest.fixture
def buffer():
    """In-memory stream capturing console output."""
    return io.StringIO()


@pytest.fixture
def shell(storage, buffer):
    """Shell over an account with a 'photos' share holding one directory."""
    storage.add_share("photos")
    storage.add_directory("photos", "2023")
    storage.add_file("photos", "a.jpg")
    output = OutputFormatter(console=Console(file=buffer, soft_wrap=True))
    return FileShell(storage, output)


def feed(shell, lines):
    """Run the shell loop over a fixed list of input lines."""
    with patch.object(FileShell, "read_line", side_effect=list(lines) + [None]):
        shell.run()


class TestRunLine:
    """Tests for FileShell.run_line."""

    def test_initial_state(self, shell):
        assert shell.state is ShellState.AWAITING_INPUT
        assert shell.namespace.uri == BASE_URI

    def test_exit_terminates(self, shell):
        assert shell.run_line("exit") is False
        assert shell.state is ShellState.TERMINATED

    def test_exit_with_line_ending(self, shell):
        assert shell.run_line("exit\r\n") is False

    def test_exit_requires_exact_match(self, shell):
        assert shell.run_line(" exit") is True
        assert shell.state is ShellState.AWAITING_INPUT

    def test_command_returns_to_awaiting_input(self, shell):
        assert shell.run_line("cd photos") is True
        assert shell.state is ShellState.AWAITING_INPUT
        assert shell.namespace.uri == f"{BASE_URI}/photos"

    def test_state_during_execution(self, shell):
        seen = []

        def list_shares():
            seen.append(shell.state)
            return iter([])

        shell.context.lister = Mock()
        shell.context.lister.list_shares.side_effect = list_shares

        shell.run_line("dir")

        assert seen == [ShellState.EXECUTING]

    def test_failed_validation_skips_execution(self, shell, buffer):
        shell.context.sync = Mock()

        shell.run_line("upload x.txt")

        shell.context.sync.upload_single_file.assert_not_called()
        assert "Not in a share root directory" in buffer.getvalue()
        assert shell.state is ShellState.AWAITING_INPUT

    def test_error_is_printed_and_loop_continues(self, shell, buffer):
        assert shell.run_line("cd videos") is True
        assert "Invalid share name: videos" in buffer.getvalue()
        assert shell.state is ShellState.AWAITING_INPUT

    def test_unexpected_error_is_printed(self, shell, buffer):
        shell.context.lister = Mock()
        shell.context.lister.list_shares.side_effect = RuntimeError("socket closed")

        assert shell.run_line("dir") is True

        assert "socket closed" in buffer.getvalue()
        assert shell.state is ShellState.AWAITING_INPUT

    def test_blank_line_is_noop(self, shell, buffer):
        assert shell.run_line("") is True
        assert buffer.getvalue() == ""


class TestRun:
    """Tests for the full read-eval-print loop."""

    def test_session_transcript(self, shell, buffer):
        feed(shell, ["dir", "cd photos", "dir", "cd ..", "exit"])

        assert buffer.getvalue().splitlines() == [
            "",
            f">>{BASE_URI}",
            "    photos",
            "",
            f">>{BASE_URI}",
            "",
            f">>{BASE_URI}/photos",
            "<d> 2023",
            "    a.jpg",
            "",
            f">>{BASE_URI}/photos",
            "",
            f">>{BASE_URI}",
        ]
        assert shell.state is ShellState.TERMINATED

    def test_failed_cd_keeps_prompt(self, shell, buffer):
        feed(shell, ["cd videos", "exit"])

        lines = buffer.getvalue().splitlines()
        assert lines.count(f">>{BASE_URI}") == 2
        assert "Invalid share name: videos" in lines

    def test_end_of_input_terminates(self, shell):
        feed(shell, ["cd photos"])
        assert shell.state is ShellState.TERMINATED

    def test_read_line_end_of_input(self, shell):
        with patch("pyazfile.shell.click.prompt", side_effect=click.Abort):
            assert shell.read_line() is None
