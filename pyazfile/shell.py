"""Interactive read-eval-print loop over the remote namespace."""

import logging
from enum import Enum
from typing import Optional

import click

from .api import StorageClient
from .commands import CommandContext, CommandResult, create_command
from .listing import PagedLister
from .namespace import RemoteNamespace
from .output import OutputFormatter
from .sync.engine import TreeSync
from .sync.scanner import LocalFileSystem

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"
PROMPT_URI_PREFIX = ">>"
INPUT_MARKER = ">"


class ShellState(Enum):
    """Phase of the shell while handling one line."""

    AWAITING_INPUT = "awaiting_input"
    VALIDATING = "validating"
    EXECUTING = "executing"
    REPORTING = "reporting"
    TERMINATED = "terminated"


class FileShell:
    """Runs one command per input line until `exit` or end of input.

    Each line goes AWAITING_INPUT → VALIDATING → EXECUTING → REPORTING and
    back to AWAITING_INPUT. A failing command is reported and the loop
    carries on; only `exit` or end of input ends the session.
    """

    def __init__(
        self,
        client: StorageClient,
        output: Optional[OutputFormatter] = None,
        local_fs: Optional[LocalFileSystem] = None,
        max_workers: Optional[int] = None,
        page_size: Optional[int] = None,
    ):
        """Initialize the shell at the client root.

        Args:
            client: Storage client for the session
            output: Output formatter (default: OutputFormatter())
            local_fs: Local file system (default: LocalFileSystem())
            max_workers: Parallel workers per directory level
            page_size: Entries per listing page
        """
        self.output = output or OutputFormatter()
        local_fs = local_fs or LocalFileSystem()
        lister = PagedLister(client, page_size=page_size)
        self.context = CommandContext(
            namespace=RemoteNamespace(client),
            lister=lister,
            sync=TreeSync(
                client,
                local_fs=local_fs,
                output=self.output,
                lister=lister,
                max_workers=max_workers,
            ),
            output=self.output,
            local_fs=local_fs,
        )
        self.state = ShellState.AWAITING_INPUT

    @property
    def namespace(self) -> RemoteNamespace:
        return self.context.namespace

    def show_prompt(self) -> None:
        self.output.print()
        self.output.print(f"{PROMPT_URI_PREFIX}{self.namespace.uri}")

    def read_line(self) -> Optional[str]:
        """Read one line of input.

        Returns:
            The line, or None at end of input
        """
        try:
            return click.prompt(
                INPUT_MARKER, default="", show_default=False, prompt_suffix=""
            )
        except click.Abort:
            return None

    def run(self) -> None:
        """Prompt for and run commands until the session terminates."""
        while self.state is not ShellState.TERMINATED:
            self.show_prompt()
            line = self.read_line()
            if line is None:
                self.state = ShellState.TERMINATED
                break
            self.run_line(line)

    def run_line(self, line: str) -> bool:
        """Handle a single input line.

        Args:
            line: Raw input line

        Returns:
            False once the session has terminated, True otherwise
        """
        line = line.rstrip("\r\n")
        if line == EXIT_COMMAND:
            self.state = ShellState.TERMINATED
            return False

        self.state = ShellState.VALIDATING
        try:
            result = self._run_command(line)
            self.state = ShellState.REPORTING
            if not result.ok and result.error is not None:
                self.output.error(str(result.error))
        except Exception as e:
            logger.debug("Command %r raised", line, exc_info=True)
            self.state = ShellState.REPORTING
            self.output.error(str(e) or type(e).__name__)

        self.state = ShellState.AWAITING_INPUT
        return True

    def _run_command(self, line: str) -> CommandResult:
        command = create_command(line)

        result = command.pre_execute(self.context)
        if not result.ok:
            return result

        self.state = ShellState.EXECUTING
        result = command.execute(self.context)
        cleanup = command.post_execute(self.context)
        return result if not result.ok else cleanup
