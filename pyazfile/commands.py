"""Shell commands and their pre-execute / execute / post-execute lifecycle."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import (
    InvalidArgumentError,
    NotInShareError,
    PyAzFileError,
    RemoteOperationError,
)
from .listing import PagedLister
from .namespace import RemoteNamespace
from .output import OutputFormatter
from .sync.engine import TreeSync
from .sync.scanner import LocalFileSystem
from .utils import CURRENT_DIRECTORY, PARENT_DIRECTORY, format_size

logger = logging.getLogger(__name__)

# Prefixes used by `dir` output
DIRECTORY_MARKER = "<d> "
ENTRY_INDENT = "    "


@dataclass
class CommandResult:
    """Outcome of one lifecycle phase."""

    ok: bool
    error: Optional[PyAzFileError] = None

    @classmethod
    def success(cls) -> "CommandResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: PyAzFileError) -> "CommandResult":
        return cls(ok=False, error=error)


@dataclass
class CommandContext:
    """Shared session state handed to every command phase."""

    namespace: RemoteNamespace
    lister: PagedLister
    sync: TreeSync
    output: OutputFormatter
    local_fs: LocalFileSystem = field(default_factory=LocalFileSystem)


class Command:
    """Base class for shell commands.

    Subclasses override :meth:`validate` and :meth:`run`, raising pyazfile
    errors; the lifecycle methods turn those into :class:`CommandResult`
    values for the shell to inspect. Anything else propagates.
    """

    min_arguments = 0
    requires_share = False

    def __init__(self, verb: str, arguments: list[str]):
        self.verb = verb
        self.arguments = arguments

    def pre_execute(self, ctx: CommandContext) -> CommandResult:
        """Check arguments and namespace preconditions. Never touches the remote."""
        try:
            if len(self.arguments) < self.min_arguments:
                raise InvalidArgumentError("Missing arguments")
            if self.requires_share and not ctx.namespace.in_share:
                raise NotInShareError("Not in a share root directory")
            self.validate(ctx)
        except PyAzFileError as e:
            return CommandResult.failure(e)
        return CommandResult.success()

    def execute(self, ctx: CommandContext) -> CommandResult:
        try:
            self.run(ctx)
        except PyAzFileError as e:
            return CommandResult.failure(e)
        return CommandResult.success()

    def post_execute(self, ctx: CommandContext) -> CommandResult:
        """Cleanup hook; nothing to do for any current command."""
        return CommandResult.success()

    def validate(self, ctx: CommandContext) -> None:
        pass

    def run(self, ctx: CommandContext) -> None:
        pass


class DefaultCommand(Command):
    """Unrecognised input: no validation, no action."""


class DirCommand(Command):
    """List shares at the client root, or the current directory's contents."""

    def run(self, ctx: CommandContext) -> None:
        if not ctx.namespace.in_share:
            for share in ctx.lister.list_shares():
                ctx.output.print(f"{ENTRY_INDENT}{share.name}")
            return

        for entry in ctx.lister.list_children(ctx.namespace.require_share()):
            if entry.is_directory:
                ctx.output.print(f"{DIRECTORY_MARKER}{entry.name}")
            else:
                ctx.output.print(f"{ENTRY_INDENT}{entry.name}")


class CdCommand(Command):
    """Enter a share or move between directories."""

    min_arguments = 1

    def validate(self, ctx: CommandContext) -> None:
        # "." and ".." have no meaning at the client root
        if not ctx.namespace.in_share and self.arguments[0] in (
            CURRENT_DIRECTORY,
            PARENT_DIRECTORY,
        ):
            raise InvalidArgumentError("Invalid share name")

    def run(self, ctx: CommandContext) -> None:
        ctx.namespace.change_directory(self.arguments[0])


class UploadCommand(Command):
    """Upload a local file or directory tree into the current directory."""

    min_arguments = 1
    requires_share = True

    def run(self, ctx: CommandContext) -> None:
        local_path = Path(self.arguments[0])
        remote_name = self.arguments[1] if len(self.arguments) > 1 else None
        destination = ctx.namespace.require_share()

        if not ctx.local_fs.is_directory(local_path):
            ctx.sync.upload_single_file(local_path, destination, remote_name)
            ctx.output.info(f"Uploaded {local_path}")
            return

        stats = ctx.sync.upload_tree(local_path, destination)

        summary_items = [
            ("Uploaded", f"{stats['uploads']} file(s), {format_size(stats['bytes'])}"),
            ("Created directories", str(stats["directories"])),
        ]
        if stats["skipped_directories"] > 0:
            summary_items.append(("Skipped", f"{stats['skipped_directories']} dir(s)"))
        if stats["errors"] > 0:
            summary_items.append(("Failed", f"{stats['errors']} file(s)"))
        ctx.output.print_summary("Upload Complete", summary_items)

        if stats["errors"] > 0 or stats["skipped_directories"] > 0:
            raise RemoteOperationError(
                f"Upload of {local_path} incomplete: {stats['errors']} file(s) "
                f"failed, {stats['skipped_directories']} directory(ies) skipped"
            )


class DeleteCommand(Command):
    """Delete a file, or a directory with everything below it."""

    min_arguments = 1
    requires_share = True

    def validate(self, ctx: CommandContext) -> None:
        if self.arguments[0] in (CURRENT_DIRECTORY, PARENT_DIRECTORY):
            raise InvalidArgumentError("Invalid name")

    def run(self, ctx: CommandContext) -> None:
        name = self.arguments[0]
        stats = ctx.sync.delete(ctx.namespace.require_share(), name)

        if stats["directories"] > 0 or stats["errors"] > 0:
            summary_items = [
                ("Deleted files", str(stats["files"])),
                ("Deleted directories", str(stats["directories"])),
            ]
            if stats["errors"] > 0:
                summary_items.append(("Failed", str(stats["errors"])))
            ctx.output.print_summary("Delete Complete", summary_items)

        if stats["errors"] > 0 or stats["skipped_directories"] > 0:
            raise RemoteOperationError(
                f"Delete of {name} incomplete: {stats['errors']} item(s) failed"
            )


COMMANDS: dict[str, type[Command]] = {
    "dir": DirCommand,
    "cd": CdCommand,
    "upload": UploadCommand,
    "delete": DeleteCommand,
}


def parse_command_line(line: str) -> tuple[str, list[str]]:
    """Split a line into verb and positional arguments.

    Tokens are separated by whitespace; there is no quoting or escaping.

    Examples:
        >>> parse_command_line("upload  C:\\\\data  backup")
        ('upload', ['C:\\\\data', 'backup'])
        >>> parse_command_line("")
        ('', [])
    """
    tokens = line.split()
    if not tokens:
        return "", []
    return tokens[0], tokens[1:]


def create_command(line: str) -> Command:
    """Build the command for one input line."""
    verb, arguments = parse_command_line(line)
    command_class = COMMANDS.get(verb, DefaultCommand)
    logger.debug("Parsed %r as %s%r", line, command_class.__name__, arguments)
    return command_class(verb, arguments)
