"""CLI entry point for the pyazfile shell."""

import logging
from typing import Any

import click

from .api import AzureFileClient
from .exceptions import PyAzFileError
from .output import OutputFormatter
from .shell import FileShell

logger = logging.getLogger(__name__)


def print_usage(out: OutputFormatter, prog: str) -> None:
    out.print("Usage:")
    out.print(f"  {prog} [AccountName] [AccountKey]")
    out.print(f"  {prog} [SAS URL]")


@click.command()
@click.argument("credentials", nargs=-1)
@click.version_option(package_name="pyazfile")
@click.pass_context
def main(ctx: Any, credentials: tuple[str, ...]) -> None:
    """Interactive shell for Azure file shares.

    CREDENTIALS: either an account name and account key, or a single file
    service URL carrying a SAS token
    (https://<account>.file.core.windows.net/?sv=...).

    Commands at the prompt: dir, cd <name>, upload <localPath> [remoteName],
    delete <name>, exit.
    """
    logging.basicConfig(level=logging.WARNING)

    out = OutputFormatter()
    prog = ctx.info_name or "pyazfile"

    if not credentials:
        out.print("Not enough arguments")
        print_usage(out, prog)
        ctx.exit(1)

    try:
        client = AzureFileClient.from_args(credentials)
    except (PyAzFileError, ValueError) as e:
        out.error(str(e))
        print_usage(out, prog)
        ctx.exit(1)

    exit_code = 0
    try:
        FileShell(client, out).run()
    except KeyboardInterrupt:
        out.warning("\nSession cancelled by user")
        exit_code = 130  # Standard exit code for SIGINT
    except Exception:
        logger.debug("Shell terminated by unexpected error", exc_info=True)
        out.error("Exit unexpected")
        exit_code = 1
    finally:
        client.close()

    ctx.exit(exit_code)
