"""Console output formatting for pyazfile."""

from typing import Optional

from rich.console import Console


class OutputFormatter:
    """Writes user-facing text to the terminal.

    Plain data (share, directory and file names) is printed with markup and
    highlighting disabled so names containing brackets are shown verbatim.
    """

    def __init__(self, quiet: bool = False, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            quiet: Suppress informational and success messages
            console: Console to write to (default: a new stdout console)
        """
        self.quiet = quiet
        self.console = console or Console(soft_wrap=True)

    def print(self, message: str = "") -> None:
        """Print a line of plain text (never suppressed)."""
        self.console.print(message, markup=False, highlight=False)

    def info(self, message: str) -> None:
        if not self.quiet:
            self.console.print(message, markup=False, highlight=False)

    def success(self, message: str) -> None:
        if not self.quiet:
            self.console.print(message, style="green", markup=False, highlight=False)

    def warning(self, message: str) -> None:
        self.console.print(message, style="yellow", markup=False, highlight=False)

    def error(self, message: str) -> None:
        self.console.print(message, style="bold red", markup=False, highlight=False)

    def print_summary(self, title: str, items: list[tuple[str, str]]) -> None:
        """Print a titled block of label/value pairs.

        Args:
            title: Summary heading
            items: (label, value) pairs, printed in order
        """
        if self.quiet:
            return

        self.console.print(title, style="bold", markup=False, highlight=False)
        width = max((len(label) for label, _ in items), default=0)
        for label, value in items:
            self.console.print(
                f"  {label.ljust(width)}  {value}", markup=False, highlight=False
            )
