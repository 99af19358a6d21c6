"""Terminal output helpers shared by CLI commands."""

import click

from sushe.core.phase_formatting import format_status
from sushe.domain import Progress


class StatusPrinter:
    """Progress sink that prints status text to stderr.

    Consecutive identical messages are printed once.
    """

    def __init__(self, enabled: bool = True) -> None:
        """Initialize the printer.

        Args:
            enabled: If False, suppresses output (for JSON mode or tests).
        """
        self.enabled = enabled
        self._last_text: str | None = None

    def __call__(self, progress: Progress) -> None:
        if not self.enabled:
            return
        text = format_status(progress)
        if text == self._last_text:
            return
        self._last_text = text
        click.echo(text.replace("\n", " | "), err=True)


def error_exit(ctx: click.Context, message: str, code: int) -> None:
    """Print an error message to stderr and exit with ``code``."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(code)
