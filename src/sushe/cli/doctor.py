"""CLI doctor command: check external tool availability."""

import json

import click

from sushe.cli.exit_codes import ExitCode
from sushe.config.models import SusheConfig
from sushe.tools.detection import detect_tools


def _format_status(available: bool) -> str:
    """Format status for display."""
    return "✓" if available else "✗"


def _format_version(version: str | None) -> str:
    """Format version for display."""
    return version if version else "not found"


@click.command("doctor")
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output results as JSON",
)
@click.pass_context
def doctor_command(ctx: click.Context, json_output: bool) -> None:
    """Check that yt-dlp, ffmpeg and ffprobe are installed.

    Exit codes:
      0 - All tools available
      30 - At least one tool is missing
    """
    config: SusheConfig = ctx.obj["config"]
    tools = detect_tools(config.tools)

    if json_output:
        click.echo(
            json.dumps(
                {
                    t.name: {
                        "available": t.is_available(),
                        "path": str(t.path) if t.path else None,
                        "version": t.version,
                    }
                    for t in tools
                },
                indent=2,
            )
        )
    else:
        for t in tools:
            path_info = f" ({t.path})" if t.path else ""
            click.echo(
                f"  {_format_status(t.is_available())} {t.name}: "
                f"{_format_version(t.version)}{path_info}"
            )

    if not all(t.is_available() for t in tools):
        ctx.exit(ExitCode.TOOL_NOT_AVAILABLE)
