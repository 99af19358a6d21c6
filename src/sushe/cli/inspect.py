"""CLI inspect command for sushe."""

import json
import logging
from pathlib import Path
from typing import Any

import click

from sushe.cli.exit_codes import ExitCode
from sushe.cli.output import error_exit
from sushe.config.models import SusheConfig
from sushe.core.codecs import is_h264_compatible
from sushe.core.formatting import format_file_size, resolution_label
from sushe.executor.exceptions import ProbeError
from sushe.executor.partition import calculate_num_parts, needs_split
from sushe.introspector import FFprobeInspector
from sushe.tools.detection import ToolNotFoundError, require_tool

logger = logging.getLogger(__name__)


def build_report(
    path: Path, inspector: FFprobeInspector, config: SusheConfig
) -> dict[str, Any]:
    """Collect what the pipeline would decide about a local file.

    Raises:
        ProbeError: If the file cannot be inspected.
    """
    info = inspector.get_media_info(path)
    codec = inspector.get_video_codec(path)
    file_size = path.stat().st_size
    split = needs_split(file_size, config.pipeline.max_upload_size)
    return {
        "file": str(path),
        "file_size": file_size,
        "duration": info.duration,
        "bit_rate": info.bit_rate,
        "width": info.width,
        "height": info.height,
        "codec": codec,
        "h264_compatible": is_h264_compatible(codec),
        "needs_split": split,
        "num_parts": (
            calculate_num_parts(file_size, config.pipeline.part_size) if split else 1
        ),
    }


def format_human(report: dict[str, Any]) -> str:
    """Render an inspection report for the terminal."""
    compat = "yes" if report["h264_compatible"] else "no (will be re-encoded)"
    split = (
        f"yes, into {report['num_parts']} parts" if report["needs_split"] else "no"
    )
    lines = [
        f"File:       {report['file']}",
        f"Size:       {format_file_size(report['file_size'])}",
        f"Duration:   {report['duration']:.1f}s",
        f"Bitrate:    {report['bit_rate'] // 1000} kb/s",
        f"Resolution: {report['width']}x{report['height']} "
        f"({resolution_label(report['width'], report['height'])})",
        f"Codec:      {report['codec'] or 'unknown'}",
        f"H.264:      {compat}",
        f"Split:      {split}",
    ]
    return "\n".join(lines)


@click.command("inspect")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.pass_context
def inspect_command(ctx: click.Context, file: Path, output_format: str) -> None:
    """Inspect a media file and show how it would be processed.

    FILE is the path to the media file to inspect.
    """
    config: SusheConfig = ctx.obj["config"]

    if not file.is_file():
        error_exit(ctx, f"File not found: {file}", ExitCode.TARGET_NOT_FOUND)

    try:
        ffprobe = require_tool("ffprobe", config.tools)
    except ToolNotFoundError as e:
        error_exit(ctx, str(e), ExitCode.TOOL_NOT_AVAILABLE)

    inspector = FFprobeInspector(ffprobe, timeout=config.pipeline.probe_timeout)
    try:
        report = build_report(file, inspector, config)
    except ProbeError as e:
        error_exit(ctx, str(e), ExitCode.PROBE_FAILED)

    if output_format == "json":
        click.echo(json.dumps(report, indent=2))
    else:
        click.echo(format_human(report))
