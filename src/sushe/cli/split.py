"""CLI split command: partition a local file into upload-sized parts."""

import logging
from pathlib import Path

import click

from sushe.cli.exit_codes import ExitCode, exit_code_for
from sushe.cli.output import StatusPrinter, error_exit
from sushe.config.models import SusheConfig
from sushe.core.formatting import format_file_size
from sushe.core.phase_formatting import format_failure
from sushe.executor.exceptions import SusheError
from sushe.executor.partition import Partitioner
from sushe.introspector import FFprobeInspector
from sushe.jobs.progress import RateLimitedSink
from sushe.tools.detection import ToolNotFoundError, require_tool

logger = logging.getLogger(__name__)


@click.command("split")
@click.argument("file", type=click.Path(path_type=Path))
@click.option(
    "--part-size",
    type=click.IntRange(min=1),
    default=None,
    help="Target bytes per part (default: configured target part size).",
)
@click.pass_context
def split_command(ctx: click.Context, file: Path, part_size: int | None) -> None:
    """Split FILE into parts no larger than the upload limit.

    Parts are written beside FILE as <stem>_partNNN.mp4 and listed on
    stdout with their sizes.
    """
    config: SusheConfig = ctx.obj["config"]

    if not file.is_file():
        error_exit(ctx, f"File not found: {file}", ExitCode.TARGET_NOT_FOUND)

    try:
        ffmpeg = require_tool("ffmpeg", config.tools)
        ffprobe = require_tool("ffprobe", config.tools)
    except ToolNotFoundError as e:
        error_exit(ctx, str(e), ExitCode.TOOL_NOT_AVAILABLE)

    partitioner = Partitioner(
        part_size or config.pipeline.part_size,
        ffmpeg,
        inspector=FFprobeInspector(ffprobe, timeout=config.pipeline.probe_timeout),
        timeout=config.pipeline.job_timeout,
    )
    sink = RateLimitedSink(
        StatusPrinter(),
        min_interval=config.pipeline.progress_interval,
        min_delta=config.pipeline.progress_min_delta,
    )

    try:
        parts = partitioner.split(file, sink=sink)
    except SusheError as e:
        click.echo(format_failure(e), err=True)
        ctx.exit(exit_code_for(e))

    for part in parts:
        click.echo(f"{part.path}\t{format_file_size(part.file_size)}")
