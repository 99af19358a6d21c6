"""CLI fetch command: download, convert and deliver videos by URL."""

import logging
import threading
from pathlib import Path

import click

from sushe.cli.exit_codes import ExitCode, exit_code_for
from sushe.cli.output import StatusPrinter, error_exit
from sushe.config.models import SusheConfig
from sushe.core.formatting import format_file_size
from sushe.core.phase_formatting import format_failure
from sushe.core.urls import extract_urls
from sushe.executor.exceptions import SusheError
from sushe.jobs.pipeline import Pipeline
from sushe.jobs.transfer import DirectoryUploader, Uploader, deliver
from sushe.tools.detection import ToolNotFoundError

logger = logging.getLogger(__name__)


def _process_url(
    pipeline: Pipeline,
    uploader: Uploader,
    url: str,
    status: StatusPrinter,
    cancel_event: threading.Event,
) -> ExitCode:
    """Run one URL through the pipeline and deliver its output."""
    try:
        result = pipeline.process(url, sink=status, cancel_event=cancel_event)
    except SusheError as e:
        logger.error("Job for %s failed: %s", url, e)
        click.echo(format_failure(e), err=True)
        return exit_code_for(e)

    try:
        if result.is_split:
            click.echo(
                f"Video is {format_file_size(result.file_size)} - "
                f"split into {len(result.parts)} parts",
                err=True,
            )
        delivered = deliver(result, uploader, pipeline.wrap_sink(status))
    except SusheError as e:
        logger.error("Delivery for %s failed: %s", url, e)
        click.echo(format_failure(e), err=True)
        return exit_code_for(e)
    finally:
        result.cleanup()

    for destination in delivered:
        click.echo(destination)
    return ExitCode.SUCCESS


@click.command("fetch")
@click.argument("text", nargs=-1, required=True)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory the finished files are delivered to.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Do not print progress status lines.",
)
@click.pass_context
def fetch_command(
    ctx: click.Context,
    text: tuple[str, ...],
    output_dir: Path,
    quiet: bool,
) -> None:
    """Download videos found in TEXT and deliver them to a directory.

    TEXT may be one or more URLs or any message containing them. Each
    video is converted to H.264 if needed and split into parts when it is
    larger than the upload limit. Delivered file paths are printed to
    stdout, one per line.
    """
    config: SusheConfig = ctx.obj["config"]

    urls = extract_urls(" ".join(text))
    if not urls:
        error_exit(ctx, "no http(s) URL found in input", ExitCode.NO_URLS_FOUND)

    try:
        pipeline = Pipeline.from_config(config)
    except ToolNotFoundError as e:
        error_exit(ctx, str(e), ExitCode.TOOL_NOT_AVAILABLE)

    uploader = DirectoryUploader(output_dir)
    status = StatusPrinter(enabled=not quiet)
    cancel_event = threading.Event()

    exit_code = ExitCode.SUCCESS
    try:
        for url in urls:
            code = _process_url(pipeline, uploader, url, status, cancel_event)
            if code != ExitCode.SUCCESS:
                exit_code = code
    except KeyboardInterrupt:
        cancel_event.set()
        click.echo("Interrupted.", err=True)
        ctx.exit(ExitCode.INTERRUPTED)

    ctx.exit(exit_code)
