"""CLI module for sushe."""

import logging
from pathlib import Path

import click

from sushe.cli.exit_codes import ExitCode
from sushe.config import ConfigSource, TomlParseError, get_config
from sushe.logging import configure_logging

_logging_configured: bool = False

logger = logging.getLogger(__name__)


def _configure_logging(ctx: click.Context) -> None:
    """Configure logging once per process from the merged config."""
    global _logging_configured
    if _logging_configured:
        return
    configure_logging(ctx.obj["config"].logging)
    _logging_configured = True


@click.group()
@click.version_option(package_name="sushe")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file path (default: ~/.sushe/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """sushe - fetch videos and make them ready for messaging uploads."""
    ctx.ensure_object(dict)

    # Preserve a config passed in by tests
    if "config" not in ctx.obj:
        cli_source = ConfigSource(
            logging_level=log_level.lower() if log_level else None,
            logging_file=log_file,
            logging_format="json" if log_json else None,
        )
        try:
            ctx.obj["config"] = get_config(
                config_path, cli_source=cli_source, strict=config_path is not None
            )
        except (TomlParseError, ValueError) as e:
            click.echo(f"Error: invalid configuration: {e}", err=True)
            ctx.exit(ExitCode.CONFIG_ERROR)

    _configure_logging(ctx)
    logger.debug("sushe starting: command=%s", ctx.invoked_subcommand)


# Defer import to avoid circular dependency
def _register_commands():
    from sushe.cli.doctor import doctor_command
    from sushe.cli.fetch import fetch_command
    from sushe.cli.inspect import inspect_command
    from sushe.cli.split import split_command

    main.add_command(doctor_command)
    main.add_command(fetch_command)
    main.add_command(inspect_command)
    main.add_command(split_command)


_register_commands()
