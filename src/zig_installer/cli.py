"""Command-line entrypoint.

Usage:
    zig-installer --version 0.11.0
    ZIG_BIN_DIR=~/.local/bin zig-installer
"""
import asyncio
import logging
import sys

import click

from zig_installer.config import OPTIONS, resolve_config
from zig_installer.errors import InstallerError, log_error
from zig_installer.logging import configure_logging, get_logger
from zig_installer.pipeline import run_install

logger = get_logger(__name__)

_OPTIONS_BY_NAME = {option.name: option for option in OPTIONS}

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def config_option(name: str):
    """click option for a setting that falls back to its environment variable."""
    option = _OPTIONS_BY_NAME[name]
    return click.option(
        "--" + name.replace("_", "-"),
        name,
        default=None,
        help=f"{option.help}. [env: {option.env_var}; default: {option.default}]",
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@config_option("tar_dest")
@config_option("dest")
@config_option("bin_dir")
@config_option("lib_dir")
@config_option("index_url")
@config_option("version")
@click.option(
    "--log-level",
    envvar="ZIG_LOG_LEVEL",
    default="INFO",
    show_default=True,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging verbosity. [env: ZIG_LOG_LEVEL]",
)
@click.option("--json-logs", is_flag=True, help="Emit log events as JSON lines.")
def main(log_level: str, json_logs: bool, **flags) -> None:
    """Download, verify and install a Zig release."""
    configure_logging(level=log_level, json_output=json_logs)

    config = resolve_config(flags)
    logger.debug("Resolved configuration", **{k: str(v) for k, v in vars(config).items()})

    try:
        result = asyncio.run(run_install(config))
    except InstallerError as e:
        log_error(e, context={"version": config.version}, logger=logger, level=logging.DEBUG)
        click.secho(f"❌ error: {e}", fg="red", err=True)
        sys.exit(1)

    source = "downloaded" if result.downloaded else "cached"
    click.secho(
        f"✅ Zig {result.version} installed successfully ({result.platform}, {source} archive)",
        fg="green",
    )
    click.echo(f"   binary:    {result.binary}")
    click.echo(f"   libraries: {result.lib}")
