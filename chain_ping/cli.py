"""CLI entry point for the chain-ping tool."""

import logging
import sys

import click

from chain_ping.config import OUTPUT_FORMATS, ConfigError, load_config
from chain_ping.driver import UsageError, run
from chain_ping.output import render

logger = logging.getLogger(__name__)


@click.command()
@click.argument("endpoints", nargs=-1)
@click.option(
    "--pings",
    "-p",
    default=None,
    type=click.IntRange(min=0),
    help="Number of pings per endpoint (default: 1).",
)
@click.option(
    "--timeout",
    "-t",
    "timeout_secs",
    default=None,
    type=click.FloatRange(min=0, min_open=True),
    help="Per-ping timeout in seconds (default: 10).",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    default=None,
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    help="Output format (default: table).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=False),
    help="Path to YAML config file (default: ~/.chain-ping/config.yaml).",
)
@click.version_option(package_name="chain-ping", prog_name="chain-ping")
def main(
    endpoints: tuple[str, ...],
    pings: int | None,
    timeout_secs: float | None,
    output_format: str | None,
    config_path: str | None,
) -> None:
    """Measure latency and reachability of Ethereum JSON-RPC ENDPOINTS."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        cfg = load_config(config_path)
    except (ConfigError, FileNotFoundError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    logger.debug("Config loaded: %s", cfg)

    targets = list(endpoints) or cfg.endpoints
    count = cfg.pings if pings is None else pings
    timeout = cfg.timeout_secs if timeout_secs is None else timeout_secs
    fmt = (output_format or cfg.output_format).lower()

    try:
        summaries = run(targets, count, timeout)
    except UsageError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    render(summaries, fmt)
