#!/usr/bin/env python3
"""
Main CLI Entry Point for Bank Alert Matcher

Provides unified command-line interface for alert parsing and reconciliation.
"""

import logging
import os

import click

from ..core.config import get_config


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Load settings for this environment instead of BANKALERTS_ENV",
)
@click.option("--verbose", "-v", is_flag=True, help="Print environment and input counts")
@click.option("--debug", is_flag=True, help="Log per-field extraction and per-candidate scoring")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    Bank Alert Matcher - Alert-to-Transaction Reconciliation

    Parses bank alert emails and matches them against known transactions
    with confidence scoring.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["BANKALERTS_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    try:
        config = get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("bankalerts").setLevel(logging.DEBUG)

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config

    if verbose:
        click.echo(f"Environment: {config.environment.value}")
        click.echo(f"Data directory: {config.data_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
def version() -> None:
    """Print the installed version."""
    from bankalerts import __author__, __version__

    click.echo(f"Bank Alert Matcher v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration (credentials redacted)."""
    config_obj = ctx.obj["config"]
    matching = config_obj.matching
    weights = matching.weights

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Output Directory: {config_obj.output_dir}")
    click.echo(f"  Time Window: {matching.time_window.total_seconds() / 60:g} minutes")
    click.echo(f"  Amount Tolerance: {matching.amount_tolerance}")
    click.echo(f"  Confidence Threshold: {matching.confidence_threshold}")
    click.echo(
        f"  Weights: amount={weights.amount} account={weights.account} "
        f"time={weights.time} description={weights.description}"
    )
    click.echo(f"  Default Format: {config_obj.parser.default_format}")
    click.echo(f"  Default Currency: {config_obj.parser.default_currency}")
    click.echo(f"  Description Length: {config_obj.parser.description_length}")
    click.echo(f"  IMAP Server: {config_obj.email.imap_server}:{config_obj.email.imap_port}")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


from .reconcile import fetch, formats, match, parse  # noqa: E402

main.add_command(formats)
main.add_command(parse)
main.add_command(match)
main.add_command(fetch)


if __name__ == "__main__":
    main()
