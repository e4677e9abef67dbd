#!/usr/bin/env python3
"""
Reconciliation CLI - Alert Parsing and Matching Commands

Command-line interface for parsing bank alert emails and matching them
against candidate transactions.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import click

from ..alerts import AlertExtractor, InboxFetcher
from ..core.config import Config
from ..core.json_utils import format_json, read_json, write_json
from ..core.models import Transaction
from ..matching import AlertReconciler, MatchScorer, generate_match_summary


def _build_extractor(config: Config) -> AlertExtractor:
    return AlertExtractor(config=config.parser)


def _read_emails(paths: tuple[str, ...]) -> list[str]:
    """Read one alert email per file."""
    return [Path(path).read_text(encoding="utf-8") for path in paths]


def _load_transactions(path: str) -> list[Transaction]:
    """
    Load candidate transactions from JSON.

    Accepts either a list of records or an object with a "transactions" list.
    """
    data = read_json(path)
    records = data.get("transactions", []) if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise click.ClickException(f"Expected a list of transactions in {path}")
    return [Transaction.from_dict(record) for record in records]


def _emit(payload: Any, output: str | None) -> None:
    """Write JSON to a file, or print it when no output path is given."""
    if output:
        write_json(output, payload)
        click.echo(f"Results saved to: {output}")
    else:
        click.echo(format_json(payload))


@click.command()
@click.pass_context
def formats(ctx: click.Context) -> None:
    """List registered bank alert formats."""
    config = ctx.obj["config"]
    extractor = _build_extractor(config)

    for name in extractor.formats():
        profile = extractor.registry.get(name)
        marker = " (default)" if name == extractor.registry.default_name else ""
        click.echo(f"{name}{marker}: {profile.description or 'custom format'}")


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "format_name", help="Bank format (defaults to configured default)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write alerts JSON to this file")
@click.pass_context
def parse(ctx: click.Context, files: tuple[str, ...], format_name: str | None, output: str | None) -> None:
    """
    Parse bank alert email files into structured alerts.

    Examples:
      bankalerts parse alert1.txt alert2.txt --format gtbank
      bankalerts parse alert.txt --format access -o alerts.json
    """
    config = ctx.obj["config"]
    extractor = _build_extractor(config)

    try:
        alerts = extractor.extract_many(_read_emails(files), format_name)
    except OSError as e:
        raise click.ClickException(f"Cannot read alert emails: {e}") from e

    _emit({"alerts": [alert.to_dict() for alert in alerts]}, output)


@click.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--transactions",
    "transactions_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file of candidate transactions",
)
@click.option("--format", "format_name", help="Bank format (defaults to configured default)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write results JSON to this file")
@click.pass_context
def match(
    ctx: click.Context,
    files: tuple[str, ...],
    transactions_path: str,
    format_name: str | None,
    output: str | None,
) -> None:
    """
    Match bank alert emails to candidate transactions.

    Examples:
      bankalerts match alert.txt --transactions txns.json
      bankalerts match alerts/*.txt --transactions txns.json --format access -o results.json
    """
    config = ctx.obj["config"]
    verbose = ctx.obj.get("verbose", False)

    try:
        emails = _read_emails(files)
        transactions = _load_transactions(transactions_path)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Cannot load input: {e}") from e

    if verbose:
        click.echo(f"Loaded {len(emails)} alert emails and {len(transactions)} transactions", err=True)

    reconciler = AlertReconciler(
        extractor=_build_extractor(config),
        scorer=MatchScorer(config.matching),
    )
    results = reconciler.process_alerts(emails, transactions, format_name)
    summary = generate_match_summary(results)

    payload = {
        "metadata": {
            "format": format_name or config.parser.default_format,
            "transactions_file": str(transactions_path),
            "timestamp": datetime.now().isoformat(),
        },
        "summary": summary,
        "metrics": reconciler.get_metrics().to_dict(),
        "matches": [result.to_dict() for result in results],
    }
    _emit(payload, output)

    click.echo(reconciler.summary_report(), err=True)


@click.command()
@click.option("--since-minutes", default=15, show_default=True, type=int, help="Look back this many minutes")
@click.option("--sender", help="Only fetch alerts from this sender")
@click.option("--format", "format_name", help="Bank format (defaults to configured default)")
@click.pass_context
def fetch(ctx: click.Context, since_minutes: int, sender: str | None, format_name: str | None) -> None:
    """
    Poll the configured mailbox for unread bank alerts and parse them.

    Example:
      bankalerts fetch --since-minutes 60 --sender alerts@gtbank.com
    """
    config = ctx.obj["config"]

    if not config.email.username:
        raise click.ClickException("EMAIL_USERNAME is not configured")

    fetcher = InboxFetcher(config.email)
    try:
        emails = fetcher.poll_bank_alerts(since=datetime.now() - timedelta(minutes=since_minutes), sender=sender)
    finally:
        fetcher.disconnect()

    extractor = _build_extractor(config)
    alerts = extractor.extract_many([message.body for message in emails], format_name)

    click.echo(f"Fetched {len(alerts)} alert emails", err=True)
    _emit({"alerts": [alert.to_dict() for alert in alerts]}, None)
