"""Ledger synchronization commands."""

import json
from pathlib import Path

import click

from cadsync.cli.error_handling import handle_domain_error
from cadsync.domain.entities import Outcome, ReconciliationReport
from cadsync.domain.errors import DomainError
from cadsync.domain.report import format_amount


@click.group()
def sync_group():
    """Synchronize payment requests into the revenue ledger."""
    pass


def _echo_report(report: ReconciliationReport, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
        return

    if report.outcome == Outcome.NO_WORK:
        click.echo("No payment requests to synchronize.")
        return

    verb = "Inserted" if report.committed else "To insert"
    click.echo(f"\nSynchronization {'complete' if report.committed else 'preview'}:")
    click.echo(f"  {verb}: {report.inserted}")
    click.echo(f"  Already synced: {report.already_synced}")
    click.echo(f"  Account not in registry: {report.unmatched_account}")
    click.echo(f"  Without valid period: {report.no_period}")
    click.echo(f"  Total processed: {report.total_processed}")

    if report.samples and not report.committed:
        click.echo(f"\nShowing {len(report.samples)} of {report.inserted} payments to insert:")
        for p in report.samples:
            click.echo(
                f"  {p.payment_folio:12s} {p.counterpart:10s} {p.fiscal_year} "
                f"{format_amount(p.amount):>14s}  {p.description}"
            )


@sync_group.command("preview")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def preview(ctx, as_json: bool):
    """Show what a synchronization would insert, without writing."""
    engine = ctx.obj["engine"]

    try:
        report = engine.preview_sync()
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_report(report, as_json)


@sync_group.command("commit")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.option("--report-file", type=click.Path(dir_okay=False), help="Write the audit report to this file")
@click.pass_context
def commit(ctx, as_json: bool, report_file: str | None):
    """Insert new payments into the revenue ledger.

    Runs must not overlap: two concurrent commits can both insert the same
    payment.

    Examples:
        cadsync sync commit
        cadsync sync commit --report-file sync-report.txt
    """
    engine = ctx.obj["engine"]

    try:
        report = engine.commit_sync()
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_report(report, as_json)

    if report_file:
        try:
            Path(report_file).write_text(report.narrative, encoding="utf-8")
        except OSError as e:
            click.echo(
                f"Error: Could not write audit report to {report_file}: {e}. "
                f"The ledger commit itself succeeded.",
                err=True,
            )
            ctx.exit(1)
        if not as_json:
            click.echo(f"\nAudit report written to {report_file}")


def register_commands(cli):
    """Register sync commands with main CLI."""
    cli.add_command(sync_group, name="sync")
