"""Cadastral registry commands."""

import json

import click

from cadsync.cli.error_handling import handle_domain_error
from cadsync.domain.entities import Outcome
from cadsync.domain.errors import DomainError


@click.group()
def registry_group():
    """Update the cadastral registry."""
    pass


@registry_group.command("update")
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def update_registry(ctx, as_json: bool):
    """Record paid property tax years and settle the debts they cover."""
    engine = ctx.obj["engine"]

    try:
        summary = engine.update_cadastral_registry()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))
        return

    if summary.outcome == Outcome.NO_WORK:
        click.echo("No property tax payments to apply.")
        return

    click.echo("\nRegistry update complete:")
    click.echo(f"  Records updated: {summary.records_updated}")
    click.echo(f"  Debts settled: {summary.debts_settled}")
    click.echo(f"  Omitted (no period or account): {summary.omitted}")
    click.echo(f"  Account not found: {summary.not_found}")
    click.echo(f"  Total processed: {summary.total_processed}")


def register_commands(cli):
    """Register registry commands with main CLI."""
    cli.add_command(registry_group, name="registry")
