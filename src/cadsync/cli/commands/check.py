"""Source connectivity check command."""

import click

from cadsync.cli.error_handling import handle_domain_error
from cadsync.domain.errors import DomainError


@click.command("check")
@click.option("--schemas", "show_schemas", is_flag=True, help="Also list the schemas each source can see")
@click.pass_context
def check_sources(ctx, show_schemas: bool):
    """Check that the three databases answer."""
    engine = ctx.obj["engine"]
    status = engine.check_sources()

    for name, ok in status.items():
        click.echo(f"{name:15s} {'OK' if ok else 'UNAVAILABLE'}")

    if not all(status.values()):
        ctx.exit(1)

    if show_schemas:
        try:
            schemas = engine.list_source_schemas()
        except DomainError as e:
            handle_domain_error(ctx, e)

        click.echo("\nSchemas:")
        for name, names in schemas.items():
            click.echo(f"{name:15s} {', '.join(names) if names else '-'}")


def register_commands(cli):
    """Register check command with main CLI."""
    cli.add_command(check_sources)
