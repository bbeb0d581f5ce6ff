"""Main CLI entry point."""

from dataclasses import replace

import click

from cadsync.config import ExistenceCheckPolicy, SyncSettings
from cadsync.database.factories import (
    create_point_of_sale_source,
    create_cadastral_source,
    create_ledger_source,
)
from cadsync.domain.engine import SyncEngine
from cadsync.domain.errors import DomainError
from cadsync.logging_config import configure_logging

# Import and register all commands at module level
from cadsync.cli.commands import check, registry, requests, sync


@click.group()
@click.option("--pos-url", envvar="CADSYNC_POS_URL", help="Point-of-sale database URL (overrides CADSYNC_POS_URL)")
@click.option(
    "--cadastral-url",
    envvar="CADSYNC_CADASTRAL_URL",
    help="Cadastral registry database URL (overrides CADSYNC_CADASTRAL_URL)",
)
@click.option("--ledger-url", envvar="CADSYNC_LEDGER_URL", help="Revenue ledger database URL (overrides CADSYNC_LEDGER_URL)")
@click.option(
    "--strict/--permissive",
    "strict",
    default=None,
    help="Abort when the cadastral registry is unreachable instead of treating every account as registered",
)
@click.option("--log-level", help="Log level (overrides CADSYNC_LOG_LEVEL)")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(
    ctx,
    pos_url: str | None,
    cadastral_url: str | None,
    ledger_url: str | None,
    strict: bool | None,
    log_level: str | None,
    json_logs: bool,
):
    """cadsync - Payment reconciliation and cadastral synchronization.

    Matches point-of-sale payment requests against the cadastral registry,
    records them in the revenue ledger and settles the debts they cover.
    """
    ctx.ensure_object(dict)

    # Only open databases when actually running a command (not when showing help)
    if ctx.invoked_subcommand is None:
        return

    try:
        settings = SyncSettings.from_env()
        if strict is not None:
            policy = ExistenceCheckPolicy.STRICT if strict else ExistenceCheckPolicy.PERMISSIVE
            settings = replace(settings, existence_policy=policy)
        configure_logging(log_level or settings.log_level, json_output=json_logs)
        engine = SyncEngine(
            create_point_of_sale_source(pos_url),
            create_cadastral_source(cadastral_url),
            create_ledger_source(ledger_url),
            settings,
        )
    except (DomainError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    ctx.obj["engine"] = engine
    ctx.call_on_close(engine.close)


# Register all commands
requests.register_commands(cli)
sync.register_commands(cli)
registry.register_commands(cli)
check.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
