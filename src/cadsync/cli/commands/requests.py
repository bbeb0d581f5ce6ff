"""Payment request and form catalog commands."""

import json

import click

from cadsync.cli.date_filters import resolve_cli_period_filter
from cadsync.cli.error_handling import handle_domain_error
from cadsync.domain.errors import DomainError
from cadsync.domain.forms import DEFAULT_SAMPLE_SIZE, FormCatalogService


@click.group()
def requests_group():
    """Inspect point-of-sale payment requests."""
    pass


@requests_group.command("list")
@click.option("--start-date", help="Paid on or after this date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="Paid on or before this date (YYYY-MM-DD or relative)")
@click.option("--this-month", is_flag=True, help="Paid this month")
@click.option("--last-month", is_flag=True, help="Paid last month")
@click.option("--this-year", is_flag=True, help="Paid this year")
@click.option("--last-year", is_flag=True, help="Paid last year")
@click.option("--json", "as_json", is_flag=True, help="Print records as JSON")
@click.pass_context
def list_requests(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
    as_json: bool,
):
    """List finalized payment requests with a cadastral account.

    Examples:
        cadsync requests list
        cadsync requests list --start-date 2024-01-01 --end-date 2024-03-31
        cadsync requests list --last-month --json
    """
    engine = ctx.obj["engine"]
    period_filter = resolve_cli_period_filter(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
    )

    try:
        records = engine.list_payment_requests(period_filter)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if as_json:
        payload = [
            {
                "conceptoId": r.fee_id,
                "nombreConcepto": r.fee_name,
                "folioRecaudacion": r.folio,
                "fechaPago": r.paid_at.isoformat() if r.paid_at else None,
                "cuentaPredial": r.raw_account,
                "anioInicial": r.period_start,
                "anioFinal": r.period_end,
                "nombreContribuyente": r.payer_name,
                "monto": str(r.gross_amount),
                "descuento": str(r.discount_amount),
                "total": str(r.net_amount),
            }
            for r in records
        ]
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    if not records:
        click.echo("No payment requests found.")
        return

    click.echo(f"\n{'Folio':12s} {'Account':12s} {'Period':11s} {'Net':>12s}  Fee")
    click.echo("-" * 80)
    for r in records:
        period = f"{r.period_start}-{r.period_end}" if r.period_start or r.period_end else "-"
        click.echo(f"{r.folio:12s} {r.raw_account:12s} {period:11s} {r.net_amount:12,.2f}  {r.fee_name}")
    click.echo(f"\nTotal: {len(records)} records")


@requests_group.command("fields")
@click.option("--form", "form_id", type=int, help="Only fields of this form")
@click.pass_context
def list_fields(ctx, form_id: int | None):
    """List the fields declared by the dynamic forms."""
    service = FormCatalogService(ctx.obj["engine"].pos)

    try:
        fields = service.list_fields(form_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not fields:
        click.echo("No form fields found.")
        return

    for f in fields:
        description = f" - {f.description}" if f.description else ""
        click.echo(f"ID: {f.id:4d} | Form: {f.form_id:3d} | {f.name}{description}")


@requests_group.command("answers")
@click.argument("form_id", type=int)
@click.option("--limit", default=DEFAULT_SAMPLE_SIZE, show_default=True, help="Number of answers")
@click.pass_context
def sample_answers(ctx, form_id: int, limit: int):
    """Show non-empty answers given on a form."""
    service = FormCatalogService(ctx.obj["engine"].pos)

    try:
        answers = service.sample_answers(form_id, limit=limit)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not answers:
        click.echo(f"No answers found for form {form_id}.")
        return

    for a in answers:
        click.echo(f"Request: {a.request_id} | Field: {a.field_id} | {a.value}")


def register_commands(cli):
    """Register request commands with main CLI."""
    cli.add_command(requests_group, name="requests")
