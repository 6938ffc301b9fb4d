"""Declaration entry workflow commands."""

import click
from reinftrack.cli.error_handling import handle_domain_error
from reinftrack.domain.entities import DeclarationEntry, EntryStatus
from reinftrack.domain.errors import DomainError
from reinftrack.domain.workflow import STATUS_LABELS, WorkflowService, next_transition
from reinftrack.utils.amount_parser import parse_amount
from reinftrack.utils.period_parser import parse_period
from reinftrack.utils.resolvers import resolve_company, resolve_user

STATUS_CHOICES = click.Choice([status.value for status in EntryStatus], case_sensitive=False)


def format_amount(amount) -> str:
    """Format an amount the Brazilian way (R$ 1.234,56)."""
    text = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"


def print_entry(entry: DeclarationEntry, company_name: str) -> None:
    """Print the details of one entry."""
    months = entry.period.months
    click.echo(f"Entry {entry.id}: {company_name} - {entry.period}")
    click.echo(f"Status: {STATUS_LABELS[entry.status]} ({entry.status.value})")
    for month, amount in zip(months, entry.amounts):
        click.echo(f"  Month {month:2d}: {format_amount(amount)}")
    click.echo(f"  Total:    {format_amount(entry.total_profit)}")
    stamps = [
        ("Accounting", entry.accounting_user_id, entry.accounting_done_at),
        ("HR", entry.hr_user_id, entry.hr_approved_at),
        ("Fiscal", entry.fiscal_user_id, entry.fiscal_sent_at),
    ]
    for label, user_id, stamped_at in stamps:
        if user_id is not None:
            click.echo(f"{label}: {user_id} at {stamped_at:%Y-%m-%d %H:%M}")


@click.group()
def entry_group():
    """Create and advance quarterly profit entries."""
    pass


@entry_group.command("create")
@click.argument("company", metavar="COMPANY")
@click.argument("period", metavar="PERIOD")
@click.pass_context
def create_entry(ctx, company: str, period: str):
    """Open the entry of a company for a quarter.

    COMPANY can be a company name or ID. PERIOD accepts 2024-Q1, Q1/2024,
    1T2024, a date, or "this quarter".

    Examples:
        reinftrack entry create "Acme" 2024-Q1
        reinftrack entry create 3 "last quarter"
    """
    db = ctx.obj["db"]
    service = WorkflowService(db)
    try:
        company_id = resolve_company(db, company)
        declaration_period = parse_period(period)
        entry = service.create_entry(company_id, declaration_period)
        click.echo(f"Created entry {entry.id} for {declaration_period}")
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


@entry_group.command("list")
@click.option("--period", help="Only entries of this quarter (e.g. 2024-Q1)")
@click.option("--year", type=int, help="Only entries of this year")
@click.option("--company", help="Only entries of this company (name or ID)")
@click.option("--status", type=STATUS_CHOICES, help="Only entries in this stage")
@click.pass_context
def list_entries(ctx, period: str | None, year: int | None, company: str | None, status: str | None):
    """List declaration entries."""
    db = ctx.obj["db"]
    service = WorkflowService(db)
    try:
        declaration_period = parse_period(period) if period else None
        company_id = resolve_company(db, company) if company else None
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    entries = service.list_entries(
        period=declaration_period,
        company_id=company_id,
        status=EntryStatus(status.lower()) if status else None,
        year=year,
    )
    if not entries:
        click.echo("No entries found.")
        return

    names = {c.id: c.name for c in db.list_companies()}
    click.echo("\nEntries:")
    click.echo("-" * 90)
    for entry in entries:
        click.echo(
            f"ID: {entry.id:3d} | {names.get(entry.company_id, '?'):20s} | {entry.period} | "
            f"{format_amount(entry.total_profit):>18s} | {STATUS_LABELS[entry.status]}"
        )


@entry_group.command("show")
@click.argument("entry_id", type=int)
@click.option("--user", "user_ref", envvar="REINFTRACK_USER", help="Show the actions this user may take")
@click.pass_context
def show_entry(ctx, entry_id: int, user_ref: str | None):
    """Show one entry with its stage history."""
    db = ctx.obj["db"]
    service = WorkflowService(db)
    try:
        entry = service.get_entry(entry_id)
        company = db.get_company(entry.company_id)
        print_entry(entry, company.name if company else "?")
        if user_ref:
            requester = resolve_user(db, user_ref)
            actions = service.available_actions(entry, service.authority_for(requester))
            click.echo(f"Available actions: {', '.join(actions) if actions else 'none'}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entry_group.command("fill")
@click.argument("entry_id", type=int)
@click.argument("month1")
@click.argument("month2")
@click.argument("month3")
@click.option("--user", "user_ref", envvar="REINFTRACK_USER", required=True, help="Acting user (ID or email)")
@click.pass_context
def fill_profits(ctx, entry_id: int, month1: str, month2: str, month3: str, user_ref: str):
    """Fill the three monthly profits of an entry.

    Amounts accept 1.234,56 or 1234.56 notation.

    Examples:
        reinftrack entry fill 1 "1.000,00" 0 0 --user ana@example.com
    """
    db = ctx.obj["db"]
    service = WorkflowService(db)
    try:
        requester = resolve_user(db, user_ref)
        amounts = [parse_amount(value) for value in (month1, month2, month3)]
        entry = service.get_entry(entry_id)
        entry = service.fill_profits(entry, amounts, requester=requester)
        click.echo(f"Saved profits of entry {entry.id}: total {format_amount(entry.total_profit)}")
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


@entry_group.command("advance")
@click.argument("entry_id", type=int)
@click.option("--user", "user_ref", envvar="REINFTRACK_USER", required=True, help="Acting user (ID or email)")
@click.pass_context
def advance_entry(ctx, entry_id: int, user_ref: str):
    """Move an entry to its next stage.

    Examples:
        reinftrack entry advance 1 --user ana@example.com
    """
    db = ctx.obj["db"]
    service = WorkflowService(db)
    try:
        requester = resolve_user(db, user_ref)
        entry = service.get_entry(entry_id)
        transition = next_transition(entry.status)
        entry = service.advance(entry, requester)
        click.echo(
            f"Entry {entry.id} moved from '{STATUS_LABELS[transition.source]}' "
            f"to '{STATUS_LABELS[entry.status]}'"
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
