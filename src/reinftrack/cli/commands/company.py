"""Company management commands."""

import click
from reinftrack.cli.error_handling import handle_domain_error
from reinftrack.domain.company import CompanyService
from reinftrack.domain.errors import DomainError
from reinftrack.utils.cnpj import format_cnpj
from reinftrack.utils.resolvers import resolve_company

PERIOD_CHOICES = click.Choice(["trimestral", "mensal"], case_sensitive=False)


@click.group()
def company_group():
    """Manage companies."""
    pass


@company_group.command("create")
@click.argument("name")
@click.option("--legal-name", help="Registered legal name (defaults to NAME)")
@click.option("--cnpj", required=True, help="CNPJ, formatted or 14 digits")
@click.option("--regime", required=True, help="Tax regime name")
@click.option("--period", type=PERIOD_CHOICES, help="Override the regime's default period")
@click.pass_context
def create_company(ctx, name: str, legal_name: str | None, cnpj: str, regime: str, period: str | None):
    """Create a company.

    Examples:
        reinftrack company create "Acme" --cnpj 12.345.678/0001-90 --regime "Lucro Real"
        reinftrack company create "Beta" --cnpj 12345678000190 --regime MEI --period mensal
    """
    service = CompanyService(ctx.obj["db"])
    try:
        company_id = service.create_company(
            name=name,
            legal_name=legal_name or name,
            cnpj=cnpj,
            regime=regime,
            period_type=period,
        )
        click.echo(f"Created company '{name}' (ID: {company_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List all companies."""
    service = CompanyService(ctx.obj["db"])

    companies = service.list_companies()
    if not companies:
        click.echo("No companies found.")
        return

    click.echo("\nCompanies:")
    click.echo("-" * 80)
    for company in companies:
        period = company.period_type.value if company.period_type else "regime default"
        click.echo(
            f"ID: {company.id:3d} | {company.name:20s} | {format_cnpj(company.cnpj)} | "
            f"{company.regime} | {period}"
        )


@company_group.command("show")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def show_company(ctx, company: str):
    """Show a company and its effective period.

    COMPANY can be a company name or ID.
    """
    db = ctx.obj["db"]
    service = CompanyService(db)
    try:
        company_id = resolve_company(db, company)
        record = service.get_company(company_id)
        effective = service.effective_period_type(company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Company:    {record.name} (ID: {record.id})")
    click.echo(f"Legal name: {record.legal_name}")
    click.echo(f"CNPJ:       {format_cnpj(record.cnpj)}")
    click.echo(f"Regime:     {record.regime}")
    source = "override" if record.period_type else "regime default"
    click.echo(f"Period:     {effective.value} ({source})")


@company_group.command("update")
@click.argument("company", metavar="COMPANY")
@click.option("--name", help="New display name")
@click.option("--legal-name", help="New legal name")
@click.option("--cnpj", help="New CNPJ")
@click.option("--regime", help="New tax regime")
@click.option("--period", type=PERIOD_CHOICES, help="Override the regime's default period")
@click.option("--clear-period", is_flag=True, help="Use the regime's default period again")
@click.pass_context
def update_company(ctx, company: str, name, legal_name, cnpj, regime, period, clear_period: bool):
    """Update fields of a company.

    COMPANY can be a company name or ID.
    """
    db = ctx.obj["db"]
    service = CompanyService(db)
    try:
        company_id = resolve_company(db, company)
        current = service.get_company(company_id)
        if clear_period:
            new_period = None
        elif period is not None:
            new_period = period
        else:
            new_period = current.period_type
        service.update_company(
            company_id,
            name=name or current.name,
            legal_name=legal_name or current.legal_name,
            cnpj=cnpj or current.cnpj,
            regime=regime or current.regime,
            period_type=new_period,
        )
        click.echo(f"Updated company {company_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@company_group.command("delete")
@click.argument("company", metavar="COMPANY")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_company(ctx, company: str, yes: bool):
    """Delete a company without declaration entries.

    COMPANY can be a company name or ID.
    """
    db = ctx.obj["db"]
    service = CompanyService(db)
    try:
        company_id = resolve_company(db, company)
        record = service.get_company(company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete company '{record.name}' (ID: {company_id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_company(company_id)
        click.echo(f"Deleted company '{record.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register company commands with main CLI."""
    cli.add_command(company_group, name="company")
