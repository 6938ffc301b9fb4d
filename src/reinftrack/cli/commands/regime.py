"""Tax regime configuration commands."""

import click
from reinftrack.cli.error_handling import handle_domain_error
from reinftrack.domain.errors import DomainError
from reinftrack.domain.period import RegimeService

PERIOD_CHOICES = click.Choice(["trimestral", "mensal"], case_sensitive=False)


@click.group()
def regime_group():
    """Manage tax regimes and their default period."""
    pass


@regime_group.command("list")
@click.pass_context
def list_regimes(ctx):
    """List tax regimes."""
    service = RegimeService(ctx.obj["db"])

    regimes = service.list_regimes()
    if not regimes:
        click.echo("No tax regimes found. Run 'regime seed' to create the defaults.")
        return

    click.echo("\nTax regimes:")
    click.echo("-" * 40)
    for config in regimes:
        click.echo(f"{config.regime:25s} | {config.period_type.value}")


@regime_group.command("create")
@click.argument("regime")
@click.option("--period", type=PERIOD_CHOICES, default="trimestral", help="Default period (default: trimestral)")
@click.pass_context
def create_regime(ctx, regime: str, period: str):
    """Create a tax regime."""
    service = RegimeService(ctx.obj["db"])
    try:
        service.create_regime(regime, period)
        click.echo(f"Created tax regime '{regime}' ({period})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@regime_group.command("set")
@click.argument("regime")
@click.argument("period", type=PERIOD_CHOICES)
@click.pass_context
def set_regime_period(ctx, regime: str, period: str):
    """Set the default period of a regime.

    Examples:
        reinftrack regime set "Lucro Real" mensal
    """
    service = RegimeService(ctx.obj["db"])
    try:
        service.set_regime_period(regime, period)
        click.echo(f"Period of regime '{regime}' set to {period.lower()}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@regime_group.command("delete")
@click.argument("regime")
@click.pass_context
def delete_regime(ctx, regime: str):
    """Delete a regime no company uses."""
    service = RegimeService(ctx.obj["db"])
    try:
        service.delete_regime(regime)
        click.echo(f"Deleted tax regime '{regime}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@regime_group.command("seed")
@click.pass_context
def seed_regimes(ctx):
    """Create the standard regimes (Simples Nacional, Lucro Presumido, ...)."""
    service = RegimeService(ctx.obj["db"])
    created = service.seed_default_regimes()
    if not created:
        click.echo("All default regimes already exist.")
        return
    for regime in created:
        click.echo(f"Created tax regime '{regime}' (trimestral)")


def register_commands(cli):
    """Register regime commands with main CLI."""
    cli.add_command(regime_group, name="regime")
