"""Department management commands."""

import click
from reinftrack.cli.error_handling import handle_domain_error
from reinftrack.domain.department import DepartmentService
from reinftrack.domain.errors import DomainError

AUTHORITY_CHOICES = click.Choice(["contabil", "dp", "fiscal", "none"], case_sensitive=False)


@click.group()
def department_group():
    """Manage departments and the workflow stage each one owns."""
    pass


@department_group.command("create")
@click.argument("name")
@click.option(
    "--authority",
    type=AUTHORITY_CHOICES,
    help="Stage the department acts on (guessed from NAME if omitted)",
)
@click.pass_context
def create_department(ctx, name: str, authority: str | None):
    """Create a department.

    Examples:
        reinftrack department create "Contabilidade"
        reinftrack department create "Recursos Humanos" --authority dp
    """
    service = DepartmentService(ctx.obj["db"])
    try:
        department_id = service.create_department(name, authority)
        department = service.get_department(department_id)
        click.echo(
            f"Created department '{department.name}' (ID: {department_id}) "
            f"with authority '{department.authority.value}'"
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


@department_group.command("list")
@click.pass_context
def list_departments(ctx):
    """List departments."""
    service = DepartmentService(ctx.obj["db"])

    departments = service.list_departments()
    if not departments:
        click.echo("No departments found.")
        return

    click.echo("\nDepartments:")
    click.echo("-" * 50)
    for department in departments:
        click.echo(f"ID: {department.id:3d} | {department.name:25s} | {department.authority.value}")


@department_group.command("set-authority")
@click.argument("department_id", type=int)
@click.argument("authority", type=AUTHORITY_CHOICES)
@click.pass_context
def set_authority(ctx, department_id: int, authority: str):
    """Change the stage a department owns."""
    service = DepartmentService(ctx.obj["db"])
    try:
        service.set_authority(department_id, authority)
        click.echo(f"Department {department_id} now has authority '{authority.lower()}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@department_group.command("delete")
@click.argument("department_id", type=int)
@click.pass_context
def delete_department(ctx, department_id: int):
    """Delete a department without users."""
    service = DepartmentService(ctx.obj["db"])
    try:
        service.delete_department(department_id)
        click.echo(f"Deleted department {department_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register department commands with main CLI."""
    cli.add_command(department_group, name="department")
