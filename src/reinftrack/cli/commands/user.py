"""User provisioning commands (administrators only)."""

import click
from reinftrack.cli.error_handling import handle_domain_error
from reinftrack.domain.errors import DomainError
from reinftrack.domain.provisioning import ProvisioningService
from reinftrack.identity.factories import create_identity_provider

TOKEN_OPTION = click.option(
    "--token",
    envvar="REINFTRACK_TOKEN",
    help="Administrator bearer token (from 'user login'); defaults to REINFTRACK_TOKEN",
)


def get_service(ctx: click.Context) -> ProvisioningService:
    """Build the provisioning service, exiting if no signing key is configured."""
    db = ctx.obj["db"]
    try:
        identity = create_identity_provider(db)
    except DomainError as e:
        handle_domain_error(ctx, e)
    return ProvisioningService(db, identity)


@click.group()
def user_group():
    """Manage user accounts."""
    pass


@user_group.command("login")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, help="Account password")
@click.pass_context
def login(ctx, email: str, password: str):
    """Print a bearer token for EMAIL.

    Examples:
        export REINFTRACK_TOKEN=$(reinftrack user login admin@example.com)
    """
    service = get_service(ctx)
    try:
        click.echo(service.login(email, password))
    except DomainError as e:
        handle_domain_error(ctx, e)


@user_group.command("bootstrap-admin")
@click.argument("email")
@click.option("--name", "full_name", required=True, help="Administrator's full name")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Initial password")
@click.pass_context
def bootstrap_admin(ctx, email: str, full_name: str, password: str):
    """Create the first administrator (safe to run again)."""
    service = get_service(ctx)
    try:
        user_id, created = service.bootstrap_admin(email, password, full_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if created:
        click.echo(f"Created administrator {email} (ID: {user_id})")
    else:
        click.echo(f"Administrator {email} already exists (ID: {user_id})")


@user_group.command("create")
@click.argument("email")
@click.option("--name", "full_name", required=True, help="Full name")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Initial password")
@click.option("--department", "department_id", type=int, help="Department ID")
@TOKEN_OPTION
@click.pass_context
def create_user(ctx, email: str, full_name: str, password: str, department_id: int | None, token: str | None):
    """Create a user account."""
    service = get_service(ctx)
    try:
        user_id = service.create_user(token, email, password, full_name, department_id)
        click.echo(f"Created user {email} (ID: {user_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@user_group.command("list")
@TOKEN_OPTION
@click.pass_context
def list_users(ctx, token: str | None):
    """List user accounts."""
    service = get_service(ctx)
    try:
        users = service.list_users(token)
    except DomainError as e:
        handle_domain_error(ctx, e)

    departments = {d.id: d.name for d in ctx.obj["db"].list_departments()}
    click.echo("\nUsers:")
    click.echo("-" * 90)
    for profile in users:
        department = departments.get(profile.department_id, "-")
        admin = " | admin" if profile.is_admin else ""
        click.echo(f"{profile.id} | {profile.full_name:20s} | {profile.email:25s} | {department}{admin}")


@user_group.command("reset-password")
@click.argument("user_id")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="New password")
@TOKEN_OPTION
@click.pass_context
def reset_password(ctx, user_id: str, password: str, token: str | None):
    """Set a new password for a user."""
    service = get_service(ctx)
    try:
        service.reset_password(token, user_id, password)
        click.echo(f"Password of user {user_id} updated")
    except DomainError as e:
        handle_domain_error(ctx, e)


@user_group.command("set-department")
@click.argument("user_id")
@click.argument("department_id", type=int, required=False)
@TOKEN_OPTION
@click.pass_context
def set_department(ctx, user_id: str, department_id: int | None, token: str | None):
    """Move a user to a department (omit DEPARTMENT_ID to clear it)."""
    service = get_service(ctx)
    try:
        service.set_user_department(token, user_id, department_id)
        click.echo(f"Department of user {user_id} updated")
    except DomainError as e:
        handle_domain_error(ctx, e)


@user_group.command("delete")
@click.argument("user_id")
@TOKEN_OPTION
@click.pass_context
def delete_user(ctx, user_id: str, token: str | None):
    """Delete a user account."""
    service = get_service(ctx)
    try:
        service.delete_user(token, user_id)
        click.echo(f"Deleted user {user_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
