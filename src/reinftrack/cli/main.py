"""Main CLI entry point."""

import logging

import click
from reinftrack.database.factories import create_database, create_sqlite_database

# Import and register all commands at module level
from reinftrack.cli.commands import (
    company,
    department,
    entry,
    regime,
    user,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    """Log reinftrack activity to stderr when --verbose is given."""
    if not verbose:
        return
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logging.getLogger("reinftrack").setLevel(logging.DEBUG)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides REINFTRACK_DB_PATH environment variable)",
    envvar="REINFTRACK_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL; takes precedence over --db-path",
    envvar="REINFTRACK_DATABASE_URL",
)
@click.option("--verbose", "-v", is_flag=True, help="Log workflow activity to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, verbose: bool):
    """Reinftrack - quarterly profit declaration workflow.

    Each company's quarterly profit entry passes through accounting, HR
    (departamento pessoal) and fiscal before it is marked as sent.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        if database_url:
            db = create_database(database_url)
        else:
            db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
regime.register_commands(cli)
company.register_commands(cli)
department.register_commands(cli)
entry.register_commands(cli)
user.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
