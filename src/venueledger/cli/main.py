"""Main CLI entry point."""

import logging
from dataclasses import replace

import click
from venueledger.cli.error_handling import handle_domain_error
from venueledger.config import Settings
from venueledger.database.factories import create_database
from venueledger.services import Services

# Import and register all commands at module level
from venueledger.cli.commands import (
    account,
    revenue,
    withdrawal,
    summary,
    serve,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides VENUELEDGER_DB_PATH environment variable)",
    envvar="VENUELEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="VENUELEDGER_LOG_LEVEL",
    help="Logging level",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Venueledger - cash flow and withdrawal settlement for venue owners.

    Credit booking revenue to owner accounts, file withdrawal requests against
    the available amount and approve or reject them from the admin console.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = Settings.from_env()
        except ValueError as e:
            handle_domain_error(ctx, e)
        if db_path:
            settings = replace(settings, database_path=db_path, database_url=None)

        db = create_database(settings)
        db.connect()
        db.initialize_schema()
        ctx.obj["settings"] = settings
        ctx.obj["services"] = Services.build(db, settings)
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
revenue.register_commands(cli)
withdrawal.register_commands(cli)
summary.register_commands(cli)
serve.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
