"""Main CLI entry point."""

import click

from homeledger.database.factories import DB_PATH_ENV_VAR, create_sqlite_database
from homeledger.logging_config import LOG_LEVEL_ENV_VAR, configure_logging

# Import and register all commands at module level
from homeledger.cli.commands import (
    account,
    group,
    category,
    payee,
    rule,
    transaction,
)

LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV_VAR} environment variable)",
    envvar=DB_PATH_ENV_VAR,
)
@click.option(
    "--log-level",
    type=LOG_LEVELS,
    help=f"Log level (overrides {LOG_LEVEL_ENV_VAR}, default WARNING)",
    envvar=LOG_LEVEL_ENV_VAR,
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Homeledger - household ledger.

    Keep accounts, payees, grouped categories and recurring-payment rules,
    and book income, expenses and transfers between your accounts.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
group.register_commands(cli)
category.register_commands(cli)
payee.register_commands(cli)
rule.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
