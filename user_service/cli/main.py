"""Main CLI entry point for user-service management commands."""

import click

from user_service.cli.commands import db, users


@click.group()
@click.version_option(version="0.1.0", prog_name="user-service")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """User service management CLI.

    \b
    Examples:
        user-service db ping
        user-service db upgrade
        user-service users seed
        user-service users list --format json
    """
    ctx.ensure_object(dict)


cli.add_command(db)
cli.add_command(users)


def main() -> None:
    """Run the management CLI with logging configured."""
    from user_service.infra.logging import setup_logging

    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
