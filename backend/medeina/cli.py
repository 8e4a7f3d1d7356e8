"""Command-line front end for the Medeina clinic core."""

from __future__ import annotations

from typing import Optional

import click

from medeina.core.config import SUPPORTED_STORES
from medeina.core.messages import CLINIC_NAME
from medeina.main import create_clinic

EXIT_WORDS = ("exit", "quit")


def _echo_result(result) -> None:
    click.echo(result.feedback, err=not result.success)
    for record in result.records:
        if isinstance(record, dict):
            continue
        click.echo(f"  {record}")


@click.group()
@click.option(
    "--store",
    "store_backend",
    type=click.Choice(SUPPORTED_STORES),
    default=None,
    help="Store backend. Overrides MEDEINA_STORE.",
)
@click.option(
    "--database-url",
    default=None,
    help="SQLAlchemy URL. Overrides DATABASE_URL.",
)
@click.pass_context
def cli(ctx: click.Context, store_backend: Optional[str], database_url: Optional[str]) -> None:
    """Entry point for Medeina commands."""
    ctx.ensure_object(dict)
    ctx.obj["store_backend"] = store_backend
    ctx.obj["database_url"] = database_url


@cli.command("run")
@click.argument("command_line")
@click.pass_context
def run(ctx: click.Context, command_line: str) -> None:
    """Execute a single command line, e.g. medeina run "list -o"."""
    clinic = create_clinic(
        database_url=ctx.obj["database_url"], store_backend=ctx.obj["store_backend"]
    )
    result = clinic.execute(command_line)
    _echo_result(result)
    if not result.success:
        ctx.exit(1)


@cli.command("shell")
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Read commands interactively until exit, quit or end of input."""
    clinic = create_clinic(
        database_url=ctx.obj["database_url"], store_backend=ctx.obj["store_backend"]
    )
    click.echo(f"{CLINIC_NAME} shell. Type 'help' for commands, 'exit' to leave.")
    while True:
        try:
            line = click.prompt("medeina", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            click.echo()
            break
        if line.strip().lower() in EXIT_WORDS:
            break
        if not line.strip():
            continue
        _echo_result(clinic.execute(line))


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the clinic tables in the configured database."""
    from medeina.core.config import get_database_url
    from medeina.core.logging_config import setup_logging
    from medeina.db.session import create_tables, get_engine

    setup_logging()
    url = ctx.obj["database_url"] or get_database_url()
    create_tables(get_engine(url))
    click.echo(f"Tables created for {url}")


if __name__ == "__main__":
    cli()
