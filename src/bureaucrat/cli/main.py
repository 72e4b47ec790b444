"""Bureaucrat CLI - Main entry point."""

from typing import Annotated

import typer

import bureaucrat
from bureaucrat.cli.context import CLIContext, get_domain_url, get_meta_url

# Create main Typer app
app = typer.Typer(
    name="bureaucrat",
    help="Bureaucrat CLI - metadata-driven access to relational data",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    meta: Annotated[
        str | None,
        typer.Option(
            "--meta",
            "-m",
            envvar="BUREAUCRAT_META_URL",
            help="Metadata store URL (PostgreSQL or SQLite)",
        ),
    ] = None,
    domain: Annotated[
        str | None,
        typer.Option(
            "--domain",
            "-d",
            envvar="BUREAUCRAT_DOMAIN_URL",
            help="Domain store URL (PostgreSQL or SQLite)",
        ),
    ] = None,
    echo: Annotated[
        bool,
        typer.Option(
            "--echo",
            "-e",
            help="Echo SQL statements to console",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    # Store in Typer context for command access
    ctx.obj = CLIContext(
        meta_url=get_meta_url(meta),
        domain_url=get_domain_url(domain),
        echo=echo,
        json_output=json_output,
    )


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"Bureaucrat v{bureaucrat.__version__}")


# Register command groups
from bureaucrat.cli.commands import data, entities

app.add_typer(entities.app, name="entities")
app.add_typer(data.app, name="data")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
