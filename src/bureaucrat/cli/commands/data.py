"""Entity data CRUD commands."""

from typing import Annotated, Any

import typer

from bureaucrat.cli.context import CLIContext
from bureaucrat.cli.output import OutputFormatter
from bureaucrat.cli.parsing import parse_assignments, parse_json_object, read_json_file

# Create data subcommand group
app = typer.Typer(help="Manage entity data (CRUD operations)")

IdOption = Annotated[
    list[str] | None,
    typer.Option("--id", "-i", help="Identifier value as key=value. Can be repeated."),
]


def _load_data(data_json: str | None, from_file: str | None) -> dict[str, Any]:
    if from_file:
        return read_json_file(from_file)
    if data_json:
        return parse_json_object(data_json)
    raise typer.BadParameter("Either provide data as JSON string or use --from-file")


@app.command("create")
def data_create(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="Entity type code")],
    data_json: Annotated[
        str | None,
        typer.Argument(help="Entity data as JSON object keyed by field code"),
    ] = None,
    from_file: Annotated[
        str | None,
        typer.Option("--from-file", "-f", help="Load data from JSON file"),
    ] = None,
) -> None:
    """Create an entity.

    Examples:

        bureaucrat data create user '{"first_name": "Douglas", "last_name": "Adams"}'

        bureaucrat data create user --from-file user.json
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        data = _load_data(data_json, from_file)
        created = cli_ctx.get_domain().create(code, data)
        formatter.print_success(f"Created {code}", created)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e
    finally:
        cli_ctx.close()


@app.command("read")
def data_read(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="Entity type code")],
    ids: IdOption = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", min=0, help="Maximum number of entities"),
    ] = None,
) -> None:
    """Read entities, or a single one with --id.

    Examples:

        bureaucrat data read user --limit 10

        bureaucrat data read user --id id=1
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        domain = cli_ctx.get_domain()
        entity_type = domain.entity_type(code)
        rows = domain.read(code, ids=parse_assignments(ids) if ids else None, limit=limit)
        formatter.print_table(
            f"{entity_type.name} ({len(rows)} rows)",
            rows,
            entity_type.field_codes,
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e
    finally:
        cli_ctx.close()


@app.command("update")
def data_update(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="Entity type code")],
    data_json: Annotated[
        str | None,
        typer.Argument(help="Identifier values plus changes, as JSON object"),
    ] = None,
    from_file: Annotated[
        str | None,
        typer.Option("--from-file", "-f", help="Load data from JSON file"),
    ] = None,
) -> None:
    """Update a single entity.

    Examples:

        bureaucrat data update user '{"id": 1, "middle_name": "Noël"}'
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        data = _load_data(data_json, from_file)
        updated = cli_ctx.get_domain().update(code, data)
        formatter.print_success(f"Updated {code}", updated)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e
    finally:
        cli_ctx.close()


@app.command("delete")
def data_delete(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="Entity type code")],
    ids: IdOption = None,
) -> None:
    """Delete a single entity.

    Examples:

        bureaucrat data delete user --id id=1
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        id_values = parse_assignments(ids)
        cli_ctx.get_domain().delete(code, id_values)
        formatter.print_success(f"Deleted {code}", id_values)
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e
    finally:
        cli_ctx.close()
