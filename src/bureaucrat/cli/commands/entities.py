"""Entity type commands."""

from typing import Annotated

import typer

from bureaucrat.cli.context import CLIContext
from bureaucrat.cli.output import OutputFormatter

# Create entities subcommand group
app = typer.Typer(help="Inspect and edit entity types")


@app.command("list")
def entities_list(ctx: typer.Context) -> None:
    """List all entity types, introspecting unmapped tables first."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        entity_types = cli_ctx.get_domain().entity_types()
        table_data = [
            {
                "Code": et.code,
                "Name": et.name,
                "Table": et.table,
                "Fields": len(et.fields),
                "Identifiers": ", ".join(f.code for f in et.identifier_fields),
            }
            for et in entity_types
        ]
        formatter.print_table(
            f"Entity types ({len(entity_types)} total)",
            table_data,
            ["Code", "Name", "Table", "Fields", "Identifiers"],
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e
    finally:
        cli_ctx.close()


@app.command("show")
def entities_show(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="Entity type code")],
) -> None:
    """Show an entity type and its fields."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        formatter.print_entity_type(cli_ctx.get_domain().entity_type(code))
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e
    finally:
        cli_ctx.close()


@app.command("rename")
def entities_rename(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="Current entity type code")],
    new_code: Annotated[str, typer.Argument(help="New entity type code")],
) -> None:
    """Rename an entity type's code.

    Examples:

        bureaucrat entities rename user person
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        domain = cli_ctx.get_domain()
        # Make sure the entity type is persisted before editing it
        domain.entity_type(code)
        renamed = domain.metadata_store.rename_entity_type(code, new_code)
        domain.invalidate()
        formatter.print_success(
            f"Entity type renamed: {code} → {renamed.code}",
            {"code": renamed.code, "table": renamed.table},
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e
    finally:
        cli_ctx.close()


@app.command("rename-field")
def entities_rename_field(
    ctx: typer.Context,
    code: Annotated[str, typer.Argument(help="Entity type code")],
    field_code: Annotated[str, typer.Argument(help="Current field code")],
    new_code: Annotated[str, typer.Argument(help="New field code")],
) -> None:
    """Rename a field's code. The physical column is unchanged.

    Examples:

        bureaucrat entities rename-field user first_name firstName
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        domain = cli_ctx.get_domain()
        domain.entity_type(code)
        renamed = domain.metadata_store.rename_field(code, field_code, new_code)
        domain.invalidate()
        formatter.print_success(
            f"Field renamed: {code}.{field_code} → {code}.{new_code}",
            {"fields": renamed.field_codes},
        )
    except Exception as e:
        formatter.print_error(e)
        raise typer.Exit(code=1) from e
    finally:
        cli_ctx.close()
