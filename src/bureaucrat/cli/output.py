"""Output formatting for CLI commands."""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bureaucrat.core.types import EntityMeta
from bureaucrat.exceptions import BureaucratError

console = Console()


class OutputFormatter:
    """Formats output for terminal or JSON mode."""

    def __init__(self, json_mode: bool = False) -> None:
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode

    def print_table(
        self,
        title: str,
        data: list[dict[str, Any]],
        columns: list[str],
    ) -> None:
        """Print data as Rich table or JSON array.

        Args:
            title: Table title
            data: List of row dictionaries
            columns: Column names to display
        """
        if self.json_mode:
            print(json.dumps(data, default=str, indent=2))
        else:
            table = Table(title=title, show_header=True, header_style="bold magenta")
            for col in columns:
                table.add_column(col)
            for row in data:
                table.add_row(*["" if row.get(col) is None else str(row[col]) for col in columns])
            console.print(table)

    def print_entity_type(self, entity_type: EntityMeta) -> None:
        """Print an entity type with its fields.

        Args:
            entity_type: Entity type to display
        """
        if self.json_mode:
            print(json.dumps(entity_type.model_dump(mode="json"), indent=2))
            return

        console.print(f"\n[bold]Entity:[/bold] {entity_type.name} ({entity_type.code})")
        console.print(f"Table: {entity_type.table}")
        if entity_type.title_format.title:
            console.print(f"Title: {entity_type.title_format.title}")
        if entity_type.title_format.subtitle:
            console.print(f"Subtitle: {entity_type.title_format.subtitle}")

        console.print(f"\n[bold]Fields ({len(entity_type.fields)}):[/bold]")
        fields_table = Table(show_header=True, header_style="bold cyan")
        for col in ("Code", "Column", "Name", "Type", "Id", "Hidden", "Mandatory", "Generated"):
            fields_table.add_column(col)
        fields_table.add_column("Placeholder", style="dim")

        for f in entity_type.fields:
            fields_table.add_row(
                f.code,
                f.column,
                f.name,
                str(f.type),
                "✓" if f.identifier else "",
                "✓" if f.hidden else "",
                "✓" if f.mandatory else "",
                "✓" if f.generated else "",
                f.placeholder or "",
            )
        console.print(fields_table)

    def print_success(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Print success message.

        Args:
            message: Success message
            details: Optional details to display
        """
        if self.json_mode:
            output = {"success": True, "message": message}
            if details:
                output.update(details)
            print(json.dumps(output, default=str, indent=2))
        else:
            console.print(f"✓ {message}", style="green")
            if details:
                for key, value in details.items():
                    console.print(f"  {key}: {value}", style="dim")

    def print_error(self, error: Exception) -> None:
        """Print error message.

        Args:
            error: Exception to display
        """
        if self.json_mode:
            if isinstance(error, BureaucratError):
                print(json.dumps(error.to_dict(), default=str, indent=2))
            else:
                print(json.dumps({"error": str(error)}, indent=2))
        else:
            error_text = str(error)
            # Include context for library errors
            if isinstance(error, BureaucratError) and error.context:
                context_str = "\n".join(f"{k}: {v}" for k, v in error.context.items())
                error_text = f"{error_text}\n\n{context_str}"

            panel = Panel(
                error_text,
                title="[red]Error[/red]",
                border_style="red",
            )
            console.print(panel)

    def print_data(self, data: Any) -> None:
        """Print generic data (dict, list, etc.).

        Args:
            data: Data to print
        """
        if self.json_mode:
            print(json.dumps(data, default=str, indent=2))
        else:
            console.print(data)
