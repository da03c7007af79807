"""CLI entry point for ER Glider."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from erglider.diagram.formatters import DiagramOptions, OutputWriter, format_diagram
from erglider.global_models import OutputFormat, RelationDirection
from erglider.schema.builder import SchemaNotFoundError
from erglider.schema.extractor import extract_schema_graph
from erglider.schema.inspection import DatabaseInspection, inspect_database
from erglider.schema.query import RelatedTablesResult, SchemaQuerier
from erglider.sources import MetadataSource, SourceError, get_source, list_sources
from erglider.utils.config import ConfigSettings, load_config
from erglider.utils.identifiers import InvalidIdentifierError, parse_identifier_list

app = typer.Typer(
    name="erglider",
    help="Mermaid ER diagrams and schema inspection from a live database catalog.",
    invoke_without_command=False,
)
console = Console()
err_console = Console(stderr=True)

DEFAULT_SOURCE = "mysql"

SOURCE_HELP = "Metadata source: 'mysql' or 'snapshot' (default: mysql, or from config)"


def _resolve_source(
    config: ConfigSettings,
    source_name: Optional[str],
    snapshot_dir: Optional[Path],
    host: Optional[str],
    port: Optional[int],
    user: Optional[str],
    password: Optional[str],
) -> MetadataSource:
    """Create and configure the metadata source.

    Priority: CLI options > erglider.toml > environment/defaults. Passing
    --snapshot-dir without --source selects the snapshot source.
    """
    if source_name is None and snapshot_dir is not None:
        source_name = "snapshot"
    source_name = source_name or config.source_type or DEFAULT_SOURCE

    source_config: Dict[str, Any] = (
        config.source.for_source(source_name) if config.source else {}
    )
    overrides = {
        "directory": str(snapshot_dir) if snapshot_dir else None,
        "host": host,
        "port": port,
        "user": user,
        "password": password,
    }
    source_config.update({k: v for k, v in overrides.items() if v is not None})

    source = get_source(source_name)
    source.configure(source_config)
    return source


def _resolve_tables(tables: Optional[str], config: ConfigSettings) -> List[str]:
    if tables is not None:
        return parse_identifier_list(tables, "tables")
    return parse_identifier_list(",".join(config.tables or []), "tables")


def _first_set(*values: Optional[bool]) -> bool:
    for value in values:
        if value is not None:
            return value
    return True


@app.callback()
def main():
    """ER Glider - schema diagrams from information_schema."""
    pass


@app.command()
def diagram(
    database: str = typer.Argument(..., help="Database (schema) to diagram"),
    tables: Optional[str] = typer.Option(
        None,
        "--tables",
        "-t",
        help="Comma-separated table names to include (default: all tables)",
    ),
    show_columns: Optional[bool] = typer.Option(
        None,
        "--show-columns/--no-show-columns",
        help="Emit an attribute block per table (default: on)",
    ),
    show_types: Optional[bool] = typer.Option(
        None,
        "--show-types/--no-show-types",
        help="Show declared column types instead of 'string' (default: on)",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output-format",
        "-f",
        help="Output format: 'mermaid', 'markdown', or 'json' (default: mermaid, or from config)",
    ),
    output_file: Optional[Path] = typer.Option(
        None,
        "--output-file",
        "-o",
        help="Write output to file instead of stdout",
    ),
    source: Optional[str] = typer.Option(None, "--source", "-s", help=SOURCE_HELP),
    snapshot_dir: Optional[Path] = typer.Option(
        None,
        "--snapshot-dir",
        help="Directory of captured catalog output (implies --source snapshot)",
    ),
    host: Optional[str] = typer.Option(None, "--host", help="MySQL host"),
    port: Optional[int] = typer.Option(None, "--port", help="MySQL port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="MySQL user"),
    password: Optional[str] = typer.Option(None, "--password", help="MySQL password"),
) -> None:
    """
    Generate a Mermaid ER diagram from a database's catalog.

    Configuration can be set in erglider.toml in the current directory.
    CLI arguments override configuration file values.

    Examples:

        # Diagram every table
        erglider diagram shop

        # Only some tables, names only
        erglider diagram shop --tables users,orders --no-show-types

        # Markdown-fenced output to a file
        erglider diagram shop -f markdown -o docs/schema.md

        # From captured catalog output
        erglider diagram shop --snapshot-dir ./catalog_dump
    """
    config = load_config()

    output_format = output_format or config.output_format or OutputFormat.MERMAID.value
    valid_formats = [f.value for f in OutputFormat]
    if output_format not in valid_formats:
        err_console.print(
            f"[red]Error:[/red] Invalid output format '{output_format}'. "
            f"Use {', '.join(repr(f) for f in valid_formats)}."
        )
        raise typer.Exit(1)

    options = DiagramOptions(
        show_columns=_first_set(show_columns, config.show_columns),
        show_types=_first_set(show_types, config.show_types),
    )

    try:
        table_filter = _resolve_tables(tables, config)
        metadata_source = _resolve_source(
            config, source, snapshot_dir, host, port, user, password
        )
        graph = extract_schema_graph(
            metadata_source, database.strip(), tables=table_filter, console=err_console
        )

        formatted = format_diagram(graph, OutputFormat(output_format), options)
        OutputWriter.write(formatted, output_file)
        if output_file:
            console.print(
                f"[green]Success:[/green] Diagram written to {output_file} "
                f"({len(graph.tables)} tables, {len(graph.foreign_keys)} relationships)"
            )

    except InvalidIdentifierError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except SchemaNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except SourceError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except Exception as e:
        err_console.print(f"[red]Error:[/red] Unexpected error: {e}")
        raise typer.Exit(1)


@app.command()
def inspect(
    database: str = typer.Argument(..., help="Database (schema) to inspect"),
    output_format: str = typer.Option(
        "text",
        "--output-format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
    source: Optional[str] = typer.Option(None, "--source", "-s", help=SOURCE_HELP),
    snapshot_dir: Optional[Path] = typer.Option(
        None,
        "--snapshot-dir",
        help="Directory of captured catalog output (implies --source snapshot)",
    ),
    host: Optional[str] = typer.Option(None, "--host", help="MySQL host"),
    port: Optional[int] = typer.Option(None, "--port", help="MySQL port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="MySQL user"),
    password: Optional[str] = typer.Option(None, "--password", help="MySQL password"),
) -> None:
    """
    Show character set, size summary, and per-table statistics for a database.

    Examples:

        erglider inspect shop

        erglider inspect shop -f json
    """
    if output_format not in ["text", "json"]:
        err_console.print(
            f"[red]Error:[/red] Invalid output format '{output_format}'. "
            "Use 'text' or 'json'."
        )
        raise typer.Exit(1)

    config = load_config()

    try:
        metadata_source = _resolve_source(
            config, source, snapshot_dir, host, port, user, password
        )
        inspection = inspect_database(
            metadata_source, database.strip(), console=err_console
        )

        if output_format == "json":
            print(inspection.model_dump_json(indent=2))
        else:
            _format_inspection_text(inspection)

    except InvalidIdentifierError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except SourceError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except Exception as e:
        err_console.print(f"[red]Error:[/red] Unexpected error: {e}")
        raise typer.Exit(1)


@app.command()
def related(
    database: str = typer.Argument(..., help="Database (schema) to query"),
    table: str = typer.Option(..., "--table", help="Table to find relations for"),
    direction: str = typer.Option(
        RelationDirection.PARENTS.value,
        "--direction",
        "-d",
        help="'parents' (tables it references) or 'children' (tables referencing it)",
    ),
    tables: Optional[str] = typer.Option(
        None,
        "--tables",
        "-t",
        help="Comma-separated table names to load (default: all tables)",
    ),
    output_format: str = typer.Option(
        "text",
        "--output-format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
    source: Optional[str] = typer.Option(None, "--source", "-s", help=SOURCE_HELP),
    snapshot_dir: Optional[Path] = typer.Option(
        None,
        "--snapshot-dir",
        help="Directory of captured catalog output (implies --source snapshot)",
    ),
    host: Optional[str] = typer.Option(None, "--host", help="MySQL host"),
    port: Optional[int] = typer.Option(None, "--port", help="MySQL port"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="MySQL user"),
    password: Optional[str] = typer.Option(None, "--password", help="MySQL password"),
) -> None:
    """
    List tables connected to a table through foreign keys.

    Examples:

        # Tables that order_items depends on
        erglider related shop --table order_items

        # Tables that depend on users
        erglider related shop --table users --direction children
    """
    valid_directions = [d.value for d in RelationDirection]
    if direction not in valid_directions:
        err_console.print(
            f"[red]Error:[/red] Invalid direction '{direction}'. "
            "Use 'parents' or 'children'."
        )
        raise typer.Exit(1)

    if output_format not in ["text", "json"]:
        err_console.print(
            f"[red]Error:[/red] Invalid output format '{output_format}'. "
            "Use 'text' or 'json'."
        )
        raise typer.Exit(1)

    config = load_config()

    try:
        table_filter = _resolve_tables(tables, config)
        metadata_source = _resolve_source(
            config, source, snapshot_dir, host, port, user, password
        )
        graph = extract_schema_graph(
            metadata_source, database.strip(), tables=table_filter, console=err_console
        )

        querier = SchemaQuerier(graph)
        if direction == RelationDirection.PARENTS.value:
            result = querier.find_parents(table)
        else:
            result = querier.find_children(table)

        if output_format == "json":
            print(result.model_dump_json(indent=2))
        else:
            _format_related_text(result)

    except InvalidIdentifierError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except SchemaNotFoundError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except SourceError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except Exception as e:
        err_console.print(f"[red]Error:[/red] Unexpected error: {e}")
        raise typer.Exit(1)


@app.command("sources")
def sources_command() -> None:
    """List available metadata sources."""
    names = list_sources()
    if not names:
        console.print("[yellow]No metadata sources installed.[/yellow]")
        return
    for name in names:
        console.print(name)


def _format_inspection_text(inspection: DatabaseInspection) -> None:
    """Print an inspection as Rich tables."""
    console.print(f"[bold]Database inspection: {inspection.database}[/bold]")

    if not inspection.exists:
        console.print("[yellow]No schema metadata found[/yellow]")
    else:
        console.print(
            f"Charset: {inspection.charset or '-'}  "
            f"Collation: {inspection.collation or '-'}"
        )

    console.print(
        f"Tables: {inspection.table_count}  "
        f"Estimated rows: {inspection.estimated_rows if inspection.estimated_rows is not None else '-'}  "
        f"Size: {inspection.total_size_mb if inspection.total_size_mb is not None else '-'} MB"
    )

    if not inspection.tables:
        console.print("[yellow]No tables found[/yellow]")
        return

    table = Table(title="Tables")
    table.add_column("Table", style="cyan")
    table.add_column("Engine", style="green")
    table.add_column("Rows", style="yellow", justify="right")
    table.add_column("Size (MB)", style="yellow", justify="right")
    table.add_column("Created", style="dim")
    table.add_column("Updated", style="dim")

    for stats in inspection.tables:
        table.add_row(
            stats.name,
            stats.engine or "",
            "" if stats.estimated_rows is None else str(stats.estimated_rows),
            "" if stats.size_mb is None else f"{stats.size_mb:.2f}",
            stats.create_time or "",
            stats.update_time or "",
        )

    console.print(table)


def _format_related_text(result: RelatedTablesResult) -> None:
    """Print a related-table result as a Rich table."""
    label = (
        "Referenced tables"
        if result.direction == RelationDirection.PARENTS
        else "Referencing tables"
    )

    if len(result) == 0:
        console.print(f"[yellow]No {label.lower()} found for '{result.table}'[/yellow]")
        return

    table = Table(title=f"{label} for '{result.table}'")
    table.add_column("Table", style="cyan")
    table.add_column("Hops", style="yellow", justify="right")
    table.add_column("In diagram", style="green")

    for item in result.related:
        table.add_row(item.name, str(item.hops), "yes" if item.in_graph else "no")

    console.print(table)
    console.print(f"\n[dim]Total: {len(result)} table(s)[/dim]")


if __name__ == "__main__":
    app()
