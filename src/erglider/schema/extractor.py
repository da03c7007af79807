"""Catalog extraction: run the staged metadata queries and build a SchemaGraph."""

from typing import Dict, Iterable, List, Optional

from rich.console import Console

from erglider.global_models import MetadataStage
from erglider.schema.builder import SchemaGraphBuilder
from erglider.schema.models import SchemaGraph
from erglider.schema.queries import (
    build_in_clause,
    columns_query,
    foreign_keys_query,
    tables_query,
)
from erglider.sources.base import MetadataSource
from erglider.utils.identifiers import escape_literal, validate_identifier
from erglider.utils.tabular import parse_tabular_output

Rows = List[Dict[str, str]]


def run_stage(
    source: MetadataSource,
    stage: MetadataStage,
    sql: str,
    console: Optional[Console] = None,
) -> Rows:
    """Run one catalog query and parse its output into rows.

    Args:
        source: Metadata source to query.
        stage: Stage tag passed through to the source.
        sql: Query text.
        console: Rich console for progress output.

    Returns:
        Parsed rows, possibly empty.

    Raises:
        SourceError: Propagated unchanged from the source.
    """
    if console is None:
        console = Console(stderr=True)

    console.print(f"[blue]Querying {stage.value.replace('_', ' ')}[/blue]")
    rows = parse_tabular_output(source.run_query(sql, stage))
    console.print(f"[blue]{len(rows)} row(s)[/blue]")
    return rows


def extract_schema_graph(
    source: MetadataSource,
    database: str,
    tables: Optional[Iterable[str]] = None,
    console: Optional[Console] = None,
) -> SchemaGraph:
    """Read tables, columns, and foreign keys for one schema.

    All names are validated before the first query is issued. The table
    query runs first; the column and foreign-key queries are then bounded
    by the table set it returned.

    Args:
        source: Configured metadata source.
        database: Schema to read.
        tables: Optional table names to restrict the diagram to.
        console: Rich console for output. Uses stderr if not provided.

    Returns:
        SchemaGraph for the schema.

    Raises:
        InvalidIdentifierError: If the database or a table name is invalid.
        SchemaNotFoundError: If no tables were found.
        SourceError: If a metadata query failed.
    """
    if console is None:
        console = Console(stderr=True)

    validate_identifier(database, "database")
    builder = SchemaGraphBuilder(database, table_filter=tables, console=console)
    schema_literal = escape_literal(database)

    table_rows = run_stage(
        source,
        MetadataStage.TABLES,
        tables_query(schema_literal, build_in_clause("TABLE_NAME", builder.table_filter)),
        console=console,
    )
    table_names = builder.add_tables(table_rows).ensure_tables()

    column_rows = run_stage(
        source,
        MetadataStage.COLUMNS,
        columns_query(schema_literal, build_in_clause("TABLE_NAME", table_names)),
        console=console,
    )
    fk_rows = run_stage(
        source,
        MetadataStage.FOREIGN_KEYS,
        foreign_keys_query(
            schema_literal, build_in_clause("kcu.TABLE_NAME", table_names)
        ),
        console=console,
    )

    graph = builder.add_columns(column_rows).add_foreign_keys(fk_rows).build()
    console.print(
        f"[blue]Schema resolved for {len(graph.tables)} table(s), "
        f"{len(graph.foreign_keys)} relationship(s)[/blue]"
    )
    return graph
