"""Mermaid ER diagram formatters for schema graphs."""

import re
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from erglider.global_models import OutputFormat
from erglider.schema.models import ColumnDescriptor, SchemaGraph

DIAGRAM_KIND = "erDiagram"

# Parent side is always exactly one; child side is zero-or-many. The child
# arm is mandatory when the foreign key column is NOT NULL.
MANDATORY_CARDINALITY = "||--o{"
OPTIONAL_CARDINALITY = "|o--o{"

FALLBACK_TYPE = "string"

_UNSAFE_TYPE_CHARS = re.compile(r"[^A-Za-z0-9_]")


def normalize_type(column_type: str) -> str:
    """Reduce a declared column type to a single Mermaid-safe token.

    Takes the first whitespace-separated word, lower-cases it, and drops any
    character outside ``[A-Za-z0-9_]``.

    Args:
        column_type: Raw type, e.g. ``"int(10) unsigned"``

    Returns:
        Type token, e.g. ``"int10"``; ``"string"`` if nothing usable remains
    """
    words = column_type.split()
    if not words:
        return FALLBACK_TYPE
    token = _UNSAFE_TYPE_CHARS.sub("", words[0]).lower()
    return token or FALLBACK_TYPE


def relationship_cardinality(nullable: Optional[bool]) -> str:
    """Return the relationship symbol for a child column's nullability."""
    if nullable is False:
        return MANDATORY_CARDINALITY
    return OPTIONAL_CARDINALITY


class DiagramOptions(BaseModel):
    """Rendering options for ER diagrams."""

    show_columns: bool = Field(True, description="Emit an attribute block per table")
    show_types: bool = Field(True, description="Use declared types instead of 'string'")


class DiagramResult(BaseModel):
    """A generated diagram with summary information."""

    database: str
    tables: List[str] = Field(default_factory=list)
    table_count: int = 0
    relationship_count: int = 0
    mermaid: str


def _column_line(
    column: ColumnDescriptor, is_foreign_key: bool, show_types: bool
) -> str:
    type_token = normalize_type(column.data_type) if show_types else FALLBACK_TYPE
    keys = []
    if column.is_primary_key:
        keys.append("PK")
    if is_foreign_key:
        keys.append("FK")
    suffix = f" {', '.join(keys)}" if keys else ""
    return f"        {type_token} {column.name}{suffix}"


class MermaidErFormatter:
    """Format schema graphs as Mermaid erDiagram text."""

    @staticmethod
    def format(graph: SchemaGraph, options: Optional[DiagramOptions] = None) -> str:
        """Format a schema graph as a Mermaid ER diagram.

        Tables are emitted in graph order with columns in declaration order.
        Relationships are emitted in the order the foreign keys were found,
        from parent table to child table, labelled with the child column.

        Args:
            graph: SchemaGraph to render
            options: Rendering options (defaults: columns and types shown)

        Returns:
            Mermaid diagram string, starting with a ``%% database:`` comment
        """
        options = options or DiagramOptions()
        lines = [f"%% database: {graph.database}", DIAGRAM_KIND]

        if options.show_columns:
            fk_columns = graph.foreign_key_columns()
            for table in graph.tables:
                lines.append(f"    {table.name} {{")
                for column in table.columns:
                    lines.append(
                        _column_line(
                            column,
                            (table.name, column.name) in fk_columns,
                            options.show_types,
                        )
                    )
                lines.append("    }")

        for fk in graph.foreign_keys:
            cardinality = relationship_cardinality(
                graph.column_nullable(fk.child_table, fk.child_column)
            )
            lines.append(
                f'    {fk.parent_table} {cardinality} {fk.child_table} : "{fk.child_column}"'
            )

        return "\n".join(lines)


class MermaidMarkdownFormatter:
    """Format schema graphs as Mermaid ER diagrams wrapped in markdown code fences."""

    @staticmethod
    def format(graph: SchemaGraph, options: Optional[DiagramOptions] = None) -> str:
        mermaid = MermaidErFormatter.format(graph, options)
        return f"```mermaid\n{mermaid}\n```"


class JsonFormatter:
    """Format schema graphs as a JSON DiagramResult."""

    @staticmethod
    def build_result(
        graph: SchemaGraph, options: Optional[DiagramOptions] = None
    ) -> DiagramResult:
        return DiagramResult(
            database=graph.database,
            tables=graph.table_names,
            table_count=len(graph.tables),
            relationship_count=len(graph.foreign_keys),
            mermaid=MermaidErFormatter.format(graph, options),
        )

    @staticmethod
    def format(graph: SchemaGraph, options: Optional[DiagramOptions] = None) -> str:
        return JsonFormatter.build_result(graph, options).model_dump_json(indent=2)


def format_diagram(
    graph: SchemaGraph,
    output_format: OutputFormat = OutputFormat.MERMAID,
    options: Optional[DiagramOptions] = None,
) -> str:
    """Render a schema graph in the requested output format."""
    if output_format == OutputFormat.MARKDOWN:
        return MermaidMarkdownFormatter.format(graph, options)
    if output_format == OutputFormat.JSON:
        return JsonFormatter.format(graph, options)
    return MermaidErFormatter.format(graph, options)


class OutputWriter:
    """Write formatted output to file or stdout."""

    @staticmethod
    def write(content: str, output_file: Optional[Path] = None) -> None:
        """
        Write content to file or stdout.

        Args:
            content: The content to write
            output_file: Optional file path. If None, writes to stdout.
        """
        if output_file:
            output_file.write_text(content + "\n", encoding="utf-8")
        else:
            print(content)
