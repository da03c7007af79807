"""Schema introspection: catalog rows to an immutable schema graph."""

from erglider.schema.builder import (
    SchemaGraphBuilder,
    SchemaNotFoundError,
    build_schema_graph,
)
from erglider.schema.extractor import extract_schema_graph
from erglider.schema.inspection import DatabaseInspection, TableStats, inspect_database
from erglider.schema.models import (
    ColumnDescriptor,
    ForeignKeyEdge,
    SchemaGraph,
    TableDefinition,
)
from erglider.schema.query import RelatedTable, RelatedTablesResult, SchemaQuerier

__all__ = [
    # Models
    "ColumnDescriptor",
    "ForeignKeyEdge",
    "SchemaGraph",
    "TableDefinition",
    # Builder
    "SchemaGraphBuilder",
    "SchemaNotFoundError",
    "build_schema_graph",
    # Extraction
    "extract_schema_graph",
    "inspect_database",
    "DatabaseInspection",
    "TableStats",
    # Query
    "SchemaQuerier",
    "RelatedTable",
    "RelatedTablesResult",
]
