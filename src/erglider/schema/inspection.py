"""Database inspection: schema defaults, size summary, and per-table statistics."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from rich.console import Console

from erglider.global_models import MetadataStage
from erglider.schema.extractor import run_stage
from erglider.schema.queries import schema_query, summary_query, table_stats_query
from erglider.sources.base import MetadataSource
from erglider.utils.identifiers import escape_literal, validate_identifier
from erglider.utils.tabular import row_value

_NULL_MARKERS = {"", "NULL"}


def _optional_text(value: str) -> Optional[str]:
    return None if value in _NULL_MARKERS else value


def _optional_int(value: str) -> Optional[int]:
    if value in _NULL_MARKERS:
        return None
    try:
        return int(float(value))
    except ValueError:
        return None


def _optional_float(value: str) -> Optional[float]:
    if value in _NULL_MARKERS:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class TableStats(BaseModel):
    """Storage statistics for one table."""

    name: str
    engine: Optional[str] = None
    estimated_rows: Optional[int] = None
    size_mb: Optional[float] = None
    create_time: Optional[str] = None
    update_time: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Dict[str, str]) -> "TableStats":
        return cls(
            name=row_value(row, "TABLE_NAME"),
            engine=_optional_text(row_value(row, "ENGINE")),
            estimated_rows=_optional_int(row_value(row, "TABLE_ROWS")),
            size_mb=_optional_float(row_value(row, "size_mb")),
            create_time=_optional_text(row_value(row, "CREATE_TIME")),
            update_time=_optional_text(row_value(row, "UPDATE_TIME")),
        )


class DatabaseInspection(BaseModel):
    """Summary of one database as reported by information_schema."""

    database: str
    charset: Optional[str] = Field(None, description="Default character set")
    collation: Optional[str] = Field(None, description="Default collation")
    table_count: int = 0
    estimated_rows: Optional[int] = None
    total_size_mb: Optional[float] = None
    tables: List[TableStats] = Field(default_factory=list)

    @property
    def exists(self) -> bool:
        """True if the catalog reported schema defaults for the database."""
        return self.charset is not None or self.collation is not None


def inspect_database(
    source: MetadataSource,
    database: str,
    console: Optional[Console] = None,
) -> DatabaseInspection:
    """
    Collect schema defaults, a size summary, and table statistics.

    Args:
        source: Configured metadata source
        database: Schema to inspect
        console: Rich console for progress output

    Returns:
        DatabaseInspection; charset and collation are None if the schema
        does not exist

    Raises:
        InvalidIdentifierError: If the database name is invalid
        SourceError: If a metadata query failed
    """
    validate_identifier(database, "database")
    schema_literal = escape_literal(database)

    schema_rows = run_stage(
        source, MetadataStage.SCHEMA, schema_query(schema_literal), console=console
    )
    summary_rows = run_stage(
        source, MetadataStage.SUMMARY, summary_query(schema_literal), console=console
    )
    stats_rows = run_stage(
        source,
        MetadataStage.TABLE_STATS,
        table_stats_query(schema_literal),
        console=console,
    )

    inspection = DatabaseInspection(database=database)

    if schema_rows:
        inspection.charset = _optional_text(row_value(schema_rows[0], "charset_name"))
        inspection.collation = _optional_text(
            row_value(schema_rows[0], "collation_name")
        )

    if summary_rows:
        summary = summary_rows[0]
        inspection.table_count = _optional_int(row_value(summary, "table_count")) or 0
        inspection.estimated_rows = _optional_int(row_value(summary, "estimated_rows"))
        inspection.total_size_mb = _optional_float(row_value(summary, "total_size_mb"))

    inspection.tables = [
        stats
        for stats in (TableStats.from_mapping(row) for row in stats_rows)
        if stats.name
    ]
    return inspection
