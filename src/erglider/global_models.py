"""Shared models and enums used across erglider modules."""

from enum import Enum


class MetadataStage(str, Enum):
    """Catalog query stage a metadata request belongs to.

    The diagram pipeline runs TABLES first; COLUMNS and FOREIGN_KEYS are
    bounded by the table set it returns. The remaining stages are used by
    database inspection.
    """

    TABLES = "tables"
    COLUMNS = "columns"
    FOREIGN_KEYS = "foreign_keys"
    SCHEMA = "schema"
    SUMMARY = "summary"
    TABLE_STATS = "table_stats"


class OutputFormat(str, Enum):
    """Output format for generated diagrams."""

    MERMAID = "mermaid"
    MARKDOWN = "markdown"
    JSON = "json"


class RelationDirection(str, Enum):
    """Direction for related-table queries."""

    PARENTS = "parents"
    CHILDREN = "children"
