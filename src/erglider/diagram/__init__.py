"""ER diagram output for schema graphs."""

from erglider.diagram.formatters import (
    MANDATORY_CARDINALITY,
    OPTIONAL_CARDINALITY,
    DiagramOptions,
    DiagramResult,
    JsonFormatter,
    MermaidErFormatter,
    MermaidMarkdownFormatter,
    OutputWriter,
    format_diagram,
    normalize_type,
)

__all__ = [
    "MANDATORY_CARDINALITY",
    "OPTIONAL_CARDINALITY",
    "DiagramOptions",
    "DiagramResult",
    "JsonFormatter",
    "MermaidErFormatter",
    "MermaidMarkdownFormatter",
    "OutputWriter",
    "format_diagram",
    "normalize_type",
]
