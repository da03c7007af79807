"""Catalog query text for information_schema.

Every value interpolated here is an escaped literal. User-supplied names are
checked against the identifier allow-list before they get here; names read
back from the catalog (which MySQL allows to contain ``-`` or non-ASCII
letters) are only escaped.
"""

from typing import Iterable

from erglider.utils.identifiers import escape_literal


def build_in_clause(column: str, values: Iterable[str]) -> str:
    """
    Build an ``AND <column> IN (...)`` filter clause.

    Args:
        column: Catalog column to filter on (a fixed name, not user input)
        values: Table names, each quoted with escape_literal

    Returns:
        The clause with a leading space, or an empty string if there are no values
    """
    names = list(values)
    if not names:
        return ""
    literals = ", ".join(escape_literal(name) for name in names)
    return f" AND {column} IN ({literals})"


def tables_query(schema_literal: str, table_clause: str = "") -> str:
    return f"""
SELECT TABLE_NAME
FROM information_schema.TABLES
WHERE TABLE_SCHEMA = {schema_literal}
  AND TABLE_TYPE = 'BASE TABLE'{table_clause}
ORDER BY TABLE_NAME
"""


def columns_query(schema_literal: str, table_clause: str = "") -> str:
    return f"""
SELECT TABLE_NAME, COLUMN_NAME, COLUMN_TYPE, IS_NULLABLE, COLUMN_KEY
FROM information_schema.COLUMNS
WHERE TABLE_SCHEMA = {schema_literal}{table_clause}
ORDER BY TABLE_NAME, ORDINAL_POSITION
"""


def foreign_keys_query(schema_literal: str, table_clause: str = "") -> str:
    return f"""
SELECT
  kcu.TABLE_NAME,
  kcu.COLUMN_NAME,
  kcu.REFERENCED_TABLE_NAME,
  kcu.REFERENCED_COLUMN_NAME
FROM information_schema.KEY_COLUMN_USAGE kcu
WHERE kcu.TABLE_SCHEMA = {schema_literal}
  AND kcu.REFERENCED_TABLE_NAME IS NOT NULL{table_clause}
ORDER BY kcu.TABLE_NAME, kcu.COLUMN_NAME
"""


def schema_query(schema_literal: str) -> str:
    return f"""
SELECT
  SCHEMA_NAME AS database_name,
  DEFAULT_CHARACTER_SET_NAME AS charset_name,
  DEFAULT_COLLATION_NAME AS collation_name
FROM information_schema.SCHEMATA
WHERE SCHEMA_NAME = {schema_literal}
"""


def summary_query(schema_literal: str) -> str:
    return f"""
SELECT
  COUNT(*) AS table_count,
  COALESCE(ROUND(SUM(TABLE_ROWS), 0), 0) AS estimated_rows,
  COALESCE(ROUND(SUM(DATA_LENGTH + INDEX_LENGTH) / 1024 / 1024, 2), 0) AS total_size_mb
FROM information_schema.TABLES
WHERE TABLE_SCHEMA = {schema_literal}
"""


def table_stats_query(schema_literal: str) -> str:
    return f"""
SELECT
  TABLE_NAME,
  ENGINE,
  TABLE_ROWS,
  ROUND((DATA_LENGTH + INDEX_LENGTH) / 1024 / 1024, 2) AS size_mb,
  CREATE_TIME,
  UPDATE_TIME
FROM information_schema.TABLES
WHERE TABLE_SCHEMA = {schema_literal}
ORDER BY TABLE_NAME
"""
