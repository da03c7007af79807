"""Schema graph builder for assembling catalog rows into a SchemaGraph."""

from typing import Dict, Iterable, List, Optional, Set, Tuple

from rich.console import Console

from erglider.schema.models import (
    ColumnDescriptor,
    ColumnRow,
    ForeignKeyEdge,
    ForeignKeyRow,
    SchemaGraph,
    TableDefinition,
    TableRow,
)
from erglider.utils.identifiers import validate_identifier

Row = Dict[str, str]


class SchemaNotFoundError(LookupError):
    """Raised when no tables remain to be diagrammed."""

    pass


class SchemaGraphBuilder:
    """Build a SchemaGraph from parsed catalog rows.

    Rows are added in pipeline order: tables first, then columns and foreign
    keys. Table order is fixed by the first-seen order of the table rows and
    is never re-sorted.

    Example:
        >>> graph = (
        ...     SchemaGraphBuilder("shop")
        ...     .add_tables(table_rows)
        ...     .add_columns(column_rows)
        ...     .add_foreign_keys(fk_rows)
        ...     .build()
        ... )
    """

    def __init__(
        self,
        database: str,
        table_filter: Optional[Iterable[str]] = None,
        console: Optional[Console] = None,
    ):
        """
        Initialize the builder.

        Args:
            database: Schema name the rows belong to
            table_filter: Optional table names to keep. Each entry is validated
                as an identifier immediately.
            console: Rich console for warnings. Uses stderr if not provided.

        Raises:
            InvalidIdentifierError: If the database or any filter entry is invalid
        """
        self.database = validate_identifier(database, "database")
        self.console = console or Console(stderr=True)

        self._table_filter: List[str] = []
        for name in table_filter or []:
            validate_identifier(name, "tables")
            if name not in self._table_filter:
                self._table_filter.append(name)

        self._table_names: List[str] = []
        self._columns: Dict[str, List[ColumnDescriptor]] = {}
        self._column_keys: Set[Tuple[str, str]] = set()
        self._edges: List[ForeignKeyEdge] = []
        self._edge_set: Set[ForeignKeyEdge] = set()
        self._skipped_edges: List[ForeignKeyEdge] = []

    @property
    def table_filter(self) -> List[str]:
        """Validated table filter, empty when no filter was given."""
        return list(self._table_filter)

    @property
    def table_names(self) -> List[str]:
        """Resolved table names in first-seen order."""
        return list(self._table_names)

    @property
    def skipped_edges(self) -> List[ForeignKeyEdge]:
        """Foreign keys dropped because their child table is not in the table set."""
        return list(self._skipped_edges)

    def add_tables(self, rows: Iterable[Row]) -> "SchemaGraphBuilder":
        """
        Add rows from the table-list query.

        Rows with an empty name are ignored, duplicates keep their first
        position, and the table filter (if any) is applied. Filter matching
        ignores case, as the server does with ``lower_case_table_names``;
        the catalog's spelling is the one kept.

        Returns:
            self for method chaining
        """
        allowed = {name.casefold() for name in self._table_filter}
        for row in rows:
            name = TableRow.from_mapping(row).table_name
            if not name or name in self._columns:
                continue
            if allowed and name.casefold() not in allowed:
                continue
            self._table_names.append(name)
            self._columns[name] = []
        return self

    def ensure_tables(self) -> List[str]:
        """
        Return the resolved table names, failing if there are none.

        Raises:
            SchemaNotFoundError: If no tables were found (or none matched the filter)
        """
        if not self._table_names:
            if self._table_filter:
                raise SchemaNotFoundError(
                    f"No tables found in database {self.database} matching: "
                    f"{', '.join(self._table_filter)}"
                )
            raise SchemaNotFoundError(f"No tables found in database {self.database}")
        return self.table_names

    def add_columns(self, rows: Iterable[Row]) -> "SchemaGraphBuilder":
        """
        Add rows from the column query.

        Rows must arrive in ordinal position order per table; that order is
        kept. Rows without a table or column name, rows for unknown tables,
        and repeated (table, column) pairs are ignored.

        Returns:
            self for method chaining
        """
        for row in rows:
            column_row = ColumnRow.from_mapping(row)
            table, column = column_row.table_name, column_row.column_name
            if not table or not column or table not in self._columns:
                continue
            if (table, column) in self._column_keys:
                continue
            self._columns[table].append(ColumnDescriptor.from_row(column_row))
            self._column_keys.add((table, column))
        return self

    def add_foreign_keys(self, rows: Iterable[Row]) -> "SchemaGraphBuilder":
        """
        Add rows from the foreign-key query.

        Incomplete rows are ignored. Edges whose child table is outside the
        table set are skipped. Edges whose parent table is outside the set,
        or whose child column was not reported by the column query, are kept.

        Returns:
            self for method chaining
        """
        for row in rows:
            fk_row = ForeignKeyRow.from_mapping(row)
            if not fk_row.is_complete:
                continue

            edge = ForeignKeyEdge.from_row(fk_row)
            if edge.child_table not in self._columns:
                self._skipped_edges.append(edge)
                continue
            if edge in self._edge_set:
                continue

            self._edges.append(edge)
            self._edge_set.add(edge)
        return self

    def build(self) -> SchemaGraph:
        """
        Build and return the final SchemaGraph.

        Raises:
            SchemaNotFoundError: If the table set is empty
        """
        self.ensure_tables()

        if self._skipped_edges:
            self.console.print(
                f"[yellow]Warning:[/yellow] Skipped {len(self._skipped_edges)} "
                "foreign key(s) whose table is not part of the diagram."
            )

        return SchemaGraph(
            database=self.database,
            tables=tuple(
                TableDefinition(name=name, columns=tuple(self._columns[name]))
                for name in self._table_names
            ),
            foreign_keys=tuple(self._edges),
        )


def build_schema_graph(
    database: str,
    table_rows: Iterable[Row],
    column_rows: Iterable[Row],
    fk_rows: Iterable[Row],
    table_filter: Optional[Iterable[str]] = None,
    console: Optional[Console] = None,
) -> SchemaGraph:
    """Build a SchemaGraph from the three parsed row sets in one call."""
    return (
        SchemaGraphBuilder(database, table_filter=table_filter, console=console)
        .add_tables(table_rows)
        .add_columns(column_rows)
        .add_foreign_keys(fk_rows)
        .build()
    )
