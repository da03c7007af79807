"""Pydantic models for catalog rows and the schema graph."""

from typing import Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from erglider.utils.tabular import row_value


def parse_nullable(value: str) -> Optional[bool]:
    """Interpret an IS_NULLABLE value: YES -> True, NO -> False, anything else -> None."""
    normalized = value.strip().upper()
    if normalized == "YES":
        return True
    if normalized == "NO":
        return False
    return None


class TableRow(BaseModel):
    """One row of the table-list query."""

    table_name: str

    @classmethod
    def from_mapping(cls, row: Dict[str, str]) -> "TableRow":
        return cls(table_name=row_value(row, "TABLE_NAME"))


class ColumnRow(BaseModel):
    """One row of the column query."""

    table_name: str
    column_name: str
    column_type: str = ""
    is_nullable: str = ""
    column_key: str = ""

    @classmethod
    def from_mapping(cls, row: Dict[str, str]) -> "ColumnRow":
        return cls(
            table_name=row_value(row, "TABLE_NAME"),
            column_name=row_value(row, "COLUMN_NAME"),
            column_type=row_value(row, "COLUMN_TYPE"),
            is_nullable=row_value(row, "IS_NULLABLE"),
            column_key=row_value(row, "COLUMN_KEY"),
        )


class ForeignKeyRow(BaseModel):
    """One row of the foreign-key query."""

    table_name: str
    column_name: str
    referenced_table_name: str
    referenced_column_name: str

    @classmethod
    def from_mapping(cls, row: Dict[str, str]) -> "ForeignKeyRow":
        return cls(
            table_name=row_value(row, "TABLE_NAME"),
            column_name=row_value(row, "COLUMN_NAME"),
            referenced_table_name=row_value(row, "REFERENCED_TABLE_NAME"),
            referenced_column_name=row_value(row, "REFERENCED_COLUMN_NAME"),
        )

    @property
    def is_complete(self) -> bool:
        """True when all four fields are populated."""
        return all(
            (
                self.table_name,
                self.column_name,
                self.referenced_table_name,
                self.referenced_column_name,
            )
        )


class ColumnDescriptor(BaseModel):
    """A column of a table in the schema graph."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Column name")
    data_type: str = Field("", description="Raw declared type (e.g. 'int(11) unsigned')")
    nullable: Optional[bool] = Field(
        None, description="True if NULL is allowed, None if the catalog did not say"
    )
    is_primary_key: bool = Field(False, description="Column is part of the primary key")

    @classmethod
    def from_row(cls, row: ColumnRow) -> "ColumnDescriptor":
        return cls(
            name=row.column_name,
            data_type=row.column_type,
            nullable=parse_nullable(row.is_nullable),
            is_primary_key=row.column_key.upper() == "PRI",
        )


class TableDefinition(BaseModel):
    """A table and its columns in declaration order."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Table name")
    columns: Tuple[ColumnDescriptor, ...] = Field(
        default=(), description="Columns in ordinal position order"
    )

    def get_column(self, name: str) -> Optional[ColumnDescriptor]:
        for column in self.columns:
            if column.name == name:
                return column
        return None


class ForeignKeyEdge(BaseModel):
    """A foreign key: (child table, child column) references (parent table, parent column)."""

    model_config = ConfigDict(frozen=True)

    child_table: str
    child_column: str
    parent_table: str
    parent_column: str

    @classmethod
    def from_row(cls, row: ForeignKeyRow) -> "ForeignKeyEdge":
        return cls(
            child_table=row.table_name,
            child_column=row.column_name,
            parent_table=row.referenced_table_name,
            parent_column=row.referenced_column_name,
        )


class SchemaGraph(BaseModel):
    """Immutable snapshot of one database schema's tables and foreign keys."""

    model_config = ConfigDict(frozen=True)

    database: str = Field(..., description="Schema the graph was read from")
    tables: Tuple[TableDefinition, ...] = Field(
        default=(), description="Tables in catalog order"
    )
    foreign_keys: Tuple[ForeignKeyEdge, ...] = Field(
        default=(), description="Foreign keys in discovery order"
    )

    @property
    def table_names(self) -> List[str]:
        return [table.name for table in self.tables]

    def get_table(self, name: str) -> Optional[TableDefinition]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def foreign_key_columns(self) -> Set[Tuple[str, str]]:
        """Return (table, column) pairs that are the child side of a foreign key."""
        return {(fk.child_table, fk.child_column) for fk in self.foreign_keys}

    def column_nullable(self, table: str, column: str) -> Optional[bool]:
        """Return the nullability of a column, or None if the column is unknown."""
        table_def = self.get_table(table)
        if table_def is None:
            return None
        column_def = table_def.get_column(column)
        if column_def is None:
            return None
        return column_def.nullable
