"""Related-table queries over the foreign-key graph."""

from typing import Dict, List, Optional, Tuple

import rustworkx as rx
from pydantic import BaseModel, Field

from erglider.global_models import RelationDirection
from erglider.schema.models import SchemaGraph


class RelatedTable(BaseModel):
    """A table reachable from the queried table through foreign keys."""

    name: str = Field(..., description="Table name")
    hops: int = Field(..., description="Foreign keys between this table and the queried one")
    in_graph: bool = Field(
        True, description="False for referenced tables outside the diagrammed set"
    )


class RelatedTablesResult(BaseModel):
    """Result of a related-table query."""

    table: str
    direction: RelationDirection
    related: List[RelatedTable] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.related)


def to_rustworkx(graph: SchemaGraph) -> Tuple[rx.PyDiGraph, Dict[str, int]]:
    """
    Convert a SchemaGraph to a rustworkx PyDiGraph.

    Nodes are tables; each foreign key adds an edge from the child table to
    the parent table. Parent tables that are not part of the graph are added
    as nodes with ``in_graph`` set to False.

    Args:
        graph: SchemaGraph to convert

    Returns:
        Tuple of (PyDiGraph, table_name_to_index_map)
    """
    rx_graph: rx.PyDiGraph = rx.PyDiGraph()
    node_map: Dict[str, int] = {}

    for name in graph.table_names:
        node_map[name] = rx_graph.add_node({"name": name, "in_graph": True})

    for fk in graph.foreign_keys:
        for name in (fk.child_table, fk.parent_table):
            if name not in node_map:
                node_map[name] = rx_graph.add_node({"name": name, "in_graph": False})
        rx_graph.add_edge(
            node_map[fk.child_table], node_map[fk.parent_table], fk.model_dump()
        )

    return rx_graph, node_map


class SchemaQuerier:
    """Find tables related to a given table through foreign keys."""

    def __init__(self, graph: SchemaGraph):
        self.graph = graph
        self.rx_graph, self.node_map = to_rustworkx(graph)
        self._rx_graph_reversed: Optional[rx.PyDiGraph] = None

    @property
    def rx_graph_reversed(self) -> rx.PyDiGraph:
        """Graph with parent -> child edges (created lazily)."""
        if self._rx_graph_reversed is None:
            self._rx_graph_reversed = self.rx_graph.copy()
            self._rx_graph_reversed.reverse()
        return self._rx_graph_reversed

    def _find_table(self, table: str) -> Optional[str]:
        """Case-insensitive table lookup."""
        if table in self.node_map:
            return table
        table_lower = table.lower()
        for name in self.node_map:
            if name.lower() == table_lower:
                return name
        return None

    def _query(
        self, table: str, direction: RelationDirection
    ) -> RelatedTablesResult:
        matched = self._find_table(table)
        if matched is None:
            available = ", ".join(self.list_tables()) or "none"
            raise ValueError(
                f"Table '{table}' not found in schema {self.graph.database}. "
                f"Available tables: {available}"
            )

        graph = (
            self.rx_graph
            if direction == RelationDirection.PARENTS
            else self.rx_graph_reversed
        )
        distances = rx.dijkstra_shortest_path_lengths(
            graph,
            self.node_map[matched],
            edge_cost_fn=lambda _: 1.0,
        )

        related = []
        for idx, hops in distances.items():
            node = self.rx_graph[idx]
            if node["name"] == matched:
                continue
            related.append(
                RelatedTable(name=node["name"], hops=int(hops), in_graph=node["in_graph"])
            )
        related.sort(key=lambda r: (r.hops, r.name.lower()))

        return RelatedTablesResult(table=matched, direction=direction, related=related)

    def find_parents(self, table: str) -> RelatedTablesResult:
        """
        Find every table the given table references, directly or transitively.

        Raises:
            ValueError: If the table is not in the graph
        """
        return self._query(table, RelationDirection.PARENTS)

    def find_children(self, table: str) -> RelatedTablesResult:
        """
        Find every table that references the given table, directly or transitively.

        Raises:
            ValueError: If the table is not in the graph
        """
        return self._query(table, RelationDirection.CHILDREN)

    def list_tables(self) -> List[str]:
        return sorted(self.node_map.keys(), key=str.lower)
