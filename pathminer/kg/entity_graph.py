"""
Entity graph: a directed, labeled multigraph of entities and facts.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import networkx as nx

from .models import Entity, Fact

logger = logging.getLogger(__name__)


class GraphPreconditionError(ValueError):
    """Raised when a fact refers to entities that are not vertices of the graph."""


class EdgeCursor:
    """Iterator over the facts of a graph that can remove the fact it last yielded."""

    def __init__(self, graph: nx.MultiDiGraph):
        self._graph = graph
        # Snapshot, so removals do not disturb the iteration
        self._edges: List[Tuple[Entity, Entity, int, Fact]] = list(
            graph.edges(keys=True, data="fact")
        )
        self._position = 0
        self._current: Optional[Tuple[Entity, Entity, int, Fact]] = None

    def __iter__(self) -> "EdgeCursor":
        return self

    def __next__(self) -> Fact:
        if self._position >= len(self._edges):
            raise StopIteration
        self._current = self._edges[self._position]
        self._position += 1
        return self._current[3]

    def remove(self):
        """Remove the most recently yielded fact from the graph."""
        if self._current is None:
            raise RuntimeError("remove() called before next() or twice for the same fact")
        source, target, key, _ = self._current
        self._graph.remove_edge(source, target, key)
        self._current = None


class EntityGraph:
    """Mutable directed multigraph over entities, one edge per fact."""

    def __init__(self):
        self.graph = nx.MultiDiGraph()

    def add_vertex(self, entity: Entity):
        """Add an entity to the graph; adding an existing entity is a no-op."""
        self.graph.add_node(entity)

    def contains_vertex(self, entity: Entity) -> bool:
        return self.graph.has_node(entity)

    def __contains__(self, entity: Entity) -> bool:
        return self.contains_vertex(entity)

    def add_fact(self, fact: Fact):
        """
        Add a fact between two existing vertices.

        Raises:
            GraphPreconditionError: if either endpoint is not a vertex of the graph
        """
        for endpoint in (fact.source, fact.target):
            if not self.graph.has_node(endpoint):
                raise GraphPreconditionError(
                    f"Cannot add {fact}: {endpoint} is not a vertex of the graph"
                )
        self.graph.add_edge(fact.source, fact.target, fact=fact)

    def add(self, source: Entity, target: Entity, fact: Fact):
        """Add a fact, adding its endpoints as vertices if they are missing."""
        if fact.source != source or fact.target != target:
            raise GraphPreconditionError(
                f"Fact {fact} does not connect {source} to {target}"
            )
        self.add_vertex(source)
        self.add_vertex(target)
        self.add_fact(fact)

    def vertices(self) -> List[Entity]:
        return list(self.graph.nodes)

    def name_index(self) -> Dict[str, Entity]:
        """Map each vertex name to its vertex, ignoring type. The last vertex with a name wins."""
        return {entity.name: entity for entity in self.graph.nodes}

    def outgoing(self, entity: Entity) -> List[Fact]:
        """All facts whose source is the given entity."""
        if not self.graph.has_node(entity):
            return []
        return [fact for _, _, fact in self.graph.out_edges(entity, data="fact")]

    def incoming(self, entity: Entity) -> List[Fact]:
        """All facts whose target is the given entity."""
        if not self.graph.has_node(entity):
            return []
        return [fact for _, _, fact in self.graph.in_edges(entity, data="fact")]

    def edges_between(self, source: Entity, target: Entity) -> List[Fact]:
        """All facts from source to target, in insertion order."""
        edges = self.graph.get_edge_data(source, target)
        if not edges:
            return []
        return [data["fact"] for data in edges.values()]

    def facts(self) -> List[Fact]:
        return [fact for _, _, fact in self.graph.edges(data="fact")]

    def edge_iterator(self) -> EdgeCursor:
        return EdgeCursor(self.graph)

    def remove_fact(self, fact: Fact) -> bool:
        """Remove one occurrence of a fact. Returns False if it was not present."""
        edges = self.graph.get_edge_data(fact.source, fact.target)
        if not edges:
            return False
        for key, data in edges.items():
            if data["fact"] == fact:
                self.graph.remove_edge(fact.source, fact.target, key)
                return True
        return False

    @property
    def vertex_count(self) -> int:
        return self.graph.number_of_nodes()

    @property
    def fact_count(self) -> int:
        return self.graph.number_of_edges()

    @classmethod
    def from_facts(cls, facts: Iterable[Fact], vertices: Iterable[Entity] = ()) -> "EntityGraph":
        graph = cls()
        for entity in vertices:
            graph.add_vertex(entity)
        for fact in facts:
            graph.add(fact.source, fact.target, fact)
        return graph

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the graph."""
        entity_types = sorted(set(entity.type.full_name for entity in self.graph.nodes))
        relations = sorted(set(fact.relation for fact in self.facts()))

        return {
            "total_entities": self.vertex_count,
            "total_facts": self.fact_count,
            "entity_types": entity_types,
            "relation_types": relations,
        }

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.graph.nodes)

    def __len__(self) -> int:
        return self.vertex_count
