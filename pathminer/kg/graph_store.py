"""
Graph Store for reading and writing entity graphs as JSON.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from .entity_graph import EntityGraph
from .models import Entity, Fact, NERTag

logger = logging.getLogger(__name__)


def entity_to_dict(entity: Entity) -> Dict[str, Any]:
    return {"name": entity.name, "type": entity.type.full_name}


def entity_from_dict(data: Dict[str, Any]) -> Entity:
    """Build an entity from a JSON record, failing loudly on unknown types."""
    try:
        name = data["name"]
        type_name = data["type"]
    except (KeyError, TypeError):
        raise ValueError(f"Entity record must have 'name' and 'type': {data!r}")
    entity_type = NERTag.from_string(type_name)
    if entity_type is None:
        raise ValueError(f"Unknown entity type {type_name!r} in record {data!r}")
    return Entity(name=name, type=entity_type)


def fact_to_dict(fact: Fact) -> Dict[str, Any]:
    fact_dict = {
        "source": entity_to_dict(fact.source),
        "target": entity_to_dict(fact.target),
        "relation": fact.relation,
    }
    if fact.confidence is not None:
        fact_dict["confidence"] = fact.confidence
    return fact_dict


def fact_from_dict(data: Dict[str, Any]) -> Fact:
    try:
        return Fact(
            source=entity_from_dict(data["source"]),
            target=entity_from_dict(data["target"]),
            relation=data["relation"],
            confidence=data.get("confidence"),
        )
    except KeyError as e:
        raise ValueError(f"Fact record is missing {e}: {data!r}")


class GraphStore:
    """JSON file storage for an entity graph."""

    def __init__(self, storage_path: Union[str, Path]):
        self.storage_path = Path(storage_path)

    def load(self) -> EntityGraph:
        """Load the graph stored at this path."""
        with open(self.storage_path, 'r') as f:
            graph_data = json.load(f)

        graph = EntityGraph()
        for entity_data in graph_data.get("entities", []):
            graph.add_vertex(entity_from_dict(entity_data))
        for fact_data in graph_data.get("facts", []):
            fact = fact_from_dict(fact_data)
            graph.add(fact.source, fact.target, fact)

        logger.info(f"Loaded {graph.vertex_count} entities and {graph.fact_count} facts from {self.storage_path}")
        return graph

    def save(self, graph: EntityGraph):
        """Write the graph to this path, creating parent directories as needed."""
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        graph_data = {
            "entities": [entity_to_dict(entity) for entity in graph.vertices()],
            "facts": [fact_to_dict(fact) for fact in graph.facts()],
        }
        with open(self.storage_path, 'w') as f:
            json.dump(graph_data, f, indent=2)

        logger.info(f"Saved {graph.vertex_count} entities and {graph.fact_count} facts to {self.storage_path}")


def load_graph(path: Union[str, Path]) -> EntityGraph:
    return GraphStore(path).load()


def save_graph(graph: EntityGraph, path: Union[str, Path]):
    GraphStore(path).save(graph)
