"""
Entity graph the inferential paths are mined from.
"""

from .entity_graph import EntityGraph, EdgeCursor, GraphPreconditionError
from .graph_store import GraphStore, load_graph, save_graph
from .models import Direction, Entity, Fact, NERTag

__all__ = [
    "EntityGraph", "EdgeCursor", "GraphPreconditionError",
    "GraphStore", "load_graph", "save_graph",
    "Direction", "Entity", "Fact", "NERTag",
]
