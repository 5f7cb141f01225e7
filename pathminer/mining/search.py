"""
Breadth-first enumeration of bounded paths over an entity graph.
"""

import logging
from collections import deque
from typing import Deque, Dict, List, Tuple

from ..kg.entity_graph import EntityGraph
from ..kg.models import Entity
from .path import Path
from .trie import PathTrie

logger = logging.getLogger(__name__)


class BoundedPathSearch:
    """Grow one path trie per vertex and collect every path they contain."""

    def __init__(self, max_depth: int = 3, name_fallback: bool = True):
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {max_depth!r}")
        self.max_depth = max_depth
        self.name_fallback = name_fallback
        self.tries: Dict[Entity, PathTrie] = {}

    def run(self, graph: EntityGraph) -> List[Path]:
        """
        Enumerate the path corpus of a graph.

        Every vertex roots a trie; nodes are expanded in FIFO order over
        their outgoing and then incoming facts until no trie can grow.

        Returns:
            The paths of all tries, root by root
        """
        self.tries = {}
        fringe: Deque[Tuple[PathTrie, int]] = deque()
        for vertex in graph.vertices():
            trie = PathTrie(vertex, self.max_depth, self.name_fallback)
            self.tries[vertex] = trie
            fringe.append((trie, PathTrie.ROOT))

        expanded = 0
        while fringe:
            trie, node_id = fringe.popleft()
            entry = trie.node(node_id).entry
            expanded += 1
            for fact in graph.outgoing(entry):
                child = trie.extend(node_id, fact)
                if child is not None:
                    fringe.append((trie, child))
            for fact in graph.incoming(entry):
                child = trie.extend(node_id, fact)
                if child is not None:
                    fringe.append((trie, child))

        paths: List[Path] = []
        for trie in self.tries.values():
            paths.extend(trie.all_paths())

        logger.info(f"Expanded {expanded} trie nodes over {len(self.tries)} roots; found {len(paths)} paths")
        return paths
