"""
Prefix tree of graph paths rooted at a single entity.

Nodes live in an arena (a list) and refer to their parent by index, so a
node can walk up to the root without the tree holding reference cycles.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..kg.models import Direction, Entity, Fact
from .path import Path

logger = logging.getLogger(__name__)

ChildKey = Tuple[str, Direction, Entity]


class TrieExtensionError(ValueError):
    """Raised when a fact touches neither end of the trie node being extended."""


@dataclass
class TrieNode:
    """A path prefix ending at `entry`."""
    entry: Entity
    relation_from_parent: Optional[Tuple[str, Direction]] = None
    parent: Optional[int] = None
    depth: int = 0
    children: Dict[ChildKey, int] = field(default_factory=dict)


class PathTrie:
    """All bounded paths discovered from one root entity."""

    ROOT = 0

    def __init__(self, root: Entity, max_depth: int, name_fallback: bool = True):
        self.max_depth = max_depth
        self.name_fallback = name_fallback
        self.nodes: List[TrieNode] = [TrieNode(entry=root)]

    def node(self, node_id: int) -> TrieNode:
        return self.nodes[node_id]

    def root(self) -> Entity:
        return self.nodes[self.ROOT].entry

    def depth(self, node_id: int) -> int:
        """Number of edges between the root and this node."""
        return self.nodes[node_id].depth

    def is_loop(self, node_id: int) -> bool:
        node = self.nodes[node_id]
        return node.parent is not None and node.entry == self.root()

    def dangling_loop(self, node_id: int, entity: Entity) -> bool:
        """
        Whether stepping to `entity` from this node would revisit a vertex of
        the path other than the root. For example, A->B->C->B is dangling;
        A->B->C->A is a complete loop and is not.
        """
        node = self.nodes[node_id]
        while node.parent is not None:
            if node.entry == entity:
                return True
            node = self.nodes[node.parent]
        return False

    def _name_match(self, candidate: Entity, entry: Entity, fact: Fact) -> bool:
        if candidate.name != entry.name:
            return False
        if not self.name_fallback:
            raise TrieExtensionError(
                f"Cannot add {fact} to trie: {candidate} only matches {entry} by name"
            )
        # Distinct entities that share a name get merged here
        logger.warning(f"Matching {candidate} to trie entry {entry} by name only while adding {fact}")
        return True

    def extend(self, node_id: int, fact: Fact) -> Optional[int]:
        """
        Extend a node with a fact, working out the direction from which end of
        the fact the node is at.

        Args:
            node_id: The node to extend
            fact: The edge to add; one of its ends must be the node's entity

        Returns:
            The index of the new child if the search should keep extending it,
            otherwise None (rejected, duplicate, too deep, or a closed loop).

        Raises:
            TrieExtensionError: if the fact does not touch the node's entity
        """
        node = self.nodes[node_id]
        entry = node.entry
        if fact.source == entry or (fact.target != entry and self._name_match(fact.source, entry, fact)):
            direction = Direction.FORWARD
            next_entity = fact.target
        elif fact.target == entry or self._name_match(fact.target, entry, fact):
            direction = Direction.BACKWARD
            next_entity = fact.source
        else:
            raise TrieExtensionError(f"Cannot add edge to trie: {fact}; trie ends at {entry}")

        if self.dangling_loop(node_id, next_entity):
            return None
        if (node.parent is not None
                and self.nodes[node.parent].entry == next_entity
                and node.relation_from_parent == (fact.relation, direction.reverse())):
            # trivially backtracking over the edge we just took
            return None

        key = (fact.relation, direction, next_entity)
        if key in node.children:
            return None

        child = TrieNode(
            entry=next_entity,
            relation_from_parent=(fact.relation, direction),
            parent=node_id,
            depth=node.depth + 1,
        )
        if next_entity == self.root():
            # closed loops are kept but never extended
            self._attach(node, key, child)
            return None
        if child.depth <= self.max_depth:
            return self._attach(node, key, child)
        return None

    def _attach(self, parent: TrieNode, key: ChildKey, child: TrieNode) -> int:
        self.nodes.append(child)
        child_id = len(self.nodes) - 1
        parent.children[key] = child_id
        return child_id

    def as_path(self, node_id: int) -> Path:
        """The facts from the root down to this node, oriented as in the graph."""
        facts: List[Fact] = []
        node = self.nodes[node_id]
        while node.parent is not None:
            parent = self.nodes[node.parent]
            relation, direction = node.relation_from_parent
            if direction == Direction.FORWARD:
                facts.append(Fact(parent.entry, node.entry, relation))
            else:
                facts.append(Fact(node.entry, parent.entry, relation))
            node = parent
        facts.reverse()
        return Path(root=self.root(), facts=tuple(facts))

    def all_paths(self, node_id: int = ROOT) -> List[Path]:
        """
        Every path in the subtree of a node. Called on the root this is every
        path in the trie; on another node, every path having it as a prefix.
        """
        paths: List[Path] = []
        stack = [node_id]
        while stack:
            current = stack.pop()
            node = self.nodes[current]
            if node.parent is not None:
                paths.append(self.as_path(current))
            stack.extend(reversed(list(node.children.values())))
        return paths

    def __len__(self) -> int:
        return len(self.nodes)

    def render(self, node_id: int = ROOT, indent: str = "") -> str:
        node = self.nodes[node_id]
        text = f"{node.entry}\n"
        for child_id in node.children.values():
            child = self.nodes[child_id]
            relation, direction = child.relation_from_parent
            arrow = f"  -[{relation}]-> " if direction == Direction.FORWARD else f"  <-[{relation}]- "
            text += indent + arrow + self.render(child_id, indent + "    ")
        return text
