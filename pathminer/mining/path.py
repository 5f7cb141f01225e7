"""
Paths: ordered walks of facts through the entity graph.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Set, Tuple

from ..kg.models import Entity, Fact


@dataclass(frozen=True)
class Path:
    """A walk of facts starting at a root entity.

    Equality and hashing look only at the facts, so the same fact sequence
    found from two different roots is the same path.
    """
    root: Entity = field(compare=False)
    facts: Tuple[Fact, ...]

    def walk(self) -> List[Entity]:
        """The vertices visited by this path, starting with the root."""
        vertices = [self.root]
        current = self.root
        for fact in self.facts:
            if fact.source == current:
                current = fact.target
            elif fact.target == current:
                current = fact.source
            else:
                raise ValueError(f"{fact} does not continue a walk ending at {current}")
            vertices.append(current)
        return vertices

    @property
    def is_loop(self) -> bool:
        """True iff the walk has at least one edge and ends where it started."""
        return len(self.facts) > 0 and self.walk()[-1] == self.root

    def entity_names(self) -> FrozenSet[str]:
        names: Set[str] = set()
        for fact in self.facts:
            names.add(fact.source.name)
            names.add(fact.target.name)
        return frozenset(names)

    def __len__(self) -> int:
        return len(self.facts)

    def __str__(self) -> str:
        return " ∧ ".join(str(fact) for fact in self.facts)


def does_loop(facts: Iterable[Fact]) -> bool:
    """Whether a collection of facts contains a cycle anywhere (not necessarily a closed walk)."""
    facts = list(facts)
    entities: Set[Entity] = set()
    for fact in facts:
        entities.add(fact.source)
        entities.add(fact.target)
    return len(facts) > 0 and len(entities) <= len(facts)
