"""
Canonical pattern keys for paths.

A path is abstracted by replacing its entities with variables x0, x1, ...
while keeping their types. Open chains become conjunctions whose key does
not depend on the order the facts were found in; closed loops become
entailments whose key does not depend on where the cycle was entered or
which way it was walked. In both cases every admissible ordering is
rendered and the lexicographically smallest rendering is the key.
"""

from dataclasses import dataclass
from enum import Enum
from itertools import permutations
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

from ..kg.models import Entity, Fact, NERTag
from .path import Path, does_loop


class PatternKind(Enum):
    CONJUNCTION = "conjunction"
    ENTAILMENT = "entailment"


class Literal(NamedTuple):
    """A fact with its entities replaced by variables."""
    subject: str
    subject_type: NERTag
    relation: str
    object: str
    object_type: NERTag

    def __str__(self) -> str:
        return f"{self.relation}({self.subject}:{self.subject_type.short_name}, {self.object}:{self.object_type.short_name})"


@dataclass(frozen=True)
class PatternKey:
    """An abstracted path, used as the unit of counting."""
    kind: PatternKind
    literals: Tuple[Literal, ...]

    @property
    def is_entailment(self) -> bool:
        return self.kind == PatternKind.ENTAILMENT

    @property
    def antecedents(self) -> Tuple[Literal, ...]:
        return self.literals[:-1] if self.is_entailment else self.literals

    @property
    def consequent(self) -> Literal:
        if not self.is_entailment:
            raise ValueError(f"Conjunction {self} has no consequent")
        return self.literals[-1]

    @property
    def relations(self) -> List[str]:
        return [literal.relation for literal in self.literals]

    def __str__(self) -> str:
        if self.is_entailment and len(self.literals) > 1:
            body = " ∧ ".join(str(literal) for literal in self.antecedents)
            return f"{body} ⇒ {self.consequent}"
        return " ∧ ".join(str(literal) for literal in self.literals)


def _render(literals: Sequence[Literal]) -> str:
    return "^".join(str(literal) for literal in literals)


class _Variables:
    """Assigns x0, x1, ... to entities in order of first appearance."""

    def __init__(self):
        self.mapping: Dict[Entity, str] = {}

    def __call__(self, entity: Entity) -> str:
        if entity not in self.mapping:
            self.mapping[entity] = f"x{len(self.mapping)}"
        return self.mapping[entity]


def _abstract(fact: Fact, variables: _Variables) -> Literal:
    subject = variables(fact.source)
    obj = variables(fact.target)
    return Literal(subject, fact.source.type, fact.relation, obj, fact.target.type)


class PathCanonicalizer:
    """Maps paths to pattern keys."""

    def canonicalize(self, path: Path) -> PatternKey:
        if path.is_loop:
            return self.entailment_key(path)
        return self.conjunction_key(path.facts)

    def canonicalize_facts(self, facts: Iterable[Fact]) -> PatternKey:
        """Canonicalize a bare fact sequence, recovering the walk when it is a loop."""
        facts = tuple(facts)
        if not facts:
            raise ValueError("Cannot canonicalize an empty path")
        if does_loop(facts):
            for root in (facts[0].source, facts[0].target):
                candidate = Path(root=root, facts=facts)
                try:
                    if candidate.is_loop:
                        return self.entailment_key(candidate)
                except ValueError:
                    continue
        return self.conjunction_key(facts)

    def conjunction_key(self, facts: Sequence[Fact]) -> PatternKey:
        """The smallest abstraction over every ordering of the facts."""
        if not facts:
            raise ValueError("Cannot canonicalize an empty path")
        best = None
        best_rendering = None
        for ordering in permutations(facts):
            variables = _Variables()
            literals = tuple(_abstract(fact, variables) for fact in ordering)
            rendering = _render(literals)
            if best_rendering is None or rendering < best_rendering:
                best, best_rendering = literals, rendering
        return PatternKey(PatternKind.CONJUNCTION, best)

    def entailment_key(self, path: Path) -> PatternKey:
        """The smallest abstraction over every rotation and both directions of a loop."""
        walk = path.walk()
        if len(path.facts) == 0 or walk[-1] != walk[0]:
            raise ValueError(f"Path is not a closed loop: {path}")

        facts = path.facts
        n = len(facts)
        best = None
        best_rendering = None
        for start in range(n):
            forward = [facts[(start + i) % n] for i in range(n)]
            backward = [facts[(start - 1 - i) % n] for i in range(n)]
            for ordering in (forward, backward):
                # the entry vertex is x0, later vertices numbered along the walk
                variables = _Variables()
                variables(walk[start])
                literals = tuple(_abstract(fact, variables) for fact in ordering)
                rendering = _render(literals)
                if best_rendering is None or rendering < best_rendering:
                    best, best_rendering = literals, rendering
        return PatternKey(PatternKind.ENTAILMENT, best)


_DEFAULT_CANONICALIZER = PathCanonicalizer()


def canonicalize(path: Path) -> PatternKey:
    return _DEFAULT_CANONICALIZER.canonicalize(path)
