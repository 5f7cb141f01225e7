"""
Data models for the entity graph: entity types, entities and facts.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class NERTag(Enum):
    """Entity types an entity in the graph can carry."""
    CAUSE_OF_DEATH = ("CAUSE_OF_DEATH", "COD")
    CITY = ("CITY", "CIT")
    COUNTRY = ("COUNTRY", "CRY")
    CRIMINAL_CHARGE = ("CRIMINAL_CHARGE", "CC")
    DATE = ("DATE", "DT")
    IDEOLOGY = ("IDEOLOGY", "IDY")
    LOCATION = ("LOCATION", "LOC")
    MISC = ("MISC", "MSC")
    MODIFIER = ("MODIFIER", "MOD")
    NATIONALITY = ("NATIONALITY", "NAT")
    NUMBER = ("NUMBER", "NUM")
    ORGANIZATION = ("ORGANIZATION", "ORG")
    PERSON = ("PERSON", "PER")
    RELIGION = ("RELIGION", "REL")
    STATE_OR_PROVINCE = ("STATE_OR_PROVINCE", "ST")
    TITLE = ("TITLE", "TIT")
    URL = ("URL", "URL")
    DURATION = ("DURATION", "DUR")

    def __init__(self, full_name: str, short_name: str):
        self.full_name = full_name
        self.short_name = short_name

    @classmethod
    def from_string(cls, name: Optional[str]) -> Optional["NERTag"]:
        """Resolve a tag from its full or short name, case-insensitively."""
        if not name:
            return None
        name = name.upper()
        for tag in cls:
            if tag.full_name == name:
                return tag
        for tag in cls:
            if tag.short_name == name:
                return tag
        return None

    def __str__(self) -> str:
        return self.full_name


class Direction(Enum):
    """Whether an edge is walked along (forward) or against (backward) its direction."""
    FORWARD = "forward"
    BACKWARD = "backward"

    def reverse(self) -> "Direction":
        return Direction.BACKWARD if self is Direction.FORWARD else Direction.FORWARD


@dataclass(frozen=True)
class Entity:
    """A typed, named vertex of the entity graph."""
    name: str
    type: NERTag

    def __str__(self) -> str:
        return f"{self.name}:{self.type.short_name}"


@dataclass(frozen=True)
class Fact:
    """A directed, labeled and optionally scored relation between two entities.

    Two facts are equal when source, target and relation agree; the
    confidence is carried along but does not take part in identity.
    """
    source: Entity
    target: Entity
    relation: str
    confidence: Optional[float] = field(default=None, compare=False)

    def __post_init__(self):
        if self.confidence is not None and not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be in [0, 1], got {self.confidence} for {self}")

    @property
    def score(self) -> float:
        """The confidence of this fact, defaulting to 1.0 when absent."""
        return 1.0 if self.confidence is None else self.confidence

    def __str__(self) -> str:
        return f"{self.source} --[{self.relation}]--> {self.target}"
