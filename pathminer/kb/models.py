"""
Data models for the Knowledge Base module.
"""

from dataclasses import dataclass

from ..kg.models import Entity


@dataclass(frozen=True)
class KnownFact:
    """A ground-truth fact about an entity.

    The slot value is a bare name: the knowledge base does not record the
    type of the value, only the type of the entity the fact is about.
    """
    entity: Entity
    relation: str
    slot_value: str

    def __str__(self) -> str:
        return f"{self.entity} --[{self.relation}]--> {self.slot_value}"
