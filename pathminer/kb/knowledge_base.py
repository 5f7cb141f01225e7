"""
Knowledge Base of ground-truth facts, keyed by the entity they describe.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Union

from ..kg.graph_store import entity_from_dict, entity_to_dict
from ..kg.models import Entity
from .models import KnownFact

logger = logging.getLogger(__name__)


class KnowledgeBase:
    """Mapping from entity to the ordered set of facts known to be true about it."""

    def __init__(self, facts: Iterable[KnownFact] = ()):
        # dict keys keep insertion order and double as an ordered set
        self.data: Dict[Entity, Dict[KnownFact, None]] = {}
        for fact in facts:
            self.add(fact)

    def add(self, fact: KnownFact):
        """Add a known fact; duplicates are ignored."""
        self.data.setdefault(fact.entity, {})[fact] = None

    def facts_for(self, entity: Entity) -> List[KnownFact]:
        """All known facts about an entity, in insertion order."""
        return list(self.data.get(entity, {}))

    def entities(self) -> List[Entity]:
        return list(self.data)

    def all_facts(self) -> List[KnownFact]:
        return [fact for facts in self.data.values() for fact in facts]

    def __contains__(self, entity: Entity) -> bool:
        return entity in self.data

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about the knowledge base."""
        facts = self.all_facts()
        return {
            "total_entities": len(self.data),
            "total_facts": len(facts),
            "relations": sorted(set(fact.relation for fact in facts)),
        }

    def export_facts(self, filepath: Union[str, Path]):
        """Export known facts to a JSON file."""
        facts_data = [
            {
                "entity": entity_to_dict(fact.entity),
                "relation": fact.relation,
                "slot_value": fact.slot_value,
            }
            for fact in self.all_facts()
        ]
        with open(filepath, 'w') as f:
            json.dump({"facts": facts_data}, f, indent=2)

        logger.info(f"Exported {len(facts_data)} known facts to {filepath}")


def load_knowledge_base(filepath: Union[str, Path]) -> KnowledgeBase:
    """Load a knowledge base from a JSON file of the form {"facts": [...]}."""
    with open(filepath, 'r') as f:
        kb_data = json.load(f)

    kb = KnowledgeBase()
    for fact_data in kb_data.get("facts", []):
        try:
            fact = KnownFact(
                entity=entity_from_dict(fact_data["entity"]),
                relation=fact_data["relation"],
                slot_value=fact_data["slot_value"],
            )
        except KeyError as e:
            raise ValueError(f"Known fact record is missing {e}: {fact_data!r}")
        kb.add(fact)

    logger.info(f"Loaded {len(kb.all_facts())} known facts about {len(kb)} entities from {filepath}")
    return kb
