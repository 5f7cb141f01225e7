"""
Reconcile an extracted entity graph with the knowledge base before mining.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..kg.entity_graph import EntityGraph
from ..kg.models import Fact
from .knowledge_base import KnowledgeBase
from .relations import CooccurrencePredicate, plausibly_cooccur

logger = logging.getLogger(__name__)


@dataclass
class EnforcementReport:
    """What a single enforcement pass changed in the graph."""
    contradictions_removed: int = 0
    low_confidence_removed: int = 0
    known_facts_added: int = 0


class GraphConsistencyEnforcer:
    """
    Make a graph agree with the knowledge base.

    Three passes, in order: remove facts that contradict a known fact on the
    same slot value, drop facts scored below the cutoff, then add the known
    facts whose slot value names a vertex of the graph, except those the
    first pass removed.
    """

    def __init__(
        self,
        kb: KnowledgeBase,
        cooccurs: CooccurrencePredicate = plausibly_cooccur,
        cutoff: float = 0.0,
    ):
        if not 0.0 <= cutoff <= 1.0:
            raise ValueError(f"Confidence cutoff must be in [0, 1], got {cutoff}")
        self.kb = kb
        self.cooccurs = cooccurs
        self.cutoff = cutoff
        self.last_report: Optional[EnforcementReport] = None

    def enforce(self, graph: EntityGraph) -> EntityGraph:
        """
        Mutate the graph in place so it is consistent with the knowledge base.

        Args:
            graph: The graph to check and augment

        Returns:
            The same graph instance
        """
        report = EnforcementReport()
        contradictions = self._remove_contradictions(graph)
        report.contradictions_removed = len(contradictions)
        if self.cutoff > 0.0:
            report.low_confidence_removed = self._prune_low_confidence(graph)
        report.known_facts_added = self._add_known_facts(graph, contradictions)
        self.last_report = report

        logger.info(
            f"Synced graph with KB: removed {report.contradictions_removed} contradictions, "
            f"pruned {report.low_confidence_removed} facts below {self.cutoff}, "
            f"added {report.known_facts_added} known facts"
        )
        return graph

    def _remove_contradictions(self, graph: EntityGraph) -> List[Fact]:
        removed: List[Fact] = []
        cursor = graph.edge_iterator()
        for fact in cursor:
            if fact.source not in self.kb:
                continue
            for known in self.kb.facts_for(fact.source):
                if known.slot_value != fact.target.name:
                    continue
                if not self.cooccurs(fact.relation, known.relation):
                    logger.debug(f"Filtered impossible relation {fact.relation} on account of {known}")
                    cursor.remove()
                    removed.append(fact)
                    break
        return removed

    def _prune_low_confidence(self, graph: EntityGraph) -> int:
        removed = 0
        cursor = graph.edge_iterator()
        for fact in cursor:
            if fact.score < self.cutoff:
                cursor.remove()
                removed += 1
        return removed

    def _add_known_facts(self, graph: EntityGraph, contradictions: List[Fact]) -> int:
        # The KB drops the slot value's type, so resolve targets by name
        name_to_entity = graph.name_index()

        added = 0
        for entity in self.kb.entities():
            if not graph.contains_vertex(entity):
                continue
            for known in self.kb.facts_for(entity):
                target = name_to_entity.get(known.slot_value)
                if target is None:
                    continue
                fact = Fact(entity, target, known.relation, confidence=1.0)
                if fact in contradictions:
                    logger.debug(f"Not restoring contradicted relation: {fact}")
                    continue
                if fact not in graph.edges_between(entity, target):
                    logger.debug(f"Adding known relation: {fact}")
                    graph.add_fact(fact)
                    added += 1
        return added
