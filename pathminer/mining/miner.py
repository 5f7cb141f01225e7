"""
Inferential path miner: consistency enforcement, path search and
weighted pattern counting over one entity graph.
"""

import json
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path as FilePath
from typing import Any, Dict, List, Optional, Tuple, Union

from ..kb.consistency import EnforcementReport, GraphConsistencyEnforcer
from ..kb.knowledge_base import KnowledgeBase
from ..kb.relations import CooccurrencePredicate, plausibly_cooccur
from ..kg.entity_graph import EntityGraph
from .aggregator import WeightedAggregator
from .canonical import PathCanonicalizer, PatternKey
from .frequency import CooccurrenceEstimator
from .path import Path
from .search import BoundedPathSearch

logger = logging.getLogger(__name__)

# Chain canonicalization tries every ordering of a chain's facts
MAX_DEPTH_LIMIT = 7


@dataclass
class MiningResult:
    """Result of mining one graph."""
    patterns: Dict[PatternKey, float]
    paths: List[Path]
    graph_stats: Dict[str, Any]
    elapsed: float
    enforcement: Optional[EnforcementReport] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def top(self, n: int = 10) -> List[Tuple[PatternKey, float]]:
        """The n heaviest patterns, ties broken by their rendering."""
        ranked = sorted(self.patterns.items(), key=lambda item: (-item[1], str(item[0])))
        return ranked[:n]

    @property
    def total_weight(self) -> float:
        return sum(self.patterns.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "patterns": [
                {
                    "kind": key.kind.value,
                    "pattern": str(key),
                    "literals": [
                        {
                            "relation": literal.relation,
                            "subject": literal.subject,
                            "subject_type": literal.subject_type.full_name,
                            "object": literal.object,
                            "object_type": literal.object_type.full_name,
                        }
                        for literal in key.literals
                    ],
                    "weight": weight,
                }
                for key, weight in self.top(len(self.patterns))
            ],
            "path_count": len(self.paths),
            "graph": self.graph_stats,
            "elapsed": self.elapsed,
            "metadata": self.metadata,
        }

    def export(self, filepath: Union[str, FilePath]):
        """Write the mined patterns to a JSON file."""
        filepath = FilePath(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info(f"Exported {len(self.patterns)} patterns to {filepath}")


def _positive_int(config: Dict[str, Any], name: str, default: int) -> int:
    value = config.get(name, default)
    if value is None:
        value = default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


class InferentialPathMiner:
    """Mines weighted inferential patterns from entity graphs."""

    def __init__(
        self,
        config: Dict[str, Any],
        kb: Optional[KnowledgeBase] = None,
        cooccurs: CooccurrencePredicate = plausibly_cooccur,
        estimator: Optional[CooccurrenceEstimator] = None,
    ):
        self.config = config
        self.max_depth = _positive_int(config, "max_depth", 3)
        if self.max_depth > MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be at most {MAX_DEPTH_LIMIT}, got {self.max_depth}")
        self.workers = _positive_int(config, "workers", os.cpu_count() or 1)
        self.confidence_cutoff = float(config.get("confidence_cutoff", 0.0) or 0.0)
        self.use_document_factor = bool(config.get("use_document_factor", False))
        self.name_fallback = bool(config.get("name_fallback", True))

        # An empty knowledge base still applies the confidence cutoff
        self.kb = kb if kb is not None else KnowledgeBase()
        self.enforcer = GraphConsistencyEnforcer(self.kb, cooccurs, self.confidence_cutoff)
        self.search = BoundedPathSearch(self.max_depth, self.name_fallback)
        self.aggregator = WeightedAggregator(
            canonicalizer=PathCanonicalizer(),
            estimator=estimator,
            use_document_factor=self.use_document_factor,
        )

    def mine(self, graph: EntityGraph) -> MiningResult:
        """
        Mine one graph. The graph is mutated by consistency enforcement first and
        is read-only from then on.

        Args:
            graph: Entity graph built from the relation extractors

        Returns:
            MiningResult with pattern weights and the raw path corpus
        """
        start_time = time.time()
        logger.info(f"Mining graph with {graph.vertex_count} entities and {graph.fact_count} facts")

        self.enforcer.enforce(graph)
        enforcement = self.enforcer.last_report

        search_start = time.time()
        paths = self.search.run(graph)
        logger.info(f"Path search took {time.time() - search_start:.2f}s")
        if not paths:
            logger.warning("No paths found; nothing to aggregate")

        aggregate_start = time.time()
        patterns = self.aggregator.aggregate(paths, self.workers)
        logger.info(f"Aggregation took {time.time() - aggregate_start:.2f}s")

        elapsed = time.time() - start_time
        logger.info(f"Mined {len(patterns)} patterns from {len(paths)} paths in {elapsed:.2f}s")

        return MiningResult(
            patterns=patterns,
            paths=paths,
            graph_stats=graph.get_stats(),
            elapsed=elapsed,
            enforcement=enforcement,
            metadata={
                "max_depth": self.max_depth,
                "workers": self.workers,
                "confidence_cutoff": self.confidence_cutoff,
                "use_document_factor": self.use_document_factor,
            },
        )
