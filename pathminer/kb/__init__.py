"""
Knowledge Base of ground-truth facts and graph consistency enforcement.
"""

from .consistency import EnforcementReport, GraphConsistencyEnforcer
from .knowledge_base import KnowledgeBase, load_knowledge_base
from .models import KnownFact
from .relations import CompatibilityTable, RelationType, plausibly_cooccur

__all__ = [
    "EnforcementReport", "GraphConsistencyEnforcer",
    "KnowledgeBase", "load_knowledge_base", "KnownFact",
    "CompatibilityTable", "RelationType", "plausibly_cooccur",
]
