"""
Bounded path search, pattern canonicalization and weighted aggregation.
"""

from .aggregator import PATH_WEIGHT, WeightedAggregator
from .canonical import Literal, PathCanonicalizer, PatternKey, PatternKind, canonicalize
from .frequency import CooccurrenceEstimator, CorpusFrequencyEstimator
from .miner import InferentialPathMiner, MiningResult
from .path import Path, does_loop
from .search import BoundedPathSearch
from .trie import PathTrie, TrieExtensionError, TrieNode

__all__ = [
    "PATH_WEIGHT", "WeightedAggregator",
    "Literal", "PathCanonicalizer", "PatternKey", "PatternKind", "canonicalize",
    "CooccurrenceEstimator", "CorpusFrequencyEstimator",
    "InferentialPathMiner", "MiningResult",
    "Path", "does_loop", "BoundedPathSearch",
    "PathTrie", "TrieExtensionError", "TrieNode",
]
