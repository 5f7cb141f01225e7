"""
Parallel weighted counting of canonical patterns over a path corpus.
"""

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, FrozenSet, Iterable, List, Optional

from .canonical import PathCanonicalizer, PatternKey
from .frequency import CooccurrenceEstimator
from .path import Path

logger = logging.getLogger(__name__)

# Every chain is found once from each of its ends, so each discovery counts half.
PATH_WEIGHT = 0.5


class WeightedAggregator:
    """
    Map-reduce over the path corpus: each worker canonicalizes its round-robin
    share of the paths into its own counter, and the counters are summed once
    all workers are done.

    A pattern instance weighs PATH_WEIGHT / factor, where the factor is the
    number of documents mentioning all of the instance's entities when
    document scaling is on, and 1.0 otherwise. This keeps entities that
    simply co-occur a lot from dominating the counts.
    """

    def __init__(
        self,
        canonicalizer: Optional[PathCanonicalizer] = None,
        estimator: Optional[CooccurrenceEstimator] = None,
        use_document_factor: bool = False,
    ):
        self.canonicalizer = canonicalizer or PathCanonicalizer()
        self.estimator = estimator
        self.use_document_factor = use_document_factor
        if use_document_factor and estimator is None:
            logger.warning("Document factor scaling requested without an estimator; weights will not be scaled")

    def aggregate(self, paths: Iterable[Path], worker_count: int) -> Dict[PatternKey, float]:
        """
        Count canonical patterns over the corpus.

        Args:
            paths: The path corpus
            worker_count: Number of workers to split the corpus across

        Returns:
            Mapping from pattern key to total weight; empty for an empty corpus
        """
        if isinstance(worker_count, bool) or not isinstance(worker_count, int) or worker_count < 1:
            raise ValueError(f"worker_count must be a positive integer, got {worker_count!r}")

        paths = list(paths)
        if not paths:
            logger.info("No paths to aggregate")
            return {}

        partitions = [paths[index::worker_count] for index in range(worker_count)]

        with ThreadPoolExecutor(max_workers=worker_count) as executor:
            futures = [
                executor.submit(self._count_partition, index, partition)
                for index, partition in enumerate(partitions)
            ]
            outputs = [future.result() for future in futures]

        totals: Dict[PatternKey, float] = defaultdict(float)
        for output in outputs:
            for key, weight in output.items():
                totals[key] += weight

        logger.info(f"Aggregated {len(paths)} paths into {len(totals)} patterns using {worker_count} workers")
        return dict(totals)

    def _count_partition(self, index: int, paths: List[Path]) -> Dict[PatternKey, float]:
        counts: Dict[PatternKey, float] = defaultdict(float)
        # Per-worker cache; never shared between workers
        factor_cache: Dict[FrozenSet[str], float] = {}
        for path in paths:
            key = self.canonicalizer.canonicalize(path)
            counts[key] += PATH_WEIGHT / self._document_factor(path, factor_cache)

        logger.debug(f"Worker {index} counted {len(paths)} paths into {len(counts)} patterns")
        return counts

    def _document_factor(self, path: Path, cache: Dict[FrozenSet[str], float]) -> float:
        if not self.use_document_factor or self.estimator is None:
            return 1.0

        names = path.entity_names()
        if names in cache:
            return cache[names]

        try:
            factor = max(1.0, float(self.estimator.estimate_cooccurrence_count(names)))
        except Exception as e:
            logger.error(f"Co-occurrence lookup failed for {sorted(names)}: {e}")
            factor = 1.0
        cache[names] = factor
        return factor
