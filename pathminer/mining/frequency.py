"""
Document co-occurrence counts for sets of entity names.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import FrozenSet, Iterable, List, Union

logger = logging.getLogger(__name__)


class CooccurrenceEstimator(ABC):
    """Answers how many documents mention every one of a set of entity names."""

    @abstractmethod
    def estimate_cooccurrence_count(self, entity_names: FrozenSet[str]) -> float:
        pass


class CorpusFrequencyEstimator(CooccurrenceEstimator):
    """Counts co-occurrences by scanning an in-memory collection of documents."""

    def __init__(self, documents: Iterable[str]):
        self.documents: List[str] = [document.lower() for document in documents]

    def estimate_cooccurrence_count(self, entity_names: FrozenSet[str]) -> float:
        names = [name.lower() for name in entity_names]
        return float(sum(
            1 for document in self.documents
            if all(name in document for name in names)
        ))

    @classmethod
    def from_directory(cls, data_path: Union[str, Path], pattern: str = "*.txt") -> "CorpusFrequencyEstimator":
        """Load every matching file under a directory as one document."""
        data_dir = Path(data_path)
        if not data_dir.is_dir():
            raise ValueError(f"Document directory {data_path} does not exist")

        documents = []
        for file_path in sorted(data_dir.rglob(pattern)):
            if file_path.is_file():
                documents.append(file_path.read_text(encoding="utf-8", errors="replace"))

        logger.info(f"Loaded {len(documents)} documents from {data_dir} for co-occurrence counts")
        return cls(documents)

    def __len__(self) -> int:
        return len(self.documents)
