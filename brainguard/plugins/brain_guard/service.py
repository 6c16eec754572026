"""Pattern service: the single write path and the query surface."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from ..embedding_provider import EmbeddingProvider
from .errors import EmbeddingDimensionError
from .history import DEFAULT_HISTORY_DAYS, get_history
from .models import (
    HistoryResult,
    PatternKind,
    PatternRecord,
    PreviousMessage,
    RecordOutcome,
    SearchResponse,
    SimilarRecord,
)
from .search import search_records
from .similarity import DEFAULT_SIMILAR_LIMIT, find_similar
from .storage import PatternStore

logger = logging.getLogger(__name__)


def embedding_dimension(records: Iterable[PatternRecord]) -> Optional[int]:
    """Dimensionality of the first embedded record, or None if there is none."""
    for record in records:
        if record.embedding is not None:
            return len(record.embedding)
    return None


class PatternService:
    """Composes a store and an (optional) embedding provider.

    ``record()`` is the only way records get written; everything else
    reads. Embeddings are best effort: a None from the provider just means
    the record is stored without one.
    """

    def __init__(self, store: PatternStore, embedder: Optional[EmbeddingProvider] = None):
        self._store = store
        self._embedder = embedder

    @property
    def store(self) -> PatternStore:
        return self._store

    @property
    def embedder(self) -> Optional[EmbeddingProvider]:
        return self._embedder

    def load_all(self) -> List[PatternRecord]:
        return self._store.load_all()

    def record(
        self,
        pattern: PatternKind,
        message: str,
        message_id: Optional[str] = None,
        previous_messages: Optional[List[PreviousMessage]] = None,
        context: Optional[str] = None,
        session_key: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RecordOutcome:
        """Create, embed and persist a record.

        Returns:
            RecordOutcome with the stored record and the prior records most
            similar to it (empty when no embedding was produced).

        Raises:
            EmbeddingDimensionError: If the new embedding's dimensionality
                differs from the store's.
            OSError: If the store cannot be written.
        """
        record = PatternRecord.create(
            pattern=pattern,
            message=message,
            message_id=message_id,
            previous_messages=previous_messages,
            context=context,
            session_key=session_key,
            now=now,
        )

        embedding = self._embed(record.message)
        existing = self._store.load_all()

        similar: List[SimilarRecord] = []
        if embedding is not None:
            expected = embedding_dimension(existing)
            if expected is not None and expected != len(embedding):
                raise EmbeddingDimensionError(expected, len(embedding), self._store.describe())
            record = replace(record, embedding=tuple(embedding))
            similar = find_similar(existing, embedding, exclude_id=record.id)

        self._store.append(record)
        logger.debug(
            "Recorded %s pattern %s (embedded=%s, similar=%d)",
            record.pattern.value, record.id, embedding is not None, len(similar),
        )
        return RecordOutcome(record=record, similar=similar)

    def find_similar(
        self,
        query_vector: Sequence[float],
        exclude_id: Optional[str] = None,
        limit: int = DEFAULT_SIMILAR_LIMIT,
    ) -> List[SimilarRecord]:
        return find_similar(self._store.load_all(), query_vector, exclude_id, limit)

    def history(
        self,
        pattern: Optional[PatternKind] = None,
        days: float = DEFAULT_HISTORY_DAYS,
        now: Optional[datetime] = None,
    ) -> HistoryResult:
        return get_history(self._store.load_all(), pattern, days, now)

    def search(
        self,
        query: Optional[str] = None,
        pattern: Optional[PatternKind] = None,
        days: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> SearchResponse:
        return search_records(self._store.load_all(), self._embedder, query, pattern, days, now)

    def close(self) -> None:
        self._store.close()

    def _embed(self, text: str) -> Optional[List[float]]:
        if self._embedder is None:
            return None
        return self._embedder.embed(text)
