"""Search over stored patterns: filters, semantic ranking and summary."""

import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional

from ..embedding_provider import EmbeddingProvider
from .errors import InvalidArgumentError
from .history import filter_window
from .models import (
    MatchType,
    PatternKind,
    PatternRecord,
    SearchResponse,
    SearchResult,
    SearchSummary,
)
from .similarity import rank_by_similarity

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_DAYS = 30


def summarize(records: Iterable[PatternRecord]) -> SearchSummary:
    """Total count and per-kind breakdown, kinds in first-seen order."""
    counts = Counter(r.pattern.value for r in records)
    return SearchSummary(total=sum(counts.values()), by_type=dict(counts))


def search_records(
    records: Iterable[PatternRecord],
    embedder: Optional[EmbeddingProvider],
    query: Optional[str] = None,
    pattern: Optional[PatternKind] = None,
    days: Optional[float] = None,
    now: Optional[datetime] = None,
) -> SearchResponse:
    """Search the store.

    Without a query every record in the window matches exactly, in store
    order. With a query, records are ranked semantically; when no embedding
    can be produced for the query the response is empty.

    Raises:
        InvalidArgumentError: If none of query, pattern or days is given.
    """
    if not query and pattern is None and days is None:
        raise InvalidArgumentError(
            "At least one of query, type, or days is required for search"
        )

    window_days = days if days is not None else DEFAULT_SEARCH_DAYS
    filtered = filter_window(records, window_days, pattern, now)

    if not query:
        return SearchResponse(
            results=[SearchResult(record=r, match_type=MatchType.EXACT) for r in filtered],
            summary=summarize(filtered),
        )

    query_vector = embedder.embed(query) if embedder is not None else None
    if query_vector is None:
        logger.debug("Query embedding unavailable; returning no semantic results")
        return SearchResponse(results=[], summary=summarize([]))

    ranked = rank_by_similarity(filtered, query_vector)
    return SearchResponse(
        results=[
            SearchResult(record=s.record, match_type=MatchType.SEMANTIC, similarity=s.similarity)
            for s in ranked
        ],
        summary=summarize(filtered),
    )
