"""Cosine-similarity ranking over stored embeddings."""

import math
from typing import Iterable, List, Optional, Sequence

from .models import PatternRecord, SimilarRecord

# Results must score strictly above this to be considered related
SIMILARITY_THRESHOLD = 0.5
DEFAULT_SIMILAR_LIMIT = 5


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 for empty vectors, mismatched lengths, or a zero-magnitude
    vector.
    """
    if not a or not b or len(a) != len(b):
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


def rank_by_similarity(
    records: Iterable[PatternRecord],
    query_vector: Sequence[float],
    exclude_id: Optional[str] = None,
) -> List[SimilarRecord]:
    """Score embedded records against a query vector.

    Keeps scores above SIMILARITY_THRESHOLD, sorted descending. The sort is
    stable, so equal scores keep insertion order.
    """
    scored = []
    for record in records:
        if record.embedding is None or record.id == exclude_id:
            continue
        similarity = cosine_similarity(record.embedding, query_vector)
        if similarity > SIMILARITY_THRESHOLD:
            scored.append(SimilarRecord(record=record, similarity=similarity))

    scored.sort(key=lambda s: s.similarity, reverse=True)
    return scored


def find_similar(
    records: Iterable[PatternRecord],
    query_vector: Sequence[float],
    exclude_id: Optional[str] = None,
    limit: int = DEFAULT_SIMILAR_LIMIT,
) -> List[SimilarRecord]:
    """Return at most ``limit`` records most similar to ``query_vector``."""
    if limit <= 0:
        return []
    return rank_by_similarity(records, query_vector, exclude_id)[:limit]
