"""Data models for the BrainGuard plugin."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

# Hard caps applied when a record is created
MAX_MESSAGE_LENGTH = 1000
MAX_CONTEXT_LENGTH = 2000


def _check_type(value: Any, name: str, expected: type, optional: bool = False) -> None:
    if value is None and optional:
        return
    if not isinstance(value, expected):
        raise TypeError(f"{name} must be {expected.__name__}, got {type(value).__name__}")


class PatternKind(str, Enum):
    """Closed set of observed cognitive patterns."""
    DELEGATION = "delegation"
    NO_REFLECTION = "no_reflection"
    REPETITIVE = "repetitive"
    VOCABULARY = "vocabulary"
    CLARITY = "clarity"


class Trend(str, Enum):
    """Direction of pattern frequency across two adjacent windows."""
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class MatchType(str, Enum):
    """How a search result was selected."""
    EXACT = "exact"
    SEMANTIC = "semantic"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class PreviousMessage:
    """A context message that preceded the observed one."""
    id: str
    text: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "text": self.text}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreviousMessage":
        if not isinstance(data, dict):
            raise TypeError(f"previous message must be an object, got {type(data).__name__}")
        msg_id, text = data["id"], data["text"]
        if not isinstance(msg_id, str) or not isinstance(text, str):
            raise TypeError("previous message id and text must be strings")
        return cls(id=msg_id, text=text)


@dataclass(frozen=True)
class PatternRecord:
    """One observed cognitive-pattern event.

    Records are immutable once created. Use ``PatternRecord.create()`` to
    build a new one: it assigns the id and timestamp and applies the length
    caps on message and context.

    Attributes:
        id: UUID4 string
        timestamp: ISO format UTC timestamp of the write
        pattern: Observed pattern kind
        message: Observed message, at most MAX_MESSAGE_LENGTH characters
        message_id: Optional external message id
        previous_messages: Optional preceding messages, stored verbatim
        context: Optional free text, at most MAX_CONTEXT_LENGTH characters
        session_key: Optional session the pattern was observed in
        embedding: Optional message embedding, never recomputed
    """
    id: str
    timestamp: str
    pattern: PatternKind
    message: str
    message_id: Optional[str] = None
    previous_messages: Optional[Tuple[PreviousMessage, ...]] = None
    context: Optional[str] = None
    session_key: Optional[str] = None
    embedding: Optional[Tuple[float, ...]] = None

    @classmethod
    def create(
        cls,
        pattern: PatternKind,
        message: str,
        message_id: Optional[str] = None,
        previous_messages: Optional[Sequence[PreviousMessage]] = None,
        context: Optional[str] = None,
        session_key: Optional[str] = None,
        embedding: Optional[Sequence[float]] = None,
        now: Optional[datetime] = None,
    ) -> "PatternRecord":
        return cls(
            id=str(uuid.uuid4()),
            timestamp=(now or utc_now()).isoformat(),
            pattern=PatternKind(pattern),
            message=message[:MAX_MESSAGE_LENGTH],
            message_id=message_id,
            previous_messages=tuple(previous_messages) if previous_messages is not None else None,
            context=context[:MAX_CONTEXT_LENGTH] if context is not None else None,
            session_key=session_key,
            embedding=tuple(embedding) if embedding is not None else None,
        )

    @property
    def created_at(self) -> datetime:
        return parse_timestamp(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "pattern": self.pattern.value,
            "message": self.message,
            "message_id": self.message_id,
            "previous_messages": (
                [m.to_dict() for m in self.previous_messages]
                if self.previous_messages is not None else None
            ),
            "context": self.context,
            "session_key": self.session_key,
            "embedding": list(self.embedding) if self.embedding is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PatternRecord":
        """Rebuild a stored record.

        Raises:
            KeyError, TypeError, ValueError: If the data is not a valid record.
        """
        if not isinstance(data, dict):
            raise TypeError(f"record must be an object, got {type(data).__name__}")

        for key in ("id", "timestamp", "message"):
            _check_type(data[key], key, str)
        for key in ("message_id", "context", "session_key"):
            _check_type(data.get(key), key, str, optional=True)

        previous = data.get("previous_messages")
        _check_type(previous, "previous_messages", list, optional=True)

        embedding = data.get("embedding")
        _check_type(embedding, "embedding", list, optional=True)
        if embedding is not None and not all(
            isinstance(v, (int, float)) and not isinstance(v, bool) for v in embedding
        ):
            raise TypeError("embedding must be a list of numbers")

        record = cls(
            id=data["id"],
            timestamp=data["timestamp"],
            pattern=PatternKind(data["pattern"]),
            message=data["message"],
            message_id=data.get("message_id"),
            previous_messages=(
                tuple(PreviousMessage.from_dict(m) for m in previous)
                if previous is not None else None
            ),
            context=data.get("context"),
            session_key=data.get("session_key"),
            embedding=tuple(float(v) for v in embedding) if embedding is not None else None,
        )
        # Reject unparseable timestamps at load time rather than at query time
        parse_timestamp(record.timestamp)
        return record


@dataclass
class SimilarRecord:
    """A stored record ranked against a query vector."""
    record: PatternRecord
    similarity: float


@dataclass
class RecordOutcome:
    """Result of the single write path."""
    record: PatternRecord
    similar: List[SimilarRecord] = field(default_factory=list)


@dataclass
class HistoryResult:
    """Records of a time window, most recent first, plus the trend."""
    count: int
    trend: Trend
    entries: List[PatternRecord] = field(default_factory=list)


@dataclass
class SearchSummary:
    """Counts over the filtered window, independent of the query."""
    total: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)


@dataclass
class SearchResult:
    record: PatternRecord
    match_type: MatchType
    similarity: Optional[float] = None


@dataclass
class SearchResponse:
    results: List[SearchResult] = field(default_factory=list)
    summary: SearchSummary = field(default_factory=SearchSummary)
