"""Storage backends for the BrainGuard plugin."""

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable

from .models import PatternRecord

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = "~/.jaato/brain_guard/patterns.jsonl"


@runtime_checkable
class PatternStore(Protocol):
    """Append-only collection of pattern records."""

    def append(self, record: PatternRecord) -> None:
        ...

    def load_all(self) -> List[PatternRecord]:
        ...

    def close(self) -> None:
        ...

    def describe(self) -> str:
        ...


class JsonlPatternStore:
    """JSONL-based durable storage for pattern records.

    Each record is stored as one JSON line, so appends never rewrite
    existing data and a damaged line only costs that one record.
    Reads parse the whole file; fine for a personal, local-scale store.
    """

    def __init__(self, path: str):
        """Initialize storage with file path.

        The parent directory is created eagerly so that the first write
        fails only for real I/O problems.

        Args:
            path: Path to JSONL file for storing records

        Raises:
            OSError: If the directory cannot be created.
        """
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: PatternRecord) -> None:
        """Append one record as a single line.

        Raises:
            OSError: If the file cannot be written.
        """
        line = json.dumps(record.to_dict(), ensure_ascii=False)
        with open(self.path, 'a', encoding='utf-8') as f:
            f.write(line + '\n')

    def load_all(self) -> List[PatternRecord]:
        """Load all records in insertion order.

        Lines that are not valid records are skipped with a warning.

        Returns:
            List of PatternRecord objects, or empty list if file doesn't exist
        """
        if not self.path.exists():
            return []

        records = []
        with open(self.path, 'r', encoding='utf-8') as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(PatternRecord.from_dict(json.loads(line)))
                except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                    logger.warning("Skipping invalid record at %s:%d: %s", self.path, line_no, e)
        return records

    def close(self) -> None:
        # Every append opens and closes the file; nothing is held open.
        pass

    def describe(self) -> str:
        return f"file:{self.path}"


class InMemoryPatternStore:
    """Transient storage, used for isolated test runs."""

    def __init__(self):
        self._records: List[PatternRecord] = []

    def append(self, record: PatternRecord) -> None:
        self._records.append(record)

    def load_all(self) -> List[PatternRecord]:
        return list(self._records)

    def close(self) -> None:
        self._records.clear()

    def describe(self) -> str:
        return "memory"


def create_storage(storage_type: str = "file", path: Optional[str] = None) -> PatternStore:
    """Create a storage backend.

    Args:
        storage_type: "file" for durable JSONL storage, "memory" for transient.
        path: JSONL path for file storage (default: DEFAULT_STORAGE_PATH).

    Raises:
        ValueError: If storage_type is unknown.
        OSError: If the file storage directory cannot be created.
    """
    if storage_type == "memory":
        return InMemoryPatternStore()
    if storage_type == "file":
        return JsonlPatternStore(path or DEFAULT_STORAGE_PATH)
    raise ValueError(f"Unknown storage type: {storage_type!r} (expected 'file' or 'memory')")
