"""Error types for the BrainGuard plugin."""

from typing import Optional


class BrainGuardError(Exception):
    """Base class for BrainGuard errors."""

    pass


class InvalidArgumentError(BrainGuardError):
    """A tool or service call was missing a required or discriminating argument."""

    def __init__(self, reason: str, argument: Optional[str] = None):
        self.reason = reason
        self.argument = argument
        super().__init__(reason)


class EmbeddingDimensionError(BrainGuardError):
    """An embedding does not match the dimensionality already in the store.

    This indicates a provider or model change against an existing store and
    is a configuration problem, not something to recover from at runtime.
    """

    def __init__(self, expected: int, actual: int, store_description: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        self.store_description = store_description
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [
            f"Embedding dimension mismatch: store holds {self.expected}-dimensional "
            f"vectors, provider returned {self.actual}",
        ]
        if self.store_description:
            lines.append(f"Store: {self.store_description}")
        lines.extend([
            "",
            "To fix:",
            "  1. Restore the embedding model the store was built with (JAATO_EMBEDDING_MODEL)",
            "  2. Or point storage_path at a new file for the new model",
        ])
        return "\n".join(lines)
