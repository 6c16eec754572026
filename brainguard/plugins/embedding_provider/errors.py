"""Embedding provider errors.

These are raised inside the provider and turned into an "unavailable"
outcome; ``embed()`` callers never see them.
"""

from typing import List, Optional


class EmbeddingProviderError(Exception):
    """Base class for embedding provider errors."""

    pass


class CredentialsNotFoundError(EmbeddingProviderError):
    """Neither an API key nor a Vertex project/location could be resolved."""

    def __init__(self, use_vertex: bool, checked_locations: Optional[List[str]] = None):
        self.use_vertex = use_vertex
        self.checked_locations = list(checked_locations or [])
        super().__init__(self._describe())

    def _describe(self) -> str:
        endpoint = "Vertex AI" if self.use_vertex else "AI Studio"
        parts = [f"No embedding credentials found for {endpoint}"]

        if self.checked_locations:
            parts.append("")
            parts.append("Checked locations:")
            parts.extend(f"  - {location}" for location in self.checked_locations)

        parts.append("")
        if self.use_vertex:
            parts.append("To fix, set JAATO_GOOGLE_PROJECT and JAATO_GOOGLE_LOCATION,")
            parts.append("or set GOOGLE_GENAI_API_KEY to use AI Studio instead.")
        else:
            parts.append("To fix, set GOOGLE_GENAI_API_KEY=your-api-key")
        return "\n".join(parts)


class EmptyEmbeddingError(EmbeddingProviderError):
    """The endpoint answered without a vector."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Model '{model}' returned no embedding values")
