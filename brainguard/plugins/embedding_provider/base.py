"""Provider-agnostic embedding types."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, runtime_checkable


class EmbeddingAvailability(str, Enum):
    """Cached result of the one-time availability check."""
    NOT_CHECKED = "not_checked"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass
class EmbeddingConfig:
    """Configuration for an embedding provider.

    Unset fields are resolved from the environment.

    Attributes:
        api_key: AI Studio API key.
        use_vertex_ai: Force Vertex AI (True) or AI Studio (False).
        project: GCP project ID (Vertex AI).
        location: GCP region (Vertex AI).
        model: Embedding model name.
        timeout_ms: Transport timeout; a timeout counts as unavailable.
    """
    api_key: Optional[str] = None
    use_vertex_ai: Optional[bool] = None
    project: Optional[str] = None
    location: Optional[str] = None
    model: Optional[str] = None
    timeout_ms: Optional[int] = None


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Text to vector, best effort.

    ``embed`` returns None when the provider is unavailable or the call
    fails; it never raises.
    """

    @property
    def availability(self) -> EmbeddingAvailability:
        ...

    def check_availability(self) -> EmbeddingAvailability:
        ...

    def embed(self, text: str) -> Optional[List[float]]:
        ...
