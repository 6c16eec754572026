"""Text embeddings through the Google GenAI SDK.

Works against AI Studio (API key) or Vertex AI (project and location with
ambient GCP credentials); see env.py for how those are resolved.

The first use checks credentials and makes one probe call; the outcome is
cached on the instance. From then on ``embed()`` yields a vector or None
and never raises.
"""

import logging
from typing import List, Optional

from google import genai
from google.genai import types

from .base import EmbeddingAvailability, EmbeddingConfig
from .env import (
    get_checked_credential_locations,
    resolve_api_key,
    resolve_embedding_model,
    resolve_location,
    resolve_project,
    resolve_timeout_ms,
    resolve_use_vertex,
)
from .errors import CredentialsNotFoundError, EmptyEmbeddingError

logger = logging.getLogger(__name__)

# Text sent once to verify the endpoint actually answers
PROBE_TEXT = "ping"


class GoogleGenAIEmbeddingProvider:
    """Embedding provider backed by ``client.models.embed_content``.

    Usage:
        provider = GoogleGenAIEmbeddingProvider()
        vector = provider.embed("fais-le pour moi")  # None when unavailable
    """

    def __init__(self, config: Optional[EmbeddingConfig] = None):
        self._config = config or EmbeddingConfig()
        self._client: Optional[genai.Client] = None
        self._model: str = self._config.model or resolve_embedding_model()
        self._availability = EmbeddingAvailability.NOT_CHECKED

    @property
    def name(self) -> str:
        return "google_genai"

    @property
    def model(self) -> str:
        return self._model

    @property
    def availability(self) -> EmbeddingAvailability:
        return self._availability

    def check_availability(self) -> EmbeddingAvailability:
        """Determine availability once and cache it.

        Returns:
            AVAILABLE if credentials resolved and the probe call succeeded,
            UNAVAILABLE otherwise.
        """
        if self._availability is not EmbeddingAvailability.NOT_CHECKED:
            return self._availability

        try:
            resolved = self._resolve_config(self._config)
            self._validate_config(resolved)
            self._client = self._create_client(resolved)
            self._embed_or_raise(PROBE_TEXT)
        except CredentialsNotFoundError as e:
            logger.info("Semantic search disabled: %s", e)
            self._client = None
            self._availability = EmbeddingAvailability.UNAVAILABLE
            return self._availability
        except Exception as e:
            logger.warning("Embedding provider probe failed (%s): %s", self._model, e)
            self._client = None
            self._availability = EmbeddingAvailability.UNAVAILABLE
            return self._availability

        logger.info("Embedding provider available (model=%s)", self._model)
        self._availability = EmbeddingAvailability.AVAILABLE
        return self._availability

    def embed(self, text: str) -> Optional[List[float]]:
        """Embed text, returning None when unavailable or on any failure."""
        if self.check_availability() is not EmbeddingAvailability.AVAILABLE:
            return None

        try:
            return self._embed_or_raise(text)
        except Exception as e:
            logger.warning("Embedding call failed (%s): %s", self._model, e)
            return None

    def _embed_or_raise(self, text: str) -> List[float]:
        response = self._client.models.embed_content(
            model=self._model,
            contents=text,
        )
        embeddings = response.embeddings
        if not embeddings or not embeddings[0].values:
            raise EmptyEmbeddingError(self._model)
        return list(embeddings[0].values)

    def _resolve_config(self, config: EmbeddingConfig) -> EmbeddingConfig:
        """Merge explicit config with environment; explicit values win."""
        api_key = config.api_key or resolve_api_key()

        if config.use_vertex_ai is not None:
            use_vertex_ai = config.use_vertex_ai
        elif config.api_key:
            use_vertex_ai = False
        else:
            use_vertex_ai = resolve_use_vertex()

        return EmbeddingConfig(
            api_key=api_key,
            use_vertex_ai=use_vertex_ai,
            project=config.project or resolve_project(),
            location=config.location or resolve_location(),
            model=self._model,
            timeout_ms=config.timeout_ms or resolve_timeout_ms(),
        )

    def _validate_config(self, config: EmbeddingConfig) -> None:
        """Raise CredentialsNotFoundError when the endpoint cannot be reached."""
        if config.use_vertex_ai:
            if not config.project or not config.location:
                raise CredentialsNotFoundError(
                    use_vertex=True,
                    checked_locations=get_checked_credential_locations(True),
                )
        elif not config.api_key:
            raise CredentialsNotFoundError(
                use_vertex=False,
                checked_locations=get_checked_credential_locations(False),
            )

    def _create_client(self, config: EmbeddingConfig) -> genai.Client:
        http_options = types.HttpOptions(timeout=config.timeout_ms)
        if config.use_vertex_ai:
            return genai.Client(
                vertexai=True,
                project=config.project,
                location=config.location,
                http_options=http_options,
            )
        return genai.Client(
            api_key=config.api_key,
            http_options=http_options,
        )
