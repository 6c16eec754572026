"""Environment lookup for the embedding provider.

Uses the same variables as the host's Google model provider, so one set of
credentials serves both:

    GOOGLE_GENAI_API_KEY       AI Studio key (selects AI Studio when set)
    JAATO_GOOGLE_USE_VERTEX    force Vertex AI on or off
    JAATO_GOOGLE_PROJECT       Vertex project (falls back to GOOGLE_CLOUD_PROJECT)
    JAATO_GOOGLE_LOCATION      Vertex region
    JAATO_EMBEDDING_MODEL      embedding model, default text-embedding-004
    JAATO_EMBEDDING_TIMEOUT_MS transport timeout, default 10000

Values passed explicitly in an EmbeddingConfig take precedence over all of
these.
"""

import os
from typing import List, Optional

ENV_EMBEDDING_MODEL = "JAATO_EMBEDDING_MODEL"
ENV_EMBEDDING_TIMEOUT_MS = "JAATO_EMBEDDING_TIMEOUT_MS"

ENV_GOOGLE_USE_VERTEX = "JAATO_GOOGLE_USE_VERTEX"
ENV_GOOGLE_PROJECT = "JAATO_GOOGLE_PROJECT"
ENV_GOOGLE_LOCATION = "JAATO_GOOGLE_LOCATION"
ENV_GOOGLE_API_KEY = "GOOGLE_GENAI_API_KEY"
ENV_GOOGLE_CLOUD_PROJECT = "GOOGLE_CLOUD_PROJECT"

DEFAULT_EMBEDDING_MODEL = "text-embedding-004"
DEFAULT_TIMEOUT_MS = 10_000

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env(name: str) -> Optional[str]:
    """Value of a variable, with empty strings treated as unset."""
    return os.environ.get(name) or None


def resolve_api_key() -> Optional[str]:
    return _env(ENV_GOOGLE_API_KEY)


def resolve_use_vertex() -> bool:
    """Whether to talk to Vertex AI rather than AI Studio.

    JAATO_GOOGLE_USE_VERTEX decides when it is set; otherwise Vertex AI is
    used exactly when no API key is available.
    """
    flag = os.environ.get(ENV_GOOGLE_USE_VERTEX)
    if flag is not None:
        return flag.strip().lower() in _TRUTHY
    return resolve_api_key() is None


def resolve_project() -> Optional[str]:
    return _env(ENV_GOOGLE_PROJECT) or _env(ENV_GOOGLE_CLOUD_PROJECT)


def resolve_location() -> Optional[str]:
    return _env(ENV_GOOGLE_LOCATION)


def resolve_embedding_model() -> str:
    return _env(ENV_EMBEDDING_MODEL) or DEFAULT_EMBEDDING_MODEL


def resolve_timeout_ms() -> int:
    """Transport timeout; anything but a positive integer means the default."""
    raw = _env(ENV_EMBEDDING_TIMEOUT_MS)
    try:
        value = int(raw) if raw else 0
    except ValueError:
        value = 0
    return value if value > 0 else DEFAULT_TIMEOUT_MS


def get_checked_credential_locations(use_vertex: bool) -> List[str]:
    """Human-readable state of each credential variable, secrets masked."""
    if use_vertex:
        return [
            f"{ENV_GOOGLE_PROJECT} / {ENV_GOOGLE_CLOUD_PROJECT}: {resolve_project() or 'not set'}",
            f"{ENV_GOOGLE_LOCATION}: {resolve_location() or 'not set'}",
        ]

    api_key = resolve_api_key()
    state = f"set (length={len(api_key)})" if api_key else "not set"
    return [f"{ENV_GOOGLE_API_KEY}: {state}"]
