"""Embedding providers for semantic search.

Usage:
    from brainguard.plugins.embedding_provider import GoogleGenAIEmbeddingProvider

    provider = GoogleGenAIEmbeddingProvider()
    vector = provider.embed("some text")  # None when unavailable
"""

from .base import EmbeddingAvailability, EmbeddingConfig, EmbeddingProvider
from .errors import CredentialsNotFoundError, EmbeddingProviderError, EmptyEmbeddingError
from .google_genai import GoogleGenAIEmbeddingProvider

__all__ = [
    'EmbeddingAvailability',
    'EmbeddingConfig',
    'EmbeddingProvider',
    'GoogleGenAIEmbeddingProvider',
    'EmbeddingProviderError',
    'CredentialsNotFoundError',
    'EmptyEmbeddingError',
]
