"""Tests for GoogleGenAIEmbeddingProvider."""

from unittest.mock import MagicMock, patch

import pytest

from ..base import EmbeddingAvailability, EmbeddingConfig, EmbeddingProvider
from ..env import (
    DEFAULT_EMBEDDING_MODEL,
    ENV_EMBEDDING_MODEL,
    ENV_GOOGLE_API_KEY,
    ENV_GOOGLE_LOCATION,
    ENV_GOOGLE_PROJECT,
)
from ..errors import CredentialsNotFoundError, EmptyEmbeddingError
from ..google_genai import PROBE_TEXT, GoogleGenAIEmbeddingProvider


def embed_response(values):
    """Create a mock embed_content() response."""
    response = MagicMock()
    response.embeddings = [MagicMock(values=values)] if values is not None else []
    return response


def create_mock_client(values=(0.1, 0.2, 0.3)):
    """Create a mock genai.Client whose embed_content() returns values."""
    mock_client = MagicMock()
    mock_client.models.embed_content.return_value = embed_response(list(values))
    return mock_client


class TestAvailability:
    """Tests for the one-time availability check."""

    @patch('google.genai.Client')
    def test_no_credentials(self, mock_client_class):
        """Should be unavailable without creating a client."""
        provider = GoogleGenAIEmbeddingProvider()

        assert provider.check_availability() is EmbeddingAvailability.UNAVAILABLE
        mock_client_class.assert_not_called()

    @patch('google.genai.Client')
    def test_vertex_without_location(self, mock_client_class, monkeypatch):
        """Should not build a client when Vertex has no location."""
        monkeypatch.setenv(ENV_GOOGLE_PROJECT, "test-project")

        provider = GoogleGenAIEmbeddingProvider()

        assert provider.check_availability() is EmbeddingAvailability.UNAVAILABLE
        mock_client_class.assert_not_called()

    @patch('google.genai.Client')
    def test_api_key_available(self, mock_client_class, monkeypatch):
        """Should probe once with an API key and cache the result."""
        monkeypatch.setenv(ENV_GOOGLE_API_KEY, "test-api-key")
        mock_client = create_mock_client()
        mock_client_class.return_value = mock_client

        provider = GoogleGenAIEmbeddingProvider()
        assert provider.availability is EmbeddingAvailability.NOT_CHECKED

        assert provider.check_availability() is EmbeddingAvailability.AVAILABLE
        assert provider.check_availability() is EmbeddingAvailability.AVAILABLE

        mock_client_class.assert_called_once()
        assert mock_client_class.call_args.kwargs["api_key"] == "test-api-key"
        mock_client.models.embed_content.assert_called_once_with(
            model=DEFAULT_EMBEDDING_MODEL, contents=PROBE_TEXT
        )

    @patch('google.genai.Client')
    def test_vertex_client(self, mock_client_class, monkeypatch):
        """Should pass Vertex project and location to the client."""
        monkeypatch.setenv(ENV_GOOGLE_PROJECT, "test-project")
        monkeypatch.setenv(ENV_GOOGLE_LOCATION, "us-central1")
        mock_client_class.return_value = create_mock_client()

        provider = GoogleGenAIEmbeddingProvider()

        assert provider.check_availability() is EmbeddingAvailability.AVAILABLE
        kwargs = mock_client_class.call_args.kwargs
        assert kwargs["vertexai"] is True
        assert kwargs["project"] == "test-project"
        assert kwargs["location"] == "us-central1"
        assert "api_key" not in kwargs

    @patch('google.genai.Client')
    def test_explicit_config(self, mock_client_class):
        """Should prefer explicit config over the environment."""
        mock_client_class.return_value = create_mock_client()

        provider = GoogleGenAIEmbeddingProvider(EmbeddingConfig(
            api_key="config-key", model="text-embedding-005", timeout_ms=2500,
        ))

        assert provider.check_availability() is EmbeddingAvailability.AVAILABLE
        kwargs = mock_client_class.call_args.kwargs
        assert kwargs["api_key"] == "config-key"
        assert kwargs["http_options"].timeout == 2500
        assert provider.model == "text-embedding-005"

    @patch('google.genai.Client')
    def test_probe_failure(self, mock_client_class, monkeypatch, caplog):
        """A failing probe marks the provider unavailable for good."""
        monkeypatch.setenv(ENV_GOOGLE_API_KEY, "test-api-key")
        mock_client = MagicMock()
        mock_client.models.embed_content.side_effect = Exception("503 Service Unavailable")
        mock_client_class.return_value = mock_client

        provider = GoogleGenAIEmbeddingProvider()

        assert provider.check_availability() is EmbeddingAvailability.UNAVAILABLE
        assert provider.embed("fais le pour moi") is None
        assert mock_client.models.embed_content.call_count == 1
        assert "probe failed" in caplog.text

    @patch('google.genai.Client')
    def test_empty_probe_response(self, mock_client_class, monkeypatch):
        """Should treat a probe without values as unavailable."""
        monkeypatch.setenv(ENV_GOOGLE_API_KEY, "test-api-key")
        mock_client = MagicMock()
        mock_client.models.embed_content.return_value = embed_response(None)
        mock_client_class.return_value = mock_client

        provider = GoogleGenAIEmbeddingProvider()

        assert provider.check_availability() is EmbeddingAvailability.UNAVAILABLE


class TestEmbed:
    """Tests for embed()."""

    @pytest.fixture
    def available(self, monkeypatch):
        monkeypatch.setenv(ENV_GOOGLE_API_KEY, "test-api-key")
        with patch('google.genai.Client') as mock_client_class:
            mock_client = create_mock_client()
            mock_client_class.return_value = mock_client
            yield mock_client

    def test_returns_vector(self, available):
        """Should return the values of the first embedding."""
        provider = GoogleGenAIEmbeddingProvider()

        assert provider.embed("fais le pour moi") == [0.1, 0.2, 0.3]
        available.models.embed_content.assert_called_with(
            model=DEFAULT_EMBEDDING_MODEL, contents="fais le pour moi"
        )

    def test_model_from_env(self, available, monkeypatch):
        """Should use the model named in the environment."""
        monkeypatch.setenv(ENV_EMBEDDING_MODEL, "text-embedding-005")
        provider = GoogleGenAIEmbeddingProvider()

        provider.embed("test")

        assert available.models.embed_content.call_args.kwargs["model"] == "text-embedding-005"

    def test_call_failure_returns_none(self, available, caplog):
        """A failed call yields None but keeps the provider available."""
        provider = GoogleGenAIEmbeddingProvider()
        provider.check_availability()
        available.models.embed_content.side_effect = Exception("deadline exceeded")

        assert provider.embed("test") is None
        assert provider.availability is EmbeddingAvailability.AVAILABLE
        assert "Embedding call failed" in caplog.text

        available.models.embed_content.side_effect = None
        assert provider.embed("test") == [0.1, 0.2, 0.3]

    def test_empty_values_return_none(self, available):
        """Should return None when the response has no values."""
        provider = GoogleGenAIEmbeddingProvider()
        provider.check_availability()
        available.models.embed_content.return_value = embed_response([])

        assert provider.embed("test") is None

    def test_unavailable_never_calls_client(self):
        """Should return None without credentials and never build a client."""
        provider = GoogleGenAIEmbeddingProvider()

        assert provider.embed("test") is None
        assert provider.availability is EmbeddingAvailability.UNAVAILABLE


def test_implements_protocol():
    """Should satisfy the EmbeddingProvider protocol."""
    assert isinstance(GoogleGenAIEmbeddingProvider(), EmbeddingProvider)
    assert GoogleGenAIEmbeddingProvider().name == "google_genai"


def test_credentials_error_message():
    """Should name the endpoint and the checked locations."""
    error = CredentialsNotFoundError(use_vertex=False, checked_locations=["GOOGLE_GENAI_API_KEY: not set"])

    message = str(error)
    assert "AI Studio" in message
    assert "GOOGLE_GENAI_API_KEY: not set" in message


def test_empty_embedding_error_names_model():
    """Should name the model that returned nothing."""
    assert "text-embedding-004" in str(EmptyEmbeddingError("text-embedding-004"))
