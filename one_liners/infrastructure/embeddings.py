"""Embedding generation through the provider's embeddings endpoint."""
from __future__ import annotations

import json
from typing import Any

import httpx

from one_liners.core.logging import get_logger
from one_liners.domain import ErrorCode, OneLinersError

from .provider import OpenAIClient

EMBEDDING_MODEL = "text-embedding-ada-002"

logger = get_logger(__name__)


def coerce_text(value: Any) -> str:
    """Return ``value`` unchanged when it is a string, JSON-encoded otherwise."""

    if isinstance(value, str):
        return value
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as exc:
        raise OneLinersError(
            ErrorCode.INVALID_INPUT,
            f"Input text must be a string or JSON serialisable, got {type(value).__name__}.",
        ) from exc


class EmbeddingClient:
    """Turns text into a single embedding vector. No retries at this layer."""

    def __init__(self, client: OpenAIClient, *, model: str = EMBEDDING_MODEL) -> None:
        self._client = client
        self._model = model

    def embed(self, text: Any) -> list[float]:
        if not isinstance(text, str):
            logger.warning("embedding_input_serialised", input_type=type(text).__name__)
        value = coerce_text(text)

        try:
            _, body = self._client.post_json("/embeddings", {"input": value, "model": self._model})
        except httpx.HTTPError as exc:
            logger.error("embedding_request_failed", error=str(exc))
            raise OneLinersError(ErrorCode.EMBEDDING_FAILED, f"Failed to generate embedding: {exc}") from exc

        try:
            embedding = body["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError):
            embedding = None
        if not isinstance(embedding, list):
            logger.error("embedding_missing", error=OpenAIClient.error_message(body))
            raise OneLinersError(ErrorCode.EMBEDDING_MISSING, "Embedding data not found in response.")
        if not all(isinstance(item, (int, float)) and not isinstance(item, bool) for item in embedding):
            logger.error("embedding_not_numeric", size=len(embedding))
            raise OneLinersError(ErrorCode.EMBEDDING_MISSING, "Embedding data in response is not numeric.")
        return [float(item) for item in embedding]


__all__ = ["EMBEDDING_MODEL", "EmbeddingClient", "coerce_text"]
