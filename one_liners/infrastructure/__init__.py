"""Infrastructure layer exports."""

from .embeddings import EMBEDDING_MODEL, EmbeddingClient, coerce_text
from .gravity_forms import GravityFormsClient
from .provider import OpenAIClient
from .threads import ThreadsAPI
from .vector_store import VectorFilePayload, VectorStoreWriter

__all__ = [
    "EMBEDDING_MODEL",
    "EmbeddingClient",
    "GravityFormsClient",
    "OpenAIClient",
    "ThreadsAPI",
    "VectorFilePayload",
    "VectorStoreWriter",
    "coerce_text",
]
