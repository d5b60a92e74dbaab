"""Vector storage for semantic message search."""

from .embeddings import EmbeddingGenerator
from .vector_store import VectorStore

__all__ = ["VectorStore", "EmbeddingGenerator"]
