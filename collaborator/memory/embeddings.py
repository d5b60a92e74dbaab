"""Sentence embeddings for message search."""

from typing import List

try:
    from sentence_transformers import SentenceTransformer
except ImportError:
    SentenceTransformer = None


class EmbeddingGenerator:
    """Encodes message text with a sentence transformer."""

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        """
        Load the embedding model.

        Args:
            model_name: Sentence transformer model name
        """
        if SentenceTransformer is None:
            raise ImportError(
                "sentence-transformers is required for semantic search. "
                "Install it with: pip install 'collaborator[semantic]'"
            )

        self.model = SentenceTransformer(model_name)
        self.model_name = model_name

    def embed(self, text: str) -> List[float]:
        return self.model.encode(text, convert_to_numpy=True).tolist()

    def embed_many(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        return self.model.encode(texts, convert_to_numpy=True).tolist()
