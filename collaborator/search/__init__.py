"""Message search providers and result formatting."""

from .base import MessageSearchProvider, SearchParams, SearchResult
from .keyword_provider import KeywordSearchProvider

__all__ = ["MessageSearchProvider", "SearchParams", "SearchResult", "KeywordSearchProvider", "create_search_provider"]


def create_search_provider(search_config, store) -> MessageSearchProvider:
    """
    Build the configured provider.

    Args:
        search_config: SearchConfig
        store: ConversationStore

    Returns:
        The keyword provider, or the semantic provider wrapping it
    """
    keyword = KeywordSearchProvider(store)
    if search_config.provider != "semantic":
        return keyword

    from ..memory import EmbeddingGenerator, VectorStore
    from .semantic_provider import SemanticSearchProvider

    return SemanticSearchProvider(
        vector_store=VectorStore(search_config.vector_db_path),
        embedder=EmbeddingGenerator(search_config.embedding_model),
        fallback=keyword,
    )
