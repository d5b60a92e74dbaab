"""Chroma collection of message embeddings."""

from typing import Any, Dict, List, Optional

try:
    import chromadb
    from chromadb.config import Settings
except ImportError:
    chromadb = None


class VectorStore:
    """Persistent vector collection keyed by stored message id."""

    def __init__(self, db_path: str = "data/vector_db", collection_name: str = "messages"):
        """
        Open (or create) the collection.

        Args:
            db_path: Directory of the persistent chroma client
            collection_name: Collection to use
        """
        if chromadb is None:
            raise ImportError(
                "chromadb is required for semantic search. "
                "Install it with: pip install 'collaborator[semantic]'"
            )

        self.client = chromadb.PersistentClient(
            path=db_path,
            settings=Settings(anonymized_telemetry=False),
        )
        self.collection = self.client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )
        self.collection_name = collection_name

    def upsert(
        self,
        ids: List[str],
        texts: List[str],
        embeddings: List[List[float]],
        metadatas: List[Dict[str, Any]],
    ) -> None:
        """Add or replace entries."""
        if not ids:
            return
        self.collection.upsert(ids=ids, embeddings=embeddings, documents=texts, metadatas=metadatas)

    def search(
        self,
        query_embedding: List[float],
        n_results: int = 10,
        where: Optional[dict] = None,
    ) -> List[dict]:
        """
        Find the entries closest to a query.

        Args:
            query_embedding: Query vector
            n_results: Maximum number of entries
            where: Optional metadata filter

        Returns:
            Dicts with 'id', 'text', 'metadata' and 'distance', closest first
        """
        results = self.collection.query(
            query_embeddings=[query_embedding],
            n_results=n_results,
            where=where,
        )

        hits = []
        if results["ids"] and results["ids"][0]:
            distances = results.get("distances") or [[None] * len(results["ids"][0])]
            for i, entry_id in enumerate(results["ids"][0]):
                hits.append(
                    {
                        "id": entry_id,
                        "text": results["documents"][0][i],
                        "metadata": results["metadatas"][0][i],
                        "distance": distances[0][i],
                    }
                )
        return hits

    def delete_where(self, where: dict) -> None:
        self.collection.delete(where=where)
