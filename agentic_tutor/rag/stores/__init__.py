from .base import VectorStore, SearchResult, SearchResponse
from .chroma_store import ChromaStore, ChromaStoreConfig, DEFAULT_COLLECTIONS

__all__ = [
    "VectorStore",
    "SearchResult",
    "SearchResponse",
    "ChromaStore",
    "ChromaStoreConfig",
    "DEFAULT_COLLECTIONS",
]
