"""
ChromaDB Vector Store

ChromaDB 검색 어댑터 - 컬렉션 임베딩 함수로 쿼리 임베딩 생성
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
import asyncio
import logging
import os

from .base import VectorStore, SearchResult, SearchResponse

logger = logging.getLogger(__name__)


DEFAULT_COLLECTIONS: Dict[str, str] = {
    "knowledge": "knowledge_base",
    "conversations": "conversations",
    "courses": "courses",
    "roadmaps": "roadmaps",
    "flashcards": "flashcards",
    "notes": "user_notes",
}


@dataclass
class ChromaStoreConfig:
    """ChromaDB 연결 설정"""
    host: Optional[str] = None          # 설정 시 HttpClient 사용
    port: int = 8000
    persist_dir: str = "./data/chromadb"
    distance_metric: str = "cosine"
    collections: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLLECTIONS))

    @classmethod
    def from_env(cls) -> "ChromaStoreConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            host=os.environ.get("CHROMA_HOST") or None,
            port=int(os.environ.get("CHROMA_PORT", "8000")),
            persist_dir=os.environ.get("CHROMA_PERSIST_DIR", "./data/chromadb"),
        )


class ChromaStore(VectorStore):
    """
    ChromaDB 벡터 저장소

    특징:
    - 논리 컬렉션 키 → 실제 컬렉션 이름 매핑
    - cosine distance → similarity (1 - distance) 변환
    - 동기 클라이언트 호출은 스레드로 위임 (이벤트 루프 비차단)
    """

    def __init__(self, config: Optional[ChromaStoreConfig] = None, client: Optional[Any] = None):
        self.config = config or ChromaStoreConfig()
        self._client = client
        self._collections: Dict[str, Any] = {}

    def _ensure_client(self):
        """ChromaDB 클라이언트 초기화 (lazy loading)"""
        if self._client is None:
            import chromadb
            from chromadb.config import Settings

            settings = Settings(anonymized_telemetry=False)
            if self.config.host:
                self._client = chromadb.HttpClient(
                    host=self.config.host,
                    port=self.config.port,
                    settings=settings
                )
            else:
                self._client = chromadb.PersistentClient(
                    path=self.config.persist_dir,
                    settings=settings
                )

            logger.info(
                f"ChromaDB initialized: host={self.config.host or 'local'}, "
                f"persist_dir={self.config.persist_dir}"
            )
        return self._client

    def resolve_collection(self, collection: str) -> str:
        """논리 컬렉션 키 → 실제 컬렉션 이름"""
        return self.config.collections.get(collection, collection)

    def _get_collection(self, collection: str):
        name = self.resolve_collection(collection)
        if name not in self._collections:
            client = self._ensure_client()
            self._collections[name] = client.get_or_create_collection(
                name=name,
                metadata={"hnsw:space": self.config.distance_metric}
            )
        return self._collections[name]

    @staticmethod
    def build_where(where: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """
        평면 필터 → Chroma where 절

        - None 값 제거
        - 리스트 값은 $in
        - 조건이 2개 이상이면 $and
        """
        if not where:
            return None

        clauses = []
        for key, value in where.items():
            if value is None:
                continue
            if isinstance(value, list):
                clauses.append({key: {"$in": value}})
            else:
                clauses.append({key: value})

        if not clauses:
            return None
        if len(clauses) == 1:
            return clauses[0]
        return {"$and": clauses}

    def _query(
        self,
        collection: str,
        query_text: str,
        top_k: int,
        where: Optional[Dict[str, Any]]
    ) -> SearchResponse:
        coll = self._get_collection(collection)
        results = coll.query(
            query_texts=[query_text],
            n_results=top_k,
            where=self.build_where(where),
            include=["documents", "metadatas", "distances"]
        )

        search_results: List[SearchResult] = []
        if results and results.get("ids") and results["ids"][0]:
            documents = (results.get("documents") or [[]])[0]
            metadatas = (results.get("metadatas") or [[]])[0]
            distances = (results.get("distances") or [[]])[0]

            for i, doc_id in enumerate(results["ids"][0]):
                distance = distances[i] if i < len(distances) else 1.0
                # cosine distance → similarity, [0, 1]로 클램프
                score = min(max(1.0 - distance, 0.0), 1.0)

                search_results.append(SearchResult(
                    id=doc_id,
                    content=documents[i] if i < len(documents) else "",
                    score=score,
                    metadata=dict(metadatas[i] or {}) if i < len(metadatas) else {},
                ))

        search_results.sort(key=lambda r: r.score, reverse=True)

        return SearchResponse(
            results=search_results,
            count=len(search_results),
            query=query_text,
            collection=collection,
        )

    async def search(
        self,
        collection: str,
        query_text: str,
        top_k: int = 5,
        where: Optional[Dict[str, Any]] = None
    ) -> SearchResponse:
        """벡터 검색"""
        response = await asyncio.to_thread(self._query, collection, query_text, top_k, where)
        logger.debug(
            f"Chroma search: collection={collection}, results={response.count}"
        )
        return response
