"""Insights service: wires the sync and RAG components to the registered features."""
import logging
import uuid as _uuid
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from app.integrations.ai.embeddings import EmbeddingService
from app.integrations.ai.llm_client import LLMClient
from app.integrations.ai.rag import JobDescriptionRAG, LLMConfig, RAGAnswer
from app.integrations.vector.registry import VectorFeatures
from app.repositories import job_description_repository
from app.services.vector_sync_service import SyncResult, VectorSyncService

logger = logging.getLogger(__name__)


class InsightsService:
    def __init__(
        self,
        features: VectorFeatures,
        embedder: EmbeddingService,
        llm_factory: Callable[[LLMConfig], LLMClient] | None = None,
    ):
        self.features = features
        self.embedder = embedder
        self._sync: VectorSyncService | None = None
        self._rag: JobDescriptionRAG | None = None

        if features.is_available():
            store = features.require_store()
            self._sync = VectorSyncService(store, embedder)
            self._rag = JobDescriptionRAG(store, embedder, llm_factory)

    @property
    def available(self) -> bool:
        return self.features.is_available()

    @property
    def sync(self) -> VectorSyncService:
        self.features.require_store()
        return self._sync  # type: ignore[return-value]

    @property
    def rag(self) -> JobDescriptionRAG:
        self.features.require_store()
        return self._rag  # type: ignore[return-value]

    async def init_collection(self) -> None:
        await self.features.require_store().ensure_collection()

    async def sync_all(self, db: AsyncSession) -> SyncResult:
        return await self.sync.sync_all(db)

    async def sync_one(self, db: AsyncSession, job_description_id: _uuid.UUID) -> int:
        await self.init_collection()
        return await self.sync.sync_one(db, job_description_id)

    async def delete_vectors(self, job_description_id: _uuid.UUID) -> int:
        if not self.available:
            return 0
        return await self.sync.delete_vectors(job_description_id)

    async def query(
        self,
        db: AsyncSession,
        question: str,
        label: str | None = None,
        top_k: int | None = None,
    ) -> RAGAnswer:
        return await self.rag.query(db, question.strip(), label_filter=label, top_k=top_k)

    async def list_labels(self, db: AsyncSession) -> list[str]:
        return await job_description_repository.list_labels(db)
