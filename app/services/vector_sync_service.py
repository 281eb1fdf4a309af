"""Keep Qdrant vectors consistent with the job_descriptions table.

Each document is resynchronized by deleting all of its vectors and inserting
the embeddings of its current chunking. No diffing against stored vectors.
"""
import asyncio
import logging
import uuid as _uuid
import weakref
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import JobDescriptionNotFoundError
from app.integrations.ai.chunking import chunk_job_description
from app.integrations.ai.embeddings import EmbeddingService
from app.integrations.vector.qdrant_store import QdrantVectorStore, VectorPayload, VectorRecord
from app.models.job_description import JobDescription
from app.repositories import job_description_repository

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    synced: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


def _iso(jd: JobDescription, name: str) -> str:
    value: datetime | None = getattr(jd, name)
    if value is None:
        raise ValueError(f"Job description {jd.id} has no {name} timestamp")
    return value.isoformat()


class VectorSyncService:
    """Synchronize one job description, or the whole table, into Qdrant."""

    def __init__(
        self,
        store: QdrantVectorStore,
        embedder: EmbeddingService,
        max_chunk_size: int | None = None,
    ):
        self.store = store
        self.embedder = embedder
        self.max_chunk_size = max_chunk_size or settings.CHUNK_MAX_SIZE
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, job_description_id: str) -> asyncio.Lock:
        lock = self._locks.get(job_description_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[job_description_id] = lock
        return lock

    async def sync_one(self, db: AsyncSession, job_description_id: _uuid.UUID) -> int:
        """Replace the vectors of one job description.

        Returns:
            Number of chunks written (0 for empty content; the old vectors
            are still removed)
        """
        jd = await job_description_repository.get_by_id(db, job_description_id)
        if jd is None:
            raise JobDescriptionNotFoundError(str(job_description_id))

        jd_id = str(jd.id)
        created_at, updated_at = _iso(jd, "created_at"), _iso(jd, "updated_at")
        async with self._lock_for(jd_id):
            await self.store.delete_by_job_description_id(jd_id)

            chunks = chunk_job_description(jd.content, self.max_chunk_size)
            if not chunks:
                logger.warning("No chunks created for job description %s", jd_id)
                return 0

            embeddings = await self.embedder.embed_batch([c.text for c in chunks])

            records = [
                VectorRecord(
                    id=str(_uuid.uuid4()),
                    vector=vector,
                    payload=VectorPayload(
                        job_description_id=jd_id,
                        label=jd.label,
                        title=jd.title,
                        chunk_text=chunk.text,
                        chunk_index=chunk.index,
                        created_at=created_at,
                        updated_at=updated_at,
                    ),
                )
                for chunk, vector in zip(chunks, embeddings)
            ]
            await self.store.upsert(records)

        logger.info("Synced job description %s (%d chunks)", jd_id, len(records))
        return len(records)

    async def sync_all(self, db: AsyncSession) -> SyncResult:
        """Resync every job description, one at a time.

        A failing document is recorded in the result and does not stop the
        remaining ones.
        """
        await self.store.ensure_collection()

        ids = await job_description_repository.list_ids(db)
        logger.info("Starting sync of %d job descriptions", len(ids))

        result = SyncResult()
        for jd_id in ids:
            try:
                await self.sync_one(db, jd_id)
                result.synced += 1
            except Exception as exc:
                result.failed += 1
                message = f"Failed to sync {jd_id}: {exc}"
                result.errors.append(message)
                logger.error(message)

        logger.info("Sync complete: %d synced, %d failed", result.synced, result.failed)
        return result

    async def delete_vectors(self, job_description_id: _uuid.UUID) -> int:
        jd_id = str(job_description_id)
        async with self._lock_for(jd_id):
            return await self.store.delete_by_job_description_id(jd_id)
