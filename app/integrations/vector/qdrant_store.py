"""Qdrant vector store client for job description chunks.

Thin async wrapper: collection lifecycle, upsert, delete by document id,
similarity search. Payloads are validated on the way out.
"""
import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from qdrant_client import AsyncQdrantClient, models
from qdrant_client.http.exceptions import ResponseHandlingException

from app.config import settings
from app.exceptions import VectorStoreError, VectorStoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CONNECT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, ConnectionRefusedError)


class VectorPayload(BaseModel):
    """Denormalized snapshot of a job description stored with each chunk vector."""

    job_description_id: str
    label: str | None = None
    title: str | None = None
    chunk_text: str
    chunk_index: int
    created_at: str
    updated_at: str


@dataclass
class VectorRecord:
    id: str
    vector: list[float]
    payload: VectorPayload


@dataclass
class ScoredRecord:
    id: str
    score: float
    payload: VectorPayload


def _is_connection_error(exc: BaseException) -> bool:
    if isinstance(exc, _CONNECT_ERRORS):
        return True
    if isinstance(exc, ResponseHandlingException):
        return isinstance(exc.source, _CONNECT_ERRORS)
    return False


def _match(key: str, value: str) -> models.FieldCondition:
    return models.FieldCondition(key=key, match=models.MatchValue(value=value))


class QdrantVectorStore:
    """Job description collection in Qdrant.

    Usage:
        store = QdrantVectorStore(AsyncQdrantClient(url=settings.QDRANT_URL))
        await store.ensure_collection()
        results = await store.search(vector, limit=5, label_filter="eng")
    """

    def __init__(
        self,
        client: AsyncQdrantClient,
        collection_name: str | None = None,
        dimension: int | None = None,
        scroll_limit: int | None = None,
        url: str | None = None,
    ):
        self.client = client
        self.collection_name = collection_name or settings.QDRANT_COLLECTION
        self.dimension = dimension or settings.EMBEDDING_DIMENSION
        self.scroll_limit = scroll_limit or settings.QDRANT_SCROLL_LIMIT
        self.url = url or settings.QDRANT_URL

    @classmethod
    def from_settings(cls) -> "QdrantVectorStore":
        client = AsyncQdrantClient(
            url=settings.QDRANT_URL,
            api_key=settings.QDRANT_API_KEY or None,
            timeout=settings.QDRANT_TIMEOUT,
        )
        return cls(client)

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Await a Qdrant call, classifying failures."""
        try:
            return await awaitable
        except VectorStoreError:
            raise
        except Exception as exc:
            if _is_connection_error(exc):
                logger.error("Qdrant unreachable during %s: %s", operation, exc)
                raise VectorStoreUnavailableError(
                    f"Cannot connect to Qdrant at {self.url}. Please ensure Qdrant is running."
                ) from exc
            logger.error("Qdrant %s failed: %s", operation, exc)
            raise VectorStoreError(f"Vector store {operation} failed: {exc}") from exc

    async def ensure_collection(self) -> None:
        """Create the collection (cosine, fixed dimension) if it does not exist."""
        response = await self._call("get_collections", self.client.get_collections())
        if any(c.name == self.collection_name for c in response.collections):
            logger.debug("Qdrant collection %s already exists", self.collection_name)
            return

        logger.info("Creating Qdrant collection %s (dim=%d)", self.collection_name, self.dimension)
        await self._call(
            "create_collection",
            self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=models.VectorParams(size=self.dimension, distance=models.Distance.COSINE),
            ),
        )

    async def upsert(self, records: Sequence[VectorRecord]) -> None:
        """Insert or overwrite records by id, waiting for the write to be applied."""
        if not records:
            return
        points = [
            models.PointStruct(id=r.id, vector=r.vector, payload=r.payload.model_dump())
            for r in records
        ]
        await self._call(
            "upsert",
            self.client.upsert(collection_name=self.collection_name, points=points, wait=True),
        )
        logger.info("Upserted %d vectors to %s", len(points), self.collection_name)

    async def delete_by_job_description_id(self, job_description_id: str) -> int:
        """Delete every vector whose payload belongs to the given document.

        Point ids are independent of the document id, so matching points are
        collected with a filtered scroll, one page at a time.

        Returns:
            Number of deleted points
        """
        scroll_filter = models.Filter(must=[_match("job_description_id", job_description_id)])
        point_ids: list = []
        offset = None
        while True:
            points, offset = await self._call(
                "scroll",
                self.client.scroll(
                    collection_name=self.collection_name,
                    scroll_filter=scroll_filter,
                    limit=self.scroll_limit,
                    offset=offset,
                    with_payload=False,
                    with_vectors=False,
                ),
            )
            point_ids.extend(p.id for p in points)
            if offset is None:
                break

        if not point_ids:
            return 0

        await self._call(
            "delete",
            self.client.delete(
                collection_name=self.collection_name,
                points_selector=models.PointIdsList(points=point_ids),
                wait=True,
            ),
        )
        logger.info("Deleted %d vectors for job description %s", len(point_ids), job_description_id)
        return len(point_ids)

    async def count_by_job_description_id(self, job_description_id: str) -> int:
        result = await self._call(
            "count",
            self.client.count(
                collection_name=self.collection_name,
                count_filter=models.Filter(must=[_match("job_description_id", job_description_id)]),
                exact=True,
            ),
        )
        return result.count

    async def search(
        self,
        query_vector: list[float],
        limit: int = 5,
        label_filter: str | None = None,
    ) -> list[ScoredRecord]:
        """Cosine nearest-neighbour search, best match first.

        When ``label_filter`` is given only chunks whose payload label equals
        it exactly are considered.
        """
        query_filter = None
        if label_filter:
            query_filter = models.Filter(must=[_match("label", label_filter)])

        response = await self._call(
            "search",
            self.client.query_points(
                collection_name=self.collection_name,
                query=query_vector,
                query_filter=query_filter,
                limit=limit,
                with_payload=True,
            ),
        )

        results: list[ScoredRecord] = []
        for point in response.points:
            try:
                payload = VectorPayload.model_validate(point.payload or {})
            except ValidationError as exc:
                raise VectorStoreError(f"Malformed payload on point {point.id}: {exc}") from exc
            results.append(ScoredRecord(id=str(point.id), score=point.score, payload=payload))
        return results

    async def close(self) -> None:
        await self.client.close()
