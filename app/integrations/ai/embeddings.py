"""Sentence-embedding service for vector search (Qdrant).

Uses a local sentence-transformers model (all-MiniLM-L6-v2 by default,
mean pooling, L2-normalized output). The model is loaded once per process
on first use.
"""
import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from app.config import settings
from app.exceptions import EmbeddingDimensionError, EmbeddingModelError

logger = logging.getLogger(__name__)

ModelLoader = Callable[[], Any]


def load_sentence_transformer() -> Any:
    """Load the configured SentenceTransformer model (blocking)."""
    from sentence_transformers import SentenceTransformer

    return SentenceTransformer(settings.EMBEDDING_MODEL, device=settings.EMBEDDING_DEVICE)


class ModelHandle:
    """Initialize-once wrapper around the embedding model.

    Concurrent callers of ``get()`` before the model is ready share one
    in-flight load task, so at most one load runs at a time. A failed load
    is not cached: the next ``get()`` starts a fresh attempt.
    """

    def __init__(self, loader: ModelLoader, dimension: int):
        self._loader = loader
        self._dimension = dimension
        self._model: Any = None
        self._pending: asyncio.Task | None = None

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    async def get(self) -> Any:
        if self._model is not None:
            return self._model
        if self._pending is None:
            self._pending = asyncio.create_task(self._load())
        pending = self._pending
        try:
            # shield: one cancelled waiter must not abort the shared load
            return await asyncio.shield(pending)
        finally:
            if pending.done() and self._pending is pending:
                self._pending = None

    async def _load(self) -> Any:
        logger.info("Loading embedding model: %s", settings.EMBEDDING_MODEL)
        try:
            model = await asyncio.to_thread(self._loader)
        except Exception as exc:
            logger.error("Failed to load embedding model: %s", exc)
            raise EmbeddingModelError(f"Failed to load embedding model: {exc}") from exc

        reported = model.get_sentence_embedding_dimension()
        if reported is not None and reported != self._dimension:
            raise EmbeddingDimensionError(
                f"Embedding model produces {reported}-dimensional vectors, "
                f"collection expects {self._dimension}"
            )
        self._model = model
        logger.info("Embedding model loaded (dim=%s)", reported)
        return model

    def reset(self) -> None:
        """Drop the cached model. Used at shutdown and in tests."""
        self._model = None
        self._pending = None


class EmbeddingService:
    """Generate normalized text embeddings.

    Usage:
        service = EmbeddingService()
        vector = await service.embed("Senior Python developer")
    """

    def __init__(
        self,
        loader: ModelLoader | None = None,
        dimension: int | None = None,
        batch_size: int | None = None,
    ):
        self.dimension = dimension or settings.EMBEDDING_DIMENSION
        self.batch_size = max(1, batch_size or settings.EMBEDDING_BATCH_SIZE)
        self.handle = ModelHandle(loader or load_sentence_transformer, self.dimension)

    async def embed(self, text: str) -> list[float]:
        """Generate the embedding vector for a single text."""
        model = await self.handle.get()
        try:
            output = await asyncio.to_thread(model.encode, text, normalize_embeddings=True)
        except Exception as exc:
            logger.error("Error generating embedding: %s", exc)
            raise EmbeddingModelError(f"Failed to generate embedding: {exc}") from exc

        vector = [float(x) for x in output]
        if len(vector) != self.dimension:
            raise EmbeddingDimensionError(
                f"Embedding has {len(vector)} dimensions, expected {self.dimension}"
            )
        return vector

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts, preserving order.

        Texts are processed in sub-batches of ``batch_size``. Calls inside a
        sub-batch run concurrently; sub-batches run one after another.
        """
        if not texts:
            return []

        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start:start + self.batch_size]
            vectors.extend(await asyncio.gather(*(self.embed(t) for t in batch)))
        logger.debug("Embedded %d texts in batches of %d", len(vectors), self.batch_size)
        return vectors


embedding_service = EmbeddingService()
