"""Startup registration of the optional vector-search features.

The insights endpoints need Qdrant and a local embedding model. Their
availability is checked once when the app starts; endpoints consult the
registered features instead of importing heavy modules on first request.
"""
import importlib.util
import logging
from dataclasses import dataclass, field

from app.exceptions import FeatureUnavailableError
from app.integrations.vector.qdrant_store import QdrantVectorStore

logger = logging.getLogger(__name__)

REQUIRED_MODULES = ("sentence_transformers",)


def missing_modules() -> list[str]:
    return [name for name in REQUIRED_MODULES if importlib.util.find_spec(name) is None]


@dataclass
class VectorFeatures:
    store: QdrantVectorStore | None = None
    missing: list[str] = field(default_factory=list)

    def is_available(self) -> bool:
        return self.store is not None and not self.missing

    def require_store(self) -> QdrantVectorStore:
        if not self.is_available():
            raise FeatureUnavailableError(
                "Vector search is not available. Missing dependencies: "
                + (", ".join(self.missing) or "vector store not registered")
            )
        return self.store  # type: ignore[return-value]

    async def close(self) -> None:
        if self.store is not None:
            await self.store.close()
            self.store = None


def register_vector_features() -> VectorFeatures:
    """Check dependencies and build the vector store client."""
    missing = missing_modules()
    if missing:
        logger.warning("Vector features disabled, missing modules: %s", ", ".join(missing))
        return VectorFeatures(missing=missing)
    store = QdrantVectorStore.from_settings()
    logger.info("Vector features registered (collection=%s)", store.collection_name)
    return VectorFeatures(store=store)
