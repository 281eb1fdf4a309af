"""Shared test fixtures: in-memory SQLite, in-memory Qdrant, fake embedding model, mocked LLM."""
import hashlib
import math
import re
import threading
import time
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from qdrant_client import AsyncQdrantClient
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles

from app.integrations.ai.embeddings import EmbeddingService
from app.integrations.vector.qdrant_store import QdrantVectorStore
from app.integrations.vector.registry import VectorFeatures
from app.models.app_setting import AppSetting
from app.models.base import Base
from app.models.job_description import JobDescription
from app.main import app
from app.dependencies import get_db
from app.services.insights_service import InsightsService

# --- SQLite compatibility: compile PostgreSQL types for SQLite ---

@compiles(UUID, "sqlite")
def _compile_uuid_sqlite(type_, compiler, **kw):
    return "VARCHAR(36)"


# In-memory SQLite for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
test_session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

DIMENSION = 384
FAIL_MARKER = "FAIL_EMBED"
_WORD = re.compile(r"\w+")


class FakeSentenceModel:
    """Deterministic bag-of-words stand-in for a SentenceTransformer.

    Each word is hashed to one of ``dimension`` buckets and the counts are
    L2-normalized, so texts sharing words have higher cosine similarity.
    Text containing FAIL_MARKER raises, to simulate an inference failure.
    """

    def __init__(self, dimension: int = DIMENSION, delay: float = 0.0):
        self.dimension = dimension
        self.delay = delay
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def get_sentence_embedding_dimension(self) -> int:
        return self.dimension

    def encode(self, text: str, normalize_embeddings: bool = True) -> list[float]:
        with self._lock:
            self.calls += 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if FAIL_MARKER in text:
                raise RuntimeError("simulated inference failure")
            vector = [0.0] * self.dimension
            for word in _WORD.findall(text.lower()):
                bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % self.dimension
                vector[bucket] += 1.0
            norm = math.sqrt(sum(v * v for v in vector)) or 1.0
            if not any(vector):
                vector[0] = 1.0
            return [v / norm for v in vector]
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture(autouse=True)
async def setup_db():
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _override_get_db():
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = _override_get_db


@pytest.fixture
async def db_session():
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_model() -> FakeSentenceModel:
    return FakeSentenceModel()


@pytest.fixture
def embedder(fake_model: FakeSentenceModel) -> EmbeddingService:
    return EmbeddingService(loader=lambda: fake_model, dimension=DIMENSION, batch_size=10)


@pytest.fixture
async def qdrant_client():
    qdrant = AsyncQdrantClient(location=":memory:")
    yield qdrant
    await qdrant.close()


@pytest.fixture
def vector_store(qdrant_client: AsyncQdrantClient) -> QdrantVectorStore:
    return QdrantVectorStore(
        qdrant_client, collection_name="test_job_descriptions", dimension=DIMENSION, url="http://qdrant.test:6333",
    )


@pytest.fixture
def llm() -> MagicMock:
    mock = MagicMock()
    mock.generate = AsyncMock(return_value="Mocked answer from the job descriptions.")
    return mock


@pytest.fixture
def llm_factory(llm: MagicMock) -> MagicMock:
    return MagicMock(return_value=llm)


@pytest.fixture
def insights(vector_store, embedder, llm_factory) -> InsightsService:
    service = InsightsService(VectorFeatures(store=vector_store), embedder, llm_factory)
    app.state.insights = service
    return service


@pytest.fixture
async def client(insights):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create_job_description(
    db: AsyncSession,
    content: str,
    *,
    title: str | None = None,
    label: str | None = None,
) -> JobDescription:
    """Insert a job description and return it with server defaults loaded."""
    jd = JobDescription(content=content, title=title, label=label)
    db.add(jd)
    await db.commit()
    await db.refresh(jd)
    return jd


async def _set_setting(db: AsyncSession, key: str, value: str | None) -> None:
    db.add(AppSetting(key=key, value=value))
    await db.commit()
