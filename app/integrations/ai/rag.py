"""RAG (Retrieval-Augmented Generation) over job descriptions.

Embeds the question, retrieves the closest chunks from Qdrant and asks the
LLM to answer from that context only.
"""
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import LLMNotConfiguredError
from app.integrations.ai.embeddings import EmbeddingService
from app.integrations.ai.llm_client import LLMClient
from app.integrations.vector.qdrant_store import QdrantVectorStore, ScoredRecord
from app.repositories import setting_repository

logger = logging.getLogger(__name__)

FALLBACK_OPENAI_MODEL = "gpt-4o-mini"

NO_RESULTS_ANSWER = (
    "I couldn't find any relevant information in the job descriptions to answer your question. "
    "Please try rephrasing your question or check if there are job descriptions with the selected label."
)

SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on job descriptions. "
    "Answer only from the supplied context. If the answer cannot be found in the context, say so."
)

USER_PROMPT_TEMPLATE = """Context from job descriptions:
{context}

User question: {question}

Provide a clear, concise answer based on the context above. If relevant, mention which job description(s) the information comes from."""


@dataclass
class RAGSource:
    job_description_id: str
    label: str | None
    title: str | None
    chunk_text: str
    score: float


@dataclass
class RAGAnswer:
    answer: str
    sources: list[RAGSource] = field(default_factory=list)


@dataclass
class LLMConfig:
    provider: str
    api_key: str
    model: str


async def resolve_llm_config(db: AsyncSession) -> LLMConfig:
    """Look up the LLM credential and model: settings table first, then environment."""
    provider = settings.AI_PROVIDER
    if provider == "claude":
        api_key = await setting_repository.get_value(db, "anthropic_api_key") or settings.ANTHROPIC_API_KEY
        model = await setting_repository.get_value(db, "anthropic_model") or settings.ANTHROPIC_MODEL
        if not api_key:
            raise LLMNotConfiguredError("Anthropic API key not found in settings", provider="claude")
        return LLMConfig(provider=provider, api_key=api_key, model=model)

    api_key = await setting_repository.get_value(db, "openai_api_key") or settings.OPENAI_API_KEY
    if not api_key:
        raise LLMNotConfiguredError("OpenAI API key not found in settings")
    model = (
        await setting_repository.get_value(db, "openai_model")
        or settings.OPENAI_MODEL
        or FALLBACK_OPENAI_MODEL
    )
    return LLMConfig(provider="openai", api_key=api_key, model=model)


def build_context(results: list[ScoredRecord]) -> str:
    blocks = []
    for i, result in enumerate(results, start=1):
        payload = result.payload
        source = payload.title or f"Job Description {payload.job_description_id[:8]}"
        label = f" [{payload.label}]" if payload.label else ""
        blocks.append(f"[Source {i}: {source}{label}]\n{payload.chunk_text}")
    return "\n\n---\n\n".join(blocks)


def _default_llm_factory(config: LLMConfig) -> LLMClient:
    return LLMClient(provider=config.provider, api_key=config.api_key, model=config.model)


class JobDescriptionRAG:
    """Question answering over the indexed job descriptions."""

    def __init__(
        self,
        store: QdrantVectorStore,
        embedder: EmbeddingService,
        llm_factory: Callable[[LLMConfig], LLMClient] | None = None,
    ):
        self.store = store
        self.embedder = embedder
        self.llm_factory = llm_factory or _default_llm_factory

    async def query(
        self,
        db: AsyncSession,
        question: str,
        label_filter: str | None = None,
        top_k: int | None = None,
    ) -> RAGAnswer:
        """Answer a question with cited sources.

        Steps:
            1. Ensure the collection exists
            2. Embed the question
            3. Retrieve top_k chunks (optionally by label)
            4. No matches: canned answer, LLM not called
            5. Build context and prompt, call the LLM
        """
        top_k = top_k or settings.RAG_TOP_K

        await self.store.ensure_collection()

        question_vector = await self.embedder.embed(question)
        results = await self.store.search(question_vector, limit=top_k, label_filter=label_filter or None)

        if not results:
            logger.info("RAG query found no matches (label=%s)", label_filter)
            return RAGAnswer(answer=NO_RESULTS_ANSWER, sources=[])

        config = await resolve_llm_config(db)
        llm = self.llm_factory(config)

        user_prompt = USER_PROMPT_TEMPLATE.format(context=build_context(results), question=question)
        answer = await llm.generate(SYSTEM_PROMPT, user_prompt)

        logger.info("RAG query answered from %d chunks (label=%s)", len(results), label_filter)
        return RAGAnswer(
            answer=answer,
            sources=[
                RAGSource(
                    job_description_id=r.payload.job_description_id,
                    label=r.payload.label,
                    title=r.payload.title,
                    chunk_text=r.payload.chunk_text,
                    score=r.score,
                )
                for r in results
            ],
        )
