"""Insights API: vector sync and RAG query endpoints."""
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import get_db, get_insights_service
from app.exceptions import LLMNotConfiguredError, VectorStoreUnavailableError
from app.middleware.error_handler import AppException
from app.schemas.insights import (
    ActionResponse,
    InsightsHealth,
    LabelsResponse,
    QueryRequest,
    QueryResponse,
    QuerySource,
    SyncAllResponse,
)
from app.services.insights_service import InsightsService

router = APIRouter()

_PROVIDER_NAMES = {"openai": "OpenAI", "claude": "Anthropic"}


@router.get("/health", response_model=InsightsHealth)
async def insights_health(insights: InsightsService = Depends(get_insights_service)):
    return InsightsHealth(vector_features=insights.available)


# POST /insights/sync
@router.post("/sync", response_model=SyncAllResponse)
async def sync_all(
    db: AsyncSession = Depends(get_db),
    insights: InsightsService = Depends(get_insights_service),
):
    """Resync every job description into the vector store."""
    result = await insights.sync_all(db)
    message = f"Synced {result.synced} job descriptions"
    if result.failed:
        message += f", {result.failed} failed"
    return SyncAllResponse(
        synced=result.synced, failed=result.failed, errors=result.errors, message=message,
    )


# POST /insights/sync/{id}
@router.post("/sync/{job_description_id}", response_model=ActionResponse)
async def sync_one(
    job_description_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    insights: InsightsService = Depends(get_insights_service),
):
    await insights.sync_one(db, job_description_id)
    return ActionResponse(
        success=True, message=f"Job description {job_description_id} synced successfully",
    )


# POST /insights/query
@router.post("/query", response_model=QueryResponse)
async def query(
    body: QueryRequest,
    db: AsyncSession = Depends(get_db),
    insights: InsightsService = Depends(get_insights_service),
):
    if not body.question.strip():
        raise HTTPException(status_code=400, detail="Question is required")

    try:
        result = await insights.query(db, body.question, label=body.label, top_k=body.top_k)
    except VectorStoreUnavailableError as exc:
        raise AppException(
            503, "Vector database is not available. Please ensure Qdrant is running.", cause=exc.message,
        ) from exc
    except LLMNotConfiguredError as exc:
        raise AppException(
            400,
            f"{_PROVIDER_NAMES.get(exc.provider, exc.provider)} API key not configured. Please add it in Settings.",
            cause=exc.message,
        ) from exc

    return QueryResponse(
        answer=result.answer,
        sources=[QuerySource(**vars(s)) for s in result.sources],
    )


# GET /insights/labels
@router.get("/labels", response_model=LabelsResponse)
async def list_labels(
    db: AsyncSession = Depends(get_db),
    insights: InsightsService = Depends(get_insights_service),
):
    return LabelsResponse(labels=await insights.list_labels(db))


# POST /insights/init
@router.post("/init", response_model=ActionResponse)
async def init_collection(insights: InsightsService = Depends(get_insights_service)):
    await insights.init_collection()
    return ActionResponse(success=True, message="Qdrant collection initialized")
