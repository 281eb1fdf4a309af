"""Pydantic schemas for the insights (sync + RAG) API."""
from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    question: str = ""
    label: str | None = None
    top_k: int | None = Field(default=None, ge=1, le=50)


class QuerySource(BaseModel):
    job_description_id: str
    label: str | None = None
    title: str | None = None
    chunk_text: str
    score: float


class QueryResponse(BaseModel):
    success: bool = True
    answer: str
    sources: list[QuerySource]


class SyncAllResponse(BaseModel):
    success: bool = True
    synced: int
    failed: int
    errors: list[str]
    message: str


class ActionResponse(BaseModel):
    success: bool
    message: str


class LabelsResponse(BaseModel):
    success: bool = True
    labels: list[str]


class InsightsHealth(BaseModel):
    status: str = "ok"
    service: str = "insights"
    vector_features: bool
