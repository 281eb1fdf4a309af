"""Job description request/response schemas."""
import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class JobDescriptionCreate(BaseModel):
    content: str = Field(min_length=1)
    title: str | None = Field(None, max_length=500)
    job_posting_url: str | None = None
    label: str | None = Field(None, max_length=255)


class JobDescriptionUpdate(BaseModel):
    content: str | None = Field(None, min_length=1)
    title: str | None = Field(None, max_length=500)
    job_posting_url: str | None = None
    label: str | None = Field(None, max_length=255)


class JobDescriptionResponse(BaseModel):
    id: uuid.UUID
    content: str
    title: str | None = None
    job_posting_url: str | None = None
    label: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
