"""Job description business logic."""
import logging
import uuid

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import VectorStoreError
from app.models.job_description import JobDescription
from app.repositories import job_description_repository
from app.schemas.job_description import JobDescriptionCreate, JobDescriptionUpdate
from app.services.insights_service import InsightsService

logger = logging.getLogger(__name__)


async def create_job_description(db: AsyncSession, data: JobDescriptionCreate) -> JobDescription:
    jd = JobDescription(
        content=data.content,
        title=data.title or None,
        job_posting_url=data.job_posting_url or None,
        label=data.label or None,
    )
    return await job_description_repository.create(db, jd)


async def get_job_description(db: AsyncSession, job_description_id: uuid.UUID) -> JobDescription | None:
    return await job_description_repository.get_by_id(db, job_description_id)


async def list_job_descriptions(db: AsyncSession) -> list[JobDescription]:
    return await job_description_repository.list_all(db)


async def update_job_description(
    db: AsyncSession, jd: JobDescription, data: JobDescriptionUpdate
) -> JobDescription:
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    for key, value in changes.items():
        setattr(jd, key, value)
    return await job_description_repository.update(db, jd)


async def delete_job_description(
    db: AsyncSession, jd: JobDescription, insights: InsightsService
) -> None:
    """Delete and commit the row, then drop its vectors.

    The row is the source of truth: a vector-store failure is logged and
    leaves stale vectors behind until the next full sync. A failed commit
    leaves the vectors untouched.
    """
    jd_id = jd.id
    await job_description_repository.delete(db, jd)
    await db.commit()
    try:
        await insights.delete_vectors(jd_id)
    except VectorStoreError as exc:
        logger.warning("Could not delete vectors for job description %s: %s", jd_id, exc)
