"""Job description data access layer."""
import uuid as _uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.job_description import JobDescription


async def get_by_id(db: AsyncSession, job_description_id: _uuid.UUID) -> JobDescription | None:
    return (
        await db.execute(select(JobDescription).where(JobDescription.id == job_description_id))
    ).scalar_one_or_none()


async def list_all(db: AsyncSession) -> list[JobDescription]:
    rows = (await db.execute(select(JobDescription).order_by(JobDescription.updated_at.desc()))).scalars().all()
    return list(rows)


async def list_ids(db: AsyncSession) -> list[_uuid.UUID]:
    rows = (await db.execute(select(JobDescription.id).order_by(JobDescription.created_at))).scalars().all()
    return list(rows)


async def list_labels(db: AsyncSession) -> list[str]:
    q = (
        select(JobDescription.label)
        .where(JobDescription.label.is_not(None), JobDescription.label != "")
        .distinct()
        .order_by(JobDescription.label.asc())
    )
    return list((await db.execute(q)).scalars().all())


async def create(db: AsyncSession, job_description: JobDescription) -> JobDescription:
    db.add(job_description)
    await db.flush()
    await db.refresh(job_description)
    return job_description


async def update(db: AsyncSession, job_description: JobDescription) -> JobDescription:
    await db.flush()
    await db.refresh(job_description)
    return job_description


async def delete(db: AsyncSession, job_description: JobDescription) -> None:
    await db.delete(job_description)
    await db.flush()
