"""Job descriptions API - 5 endpoints."""
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import get_db, get_insights_service
from app.schemas.job_description import (
    JobDescriptionCreate,
    JobDescriptionResponse,
    JobDescriptionUpdate,
)
from app.services import job_description_service
from app.services.insights_service import InsightsService

router = APIRouter()


# GET /job-descriptions
@router.get("", response_model=list[JobDescriptionResponse])
async def list_job_descriptions(db: AsyncSession = Depends(get_db)):
    return await job_description_service.list_job_descriptions(db)


# GET /job-descriptions/{id}
@router.get("/{job_description_id}", response_model=JobDescriptionResponse)
async def get_job_description(job_description_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    jd = await job_description_service.get_job_description(db, job_description_id)
    if not jd:
        raise HTTPException(status_code=404, detail="Job description not found")
    return jd


# POST /job-descriptions
@router.post("", response_model=JobDescriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_job_description(body: JobDescriptionCreate, db: AsyncSession = Depends(get_db)):
    return await job_description_service.create_job_description(db, body)


# PUT /job-descriptions/{id}
@router.put("/{job_description_id}", response_model=JobDescriptionResponse)
async def update_job_description(
    job_description_id: uuid.UUID,
    body: JobDescriptionUpdate,
    db: AsyncSession = Depends(get_db),
):
    jd = await job_description_service.get_job_description(db, job_description_id)
    if not jd:
        raise HTTPException(status_code=404, detail="Job description not found")
    return await job_description_service.update_job_description(db, jd, body)


# DELETE /job-descriptions/{id}
@router.delete("/{job_description_id}")
async def delete_job_description(
    job_description_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    insights: InsightsService = Depends(get_insights_service),
):
    jd = await job_description_service.get_job_description(db, job_description_id)
    if not jd:
        raise HTTPException(status_code=404, detail="Job description not found")
    await job_description_service.delete_job_description(db, jd, insights)
    return {"message": "Job description deleted successfully"}
