"""FastAPI dependency injection utilities."""
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import async_session_factory
from app.services.insights_service import InsightsService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_insights_service(request: Request) -> InsightsService:
    """Insights service built once at startup (see ``app.main.lifespan``)."""
    return request.app.state.insights
