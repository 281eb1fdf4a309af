"""Settings table reads."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.app_setting import AppSetting


async def get_value(db: AsyncSession, key: str) -> str | None:
    """Return the stored value for ``key``, or None when unset or empty."""
    value = (await db.execute(select(AppSetting.value).where(AppSetting.key == key))).scalar_one_or_none()
    return value or None
