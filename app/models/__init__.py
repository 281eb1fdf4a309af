"""SQLAlchemy ORM models."""
from app.models.base import Base, TimestampMixin, UUIDMixin
from app.models.job_description import JobDescription
from app.models.app_setting import AppSetting

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "JobDescription",
    "AppSetting",
]
