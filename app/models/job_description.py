"""Job description ORM model: source of truth for the vector index."""
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDMixin


class JobDescription(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "job_descriptions"

    content: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    job_posting_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # free-text category, used as an exact-match retrieval filter
    label: Mapped[str | None] = mapped_column(String(255), nullable=True)
