"""SQLAlchemy ORM model for uploaded files."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from facededup.infrastructure.database.base import Base


class FileModel(Base):
    """ORM model for the 'files' table."""

    __tablename__ = "files"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    file_name: Mapped[str] = mapped_column(String(500), nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    process_status: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    process_start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    face_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    deduplicated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<FileModel(id={self.id}, name='{self.file_name}', status='{self.status}')>"
