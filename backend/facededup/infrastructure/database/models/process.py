"""SQLAlchemy ORM model for deduplication processes."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from facededup.infrastructure.database.base import Base


class ProcessModel(Base):
    """ORM model for the 'processes' table."""

    __tablename__ = "processes"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    process_start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    process_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cleanup_username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cleanup_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    file_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    file_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processed_files: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    current_stage: Mapped[str | None] = mapped_column(String(50), nullable=True)
    completion_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # [{name, status, started_at, ended_at, processed_file_ids}]
    steps: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<ProcessModel(id={self.id}, status='{self.status}')>"
