"""SQLAlchemy ORM model for duplicate records."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from facededup.infrastructure.database.base import Base


class DuplicatedRecordModel(Base):
    """ORM model for the 'duplicated_records' table."""

    __tablename__ = "duplicated_records"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    process_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    original_file_id: Mapped[str] = mapped_column(String(100), nullable=False)
    original_file_name: Mapped[str] = mapped_column(String(500), nullable=False)
    # [{file_id, file_name, confidence, person_id}]
    duplicates: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    detected_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    confirmation_user: Mapped[str | None] = mapped_column(String(255), nullable=True)
    confirmation_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<DuplicatedRecordModel(id={self.id}, original='{self.original_file_name}')>"
