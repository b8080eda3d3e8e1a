"""SQLAlchemy ORM base and shared column helpers."""

from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from backends without tz support (SQLite)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def commit_or_rollback(session: AsyncSession) -> None:
    """Commit ``session``, rolling back on failure so it stays usable for later writes."""
    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise
