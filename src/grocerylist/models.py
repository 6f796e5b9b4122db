"""SQLAlchemy database models."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from grocerylist.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Snapshot(Base):
    """Serialized blob stored under a well-known key."""

    __tablename__ = "snapshots"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )
