from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class TimetableResult(Base):
    __tablename__ = "timetable_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    timetable: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    conflicts: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    report: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_by_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class TimetableEditSession(Base):
    __tablename__ = "timetable_edit_sessions"

    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    original: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    entries: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
