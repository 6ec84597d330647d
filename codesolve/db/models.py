from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Feedback(Base):
    """User report about a generated solution.

    status values: pending (stored only) | submitted (forwarded for analysis)
    """
    __tablename__ = "feedback"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    issue_type: Mapped[str] = mapped_column(String(64))
    description: Mapped[str] = mapped_column(Text)
    original_problem: Mapped[str] = mapped_column(Text)
    generated_code: Mapped[str] = mapped_column(Text)
    language: Mapped[str] = mapped_column(String(16))       # python | java
    reported_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    status: Mapped[str] = mapped_column(String(32), default="pending")
    api_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    analysis: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
