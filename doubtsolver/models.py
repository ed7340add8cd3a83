"""
Doubt Solver: ORM Models
History, weak topics and daily tasks. UUID primary keys.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Integer, Boolean, Text, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from doubtsolver.database import Base


# ─── Helpers ─────────────────────────────────────────────────────────────────

def _uuid() -> str:
    return str(uuid.uuid4())

def _now() -> datetime:
    return datetime.now(timezone.utc)


# ─── Doubts (history) ────────────────────────────────────────────────────────

class Doubt(Base):
    """One answered question. Append-only."""
    __tablename__ = "doubts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    question_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    answer: Mapped[str] = mapped_column(Text, default="")
    steps: Mapped[list] = mapped_column(JSON, default=list)
    subject: Mapped[str] = mapped_column(String(100), default="General")
    topic: Mapped[str] = mapped_column(String(100), default="General")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now, index=True)


# ─── Weak Topics ─────────────────────────────────────────────────────────────

class WeakTopic(Base):
    """Occurrence counter per topic. The topic string is the key (case-sensitive)."""
    __tablename__ = "weak_topics"

    topic: Mapped[str] = mapped_column(String(100), primary_key=True)
    score: Mapped[int] = mapped_column(Integer, default=1)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


# ─── Daily Tasks ─────────────────────────────────────────────────────────────

class DailyTask(Base):
    __tablename__ = "daily_tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    task_date: Mapped[str] = mapped_column(String(10))  # ISO calendar day
    slot: Mapped[int] = mapped_column(Integer)  # 0..4, position within the day
    task_type: Mapped[str] = mapped_column(String(20))  # practice | revision | concept
    topic: Mapped[str] = mapped_column(String(100))
    question_text: Mapped[str] = mapped_column(Text)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)

    # One row per day per slot: caps every day at DAILY_TASK_COUNT tasks
    __table_args__ = (
        Index("ix_daily_task_date_slot", "task_date", "slot", unique=True),
    )
