"""
Doubt Solver: Store
Read/write access to doubt history, weak topics and daily tasks.

Two implementations share one interface:
- SqlStore: SQLAlchemy session (SQLite or PostgreSQL). Used when persistence is on.
- MemoryStore: process-local dictionaries. Used when persistence is off, and in tests.

Both make the two racy operations atomic:
- bump_topic is a single upsert (insert score=1, or score + 1).
- add_tasks skips (date, slot) pairs that already exist, so a day never exceeds 5 tasks.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from doubtsolver.errors import PersistenceError
from doubtsolver.models import Doubt, WeakTopic, DailyTask

logger = logging.getLogger(__name__)


# ─── Records ─────────────────────────────────────────────────────────────────

@dataclass
class WeakTopicRecord:
    topic: str
    score: int
    last_updated: datetime


@dataclass
class PlannedTask:
    """A daily task before it is stored."""
    slot: int
    task_type: str
    topic: str
    question_text: str


@dataclass
class TaskRecord:
    id: str
    date: str
    slot: int
    task_type: str
    topic: str
    question_text: str
    is_completed: bool = False


@dataclass
class DoubtRecord:
    id: str
    question_text: Optional[str]
    answer: str
    subject: str
    topic: str
    timestamp: datetime
    image_url: Optional[str] = None
    steps: list[str] = field(default_factory=list)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _rank_key(record: WeakTopicRecord):
    # score desc, most recently updated first, then topic name
    return (-record.score, -record.last_updated.timestamp(), record.topic)


# ─── Interface ───────────────────────────────────────────────────────────────

class Store(Protocol):
    def bump_topic(self, topic: str, now: datetime) -> None: ...
    def list_topics(self, limit: Optional[int] = None) -> list[WeakTopicRecord]: ...
    def tasks_for_date(self, day: str) -> list[TaskRecord]: ...
    def add_tasks(self, day: str, tasks: list[PlannedTask]) -> int: ...
    def set_task_completed(self, task_id: str, completed: bool = True) -> Optional[TaskRecord]: ...
    def add_doubt(
        self, question_text: Optional[str], answer: str, subject: str, topic: str,
        steps: list[str], image_url: Optional[str] = None,
    ) -> DoubtRecord: ...
    def list_doubts(self, limit: int) -> list[DoubtRecord]: ...
    def get_doubt(self, doubt_id: str) -> Optional[DoubtRecord]: ...


# ─── SQL ─────────────────────────────────────────────────────────────────────

def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive values; they were written as UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _topic_record(row: WeakTopic) -> WeakTopicRecord:
    return WeakTopicRecord(topic=row.topic, score=row.score, last_updated=_as_utc(row.last_updated))


def _task_record(row: DailyTask) -> TaskRecord:
    return TaskRecord(
        id=row.id,
        date=row.task_date,
        slot=row.slot,
        task_type=row.task_type,
        topic=row.topic,
        question_text=row.question_text,
        is_completed=bool(row.is_completed),
    )


def _doubt_record(row: Doubt) -> DoubtRecord:
    return DoubtRecord(
        id=row.id,
        question_text=row.question_text,
        image_url=row.image_url,
        answer=row.answer,
        steps=list(row.steps or []),
        subject=row.subject,
        topic=row.topic,
        timestamp=_as_utc(row.created_at),
    )


class SqlStore:
    def __init__(self, db: DBSession):
        self.db = db

    def _insert(self):
        """Dialect-specific INSERT that supports ON CONFLICT."""
        if self.db.get_bind().dialect.name == "postgresql":
            return pg_insert
        return sqlite_insert

    @contextmanager
    def _transaction(self, action: str):
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"DB error during {action}: {e}")
            raise PersistenceError() from e

    # ── Weak topics ──────────────────────────────────────────────────────

    def bump_topic(self, topic: str, now: datetime) -> None:
        insert = self._insert()
        stmt = insert(WeakTopic).values(topic=topic, score=1, last_updated=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=["topic"],
            set_={"score": WeakTopic.score + 1, "last_updated": stmt.excluded.last_updated},
        )
        with self._transaction("bump_topic"):
            self.db.execute(stmt)

    def list_topics(self, limit: Optional[int] = None) -> list[WeakTopicRecord]:
        with self._transaction("list_topics"):
            query = self.db.query(WeakTopic).order_by(
                WeakTopic.score.desc(),
                WeakTopic.last_updated.desc(),
                WeakTopic.topic.asc(),
            )
            if limit is not None:
                query = query.limit(limit)
            records = [_topic_record(r) for r in query.all()]
        return records

    # ── Daily tasks ──────────────────────────────────────────────────────

    def tasks_for_date(self, day: str) -> list[TaskRecord]:
        with self._transaction("tasks_for_date"):
            rows = (
                self.db.query(DailyTask)
                .filter(DailyTask.task_date == day)
                .order_by(DailyTask.slot.asc())
                .all()
            )
            records = [_task_record(r) for r in rows]
        return records

    def add_tasks(self, day: str, tasks: list[PlannedTask]) -> int:
        if not tasks:
            return 0
        now = _now()
        rows = [
            {
                "id": str(uuid.uuid4()),
                "task_date": day,
                "slot": t.slot,
                "task_type": t.task_type,
                "topic": t.topic,
                "question_text": t.question_text,
                "is_completed": False,
                "created_at": now,
            }
            for t in tasks
        ]
        insert = self._insert()
        stmt = insert(DailyTask).values(rows).on_conflict_do_nothing(
            index_elements=["task_date", "slot"],
        )
        with self._transaction("add_tasks"):
            result = self.db.execute(stmt)
        return result.rowcount

    def set_task_completed(self, task_id: str, completed: bool = True) -> Optional[TaskRecord]:
        with self._transaction("set_task_completed"):
            row = self.db.get(DailyTask, task_id)
            if row is None:
                return None
            row.is_completed = completed
            record = _task_record(row)
        return record

    # ── Doubts ───────────────────────────────────────────────────────────

    def add_doubt(
        self, question_text: Optional[str], answer: str, subject: str, topic: str,
        steps: list[str], image_url: Optional[str] = None,
    ) -> DoubtRecord:
        row = Doubt(
            question_text=question_text,
            image_url=image_url,
            answer=answer,
            steps=list(steps),
            subject=subject,
            topic=topic,
        )
        with self._transaction("add_doubt"):
            self.db.add(row)
            self.db.flush()
            record = _doubt_record(row)
        return record

    def list_doubts(self, limit: int) -> list[DoubtRecord]:
        with self._transaction("list_doubts"):
            rows = (
                self.db.query(Doubt)
                .order_by(Doubt.created_at.desc())
                .limit(limit)
                .all()
            )
            records = [_doubt_record(r) for r in rows]
        return records

    def get_doubt(self, doubt_id: str) -> Optional[DoubtRecord]:
        with self._transaction("get_doubt"):
            row = self.db.get(Doubt, doubt_id)
            record = _doubt_record(row) if row else None
        return record


# ─── In-Memory ───────────────────────────────────────────────────────────────

class MemoryStore:
    """Same semantics as SqlStore, kept in process memory. Not durable."""

    def __init__(self):
        self._lock = threading.Lock()
        self._topics: dict[str, WeakTopicRecord] = {}
        self._tasks: dict[str, TaskRecord] = {}
        self._doubts: list[DoubtRecord] = []

    def bump_topic(self, topic: str, now: datetime) -> None:
        with self._lock:
            existing = self._topics.get(topic)
            if existing is None:
                self._topics[topic] = WeakTopicRecord(topic=topic, score=1, last_updated=now)
            else:
                existing.score += 1
                existing.last_updated = now

    def list_topics(self, limit: Optional[int] = None) -> list[WeakTopicRecord]:
        with self._lock:
            ranked = sorted((replace(r) for r in self._topics.values()), key=_rank_key)
        return ranked if limit is None else ranked[:max(limit, 0)]

    def tasks_for_date(self, day: str) -> list[TaskRecord]:
        with self._lock:
            tasks = [replace(t) for t in self._tasks.values() if t.date == day]
        return sorted(tasks, key=lambda t: t.slot)

    def add_tasks(self, day: str, tasks: list[PlannedTask]) -> int:
        with self._lock:
            taken = {t.slot for t in self._tasks.values() if t.date == day}
            added = 0
            for t in tasks:
                if t.slot in taken:
                    continue
                task_id = str(uuid.uuid4())
                self._tasks[task_id] = TaskRecord(
                    id=task_id,
                    date=day,
                    slot=t.slot,
                    task_type=t.task_type,
                    topic=t.topic,
                    question_text=t.question_text,
                )
                taken.add(t.slot)
                added += 1
        return added

    def set_task_completed(self, task_id: str, completed: bool = True) -> Optional[TaskRecord]:
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return None
            task.is_completed = completed
            return replace(task)

    def add_doubt(
        self, question_text: Optional[str], answer: str, subject: str, topic: str,
        steps: list[str], image_url: Optional[str] = None,
    ) -> DoubtRecord:
        record = DoubtRecord(
            id=str(uuid.uuid4()),
            question_text=question_text,
            image_url=image_url,
            answer=answer,
            steps=list(steps),
            subject=subject,
            topic=topic,
            timestamp=_now(),
        )
        with self._lock:
            self._doubts.append(record)
        return replace(record)

    def list_doubts(self, limit: int) -> list[DoubtRecord]:
        with self._lock:
            newest_first = list(reversed(self._doubts))
        return [replace(d) for d in newest_first[:max(limit, 0)]]

    def get_doubt(self, doubt_id: str) -> Optional[DoubtRecord]:
        with self._lock:
            for d in self._doubts:
                if d.id == doubt_id:
                    return replace(d)
        return None
