"""
Doubt Solver: Daily Task Planner
Five tasks per calendar day, built from the top weak topics:
  slots 0-2  practice, cycling through the topics
  slot  3    revision on the weakest topic
  slot  4    concept note on the weakest topic

Generation is idempotent per day. Once a day has its five tasks, later calls
only read them back.
"""

import logging
from datetime import date, datetime
from typing import Union

from doubtsolver.config import (
    DAILY_TASK_COUNT, PRACTICE_TASKS_PER_DAY, WEAK_TOPICS_FOR_PLAN, FALLBACK_TOPIC,
)
from doubtsolver.errors import NotFoundError
from doubtsolver.store import Store, PlannedTask, TaskRecord
from doubtsolver.tutor.weak_topics import WeakTopicScorer

logger = logging.getLogger(__name__)

TASK_PRACTICE = "practice"
TASK_REVISION = "revision"
TASK_CONCEPT = "concept"


def build_task_batch(topics: list[str]) -> list[PlannedTask]:
    """The day's five tasks for the given topics (weakest first)."""
    if not topics:
        topics = [FALLBACK_TOPIC]

    tasks = []
    for i in range(PRACTICE_TASKS_PER_DAY):
        topic = topics[i % len(topics)]
        tasks.append(PlannedTask(
            slot=i,
            task_type=TASK_PRACTICE,
            topic=topic,
            question_text=f"Practice question on {topic} #{i + 1}",
        ))

    first = topics[0]
    tasks.append(PlannedTask(
        slot=PRACTICE_TASKS_PER_DAY,
        task_type=TASK_REVISION,
        topic=first,
        question_text=f"Revision question on {first}",
    ))
    tasks.append(PlannedTask(
        slot=PRACTICE_TASKS_PER_DAY + 1,
        task_type=TASK_CONCEPT,
        topic=first,
        question_text=f"Read a short concept note on {first}",
    ))
    return tasks


class DailyTaskPlanner:
    def __init__(self, store: Store, scorer: WeakTopicScorer):
        self.store = store
        self.scorer = scorer

    def ensure_today_tasks(self, today: Union[date, str]) -> list[TaskRecord]:
        if isinstance(today, datetime):
            today = today.date()
        day = today.isoformat() if isinstance(today, date) else today

        existing = self.store.tasks_for_date(day)
        if len(existing) >= DAILY_TASK_COUNT:
            return existing

        topics = self.scorer.top_topics(WEAK_TOPICS_FOR_PLAN)
        batch = build_task_batch(topics)

        # Slots already filled (e.g. a half-finished earlier attempt) are skipped by the store
        added = self.store.add_tasks(day, batch)
        logger.info(f"Daily tasks for {day}: {added} created, topics={topics or [FALLBACK_TOPIC]}")

        return self.store.tasks_for_date(day)

    def complete_task(self, task_id: str, completed: bool = True) -> TaskRecord:
        task = self.store.set_task_completed(task_id, completed)
        if task is None:
            raise NotFoundError("Task not found")
        return task
