"""
Doubt Solver: Practice Router
Daily tasks and the weak-topic ranking behind them.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from doubtsolver.dependencies import get_store
from doubtsolver.errors import ValidationError
from doubtsolver.schemas import TaskOut, CompleteTaskRequest, WeakTopicOut
from doubtsolver.store import Store
from doubtsolver.tutor.daily_tasks import DailyTaskPlanner
from doubtsolver.tutor.weak_topics import WeakTopicScorer

router = APIRouter(tags=["practice"])


def _planner(store: Store) -> DailyTaskPlanner:
    return DailyTaskPlanner(store, WeakTopicScorer(store))


@router.get("/daily-tasks", response_model=list[TaskOut])
def daily_tasks(store: Store = Depends(get_store)):
    tasks = _planner(store).ensure_today_tasks(date.today())
    return [TaskOut.model_validate(t) for t in tasks]


@router.post("/complete-task", response_model=TaskOut)
def complete_task(req: CompleteTaskRequest, store: Store = Depends(get_store)):
    if not req.task_id:
        raise ValidationError("taskId required")
    task = _planner(store).complete_task(req.task_id, req.completed)
    return TaskOut.model_validate(task)


@router.get("/weak-topics", response_model=list[WeakTopicOut])
def weak_topics(
    limit: Optional[int] = Query(None, ge=1),
    store: Store = Depends(get_store),
):
    return [WeakTopicOut.model_validate(r) for r in WeakTopicScorer(store).ranking(limit)]
