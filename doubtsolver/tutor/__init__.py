"""
Doubt Solver: Tutoring Core

Answer formatting, weak-topic scoring, daily task planning and the LLM client.
"""
from doubtsolver.tutor.formatter import format_answer
from doubtsolver.tutor.weak_topics import WeakTopicScorer
from doubtsolver.tutor.daily_tasks import DailyTaskPlanner, build_task_batch

__all__ = ["format_answer", "WeakTopicScorer", "DailyTaskPlanner", "build_task_batch"]
