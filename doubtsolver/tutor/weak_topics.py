"""
Doubt Solver: Weak-Topic Scorer
Every answered doubt bumps its topic's score by one. The highest scores are
the student's weak topics and feed the daily task plan.

Topics are matched exactly: "Algebra" and "algebra" are separate keys.
Ranking: score desc, then most recently updated, then topic name.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from doubtsolver.store import Store, WeakTopicRecord

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeakTopicScorer:
    def __init__(self, store: Store, clock: Callable[[], datetime] = _utcnow):
        self.store = store
        self.clock = clock

    def record_occurrence(self, topic: str) -> None:
        """Insert with score 1, or add 1 and refresh last_updated. Atomic."""
        self.store.bump_topic(topic, self.clock())
        logger.debug(f"Weak topic bumped: {topic!r}")

    def ranking(self, n: Optional[int] = None) -> list[WeakTopicRecord]:
        return self.store.list_topics(limit=n)

    def top_topics(self, n: int) -> list[str]:
        return [r.topic for r in self.ranking(n)]
