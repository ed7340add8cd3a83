"""
Tests for WeakTopicScorer against both store implementations.
"""

from datetime import datetime, timedelta, timezone

from doubtsolver.tutor.weak_topics import WeakTopicScorer


class Clock:
    """Advances one minute per call so updates are strictly ordered."""

    def __init__(self):
        self.now = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


class TestRecordOccurrence:

    def test_first_occurrence_scores_one(self, store):
        scorer = WeakTopicScorer(store)
        scorer.record_occurrence("Algebra")
        [record] = scorer.ranking()
        assert record.topic == "Algebra"
        assert record.score == 1

    def test_repeat_increments(self, store):
        scorer = WeakTopicScorer(store)
        scorer.record_occurrence("Algebra")
        scorer.record_occurrence("Algebra")
        assert scorer.top_topics(1) == ["Algebra"]
        assert scorer.ranking(1)[0].score == 2

    def test_one_row_per_topic(self, store):
        scorer = WeakTopicScorer(store)
        for _ in range(4):
            scorer.record_occurrence("Geometry")
        assert len(scorer.ranking()) == 1

    def test_last_updated_refreshed(self, store):
        clock = Clock()
        scorer = WeakTopicScorer(store, clock=clock)
        scorer.record_occurrence("Algebra")
        first = scorer.ranking()[0].last_updated
        scorer.record_occurrence("Algebra")
        second = scorer.ranking()[0].last_updated
        assert second > first

    def test_last_updated_is_utc(self, store):
        scorer = WeakTopicScorer(store, clock=Clock())
        scorer.record_occurrence("Algebra")
        last_updated = scorer.ranking()[0].last_updated
        assert last_updated.utcoffset() == timedelta(0)
        assert last_updated == datetime(2026, 1, 1, 9, 1, tzinfo=timezone.utc)

    def test_topics_are_case_sensitive(self, store):
        scorer = WeakTopicScorer(store)
        scorer.record_occurrence("Algebra")
        scorer.record_occurrence("algebra")
        assert sorted(scorer.top_topics(5)) == ["Algebra", "algebra"]


class TestRanking:

    def test_highest_score_first(self, store):
        scorer = WeakTopicScorer(store, clock=Clock())
        for topic, times in (("Fractions", 1), ("Algebra", 3), ("Geometry", 2)):
            for _ in range(times):
                scorer.record_occurrence(topic)
        assert scorer.top_topics(3) == ["Algebra", "Geometry", "Fractions"]

    def test_tie_goes_to_most_recent(self, store):
        scorer = WeakTopicScorer(store, clock=Clock())
        scorer.record_occurrence("Older")
        scorer.record_occurrence("Newer")
        assert scorer.top_topics(2) == ["Newer", "Older"]

    def test_limit(self, store):
        scorer = WeakTopicScorer(store, clock=Clock())
        for topic in ("A", "B", "C", "D"):
            scorer.record_occurrence(topic)
        assert len(scorer.top_topics(3)) == 3

    def test_empty(self, store):
        assert WeakTopicScorer(store).top_topics(3) == []
