"""
Unit tests for the learner journey reducer.

Covers session counting, time spent, engagement scoring, milestones,
drop-off points, path compression and out-of-order input.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from lms.core.journey import build_journey, score_event

START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@dataclass
class Event:
    event_type: str
    lesson_id: uuid.UUID | None = None
    session_id: str | None = None
    payload: dict | None = None
    created_at: datetime = START


def at(minutes: int) -> datetime:
    return START + timedelta(minutes=minutes)


class TestScoreEvent:
    """Test suite for score_event."""

    def test_positive_event(self):
        assert score_event("lesson_completed", None) == 10

    def test_negative_event(self):
        assert score_event("quiz_failed", {}) == -5

    def test_long_duration_bonus(self):
        assert score_event("video_play", {"duration": 300_001}) == 15

    def test_neutral_event(self):
        assert score_event("page_view", {"duration": 1000}) == 0


class TestBuildJourney:
    """Test suite for build_journey."""

    def test_empty_stream(self):
        snapshot = build_journey([])

        assert snapshot.started_at is None
        assert snapshot.sessions_count == 0
        assert snapshot.path_taken == []

    def test_full_stream(self):
        # Arrange
        lesson_a, lesson_b = uuid.uuid4(), uuid.uuid4()
        events = [
            Event("lesson_started", lesson_a, "s1", {"duration": 30_000}, at(0)),
            Event("lesson_completed", lesson_a, "s1", {"progress": 50}, at(5)),
            Event("lesson_started", lesson_b, "s2", None, at(60)),
            Event("lesson_paused", lesson_b, "s2", {"duration": 90_500}, at(70)),
            Event("course_completed", lesson_b, "s2", None, at(80)),
        ]

        # Act
        snapshot = build_journey(events)

        # Assert
        assert snapshot.started_at == at(0)
        assert snapshot.last_active_at == at(80)
        assert snapshot.completed_at == at(80)
        assert snapshot.sessions_count == 2
        assert snapshot.total_time_spent == 120
        assert snapshot.progress_percentage == 100
        assert snapshot.engagement_score == 15
        assert [m["type"] for m in snapshot.milestones] == ["lesson_completed", "course_completed"]
        assert snapshot.drop_off_points == [str(lesson_b)]
        assert snapshot.path_taken == [str(lesson_a), str(lesson_b)]

    def test_events_sorted_by_time(self):
        lesson_a, lesson_b = uuid.uuid4(), uuid.uuid4()
        events = [
            Event("lesson_started", lesson_b, created_at=at(10)),
            Event("lesson_started", lesson_a, created_at=at(0)),
        ]

        snapshot = build_journey(events)

        assert snapshot.path_taken == [str(lesson_a), str(lesson_b)]
        assert snapshot.started_at == at(0)

    def test_progress_is_max_reported_and_clamped(self):
        events = [
            Event("progress", payload={"progress": 70}, created_at=at(0)),
            Event("progress", payload={"progress_percentage": "30"}, created_at=at(1)),
            Event("progress", payload={"progress": 400}, created_at=at(2)),
        ]

        assert build_journey(events).progress_percentage == 100

    def test_engagement_floor_is_zero(self):
        events = [Event("quiz_failed", created_at=at(i)) for i in range(3)]

        assert build_journey(events).engagement_score == 0

    def test_engagement_ceiling_is_hundred(self):
        events = [Event("lesson_completed", created_at=at(i)) for i in range(15)]

        assert build_journey(events).engagement_score == 100

    def test_no_sessions_counts_as_one(self):
        assert build_journey([Event("page_view")]).sessions_count == 1

    def test_naive_timestamps_treated_as_utc(self):
        naive = datetime(2024, 3, 1, 9, 0)

        snapshot = build_journey([Event("page_view", created_at=naive)])

        assert snapshot.started_at == START
