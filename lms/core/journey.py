"""
Learner journey reduction.

Folds the append-only analytics event log for one (user, course) pair into
the derived journey record: progress, sessions, time spent, engagement
score, milestones, drop-off points and the lesson path.

Dependencies: None (pure domain layer)
System role: Map/reduce step behind the learner_journeys table
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Protocol

from lms.core.progress import clamp_percent

POSITIVE_EVENTS = frozenset({"lesson_completed", "quiz_passed", "video_play", "course_completed"})
NEGATIVE_EVENTS = frozenset({"quiz_failed", "lesson_paused", "course_abandoned"})
MILESTONE_EVENTS = frozenset({"lesson_completed", "quiz_passed", "course_completed"})
DROP_OFF_EVENTS = frozenset({"lesson_paused", "course_abandoned"})

POSITIVE_WEIGHT = 10
NEGATIVE_WEIGHT = -5
LONG_SESSION_BONUS = 5
LONG_SESSION_MS = 300_000


class JourneyEvent(Protocol):
    """Shape of an analytics event the reducer consumes."""

    event_type: str
    lesson_id: Any
    session_id: str | None
    payload: dict | None
    created_at: datetime


@dataclass
class JourneySnapshot:
    """Derived journey fields for one learner in one course."""

    started_at: datetime | None = None
    last_active_at: datetime | None = None
    completed_at: datetime | None = None
    total_time_spent: int = 0
    sessions_count: int = 0
    progress_percentage: int = 0
    engagement_score: int = 0
    milestones: list[dict[str, Any]] = field(default_factory=list)
    drop_off_points: list[str] = field(default_factory=list)
    path_taken: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "started_at": self.started_at,
            "last_active_at": self.last_active_at,
            "completed_at": self.completed_at,
            "total_time_spent": self.total_time_spent,
            "sessions_count": self.sessions_count,
            "progress_percentage": self.progress_percentage,
            "engagement_score": self.engagement_score,
            "milestones": self.milestones,
            "drop_off_points": self.drop_off_points,
            "path_taken": self.path_taken,
        }


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps (e.g. from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def score_event(event_type: str, payload: dict | None) -> int:
    """Engagement contribution of a single event."""
    score = 0
    if event_type in POSITIVE_EVENTS:
        score += POSITIVE_WEIGHT
    elif event_type in NEGATIVE_EVENTS:
        score += NEGATIVE_WEIGHT
    duration = _number((payload or {}).get("duration"))
    if duration is not None and duration > LONG_SESSION_MS:
        score += LONG_SESSION_BONUS
    return score


def build_journey(events: Iterable[JourneyEvent]) -> JourneySnapshot:
    """
    Reduce an event stream into a journey snapshot.

    Events are processed in ``created_at`` order regardless of input order.

    Args:
        events: Analytics events for a single (user, course) pair

    Returns:
        JourneySnapshot: Derived journey; empty snapshot for no events
    """
    ordered = sorted(events, key=lambda e: _as_utc(e.created_at))
    snapshot = JourneySnapshot()
    if not ordered:
        return snapshot

    sessions: set[str] = set()
    duration_ms = 0.0
    raw_score = 0
    progress = 0

    for event in ordered:
        payload = event.payload or {}
        occurred_at = _as_utc(event.created_at)
        lesson_id = str(event.lesson_id) if event.lesson_id else None

        if event.session_id:
            sessions.add(event.session_id)

        duration = _number(payload.get("duration"))
        if duration is not None and duration > 0:
            duration_ms += duration

        raw_score += score_event(event.event_type, payload)

        reported = _number(payload.get("progress", payload.get("progress_percentage")))
        if reported is not None:
            progress = max(progress, clamp_percent(reported))

        if event.event_type == "course_completed":
            progress = 100
            if snapshot.completed_at is None:
                snapshot.completed_at = occurred_at

        if event.event_type in MILESTONE_EVENTS:
            snapshot.milestones.append(
                {
                    "type": event.event_type,
                    "lesson_id": lesson_id,
                    "at": occurred_at.isoformat(),
                }
            )

        if event.event_type in DROP_OFF_EVENTS and lesson_id:
            snapshot.drop_off_points.append(lesson_id)

        if lesson_id and (not snapshot.path_taken or snapshot.path_taken[-1] != lesson_id):
            snapshot.path_taken.append(lesson_id)

    snapshot.started_at = _as_utc(ordered[0].created_at)
    snapshot.last_active_at = _as_utc(ordered[-1].created_at)
    snapshot.sessions_count = len(sessions) or 1
    snapshot.total_time_spent = int(duration_ms // 1000)
    snapshot.progress_percentage = progress
    snapshot.engagement_score = max(0, min(100, raw_score))
    return snapshot
