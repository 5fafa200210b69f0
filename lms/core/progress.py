"""
Progress arithmetic shared by learner progress and journeys.

Dependencies: None (pure domain layer)
System role: Percent clamping and status derivation
"""

STATUS_NOT_STARTED = "not_started"
STATUS_IN_PROGRESS = "in_progress"
STATUS_COMPLETED = "completed"


def clamp_percent(value: float | int | None) -> int:
    """Round and clamp a percentage into 0..100; None counts as 0."""
    if value is None:
        return 0
    return max(0, min(100, int(round(value))))


def status_for_percent(percent: int) -> str:
    """Map a clamped percentage to a progress status."""
    if percent >= 100:
        return STATUS_COMPLETED
    if percent <= 0:
        return STATUS_NOT_STARTED
    return STATUS_IN_PROGRESS
