"""Unit tests for percentage clamping and status derivation."""

import pytest

from lms.core.progress import clamp_percent, status_for_percent


@pytest.mark.parametrize(
    "value, expected",
    [(None, 0), (-10, 0), (0, 0), (42.4, 42), (42.6, 43), (100, 100), (250, 100)],
)
def test_clamp_percent(value, expected):
    assert clamp_percent(value) == expected


@pytest.mark.parametrize(
    "percent, expected",
    [(0, "not_started"), (1, "in_progress"), (99, "in_progress"), (100, "completed")],
)
def test_status_for_percent(percent, expected):
    assert status_for_percent(percent) == expected
