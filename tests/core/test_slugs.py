"""Unit tests for slug derivation."""

from lms.core.slugs import slugify


def test_slugify_collapses_punctuation_and_spaces():
    assert slugify("  Intro to Python: Part 1!  ") == "intro-to-python-part-1"


def test_slugify_falls_back_when_nothing_left():
    assert slugify("!!!") == "course"
