"""LMS backend: course authoring, learner delivery, surveys and analytics API."""

__version__ = "0.1.0"
