"""Completion proxy package."""

from fintrack.services.completion.groq_service import (
    NOT_CONFIGURED_ERROR,
    CompletionError,
    GroqCompletionService,
)

__all__ = [
    "NOT_CONFIGURED_ERROR",
    "CompletionError",
    "GroqCompletionService",
]
