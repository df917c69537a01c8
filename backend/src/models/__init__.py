"""Data models for the repair intake backend."""

from .submission import Priority, SubmissionDraft, SubmissionRecord, ValidationResult

__all__ = [
    "Priority",
    "SubmissionDraft",
    "SubmissionRecord",
    "ValidationResult",
]
