"""Services for the repair intake backend."""

from .attachment_store import AttachmentStore, AttachmentStoreError
from .record_store import RecordStore, RecordStoreError, RecordStoreReadError
from .submission_service import (
    AttachmentUpload,
    InvalidApiKeyError,
    SubmissionService,
    SubmissionValidationError,
)
from .submission_validator import validate_submission

__all__ = [
    "AttachmentStore",
    "AttachmentStoreError",
    "AttachmentUpload",
    "InvalidApiKeyError",
    "RecordStore",
    "RecordStoreError",
    "RecordStoreReadError",
    "SubmissionService",
    "SubmissionValidationError",
    "validate_submission",
]
