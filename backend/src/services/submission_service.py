"""Service orchestrating the intake of repair submissions."""

import hmac
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from models.submission import SubmissionRecord
from services.attachment_store import AttachmentStore
from services.record_store import RecordStore
from services.submission_validator import validate_submission
from utils.ids import millis_to_iso, monotonic_millis, to_base36

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class SubmissionValidationError(Exception):
    """Raised when submitted fields fail validation."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class InvalidApiKeyError(Exception):
    """Raised when the gated endpoint gets a missing or wrong credential."""


def check_api_key(
    expected_key: str, x_api_key: str | None, authorization: str | None
) -> None:
    """Verify a shared-secret credential from request headers.

    ``x-api-key`` wins when both headers are sent. The value must equal the
    expected key exactly, either raw or as ``Bearer <key>``.

    Raises:
        InvalidApiKeyError: If the credential is missing or does not match
    """
    presented = x_api_key or authorization
    if not presented or not expected_key:
        raise InvalidApiKeyError("Invalid API key")

    candidates = (expected_key, f"{BEARER_PREFIX}{expected_key}")
    if not any(
        hmac.compare_digest(presented.encode(), candidate.encode())
        for candidate in candidates
    ):
        raise InvalidApiKeyError("Invalid API key")


@dataclass
class AttachmentUpload:
    """An uploaded file as received from the client."""

    filename: str
    content: bytes


class SubmissionService:
    """Validates, stores and records repair submissions."""

    def __init__(self, record_store: RecordStore, attachment_store: AttachmentStore):
        """Initialize the service.

        Args:
            record_store: Append-only store for accepted records
            attachment_store: Storage for uploaded images
        """
        self.record_store = record_store
        self.attachment_store = attachment_store

    def submit(
        self,
        fields: Mapping[str, str | None],
        attachment: AttachmentUpload | None = None,
    ) -> SubmissionRecord:
        """Accept one repair submission.

        The attachment is written before the record so a stored record never
        points at a missing file. Nothing is written when validation fails.

        Args:
            fields: Raw form fields keyed by their camelCase form names
            attachment: Optional uploaded image

        Returns:
            The stored record

        Raises:
            SubmissionValidationError: If any field rule fails
            AttachmentStoreError: If the attachment could not be written
            RecordStoreError: If the record could not be appended
        """
        result = validate_submission(fields)
        if not result.is_valid:
            logger.info(
                "Rejected submission with %d validation error(s): %s",
                len(result.errors),
                "; ".join(result.errors),
            )
            raise SubmissionValidationError(result.errors)

        image = None
        if attachment is not None and attachment.filename:
            image = self.attachment_store.save(attachment.filename, attachment.content)

        millis = monotonic_millis()
        record = SubmissionRecord(
            **result.draft.model_dump(),
            id=to_base36(millis),
            image=image,
            created_at=millis_to_iso(millis),
        )

        self.record_store.append(record.to_json_dict())
        logger.info("Accepted submission %s (priority=%s)", record.id, record.priority)
        return record

    def list_submissions(self) -> list[dict]:
        """Return all stored records, oldest first."""
        return self.record_store.read_all()
