"""Repair submission data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Priority(str, Enum):
    """Urgency of a repair request."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SubmissionDraft(BaseModel):
    """Validated and normalized form input, before an id is assigned."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True
    )

    name: str = Field(..., min_length=2)
    email: str
    phone: str | None = None
    device_model: str = Field(..., min_length=1)
    problem_description: str = Field(..., min_length=10)
    priority: Priority = Priority.LOW


class SubmissionRecord(SubmissionDraft):
    """Stored repair submission.

    Serialized with camelCase keys (``deviceModel``, ``createdAt``...) which
    is the layout of the submissions JSON file and of the API responses.
    """

    id: str = Field(..., min_length=1)
    image: str | None = Field(None, description="Reference path under /uploads")
    created_at: str = Field(..., description="ISO-8601 UTC acceptance instant")

    def to_json_dict(self) -> dict:
        """Return the record as stored and served (camelCase keys)."""
        return self.model_dump(by_alias=True, mode="json")


class ValidationResult(BaseModel):
    """Outcome of validating raw form fields."""

    draft: SubmissionDraft | None = None
    errors: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors
