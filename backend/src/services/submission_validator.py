"""Validation rules for repair request form fields.

The rule set is exported as data (``VALIDATION_RULES``) and served to the
browser form, so the client-side check and this server-side check are
driven by the same definitions.
"""

import re
from collections.abc import Mapping

from models.submission import SubmissionDraft, ValidationResult
from utils.constants import DEFAULT_PRIORITY, PRIORITIES

# Deliberately loose shape check: something@something.something
EMAIL_PATTERN = r"^\S+@\S+\.\S+$"
_EMAIL_RE = re.compile(EMAIL_PATTERN)

NAME_MIN_LENGTH = 2
PROBLEM_DESCRIPTION_MIN_LENGTH = 10

NAME_ERROR = "Name is required (min 2 chars)."
EMAIL_ERROR = "Valid email required."
DEVICE_MODEL_ERROR = "Device model is required."
PROBLEM_DESCRIPTION_ERROR = "Problem description (min 10 chars)."
PRIORITY_ERROR = f"Priority must be one of: {', '.join(PRIORITIES)}."

VALIDATION_RULES: dict[str, dict] = {
    "name": {"required": True, "minLength": NAME_MIN_LENGTH, "message": NAME_ERROR},
    "email": {"required": True, "pattern": EMAIL_PATTERN, "message": EMAIL_ERROR},
    "phone": {"required": False},
    "deviceModel": {"required": True, "minLength": 1, "message": DEVICE_MODEL_ERROR},
    "problemDescription": {
        "required": True,
        "minLength": PROBLEM_DESCRIPTION_MIN_LENGTH,
        "message": PROBLEM_DESCRIPTION_ERROR,
    },
    "priority": {
        "required": False,
        "choices": list(PRIORITIES),
        "default": DEFAULT_PRIORITY,
        "message": PRIORITY_ERROR,
    },
}


def _clean(value) -> str:
    """Trim a raw field value, treating an absent value as empty."""
    if value is None:
        return ""
    return str(value).strip()


def validate_submission(fields: Mapping[str, str | None]) -> ValidationResult:
    """Validate raw form fields and normalize them into a draft.

    Every rule is checked, so the result carries all failures at once in
    field order. Field keys use the form's camelCase names.
    """
    name = _clean(fields.get("name"))
    email = _clean(fields.get("email"))
    phone = _clean(fields.get("phone"))
    device_model = _clean(fields.get("deviceModel"))
    problem_description = _clean(fields.get("problemDescription"))
    priority = _clean(fields.get("priority")) or DEFAULT_PRIORITY

    errors = []
    if len(name) < NAME_MIN_LENGTH:
        errors.append(NAME_ERROR)
    if not _EMAIL_RE.match(email):
        errors.append(EMAIL_ERROR)
    if not device_model:
        errors.append(DEVICE_MODEL_ERROR)
    if len(problem_description) < PROBLEM_DESCRIPTION_MIN_LENGTH:
        errors.append(PROBLEM_DESCRIPTION_ERROR)
    if priority not in PRIORITIES:
        errors.append(PRIORITY_ERROR)

    if errors:
        return ValidationResult(errors=errors)

    draft = SubmissionDraft(
        name=name,
        email=email,
        phone=phone or None,
        device_model=device_model,
        problem_description=problem_description,
        priority=priority,
    )
    return ValidationResult(draft=draft)
