"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from services.attachment_store import AttachmentStore
from services.record_store import RecordStore
from services.submission_service import SubmissionService

TEST_API_KEY = "unit-test-api-key"


@pytest.fixture
def api_key():
    """Shared secret configured for the gated endpoint."""
    return TEST_API_KEY


@pytest.fixture
def valid_fields():
    """Raw form fields that pass every validation rule."""
    return {
        "name": "Al",
        "email": "a@b.co",
        "phone": "",
        "deviceModel": "Pixel 7",
        "problemDescription": "Screen cracked badly",
        "priority": "High",
    }


@pytest.fixture
def submissions_file(tmp_path):
    """Location of the submissions JSON file for a test."""
    return tmp_path / "data" / "submissions.json"


@pytest.fixture
def uploads_dir(tmp_path):
    """Location of the uploads directory for a test."""
    return tmp_path / "data" / "uploads"


@pytest.fixture
def record_store(submissions_file):
    """Create a RecordStore backed by a temporary file."""
    return RecordStore(submissions_file)


@pytest.fixture
def attachment_store(uploads_dir):
    """Create an AttachmentStore backed by a temporary directory."""
    return AttachmentStore(uploads_dir)


@pytest.fixture
def submission_service(record_store, attachment_store):
    """Create a SubmissionService over temporary storage."""
    return SubmissionService(
        record_store=record_store, attachment_store=attachment_store
    )


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Create a FastAPI TestClient with storage under tmp_path."""
    from handlers.api_handler import app, reset_services

    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("API_KEY", TEST_API_KEY)
    monkeypatch.delenv("SUBMISSIONS_FILE", raising=False)
    monkeypatch.delenv("UPLOADS_DIR", raising=False)
    reset_services()
    yield TestClient(app)
    reset_services()
