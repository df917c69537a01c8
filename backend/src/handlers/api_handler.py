"""FastAPI application for the repair request intake backend."""

import logging
import os
import time
from pathlib import Path
from typing import Annotated

from fastapi import (
    Depends,
    FastAPI,
    File,
    Form,
    Header,
    HTTPException,
    UploadFile,
    status,
)
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse

from services.attachment_store import AttachmentStore, AttachmentStoreError
from services.record_store import RecordStore, RecordStoreError, RecordStoreReadError
from services.submission_service import (
    AttachmentUpload,
    InvalidApiKeyError,
    SubmissionService,
    SubmissionValidationError,
    check_api_key,
)
from services.submission_table import ERROR_PAGE, render_submissions_table
from services.submission_validator import VALIDATION_RULES
from utils.constants import (
    DEFAULT_API_KEY,
    DEFAULT_DATA_DIR,
    DEFAULT_PORT,
    SUBMISSIONS_FILENAME,
    UPLOADS_DIRNAME,
)

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Repair Intake API",
    description="Intake form backend for device repair requests",
    version="1.0.0",
)

# The React form is served from a different origin during development
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


CLIENT_ERROR_TAGS = {
    status.HTTP_400_BAD_REQUEST: "REJECTED",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
}


@app.middleware("http")
async def log_requests(request, call_next):
    """Log API requests with timing, tagging rejected and unauthorized submissions."""
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000

    path = request.url.path
    if duration_ms > 1000:
        logger.warning(
            "[SLOW] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 500:
        logger.error(
            "[ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 400:
        logger.info(
            "[%s] %s %s %.0fms status=%d",
            CLIENT_ERROR_TAGS.get(response.status_code, "CLIENT_ERROR"),
            request.method,
            path,
            duration_ms,
            response.status_code,
        )

    return response


# Lazy-initialized storage and services, configured from the environment
_record_store = None
_attachment_store = None
_submission_service = None


def reset_services():
    """Reset all lazy-initialized services. Useful for testing."""
    global _record_store, _attachment_store, _submission_service
    _record_store = None
    _attachment_store = None
    _submission_service = None


def get_data_dir() -> Path:
    return Path(os.environ.get("DATA_DIR", DEFAULT_DATA_DIR))


def get_api_key() -> str:
    """Shared secret expected by the gated submission endpoint."""
    return os.environ.get("API_KEY", DEFAULT_API_KEY)


def get_record_store() -> RecordStore:
    """Get or create the submissions RecordStore."""
    global _record_store
    if _record_store is None:
        _record_store = RecordStore(
            os.environ.get("SUBMISSIONS_FILE")
            or get_data_dir() / SUBMISSIONS_FILENAME
        )
    return _record_store


def get_attachment_store() -> AttachmentStore:
    """Get or create the uploads AttachmentStore."""
    global _attachment_store
    if _attachment_store is None:
        _attachment_store = AttachmentStore(
            os.environ.get("UPLOADS_DIR") or get_data_dir() / UPLOADS_DIRNAME
        )
    return _attachment_store


def get_submission_service() -> SubmissionService:
    """Get or create SubmissionService."""
    global _submission_service
    if _submission_service is None:
        _submission_service = SubmissionService(
            record_store=get_record_store(),
            attachment_store=get_attachment_store(),
        )
    return _submission_service


# MARK: - Request Dependencies


class SubmissionForm:
    """Multipart fields of the repair request form."""

    def __init__(
        self,
        name: Annotated[str | None, Form()] = None,
        email: Annotated[str | None, Form()] = None,
        phone: Annotated[str | None, Form()] = None,
        device_model: Annotated[str | None, Form(alias="deviceModel")] = None,
        problem_description: Annotated[
            str | None, Form(alias="problemDescription")
        ] = None,
        priority: Annotated[str | None, Form()] = None,
        image: Annotated[UploadFile | str | None, File()] = None,
    ):
        self.fields = {
            "name": name,
            "email": email,
            "phone": phone,
            "deviceModel": device_model,
            "problemDescription": problem_description,
            "priority": priority,
        }
        self.image = image

    async def read_attachment(self) -> AttachmentUpload | None:
        """Read the uploaded image, if the form carried one.

        A plain text ``image`` part counts as no attachment.
        """
        if self.image is None or isinstance(self.image, str):
            return None
        if not self.image.filename:
            return None
        content = await self.image.read()
        return AttachmentUpload(filename=self.image.filename, content=content)


async def require_api_key(
    x_api_key: Annotated[str | None, Header()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request unless it carries the shared API key."""
    check_api_key(get_api_key(), x_api_key, authorization)


async def _handle_submission(form: SubmissionForm) -> dict:
    attachment = await form.read_attachment()
    record = await run_in_threadpool(
        get_submission_service().submit, form.fields, attachment
    )
    return {"ok": True, "submission": record.to_json_dict()}


# MARK: - Health


@app.get("/")
async def root():
    """Health check."""
    return {"ok": True, "msg": "Repair intake backend running"}


# MARK: - Submission Endpoints


@app.post("/submit")
async def submit(form: Annotated[SubmissionForm, Depends()]):
    """Accept a repair request from the public form."""
    return await _handle_submission(form)


@app.post("/submit-with-apikey", dependencies=[Depends(require_api_key)])
async def submit_with_api_key(form: Annotated[SubmissionForm, Depends()]):
    """Accept a repair request from an API client holding the shared key."""
    return await _handle_submission(form)


@app.get("/submissions")
async def list_submissions():
    """Return all stored submissions, oldest first."""
    return await run_in_threadpool(get_submission_service().list_submissions)


@app.get("/submissions/view", response_class=HTMLResponse)
async def view_submissions():
    """Render all stored submissions as an HTML table."""
    try:
        records = await run_in_threadpool(get_submission_service().list_submissions)
    except RecordStoreReadError:
        return HTMLResponse(
            ERROR_PAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return HTMLResponse(render_submissions_table(records))


@app.get("/validation-rules")
async def validation_rules():
    """Field rules shared with the browser form."""
    return VALIDATION_RULES


@app.get("/uploads/{filename}")
async def get_upload(filename: str):
    """Serve a stored attachment."""
    path = get_attachment_store().path_for(filename)
    if Path(filename).name != filename or not path.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Attachment not found"
        )
    return FileResponse(path)


# MARK: - Error Handlers


@app.exception_handler(SubmissionValidationError)
async def validation_error_handler(request, exc: SubmissionValidationError):
    """Return field validation messages."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"errors": exc.errors}
    )


@app.exception_handler(InvalidApiKeyError)
async def invalid_api_key_handler(request, exc: InvalidApiKeyError):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Invalid API key"}
    )


@app.exception_handler(RecordStoreReadError)
async def store_read_error_handler(request, exc: RecordStoreReadError):
    """Report an unreadable submissions file."""
    logger.error("Read submissions error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Failed to read submissions"},
    )


@app.exception_handler(RecordStoreError)
@app.exception_handler(AttachmentStoreError)
async def storage_error_handler(request, exc: Exception):
    """Handle storage failures without leaking internal detail."""
    logger.error("Save error: %s", exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# For local development
if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", DEFAULT_PORT))
    logger.info("Use API key %s for /submit-with-apikey", get_api_key())
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
