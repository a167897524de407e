from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol

from .client import GENERIC_ERROR_MESSAGE, PDF_CONTENT_TYPE
from .config import DEFAULT_MAX_UPLOAD_BYTES
from .exceptions import ServiceError, UploadValidationError, WorkflowStateError
from .schemas import ValidationResult

logger = logging.getLogger(__name__)

PROGRESS_STEP = 5
PROGRESS_INTERVAL_SECONDS = 0.3
PROGRESS_CAP = 90
MISSING_INPUT_MESSAGE = "Por favor proporciona un archivo PDF y el nombre de la persona"


class WorkflowState(str, Enum):
    IDLE = "idle"
    FILE_STAGED = "file_staged"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ValidationService(Protocol):
    def validate_document(
        self,
        content: bytes,
        filename: str,
        person_name: str,
        content_type: str = PDF_CONTENT_TYPE,
    ) -> ValidationResult: ...


@dataclass(slots=True, frozen=True)
class StagedFile:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def _size_in_mb(size: int) -> str:
    return f"{size / (1024 * 1024):g}"


class UploadWorkflow:
    def __init__(
        self,
        client: ValidationService,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.max_upload_bytes = max_upload_bytes
        self._clock = clock
        self._lock = threading.Lock()

        self.state = WorkflowState.IDLE
        self.staged_file: StagedFile | None = None
        self.person_name = ""
        self.result: ValidationResult | None = None
        self.error: str | None = None
        self._submitted_at: float | None = None
        self._final_progress = 0

    def validate_file(self, upload: StagedFile) -> None:
        if upload.content_type != PDF_CONTENT_TYPE:
            raise UploadValidationError("Solo se permiten archivos PDF")
        if upload.size > self.max_upload_bytes:
            raise UploadValidationError(
                "El archivo excede el tamaño máximo permitido de "
                f"{_size_in_mb(self.max_upload_bytes)}MB"
            )

    def stage_file(self, upload: StagedFile) -> None:
        with self._lock:
            if self.state in (WorkflowState.SUBMITTING, WorkflowState.SUCCEEDED):
                raise WorkflowStateError(f"Cannot stage a file while {self.state.value}")
            self.validate_file(upload)
            self.staged_file = upload
            self.state = WorkflowState.FILE_STAGED
            self.error = None
        logger.info("Staged %s (%d bytes)", upload.filename, upload.size)

    def submit(self, person_name: str) -> ValidationResult:
        with self._lock:
            if self.state is WorkflowState.SUBMITTING:
                raise WorkflowStateError("A submission is already in progress")
            if self.state is WorkflowState.SUCCEEDED:
                raise WorkflowStateError("Reset the workflow before analyzing another document")
            staged = self.staged_file
            if staged is None or not person_name or not person_name.strip():
                raise UploadValidationError(MISSING_INPUT_MESSAGE)

            self.state = WorkflowState.SUBMITTING
            self.person_name = person_name
            self.error = None
            self._final_progress = 0
            self._submitted_at = self._clock()

        logger.debug("Submitting %s for %r", staged.filename, person_name)
        try:
            result = self.client.validate_document(
                staged.content,
                staged.filename,
                person_name,
                content_type=staged.content_type,
            )
        except ServiceError as exc:
            self._fail(exc.message or GENERIC_ERROR_MESSAGE)
            raise
        except Exception:
            self._fail(GENERIC_ERROR_MESSAGE)
            raise

        with self._lock:
            self.result = result
            self._final_progress = 100
            self._submitted_at = None
            self.state = WorkflowState.SUCCEEDED
        logger.info("Analysis of %s succeeded", staged.filename)
        return result

    def _fail(self, message: str) -> None:
        with self._lock:
            self.error = message
            self._final_progress = 0
            self._submitted_at = None
            # Staged file stays so the same document can be retried.
            self.state = WorkflowState.FAILED
        logger.warning("Analysis failed: %s", message)

    def reset(self) -> None:
        with self._lock:
            if self.state is WorkflowState.SUBMITTING:
                raise WorkflowStateError("Cannot reset while a submission is in progress")
            self.state = WorkflowState.IDLE
            self.staged_file = None
            self.person_name = ""
            self.result = None
            self.error = None
            self._submitted_at = None
            self._final_progress = 0
        logger.debug("Workflow reset")

    @property
    def progress(self) -> int:
        if self.state is not WorkflowState.SUBMITTING or self._submitted_at is None:
            return self._final_progress
        ticks = int((self._clock() - self._submitted_at) / PROGRESS_INTERVAL_SECONDS)
        return min(ticks * PROGRESS_STEP, PROGRESS_CAP)

    @property
    def can_submit(self) -> bool:
        return self.staged_file is not None and self.state in (
            WorkflowState.FILE_STAGED,
            WorkflowState.FAILED,
        )

    def snapshot(self) -> dict[str, Any]:
        staged = self.staged_file
        return {
            "state": self.state.value,
            "file_name": staged.filename if staged else None,
            "file_size": staged.size if staged else None,
            "person_name": self.person_name,
            "progress": self.progress,
            "can_submit": self.can_submit,
            "error": self.error,
            "max_upload_bytes": self.max_upload_bytes,
        }
