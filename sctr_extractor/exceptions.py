from __future__ import annotations


class SctrExtractorError(Exception):
    """Base error for the extractor front-end."""


class UploadValidationError(SctrExtractorError):
    """Raised locally, before any request reaches the extraction service."""


class WorkflowStateError(SctrExtractorError):
    pass


class ServiceError(SctrExtractorError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ContractViolationError(ServiceError):
    """The service answered 2xx but the body lacks a required field."""
