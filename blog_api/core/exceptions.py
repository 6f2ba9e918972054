"""
Error kinds raised by the service layer.

Every failure a request can end in is one of four kinds. Routes never build
error responses themselves: the handlers registered in ``blog_api.main`` map a
kind to its status code and response envelope.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    validation = "validation"
    not_found = "not_found"
    upload = "upload"
    storage = "storage"


STATUS_CODES = {
    ErrorKind.validation: 400,
    ErrorKind.upload: 400,
    ErrorKind.not_found: 404,
    ErrorKind.storage: 500,
}


class BlogAPIError(Exception):
    kind: ErrorKind = ErrorKind.storage

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class BlogValidationError(BlogAPIError):
    """Bad, missing or oversized input."""
    kind = ErrorKind.validation


class BlogNotFoundError(BlogAPIError):
    kind = ErrorKind.not_found

    def __init__(self, message: str = "Blog not found"):
        super().__init__(message)


class UploadRejectedError(BlogAPIError):
    """Uploaded file has a disallowed type or size."""
    kind = ErrorKind.upload


class StorageError(BlogAPIError):
    """Database or filesystem failure."""
    kind = ErrorKind.storage
