"""
WordBank Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions, one per failure kind of the word
       upsert workflow, plus the errors raised by the remote file store.
How:   Each exception carries a message, a machine-readable `kind` and an
       optional context dict. Global exception handlers (registered in
       main.py) turn them into JSON error responses.
Who:   Raised by the store client, the merge engine and WordService.

Exception Hierarchy:
    WordBankError (base)
    ├── MissingFieldError        → 400 Bad Request
    ├── ValidationError          → 400 Bad Request (image rejected)
    ├── ConfigMissingError       → 500 Internal Server Error
    ├── ImageUploadError         → 502 Bad Gateway
    ├── DocumentFetchError       → 502 Bad Gateway
    ├── MalformedDocumentError   → 500 Internal Server Error
    ├── NotFoundError            → 404 Not Found
    ├── DocumentConflictError    → 409 Conflict (resubmit the request)
    ├── DocumentCommitError      → 502 Bad Gateway
    └── RemoteStoreError         (store level, translated by WordService)
        ├── RemoteNotFoundError
        ├── RemoteConflictError
        └── RemoteUnavailableError

None of these are retried inside the service. A DocumentConflictError means
another writer committed the document first; the caller resubmits.
"""

from typing import Any, Dict, List, Optional


class WordBankError(Exception):
    """
    Base exception for all WordBank application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional diagnostic info, e.g. the remote error payload
        kind:     Machine-readable failure kind, used as the `error` field
        status_code: HTTP status the global handler answers with
    """

    kind = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class MissingFieldError(WordBankError):
    """
    Raised when required form fields are absent or blank.

    When:    Before any remote call. Lists every missing field at once.
    HTTP:    400 Bad Request
    """

    kind = "missing_field"
    status_code = 400

    def __init__(
        self,
        fields: List[str],
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["fields"] = list(fields)
        super().__init__(
            message=f"Required fields were not sent: {', '.join(fields)}",
            context=ctx,
        )
        self.fields = list(fields)


class ValidationError(WordBankError):
    """
    Raised when the uploaded image fails validation (type, size, name).

    HTTP:    400 Bad Request
    """

    kind = "validation_error"
    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConfigMissingError(WordBankError):
    """
    Raised when REPO_OWNER, REPO_NAME or GITHUB_TOKEN is not configured.

    When:    After field validation, before the first remote call.
    HTTP:    500 Internal Server Error
    """

    kind = "config_missing"
    status_code = 500

    def __init__(
        self,
        missing: List[str],
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["missing"] = list(missing)
        super().__init__(
            message=f"Environment variables are not configured: {', '.join(missing)}",
            context=ctx,
        )
        self.missing = list(missing)


class ImageUploadError(WordBankError):
    """
    Raised when the image could not be committed to the repository.

    The answers document is never touched after this error.
    HTTP:    502 Bad Gateway
    """

    kind = "image_upload_error"
    status_code = 502

    def __init__(
        self,
        message: str = "Error uploading the image to GitHub",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DocumentFetchError(WordBankError):
    """Raised when the answers document could not be read. HTTP 502."""

    kind = "document_fetch_error"
    status_code = 502

    def __init__(
        self,
        message: str = "Error fetching the JSON document from GitHub",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MalformedDocumentError(WordBankError):
    """
    Raised when the stored document is non-empty but not a JSON object of
    categories. No write is attempted afterwards.

    HTTP:    500 Internal Server Error
    """

    kind = "malformed_document"
    status_code = 500

    def __init__(
        self,
        message: str = "Error parsing the JSON document",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(WordBankError):
    """
    Raised when an update targets a (category, key) absent from the document.

    HTTP:    404 Not Found
    """

    kind = "not_found"
    status_code = 404

    def __init__(
        self,
        category: str,
        key: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["category"] = category
        ctx["key"] = key
        super().__init__(
            message=f"Word '{key}' was not found in category '{category}'",
            context=ctx,
        )
        self.category = category
        self.key = key


class DocumentConflictError(WordBankError):
    """
    Raised when the document changed between our read and our write.

    The whole request must be resubmitted. An image committed earlier in the
    same request stays committed.
    HTTP:    409 Conflict
    """

    kind = "document_conflict"
    status_code = 409

    def __init__(
        self,
        message: str = (
            "The JSON document was modified by another request. "
            "Please submit again."
        ),
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DocumentCommitError(WordBankError):
    """Raised when writing the merged document fails for a non-conflict reason."""

    kind = "document_commit_error"
    status_code = 502

    def __init__(
        self,
        message: str = "Error updating the JSON document on GitHub",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Remote store errors
# ══════════════════════════════════════════════════════════════════════════


class RemoteStoreError(WordBankError):
    """
    Base for errors raised by a RemoteFileStore.

    Attributes:
        path:     Repository path of the failed call
        status:   HTTP status returned by the remote, if any
        payload:  Raw error body returned by the remote, if any
    """

    kind = "remote_store_error"
    status_code = 502

    def __init__(
        self,
        message: str,
        path: str,
        status: Optional[int] = None,
        payload: Any = None,
    ):
        ctx: Dict[str, Any] = {"path": path}
        if status is not None:
            ctx["status"] = status
        if payload is not None:
            ctx["remote_error"] = payload
        super().__init__(message=message, context=ctx)
        self.path = path
        self.status = status
        self.payload = payload


class RemoteNotFoundError(RemoteStoreError):
    """The path does not exist in the repository."""

    kind = "remote_not_found"


class RemoteConflictError(RemoteStoreError):
    """The supplied revision is stale, or a revision was required but missing."""

    kind = "remote_conflict"


class RemoteUnavailableError(RemoteStoreError):
    """Network failure or unexpected HTTP status from the remote."""

    kind = "remote_unavailable"
