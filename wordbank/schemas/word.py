"""
WordBank Backend — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models for the word submission, the stored entry and the
       API responses.
How:   The multipart decoder in routes/words.py builds a WordSubmission;
       WordService writes WordEntry.model_dump() into the answers document.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Domain Models
# ══════════════════════════════════════════════════════════════════════════


class ImagePayload(BaseModel):
    """An uploaded image, already validated and reduced to its basename."""

    filename: str = Field(description="Original filename, used as the repository filename")
    content: bytes = Field(description="Raw image bytes")


class WordSubmission(BaseModel):
    """
    What:  A decoded create/update request.
    Who:   Built by the multipart decoder; consumed by WordService.

    Scalar fields default to "" so that WordService, not the HTTP layer,
    reports every missing field in a single MissingFieldError.
    """

    category: str = ""
    key: str = ""
    name: str = ""
    desc: str = ""
    image: Optional[ImagePayload] = None

    def missing_fields(self, require_image: bool) -> List[str]:
        """Required fields that are absent or blank, in form order."""
        missing = [
            field
            for field in ("category", "key", "name", "desc")
            if not getattr(self, field).strip()
        ]
        if require_image and self.image is None:
            missing.append("image")
        return missing


class WordEntry(BaseModel):
    """
    What:  One word record as stored under document[category][key].

    Field order is the serialization order: name, img, imgUrl, desc.
    """

    name: str
    img: str = Field(default="", description="Image filename")
    imgUrl: str = Field(default="", description="Relative image path, e.g. ./imgs/cat.png")
    desc: str


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SuccessResponse(BaseModel):
    """Acknowledgement returned by both write endpoints."""

    success: bool = True


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Failure kind (e.g. "missing_field", "document_conflict")
        message: Human-readable description
        details: Extra context, including the raw GitHub error payload
        request_id: Correlation ID for tracing this error in server logs
    """

    error: str = Field(description="Machine-readable error kind")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response. No remote call is made to build it."""

    status: str = Field(description="healthy, or degraded when GitHub is not configured")
    version: str = Field(description="Application version")
    github: str = Field(description="configured or not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
