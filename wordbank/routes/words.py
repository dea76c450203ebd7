"""
WordBank Backend — Word Route Handlers
========================================

What:  POST /api/create-word and POST /api/update-word.
How:   Decodes the multipart form into a WordSubmission, then delegates to
       WordService. Both routes answer {"success": true} on success; errors
       are formatted by the global exception handlers in main.py.

Form fields (multipart/form-data):
    category, key, name, desc   text fields
    image                       file; required for create, optional for update

Normalization happens here and only here: a text field sent more than once
arrives as several values and is joined into one string, and an empty file
part counts as "no image". WordService only ever sees plain strings.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from wordbank.schemas.word import ErrorResponse, SuccessResponse, WordSubmission
from wordbank.services.image_service import image_service
from wordbank.services.word_service import WordService, word_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Words"])

ERROR_RESPONSES = {
    400: {"description": "Missing field or invalid image", "model": ErrorResponse},
    409: {"description": "Document changed concurrently; resubmit", "model": ErrorResponse},
    500: {"description": "Configuration missing or malformed document", "model": ErrorResponse},
    502: {"description": "GitHub read or commit failed", "model": ErrorResponse},
}


def _join(values: Optional[List[str]]) -> str:
    return "".join(values) if values else ""


async def decode_word_form(
    category: Optional[List[str]] = Form(None),
    key: Optional[List[str]] = Form(None),
    name: Optional[List[str]] = Form(None),
    desc: Optional[List[str]] = Form(None),
    image: Optional[UploadFile] = File(None, description="Word image (PNG, JPG, GIF, WEBP, SVG)"),
) -> WordSubmission:
    """
    Inbound request decoder.

    Required-field checks are left to WordService so that a request missing
    several fields gets one error naming all of them.
    """
    payload = None
    if image is not None and image.filename:
        try:
            content = await image.read()
        finally:
            await image.close()
        payload = image_service.prepare(image.filename, content)

    submission = WordSubmission(
        category=_join(category),
        key=_join(key),
        name=_join(name),
        desc=_join(desc),
        image=payload,
    )
    logger.info(
        "Received word form: category=%s key=%s image=%s",
        submission.category or "-",
        submission.key or "-",
        payload.filename if payload else "-",
    )
    return submission


def get_word_service() -> WordService:
    """Dependency hook; tests override it with an in-memory store."""
    return word_service


@router.post(
    "/create-word",
    response_model=SuccessResponse,
    responses=ERROR_RESPONSES,
    summary="Create or overwrite a word",
    description=(
        "Commits the image to imgs/<filename> and sets "
        "document[category][key] in the answers JSON. Re-submitting the same "
        "category/key overwrites the entry."
    ),
)
async def create_word(
    submission: WordSubmission = Depends(decode_word_form),
    service: WordService = Depends(get_word_service),
) -> SuccessResponse:
    await service.create_word(submission)
    return SuccessResponse()


@router.post(
    "/update-word",
    response_model=SuccessResponse,
    responses={
        **ERROR_RESPONSES,
        404: {"description": "Word not found for update", "model": ErrorResponse},
    },
    summary="Update an existing word",
    description=(
        "Replaces document[category][key]. Without a new image the current "
        "img/imgUrl are kept."
    ),
)
async def update_word(
    submission: WordSubmission = Depends(decode_word_form),
    service: WordService = Depends(get_word_service),
) -> SuccessResponse:
    await service.update_word(submission)
    return SuccessResponse()


@router.options("/create-word", include_in_schema=False)
@router.options("/update-word", include_in_schema=False)
async def preflight() -> Response:
    """
    Bare OPTIONS requests (without CORS preflight headers) answer 200.
    Real preflights are answered earlier by CORSMiddleware.
    """
    return Response(status_code=200)
