"""
WordBank Backend — Word Service (Upsert Orchestrator)
=======================================================

What:  Creates or updates one word: commits its image, then merges its entry
       into the answers document and commits the document.
How:   Composes a RemoteFileStore with the merge engine.
Who:   Called by the create-word and update-word route handlers.

Orchestration Flow:
    ┌──────────┐    ┌─────────────┐    ┌─────────────┐    ┌──────────┐    ┌──────────┐
    │   Init   │───▶│   Image     │───▶│  Document   │───▶│  Merge   │───▶│  Commit  │
    │ (fields, │    │  read SHA → │    │  read       │    │ (pure)   │    │  PUT w/  │
    │  config) │    │  PUT        │    │  + parse    │    │          │    │  doc SHA │
    └──────────┘    └─────────────┘    └─────────────┘    └──────────┘    └──────────┘

    Every failure stops the flow. Nothing is rolled back: if the image commit
    succeeds and the document commit fails, the image stays in the repository
    unreferenced until the request is resubmitted.

Concurrency:
    No locking. The document PUT carries the SHA from this request's own
    read, so a concurrent writer that committed in between makes GitHub
    reject ours. That surfaces as DocumentConflictError and is not retried.
"""

import logging
from typing import Optional, Tuple

from wordbank.config import Settings, settings
from wordbank.exceptions import (
    DocumentCommitError,
    DocumentConflictError,
    DocumentFetchError,
    ImageUploadError,
    MalformedDocumentError,
    MissingFieldError,
    NotFoundError,
    RemoteConflictError,
    RemoteNotFoundError,
    RemoteStoreError,
)
from wordbank.schemas.word import ImagePayload, WordEntry, WordSubmission
from wordbank.services.github_store import GitHubContentStore
from wordbank.services.merge import (
    Document,
    apply_entry,
    get_entry,
    parse_document,
    serialize_document,
)
from wordbank.services.store_base import RemoteFileStore

logger = logging.getLogger(__name__)


class WordService:
    """
    Upsert orchestrator for answer entries.

    Args:
        store:     RemoteFileStore to use. When None, a GitHubContentStore is
                   built from `config` on first use (which raises
                   ConfigMissingError while the repository is unconfigured).
        config:    Settings providing document_path and image_dir.
    """

    def __init__(
        self,
        store: Optional[RemoteFileStore] = None,
        config: Settings = settings,
    ):
        self._store = store
        self.config = config
        self.document_path = config.document_path
        self.image_dir = config.image_dir

    def get_store(self) -> RemoteFileStore:
        if self._store is None:
            self._store = GitHubContentStore.from_settings(self.config)
        return self._store

    async def aclose(self) -> None:
        if self._store is not None:
            await self._store.aclose()

    # ── Public operations ─────────────────────────────────────────────────

    async def create_word(self, submission: WordSubmission) -> WordEntry:
        """Create or overwrite document[category][key]. An image is required."""
        return await self.upsert(submission, allow_create=True)

    async def update_word(self, submission: WordSubmission) -> WordEntry:
        """Replace an existing document[category][key]. The image is optional."""
        return await self.upsert(submission, allow_create=False)

    async def upsert(self, submission: WordSubmission, allow_create: bool) -> WordEntry:
        """
        Run the full image → document workflow for one submission.

        Args:
            submission:   Decoded form fields and optional image
            allow_create: True for create semantics (idempotent upsert, image
                          required); False for update semantics (entry must
                          already exist, image optional)

        Returns:
            The WordEntry committed under document[category][key].

        Raises:
            MissingFieldError, ConfigMissingError: before any remote call
            ImageUploadError: image commit failed; document untouched
            DocumentFetchError, MalformedDocumentError: document unreadable
            NotFoundError: update target absent
            DocumentConflictError: document changed since it was read
            DocumentCommitError: document write failed otherwise
        """
        # ── Init: validate fields, then configuration ─────────────────────
        missing = submission.missing_fields(require_image=allow_create)
        if missing:
            raise MissingFieldError(fields=missing)

        store = self.get_store()
        category, key = submission.category, submission.key
        operation = "create" if allow_create else "update"
        logger.info("Starting %s of word %s/%s", operation, category, key)

        # ── Image commit (optional on update) ─────────────────────────────
        image_path: Optional[str] = None
        if submission.image is not None:
            image_path = await self._upload_image(store, submission.image, key, allow_create)

        # ── Document read ─────────────────────────────────────────────────
        document, revision = await self._fetch_document(store)

        existing = get_entry(document, category, key)
        if not allow_create and existing is None:
            logger.info("Update target %s/%s does not exist", category, key)
            raise NotFoundError(category=category, key=key)

        # ── Merge ─────────────────────────────────────────────────────────
        if submission.image is not None:
            img = submission.image.filename
            img_url = f"./{image_path}"
        else:
            previous = existing if isinstance(existing, dict) else {}
            img = previous.get("img", "")
            img_url = previous.get("imgUrl", "")

        entry = WordEntry(name=submission.name, img=img, imgUrl=img_url, desc=submission.desc)
        merged = apply_entry(document, category, key, entry.model_dump())

        # ── Document commit ───────────────────────────────────────────────
        if allow_create:
            message = f"Update {self.document_path} with new word {key}"
        else:
            message = f"Update word {key} in category {category}"
        await self._commit_document(store, merged, message, revision)

        logger.info("Word %s/%s %sd", category, key, operation)
        return entry

    # ── Steps ─────────────────────────────────────────────────────────────

    def image_path_for(self, filename: str) -> str:
        return f"{self.image_dir}/{filename}"

    async def _upload_image(
        self,
        store: RemoteFileStore,
        image: ImagePayload,
        key: str,
        allow_create: bool,
    ) -> str:
        path = self.image_path_for(image.filename)
        if allow_create:
            message = f"Add new image for {key}"
        else:
            message = f"Update image for word {key}"

        try:
            try:
                current: Optional[str] = (await store.read(path)).revision
                logger.info("Image %s exists, overwriting at %s", path, current[:7])
            except RemoteNotFoundError:
                current = None
            await store.write(path, image.content, message, revision=current)
        except RemoteStoreError as e:
            raise ImageUploadError(context=e.context)

        return path

    async def _fetch_document(self, store: RemoteFileStore) -> Tuple[Document, Optional[str]]:
        """
        Read and parse the answers document.

        An absent document is an empty one with no revision; the commit then
        creates the file.
        """
        try:
            stored = await store.read(self.document_path)
        except RemoteNotFoundError:
            logger.warning("%s not found, starting from an empty document", self.document_path)
            return {}, None
        except RemoteStoreError as e:
            raise DocumentFetchError(context=e.context)

        try:
            text = stored.content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedDocumentError(
                message="The JSON document is not valid UTF-8",
                context={"error": str(e)},
            )

        return parse_document(text), stored.revision

    async def _commit_document(
        self,
        store: RemoteFileStore,
        document: Document,
        message: str,
        revision: Optional[str],
    ) -> str:
        try:
            return await store.write(
                self.document_path,
                serialize_document(document),
                message,
                revision=revision,
            )
        except RemoteConflictError as e:
            raise DocumentConflictError(context=e.context)
        except RemoteStoreError as e:
            raise DocumentCommitError(context=e.context)


# ── Singleton Instance ────────────────────────────────────────────────────
# Holds the lazily built GitHub store (and its HTTP connection pool)
word_service = WordService()
