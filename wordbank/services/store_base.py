"""
WordBank Backend — Abstract Remote File Store Interface
=========================================================

What:  Abstract base class for a path-addressed file store with optimistic
       concurrency (read returns a revision, write may be conditioned on it).
How:   GitHubContentStore implements it over the GitHub contents API; the
       test suite implements it in memory.
Who:   Called by WordService for both the image and the answers document.

Contract:
    read(path)
        → StoredFile(content, revision)
        → RemoteNotFoundError if the path does not exist
        → RemoteUnavailableError on network / HTTP failure

    write(path, content, message, revision=None)
        → new revision token
        → RemoteConflictError if `revision` is stale, or if it is omitted
          while the path already exists
        → RemoteUnavailableError on network / HTTP failure
        Each successful write creates exactly one revision tagged `message`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StoredFile:
    """Content of a remote file and the revision it was read at."""

    content: bytes
    revision: str


class RemoteFileStore(ABC):
    """
    Abstract interface for reading and conditionally writing remote files.

    Implementations:
        - GitHubContentStore: GitHub repository contents API (production)
        - InMemoryStore: dict-backed fake with the same conflict rules (tests)
    """

    @abstractmethod
    async def read(self, path: str) -> StoredFile:
        """
        Fetch a file and the revision it is currently stored at.

        Raises:
            RemoteNotFoundError: The path does not exist. Callers that are
                allowed to create treat this as "no existing file".
            RemoteUnavailableError: The remote could not be reached or
                answered with an unexpected status.
        """
        ...

    @abstractmethod
    async def write(
        self,
        path: str,
        content: bytes,
        message: str,
        revision: Optional[str] = None,
    ) -> str:
        """
        Create or overwrite a file, returning its new revision.

        Raises:
            RemoteConflictError: `revision` does not match the stored one,
                or no revision was given for an existing path.
            RemoteUnavailableError: Any other failure.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources. Default: nothing to release."""
        return None
