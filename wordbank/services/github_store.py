"""
WordBank Backend — GitHub Contents Store
==========================================

What:  RemoteFileStore implementation over the GitHub repository contents API.
How:   GET  /repos/{owner}/{repo}/contents/{path}  → base64 content + blob SHA
       PUT  /repos/{owner}/{repo}/contents/{path}  ← base64 content, message,
                                                     optional SHA, optional branch
       The blob SHA is the revision token. GitHub rejects a PUT whose SHA is
       stale (409) or that omits the SHA for an existing file (422).
Who:   Created lazily by WordService from settings; closed on app shutdown.

Resilience:
    Reads are idempotent, so transport failures (connection reset, timeout)
    are retried with tenacity using exponential backoff and jitter.
    HTTP error statuses are returned by GitHub on purpose and are never
    retried. Writes are never retried: a blind re-PUT could commit twice.
"""

import base64
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from wordbank.config import Settings, settings
from wordbank.exceptions import (
    RemoteConflictError,
    RemoteNotFoundError,
    RemoteUnavailableError,
)
from wordbank.services.store_base import RemoteFileStore, StoredFile

logger = logging.getLogger(__name__)

GITHUB_JSON = "application/vnd.github+json"
GITHUB_RAW = "application/vnd.github.raw+json"
GITHUB_API_VERSION = "2022-11-28"


def _error_payload(response: httpx.Response) -> Any:
    """Best-effort decode of a GitHub error body for diagnostics."""
    try:
        return response.json()
    except ValueError:
        return {"message": response.text[:500]}


def _transport_payload(exc: Exception) -> Dict[str, str]:
    return {"error_type": type(exc).__name__, "error": str(exc)}


class GitHubContentStore(RemoteFileStore):
    """
    Reads and conditionally writes files in one GitHub repository.

    Args:
        owner:      Account or organization owning the repository
        repo:       Repository name
        token:      Access token with contents write permission
        api_url:    API base URL (GitHub Enterprise uses a different host)
        branch:     Branch to read and commit to; None = default branch
        timeout:    httpx timeout in seconds
        transport:  Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str = "https://api.github.com",
        branch: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": GITHUB_JSON,
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
        )
        logger.info(
            "GitHubContentStore initialized for %s/%s (branch=%s)",
            owner,
            repo,
            branch or "default",
        )

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "GitHubContentStore":
        """
        Build a store from application settings.

        Raises:
            ConfigMissingError: owner, repository or token is unset.
        """
        config.validate_remote()
        return cls(
            owner=config.repo_owner,
            repo=config.repo_name,
            token=config.github_token,
            api_url=config.github_api_url,
            branch=config.github_branch,
            timeout=config.github_timeout,
        )

    def _contents_url(self, path: str) -> str:
        return (
            f"/repos/{quote(self.owner, safe='')}/{quote(self.repo, safe='')}"
            f"/contents/{quote(path.strip('/'), safe='/')}"
        )

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _get(
        self,
        url: str,
        accept: str = GITHUB_JSON,
    ) -> httpx.Response:
        params = {"ref": self.branch} if self.branch else None
        return await self._client.get(url, params=params, headers={"Accept": accept})

    async def read(self, path: str) -> StoredFile:
        url = self._contents_url(path)
        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            logger.error("GitHub read of %s failed: %s", path, str(e))
            raise RemoteUnavailableError(
                message=f"Could not reach GitHub while reading '{path}'",
                path=path,
                payload=_transport_payload(e),
            )

        if response.status_code == 404:
            raise RemoteNotFoundError(
                message=f"'{path}' does not exist in the repository",
                path=path,
                status=404,
                payload=_error_payload(response),
            )
        if response.is_error:
            payload = _error_payload(response)
            logger.error("GitHub read of %s returned %d: %s", path, response.status_code, payload)
            raise RemoteUnavailableError(
                message=f"GitHub answered {response.status_code} while reading '{path}'",
                path=path,
                status=response.status_code,
                payload=payload,
            )

        try:
            data = response.json()
        except ValueError:
            raise RemoteUnavailableError(
                message=f"GitHub returned a non-JSON body for '{path}'",
                path=path,
                status=response.status_code,
            )

        # A directory path returns a JSON list of entries
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            raise RemoteUnavailableError(
                message=f"'{path}' is not a file",
                path=path,
                status=response.status_code,
            )

        revision = data.get("sha") or ""
        if data.get("encoding") == "base64":
            content = base64.b64decode(data.get("content") or "")
        else:
            # Files over 1MB come back with encoding "none" and no content
            content = await self._read_raw(url, path)

        logger.debug("GitHub read %s (sha=%s, %d bytes)", path, revision[:7], len(content))
        return StoredFile(content=content, revision=revision)

    async def _read_raw(self, url: str, path: str) -> bytes:
        try:
            response = await self._get(url, accept=GITHUB_RAW)
        except httpx.HTTPError as e:
            raise RemoteUnavailableError(
                message=f"Could not reach GitHub while downloading '{path}'",
                path=path,
                payload=_transport_payload(e),
            )
        if response.is_error:
            raise RemoteUnavailableError(
                message=f"GitHub answered {response.status_code} while downloading '{path}'",
                path=path,
                status=response.status_code,
                payload=_error_payload(response),
            )
        return response.content

    async def write(
        self,
        path: str,
        content: bytes,
        message: str,
        revision: Optional[str] = None,
    ) -> str:
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
        }
        if revision:
            body["sha"] = revision
        if self.branch:
            body["branch"] = self.branch

        try:
            response = await self._client.put(self._contents_url(path), json=body)
        except httpx.HTTPError as e:
            logger.error("GitHub write of %s failed: %s", path, str(e))
            raise RemoteUnavailableError(
                message=f"Could not reach GitHub while writing '{path}'",
                path=path,
                payload=_transport_payload(e),
            )

        if response.is_error:
            payload = _error_payload(response)
            if self._is_conflict(response.status_code, payload, revision):
                logger.warning("GitHub rejected write of %s as stale: %s", path, payload)
                raise RemoteConflictError(
                    message=f"'{path}' was changed since it was read",
                    path=path,
                    status=response.status_code,
                    payload=payload,
                )
            logger.error("GitHub write of %s returned %d: %s", path, response.status_code, payload)
            raise RemoteUnavailableError(
                message=f"GitHub answered {response.status_code} while writing '{path}'",
                path=path,
                status=response.status_code,
                payload=payload,
            )

        try:
            new_revision = (response.json().get("content") or {}).get("sha")
        except (ValueError, AttributeError):
            new_revision = None
        if not new_revision:
            raise RemoteUnavailableError(
                message=f"GitHub did not return a revision for '{path}'",
                path=path,
                status=response.status_code,
            )

        logger.info("Committed %s (%d bytes, sha=%s): %s", path, len(content), new_revision[:7], message)
        return new_revision

    @staticmethod
    def _is_conflict(status: int, payload: Any, revision: Optional[str]) -> bool:
        """
        409: the supplied SHA does not match the current blob.
        422 without a SHA: the file exists and GitHub requires its SHA.
        """
        if status == 409:
            return True
        if status == 422 and not revision:
            message = payload.get("message", "") if isinstance(payload, dict) else ""
            return "sha" in str(message).lower()
        return False

    async def aclose(self) -> None:
        await self._client.aclose()
