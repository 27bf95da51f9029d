"""GitHub REST API client.

Thin async wrapper over the endpoints the pipeline needs. The access token is
passed per call because every stored repository carries its own credential.
"""

import base64
import binascii
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from testgen.config.schema import GitHubConfig
from testgen.core.errors import RemoteServiceError
from testgen.entities import RemoteEntry
from testgen.observability.logging import get_logger

logger = get_logger(__name__)


class RemoteOwner(BaseModel):
    login: str


class RemoteRepository(BaseModel):
    """Subset of GitHub's repository payload."""

    id: int
    name: str
    full_name: str
    owner: RemoteOwner
    description: Optional[str] = None
    language: Optional[str] = None
    private: bool = False
    default_branch: str = "main"


class PullRequest(BaseModel):
    number: int
    html_url: str
    title: str = ""


class GitHubAPIError(RemoteServiceError):
    """Non-success response from GitHub."""

    def __init__(self, message: str, status_code: Optional[int] = None, original_error: Optional[Exception] = None):
        self.status_code = status_code
        super().__init__(message, service="github", original_error=original_error)

    @property
    def is_conflict(self) -> bool:
        """Branch, file or pull request already exists."""
        return self.status_code in (409, 422)


class GitHubClient:
    """Async client for the GitHub REST API."""

    def __init__(self, config: Optional[GitHubConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the client.

        Args:
            config: GitHub configuration (base URL, API version, timeout)
            transport: Optional httpx transport, used by tests
        """
        self.config = config or GitHubConfig()
        self.client = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": self.config.api_version,
            },
            timeout=self.config.timeout,
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        url: str,
        access_token: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        try:
            response = await self.client.request(
                method,
                url,
                json=json,
                params=params,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GitHubAPIError(
                message=f"GitHub API error: {e.response.status_code} {e.response.reason_phrase} ({method} {url})",
                status_code=e.response.status_code,
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise GitHubAPIError(
                message=f"GitHub request failed: {e} ({method} {url})",
                original_error=e,
            ) from e

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _contents_url(owner: str, repo: str, path: str) -> str:
        return f"/repos/{owner}/{repo}/contents/{quote(path.strip('/'), safe='/')}"

    async def list_user_repositories(self, access_token: str) -> list[RemoteRepository]:
        """Repositories visible to the token, most recently updated first."""
        data = await self._request(
            "GET",
            "/user/repos",
            access_token,
            params={"sort": "updated", "per_page": self.config.per_page},
        )
        return [RemoteRepository.model_validate(item) for item in data or []]

    async def list_directory(self, owner: str, repo: str, path: str, access_token: str) -> list[RemoteEntry]:
        """Entries of one directory (a single entry when ``path`` is a file)."""
        data = await self._request("GET", self._contents_url(owner, repo, path), access_token)
        items = data if isinstance(data, list) else [data]
        return [RemoteEntry.model_validate(item) for item in items if item]

    async def get_file_content(
        self, owner: str, repo: str, path: str, access_token: str, ref: Optional[str] = None
    ) -> str:
        """Decoded UTF-8 text of a file.

        Raises:
            GitHubAPIError: On HTTP failure or when the payload carries no content
        """
        params = {"ref": ref} if ref else None
        data = await self._request("GET", self._contents_url(owner, repo, path), access_token, params=params)
        encoded = data.get("content") if isinstance(data, dict) else None
        if not encoded:
            raise GitHubAPIError(f"File content not available: {path}")

        try:
            return base64.b64decode(encoded).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise GitHubAPIError(f"File content is not UTF-8 text: {path}", original_error=e) from e

    async def get_file_sha(self, owner: str, repo: str, path: str, branch: str, access_token: str) -> Optional[str]:
        """Blob sha of a file on a branch, or None when it does not exist."""
        try:
            data = await self._request(
                "GET", self._contents_url(owner, repo, path), access_token, params={"ref": branch}
            )
        except GitHubAPIError as e:
            if e.status_code == 404:
                return None
            raise
        return data.get("sha") if isinstance(data, dict) else None

    async def get_branch_sha(self, owner: str, repo: str, branch: str, access_token: str) -> str:
        """Commit sha the branch points at."""
        data = await self._request("GET", f"/repos/{owner}/{repo}/git/ref/heads/{branch}", access_token)
        return data["object"]["sha"]

    async def create_branch(
        self, owner: str, repo: str, branch: str, source_branch: str, access_token: str
    ) -> dict[str, Any]:
        """Create ``branch`` pointing at the head of ``source_branch``."""
        sha = await self.get_branch_sha(owner, repo, source_branch, access_token)
        result = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/git/refs",
            access_token,
            json={"ref": f"refs/heads/{branch}", "sha": sha},
        )
        logger.info("branch_created", repo=f"{owner}/{repo}", branch=branch, source=source_branch)
        return result

    async def create_or_update_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        message: str,
        branch: str,
        access_token: str,
    ) -> dict[str, Any]:
        """Commit ``content`` to ``path`` on ``branch``."""
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        sha = await self.get_file_sha(owner, repo, path, branch, access_token)
        if sha:
            body["sha"] = sha

        return await self._request("PUT", self._contents_url(owner, repo, path), access_token, json=body)

    async def create_pull_request(
        self, owner: str, repo: str, title: str, body: str, head: str, base: str, access_token: str
    ) -> PullRequest:
        data = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            access_token,
            json={"title": title, "body": body, "head": head, "base": base},
        )
        return PullRequest.model_validate(data)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
