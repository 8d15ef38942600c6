"""Async client for reading project documents from GitHub.

Wraps the GitHub contents API (``/repos/{owner}/{repo}/contents/{path}``)
with timeout handling, structured results, and branch fallback: a file
missing on one branch is looked up on the next, while any other failure is
reported straight away.

Typical usage::

    client = GitHubClient(token=os.environ["GITHUB_TOKEN"])
    result = await client.fetch_project_file("acme/api", "PROJECT.md")
    if result.success:
        project = parse_project(result.content)
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field


class FetchResult(BaseModel):
    """Structured result of a file fetch."""

    success: bool = Field(default=True, description="Whether the file was retrieved")
    content: Optional[str] = Field(default=None, description="Decoded file content")
    branch: Optional[str] = Field(default=None, description="Branch the file was read from")
    status_code: Optional[int] = Field(default=None, description="HTTP status on failure")
    not_found: bool = Field(default=False, description="True when GitHub answered 404")
    error: Optional[str] = Field(default=None, description="Error message on failure")


class GitHubClient:
    """Async client for the GitHub REST API.

    Uses ``httpx.AsyncClient`` for non-blocking HTTP. Methods never raise
    for transport or API failures; they return a :class:`FetchResult`.
    """

    def __init__(
        self,
        api_url: str = "https://api.github.com",
        token: Optional[str] = None,
        timeout: int = 30,
        branches: Optional[list[str]] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.branches = list(branches) if branches else ["main", "master"]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` with auth headers and timeout."""
        return httpx.AsyncClient(
            base_url=self.api_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {self.token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

    @staticmethod
    def _decode_content(data: Any, path: str) -> FetchResult:
        """Turn a contents API payload into a result.

        Files come back base64-encoded; a list payload means *path* is a
        directory.
        """
        if isinstance(data, list):
            return FetchResult(
                success=False, error=f"Path {path} is a directory, not a file"
            )
        if isinstance(data, dict) and data.get("encoding") == "base64" and "content" in data:
            try:
                content = base64.b64decode(data["content"]).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError) as exc:
                return FetchResult(success=False, error=f"Could not decode {path}: {exc}")
            return FetchResult(success=True, content=content)
        return FetchResult(
            success=False, error="Unexpected response format from GitHub API"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_file(self, repo: str, path: str, branch: str = "main") -> FetchResult:
        """Fetch one file from one branch.

        Args:
            repo: Repository in ``owner/repo`` form.
            path: File path inside the repository.
            branch: Git ref to read.

        Returns:
            A ``FetchResult`` with the decoded content or an error.
        """
        owner, _, name = repo.partition("/")
        if not owner or not name or "/" in name:
            return FetchResult(
                success=False,
                error=f"Invalid repo format: {repo}. Expected format: owner/repo",
            )
        if not self.token:
            return FetchResult(
                success=False,
                error=(
                    "GITHUB_TOKEN environment variable is not set. "
                    "Please set it to your GitHub Personal Access Token."
                ),
            )

        url = f"/repos/{owner}/{name}/contents/{path.lstrip('/')}"
        try:
            async with self._client() as client:
                response = await client.get(url, params={"ref": branch})
                if response.status_code == 404:
                    return FetchResult(
                        success=False,
                        not_found=True,
                        status_code=404,
                        error=f"File not found: {path} in {repo}",
                    )
                if response.status_code == 403:
                    return FetchResult(
                        success=False,
                        status_code=403,
                        error="Access forbidden. Check token permissions and rate limits.",
                    )
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError:
            return FetchResult(
                success=False,
                error=f"Cannot connect to GitHub at {self.api_url}.",
            )
        except httpx.TimeoutException:
            return FetchResult(
                success=False,
                error=f"Request to GitHub timed out after {self.timeout}s.",
            )
        except httpx.HTTPStatusError as exc:
            return FetchResult(
                success=False,
                status_code=exc.response.status_code,
                error=f"GitHub returned HTTP {exc.response.status_code}: {exc.response.text[:500]}",
            )
        except Exception as exc:  # noqa: BLE001
            return FetchResult(
                success=False,
                error=f"Unexpected error fetching {path} from {repo}: {exc}",
            )

        result = self._decode_content(data, path)
        if result.success:
            result.branch = branch
        return result

    async def fetch_project_file(
        self, repo: str, path: str, branch: Optional[str] = None
    ) -> FetchResult:
        """Fetch a project document, falling back across branches.

        The requested *branch* (if any) is tried first, then each configured
        branch in order. Only a 404 moves on to the next branch; any other
        failure is returned immediately.
        """
        candidates = [branch] if branch else []
        candidates.extend(b for b in self.branches if b not in candidates)

        for candidate in candidates:
            result = await self.fetch_file(repo, path, candidate)
            if result.success or not result.not_found:
                return result

        return FetchResult(
            success=False,
            not_found=True,
            status_code=404,
            error=f"File not found in any branch (tried: {', '.join(candidates)})",
        )
