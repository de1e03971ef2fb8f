"""Async client for the public GitLab user search.

Only ``GET /api/v4/users?username=`` is needed: it tells whether a git user
name also exists on gitlab.com.
"""

from __future__ import annotations

import httpx


class GitlabResponseError(Exception):
    """Raised when GitLab answers with data missing required fields."""


class GitlabClient:
    """Async client for the GitLab REST API."""

    def __init__(self, api_url: str = "https://gitlab.com/api/v4", timeout: float = 15.0) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    async def find_username(self, username: str) -> str | None:
        """Return the GitLab username matching *username* exactly, if any.

        Rate limiting and network trouble count as "not found".

        Raises:
            GitlabResponseError: If a successful answer is not a list of users.
        """
        try:
            async with self._client() as client:
                response = await client.get("/users", params={"username": username})
        except httpx.TransportError:
            return None
        if response.status_code != 200:
            return None

        try:
            data = response.json()
        except ValueError as exc:
            raise GitlabResponseError("GitLab user search did not return JSON") from exc
        if not isinstance(data, list):
            raise GitlabResponseError("GitLab user search did not return a list")
        if not data:
            return None
        first = data[0]
        found = first.get("username") if isinstance(first, dict) else None
        if not found:
            raise GitlabResponseError("GitLab user search returned a user without username")
        return found
