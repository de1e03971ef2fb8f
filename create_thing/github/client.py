"""Async client for the GitHub REST API.

Wraps the handful of endpoints the wizard needs (``/user``, ``/user/repos``,
``/search/users``) with response validation and per-token memoisation.

Typical usage::

    client = GithubClient(cache=GithubCache())
    info = await client.get_user_info(token)
    repo = await client.find_repo(token, "my-package")
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field

from create_thing.github.cache import GithubCache
from create_thing.github.search import fuzzy_match


class GithubError(Exception):
    """Raised when a GitHub request does not succeed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class GithubResponseError(GithubError):
    """Raised when GitHub answers with data missing required fields."""


class GithubUserInfo(BaseModel):
    """Profile of the authenticated user."""

    login: str
    name: str
    email: str


class GithubRepo(BaseModel):
    """A repository owned by the authenticated user."""

    name: str
    full_name: str
    owner: str = Field(..., description="Login of the owning account")
    visibility: str
    archived: bool
    description: Optional[str] = None
    default_branch: Optional[str] = None

    @property
    def ssh_url(self) -> str:
        return f"git@github.com:{self.full_name}.git"


def _json(response: httpx.Response, what: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise GithubResponseError(f"{what}: the answer is not JSON") from exc


def _parse_repo(entry: Any) -> GithubRepo | None:
    if not isinstance(entry, dict):
        return None
    owner = entry.get("owner")
    login = owner.get("login") if isinstance(owner, dict) else None
    if not (
        entry.get("name")
        and entry.get("full_name")
        and login
        and entry.get("visibility")
        and isinstance(entry.get("archived"), bool)
    ):
        return None
    return GithubRepo(
        name=entry["name"],
        full_name=entry["full_name"],
        owner=login,
        visibility=entry["visibility"],
        archived=entry["archived"],
        description=entry.get("description") or None,
        default_branch=entry.get("default_branch") or None,
    )


class GithubClient:
    """Async client for the GitHub REST API.

    Lookups for the authenticated user are cached per token, repository lists
    per user login, in the :class:`GithubCache` passed in.
    """

    def __init__(
        self,
        api_url: str = "https://api.github.com",
        timeout: float = 15.0,
        cache: GithubCache | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.cache = cache if cache is not None else GithubCache()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self, token: str | None = None) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` for the API, authenticated if *token* is given."""
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"token {token}"
        return httpx.AsyncClient(
            base_url=self.api_url,
            headers=headers,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    # ------------------------------------------------------------------
    # Authenticated user
    # ------------------------------------------------------------------

    async def _get_profile(self, token: str) -> dict[str, Any]:
        return await self.cache.memoize(
            self.cache.user_info, token, lambda: self._fetch_profile(token)
        )

    async def _fetch_profile(self, token: str) -> dict[str, Any]:
        async with self._client(token) as client:
            response = await client.get("/user")
        if response.status_code != 200:
            raise GithubError(
                f"Failed to get user info (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        data = _json(response, "Failed to get user info")
        if not isinstance(data, dict) or not data.get("login"):
            raise GithubResponseError("Failed to get user info: login missing")
        return data

    async def get_login(self, token: str) -> str:
        """Return the login of the user owning *token*.

        Shares the memoised ``/user`` request with :meth:`get_user_info`.
        """
        profile = await self._get_profile(token)
        return profile["login"]

    async def get_user_info(self, token: str) -> GithubUserInfo:
        """Return login, display name and email of the user owning *token*.

        Raises:
            GithubError: If the request fails.
            GithubResponseError: If the profile lacks a name or public email.
        """
        profile = await self._get_profile(token)
        if not profile.get("name") or not profile.get("email"):
            raise GithubResponseError("Failed to get user info: name or email missing")
        return GithubUserInfo(login=profile["login"], name=profile["name"], email=profile["email"])

    async def get_user_repos(self, token: str) -> list[GithubRepo]:
        """Return the repositories owned by the user, newest first.

        Only the first page (100 repositories) is fetched.

        Raises:
            GithubResponseError: If any entry lacks a required field.  One bad
                entry rejects the whole list.
        """
        login = await self.get_login(token)
        return await self.cache.memoize(
            self.cache.repos, login, lambda: self._fetch_user_repos(token)
        )

    async def _fetch_user_repos(self, token: str) -> list[GithubRepo]:
        async with self._client(token) as client:
            response = await client.get(
                "/user/repos",
                params={"sort": "created", "per_page": 100, "affiliation": "owner"},
            )
        if response.status_code != 200:
            raise GithubError(
                f"Failed to get user repos (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        data = _json(response, "Failed to get user repos")
        if not isinstance(data, list):
            raise GithubResponseError("Failed to get user repos: expected a list")

        repos = [_parse_repo(entry) for entry in data]
        if any(repo is None for repo in repos):
            raise GithubResponseError("Got invalid repos")
        return repos  # type: ignore[return-value]

    async def create_repo(self, token: str, name: str, description: str = "") -> None:
        """Create a public repository with an MIT license and an initial commit.

        The cached repository list is refreshed afterwards so the new
        repository shows up in later lookups.
        """
        login = await self.get_login(token)
        body = {
            "name": name,
            "description": description,
            "homepage": f"https://github.com/{login}/{name}",
            "private": False,
            "has_projects": False,
            "has_wiki": False,
            "auto_init": True,
            "license_template": "MIT",
            "has_downloads": False,
        }
        async with self._client(token) as client:
            response = await client.post("/user/repos", json=body)
        if response.status_code != 201:
            raise GithubError(
                f"Failed to create repo {name} (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        self.cache.evict_repos(login)
        await self.get_user_repos(token)

    async def find_repo(self, token: str, name: str) -> GithubRepo | None:
        """Find the user's repository whose name best matches *name*."""
        repos = await self.get_user_repos(token)
        match = fuzzy_match(name, [repo.name for repo in repos])
        if match is None:
            return None
        return next(repo for repo in repos if repo.name == match)

    async def get_default_branch(self, token: str, name: str) -> str | None:
        """Return the default branch of the user's repository called *name*."""
        repos = await self.get_user_repos(token)
        for repo in repos:
            if repo.name == name:
                return repo.default_branch
        return None

    # ------------------------------------------------------------------
    # Public lookups
    # ------------------------------------------------------------------

    async def search_users(self, term: str) -> str | None:
        """Return the login of the best user search hit for *term*.

        Rate limiting and network trouble count as "no hit".

        Raises:
            GithubResponseError: If a successful answer has no ``items`` list.
        """
        try:
            async with self._client() as client:
                response = await client.get("/search/users", params={"q": term})
        except httpx.TransportError:
            return None
        if response.status_code != 200:
            return None

        data = _json(response, "GitHub user search failed")
        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise GithubResponseError("GitHub user search returned no item list")
        if not items:
            return None
        first = items[0]
        login = first.get("login") if isinstance(first, dict) else None
        if not login:
            raise GithubResponseError("GitHub user search returned an item without login")
        return login
