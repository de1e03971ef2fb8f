"""Memoisation for GitHub lookups.

The cache stores the *task* of a lookup rather than its result, so concurrent
callers asking for the same key share one in-flight request.  A lookup that
fails is evicted again so the next caller retries.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")


class GithubCache:
    """Process-local store for GitHub user and repository lookups.

    ``user_info`` holds the raw ``/user`` profile keyed by access token, ``repos`` by the account login.
    Construct one per wizard run (or per test) and hand it to the client.
    """

    def __init__(self) -> None:
        self.user_info: dict[str, asyncio.Future[Any]] = {}
        self.repos: dict[str, asyncio.Future[Any]] = {}

    async def memoize(
        self,
        store: dict[str, asyncio.Future[Any]],
        key: str,
        factory: Callable[[], Awaitable[T]],
    ) -> T:
        """Return the cached lookup for *key*, starting it with *factory* if needed."""
        future = store.get(key)
        if future is None:
            future = asyncio.ensure_future(factory())
            store[key] = future
        try:
            return await asyncio.shield(future)
        except Exception:
            if store.get(key) is future:
                del store[key]
            raise

    def evict_repos(self, login: str) -> None:
        self.repos.pop(login, None)

    def evict_user_info(self, token: str) -> None:
        self.user_info.pop(token, None)

    def clear(self) -> None:
        self.user_info.clear()
        self.repos.clear()
