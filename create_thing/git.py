"""Thin async wrappers around the git commands the wizard needs.

Lookups that describe optional facts (config values, origins) return ``None``
when git fails, so callers can fall through to the next source.
"""

from __future__ import annotations

from pathlib import Path

from create_thing.utils import CommandError, sh

# Never block on a credential prompt while probing remotes.
_NON_INTERACTIVE = {"GIT_TERMINAL_PROMPT": "0", "GIT_SSH_COMMAND": "ssh -o BatchMode=yes"}


async def get_config(key: str, timeout: float = 30) -> str | None:
    """Return ``git config --get <key>``, or ``None`` if unset or git fails."""
    try:
        stdout, _ = await sh(["git", "config", "--get", key], timeout=timeout)
    except CommandError:
        return None
    return stdout.strip() or None


async def is_inside_work_tree(directory: str | Path, timeout: float = 30) -> bool:
    """Return ``True`` if *directory* is inside a git work tree."""
    try:
        stdout, _ = await sh(
            ["git", "rev-parse", "--is-inside-work-tree"], cwd=directory, timeout=timeout
        )
    except CommandError:
        return False
    return stdout.strip() == "true"


async def get_origin_url(directory: str | Path, timeout: float = 30) -> str | None:
    """Return the ``origin`` remote URL of the repository around *directory*."""
    try:
        stdout, _ = await sh(["git", "remote", "get-url", "origin"], cwd=directory, timeout=timeout)
    except CommandError:
        return None
    return stdout.strip() or None


async def remote_exists(url: str, timeout: float = 30) -> bool:
    """Return ``True`` if ``git ls-remote`` can see a ``HEAD`` at *url*."""
    try:
        stdout, _ = await sh(["git", "ls-remote", url], timeout=timeout, env=_NON_INTERACTIVE)
    except CommandError:
        return False
    return "HEAD" in stdout
