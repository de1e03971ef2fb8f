"""Working out the package's git remote and default branch."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Literal

from create_thing import git
from create_thing.models import GithubAccount, Settings, usable_remote

if TYPE_CHECKING:
    from create_thing.wizard.context import WizardContext

# Matches "git@host:owner/name.git", "ssh://git@host/owner/name" and
# "https://host/owner/name.git".
_REMOTE_PATH = re.compile(r"[:/](?P<owner>[^/:]+)/(?P<name>[^/]+?)(?:\.git)?/?$")


def repo_name_for(package_name: str) -> str:
    """Repository name used for a package; scopes are dropped."""
    return package_name.split("/")[-1]


def build_git_repo_url(host_type: Literal["github", "gitlab"], username: str, name: str) -> str:
    """Return the SSH remote URL of ``<username>/<name>`` on github.com or gitlab.com."""
    return f"git@{host_type}.com:{username}/{repo_name_for(name)}.git"


def parse_repo_url(url: str) -> tuple[str, str] | None:
    """Split a remote URL into ``(owner, name)``."""
    match = _REMOTE_PATH.search(url)
    if not match:
        return None
    return match.group("owner"), match.group("name")


async def validate_git_repo(url: str, timeout: float = 30) -> bool:
    """Return ``True`` if the remote at *url* exists and has a ``HEAD``."""
    return await git.remote_exists(url, timeout=timeout)


async def _default_branch(settings: Settings, ctx: WizardContext) -> str | None:
    if settings.branch:
        return settings.branch
    if isinstance(settings.git_account, GithubAccount) and settings.github_token and settings.name:
        return await ctx.github.get_default_branch(settings.github_token, repo_name_for(settings.name))
    return None


async def add_repo_url(settings: Settings, ctx: WizardContext) -> Settings:
    """Fill in ``repo`` and ``branch``.

    The origin found at the target path wins.  Otherwise, when signed in to
    GitHub, an existing repository with a similar name is used.  Otherwise a
    URL is built from the guessed account and the package name and kept only
    if the remote really exists.  Packages inside a monorepo never get a
    remote of their own.
    """
    branch = await _default_branch(settings, ctx)

    path_info = settings.path_info
    origin = usable_remote(path_info.git_origin) if path_info else None
    if origin:
        return settings.evolve(repo=settings.repo or origin, branch=branch)

    if settings.monorepo:
        return settings.evolve(branch=branch)

    if settings.github_token and settings.github_username and settings.name:
        found = await ctx.github.find_repo(settings.github_token, repo_name_for(settings.name))
        if found:
            ctx.note(f"Found your GitHub repository {found.full_name}")
            return settings.evolve(repo=found.ssh_url, branch=branch or found.default_branch)

    if settings.repo or not settings.git_account or not settings.name:
        return settings.evolve(branch=branch)

    repo_url = build_git_repo_url(settings.git_account.type, settings.git_account.username, settings.name)
    if not await validate_git_repo(repo_url, timeout=ctx.config.command_timeout):
        ctx.note(f"{repo_url} does not exist")
        return settings.evolve(branch=branch)

    return settings.evolve(repo=repo_url, branch=branch)
