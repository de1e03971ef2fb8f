"""Who is creating the package.

:func:`add_author_info` fills the author fields from the best source
available; :func:`guess_git_account` figures out which GitHub or GitLab
account the user most likely has.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx

from create_thing import git
from create_thing.environment import get_os_username
from create_thing.github import GithubError, GithubUserInfo, load_github_cli_credentials
from create_thing.models import GitProtocol, GithubAccount, GitlabAccount, Settings

if TYPE_CHECKING:
    from create_thing.wizard.context import WizardContext

# Email search hits are as good as a login, username hits are guesses.
EMAIL_MATCH_CONFIDENCE = 1.0
USERNAME_MATCH_CONFIDENCE = 0.5


def _first(*values: str | None) -> str | None:
    return next((value for value in values if value), None)


async def add_author_info(settings: Settings, ctx: WizardContext) -> Settings:
    """Fill in author and identity fields.

    Name: explicit value, GitHub profile, GitHub CLI user, git config, OS
    user.  Email: explicit value, GitHub profile, git config.  The GitHub
    profile is only looked up with an already stored token.
    """
    timeout = ctx.config.command_timeout
    git_username, git_email = await asyncio.gather(
        git.get_config("user.name", timeout=timeout),
        git.get_config("user.email", timeout=timeout),
    )
    os_username = get_os_username()

    credentials = load_github_cli_credentials(ctx.config.gh_hosts_path)
    token = credentials.access_token if credentials else None
    cli_user = credentials.user if credentials else None

    login: str | None = None
    profile: GithubUserInfo | None = None
    if token:
        try:
            login = await ctx.github.get_login(token)
            profile = await ctx.github.get_user_info(token)
        except (GithubError, httpx.HTTPError) as exc:
            ctx.note(f"Could not read the GitHub profile, falling back to git config ({exc})")

    return settings.evolve(
        author_name=_first(
            settings.author_name,
            profile.name if profile else None,
            cli_user,
            git_username,
            os_username,
        ),
        author_email=_first(settings.author_email, profile.email if profile else None, git_email),
        git_username=git_username,
        git_email=git_email,
        os_username=os_username,
        github_username=_first(login, cli_user),
        github_token=token,
        git_protocol=(credentials.protocol if credentials else None) or GitProtocol.SSH,
    )


def _with_github_account(settings: Settings, login: str, confidence: float) -> Settings:
    return settings.evolve(
        git_account=GithubAccount(username=login, confidence=confidence),
        github_username=login,
        github_token=settings.github_token if login == settings.github_username else None,
    )


async def guess_git_account(settings: Settings, ctx: WizardContext) -> Settings:
    """Guess the user's git hosting account.

    Tries, in order: the known GitHub login, a GitHub user search by email,
    a GitHub user search by git user name and a GitLab user lookup by git
    user name.  The first hit wins; without any hit the settings are
    returned unchanged.
    """
    if settings.github_username:
        return settings.evolve(
            git_account=GithubAccount(
                username=settings.github_username,
                confidence=1.0 if settings.github_token else USERNAME_MATCH_CONFIDENCE,
            )
        )

    if settings.git_email:
        login = await ctx.github.search_users(settings.git_email)
        if login:
            return _with_github_account(settings, login, EMAIL_MATCH_CONFIDENCE)

    if settings.git_username:
        login = await ctx.github.search_users(settings.git_username)
        if login:
            return _with_github_account(settings, login, USERNAME_MATCH_CONFIDENCE)

        gitlab_username = await ctx.gitlab.find_username(settings.git_username)
        if gitlab_username:
            return settings.evolve(
                git_account=GitlabAccount(username=gitlab_username, confidence=USERNAME_MATCH_CONFIDENCE),
                github_username=None,
                github_token=None,
            )

    ctx.note("Could not find a GitHub or GitLab account for you")
    return settings
