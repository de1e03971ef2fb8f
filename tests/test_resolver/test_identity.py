"""Unit tests for identity inference (create_thing.resolver.identity).

Tests cover:
- add_author_info source priority and fallbacks
- guess_git_account search order, confidence and token handling
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from conftest import make_http_client, make_response
from create_thing.github import GithubError, GithubUserInfo, save_github_cli_credentials
from create_thing.models import GithubAccount, GitlabAccount, GitProtocol, Settings
from create_thing.resolver import add_author_info, guess_git_account

PROFILE = GithubUserInfo(login="octocat", name="Mona Lisa", email="mona@github.example")


def git_config(values: dict[str, str]):
    async def get_config(key: str, timeout: float = 30) -> str | None:
        return values.get(key)

    return get_config


# ---------------------------------------------------------------------------
# add_author_info
# ---------------------------------------------------------------------------


class TestAddAuthorInfo:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_git_config_without_github_login(self, fake_git, settings: Settings, ctx):
        fake_git.get_config.side_effect = git_config({"user.name": "Mona Git", "user.email": "mona@git.example"})

        with patch("create_thing.resolver.identity.get_os_username", return_value="mona"):
            resolved = await add_author_info(settings, ctx)

        assert resolved.author_name == "Mona Git"
        assert resolved.author_email == "mona@git.example"
        assert resolved.git_username == "Mona Git"
        assert resolved.git_email == "mona@git.example"
        assert resolved.os_username == "mona"
        assert resolved.github_username is None
        assert resolved.github_token is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_os_user_as_last_resort(self, fake_git, settings: Settings, ctx):
        with patch("create_thing.resolver.identity.get_os_username", return_value="mona"):
            resolved = await add_author_info(settings, ctx)

        assert resolved.author_name == "mona"
        assert resolved.author_email is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_github_profile_wins(self, fake_git, settings: Settings, ctx, gh_hosts_path: Path):
        fake_git.get_config.side_effect = git_config({"user.name": "Mona Git", "user.email": "mona@git.example"})
        save_github_cli_credentials(gh_hosts_path, "gho_stored", "octocat", GitProtocol.HTTPS)
        ctx.github.get_login = AsyncMock(return_value="octocat")
        ctx.github.get_user_info = AsyncMock(return_value=PROFILE)

        resolved = await add_author_info(settings, ctx)

        ctx.github.get_user_info.assert_awaited_once_with("gho_stored")
        assert resolved.author_name == "Mona Lisa"
        assert resolved.author_email == "mona@github.example"
        assert resolved.github_username == "octocat"
        assert resolved.github_token == "gho_stored"
        assert resolved.git_protocol == GitProtocol.HTTPS
        assert resolved.git_username == "Mona Git"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cli_user_when_profile_fails(self, fake_git, settings: Settings, ctx, gh_hosts_path: Path):
        fake_git.get_config.side_effect = git_config({"user.name": "Mona Git", "user.email": "mona@git.example"})
        save_github_cli_credentials(gh_hosts_path, "gho_stored", "octocat")
        ctx.github.get_login = AsyncMock(side_effect=GithubError("Failed to get user info (HTTP 401)", 401))

        resolved = await add_author_info(settings, ctx)

        assert resolved.author_name == "octocat"
        assert resolved.author_email == "mona@git.example"
        assert resolved.github_username == "octocat"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_profile_network_error_is_a_fallback(self, fake_git, settings: Settings, ctx, gh_hosts_path: Path):
        save_github_cli_credentials(gh_hosts_path, "gho_stored")
        ctx.github.get_login = AsyncMock(side_effect=httpx.ConnectError("offline"))

        resolved = await add_author_info(settings, ctx)

        assert resolved.github_token == "gho_stored"
        assert resolved.github_username is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_hidden_email_keeps_login(self, fake_git, settings: Settings, ctx, gh_hosts_path: Path):
        fake_git.get_config.side_effect = git_config({"user.name": "Mona Git", "user.email": "mona@git.example"})
        save_github_cli_credentials(gh_hosts_path, "gho_stored", "mona-cli")
        mock_client = make_http_client(get=make_response(200, {"login": "octocat", "name": "Mona", "email": None}))

        with patch("httpx.AsyncClient", return_value=mock_client):
            resolved = await add_author_info(settings, ctx)

        assert resolved.github_username == "octocat"
        assert resolved.github_token == "gho_stored"
        assert resolved.author_name == "mona-cli"
        assert resolved.author_email == "mona@git.example"
        assert mock_client.get.await_count == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_explicit_values_kept(self, fake_git, settings: Settings, ctx):
        fake_git.get_config.side_effect = git_config({"user.name": "Mona Git", "user.email": "mona@git.example"})
        draft = settings.evolve(author_name="Someone Else", author_email="else@example.com")

        resolved = await add_author_info(draft, ctx)

        assert resolved.author_name == "Someone Else"
        assert resolved.author_email == "else@example.com"


# ---------------------------------------------------------------------------
# guess_git_account
# ---------------------------------------------------------------------------


class TestGuessGitAccount:
    @pytest.fixture(autouse=True)
    def _no_network(self, ctx):
        ctx.github.search_users = AsyncMock(return_value=None)
        ctx.gitlab.find_username = AsyncMock(return_value=None)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_known_login_with_token(self, settings: Settings, ctx):
        draft = settings.evolve(github_username="octocat", github_token="gho_stored")

        resolved = await guess_git_account(draft, ctx)

        assert resolved.git_account == GithubAccount(username="octocat", confidence=1.0)
        ctx.github.search_users.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_known_login_without_token(self, settings: Settings, ctx):
        resolved = await guess_git_account(settings.evolve(github_username="octocat"), ctx)
        assert resolved.git_account.confidence == 0.5

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_email_search(self, settings: Settings, ctx):
        ctx.github.search_users = AsyncMock(return_value="octocat")
        draft = settings.evolve(git_email="mona@git.example", git_username="Mona Git")

        resolved = await guess_git_account(draft, ctx)

        ctx.github.search_users.assert_awaited_once_with("mona@git.example")
        assert resolved.git_account == GithubAccount(username="octocat", confidence=1.0)
        assert resolved.github_username == "octocat"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_username_search_has_half_confidence(self, settings: Settings, ctx):
        ctx.github.search_users = AsyncMock(side_effect=[None, "octocat"])
        draft = settings.evolve(git_email="nobody@example.com", git_username="octocat")

        resolved = await guess_git_account(draft, ctx)

        assert resolved.git_account == GithubAccount(username="octocat", confidence=0.5)
        assert [call.args[0] for call in ctx.github.search_users.await_args_list] == [
            "nobody@example.com",
            "octocat",
        ]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_gitlab_fallback_clears_github(self, settings: Settings, ctx):
        ctx.gitlab.find_username = AsyncMock(return_value="mona")
        draft = settings.evolve(git_username="mona", github_token="gho_other")

        resolved = await guess_git_account(draft, ctx)

        assert resolved.git_account == GitlabAccount(username="mona", confidence=0.5)
        assert resolved.github_token is None
        assert resolved.github_username is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_nothing_found(self, settings: Settings, ctx):
        draft = settings.evolve(git_username="mona")
        assert await guess_git_account(draft, ctx) == draft

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_signals_no_requests(self, settings: Settings, ctx):
        assert await guess_git_account(settings, ctx) == settings
        ctx.github.search_users.assert_not_awaited()
        ctx.gitlab.find_username.assert_not_awaited()
