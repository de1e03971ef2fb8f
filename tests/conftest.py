"""Shared pytest fixtures for the create-thing test suite.

Provides reusable fixtures for:
- A wizard configuration pointing at temporary credential files
- A scripted prompter that answers wizard questions from a list
- A wizard context and a fresh settings record
- Patched git probes and mock subprocess helpers
- Fake httpx responses and clients
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from create_thing.config import WizardConfig
from create_thing.models import ProjectType, Settings
from create_thing.wizard.context import WizardContext
from create_thing.wizard.prompts import MenuChoice


# ---------------------------------------------------------------------------
# Scripted prompter
# ---------------------------------------------------------------------------

# Answer placeholder meaning "accept the prompt's default".
DEFAULT = object()


class ScriptedPrompter:
    """Prompter that replays canned answers and records every question.

    Text answers are run through the prompt's validator, select answers must
    name an enabled choice, so a test fails the same way a user would be
    stopped.  An exception instance in the answer list is raised instead.
    """

    def __init__(self, *answers: Any) -> None:
        self.answers = list(answers)
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def queue(self, *answers: Any) -> None:
        self.answers.extend(answers)

    def _next(self, kind: str, message: str, **details: Any) -> Any:
        self.calls.append((kind, message, details))
        if not self.answers:
            raise AssertionError(f"Unexpected {kind} prompt: {message!r}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    async def text(self, message: str, default: str = "", validate=None) -> str:
        answer = self._next("text", message, default=default)
        if answer is DEFAULT:
            answer = default
        if validate is not None:
            verdict = validate(answer)
            if verdict is not True:
                raise AssertionError(f"Answer {answer!r} to {message!r} was rejected: {verdict}")
        return answer

    async def select(self, message: str, choices: Sequence[MenuChoice], default: Any = None) -> Any:
        answer = self._next("select", message, choices=list(choices), default=default)
        if answer is DEFAULT:
            answer = default
        chosen = next((choice for choice in choices if choice.value == answer), None)
        if chosen is None:
            raise AssertionError(f"{answer!r} is not a choice of {message!r}")
        if chosen.disabled:
            raise AssertionError(f"{answer!r} is disabled: {chosen.disabled}")
        return answer

    async def confirm(self, message: str, default: bool = True) -> bool:
        answer = self._next("confirm", message, default=default)
        return default if answer is DEFAULT else answer

    async def acknowledge(self, message: str) -> None:
        self.calls.append(("acknowledge", message, {}))

    def messages(self, kind: str | None = None) -> list[str]:
        return [message for call_kind, message, _ in self.calls if kind is None or call_kind == kind]


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


# ---------------------------------------------------------------------------
# Configuration, context and settings
# ---------------------------------------------------------------------------

@pytest.fixture
def gh_hosts_path(tmp_path: Path) -> Path:
    """Location of a temporary GitHub CLI ``hosts.yml`` (not created)."""
    return tmp_path / "gh-config" / "hosts.yml"


@pytest.fixture
def wizard_config(gh_hosts_path: Path) -> WizardConfig:
    return WizardConfig(gh_hosts_path=gh_hosts_path, command_timeout=5)


@pytest.fixture
def ctx(wizard_config: WizardConfig, prompter: ScriptedPrompter) -> WizardContext:
    """Wizard context with real clients; tests replace methods as needed."""
    return WizardContext.create(wizard_config, prompter)


@pytest.fixture
def invoke_dir(tmp_path: Path) -> Path:
    """Empty directory the wizard is started from."""
    directory = tmp_path / "workspace"
    directory.mkdir()
    return directory


@pytest.fixture
def settings(invoke_dir: Path) -> Settings:
    return Settings(type=ProjectType.LIBRARY, invoke_directory=str(invoke_dir))


# ---------------------------------------------------------------------------
# Git
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_git():
    """Patch every git probe with an ``AsyncMock``.

    Defaults describe a machine without git config, outside any work tree,
    with no reachable remotes.  Tests adjust ``return_value`` or
    ``side_effect`` on the returned namespace.
    """
    mocks = SimpleNamespace(
        get_config=AsyncMock(return_value=None),
        is_inside_work_tree=AsyncMock(return_value=False),
        get_origin_url=AsyncMock(return_value=None),
        remote_exists=AsyncMock(return_value=False),
    )
    with patch("create_thing.git.get_config", mocks.get_config), \
         patch("create_thing.git.is_inside_work_tree", mocks.is_inside_work_tree), \
         patch("create_thing.git.get_origin_url", mocks.get_origin_url), \
         patch("create_thing.git.remote_exists", mocks.remote_exists):
        yield mocks


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Temporary git repository with an origin remote configured.

    Creates a real git repo so the git probes have something to look at.
    """
    repo_dir = tmp_path / "test-repo"
    repo_dir.mkdir()
    subprocess.run(["git", "init"], cwd=repo_dir, check=True, capture_output=True)
    subprocess.run(
        ["git", "remote", "add", "origin", "git@github.com:octocat/test-repo.git"],
        cwd=repo_dir, check=True, capture_output=True,
    )
    yield repo_dir


@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

def make_response(status_code: int = 200, json_data: Any = None) -> MagicMock:
    """Build a fake ``httpx.Response``."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    return response


def make_http_client(get=None, post=None) -> AsyncMock:
    """Build a fake ``httpx.AsyncClient`` usable as an async context manager.

    *get* and *post* are a response, a list of responses (returned in order)
    or an exception.
    """
    mock_client = AsyncMock()
    for name, value in (("get", get), ("post", post)):
        if isinstance(value, list):
            setattr(mock_client, name, AsyncMock(side_effect=value))
        elif isinstance(value, BaseException):
            setattr(mock_client, name, AsyncMock(side_effect=value))
        else:
            setattr(mock_client, name, AsyncMock(return_value=value))
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


def repo_payload(name: str, owner: str = "octocat", default_branch: str = "main") -> dict[str, Any]:
    """A ``/user/repos`` entry with every field the client requires."""
    return {
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner},
        "visibility": "public",
        "archived": False,
        "description": None,
        "default_branch": default_branch,
    }
