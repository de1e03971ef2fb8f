"""Access to the GitHub CLI credential store.

``gh`` keeps its per-host login in ``hosts.yml``::

    github.com:
        user: octocat
        oauth_token: gho_xxx
        git_protocol: ssh

Reading it lets the wizard reuse an existing login instead of running the
device flow again.  After a device-flow login the token is written back.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel

from create_thing.models import GitProtocol

GITHUB_HOST = "github.com"


class CredentialsError(Exception):
    """Raised when the credential file exists but cannot be updated safely."""


class GithubCliCredentials(BaseModel):
    """Login stored by the GitHub CLI for github.com."""

    access_token: Optional[str] = None
    user: Optional[str] = None
    protocol: Optional[GitProtocol] = None


def _read_hosts(path: Path) -> Any:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def load_github_cli_credentials(path: Path) -> GithubCliCredentials | None:
    """Return the stored github.com login, or ``None`` if there is none.

    A missing, unreadable or oddly shaped file counts as "not logged in".
    """
    if not path.is_file():
        return None
    try:
        data = _read_hosts(path)
    except (OSError, yaml.YAMLError):
        return None
    if not isinstance(data, dict) or not isinstance(data.get(GITHUB_HOST), dict):
        return None

    entry = data[GITHUB_HOST]
    protocol = entry.get("git_protocol")
    return GithubCliCredentials(
        access_token=entry.get("oauth_token") or None,
        user=entry.get("user") or None,
        protocol=protocol if protocol in (GitProtocol.HTTPS.value, GitProtocol.SSH.value) else None,
    )


def save_github_cli_credentials(
    path: Path,
    access_token: str,
    user: str | None = None,
    protocol: GitProtocol | None = None,
) -> None:
    """Store *access_token* for github.com, keeping everything else in the file.

    Raises:
        CredentialsError: If the existing file is not a mapping, or its
            github.com entry is not a mapping.
    """
    data: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = _read_hosts(path)
        except yaml.YAMLError as exc:
            raise CredentialsError(f"The GitHub CLI config at {path} is not valid YAML: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise CredentialsError(f"The GitHub CLI config at {path} is not a mapping")
        data = loaded or {}
        if GITHUB_HOST in data and not isinstance(data[GITHUB_HOST], dict):
            raise CredentialsError(f"The {GITHUB_HOST} entry in {path} needs to be a mapping")

    entry = dict(data.get(GITHUB_HOST) or {})
    entry["oauth_token"] = access_token
    if user:
        entry["user"] = user
    if protocol:
        entry["git_protocol"] = GitProtocol(protocol).value
    data[GITHUB_HOST] = entry

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
