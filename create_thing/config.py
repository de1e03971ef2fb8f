"""create-thing configuration.

Typed configuration for the wizard.  Settings use Pydantic v2 models so they
are validated at construction time and can be built from environment
variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

# OAuth app used for the GitHub device flow.  Client ids are public.
DEFAULT_GITHUB_CLIENT_ID = "243bcc16248cdf06dce0"


def default_gh_hosts_path() -> Path:
    """Location of the GitHub CLI ``hosts.yml`` file.

    Honours ``GH_CONFIG_DIR`` the same way the ``gh`` CLI does.
    """
    config_dir = os.environ.get("GH_CONFIG_DIR")
    if config_dir:
        return Path(config_dir) / "hosts.yml"
    return Path.home() / ".config" / "gh" / "hosts.yml"


class WizardConfig(BaseModel):
    """Global create-thing configuration.

    Created once by the CLI entry point and passed to the wizard context.
    """

    github_api_url: str = Field(default="https://api.github.com")
    github_url: str = Field(default="https://github.com", description="Host of the OAuth endpoints")
    gitlab_api_url: str = Field(default="https://gitlab.com/api/v4")
    github_client_id: str = Field(default=DEFAULT_GITHUB_CLIENT_ID)
    gh_hosts_path: Path = Field(default_factory=default_gh_hosts_path)
    store_credentials: bool = Field(
        default=True, description="Write the token back to the GitHub CLI config after login"
    )

    http_timeout: float = Field(default=15.0, gt=0, description="Per-request HTTP timeout in seconds")
    command_timeout: float = Field(default=30.0, gt=0, description="Subprocess timeout in seconds")
    repo_check_timeout: float = Field(
        default=0.1,
        gt=0,
        description="How long the review screen waits for the repository check before assuming it exists",
    )

    generator: str | None = Field(
        default=None, description="Generator to call, as ``module:callable``"
    )
    dry_run: bool = Field(default=False)
    verbose: bool = Field(default=False)

    @classmethod
    def from_env(cls) -> "WizardConfig":
        """Build a ``WizardConfig`` from environment variables.

        Recognised variables (all optional):
            CREATE_THING_GITHUB_API_URL, CREATE_THING_GITHUB_URL,
            CREATE_THING_GITLAB_API_URL, CREATE_THING_GITHUB_CLIENT_ID,
            CREATE_THING_HTTP_TIMEOUT, CREATE_THING_COMMAND_TIMEOUT,
            CREATE_THING_REPO_CHECK_TIMEOUT, CREATE_THING_GENERATOR,
            CREATE_THING_STORE_CREDENTIALS, GH_CONFIG_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CREATE_THING_GITHUB_API_URL"):
            kwargs["github_api_url"] = os.environ["CREATE_THING_GITHUB_API_URL"]
        if os.environ.get("CREATE_THING_GITHUB_URL"):
            kwargs["github_url"] = os.environ["CREATE_THING_GITHUB_URL"]
        if os.environ.get("CREATE_THING_GITLAB_API_URL"):
            kwargs["gitlab_api_url"] = os.environ["CREATE_THING_GITLAB_API_URL"]
        if os.environ.get("CREATE_THING_GITHUB_CLIENT_ID"):
            kwargs["github_client_id"] = os.environ["CREATE_THING_GITHUB_CLIENT_ID"]
        if os.environ.get("CREATE_THING_HTTP_TIMEOUT"):
            kwargs["http_timeout"] = float(os.environ["CREATE_THING_HTTP_TIMEOUT"])
        if os.environ.get("CREATE_THING_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = float(os.environ["CREATE_THING_COMMAND_TIMEOUT"])
        if os.environ.get("CREATE_THING_REPO_CHECK_TIMEOUT"):
            kwargs["repo_check_timeout"] = float(os.environ["CREATE_THING_REPO_CHECK_TIMEOUT"])
        if os.environ.get("CREATE_THING_GENERATOR"):
            kwargs["generator"] = os.environ["CREATE_THING_GENERATOR"]
        if os.environ.get("CREATE_THING_STORE_CREDENTIALS"):
            kwargs["store_credentials"] = os.environ["CREATE_THING_STORE_CREDENTIALS"].lower() not in (
                "0",
                "false",
                "no",
            )

        return cls(**kwargs)
