"""GitHub integration: REST client, device-flow login and CLI credentials.

Quick usage::

    from create_thing.github import GithubCache, GithubClient

    client = GithubClient(cache=GithubCache())
    repo = await client.find_repo(token, "my-package")
"""

from create_thing.github.cache import GithubCache
from create_thing.github.client import (
    GithubClient,
    GithubError,
    GithubRepo,
    GithubResponseError,
    GithubUserInfo,
)
from create_thing.github.credentials import (
    CredentialsError,
    GithubCliCredentials,
    load_github_cli_credentials,
    save_github_cli_credentials,
)
from create_thing.github.device_flow import (
    AccessToken,
    DeviceCode,
    DeviceFlow,
    DeviceFlowError,
    login_with_device_flow,
)
from create_thing.github.search import fuzzy_match

__all__ = [
    "AccessToken",
    "CredentialsError",
    "DeviceCode",
    "DeviceFlow",
    "DeviceFlowError",
    "GithubCache",
    "GithubCliCredentials",
    "GithubClient",
    "GithubError",
    "GithubRepo",
    "GithubResponseError",
    "GithubUserInfo",
    "fuzzy_match",
    "load_github_cli_credentials",
    "login_with_device_flow",
    "save_github_cli_credentials",
]
