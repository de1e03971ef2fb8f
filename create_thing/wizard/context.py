"""Everything a wizard step needs besides the settings record."""

from __future__ import annotations

from dataclasses import dataclass, field

from create_thing.config import WizardConfig
from create_thing.github import DeviceFlow, GithubCache, GithubClient
from create_thing.gitlab_client import GitlabClient
from create_thing.models import PathInfo
from create_thing.utils import print_note
from create_thing.wizard.prompts import Prompter, QuestionaryPrompter


@dataclass
class WizardContext:
    """Services and caches shared by all steps of one wizard run.

    Attributes:
        config: Global configuration.
        prompter: Where questions go.
        github: GitHub REST client holding the run's lookup cache.
        gitlab: GitLab REST client.
        device_flow: GitHub device-flow login.
        path_cache: Probed path facts keyed by ``(invoke_directory, path)``.
    """

    config: WizardConfig
    prompter: Prompter
    github: GithubClient
    gitlab: GitlabClient
    device_flow: DeviceFlow
    path_cache: dict[tuple[str, str], PathInfo] = field(default_factory=dict)

    @classmethod
    def create(cls, config: WizardConfig, prompter: Prompter | None = None) -> "WizardContext":
        return cls(
            config=config,
            prompter=prompter if prompter is not None else QuestionaryPrompter(),
            github=GithubClient(
                api_url=config.github_api_url,
                timeout=config.http_timeout,
                cache=GithubCache(),
            ),
            gitlab=GitlabClient(api_url=config.gitlab_api_url, timeout=config.http_timeout),
            device_flow=DeviceFlow(
                client_id=config.github_client_id,
                base_url=config.github_url,
                timeout=config.http_timeout,
            ),
        )

    def note(self, message: str) -> None:
        """Report a fallback decision when running verbosely."""
        if self.config.verbose:
            print_note(message)
