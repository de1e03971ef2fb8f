"""Pydantic v2 models for the create-thing wizard.

Defines the settings record threaded through every wizard step together with
the facts gathered about candidate paths and the guessed git hosting account.
All models are frozen: steps never mutate a record, they derive a new one with
:meth:`Settings.evolve`.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from create_thing.naming import validate_package_name

MIN_DESCRIPTION_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 500

REPO_URL_PREFIXES = ("http", "git@", "ssh")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ProjectType(str, Enum):
    """What kind of package gets generated."""
    LIBRARY = "library"
    APPLICATION = "application"


class PackageManager(str, Enum):
    """Supported JavaScript package managers."""
    PNPM = "pnpm"
    YARN = "yarn"
    NPM = "npm"


class GitProtocol(str, Enum):
    """Protocol preferred for git remotes."""
    HTTPS = "https"
    SSH = "ssh"


# ---------------------------------------------------------------------------
# Validation helpers shared with the prompts
# ---------------------------------------------------------------------------

def is_repo_url(value: str) -> bool:
    """Return ``True`` if *value* looks like a git remote URL."""
    return value.startswith(REPO_URL_PREFIXES)


def usable_remote(value: str | None) -> str | None:
    """Return *value* if it can be used as ``Settings.repo``, else ``None``.

    Origins pointing at local paths or ``file://`` URLs are not kept.
    """
    return value if value and is_repo_url(value) else None


def description_problem(description: str) -> str | None:
    """Explain why *description* is not acceptable, or ``None`` if it is."""
    if len(description) == 0:
        return None
    if len(description) < MIN_DESCRIPTION_LENGTH:
        return "That's too short."
    if len(description) > MAX_DESCRIPTION_LENGTH:
        return "Don't you think that's just a little bit excessive? Please write a shorter description."
    return None


# ---------------------------------------------------------------------------
# Path facts
# ---------------------------------------------------------------------------

class PathInfo(BaseModel):
    """Filesystem and git facts about one candidate package path."""

    model_config = ConfigDict(frozen=True)

    path_exists: bool = Field(..., description="Whether the target path already exists")
    is_git_root: bool = Field(..., description="Whether the target path is the root of a git repository")
    in_git_tree: bool = Field(..., description="Whether the target path is inside a git work tree")
    first_existing_path_up: str = Field(
        ..., description="The first existing directory when walking up from the target path"
    )
    absolute_path: str = Field(..., description="The target path resolved against the invoke directory")
    git_origin: Optional[str] = Field(default=None, description="Origin of the enclosing repository")


# ---------------------------------------------------------------------------
# Git hosting accounts
# ---------------------------------------------------------------------------

class GithubAccount(BaseModel):
    """A guessed or authenticated github.com account."""

    model_config = ConfigDict(frozen=True)

    type: Literal["github"] = "github"
    username: str
    confidence: float = Field(..., ge=0, le=1)

    @property
    def host(self) -> str:
        return "github.com"


class GitlabAccount(BaseModel):
    """A guessed gitlab.com account."""

    model_config = ConfigDict(frozen=True)

    type: Literal["gitlab"] = "gitlab"
    username: str
    confidence: float = Field(..., ge=0, le=1)

    @property
    def host(self) -> str:
        return "gitlab.com"


GitAccount = Annotated[Union[GithubAccount, GitlabAccount], Field(discriminator="type")]


# ---------------------------------------------------------------------------
# Settings record
# ---------------------------------------------------------------------------

class Settings(BaseModel):
    """Everything the wizard knows about the package to create."""

    model_config = ConfigDict(frozen=True)

    # Real settings for creation
    path: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[ProjectType] = None
    monorepo: Optional[bool] = None
    repo: Optional[str] = None
    branch: Optional[str] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    package_manager: Optional[PackageManager] = None

    # Only used by the wizard
    invoke_directory: str = Field(..., description="The directory in which the wizard was invoked")
    path_infos: dict[str, PathInfo] = Field(default_factory=dict)
    explicit_path: bool = Field(default=False, description="True once the user picked the path")
    git_username: Optional[str] = None
    git_email: Optional[str] = None
    os_username: Optional[str] = None
    git_account: Optional[GitAccount] = None
    github_username: Optional[str] = None
    github_token: Optional[str] = None
    git_protocol: GitProtocol = GitProtocol.SSH

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            validation = validate_package_name(value)
            if not validation.valid_for_new_packages:
                raise ValueError(f"invalid package name {value!r}: {' | '.join(validation.problems)}")
        return value

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            problem = description_problem(value)
            if problem:
                raise ValueError(problem)
        return value

    @field_validator("repo")
    @classmethod
    def _check_repo(cls, value: Optional[str]) -> Optional[str]:
        if value and not is_repo_url(value):
            raise ValueError(f"not a git repository URL: {value!r}")
        return value

    def evolve(self, **changes: Any) -> "Settings":
        """Return a validated copy of this record with *changes* applied."""
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise TypeError(f"Unknown settings fields: {', '.join(sorted(unknown))}")
        if "invoke_directory" in changes and changes["invoke_directory"] != self.invoke_directory:
            raise ValueError("invoke_directory cannot change")
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(changes)
        return type(self).model_validate(data)

    @property
    def path_info(self) -> Optional[PathInfo]:
        """Facts about the current path, if they have been gathered."""
        if not self.path:
            return None
        return self.path_infos.get(self.path)

    def missing_for_creation(self) -> list[str]:
        """Required fields that are still unset."""
        return [key for key in ("type", "name", "path") if not getattr(self, key)]


# ---------------------------------------------------------------------------
# Generator hand-off
# ---------------------------------------------------------------------------

class GeneratorOptions(BaseModel):
    """Final configuration consumed by the project generator."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    path: str = Field(default=".")
    name: str
    description: Optional[str] = None
    type: ProjectType = ProjectType.LIBRARY
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    package_manager: Optional[PackageManager] = None
    disable_git_commits: bool = False
    disable_git_repo: bool = False
    git_origin: Optional[str] = None
    git_branch: Optional[str] = None
    logger: Any = Field(default=None, exclude=True, description="Progress callbacks for the generator")
