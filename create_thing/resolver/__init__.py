"""Inference steps that fill the settings record without asking the user."""

from create_thing.resolver.identity import add_author_info, guess_git_account
from create_thing.resolver.paths import PathResolutionError, add_path_info, probe_path
from create_thing.resolver.repository import (
    add_repo_url,
    build_git_repo_url,
    parse_repo_url,
    validate_git_repo,
)

__all__ = [
    "PathResolutionError",
    "add_author_info",
    "add_path_info",
    "add_repo_url",
    "build_git_repo_url",
    "guess_git_account",
    "parse_repo_url",
    "probe_path",
    "validate_git_repo",
]
