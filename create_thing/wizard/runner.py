"""Top-level wizard run: from an empty record to confirmed settings."""

from __future__ import annotations

import asyncio
import os

from create_thing.environment import determine_package_manager
from create_thing.models import ProjectType, Settings
from create_thing.resolver import PathResolutionError, add_author_info, add_repo_url, guess_git_account
from create_thing.wizard import steps
from create_thing.wizard.context import WizardContext
from create_thing.wizard.review import review_settings


def initial_settings(invoke_directory: str | None = None) -> Settings:
    return Settings(
        type=ProjectType.LIBRARY,
        invoke_directory=os.path.normpath(os.path.abspath(invoke_directory or os.getcwd())),
    )


async def _identity(settings: Settings, ctx: WizardContext) -> Settings:
    return await guess_git_account(await add_author_info(settings, ctx), ctx)


async def collect_settings(ctx: WizardContext, invoke_directory: str | None = None) -> Settings:
    """Run the whole wizard and return the settings the user confirmed.

    Identity inference and package manager detection run while the user
    answers the first question.

    Raises:
        WizardCancelled: If the user cancels any prompt.
        PathResolutionError: If nothing is known about the chosen path.
    """
    base = initial_settings(invoke_directory)

    identified, typed, package_manager = await asyncio.gather(
        _identity(base, ctx),
        steps.select_type(base, ctx),
        determine_package_manager(),
    )
    settings = identified.evolve(type=typed.type, package_manager=package_manager)

    settings = await steps.select_name(settings, ctx)
    if settings.path_info is None:
        raise PathResolutionError(f"Could not inspect the package path {settings.path!r}")

    settings = await steps.select_description(settings, ctx)

    if not settings.github_token:
        settings = await steps.select_github_account(settings, ctx)

    settings = await add_repo_url(settings, ctx)

    if not settings.repo:
        settings = await steps.select_origin(settings, ctx)

    return await review_settings(settings, ctx)
