"""The review screen.

Shows what is going to be created and lets the user change any field before
confirming.  Creating is only possible once type, name and path are set and
the remote (if any) exists.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from create_thing.models import Settings
from create_thing.resolver import validate_git_repo
from create_thing.utils import await_with_timeout, console, print_error
from create_thing.wizard import steps
from create_thing.wizard.context import WizardContext
from create_thing.wizard.prompts import MenuChoice

Step = Callable[[Settings, WizardContext], Awaitable[Settings]]

REPO_MISSING_MESSAGE = "The repository does not exist, please create it before continuing."

EDIT_STEPS: dict[str, Step] = {
    "description": steps.select_description,
    "type": steps.select_type,
    "name": steps.select_name,
    "path": steps.select_path,
    "author_name": steps.select_author_name,
    "author_email": steps.select_author_email,
    "repo": steps.select_origin,
    "monorepo": steps.select_monorepo,
    "package_manager": steps.select_package_manager,
}


def missing_keys(settings: Settings, repo_exists: bool) -> list[str]:
    """Fields that block creation."""
    missing = settings.missing_for_creation()
    if settings.repo and not repo_exists:
        missing.append("repo")
    return missing


def build_review_choices(settings: Settings, missing: list[str]) -> list[MenuChoice]:
    type_value = settings.type.value if settings.type else None
    manager = settings.package_manager.value if settings.package_manager else None
    return [
        MenuChoice(
            "Yes, let's go!",
            "create",
            "Create the package with the current settings",
            disabled=f"You need to set {', '.join(missing)}" if missing else None,
        ),
        MenuChoice(
            f"Description  : {settings.description}" if settings.description else "Add a package description",
            "description",
            "Change the description",
        ),
        MenuChoice(f"Type         : {type_value}", "type", "Change what your package is"),
        MenuChoice(
            f"Name         : {settings.name}" if settings.name else "Set the package name",
            "name",
            "Change the package name",
        ),
        MenuChoice(
            f"Location     : {settings.path}" if settings.path else "Select the install location",
            "path",
            "Change the install location",
        ),
        MenuChoice(
            f"Author       : {settings.author_name}" if settings.author_name else "Add an author",
            "author_name",
            "Change the name of the author",
        ),
        MenuChoice(
            f"Author email : {settings.author_email}" if settings.author_email else "Add your email as author",
            "author_email",
            "Change the email of the author",
        ),
        MenuChoice(
            f"Git url      : {settings.repo}" if settings.repo else "Select a git repo",
            "repo",
            "Change the url of the origin git repository",
        ),
        MenuChoice(
            f"In monorepo  : {'yes' if settings.monorepo else 'no'}",
            "monorepo",
            "Set to yes if your project is not in the root of a git repo",
        ),
        MenuChoice(
            f"Lockfiles    : {manager}" if manager else "Select your package manager",
            "package_manager",
            "Select which package manager you are going to use",
        ),
    ]


def _print_overview(settings: Settings, repo_exists: bool) -> None:
    type_value = settings.type.value if settings.type else "?"
    console.print(
        f"I will create the [blue]{type_value}[/blue] package [blue]{settings.name}[/blue] "
        f"into [blue]{settings.path}[/blue]"
    )
    if settings.monorepo:
        suffix = f" ([blue]{settings.repo}[/blue])" if settings.repo else ""
        console.print(
            f"I won't create a git repository, because the package is inside a [blue]monorepo[/blue]{suffix}"
        )
    elif settings.repo:
        console.print(f"I will use the git repository at [blue]{settings.repo}[/blue] as the remote repository.")
        if not repo_exists:
            print_error(REPO_MISSING_MESSAGE)
    else:
        console.print(
            "I will create a local git repository for the package. "
            "If you want to start with a GitHub repo, configure the git url now."
        )


async def review_settings(settings: Settings, ctx: WizardContext) -> Settings:
    """Loop over the review menu until the user confirms creation.

    The remote check runs in the background; the menu only waits for it
    briefly and assumes the remote exists if it is slow.  Choosing "create"
    waits for the real answer.
    """
    while True:
        repo_check: asyncio.Future[bool] | None = None
        repo_exists = True
        if settings.repo:
            repo_check = asyncio.ensure_future(
                validate_git_repo(settings.repo, timeout=ctx.config.command_timeout)
            )
            repo_exists = await await_with_timeout(repo_check, ctx.config.repo_check_timeout, True)

        _print_overview(settings, repo_exists)
        missing = missing_keys(settings, repo_exists)

        selection = await ctx.prompter.select(
            "Are you ready to create?",
            build_review_choices(settings, missing),
            default=None if missing else "create",
        )

        if selection == "create":
            if repo_check is not None and not await repo_check:
                print_error(REPO_MISSING_MESSAGE)
                continue
            return settings

        step = EDIT_STEPS.get(selection)
        if step is None:
            raise ValueError(f"Unexpected selection: {selection!r}")
        settings = await step(settings, ctx)
