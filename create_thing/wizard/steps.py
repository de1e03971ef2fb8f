"""Interactive wizard steps.

Every step takes the current :class:`Settings` and returns a new one.  A step
may ask questions, call resolvers, or call other steps; it re-derives the
fields that depend on what it changed, so steps can be re-run in any order
from the review screen.
"""

from __future__ import annotations

import asyncio
import os

from create_thing import git
from create_thing.github import CredentialsError, login_with_device_flow, save_github_cli_credentials
from create_thing.models import (
    GithubAccount,
    PackageManager,
    ProjectType,
    Settings,
    description_problem,
    is_repo_url,
    usable_remote,
)
from create_thing.naming import (
    check_path,
    default_path_for_name,
    is_valid_package_name,
    normalize_string,
    recommend_new_package_name,
    resolve_from,
    validate_package_name,
)
from create_thing.resolver import (
    add_path_info,
    add_repo_url,
    build_git_repo_url,
    parse_repo_url,
    validate_git_repo,
)
from create_thing.utils import print_success, print_warning
from create_thing.wizard.context import WizardContext
from create_thing.wizard.prompts import MenuChoice

DEFAULT_DESCRIPTION_PROMPT = "Give me a short description of your package:"


# ---------------------------------------------------------------------------
# Validators
# ---------------------------------------------------------------------------


def validate_name_answer(value: str) -> bool | str:
    validation = validate_package_name(value)
    if validation.valid_for_new_packages:
        return True
    return "That's a nice name, but sadly it is invalid, because: " + " | ".join(validation.problems)


def validate_description_answer(value: str) -> bool | str:
    return description_problem(value) or True


def validate_repo_answer(value: str) -> bool | str:
    if value == "" or is_repo_url(value):
        return True
    return "Please enter a valid git repository URL"


# ---------------------------------------------------------------------------
# Package basics
# ---------------------------------------------------------------------------


async def select_type(settings: Settings, ctx: WizardContext) -> Settings:
    choice = await ctx.prompter.select(
        "What do you want to create today?",
        [
            MenuChoice("A library", ProjectType.LIBRARY, "A javascript library"),
            MenuChoice("An application", ProjectType.APPLICATION, "An interactive cli application"),
        ],
        default=settings.type or ProjectType.LIBRARY,
    )
    return settings.evolve(type=choice)


async def select_name(settings: Settings, ctx: WizardContext) -> Settings:
    """Ask for the package name and derive the path from it.

    An explicitly chosen path is kept; otherwise the package goes into a
    directory named after it.
    """
    recommended = recommend_new_package_name(settings)
    name = await ctx.prompter.text(
        "What is your package named?",
        default=settings.name or (recommended[0] if recommended else ""),
        validate=validate_name_answer,
    )

    new_path = default_path_for_name(name, settings.invoke_directory)
    path = (settings.path or new_path) if settings.explicit_path else new_path
    return await add_path_info(settings.evolve(name=name, path=path), ctx)


async def select_path(settings: Settings, ctx: WizardContext) -> Settings:
    default_path = default_path_for_name(settings.name, settings.invoke_directory) if settings.name else None

    def validate(value: str) -> bool | str:
        if not value:
            return "You must provide a path."
        if not check_path(resolve_from(settings.invoke_directory, value)):
            return "That path already contains a node project."
        return True

    answer = await ctx.prompter.text(
        "Where should your package be located?",
        default=settings.path or default_path or ".",
        validate=validate,
    )
    path = os.path.normpath(answer)

    name = settings.name
    if not name:
        candidate = normalize_string(os.path.basename(resolve_from(settings.invoke_directory, path)))
        name = candidate if is_valid_package_name(candidate) else None

    return await add_path_info(settings.evolve(path=path, name=name, explicit_path=True), ctx)


async def select_description(
    settings: Settings,
    ctx: WizardContext,
    message: str = DEFAULT_DESCRIPTION_PROMPT,
) -> Settings:
    answer = await ctx.prompter.text(
        message,
        default=settings.description or "",
        validate=validate_description_answer,
    )
    return settings.evolve(description=answer or None)


async def select_author_name(settings: Settings, ctx: WizardContext) -> Settings:
    answer = await ctx.prompter.text("What is your name?", default=settings.author_name or "")
    return settings.evolve(author_name=answer.strip() or None)


async def select_author_email(settings: Settings, ctx: WizardContext) -> Settings:
    answer = await ctx.prompter.text("What is your email?", default=settings.author_email or "")
    return settings.evolve(author_email=answer.strip() or None)


async def select_package_manager(settings: Settings, ctx: WizardContext) -> Settings:
    choice = await ctx.prompter.select(
        "What package manager do you use?",
        [
            MenuChoice("npm", PackageManager.NPM, "The package manager that comes with node"),
            MenuChoice("pnpm", PackageManager.PNPM, "Fast, disk space efficient package manager"),
            MenuChoice("Yarn", PackageManager.YARN, "The yarn package manager"),
        ],
        default=settings.package_manager,
    )
    return settings.evolve(package_manager=choice)


# ---------------------------------------------------------------------------
# Git remote
# ---------------------------------------------------------------------------


async def select_monorepo(settings: Settings, ctx: WizardContext) -> Settings:
    """Ask whether the package lives inside a monorepo.

    Switching it on adopts the enclosing repository's origin when no remote
    is set.  Switching it off drops a remote that was only borrowed from the
    enclosing repository and asks for a new one.
    """
    monorepo = await ctx.prompter.confirm("Is the package part of a monorepo?", default=bool(settings.monorepo))

    settings = await add_path_info(settings, ctx)
    path_info = settings.path_info
    if path_info is None:
        return settings.evolve(monorepo=monorepo)

    parsed_origin = usable_remote(
        await git.get_origin_url(path_info.first_existing_path_up, timeout=ctx.config.command_timeout)
    )
    borrowed = (
        path_info.in_git_tree
        and not path_info.is_git_root
        and settings.repo is not None
        and settings.repo == parsed_origin
    )

    if monorepo and parsed_origin and not settings.repo:
        repo = parsed_origin
    elif not monorepo and borrowed:
        repo = None
    else:
        repo = settings.repo

    updated = settings.evolve(monorepo=monorepo, repo=repo)
    if updated.repo is None and settings.repo is not None:
        return await select_origin(updated, ctx)
    return updated


async def select_github_account(settings: Settings, ctx: WizardContext) -> Settings:
    """Sign in to GitHub with the device flow.

    The signed-in account replaces any guessed one.  Unless the current
    remote is known to exist, the remote is looked up again afterwards.
    """
    sign_in = await ctx.prompter.confirm(
        "Please sign into GitHub so I can find or create a repository for this package.",
        default=True,
    )
    if not sign_in:
        return settings

    repo_check = (
        asyncio.ensure_future(validate_git_repo(settings.repo, timeout=ctx.config.command_timeout))
        if settings.repo
        else None
    )

    token = (await login_with_device_flow(ctx.device_flow, ctx.prompter)).access_token
    await ctx.github.get_user_repos(token)
    login = await ctx.github.get_login(token)
    print_success(f"Signed in as {login}")

    if ctx.config.store_credentials:
        try:
            save_github_cli_credentials(ctx.config.gh_hosts_path, token, login, settings.git_protocol)
        except (CredentialsError, OSError) as exc:
            print_warning(f"Could not store the GitHub token: {exc}")

    signed_in = settings.evolve(
        git_account=GithubAccount(username=login, confidence=1.0),
        github_token=token,
        github_username=login,
    )

    if repo_check is not None and await repo_check:
        return signed_in
    return await add_repo_url(signed_in, ctx)


async def select_origin(settings: Settings, ctx: WizardContext) -> Settings:
    """Ask for the git remote.

    A remote on the signed-in user's GitHub account that does not exist yet
    can be created right away.
    """
    default_url = ""
    if settings.git_account and settings.name:
        default_url = build_git_repo_url(
            settings.git_account.type, settings.git_account.username, settings.name
        )

    answer = await ctx.prompter.text(
        "Do you already have a git repository?",
        default=settings.repo or default_url,
        validate=validate_repo_answer,
    )
    repo = answer.strip() or None

    description = settings.description
    own_repo_name: str | None = None
    if repo and settings.github_token and settings.github_username:
        parsed = parse_repo_url(repo)
        if parsed and repo == build_git_repo_url("github", settings.github_username, parsed[1]):
            own_repo_name = parsed[1]

    if repo and own_repo_name and not await validate_git_repo(repo, timeout=ctx.config.command_timeout):
        create = await ctx.prompter.confirm(
            f"Do you want to create the repo on GitHub? (Signed in as {settings.github_username})",
            default=True,
        )
        if create:
            if not description:
                described = await select_description(settings, ctx, "You should add a short description.")
                description = described.description
            await ctx.github.create_repo(settings.github_token, own_repo_name, description or "")
            print_success(f"Created {repo}")

    branch = settings.branch
    if not branch and own_repo_name:
        branch = await ctx.github.get_default_branch(settings.github_token, own_repo_name)

    return settings.evolve(repo=repo, description=description, branch=branch)
