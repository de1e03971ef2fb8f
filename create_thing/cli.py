"""Command line entry point.

Usage::

    create-thing
    create-thing --generator my_generator:create --verbose
    python -m create_thing --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import httpx

from create_thing.config import WizardConfig
from create_thing.generator import GeneratorLoadError, load_generator, run_generator, show_generator_options
from create_thing.github import CredentialsError, DeviceFlowError, GithubError
from create_thing.gitlab_client import GitlabResponseError
from create_thing.resolver import PathResolutionError
from create_thing.utils import CommandError, console
from create_thing.wizard import WizardCancelled, WizardContext, collect_settings

FATAL_ERRORS = (
    GithubError,
    GitlabResponseError,
    DeviceFlowError,
    PathResolutionError,
    GeneratorLoadError,
    CredentialsError,
    CommandError,
    httpx.HTTPError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-thing",
        description="Interactively set up a new JavaScript/TypeScript package",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-thing\n"
            "  create-thing --generator my_generator:create\n"
            "  create-thing --dry-run --verbose\n"
        ),
    )
    parser.add_argument(
        "--generator",
        default=None,
        metavar="MODULE:CALLABLE",
        help="Generator that creates the package (default: $CREATE_THING_GENERATOR)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the collected settings, do not call the generator",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Explain which fallbacks were used while guessing settings",
    )
    parser.add_argument(
        "--github-api-url",
        default=None,
        help="GitHub REST API base URL (default: https://api.github.com)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> WizardConfig:
    """Environment configuration with command line flags applied on top."""
    overrides: dict[str, object] = {"dry_run": args.dry_run, "verbose": args.verbose}
    if args.generator:
        overrides["generator"] = args.generator
    if args.github_api_url:
        overrides["github_api_url"] = args.github_api_url
    return WizardConfig.from_env().model_copy(update=overrides)


async def run(config: WizardConfig) -> None:
    # Load the generator first so a typo fails before any question is asked.
    generator = load_generator(config.generator) if config.generator and not config.dry_run else None

    ctx = WizardContext.create(config)
    settings = await collect_settings(ctx)

    if generator is None:
        show_generator_options(settings)
        return
    await run_generator(generator, settings)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-thing``."""
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    try:
        asyncio.run(run(config))
    except (WizardCancelled, KeyboardInterrupt):
        console.print("Bye 👋")
        sys.exit(0)
    except FATAL_ERRORS as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
