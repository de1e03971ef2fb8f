"""Facts about the machine the wizard runs on.

Covers the OS account name and which JavaScript package manager the user
most likely wants.  Nothing here prompts or talks to the network.
"""

from __future__ import annotations

import asyncio
import getpass
import os
import shutil
import sys

from create_thing.models import PackageManager

# Checked in this order; "npm" is a substring of "pnpm" so pnpm goes first.
_PREFERENCE = (PackageManager.PNPM, PackageManager.YARN, PackageManager.NPM)


def get_os_username() -> str | None:
    """Return the login name of the current OS user, if it can be determined."""
    try:
        return getpass.getuser() or None
    except (KeyError, OSError):
        return None


def _match_package_manager(value: str) -> PackageManager | None:
    for manager in _PREFERENCE:
        if manager.value in value:
            return manager
    return None


def package_manager_from_args(argv0: str | None = None) -> PackageManager | None:
    """Detect the package manager from the executable that launched us.

    Picks up wrappers such as ``pnpm dlx`` or ``yarn create`` that leave their
    name in the launching command.
    """
    return _match_package_manager(argv0 if argv0 is not None else sys.argv[0])


def package_manager_from_env(env: dict[str, str] | None = None) -> PackageManager | None:
    """Detect the package manager from variables npm-compatible tools export."""
    env = os.environ if env is None else env
    return _match_package_manager(env.get("npm_execpath", "")) or _match_package_manager(
        env.get("npm_config_user_agent", "")
    )


async def package_manager_from_path() -> PackageManager | None:
    """Return the most preferred package manager installed on ``PATH``."""
    found = await asyncio.gather(
        *(asyncio.to_thread(shutil.which, manager.value) for manager in _PREFERENCE)
    )
    for manager, location in zip(_PREFERENCE, found):
        if location:
            return manager
    return None


async def determine_package_manager() -> PackageManager | None:
    """Guess the package manager: launching command, then environment, then ``PATH``."""
    return (
        package_manager_from_args()
        or package_manager_from_env()
        or await package_manager_from_path()
    )
