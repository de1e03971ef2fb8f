"""Filesystem and git facts about the package's target path.

:func:`add_path_info` records, per raw path string, where the nearest existing
directory is, whether it sits inside a git work tree and which origin that
repository has.  The first resolution of a path also seeds ``repo`` and
``monorepo`` when they are still unset.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from create_thing import git
from create_thing.models import PathInfo, Settings, usable_remote
from create_thing.naming import resolve_from

if TYPE_CHECKING:
    from create_thing.wizard.context import WizardContext


class PathResolutionError(Exception):
    """Raised when no directory above the target path exists."""


def first_existing_path_up(target: Path) -> Path:
    """Return *target* or the closest of its ancestors that exists."""
    for candidate in (target, *target.parents):
        if candidate.exists():
            return candidate
    raise PathResolutionError(f"Could not find any existing path above {target}")


async def probe_path(invoke_directory: str, path: str, timeout: float = 30) -> PathInfo:
    """Gather the :class:`PathInfo` for *path* relative to *invoke_directory*."""
    target = Path(resolve_from(invoke_directory, path))
    existing = first_existing_path_up(target)
    path_exists = existing == target

    in_git_tree = await git.is_inside_work_tree(existing, timeout=timeout)
    git_origin = await git.get_origin_url(existing, timeout=timeout) if in_git_tree else None
    is_git_root = path_exists and (existing / ".git").exists()

    return PathInfo(
        path_exists=path_exists,
        is_git_root=is_git_root,
        in_git_tree=in_git_tree,
        first_existing_path_up=str(existing),
        absolute_path=str(target),
        git_origin=git_origin,
    )


async def add_path_info(settings: Settings, ctx: WizardContext) -> Settings:
    """Return *settings* with facts about ``settings.path`` recorded.

    Already known paths and an unset path leave the settings untouched.
    """
    if not settings.path or settings.path in settings.path_infos:
        return settings

    key = (settings.invoke_directory, settings.path)
    info = ctx.path_cache.get(key)
    if info is None:
        info = await probe_path(settings.invoke_directory, settings.path, timeout=ctx.config.command_timeout)
        ctx.path_cache[key] = info

    origin = usable_remote(info.git_origin)
    repo = settings.repo if settings.repo is not None else origin
    monorepo = (
        settings.monorepo if settings.monorepo is not None else (info.in_git_tree and not info.is_git_root)
    )
    if origin and settings.repo is None:
        ctx.note(f"Using the git origin of {info.first_existing_path_up}: {origin}")

    return settings.evolve(
        repo=repo,
        monorepo=monorepo,
        path_infos={**settings.path_infos, settings.path: info},
    )
