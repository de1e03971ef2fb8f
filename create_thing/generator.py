"""Handing the confirmed settings to the project generator.

The generator is an external callable (``module:callable``) that receives a
:class:`GeneratorOptions` and does the actual file and repository work.  It
reports progress through the logger attached to the options, which is shown
as a Rich spinner display.
"""

from __future__ import annotations

import asyncio
import importlib
import inspect
import json
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol

from rich.progress import Progress, TaskID

from create_thing.models import GeneratorOptions, Settings
from create_thing.utils import console, create_progress, print_success, print_summary_table

Generator = Callable[[GeneratorOptions], Any]


class GeneratorLoadError(Exception):
    """Raised when the configured generator cannot be imported."""

    def __init__(self, message: str, target: str = "") -> None:
        self.target = target
        super().__init__(message)


class MessageType(str, Enum):
    INFO = "info"
    ERROR = "error"
    SUCCESS = "success"
    WARNING = "warning"


class LogState(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    PENDING = "pending"


class GeneratorLogger(Protocol):
    def log_message(self, message: str, type: MessageType | str = MessageType.INFO) -> None: ...

    def log_state(self, id: str, text: str | None = None, state: LogState | str | None = None) -> None: ...


_MESSAGE_MARKERS = {
    MessageType.INFO: "[blue]ℹ[/blue]",
    MessageType.ERROR: "[red]✖[/red]",
    MessageType.SUCCESS: "[green]✔[/green]",
    MessageType.WARNING: "[yellow]⚠[/yellow]",
}

_FINAL_STATE_MARKERS = {
    LogState.COMPLETED: _MESSAGE_MARKERS[MessageType.SUCCESS],
    LogState.FAILED: _MESSAGE_MARKERS[MessageType.ERROR],
    LogState.PENDING: _MESSAGE_MARKERS[MessageType.INFO],
}


class RichGeneratorLogger:
    """Shows generator progress on a Rich :class:`Progress` display.

    Every state id gets its own spinner row while active.  Finishing a state
    removes the row and prints a marked line in its place.
    """

    def __init__(self, progress: Progress) -> None:
        self.progress = progress
        self._tasks: dict[str, TaskID] = {}
        self._texts: dict[str, str] = {}

    def log_message(self, message: str, type: MessageType | str = MessageType.INFO) -> None:
        marker = _MESSAGE_MARKERS[MessageType(type)]
        self.progress.console.print(f"{marker} {message}")

    def log_state(self, id: str, text: str | None = None, state: LogState | str | None = None) -> None:
        if text is not None:
            self._texts[id] = text
        description = self._texts.get(id, id)

        if state is None:
            if id in self._tasks:
                self.progress.update(self._tasks[id], description=description)
            return

        state = LogState(state)
        if state is LogState.ACTIVE:
            if id in self._tasks:
                self.progress.update(self._tasks[id], description=description)
            else:
                self._tasks[id] = self.progress.add_task(description, total=None)
            return

        task = self._tasks.pop(id, None)
        if task is not None:
            self.progress.remove_task(task)
        self.progress.console.print(f"{_FINAL_STATE_MARKERS[state]} {description}")

    @property
    def active_states(self) -> list[str]:
        return list(self._tasks)


def build_generator_options(settings: Settings, logger: GeneratorLogger | None = None) -> GeneratorOptions:
    """Translate confirmed settings into generator options.

    Packages inside a monorepo do not get their own git repository.
    """
    if not settings.name:
        raise ValueError("Cannot create a package without a name")
    return GeneratorOptions(
        path=settings.path or ".",
        name=settings.name,
        description=settings.description,
        type=settings.type or "library",
        author_name=settings.author_name,
        author_email=settings.author_email,
        package_manager=settings.package_manager,
        disable_git_commits=False,
        disable_git_repo=bool(settings.monorepo),
        git_origin=settings.repo,
        git_branch=settings.branch,
        logger=logger,
    )


def load_generator(target: str) -> Generator:
    """Import a generator given as ``package.module:callable``."""
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise GeneratorLoadError(f"Generator must look like 'module:callable', got {target!r}", target)

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise GeneratorLoadError(f"Could not import {module_name}: {exc}", target) from exc

    generator = module
    for part in attribute.split("."):
        try:
            generator = getattr(generator, part)
        except AttributeError as exc:
            raise GeneratorLoadError(f"{module_name} has no attribute {attribute}", target) from exc

    if not callable(generator):
        raise GeneratorLoadError(f"{target} is not callable", target)
    return generator


async def run_generator(generator: Generator, settings: Settings) -> GeneratorOptions:
    """Call *generator* with options built from *settings*.

    Coroutine functions are awaited, plain functions run in a worker thread.
    """
    with create_progress() as progress:
        logger = RichGeneratorLogger(progress)
        options = build_generator_options(settings, logger)
        if inspect.iscoroutinefunction(generator):
            result = await generator(options)
        else:
            result = await asyncio.to_thread(generator, options)
            if inspect.isawaitable(result):
                await result

    print_success(f"Created {options.name}")
    return options


def show_generator_options(settings: Settings) -> GeneratorOptions:
    """Print the options a generator would receive, without calling one."""
    options = build_generator_options(settings)
    data = options.model_dump(mode="json")
    print_summary_table({key: None if value is None else str(value) for key, value in data.items()}, title="Package")
    console.print_json(json.dumps(data))
    return options
