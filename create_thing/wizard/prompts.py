"""Interactive prompts.

Steps talk to the user only through a :class:`Prompter`, so the whole state
machine can be driven by scripted answers in tests.  The real implementation
uses questionary.  Cancelling any prompt (Ctrl-C / Ctrl-D) raises
:class:`WizardCancelled`, which aborts the whole wizard.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import questionary

Validator = Callable[[str], "bool | str"]


class WizardCancelled(Exception):
    """Raised when the user cancels a prompt."""


@dataclass
class MenuChoice:
    """One entry of a select prompt."""

    title: str
    value: Any
    description: str | None = None
    disabled: str | None = None


class Prompter(Protocol):
    async def text(self, message: str, default: str = "", validate: Validator | None = None) -> str: ...

    async def select(self, message: str, choices: Sequence[MenuChoice], default: Any = None) -> Any: ...

    async def confirm(self, message: str, default: bool = True) -> bool: ...

    async def acknowledge(self, message: str) -> None: ...


class QuestionaryPrompter:
    """:class:`Prompter` backed by questionary."""

    @staticmethod
    async def _ask(question: questionary.Question) -> Any:
        try:
            return await question.unsafe_ask_async()
        except (KeyboardInterrupt, EOFError):
            raise WizardCancelled() from None

    async def text(self, message: str, default: str = "", validate: Validator | None = None) -> str:
        answer = await self._ask(questionary.text(message, default=default, validate=validate))
        return answer or ""

    async def select(self, message: str, choices: Sequence[MenuChoice], default: Any = None) -> Any:
        options = [
            questionary.Choice(
                choice.title,
                value=choice.value,
                disabled=choice.disabled,
                description=choice.description,
            )
            for choice in choices
        ]
        return await self._ask(questionary.select(message, choices=options, default=default))

    async def confirm(self, message: str, default: bool = True) -> bool:
        return bool(await self._ask(questionary.confirm(message, default=default)))

    async def acknowledge(self, message: str) -> None:
        await self._ask(questionary.press_any_key_to_continue(message))
