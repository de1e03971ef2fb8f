"""The interactive wizard that turns an empty settings record into confirmed settings."""

from create_thing.wizard.context import WizardContext
from create_thing.wizard.prompts import MenuChoice, Prompter, QuestionaryPrompter, WizardCancelled
from create_thing.wizard.review import review_settings
from create_thing.wizard.runner import collect_settings, initial_settings

__all__ = [
    "MenuChoice",
    "Prompter",
    "QuestionaryPrompter",
    "WizardCancelled",
    "WizardContext",
    "collect_settings",
    "initial_settings",
    "review_settings",
]
