"""Unit tests for the review screen (create_thing.wizard.review)."""

from __future__ import annotations

import asyncio

import pytest

from conftest import ScriptedPrompter
from create_thing.models import PackageManager, Settings
from create_thing.wizard.review import EDIT_STEPS, build_review_choices, missing_keys, review_settings

REPO = "git@github.com:octocat/widget.git"


def review_calls(prompter: ScriptedPrompter) -> list[dict]:
    return [details for kind, message, details in prompter.calls if message == "Are you ready to create?"]


class TestChoices:
    @pytest.mark.unit
    def test_every_choice_has_a_step(self, settings: Settings):
        values = [choice.value for choice in build_review_choices(settings, [])]
        assert values[0] == "create"
        assert set(values[1:]) == set(EDIT_STEPS)

    @pytest.mark.unit
    def test_titles_show_values(self, settings: Settings):
        draft = settings.evolve(name="widget", path="widget", package_manager=PackageManager.PNPM, monorepo=True)
        titles = [choice.title for choice in build_review_choices(draft, [])]
        assert "Name         : widget" in titles
        assert "Lockfiles    : pnpm" in titles
        assert "In monorepo  : yes" in titles
        assert "Add a package description" in titles

    @pytest.mark.unit
    def test_missing_keys(self, settings: Settings):
        assert missing_keys(settings, repo_exists=True) == ["name", "path"]
        ready = settings.evolve(name="widget", path="widget", repo=REPO)
        assert missing_keys(ready, repo_exists=True) == []
        assert missing_keys(ready, repo_exists=False) == ["repo"]

    @pytest.mark.unit
    def test_create_disabled_with_reason(self, settings: Settings):
        create = build_review_choices(settings, ["name", "path"])[0]
        assert create.disabled == "You need to set name, path"


class TestReviewSettings:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_create_enabled_after_setting_name(self, fake_git, settings: Settings, ctx, prompter):
        prompter.queue("name", "widget", "create")

        resolved = await review_settings(settings, ctx)

        assert resolved.name == "widget"
        assert resolved.path == "widget"
        first, second = review_calls(prompter)
        assert first["choices"][0].disabled is not None
        assert "name" in first["choices"][0].disabled
        assert first["default"] is None
        assert second["choices"][0].disabled is None
        assert second["default"] == "create"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_repo_blocks_create(self, fake_git, settings: Settings, ctx, prompter):
        prompter.queue("repo", "", "create")
        draft = settings.evolve(name="widget", path="widget", repo=REPO)

        resolved = await review_settings(draft, ctx)

        assert resolved.repo is None
        first, second = review_calls(prompter)
        assert "repo" in first["choices"][0].disabled
        assert second["choices"][0].disabled is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_existing_repo_allows_create(self, fake_git, settings: Settings, ctx, prompter):
        fake_git.remote_exists.return_value = True
        prompter.queue("create")
        draft = settings.evolve(name="widget", path="widget", repo=REPO)

        assert await review_settings(draft, ctx) == draft
        assert len(review_calls(prompter)) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_slow_check_defaults_to_exists_but_create_waits(self, fake_git, settings, ctx, prompter):
        async def slow_missing(url: str, timeout: float = 30) -> bool:
            await asyncio.sleep(0.2)
            return False

        fake_git.remote_exists.side_effect = slow_missing
        ctx.config.repo_check_timeout = 0.01
        prompter.queue("create", "repo", "", "create")
        draft = settings.evolve(name="widget", path="widget", repo=REPO)

        resolved = await review_settings(draft, ctx)

        assert resolved.repo is None
        calls = review_calls(prompter)
        assert len(calls) == 3
        assert calls[0]["choices"][0].disabled is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_edit_steps_loop_back(self, fake_git, settings: Settings, ctx, prompter):
        prompter.queue("author_name", "Mona Lisa", "package_manager", PackageManager.NPM, "create")
        draft = settings.evolve(name="widget", path="widget")

        resolved = await review_settings(draft, ctx)

        assert resolved.author_name == "Mona Lisa"
        assert resolved.package_manager == PackageManager.NPM
        assert len(review_calls(prompter)) == 3
