"""Shared fixtures for the webhook pipeline tests."""

from __future__ import annotations

import pytest

from helpers import FakeBot, FakeRenderer
from hookrelay.config import Settings
from hookrelay.services.bots import BotRegistry


@pytest.fixture
def settings() -> Settings:
    return Settings(
        repos={"octo/widgets": ["telegram:-100123", "discord:42"]},
        truncate_length=20,
        timezone="UTC",
    )


@pytest.fixture
def telegram_bot() -> FakeBot:
    return FakeBot("telegram")


@pytest.fixture
def registry(telegram_bot: FakeBot) -> BotRegistry:
    return BotRegistry([telegram_bot])


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()
