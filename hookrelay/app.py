"""the beautiful world start from here."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from hookrelay.config import Settings, load_settings
from hookrelay.logs import configure_logging
from hookrelay.routers import gh, info
from hookrelay.services.bots import BotRegistry, PlatformBot
from hookrelay.services.browser import BrowserRenderer
from hookrelay.services.discord import DiscordBot
from hookrelay.services.dispatch import Dispatcher
from hookrelay.services.pipeline import WebhookPipeline
from hookrelay.services.telegram import TelegramBot


def build_registry(settings: Settings) -> BotRegistry:
    """Platform sessions for every bot token present in the settings."""
    bots: list[PlatformBot] = []
    if settings.telegram_bot_token:
        bots.append(TelegramBot(settings.telegram_bot_token))
    if settings.discord_bot_token:
        bots.append(DiscordBot(settings.discord_bot_token))
    return BotRegistry(bots, aliases=settings.channel_aliases)


def create_app(
    settings: Settings,
    *,
    registry: Optional[BotRegistry] = None,
    renderer: Optional[BrowserRenderer] = None,
) -> FastAPI:
    configure_logging(settings.log_level)
    registry = registry if registry is not None else build_registry(settings)
    renderer = renderer if renderer is not None else BrowserRenderer()
    pipeline = WebhookPipeline(settings, Dispatcher(registry), renderer)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await renderer.close()

    app = FastAPI(title="GitHub → chat notifier", lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry
    app.state.pipeline = pipeline

    app.include_router(info.router)
    app.include_router(gh.create_router(settings.webhook_path, pipeline))
    return app


def get_app() -> FastAPI:
    """Factory for ``uvicorn --factory hookrelay.app:get_app``."""
    return create_app(load_settings())
