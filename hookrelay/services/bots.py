"""Registry of connected platform sessions."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Protocol

from hookrelay.messages import NotificationMessage

logger = logging.getLogger(__name__)


class DeliveryError(RuntimeError):
    """Raised when a platform refuses or fails to deliver a message."""


class PlatformBot(Protocol):
    platform: str

    async def send_message(self, channel_id: str, message: NotificationMessage) -> None:
        ...


def split_target(target: str) -> tuple[str, str] | None:
    """
    Split ``platform:channel`` on the first colon.

    Example
    -------
    'telegram:-100123' → ('telegram', '-100123')
    """
    platform, sep, channel_id = target.partition(":")
    if not sep or not platform or not channel_id:
        return None
    return platform, channel_id


class BotRegistry:
    """
    Connected sessions, one per platform, plus an alias table used by
    :meth:`broadcast` to resolve destinations whose platform has no session.
    """

    def __init__(
        self,
        bots: Iterable[PlatformBot] = (),
        aliases: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._bots: dict[str, PlatformBot] = {}
        for bot in bots:
            self._bots[bot.platform] = bot
        self._aliases = dict(aliases or {})

    def find(self, platform: str) -> Optional[PlatformBot]:
        return self._bots.get(platform)

    def platforms(self) -> list[str]:
        return sorted(self._bots)

    def _resolve(self, target: str) -> tuple[PlatformBot, str] | None:
        seen: set[str] = set()
        current = target
        while current in self._aliases and current not in seen:
            seen.add(current)
            current = self._aliases[current]
        parts = split_target(current)
        if parts is None:
            return None
        bot = self.find(parts[0])
        if bot is None:
            return None
        return bot, parts[1]

    async def broadcast(
        self, targets: Iterable[str], message: NotificationMessage
    ) -> list[str]:
        """Deliver to each resolvable target; returns the targets reached."""
        delivered: list[str] = []
        for target in targets:
            resolved = self._resolve(target)
            if resolved is None:
                logger.warning("No connected session can reach %s, dropping", target)
                continue
            bot, channel_id = resolved
            await bot.send_message(channel_id, message)
            delivered.append(target)
        return delivered

