"""Fan a notification out to its configured destinations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from hookrelay.messages import NotificationMessage
from hookrelay.services.bots import BotRegistry, split_target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Destination:
    platform: str
    channel_id: str

    @classmethod
    def parse(cls, value: str) -> Optional["Destination"]:
        """First colon splits; anything after it is the channel id verbatim."""
        parts = split_target(value)
        if parts is None:
            return None
        return cls(*parts)


@dataclass
class DispatchReport:
    """Per-destination outcome, kept for logging only."""

    delivered: list[str] = field(default_factory=list)
    broadcast: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class Dispatcher:
    def __init__(self, registry: BotRegistry) -> None:
        self.registry = registry

    async def dispatch(
        self, message: NotificationMessage, destinations: Iterable[str]
    ) -> DispatchReport:
        """
        Deliver ``message`` to each destination in order.

        A destination with a connected platform session is sent directly;
        otherwise the registry's broadcast gets a chance to resolve it.
        Failures are logged and do not stop the remaining destinations.
        """
        report = DispatchReport()
        for target in destinations:
            dest = Destination.parse(target)
            if dest is None:
                logger.warning("Skipping malformed destination %r", target)
                report.skipped.append(target)
                continue

            bot = self.registry.find(dest.platform)
            try:
                if bot is not None:
                    await bot.send_message(dest.channel_id, message)
                    report.delivered.append(target)
                else:
                    reached = await self.registry.broadcast([target], message)
                    if reached:
                        report.broadcast.append(target)
                    else:
                        report.skipped.append(target)
            except Exception:
                logger.exception("Delivery to %s failed", target)
                report.failed.append(target)

        if report.failed:
            logger.warning(
                "Delivered to %d destination(s), %d failed: %s",
                len(report.delivered) + len(report.broadcast),
                len(report.failed),
                ", ".join(report.failed),
            )
        return report
