"""Discord bot channel messages."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from hookrelay.messages import MentionAllSegment, NotificationMessage, TextSegment
from hookrelay.services.bots import DeliveryError
from hookrelay.utils import split_text

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"
HTTP_TIMEOUT_SECONDS = 15
CONTENT_LIMIT = 2000


def render_content(message: NotificationMessage) -> str:
    parts: list[str] = []
    for segment in message.segments:
        if isinstance(segment, TextSegment):
            parts.append(segment.text)
        elif isinstance(segment, MentionAllSegment):
            parts.append("@everyone")
    return "".join(parts).replace("\r\n", "\n").strip()


class DiscordBot:
    """Posts to channels with a bot token."""

    platform = "discord"

    def __init__(
        self,
        token: str,
        *,
        api_base: str = DISCORD_API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._transport = transport

    async def send_message(self, channel_id: str, message: NotificationMessage) -> None:
        url = f"{self._api_base}/channels/{channel_id}/messages"
        headers = {"Authorization": f"Bot {self._token}"}
        allowed: dict[str, Any] = {"parse": ["everyone"] if message.mentions_all else []}
        chunks = list(split_text(render_content(message), CONTENT_LIMIT)) or [""]
        images = message.images

        async with httpx.AsyncClient(
            timeout=HTTP_TIMEOUT_SECONDS, transport=self._transport
        ) as client:
            for index, chunk in enumerate(chunks):
                body = {"content": chunk, "allowed_mentions": allowed}
                if index == len(chunks) - 1 and images:
                    files = {
                        f"files[{i}]": (
                            f"image{i}.{img.mime_type.rsplit('/', 1)[-1]}",
                            img.data,
                            img.mime_type,
                        )
                        for i, img in enumerate(images)
                    }
                    resp = await client.post(
                        url,
                        headers=headers,
                        data={"payload_json": json.dumps(body)},
                        files=files,
                    )
                else:
                    resp = await client.post(url, headers=headers, json=body)
                if resp.status_code >= 300:
                    raise DeliveryError(f"Discord error: {resp.status_code} {resp.text}")
        logger.debug("Discord delivery to %s done", channel_id)
