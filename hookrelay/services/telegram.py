"""Yet another tele services"""

from __future__ import annotations

import logging
from html import escape
from typing import Any, Optional

import httpx

from hookrelay.messages import ImageSegment, MentionAllSegment, NotificationMessage, TextSegment
from hookrelay.services.bots import DeliveryError
from hookrelay.utils import parse_topic_id, split_text

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"
HTTP_TIMEOUT_SECONDS = 15
MESSAGE_LIMIT = 4096
CAPTION_LIMIT = 1024
ANNOUNCE_MARKER = "📢"

JSONDict = dict[str, Any]


def _normalize_newlines(s: str) -> str:
    return (s or "").replace("\r\n", "\n").replace("\r", "\n")


def parse_chat(channel_id: str) -> tuple[str, Optional[int]]:
    """
    Split ``chat_id/topic_id`` for forum topics.

    Example
    -------
    '-100123/7' → ('-100123', 7)
    """
    chat_id, sep, topic = channel_id.partition("/")
    if sep:
        return chat_id, parse_topic_id(topic)
    return channel_id, None


def render_text(message: NotificationMessage) -> str:
    """Plain text of ``message``; escaping happens per chunk when sending."""
    parts: list[str] = []
    for segment in message.segments:
        if isinstance(segment, TextSegment):
            parts.append(segment.text)
        elif isinstance(segment, MentionAllSegment):
            parts.append(ANNOUNCE_MARKER)
    return _normalize_newlines("".join(parts)).strip()


def render_html(message: NotificationMessage) -> str:
    """Telegram HTML for the text part of ``message``."""
    return escape(render_text(message), quote=False)


def _check(resp: httpx.Response) -> JSONDict:
    try:
        data = resp.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {"ok": False}
    if resp.status_code >= 300 or not data.get("ok", True):
        raise DeliveryError(f"Telegram error: {resp.status_code} {resp.text}")
    return data


class TelegramBot:
    """Outbound-only Telegram Bot API session."""

    platform = "telegram"

    def __init__(
        self,
        token: str,
        *,
        api_base: str = TELEGRAM_API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._transport = transport

    def _url(self, method: str) -> str:
        return f"{self._api_base}/bot{self._token}/{method}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, transport=self._transport)

    async def send_text(
        self,
        chat_id: str,
        text: str,
        topic_id: Optional[int] = None,
        *,
        disable_web_page_preview: bool = True,
    ) -> list[JSONDict]:
        payload_base: JSONDict = {
            "chat_id": chat_id,
            "parse_mode": "HTML",
            "disable_web_page_preview": disable_web_page_preview,
        }
        if topic_id is not None:
            payload_base["message_thread_id"] = topic_id

        results: list[JSONDict] = []
        async with self._client() as client:
            # split the plain text so a cut never lands inside an HTML entity
            for chunk in split_text(text, MESSAGE_LIMIT):
                p = dict(payload_base)
                p["text"] = escape(chunk, quote=False)
                results.append(_check(await client.post(self._url("sendMessage"), json=p)))
        return results

    async def send_photo(
        self,
        chat_id: str,
        image: ImageSegment,
        caption: str = "",
        topic_id: Optional[int] = None,
    ) -> JSONDict:
        data: JSONDict = {"chat_id": chat_id}
        if caption:
            data["caption"] = escape(caption, quote=False)
            data["parse_mode"] = "HTML"
        if topic_id is not None:
            data["message_thread_id"] = str(topic_id)
        extension = image.mime_type.rsplit("/", 1)[-1] or "png"
        files = {"photo": (f"image.{extension}", image.data, image.mime_type)}
        async with self._client() as client:
            resp = await client.post(self._url("sendPhoto"), data=data, files=files)
        return _check(resp)

    async def send_message(self, channel_id: str, message: NotificationMessage) -> None:
        chat_id, topic_id = parse_chat(channel_id)
        text = render_text(message)
        images = message.images
        if not images:
            await self.send_text(chat_id, text, topic_id)
            return

        caption_fits = len(text) <= CAPTION_LIMIT
        for index, image in enumerate(images):
            caption = text if index == 0 and caption_fits else ""
            await self.send_photo(chat_id, image, caption, topic_id)
        if not caption_fits and text:
            await self.send_text(chat_id, text, topic_id)
        logger.debug("Telegram delivery to %s done (%d image(s))", channel_id, len(images))
