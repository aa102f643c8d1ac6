"""Fakes and payload builders shared by the tests."""

from __future__ import annotations

import copy
from typing import Any, Optional

from hookrelay.messages import NotificationMessage

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


class FakeBot:
    """Records deliveries instead of calling a platform API."""

    def __init__(self, platform: str, *, fail_on: Optional[set[str]] = None) -> None:
        self.platform = platform
        self.sent: list[tuple[str, NotificationMessage]] = []
        self.fail_on = fail_on or set()

    async def send_message(self, channel_id: str, message: NotificationMessage) -> None:
        if channel_id in self.fail_on:
            raise RuntimeError(f"{self.platform} refused {channel_id}")
        self.sent.append((channel_id, message))


class FakeRenderer:
    """Stands in for the browser; returns fixed PNG bytes or raises."""

    def __init__(self, *, image: bytes = PNG_BYTES, error: Optional[Exception] = None) -> None:
        self.image = image
        self.error = error
        self.html: list[str] = []
        self.timeouts: list[Optional[int]] = []
        self.closed = False

    async def render(self, html: str, callback: Any, *, timeout_ms: Optional[int] = None) -> bytes:
        self.html.append(html)
        self.timeouts.append(timeout_ms)
        if self.error is not None:
            raise self.error
        return self.image

    async def close(self) -> None:
        self.closed = True


REPOSITORY = {
    "full_name": "octo/widgets",
    "html_url": "https://github.com/octo/widgets",
    "stargazers_count": 10,
}

SENDER = {"login": "mona"}


def issue_payload(action: str = "opened", **issue: Any) -> dict[str, Any]:
    body = {
        "number": 7,
        "title": "Widget explodes",
        "html_url": "https://github.com/octo/widgets/issues/7",
        "body": "Steps:\r\n1. press the button\r\n2. boom",
    }
    body.update(issue)
    return {
        "action": action,
        "issue": body,
        "repository": copy.deepcopy(REPOSITORY),
        "sender": dict(SENDER),
    }


def pull_request_payload(action: str = "opened", **pr: Any) -> dict[str, Any]:
    body = {
        "number": 12,
        "title": "Add gears",
        "html_url": "https://github.com/octo/widgets/pull/12",
        "body": "Adds gears.",
        "merged": False,
        "head": {"ref": "feature/gears"},
        "base": {"ref": "main"},
    }
    body.update(pr)
    return {
        "action": action,
        "pull_request": body,
        "repository": copy.deepcopy(REPOSITORY),
        "sender": dict(SENDER),
    }


def release_payload(action: str = "published", **release: Any) -> dict[str, Any]:
    body = {
        "tag_name": "v1.2.0",
        "name": "Gears",
        "body": "## Changes\n- gears",
        "html_url": "https://github.com/octo/widgets/releases/tag/v1.2.0",
        "published_at": "2024-05-01T10:00:00Z",
    }
    body.update(release)
    return {
        "action": action,
        "release": body,
        "repository": copy.deepcopy(REPOSITORY),
        "sender": dict(SENDER),
    }


def star_payload(action: str = "created", count: int = 10) -> dict[str, Any]:
    repo = copy.deepcopy(REPOSITORY)
    repo["stargazers_count"] = count
    return {"action": action, "repository": repo, "sender": dict(SENDER)}
