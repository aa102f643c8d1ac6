"""Turn GitHub webhook payloads into notification messages."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from hookrelay.config import Settings
from hookrelay.messages import (
    ImageSegment,
    MentionAllSegment,
    NotificationMessage,
    TextSegment,
    TransformResult,
)
from hookrelay.schemas import (
    IssuesEvent,
    PullRequestEvent,
    ReleaseEvent,
    StarEvent,
    parse_event,
)
from hookrelay.services.browser import BrowserRenderer
from hookrelay.services.release_card import (
    ReleaseCard,
    RenderError,
    render_release_image,
)
from hookrelay.timezone import format_local, load_timezone
from hookrelay.utils import truncate

logger = logging.getLogger(__name__)

ISSUE_STATUS = {
    "opened": "Opened",
    "reopened": "Reopened",
    "closed": "Closed",
}

PR_STATUS = {
    "opened": "Opened",
    "reopened": "Reopened",
}
PR_MERGED = "Merged"
PR_CLOSED_UNMERGED = "Closed (not merged)"

SUMMARY_HEADER = "\n\n=== Summary ===\n"
NO_RELEASE_NOTES = "*(No description provided)*"


def _action(payload: Mapping[str, Any]) -> str:
    return str(payload.get("action") or "")


def handle_issue(payload: Mapping[str, Any], settings: Settings) -> TransformResult:
    action = _action(payload)
    if action not in ISSUE_STATUS:
        return TransformResult.suppressed(f"issue action {action!r} ignored")

    event = parse_event(IssuesEvent, payload)
    issue = event.issue
    preview = None
    if action == "opened":
        preview = TextSegment(SUMMARY_HEADER + truncate(issue.body, settings.truncate_length))

    return TransformResult.deliver(
        NotificationMessage.of(
            TextSegment(f"[Issue] {event.repository.full_name} #{issue.number}"),
            TextSegment(f"\nTitle: {issue.title}"),
            TextSegment(f"\nStatus: {ISSUE_STATUS[action]}"),
            TextSegment(f"\nAuthor: {event.sender.login}"),
            TextSegment(f"\nLink: {issue.html_url}"),
            preview,
        )
    )


def pull_request_status(action: str, merged: bool) -> str | None:
    """Status label for a pull request action, or None when it is not forwarded."""
    if action == "closed":
        return PR_MERGED if merged else PR_CLOSED_UNMERGED
    return PR_STATUS.get(action)


def handle_pull_request(payload: Mapping[str, Any], settings: Settings) -> TransformResult:
    action = _action(payload)
    if action not in PR_STATUS and action != "closed":
        return TransformResult.suppressed(f"pull_request action {action!r} ignored")

    event = parse_event(PullRequestEvent, payload)
    pr = event.pull_request
    status = pull_request_status(action, pr.merged)
    preview = None
    if action == "opened":
        preview = TextSegment(SUMMARY_HEADER + truncate(pr.body, settings.truncate_length))

    return TransformResult.deliver(
        NotificationMessage.of(
            TextSegment(f"[Pull Request] {event.repository.full_name} #{pr.number}"),
            TextSegment(f"\nTitle: {pr.title}"),
            TextSegment(f"\nBranch: {pr.head.ref} -> {pr.base.ref}"),
            TextSegment(f"\nStatus: {status}"),
            TextSegment(f"\nBy: {event.sender.login}"),
            TextSegment(f"\nLink: {pr.html_url}"),
            preview,
        )
    )


def handle_star(payload: Mapping[str, Any], settings: Settings) -> TransformResult:
    action = _action(payload)
    if action != "created":
        return TransformResult.suppressed(f"star action {action!r} ignored")

    event = parse_event(StarEvent, payload)
    repo = event.repository
    count = repo.stargazers_count
    if count % settings.star_threshold != 0:
        return TransformResult.suppressed(
            f"{count} stars is not a multiple of {settings.star_threshold}"
        )

    return TransformResult.deliver(
        NotificationMessage.of(
            TextSegment(f"⭐ [Star] {repo.full_name}"),
            TextSegment(f"\nTotal stars: {count}"),
            TextSegment(f"\nNew stargazer: {event.sender.login}"),
            TextSegment(f"\nLink: {repo.html_url}"),
        )
    )


def release_fallback(tag_name: str) -> NotificationMessage:
    return NotificationMessage.text(
        f"⚠️ Failed to render the release image, check the server logs.\nVersion: {tag_name}"
    )


async def handle_release(
    payload: Mapping[str, Any],
    settings: Settings,
    renderer: BrowserRenderer,
) -> TransformResult:
    """
    Render a release card and wrap it in a message.

    Only ``published`` is forwarded; GitHub also sends ``created`` and
    ``edited`` for the same release. When rendering fails the release is
    still announced as plain text.
    """
    action = _action(payload)
    if action != "published":
        return TransformResult.suppressed(f"release action {action!r} ignored")

    event = parse_event(ReleaseEvent, payload)
    release = event.release
    card = ReleaseCard(
        repo_name=event.repository.full_name,
        title=release.name or release.tag_name,
        tag_name=release.tag_name,
        author=event.sender.login,
        published_at=format_local(release.published_at, load_timezone(settings.timezone)),
        body=release.body or NO_RELEASE_NOTES,
    )

    try:
        image = await render_release_image(
            card, renderer, timeout_ms=settings.render_timeout_ms
        )
    except RenderError:
        logger.exception(
            "Release card render failed for %s %s",
            card.repo_name,
            card.tag_name,
        )
        return TransformResult.deliver(release_fallback(release.tag_name))

    return TransformResult.deliver(
        NotificationMessage.of(
            MentionAllSegment(),
            TextSegment("\n"),
            TextSegment(f"🚀 [New Release] {event.repository.full_name}"),
            TextSegment(f"\nVersion: {release.tag_name}"),
            ImageSegment(image, "image/png"),
            TextSegment(f"\n🔗 Release: {release.html_url}"),
        )
    )
