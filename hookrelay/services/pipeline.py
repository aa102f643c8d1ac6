"""Webhook ingestion: verify, classify, transform, dispatch."""

from __future__ import annotations

import enum
import inspect
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from hookrelay.config import Settings
from hookrelay.messages import Outcome, TransformResult
from hookrelay.services import github
from hookrelay.services.browser import BrowserRenderer
from hookrelay.services.dispatch import Dispatcher
from hookrelay.utils import gh_verify

logger = logging.getLogger(__name__)

Transformer = Callable[
    [Mapping[str, Any], Settings],
    Union[TransformResult, Awaitable[TransformResult]],
]

INVALID_PAYLOAD = "Invalid Payload"
REPO_NOT_CONFIGURED = "Repository not configured"
SIGNATURE_MISMATCH = "Signature mismatch"
OK = "OK"


class EventKind(str, enum.Enum):
    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    RELEASE = "release"
    STAR = "star"


EVENT_KINDS: dict[str, EventKind] = {
    "issues": EventKind.ISSUE,
    "issue": EventKind.ISSUE,
    "pull_request": EventKind.PULL_REQUEST,
    "release": EventKind.RELEASE,
    "star": EventKind.STAR,
    "watch": EventKind.STAR,
}


@dataclass(frozen=True)
class WebhookEnvelope:
    event_type: str
    raw_body: bytes
    signature: Optional[str]
    parsed_body: Any


@dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    body: str


@dataclass(frozen=True)
class EarlyExit:
    status_code: int
    body: str


@dataclass(frozen=True)
class RoutedEvent:
    kind: Optional[EventKind]
    repository: str
    destinations: tuple[str, ...]


def classify(
    envelope: WebhookEnvelope, routes: Mapping[str, tuple[str, ...]]
) -> Union[RoutedEvent, EarlyExit]:
    """
    Decide what to do with a verified envelope.

    Unrecognized event types still route (with ``kind=None``) so the sender
    gets a plain acknowledgement.
    """
    payload = envelope.parsed_body
    if not isinstance(payload, Mapping):
        return EarlyExit(400, INVALID_PAYLOAD)

    repository = payload.get("repository")
    repo_name = repository.get("full_name") if isinstance(repository, Mapping) else None
    if not isinstance(repo_name, str) or repo_name not in routes:
        return EarlyExit(200, REPO_NOT_CONFIGURED)

    kind = EVENT_KINDS.get((envelope.event_type or "").strip().lower())
    return RoutedEvent(kind=kind, repository=repo_name, destinations=tuple(routes[repo_name]))


class WebhookPipeline:
    """Everything behind the webhook endpoint, built once per app."""

    def __init__(
        self,
        settings: Settings,
        dispatcher: Dispatcher,
        renderer: BrowserRenderer,
    ) -> None:
        self.settings = settings
        self.dispatcher = dispatcher
        self.renderer = renderer
        self.transformers: dict[EventKind, Transformer] = {
            EventKind.ISSUE: github.handle_issue,
            EventKind.PULL_REQUEST: github.handle_pull_request,
            EventKind.RELEASE: partial(github.handle_release, renderer=renderer),
            EventKind.STAR: github.handle_star,
        }

    async def transform(self, kind: EventKind, payload: Mapping[str, Any]) -> TransformResult:
        transformer = self.transformers[kind]
        try:
            result = transformer(payload, self.settings)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.exception("Error transforming %s webhook", kind.value)
            return TransformResult.failed(f"{type(exc).__name__}: {exc}")
        return result

    async def handle(self, envelope: WebhookEnvelope) -> WebhookResponse:
        # payload check first: garbage is a 400 whether or not it is signed
        if not isinstance(envelope.parsed_body, Mapping):
            return WebhookResponse(400, INVALID_PAYLOAD)

        if not gh_verify(self.settings.secret, envelope.raw_body, envelope.signature):
            logger.warning("Rejecting %s webhook: signature mismatch", envelope.event_type or "?")
            return WebhookResponse(403, SIGNATURE_MISMATCH)

        routed = classify(envelope, self.settings.repos)
        if isinstance(routed, EarlyExit):
            if routed.body == REPO_NOT_CONFIGURED:
                logger.info("Ignoring %s webhook for unconfigured repository", envelope.event_type)
            return WebhookResponse(routed.status_code, routed.body)

        if routed.kind is None:
            logger.debug("Ignoring unhandled event type %r", envelope.event_type)
            return WebhookResponse(200, OK)

        result = await self.transform(routed.kind, envelope.parsed_body)
        if result.outcome is Outcome.DELIVER and result.message is not None:
            await self.dispatcher.dispatch(result.message, routed.destinations)
        elif result.outcome is Outcome.FAILED:
            logger.error(
                "%s webhook for %s not forwarded: %s",
                routed.kind.value,
                routed.repository,
                result.reason,
            )
        else:
            logger.debug("%s webhook suppressed: %s", routed.kind.value, result.reason)
        return WebhookResponse(200, OK)
