"""Platform-agnostic notification messages."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class TextSegment:
    text: str


@dataclass(frozen=True)
class ImageSegment:
    data: bytes
    mime_type: str = "image/png"


@dataclass(frozen=True)
class MentionAllSegment:
    """Ask the platform to notify everyone in the channel."""


Segment = Union[TextSegment, ImageSegment, MentionAllSegment]


@dataclass(frozen=True)
class NotificationMessage:
    """Ordered segments produced by a transformer and consumed by the dispatcher."""

    segments: tuple[Segment, ...]

    @classmethod
    def of(cls, *segments: Optional[Segment]) -> "NotificationMessage":
        return cls(tuple(s for s in segments if s is not None))

    @classmethod
    def text(cls, text: str) -> "NotificationMessage":
        return cls((TextSegment(text),))

    def plain_text(self) -> str:
        return "".join(s.text for s in self.segments if isinstance(s, TextSegment))

    @property
    def images(self) -> list[ImageSegment]:
        return [s for s in self.segments if isinstance(s, ImageSegment)]

    @property
    def mentions_all(self) -> bool:
        return any(isinstance(s, MentionAllSegment) for s in self.segments)


class Outcome(str, enum.Enum):
    DELIVER = "deliver"
    SUPPRESSED = "suppressed"
    FAILED = "failed"


@dataclass(frozen=True)
class TransformResult:
    """What a transformer decided for one event."""

    outcome: Outcome
    message: Optional[NotificationMessage] = None
    reason: str = ""

    @classmethod
    def deliver(cls, message: NotificationMessage) -> "TransformResult":
        return cls(Outcome.DELIVER, message=message)

    @classmethod
    def suppressed(cls, reason: str = "") -> "TransformResult":
        return cls(Outcome.SUPPRESSED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "TransformResult":
        return cls(Outcome.FAILED, reason=reason)
