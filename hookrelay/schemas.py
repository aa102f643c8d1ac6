"""Payload shapes for the GitHub events we forward."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError


class PayloadError(ValueError):
    """Raised when a webhook payload lacks fields a transformer needs."""


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Account(_Model):
    login: str


class Repository(_Model):
    full_name: str
    html_url: str = ""


class StarredRepository(Repository):
    html_url: str
    stargazers_count: int


class Issue(_Model):
    number: int
    title: str
    html_url: str
    body: Optional[str] = None


class BranchRef(_Model):
    ref: str


class PullRequest(_Model):
    number: int
    title: str
    html_url: str
    body: Optional[str] = None
    merged: bool = False
    head: BranchRef
    base: BranchRef


class Release(_Model):
    tag_name: str
    html_url: str
    name: Optional[str] = None
    body: Optional[str] = None
    published_at: Optional[datetime] = None


class IssuesEvent(_Model):
    action: str
    issue: Issue
    repository: Repository
    sender: Account


class PullRequestEvent(_Model):
    action: str
    pull_request: PullRequest
    repository: Repository
    sender: Account


class ReleaseEvent(_Model):
    action: str
    release: Release
    repository: Repository
    sender: Account


class StarEvent(_Model):
    action: str
    repository: StarredRepository
    sender: Account


EventT = TypeVar("EventT", bound=BaseModel)


def parse_event(model: Type[EventT], payload: Mapping[str, Any]) -> EventT:
    """Validate ``payload`` against ``model``, raising :class:`PayloadError`."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) for err in exc.errors()
        )
        raise PayloadError(f"{model.__name__} payload invalid: {fields}") from exc
