"""Ruter Ingfo?"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

router = APIRouter(tags=["info"])


class HealthResponse(BaseModel):
    status: str
    webhook_path: str
    repositories: int
    platforms: list[str]


@router.get("/", response_class=PlainTextResponse)
def root():
    """
    Simple liveness endpoint.
    """
    return "Hello World!"


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    """Configured repositories and connected platforms."""
    settings = request.app.state.settings
    registry = request.app.state.registry
    return HealthResponse(
        status="ok",
        webhook_path=settings.webhook_path,
        repositories=len(settings.repos),
        platforms=registry.platforms(),
    )
