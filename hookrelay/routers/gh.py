"""Ruter GH?"""

from __future__ import annotations

from fastapi import APIRouter, Header, Request
from fastapi.responses import PlainTextResponse

from hookrelay.services.pipeline import WebhookEnvelope, WebhookPipeline


def create_router(path: str, pipeline: WebhookPipeline) -> APIRouter:
    """Router with the GitHub webhook mounted at ``path``."""
    router = APIRouter(tags=["github"])

    @router.post(path, response_class=PlainTextResponse)
    async def github_webhook(
        request: Request,
        x_hub_signature_256: str | None = Header(None),
        x_github_event: str | None = Header(None),
    ):
        """
        GitHub webhook endpoint.

        The signature in `X-Hub-Signature-256` is checked against the raw body
        when a secret is configured. The reply only reflects whether the
        delivery was accepted, never how forwarding went.
        """
        body = await request.body()
        try:
            payload = await request.json()
        except ValueError:
            payload = None

        envelope = WebhookEnvelope(
            event_type=x_github_event or "",
            raw_body=body,
            signature=x_hub_signature_256,
            parsed_body=payload,
        )
        result = await pipeline.handle(envelope)
        return PlainTextResponse(result.body, status_code=result.status_code)

    return router
