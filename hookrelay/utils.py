"""the beautiful world start from here."""

from __future__ import annotations

import hashlib
import hmac
from typing import Iterable

SIGNATURE_PREFIX = "sha256="


def gh_signature(secret: str, body: bytes) -> str:
    """Return the ``sha256=<hex>`` value GitHub sends in X-Hub-Signature-256."""
    mac = hmac.new(secret.encode(), msg=body, digestmod=hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + mac


def gh_verify(secret: str | None, body: bytes, signature_header: str | None) -> bool:
    """
    Verify GitHub webhook HMAC signature (X-Hub-Signature-256).

    The digest is computed over the raw request body. Without a configured
    secret every request passes.

    Returns
    -------
    bool
        True if valid, False otherwise.
    """
    if not secret:
        return True
    if not signature_header:
        return False
    return hmac.compare_digest(
        gh_signature(secret, body).encode(), signature_header.strip().encode()
    )


def parse_topic_id(s: str) -> int | None:
    """Return a positive int topic_id or None if invalid."""
    try:
        v = int(s)
        return v if v > 0 else None
    except (ValueError, TypeError):
        return None


def truncate(text: str | None, limit: int, placeholder: str = "No content") -> str:
    """
    Body preview: normalize newlines, trim, cut at ``limit`` and add ``...``.
    """
    if not text:
        return placeholder
    clean = text.replace("\r\n", "\n").strip()
    if not clean:
        return placeholder
    if len(clean) > limit:
        return clean[:limit] + "..."
    return clean


def split_text(text: str, limit: int) -> Iterable[str]:
    """Split text into chunks of at most ``limit`` chars, preferring newlines."""
    t = text or ""
    while len(t) > limit:
        cut = t.rfind("\n", 0, limit)
        if cut <= 0:
            cut = limit
        yield t[:cut]
        t = t[cut:]
    if t:
        yield t
