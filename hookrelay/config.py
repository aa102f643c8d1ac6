"""the beautiful world start from here."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

DEFAULT_WEBHOOK_PATH = "/github/webhook"
DEFAULT_TRUNCATE_LENGTH = 200
DEFAULT_STAR_THRESHOLD = 1
DEFAULT_RENDER_TIMEOUT_MS = 10_000


class ConfigError(ValueError):
    """Raised when the environment holds an unusable setting."""


def _positive_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _load_json_object(name: str, raw: Optional[str]) -> dict[str, Any]:
    if raw is None or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{name} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{name} must be a JSON object")
    return data


def parse_repos(data: Mapping[str, Any], source: str = "REPOS") -> dict[str, tuple[str, ...]]:
    """
    Validate a repository mapping.

    Keys are ``owner/repo`` names, values are ordered lists of
    ``platform:channel`` destination strings.
    """
    repos: dict[str, tuple[str, ...]] = {}
    for repo, targets in data.items():
        if not isinstance(repo, str) or "/" not in repo:
            raise ConfigError(f"{source}: repository key {repo!r} must be owner/repo")
        if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
            raise ConfigError(f"{source}: destinations for {repo} must be a list of strings")
        repos[repo] = tuple(targets)
    return repos


def parse_aliases(data: Mapping[str, Any]) -> dict[str, str]:
    aliases: dict[str, str] = {}
    for target, resolved in data.items():
        if not isinstance(resolved, str) or not resolved:
            raise ConfigError(f"CHANNEL_ALIASES: alias for {target!r} must be a string")
        aliases[str(target)] = resolved
    return aliases


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    webhook_path: str = DEFAULT_WEBHOOK_PATH
    secret: str = ""
    repos: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    truncate_length: int = DEFAULT_TRUNCATE_LENGTH
    star_threshold: int = DEFAULT_STAR_THRESHOLD
    timezone: str = "Asia/Jakarta"
    render_timeout_ms: int = DEFAULT_RENDER_TIMEOUT_MS
    telegram_bot_token: str = ""
    discord_bot_token: str = ""
    channel_aliases: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        # Freeze caller-supplied dicts so the route table stays read-only.
        if not isinstance(self.repos, MappingProxyType):
            object.__setattr__(
                self,
                "repos",
                MappingProxyType({k: tuple(v) for k, v in self.repos.items()}),
            )
        if not isinstance(self.channel_aliases, MappingProxyType):
            object.__setattr__(
                self, "channel_aliases", MappingProxyType(dict(self.channel_aliases))
            )
        if not self.webhook_path.startswith("/"):
            object.__setattr__(self, "webhook_path", "/" + self.webhook_path)
        for name in ("truncate_length", "star_threshold", "render_timeout_ms"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        ``REPOS_FILE`` (a JSON file) is read first, then ``REPOS`` entries
        override it key by key.
        """
        env = os.environ if environ is None else environ

        repos: dict[str, tuple[str, ...]] = {}
        repos_file = env.get("REPOS_FILE", "").strip()
        if repos_file:
            path = Path(repos_file)
            try:
                raw_file = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise ConfigError(f"REPOS_FILE {path} cannot be read: {exc}") from exc
            repos.update(parse_repos(_load_json_object("REPOS_FILE", raw_file), "REPOS_FILE"))
        repos.update(parse_repos(_load_json_object("REPOS", env.get("REPOS"))))

        return cls(
            webhook_path=env.get("WEBHOOK_PATH", DEFAULT_WEBHOOK_PATH) or DEFAULT_WEBHOOK_PATH,
            secret=env.get("GITHUB_WEBHOOK_SECRET", ""),
            repos=repos,
            truncate_length=_positive_int(
                "TRUNCATE_LENGTH", env.get("TRUNCATE_LENGTH"), DEFAULT_TRUNCATE_LENGTH
            ),
            star_threshold=_positive_int(
                "STAR_THRESHOLD", env.get("STAR_THRESHOLD"), DEFAULT_STAR_THRESHOLD
            ),
            timezone=env.get("TIMEZONE", "Asia/Jakarta"),
            render_timeout_ms=_positive_int(
                "RENDER_TIMEOUT_MS", env.get("RENDER_TIMEOUT_MS"), DEFAULT_RENDER_TIMEOUT_MS
            ),
            telegram_bot_token=env.get("TELEGRAM_BOT_TOKEN", ""),
            discord_bot_token=env.get("DISCORD_BOT_TOKEN", ""),
            channel_aliases=parse_aliases(
                _load_json_object("CHANNEL_ALIASES", env.get("CHANNEL_ALIASES"))
            ),
            log_level=env.get("LOG_LEVEL", "INFO"),
        )


def load_settings() -> Settings:
    """Read ``.env`` (if present) and build settings from the environment."""
    load_dotenv()
    return Settings.from_env()
