"""Centralized Jinja2 template configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# StrictUndefined: a missing card field must fail the render, not print "".
templates = Environment(
    loader=FileSystemLoader(str(_TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
)


def render_template(name: str, **context: Any) -> str:
    return templates.get_template(name).render(**context)
