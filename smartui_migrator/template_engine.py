"""Jinja2 rendering for the Markdown scan report."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

TEMPLATES_ENV_VAR = "SMARTUI_MIGRATOR_TEMPLATES_DIR"
PACKAGE_TEMPLATES = Path(__file__).resolve().parent / "templates"


def templates_dir() -> Path:
    override = os.environ.get(TEMPLATES_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    return PACKAGE_TEMPLATES


def md_list(items: Iterable[Any], empty: str = "None") -> str:
    """Markdown bullet list of ``items``; a single ``- None`` line when empty."""
    lines = [f"- {item}" for item in items]
    return "\n".join(lines or [f"- {empty}"])


@lru_cache(maxsize=8)
def _environment(base_dir: Path) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(base_dir)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["md_list"] = md_list
    return env


def render_template(template_name: str, context: Dict[str, Any]) -> str:
    base_dir = templates_dir()
    try:
        template = _environment(base_dir).get_template(template_name)
    except TemplateNotFound as exc:
        raise FileNotFoundError(f"Report template '{template_name}' not found under {base_dir}") from exc
    return template.render(**context)
