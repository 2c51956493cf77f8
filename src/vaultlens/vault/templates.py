"""Markdown templates for captured notes."""

import re
from typing import Any

import yaml

FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)


def render_frontmatter(data: dict[str, Any]) -> str:
    """Render YAML frontmatter block."""
    fm = yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{fm}---\n"


def render_note(title: str, frontmatter: dict[str, Any], body: str = "") -> str:
    """Render a new note with a heading under its frontmatter."""
    parts = [render_frontmatter(frontmatter), f"# {title}\n"]
    if body:
        parts.append(body)
    return "\n".join(parts)


def split_frontmatter(text: str) -> tuple[str | None, str]:
    """Return (raw frontmatter, body). Frontmatter is None when absent."""
    match = FRONTMATTER_RE.match(text)
    if not match:
        return None, text
    return match.group(1), text[match.end():]
