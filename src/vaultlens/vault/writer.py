"""Capture property values into vault notes."""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from ..anchors.patterns import format_title_with_weekday, today_note_name
from .templates import render_frontmatter, render_note, split_frontmatter

logger = logging.getLogger(__name__)


def parse_value(text: str) -> Any:
    """Interpret a command-line value the way frontmatter would (numbers, booleans, lists)."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


class FrontmatterWriter:
    """Writes frontmatter keys into notes, creating the note if needed."""

    def __init__(self, vault_path: str | Path):
        self.vault_path = Path(vault_path)

    def note_path(self, note: str | None = None) -> Path:
        """Path for ``note`` (vault-relative, extension optional); today's daily note by default."""
        name = note or today_note_name()
        name = self._sanitize_filename(name)
        if not name.endswith(".md"):
            name = f"{name}.md"
        return self.vault_path / name

    def capture(self, property_id: str, value: Any, note: str | None = None) -> Path:
        """Set ``property_id`` to ``value`` in the note's frontmatter.

        Returns the path of the written file.
        """
        if not property_id or property_id.startswith("file."):
            raise ValueError(f"Cannot capture into property {property_id!r}")

        path = self.note_path(note)
        if path.exists():
            text = path.read_text(encoding="utf-8")
            raw, body = split_frontmatter(text)
            data = self._load(raw, path)
            data[property_id] = value
            path.write_text(render_frontmatter(data) + body, encoding="utf-8")
            logger.debug(f"Updated {property_id} in {path}")
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            title = format_title_with_weekday(path.stem)
            path.write_text(render_note(title, {property_id: value}), encoding="utf-8")
            logger.debug(f"Created {path} with {property_id}")
        return path

    @staticmethod
    def _load(raw: str | None, path: Path) -> dict[str, Any]:
        if raw is None:
            return {}
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Refusing to overwrite invalid frontmatter in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Frontmatter in {path} is not a mapping")
        return data

    @staticmethod
    def _sanitize_filename(name: str) -> str:
        """Sanitize a vault-relative note name, keeping folder separators."""
        name = re.sub(r'[<>:"\\|?*]', '', name)
        parts = [p.strip(". ") for p in name.split("/")]
        parts = [p for p in parts if p]
        return "/".join(parts) if parts else "untitled"
