"""Read markdown notes and their frontmatter from a vault directory."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from .entry import VaultEntry
from .templates import split_frontmatter

logger = logging.getLogger(__name__)


def parse_frontmatter(text: str, source: str = "") -> dict[str, Any]:
    """Frontmatter as a dict. Missing or unreadable frontmatter gives {}."""
    raw, _ = split_frontmatter(text)
    if raw is None:
        return {}
    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Invalid frontmatter in {source or 'note'}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Frontmatter in {source or 'note'} is not a mapping; ignoring")
        return {}
    return {str(k): v for k, v in data.items()}


class VaultReader:
    """Scans a vault and hands back one VaultEntry per note.

    Entries for files whose mtime and size are unchanged since the previous
    scan are the same objects as before; anything else is rebuilt.
    """

    def __init__(self, vault_path: str | Path):
        self.vault_path = Path(vault_path)
        self._known: dict[str, tuple[float, int, VaultEntry]] = {}

    def iter_note_paths(self) -> list[Path]:
        if not self.vault_path.exists():
            return []
        notes = []
        for md in self.vault_path.rglob("*.md"):
            rel = md.relative_to(self.vault_path)
            if any(part.startswith(".") for part in rel.parts):
                continue
            notes.append(md)
        return sorted(notes, key=lambda p: p.relative_to(self.vault_path).as_posix())

    def read(self) -> list[VaultEntry]:
        entries = []
        seen: dict[str, tuple[float, int, VaultEntry]] = {}
        reused = 0

        for md in self.iter_note_paths():
            rel = md.relative_to(self.vault_path).as_posix()
            st = md.stat()
            known = self._known.get(rel)
            if known and known[0] == st.st_mtime and known[1] == st.st_size:
                entry = known[2]
                reused += 1
            else:
                entry = self._load(md, rel, st)
            seen[rel] = (st.st_mtime, st.st_size, entry)
            entries.append(entry)

        self._known = seen
        logger.debug(f"Read {len(entries)} notes from {self.vault_path} ({reused} unchanged)")
        return entries

    def _load(self, md: Path, rel: str, st) -> VaultEntry:
        text = md.read_text(encoding="utf-8", errors="replace")
        return VaultEntry(
            path=rel,
            basename=md.stem,
            ctime=datetime.fromtimestamp(getattr(st, "st_birthtime", st.st_ctime)),
            mtime=datetime.fromtimestamp(st.st_mtime),
            size=st.st_size,
            properties=parse_frontmatter(text, rel),
        )


def collect_property_ids(entries: list[VaultEntry]) -> dict[str, int]:
    """Frontmatter keys across the vault with the number of notes using each."""
    counts: dict[str, int] = {}
    for entry in entries:
        for key in entry.properties:
            counts[key] = counts.get(key, 0) + 1
    return dict(sorted(counts.items()))
