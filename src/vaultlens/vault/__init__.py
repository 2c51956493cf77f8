"""Markdown vault adapter: entries, reader, writer."""

from .entry import VaultEntry
from .reader import VaultReader, collect_property_ids, parse_frontmatter
from .writer import FrontmatterWriter, parse_value

__all__ = [
    "FrontmatterWriter",
    "VaultEntry",
    "VaultReader",
    "collect_property_ids",
    "parse_frontmatter",
    "parse_value",
]
