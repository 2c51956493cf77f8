"""A markdown note as seen by the render pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Built-in property ids and the attribute each reads.
FILE_FIELDS = {
    "file.name": "basename",
    "file.path": "path",
    "file.ctime": "ctime",
    "file.mtime": "mtime",
}


@dataclass(eq=False)
class VaultEntry:
    """One note. Hashes by identity, so a re-read file is a different entry."""
    path: str
    basename: str
    ctime: datetime
    mtime: datetime
    size: int = 0
    properties: dict[str, Any] = field(default_factory=dict)

    def get_property(self, property_id: str) -> Any:
        if property_id in FILE_FIELDS:
            return getattr(self, FILE_FIELDS[property_id])
        if property_id.startswith("note."):
            property_id = property_id[len("note."):]
        return self.properties.get(property_id)
