"""Date anchor resolution for entries without inherent ordering."""

from .patterns import DATE_PATTERNS, date_from_iso_week, parse_filename_date
from .resolver import (
    DEFAULT_SOURCES,
    DateAnchorResolver,
    filename_source,
    find_date_properties,
    metadata_source,
    property_source,
)

__all__ = [
    "DATE_PATTERNS",
    "DEFAULT_SOURCES",
    "DateAnchorResolver",
    "date_from_iso_week",
    "filename_source",
    "find_date_properties",
    "metadata_source",
    "parse_filename_date",
    "property_source",
]
