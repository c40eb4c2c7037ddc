"""
System Category Metadata

The shared ``assets/metadata.yml`` document groups system ids into
categories, each entry a single-key mapping of id to display name::

    linux:
      - debian: Debian
      - ubuntu: Ubuntu
    customized:
      - revyos: RevyOS
    bsd:
      - freebsd: FreeBSD
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .logging import get_logger


# Categories folded into another at load time
MERGED_CATEGORIES = {'customized': 'linux'}

# Categories present in the document but not describing systems
DROPPED_CATEGORIES = ('arches',)

UNCATEGORIZED = 'uncategorized'


@dataclass(frozen=True)
class SystemEntry:
    """One system listed in the metadata document."""
    id: str
    name: str


def normalize_categories(raw: Any) -> Dict[str, List[SystemEntry]]:
    """
    Normalize the parsed metadata document.

    Applies the merge and drop rules: ``customized`` entries are appended to
    ``linux`` and the ``customized`` key is removed; ``arches`` is dropped.

    Args:
        raw: Result of parsing the metadata document

    Returns:
        Ordered mapping of category name to its system entries
    """
    log = get_logger()
    categories: Dict[str, List[SystemEntry]] = {}

    if not isinstance(raw, dict):
        return categories

    for category, systems in raw.items():
        category = str(category)
        if category in DROPPED_CATEGORIES:
            continue

        entries = categories.setdefault(category, [])
        if not systems:
            continue
        if not isinstance(systems, list):
            log.warning(f"Metadata category '{category}' is not a list, skipping")
            continue

        for item in systems:
            if not isinstance(item, dict) or not item:
                log.warning(f"Malformed system entry in category '{category}': {item!r}")
                continue
            # Entries are single-key mappings; only the first pair is used
            system_id, name = next(iter(item.items()))
            entries.append(SystemEntry(id=str(system_id), name=str(name) if name else str(system_id)))

    for source, target in MERGED_CATEGORIES.items():
        if source in categories:
            merged = categories.pop(source)
            categories[target] = categories.get(target, []) + merged

    return categories


class SystemCategories:
    """Lookup over the normalized category document."""

    def __init__(self, categories: Optional[Dict[str, List[SystemEntry]]] = None):
        self.categories: Dict[str, List[SystemEntry]] = categories or {}
        self._names: Dict[str, str] = {}
        self._category_of: Dict[str, str] = {}
        for category, entries in self.categories.items():
            for entry in entries:
                self._names[entry.id] = entry.name
                self._category_of.setdefault(entry.id, category)

    @classmethod
    def from_document(cls, raw: Any) -> 'SystemCategories':
        return cls(normalize_categories(raw))

    def flatten(self) -> Dict[str, str]:
        """Flat system id -> display name mapping."""
        return dict(self._names)

    def display_name(self, system_id: str) -> str:
        """Display name for a system id, falling back to the id itself."""
        return self._names.get(system_id) or system_id

    def category_of(self, system_id: str) -> str:
        return self._category_of.get(system_id, UNCATEGORIZED)

    def names(self) -> List[str]:
        return list(self.categories.keys())

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            category: [{entry.id: entry.name} for entry in entries]
            for category, entries in self.categories.items()
        }
