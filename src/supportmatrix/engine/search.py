"""
Free-text search over boards and system entries.

Matching is a case-insensitive substring test against a fixed list of
fields per record. An empty or whitespace-only query matches everything.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from ..data.schema import Board, SiteData


@dataclass(frozen=True)
class SystemListing:
    """One (board, system) pair as listed in the systems overview."""
    sys: str
    board_dir: str
    name: str
    status: str


def normalize_query(query: str) -> str:
    return (query or "").strip().casefold()


def matches_query(fields: Iterable[str], query: str) -> bool:
    """
    True if the normalized query is a substring of any field.

    Args:
        fields: Searchable field values (None entries are ignored)
        query: Raw user query
    """
    needle = normalize_query(query)
    if not needle:
        return True
    return any(needle in value.casefold() for value in fields if value)


def board_search_fields(board: Board, site_data: SiteData) -> List[str]:
    """
    Searchable fields of a board: product, cpu, cpu_core and the ids and
    display names of every system with a report on it.
    """
    fields = [board.meta.product, board.meta.cpu, board.meta.cpu_core]
    for system_id in board.systems:
        fields.append(system_id)
        system = site_data.systems.get(system_id)
        if system is not None:
            fields.append(system.name)
    return fields


def filter_boards(boards: Sequence[Board], site_data: SiteData, query: str) -> List[Board]:
    if not normalize_query(query):
        return list(boards)
    return [b for b in boards if matches_query(board_search_fields(b, site_data), query)]


def system_entries(site_data: SiteData) -> List[SystemListing]:
    """Every (board, system) pair with its first report's status."""
    entries = []
    for board in site_data.boards.values():
        for system_id, reports in board.systems.items():
            system = site_data.systems.get(system_id)
            entries.append(SystemListing(
                sys=system_id,
                board_dir=board.id,
                name=system.name if system is not None else system_id,
                status=reports[0].status.value,
            ))
    return entries


def filter_system_entries(entries: Sequence[SystemListing], query: str) -> List[SystemListing]:
    if not normalize_query(query):
        return list(entries)
    return [e for e in entries if matches_query((e.sys, e.name, e.board_dir), query)]
