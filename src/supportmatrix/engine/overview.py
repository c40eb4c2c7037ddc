"""
Boards / systems overview.

The overview lists every board as a card and, in the systems view, every
(board, system) pair. One search box and one sort dropdown drive both
lists. A board sort option orders boards and leaves system entries in the
default system order; a system sort option does the reverse.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from ..data.schema import Board, SiteData
from .search import SystemListing, filter_boards, filter_system_entries, system_entries
from .sorting import (
    BOARD_SORT_OPTIONS,
    SYSTEM_SORT_OPTIONS,
    SortContext,
    SortOption,
    find_option,
    sort_items,
)


class OverviewMode(Enum):
    BOARDS = "boards"
    SYSTEMS = "systems"


@dataclass(frozen=True)
class OverviewState:
    """User inputs of the overview page."""
    query: str = ""
    sort_id: str = BOARD_SORT_OPTIONS[0].id
    mode: OverviewMode = OverviewMode.BOARDS


@dataclass
class OverviewView:
    boards: List[Board]
    systems: List[SystemListing]
    sort: SortOption
    mode: OverviewMode

    @property
    def has_results(self) -> bool:
        if self.mode is OverviewMode.BOARDS:
            return bool(self.boards)
        return bool(self.systems)


def all_sort_options() -> Sequence[SortOption]:
    return BOARD_SORT_OPTIONS + SYSTEM_SORT_OPTIONS


def default_sort_for(mode: OverviewMode) -> SortOption:
    if mode is OverviewMode.BOARDS:
        return BOARD_SORT_OPTIONS[0]
    return SYSTEM_SORT_OPTIONS[0]


def derive_overview(site_data: SiteData, state: OverviewState) -> OverviewView:
    """
    Filter and sort boards and system entries for the given state.

    Always recomputed from the full data set, so the result depends only
    on (site_data, state).

    Raises:
        KeyError: if state.sort_id names no known option
    """
    option = find_option(state.sort_id, all_sort_options())
    context = SortContext.from_vendors(site_data.recognized_vendors)

    boards = filter_boards(list(site_data.boards.values()), site_data, state.query)
    systems = filter_system_entries(system_entries(site_data), state.query)

    if option in BOARD_SORT_OPTIONS:
        board_option, system_option = option, SYSTEM_SORT_OPTIONS[0]
    else:
        board_option, system_option = BOARD_SORT_OPTIONS[0], option

    return OverviewView(
        boards=sort_items(boards, board_option, context),
        systems=sort_items(systems, system_option, context),
        sort=option,
        mode=state.mode,
    )
