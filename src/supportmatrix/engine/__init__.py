"""
Filter / sort / compare engine.

Derives the views shown on the site from an already aggregated SiteData.
Every derivation is a pure function of (data, state); state objects are
frozen dataclasses.
"""

from .search import (
    SystemListing,
    normalize_query,
    matches_query,
    board_search_fields,
    filter_boards,
    system_entries,
    filter_system_entries,
)
from .sorting import (
    SortDirection,
    Comparator,
    FieldSort,
    CustomSort,
    SortOption,
    SortContext,
    BOARD_SORT_OPTIONS,
    SYSTEM_SORT_OPTIONS,
    find_option,
    sort_items,
)
from .overview import OverviewMode, OverviewState, OverviewView, derive_overview
from .compare import (
    StatusCell,
    MatrixRow,
    CategoryMatrix,
    CompareSelection,
    MatrixState,
    MatrixView,
    build_matrix,
    build_matrices,
    is_uniform,
    should_hide,
    derive_matrix_view,
)
from .reports import (
    EnrichedReport,
    ReportFilterState,
    ReportListView,
    FilterOption,
    enrich_reports,
    sort_reports,
    derive_report_list,
    filter_options,
)

__all__ = [
    # Search
    'SystemListing',
    'normalize_query',
    'matches_query',
    'board_search_fields',
    'filter_boards',
    'system_entries',
    'filter_system_entries',
    # Sorting
    'SortDirection',
    'Comparator',
    'FieldSort',
    'CustomSort',
    'SortOption',
    'SortContext',
    'BOARD_SORT_OPTIONS',
    'SYSTEM_SORT_OPTIONS',
    'find_option',
    'sort_items',
    # Overview
    'OverviewMode',
    'OverviewState',
    'OverviewView',
    'derive_overview',
    # Comparison matrix
    'StatusCell',
    'MatrixRow',
    'CategoryMatrix',
    'CompareSelection',
    'MatrixState',
    'MatrixView',
    'build_matrix',
    'build_matrices',
    'is_uniform',
    'should_hide',
    'derive_matrix_view',
    # Report list
    'EnrichedReport',
    'ReportFilterState',
    'ReportListView',
    'FilterOption',
    'enrich_reports',
    'sort_reports',
    'derive_report_list',
    'filter_options',
]
