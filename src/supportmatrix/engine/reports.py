"""
Report list filtering and sorting.

Each report is joined with its board and system names, then filtered by
multi-select cpu/vendor/system/status filters and an optional date range.
An empty filter means "any". Reports without a date are never excluded by
the date range.
"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, FrozenSet, List, Optional, Sequence

from ..data.schema import NOT_SPECIFIED, ReportRecord, SiteData


SORTABLE_COLUMNS = (
    'board_product', 'cpu', 'vendor', 'system_name',
    'sys_ver', 'sys_var', 'status', 'last_update',
)


@dataclass(frozen=True)
class EnrichedReport:
    """A report with the board and system names shown next to it."""
    report: ReportRecord
    board_product: str
    cpu: str
    vendor: str
    system_name: str

    @property
    def link(self) -> Optional[str]:
        return self.report.report_link()


@dataclass(frozen=True)
class ReportFilterState:
    cpus: FrozenSet[str] = frozenset()
    vendors: FrozenSet[str] = frozenset()
    systems: FrozenSet[str] = frozenset()
    statuses: FrozenSet[str] = frozenset()
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    sort_column: str = 'last_update'
    descending: bool = True          # Latest reports first

    @property
    def has_active_filters(self) -> bool:
        return bool(
            self.cpus or self.vendors or self.systems or self.statuses
            or self.date_from or self.date_to
        )


@dataclass
class ReportListView:
    reports: List[EnrichedReport]
    total: int

    @property
    def has_results(self) -> bool:
        return bool(self.reports)


@dataclass(frozen=True)
class FilterOption:
    value: str
    label: str


def enrich_reports(site_data: SiteData) -> List[EnrichedReport]:
    """Join every report in the flat list with its board and system names."""
    enriched = []
    for report in site_data.all_reports:
        board = site_data.boards.get(report.board_id)
        system = site_data.systems.get(report.sys)
        enriched.append(EnrichedReport(
            report=report,
            board_product=board.meta.product if board else report.board_id,
            cpu=board.meta.cpu if board else NOT_SPECIFIED,
            vendor=board.meta.vendor if board else NOT_SPECIFIED,
            system_name=system.name if system else report.sys,
        ))
    return enriched


def _in_date_range(report: ReportRecord, state: ReportFilterState) -> bool:
    if state.date_from is None or state.date_to is None or report.last_update is None:
        return True
    return state.date_from <= report.last_update <= state.date_to


def matches_filters(item: EnrichedReport, state: ReportFilterState) -> bool:
    report = item.report
    if state.cpus and item.cpu not in state.cpus:
        return False
    if state.vendors and item.vendor not in state.vendors:
        return False
    if state.systems and report.sys not in state.systems:
        return False
    if state.statuses and report.status.value not in state.statuses:
        return False
    return _in_date_range(report, state)


def _sort_value(item: EnrichedReport, column: str):
    if column == 'last_update':
        return item.report.last_update
    if column == 'status':
        return item.report.status.value
    if column in ('sys_ver', 'sys_var'):
        return getattr(item.report, column)
    return getattr(item, column)


def sort_reports(items: Sequence[EnrichedReport], column: str, descending: bool) -> List[EnrichedReport]:
    """
    Stable sort on one column. Missing values always go last, whatever
    the direction.

    Raises:
        ValueError: if the column is not sortable
    """
    if column not in SORTABLE_COLUMNS:
        raise ValueError(f"Column '{column}' is not sortable")

    present = [i for i in items if _sort_value(i, column) is not None]
    missing = [i for i in items if _sort_value(i, column) is None]

    if column == 'last_update':
        key = lambda i: _sort_value(i, column)
    else:
        key = lambda i: str(_sort_value(i, column)).casefold()

    return sorted(present, key=key, reverse=descending) + missing


def derive_report_list(reports: Sequence[EnrichedReport], state: ReportFilterState) -> ReportListView:
    """Filter then sort; depends only on (reports, state)."""
    filtered = [r for r in reports if matches_filters(r, state)]
    return ReportListView(
        reports=sort_reports(filtered, state.sort_column, state.descending),
        total=len(reports),
    )


def filter_options(reports: Sequence[EnrichedReport], site_data: SiteData) -> Dict[str, List[FilterOption]]:
    """
    Options for the multi-select filters.

    cpu, vendor and status options come from the reports; system options
    list every system in the metadata document, sorted by display name.
    """
    def distinct(values):
        return [FilterOption(value=v, label=v) for v in sorted(set(values))]

    names = site_data.categories.flatten() if site_data.categories is not None else {}
    systems = sorted(names.items(), key=lambda pair: pair[1].casefold())

    return {
        'cpus': distinct(r.cpu for r in reports),
        'vendors': distinct(r.vendor for r in reports),
        'systems': [FilterOption(value=sid, label=name) for sid, name in systems],
        'statuses': distinct(r.report.status.value for r in reports),
    }
