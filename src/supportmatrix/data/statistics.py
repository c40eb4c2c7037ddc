"""
Site statistics.

Pure functions over the aggregated indexes; no I/O.
"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional

from .metadata import SystemCategories
from .schema import Board, ReportRecord, ReportStatus, SiteStatistics


def count_by_status(reports: Iterable[ReportRecord]) -> Dict[ReportStatus, int]:
    """Histogram of report statuses, with every grade present."""
    counts = {status: 0 for status in ReportStatus}
    for report in reports:
        counts[report.status] += 1
    return counts


def group_boards_by_vendor(boards: Mapping[str, Board]) -> Dict[str, List[str]]:
    groups = defaultdict(list)
    for board in boards.values():
        groups[board.meta.vendor].append(board.id)
    return {vendor: sorted(ids) for vendor, ids in sorted(groups.items())}


def group_systems_by_category(
    system_ids: Iterable[str],
    categories: SystemCategories,
) -> Dict[str, List[str]]:
    groups = defaultdict(set)
    for system_id in system_ids:
        groups[categories.category_of(system_id)].add(system_id)
    return {category: sorted(ids) for category, ids in sorted(groups.items())}


def compute_statistics(
    reports: List[ReportRecord],
    boards: Mapping[str, Board],
    categories: Optional[SystemCategories] = None,
    now: Optional[datetime] = None,
) -> SiteStatistics:
    """
    Compute site-wide statistics.

    Args:
        reports: Flat validated report list
        boards: Board index
        categories: System categories (systems absent from it are
            grouped as uncategorized)
        now: Timestamp to record; defaults to the current time

    Returns:
        SiteStatistics
    """
    categories = categories or SystemCategories()
    unique_systems = {r.sys for r in reports}

    return SiteStatistics(
        total_boards=len(boards),
        total_systems=len(unique_systems),
        total_reports=len(reports),
        status_counts=count_by_status(reports),
        boards_by_vendor=group_boards_by_vendor(boards),
        systems_by_category=group_systems_by_category(unique_systems, categories),
        last_updated=now or datetime.now(),
    )
