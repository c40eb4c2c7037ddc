"""
Record and consistency validation.

Per-record checks run on the provisional (untyped) dicts produced by the
loaders, before anything becomes a BoardRecord or ReportRecord. The
consistency check runs after aggregation and only reports problems.
"""

from collections import Counter
from typing import Any, Dict, Iterable, List, Mapping

from .schema import Board, ReportRecord, ReportStatus, System
from .logging import get_logger


REQUIRED_BOARD_FIELDS = ('vendor',)
REQUIRED_REPORT_FIELDS = ('sys', 'board_id', 'status')

VALID_STATUSES = frozenset(s.value for s in ReportStatus)


def validate_board(frontmatter: Mapping[str, Any]) -> List[str]:
    """
    Validate board front-matter.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    for name in REQUIRED_BOARD_FIELDS:
        if not frontmatter.get(name):
            errors.append(f"missing required field '{name}'")
    return errors


def validate_report(report: Mapping[str, Any]) -> List[str]:
    """
    Validate a provisional report record.

    Checks required fields and that the status is one of the enumerated
    grades. Statuses are expected to be upper-cased already; nothing is
    coerced here.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    for name in REQUIRED_REPORT_FIELDS:
        if not report.get(name):
            errors.append(f"missing required field '{name}'")

    status = report.get('status')
    if status and status not in VALID_STATUSES:
        errors.append(f"invalid status '{status}' (expected one of {sorted(VALID_STATUSES)})")

    return errors


def check_consistency(
    boards: Mapping[str, Board],
    systems: Mapping[str, System],
    reports: Iterable[ReportRecord],
) -> List[str]:
    """
    Check referential integrity of the aggregated structures.

    Flags reports whose board is unknown and systems whose indexed report
    count disagrees with a recount over the flat list. Issues are logged
    as one warning batch; nothing is raised.

    Args:
        boards: Board index
        systems: System index
        reports: Flat validated report list

    Returns:
        List of issue descriptions
    """
    issues: List[str] = []
    reports = list(reports)

    for report in reports:
        if report.board_id not in boards:
            issues.append(f"Report references non-existent board: {report.board_id}")

    recount = Counter(r.sys for r in reports)
    for system_id, system in systems.items():
        if len(system.reports) != recount.get(system_id, 0):
            issues.append(
                f"System {system_id} has inconsistent report count: "
                f"{len(system.reports)} vs {recount.get(system_id, 0)}"
            )

    for board_id, board in boards.items():
        for system_id, board_reports in board.systems.items():
            if any(r.board_id != board_id for r in board_reports):
                issues.append(f"Board {board_id} indexes a foreign report under {system_id}")

    if issues:
        get_logger().warning(
            f"Data consistency issues found ({len(issues)}):\n  " + "\n  ".join(issues)
        )

    return issues


def describe(record: Dict[str, Any]) -> str:
    """Short description of a provisional record for log messages."""
    parts = [f"{k}={record.get(k)!r}" for k in ('board_id', 'sys', 'file_name', 'status')]
    return ", ".join(parts)
