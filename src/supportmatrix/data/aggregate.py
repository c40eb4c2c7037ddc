"""
Report Aggregation

Merges the raw report streams, validates them and builds the board and
system indexes. Validation always runs before indexing so an invalid
report can never reach either index.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from .logging import get_logger
from .metadata import SystemCategories
from .schema import Board, BoardRecord, ReportRecord, ReportStatus, SourceType, System
from .validation import check_consistency, describe, validate_report


@dataclass
class RawDataCollection:
    """Everything the loaders produced, before validation."""
    boards: List[BoardRecord]
    markdown_reports: List[Dict[str, Any]]
    bulk_reports: List[Dict[str, Any]]
    categories: SystemCategories
    recognized_vendors: List[str] = field(default_factory=list)


@dataclass
class ProcessedData:
    """Validated reports and the indexes built over them."""
    boards: Dict[str, Board]
    systems: Dict[str, System]
    all_reports: List[ReportRecord]
    issues: List[str] = field(default_factory=list)


def tag_reports(
    markdown_reports: Iterable[Dict[str, Any]],
    bulk_reports: Iterable[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """Merge both report streams, tagging each entry with its provenance."""
    tagged = [{**r, 'source_type': SourceType.REPORT} for r in markdown_reports]
    tagged += [{**r, 'source_type': SourceType.OTHER} for r in bulk_reports]
    return tagged


def filter_valid_reports(reports: Iterable[Dict[str, Any]]) -> List[ReportRecord]:
    """
    Validate provisional reports and convert the valid ones.

    Invalid reports are dropped with a warning.

    Returns:
        Typed reports, in input order
    """
    log = get_logger()
    valid = []
    for raw in reports:
        errors = validate_report(raw)
        if errors:
            log.warning(f"Invalid report data ({describe(raw)}): {'; '.join(errors)}")
            continue
        valid.append(ReportRecord(
            sys=raw['sys'],
            status=ReportStatus(raw['status']),
            board_id=raw['board_id'],
            sys_ver=raw.get('sys_ver'),
            sys_var=raw.get('sys_var'),
            last_update=raw.get('last_update'),
            source_type=raw.get('source_type', SourceType.REPORT),
            file_name=raw.get('file_name'),
        ))
    return valid


def aggregate_to_boards(
    reports: Iterable[ReportRecord],
    board_records: Iterable[BoardRecord],
) -> Dict[str, Board]:
    """
    Index reports by board, then by system.

    If two board records share a ``dir``, the first one wins and the later
    ones are logged and ignored. Reports whose board is unknown are logged
    and left out of the index (they stay in the flat list).

    Returns:
        Mapping of board id to Board, in board discovery order
    """
    log = get_logger()
    boards: Dict[str, Board] = {}

    for record in board_records:
        if record.dir in boards:
            log.warning(f"Duplicate board '{record.dir}' ignored (first definition wins)")
            continue
        boards[record.dir] = Board(id=record.dir, meta=record)

    for report in reports:
        board = boards.get(report.board_id)
        if board is None:
            log.warning(f"Report references non-existent board: {report.board_id}")
            continue
        board.systems.setdefault(report.sys, []).append(report)

    return boards


def aggregate_to_systems(
    reports: Iterable[ReportRecord],
    categories: SystemCategories,
) -> Dict[str, System]:
    """Index reports by system id, resolving display names from metadata."""
    systems: Dict[str, System] = {}
    for report in reports:
        system = systems.get(report.sys)
        if system is None:
            system = System(id=report.sys, name=categories.display_name(report.sys))
            systems[report.sys] = system
        system.reports.append(report)
    return systems


def process_and_validate(raw: RawDataCollection) -> ProcessedData:
    """
    Validate and aggregate raw loader output.

    Order: tag, validate, index boards and systems, then run the
    post-aggregation consistency check (log only).
    """
    tagged = tag_reports(raw.markdown_reports, raw.bulk_reports)
    valid_reports = filter_valid_reports(tagged)

    boards = aggregate_to_boards(valid_reports, raw.boards)
    systems = aggregate_to_systems(valid_reports, raw.categories)

    issues = check_consistency(boards, systems, valid_reports)

    return ProcessedData(
        boards=boards,
        systems=systems,
        all_reports=valid_reports,
        issues=issues,
    )


def index_counts(data: ProcessedData) -> Tuple[int, int, int]:
    """(boards, systems, reports) counts, for log summaries."""
    return len(data.boards), len(data.systems), len(data.all_reports)
