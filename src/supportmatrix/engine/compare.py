"""
Support Matrix Comparison

Builds one board x system status grid per metadata category and derives
the visible grid for a compare selection.

Compare mode restricts rows to a selected board subset and columns to a
selected system subset (an empty selection means no restriction). With
``hide_identical`` and at least two selected systems in view, a row is
hidden when its statuses across those systems are uniform:

    statuses (A, B)      row
    -----------------    ------
    GOOD,  GOOD          hidden
    GOOD,  BASIC         shown
    GOOD,  -             shown   (partial support is never hidden)
    -,     -             hidden  (nothing to compare)
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence

from ..data.metadata import SystemEntry
from ..data.schema import Board, BoardRecord, ReportRecord, SiteData


BOARD_COLUMN = "board"


@dataclass(frozen=True)
class StatusCell:
    """Status of one board for one system, with the report it came from."""
    status: Optional[str] = None
    report: Optional[ReportRecord] = None

    @property
    def link(self) -> Optional[str]:
        """Deep link to the report document, if the report has one."""
        if self.report is None:
            return None
        return self.report.board_link()


@dataclass
class MatrixRow:
    board: BoardRecord
    cells: Dict[str, StatusCell]

    def status(self, system_id: str) -> Optional[str]:
        cell = self.cells.get(system_id)
        return cell.status if cell is not None else None


@dataclass
class CategoryMatrix:
    """Status grid of one category (e.g. linux, bsd, rtos)."""
    category: str
    columns: List[SystemEntry]
    rows: List[MatrixRow]


@dataclass(frozen=True)
class CompareSelection:
    boards: FrozenSet[str] = frozenset()
    systems: FrozenSet[str] = frozenset()
    hide_identical: bool = False

    @property
    def active(self) -> bool:
        return bool(self.boards or self.systems)


@dataclass(frozen=True)
class MatrixState:
    """User inputs of one matrix tab."""
    sort_column: str = BOARD_COLUMN
    descending: bool = False
    compare: CompareSelection = field(default_factory=CompareSelection)


@dataclass
class MatrixView:
    category: str
    columns: List[SystemEntry]
    rows: List[MatrixRow]

    @property
    def has_results(self) -> bool:
        return bool(self.rows)


def _first_report(board: Board, system_id: str) -> Optional[ReportRecord]:
    """First report of a board for a system id, compared case-insensitively."""
    wanted = system_id.casefold()
    for sys_id, reports in board.systems.items():
        if sys_id.casefold() == wanted and reports:
            return reports[0]
    return None


def build_matrix(site_data: SiteData, category: str, columns: Sequence[SystemEntry]) -> CategoryMatrix:
    """
    Build the status grid of one category.

    Boards without any status in the category are left out.
    """
    rows = []
    for board in site_data.boards.values():
        cells = {}
        for column in columns:
            report = _first_report(board, column.id)
            cells[column.id] = StatusCell(
                status=report.status.value if report else None,
                report=report,
            )
        if any(cell.status for cell in cells.values()):
            rows.append(MatrixRow(board=board.meta, cells=cells))
    return CategoryMatrix(category=category, columns=list(columns), rows=rows)


def build_matrices(site_data: SiteData) -> List[CategoryMatrix]:
    """One CategoryMatrix per metadata category, in document order."""
    if site_data.categories is None:
        return []
    return [
        build_matrix(site_data, category, columns)
        for category, columns in site_data.categories.categories.items()
    ]


def is_uniform(row: MatrixRow, system_ids: Sequence[str]) -> bool:
    """
    True if every status across system_ids is present and identical, or
    if none is present at all.
    """
    statuses = [row.status(system_id) for system_id in system_ids]
    present = [s for s in statuses if s]
    if not present:
        return True
    return len(present) == len(statuses) and len(set(present)) == 1


def should_hide(row: MatrixRow, compare: CompareSelection, visible_system_ids: Sequence[str]) -> bool:
    """
    Whether "hide identical" hides this row.

    Only applies when at least two of the selected systems are columns of
    the grid being shown.
    """
    if not compare.hide_identical or len(compare.systems) < 2:
        return False
    selected = [s for s in visible_system_ids if s in compare.systems]
    if len(selected) < 2:
        return False
    return is_uniform(row, selected)


def _sort_rows(rows: List[MatrixRow], column: str, descending: bool) -> List[MatrixRow]:
    if column == BOARD_COLUMN:
        key = lambda row: row.board.product.casefold()
    else:
        key = lambda row: (row.status(column) or "").casefold()
    return sorted(rows, key=key, reverse=descending)


def derive_matrix_view(matrix: CategoryMatrix, state: MatrixState) -> MatrixView:
    """
    Apply compare selection, "hide identical" and sorting to a grid.

    A pure function of (matrix, state). A system selection only restricts
    columns; rows are removed by the board selection and by "hide identical".
    """
    compare = state.compare

    columns = [c for c in matrix.columns if not compare.systems or c.id in compare.systems]
    visible_ids = [c.id for c in columns]

    rows = []
    for row in matrix.rows:
        if compare.boards and row.board.dir not in compare.boards:
            continue
        if should_hide(row, compare, visible_ids):
            continue
        rows.append(row)

    sort_column = state.sort_column
    if sort_column != BOARD_COLUMN and sort_column not in visible_ids:
        sort_column = BOARD_COLUMN

    return MatrixView(
        category=matrix.category,
        columns=columns,
        rows=_sort_rows(rows, sort_column, state.descending),
    )
