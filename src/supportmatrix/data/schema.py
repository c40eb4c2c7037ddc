"""
Support Matrix Schema

Defines the records produced by the loaders and the aggregated structures
handed to the presentation layer. Raw records describe WHAT a single content
document says; aggregated structures index those records by board and by
system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .metadata import SystemCategories


# Placeholder for optional free-text board fields
NOT_SPECIFIED = "Not specified"


class ReportStatus(Enum):
    """Support grade of a (board, system) report"""
    GOOD = "GOOD"     # Fully working
    BASIC = "BASIC"   # Boots, basic functions work
    CFH = "CFH"       # Cannot find hardware
    CFT = "CFT"       # Cannot find time (not tested yet)
    WIP = "WIP"       # Work in progress
    CFI = "CFI"       # Cannot find image

    @classmethod
    def parse(cls, value: Any) -> 'ReportStatus':
        """
        Parse a status value, normalizing case and whitespace.

        Raises:
            ValueError: if the value is not one of the enumerated grades
        """
        if isinstance(value, cls):
            return value
        if value is None:
            raise ValueError("status is missing")
        return cls(str(value).strip().upper())


class SourceType(Enum):
    """Provenance of a report"""
    REPORT = "report"  # One markdown document per (board, system)
    OTHER = "other"    # Entry of a bulk others.yml list


def _parse_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    return date.fromisoformat(str(value).strip()[:10])


@dataclass
class BoardRecord:
    """
    Metadata of one board, taken from the front-matter of its README.

    Only ``vendor`` is required; the other free-text fields fall back to
    NOT_SPECIFIED.
    """
    dir: str                           # Unique slug, the board directory name
    vendor: str
    product: str = NOT_SPECIFIED
    cpu: str = NOT_SPECIFIED
    cpu_core: str = NOT_SPECIFIED
    ram: str = NOT_SPECIFIED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'dir': self.dir,
            'vendor': self.vendor,
            'product': self.product,
            'cpu': self.cpu,
            'cpu_core': self.cpu_core,
            'ram': self.ram,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BoardRecord':
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class ReportRecord:
    """
    A single compatibility report for a (board, system) pair.

    Identity is (board_id, sys, file_name). Bulk-sourced reports have no
    file_name and no last_update.
    """
    sys: str
    status: ReportStatus
    board_id: str
    sys_ver: Optional[str] = None
    sys_var: Optional[str] = None
    last_update: Optional[date] = None
    source_type: SourceType = SourceType.REPORT
    file_name: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str, Optional[str]]:
        return (self.board_id, self.sys, self.file_name)

    def board_link(self) -> Optional[str]:
        """Deep link to the report page under its board, if it has a document."""
        if self.file_name is None:
            return None
        return f"board/{self.board_id}/{self.sys}-{self.file_name}"

    def report_link(self) -> Optional[str]:
        """Deep link to the report in the flat report list."""
        if self.file_name is None:
            return None
        return f"reports/{self.board_id}-{self.sys}-{self.file_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sys': self.sys,
            'sys_ver': self.sys_ver,
            'sys_var': self.sys_var,
            'status': self.status.value,
            'last_update': self.last_update.isoformat() if self.last_update else None,
            'board_id': self.board_id,
            'source_type': self.source_type.value,
            'file_name': self.file_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReportRecord':
        data = data.copy()
        if 'status' in data:
            data['status'] = ReportStatus.parse(data['status'])
        if 'source_type' in data:
            data['source_type'] = SourceType(data['source_type'])
        if 'last_update' in data:
            data['last_update'] = _parse_date(data['last_update'])
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class Board:
    """A board together with its reports grouped by system id."""
    id: str
    meta: BoardRecord
    systems: Dict[str, List[ReportRecord]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'meta': self.meta.to_dict(),
            'systems': {
                sys_id: [r.to_dict() for r in reports]
                for sys_id, reports in self.systems.items()
            },
        }


@dataclass
class System:
    """An operating system with every report filed against it."""
    id: str
    name: str
    reports: List[ReportRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'reports': [r.to_dict() for r in self.reports],
        }


@dataclass
class SiteStatistics:
    """Site-wide statistics computed once per load"""
    total_boards: int
    total_systems: int
    total_reports: int
    status_counts: Dict[ReportStatus, int]
    boards_by_vendor: Dict[str, List[str]]
    systems_by_category: Dict[str, List[str]]
    last_updated: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_boards': self.total_boards,
            'total_systems': self.total_systems,
            'total_reports': self.total_reports,
            'status_counts': {s.value: n for s, n in self.status_counts.items()},
            'boards_by_vendor': self.boards_by_vendor,
            'systems_by_category': self.systems_by_category,
            'last_updated': self.last_updated.isoformat(),
        }


@dataclass
class SiteData:
    """
    Fully aggregated data handed to the presentation layer.

    Consumers must treat every container as read-only.
    """
    boards: Dict[str, Board]
    systems: Dict[str, System]
    all_reports: List[ReportRecord]
    statistics: SiteStatistics
    categories: Optional[SystemCategories] = None
    recognized_vendors: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.boards and not self.all_reports

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict for embedding into a page."""
        return {
            'boards': {bid: b.to_dict() for bid, b in self.boards.items()},
            'systems': {sid: s.to_dict() for sid, s in self.systems.items()},
            'all_reports': [r.to_dict() for r in self.all_reports],
            'statistics': self.statistics.to_dict(),
            'categories': self.categories.to_dict() if self.categories is not None else {},
            'recognized_vendors': list(self.recognized_vendors),
        }
