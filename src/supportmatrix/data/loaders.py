"""
Raw Source Loaders

Enumerate the content tree and turn documents into raw records:

    support-matrix/
    ├── assets/
    │   └── metadata.yml                 # system categories (shared)
    ├── licheepi_4a/
    │   ├── README.md                    # board front-matter
    │   ├── others.yml                   # bulk report list
    │   ├── debian/
    │   │   ├── README.md                # one report per document
    │   │   └── README_zh.md             # translation, skipped
    │   └── openeuler/
    │       └── 23.09.md
    └── report-template/                 # never a board

Every loader is a coroutine. Each file is read in its own task and the
tasks are joined with an all-settled barrier, so a single unreadable or
malformed file is logged and skipped without affecting its siblings.
"""

import asyncio
from datetime import date, datetime
from pathlib import Path
from typing import Any, Awaitable, Dict, List, Optional

import yaml

from .config import ContentConfig
from .errors import ContentRootError, MetadataError
from .frontmatter import extract_frontmatter
from .logging import get_logger
from .metadata import SystemCategories
from .schema import NOT_SPECIFIED, BoardRecord
from .validation import validate_board


async def read_text(path: Path) -> str:
    """Read a UTF-8 document without blocking the event loop."""
    return await asyncio.to_thread(path.read_text, encoding='utf-8')


async def gather_settled(tasks: List[Awaitable[Any]], label: str) -> List[Any]:
    """
    Await all tasks and keep only successful, non-None results.

    Failures that escaped a task are logged; they never cancel siblings.
    """
    results = await asyncio.gather(*tasks, return_exceptions=True)
    settled = []
    for result in results:
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            get_logger().error(f"Unhandled error while loading {label}: {result}")
            continue
        if result is not None:
            settled.append(result)
    return settled


def _require_root(config: ContentConfig) -> Path:
    root = config.content_root
    if not root.is_dir():
        raise ContentRootError(f"Content root is not a directory: {root}")
    return root


def _text(value: Any) -> str:
    """Free-text board field with the placeholder default."""
    if value is None:
        return NOT_SPECIFIED
    return str(value).strip() or NOT_SPECIFIED


def _optional(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _last_update(value: Any, source: str) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        get_logger().warning(f"Unparsable last_update {value!r} in {source}")
        return None


# =============================================================================
# BOARDS
# =============================================================================

async def _load_board(path: Path) -> Optional[BoardRecord]:
    board_dir = path.parent.name
    log = get_logger()
    try:
        content = await read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        log.error(f"Error loading board data for {board_dir}: {e}")
        return None

    frontmatter = extract_frontmatter(content, source=str(path))
    if frontmatter is None or validate_board(frontmatter):
        log.warning(f"Invalid frontmatter for board {board_dir}")
        return None

    return BoardRecord(
        dir=board_dir,
        vendor=str(frontmatter['vendor']).strip(),
        product=_text(frontmatter.get('product')),
        cpu=_text(frontmatter.get('cpu')),
        cpu_core=_text(frontmatter.get('cpu_core')),
        ram=_text(frontmatter.get('ram')),
    )


async def load_boards(config: ContentConfig) -> List[BoardRecord]:
    """
    Load board metadata from ``<board>/README.md`` documents.

    Boards without a vendor are dropped with a warning.

    Returns:
        Board records in directory-name order
    """
    root = _require_root(config)
    paths = [
        p for p in sorted(root.glob(f"*/{config.board_document}"))
        if p.parent.name not in config.skip_dirs
    ]
    return await gather_settled([_load_board(p) for p in paths], "boards")


# =============================================================================
# MARKDOWN REPORTS
# =============================================================================

async def _load_markdown_report(path: Path) -> Optional[Dict[str, Any]]:
    board_id = path.parent.parent.name
    log = get_logger()
    try:
        content = await read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        log.error(f"Error loading report from {path}: {e}")
        return None

    frontmatter = extract_frontmatter(content, source=str(path))
    if not frontmatter or not frontmatter.get('sys') or not frontmatter.get('status'):
        log.warning(f"Invalid frontmatter for {path}")
        return None

    return {
        'sys': str(frontmatter['sys']).strip(),
        'sys_ver': _optional(frontmatter.get('sys_ver')),
        'sys_var': _optional(frontmatter.get('sys_var')),
        'status': str(frontmatter['status']).strip().upper(),
        'last_update': _last_update(frontmatter.get('last_update'), str(path)),
        'board_id': board_id,
        'file_name': path.stem,
    }


async def load_markdown_reports(config: ContentConfig) -> List[Dict[str, Any]]:
    """
    Load reports from ``<board>/<system>/<file>.md`` documents.

    Translations (file stems ending with the secondary-language suffix)
    are skipped. Reports without ``sys`` or ``status`` are dropped with a
    warning.

    Returns:
        Provisional report dicts (not yet validated against the enumeration)
    """
    root = _require_root(config)
    paths = [
        p for p in sorted(root.glob("*/*/*.md"))
        if p.parent.parent.name not in config.skip_dirs
        and not p.stem.endswith(config.secondary_language_suffix)
    ]
    return await gather_settled([_load_markdown_report(p) for p in paths], "markdown reports")


# =============================================================================
# BULK YAML REPORTS
# =============================================================================

async def _load_bulk_file(path: Path) -> List[Dict[str, Any]]:
    board_id = path.parent.name
    log = get_logger()
    try:
        content = await read_text(path)
        parsed = yaml.safe_load(content)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        log.error(f"Error loading {path.name} from {path}: {e}")
        return []

    if not isinstance(parsed, list):
        log.warning(f"Invalid YAML format in {path}")
        return []

    reports = []
    for index, item in enumerate(parsed):
        if not isinstance(item, dict) or not item.get('sys') or not item.get('status'):
            log.warning(f"Invalid entry #{index} in {path}: {item!r}")
            continue
        reports.append({
            'sys': str(item['sys']).strip(),
            'sys_ver': _optional(item.get('sys_ver')),
            'sys_var': _optional(item.get('sys_var')),
            'status': str(item['status']).strip().upper(),
            'last_update': None,
            'board_id': board_id,
            'file_name': None,
        })
    return reports


async def load_bulk_reports(config: ContentConfig) -> List[Dict[str, Any]]:
    """
    Load reports from ``<board>/others.yml`` sequences.

    These reports carry no date and no document, so ``last_update`` and
    ``file_name`` are always None.
    """
    root = _require_root(config)
    paths = [
        p for p in sorted(root.glob(f"*/{config.bulk_document}"))
        if p.parent.name not in config.skip_dirs
    ]
    per_file = await gather_settled([_load_bulk_file(p) for p in paths], "bulk reports")
    return [report for reports in per_file for report in reports]


# =============================================================================
# SHARED DOCUMENTS
# =============================================================================

async def load_system_metadata(config: ContentConfig) -> SystemCategories:
    """
    Load the shared system category document.

    Raises:
        MetadataError: if the document is missing or cannot be parsed.
            Without it no system can be named, so the whole load fails.
    """
    path = config.metadata_path
    if not path.is_file():
        raise MetadataError(f"System metadata not found: {path}")

    try:
        content = await read_text(path)
        raw = yaml.safe_load(content)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise MetadataError(f"Error loading system metadata {path}: {e}") from e

    if raw is not None and not isinstance(raw, dict):
        raise MetadataError(f"System metadata {path} is not a mapping")

    return SystemCategories.from_document(raw or {})


async def load_recognized_vendors(config: ContentConfig) -> List[str]:
    """
    List vendor names known to the package index.

    The names are the stems of ``*.toml`` files in the device index
    directory. A missing directory yields an empty list.
    """
    index = config.device_index
    if index is None:
        return []
    if not index.is_dir():
        get_logger().warning(f"Device index not found: {index}")
        return []

    paths = await asyncio.to_thread(lambda: sorted(index.glob("*.toml")))
    return [p.stem for p in paths]
