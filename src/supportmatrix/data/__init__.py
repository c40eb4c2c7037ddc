"""
Support Matrix Data Module

Loads the support-matrix content tree, validates and aggregates it, and
caches the result for the presentation layer.

Usage:
    from supportmatrix.data import get_cache

    site_data = await get_cache().get()
    board = site_data.boards["licheepi_4a"]
"""

from .schema import (
    NOT_SPECIFIED,
    ReportStatus,
    SourceType,
    BoardRecord,
    ReportRecord,
    Board,
    System,
    SiteStatistics,
    SiteData,
)
from .errors import SiteDataError, ContentRootError, MetadataError
from .config import ContentConfig, get_config
from .frontmatter import extract_frontmatter
from .metadata import SystemEntry, SystemCategories, normalize_categories
from .validation import validate_board, validate_report, check_consistency
from .aggregate import (
    RawDataCollection,
    ProcessedData,
    tag_reports,
    filter_valid_reports,
    aggregate_to_boards,
    aggregate_to_systems,
    process_and_validate,
)
from .statistics import compute_statistics
from .pipeline import load_raw_data, load_site_data
from .cache import (
    CacheState,
    LoadStatus,
    LoadResult,
    SiteDataCache,
    get_cache,
    reset_cache,
)

__all__ = [
    # Records and aggregated types
    'NOT_SPECIFIED',
    'ReportStatus',
    'SourceType',
    'BoardRecord',
    'ReportRecord',
    'Board',
    'System',
    'SiteStatistics',
    'SiteData',
    # Errors
    'SiteDataError',
    'ContentRootError',
    'MetadataError',
    # Configuration
    'ContentConfig',
    'get_config',
    # Parsing and metadata
    'extract_frontmatter',
    'SystemEntry',
    'SystemCategories',
    'normalize_categories',
    # Validation and aggregation
    'validate_board',
    'validate_report',
    'check_consistency',
    'RawDataCollection',
    'ProcessedData',
    'tag_reports',
    'filter_valid_reports',
    'aggregate_to_boards',
    'aggregate_to_systems',
    'process_and_validate',
    'compute_statistics',
    # Pipeline and cache
    'load_raw_data',
    'load_site_data',
    'CacheState',
    'LoadStatus',
    'LoadResult',
    'SiteDataCache',
    'get_cache',
    'reset_cache',
]
