"""
Site data pipeline.

Three phases:
1. Load raw data from every source concurrently (fan-out), waiting for all
   loaders to settle before going on (fan-in)
2. Validate and aggregate
3. Compute statistics and assemble SiteData

Only phase 1 suspends; phases 2 and 3 are plain synchronous work.
"""

import asyncio
from typing import Optional

from .aggregate import ProcessedData, RawDataCollection, index_counts, process_and_validate
from .config import ContentConfig, get_config
from .loaders import (
    load_boards,
    load_bulk_reports,
    load_markdown_reports,
    load_recognized_vendors,
    load_system_metadata,
)
from .logging import get_logger
from .schema import SiteData
from .statistics import compute_statistics


async def load_raw_data(config: ContentConfig) -> RawDataCollection:
    """
    Phase 1: run every loader and wait for all of them.

    A loader-level failure (e.g. unreadable metadata) is re-raised only
    after every other loader has settled, so no aggregation ever starts
    on a partial load. The first failure is raised; any others are logged.
    """
    results = await asyncio.gather(
        load_boards(config),
        load_markdown_reports(config),
        load_bulk_reports(config),
        load_system_metadata(config),
        load_recognized_vendors(config),
        return_exceptions=True,
    )
    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        for failure in failures[1:]:
            get_logger().error(f"Additional loader failure: {failure}")
        raise failures[0]

    boards, markdown_reports, bulk_reports, categories, vendors = results
    return RawDataCollection(
        boards=boards,
        markdown_reports=markdown_reports,
        bulk_reports=bulk_reports,
        categories=categories,
        recognized_vendors=vendors,
    )


def build_site_data(raw: RawDataCollection, processed: ProcessedData) -> SiteData:
    """Phase 3: statistics and the final structure."""
    statistics = compute_statistics(processed.all_reports, processed.boards, raw.categories)
    return SiteData(
        boards=processed.boards,
        systems=processed.systems,
        all_reports=processed.all_reports,
        statistics=statistics,
        categories=raw.categories,
        recognized_vendors=raw.recognized_vendors,
    )


async def load_site_data(config: Optional[ContentConfig] = None) -> SiteData:
    """
    Run the full pipeline once, without caching.

    Use SiteDataCache.get() for cached access.

    Raises:
        SiteDataError: (or any unexpected exception) when the load as a
            whole cannot complete
    """
    config = config or get_config()
    log = get_logger()
    log.section(f"Loading site data from {config.content_root}")

    try:
        raw = await load_raw_data(config)
        processed = process_and_validate(raw)
        site_data = build_site_data(raw, processed)
    except Exception as e:
        log.error(f"Error loading site data: {e}")
        raise

    boards, systems, reports = index_counts(processed)
    log.summary(
        "Loaded site data",
        boards=boards,
        systems=systems,
        reports=reports,
        consistency_issues=len(processed.issues),
    )
    return site_data
