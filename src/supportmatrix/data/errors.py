"""
Site Data Errors

Exceptions raised when the whole data pipeline cannot proceed.
Per-document problems are never raised; they are logged and the
document is excluded.
"""


class SiteDataError(Exception):
    """Base class for pipeline-fatal failures."""


class ContentRootError(SiteDataError):
    """The configured content root does not exist or is not a directory."""


class MetadataError(SiteDataError):
    """The shared system metadata document is missing or unreadable."""
