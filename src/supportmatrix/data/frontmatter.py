"""
Front-matter extraction for content documents.

A document starts with a YAML block fenced by ``---`` lines::

    ---
    sys: debian
    status: good
    ---
    # Body
"""

import re
from typing import Any, Dict, Optional

import yaml

from .logging import get_logger


FRONTMATTER_PATTERN = re.compile(r'^---[ \t]*\r?\n(.*?)\r?\n---', re.DOTALL)


def extract_frontmatter(content: str, source: str = "<document>") -> Optional[Dict[str, Any]]:
    """
    Extract and parse the front-matter block of a document.

    Empty-string values are normalized to None. A missing block is not an
    error; a malformed one is logged.

    Args:
        content: Raw document text
        source: Name used in log messages

    Returns:
        Parsed key/value mapping, or None if the document has no usable
        front-matter
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return None

    try:
        frontmatter = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        get_logger().error(f"Error parsing frontmatter YAML in {source}: {e}")
        return None

    if frontmatter is None:
        return {}
    if not isinstance(frontmatter, dict):
        get_logger().error(f"Frontmatter in {source} is not a mapping")
        return None

    return {key: (None if value == "" else value) for key, value in frontmatter.items()}
