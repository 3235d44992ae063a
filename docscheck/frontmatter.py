"""
YAML frontmatter extraction and checks.

Documentation files open with a YAML block between ``---`` markers. The
check here enforces which keys must or must not be present for a given
layout and returns the page subcategory, which later drives the region
check ignore-list.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import yaml

from docscheck.errors import FrontMatterError

logger = logging.getLogger(__name__)

# Match frontmatter block between --- markers (LF or CRLF line endings)
FRONTMATTER_PATTERN = re.compile(r'^---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|$)', re.DOTALL)


def split_frontmatter(content: str) -> Tuple[Optional[str], str]:
    """
    Split content into its raw YAML frontmatter block and the markdown body.

    The body keeps one newline per frontmatter line so that line numbers in
    the body still match the file.

    Returns:
        Tuple of (yaml block or None, body)

    Example:
        >>> split_frontmatter("---\\npage_title: x\\n---\\n# Title\\n")
        ('page_title: x', '\\n\\n\\n# Title\\n')
    """
    match = FRONTMATTER_PATTERN.match(content)

    if not match:
        return None, content

    block = match.group(0)
    return match.group(1) or "", "\n" * block.count("\n") + content[match.end():]


def extract_frontmatter(content: str) -> Optional[Dict[str, Any]]:
    """
    Extract YAML frontmatter from markdown content.

    Args:
        content: Full file content

    Returns:
        Dictionary of frontmatter fields, or None if no frontmatter found

    Raises:
        FrontMatterError: If the block is not valid YAML or not a mapping
    """
    yaml_block, _ = split_frontmatter(content)

    if yaml_block is None:
        return None

    try:
        frontmatter = yaml.safe_load(yaml_block)
    except yaml.YAMLError as e:
        raise FrontMatterError(f"error parsing YAML frontmatter: {e}")

    if frontmatter is None:
        return {}

    if not isinstance(frontmatter, dict):
        raise FrontMatterError(f"YAML frontmatter should be a mapping, found: {type(frontmatter).__name__}")

    return frontmatter


@dataclass(frozen=True)
class FrontMatterOptions:
    """Which frontmatter keys are forbidden, required or constrained."""
    allowed_subcategories: Tuple[str, ...] = ()
    no_layout: bool = False
    no_page_title: bool = False
    no_sidebar_current: bool = False
    no_subcategory: bool = False
    require_description: bool = False
    require_layout: bool = False
    require_page_title: bool = False
    require_subcategory: bool = False


class FrontMatterCheck:
    """Checks the YAML frontmatter of one documentation file."""

    def __init__(self, options: Optional[FrontMatterOptions] = None):
        self.options = options or FrontMatterOptions()

    def run(self, content: str) -> Optional[str]:
        """
        Check frontmatter against the configured rules.

        Args:
            content: Full file content

        Returns:
            The frontmatter subcategory, or None when absent

        Raises:
            FrontMatterError: On the first rule violated
        """
        frontmatter = extract_frontmatter(content)

        if frontmatter is None:
            raise FrontMatterError("no YAML frontmatter found")

        forbidden = (
            ("layout", self.options.no_layout),
            ("page_title", self.options.no_page_title),
            ("sidebar_current", self.options.no_sidebar_current),
            ("subcategory", self.options.no_subcategory),
        )
        for key, flag in forbidden:
            if flag and key in frontmatter:
                raise FrontMatterError(f"YAML frontmatter should not contain {key}")

        required = (
            ("description", self.options.require_description),
            ("layout", self.options.require_layout),
            ("page_title", self.options.require_page_title),
            ("subcategory", self.options.require_subcategory),
        )
        for key, flag in required:
            if flag and key not in frontmatter:
                raise FrontMatterError(f"YAML frontmatter missing required {key}")

        subcategory = frontmatter.get("subcategory")
        if subcategory is not None:
            subcategory = str(subcategory)

        allowed = self.options.allowed_subcategories
        if allowed and subcategory is not None and subcategory not in allowed:
            raise FrontMatterError(
                f"YAML frontmatter subcategory ({subcategory}) does not match allowed subcategories: {list(allowed)}"
            )

        logger.debug("Found frontmatter subcategory: %s", subcategory)
        return subcategory
