"""
Documentation directory layouts.

Providers keep documentation either in the legacy layout under
``website/docs`` or in the registry layout under ``docs``; both may hold
per-language CDKTF variants under ``cdktf/<language>/``. This module finds
documentation files, groups them by directory and classifies each
directory by layout, documentation kind and binding language.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from docscheck.errors import DocsCheckError

logger = logging.getLogger(__name__)


class DocType(Enum):
    ACTION = "action"
    DATA_SOURCE = "data source"
    EPHEMERAL = "ephemeral"
    FUNCTION = "function"
    GUIDE = "guide"
    INDEX = "index"
    LIST_RESOURCE = "list resource"
    RESOURCE = "resource"


# Kinds whose files carry section contents and match provider schema names
RESOURCE_DOC_TYPES = (
    DocType.ACTION,
    DocType.DATA_SOURCE,
    DocType.EPHEMERAL,
    DocType.FUNCTION,
    DocType.LIST_RESOURCE,
    DocType.RESOURCE,
)


class Layout(Enum):
    LEGACY = "legacy"
    REGISTRY = "registry"


CDKTF_INDEX_DIRECTORY = "cdktf"
CDKTF_LANGUAGES = ("csharp", "go", "java", "python", "typescript")

LEGACY_INDEX_DIRECTORY = "website/docs"
REGISTRY_INDEX_DIRECTORY = "docs"

LEGACY_SUBDIRECTORIES = {
    "actions": DocType.ACTION,
    "d": DocType.DATA_SOURCE,
    "ephemeral-resources": DocType.EPHEMERAL,
    "functions": DocType.FUNCTION,
    "guides": DocType.GUIDE,
    "list-resources": DocType.LIST_RESOURCE,
    "r": DocType.RESOURCE,
}

REGISTRY_SUBDIRECTORIES = {
    "actions": DocType.ACTION,
    "data-sources": DocType.DATA_SOURCE,
    "ephemeral-resources": DocType.EPHEMERAL,
    "functions": DocType.FUNCTION,
    "guides": DocType.GUIDE,
    "list-resources": DocType.LIST_RESOURCE,
    "resources": DocType.RESOURCE,
}

VALID_LEGACY_DIRECTORIES = (LEGACY_INDEX_DIRECTORY,) + tuple(
    f"{LEGACY_INDEX_DIRECTORY}/{subdirectory}" for subdirectory in LEGACY_SUBDIRECTORIES
)

VALID_REGISTRY_DIRECTORIES = (REGISTRY_INDEX_DIRECTORY,) + tuple(
    f"{REGISTRY_INDEX_DIRECTORY}/{subdirectory}" for subdirectory in REGISTRY_SUBDIRECTORIES
)

_LAYOUTS = (
    (Layout.LEGACY, LEGACY_INDEX_DIRECTORY, LEGACY_SUBDIRECTORIES),
    (Layout.REGISTRY, REGISTRY_INDEX_DIRECTORY, REGISTRY_SUBDIRECTORIES),
)


class DirectoryError(DocsCheckError):
    """Raised when the documentation directory tree is invalid."""

    pass


def is_valid_legacy_directory(directory: str) -> bool:
    return directory in VALID_LEGACY_DIRECTORIES


def is_valid_registry_directory(directory: str) -> bool:
    return directory in VALID_REGISTRY_DIRECTORIES


def is_valid_cdktf_directory(directory: str) -> bool:
    """
    Check for a CDKTF directory: ``<index>/cdktf``, ``<index>/cdktf/<language>``
    or ``<index>/cdktf/<language>/<subdirectory>``.

    Example:
        >>> is_valid_cdktf_directory("docs/cdktf/python/resources")
        True
        >>> is_valid_cdktf_directory("docs/cdktf/rust")
        False
    """
    for _, index, subdirectories in _LAYOUTS:
        cdktf = f"{index}/{CDKTF_INDEX_DIRECTORY}"

        if directory == cdktf:
            return True

        for language in CDKTF_LANGUAGES:
            if directory == f"{cdktf}/{language}":
                return True
            if any(directory == f"{cdktf}/{language}/{subdirectory}" for subdirectory in subdirectories):
                return True

    return False


def is_valid_directory(directory: str) -> bool:
    return (is_valid_registry_directory(directory)
            or is_valid_legacy_directory(directory)
            or is_valid_cdktf_directory(directory))


def classify_directory(directory: str) -> Tuple[Optional[Layout], Optional[DocType], str]:
    """
    Classify a documentation directory.

    Returns:
        Tuple of (layout, doc type, CDKTF language); the language is "" for
        canonical documentation, and layout/doc type are None when the
        directory holds no checkable files

    Example:
        >>> classify_directory("website/docs/cdktf/python/r")
        (<Layout.LEGACY: 'legacy'>, <DocType.RESOURCE: 'resource'>, 'python')
    """
    for layout, index, subdirectories in _LAYOUTS:
        if directory == index:
            return layout, DocType.INDEX, ""

        for subdirectory, doc_type in subdirectories.items():
            if directory == f"{index}/{subdirectory}":
                return layout, doc_type, ""

            for language in CDKTF_LANGUAGES:
                if directory == f"{index}/{CDKTF_INDEX_DIRECTORY}/{language}/{subdirectory}":
                    return layout, doc_type, language

    return None, None, ""


def _is_documentation_path(relative: str) -> bool:
    if relative == f"{REGISTRY_INDEX_DIRECTORY}/index.md":
        return True

    if relative.startswith(f"{LEGACY_INDEX_DIRECTORY}/"):
        return True

    if relative.startswith(f"{REGISTRY_INDEX_DIRECTORY}/{CDKTF_INDEX_DIRECTORY}/"):
        return True

    return any(relative.startswith(f"{REGISTRY_INDEX_DIRECTORY}/{subdirectory}/")
               for subdirectory in REGISTRY_SUBDIRECTORIES)


def get_directories(base_path: Union[str, Path, None] = None) -> Dict[str, List[str]]:
    """
    Find documentation files and group them by directory.

    Args:
        base_path: Provider codebase root (working directory when None)

    Returns:
        Mapping of relative directory to the sorted relative file paths it holds

    Example:
        >>> get_directories("terraform-provider-example")  # doctest: +SKIP
        {'docs': ['docs/index.md'], 'docs/resources': ['docs/resources/thing.md']}
    """
    root = Path(base_path) if base_path else Path(".")
    directories: Dict[str, List[str]] = {}

    for path in sorted(root.rglob("*")):
        relative = path.relative_to(root).as_posix()

        if path.is_dir() or not _is_documentation_path(relative):
            continue

        if path.name == ".keep":
            continue

        directory = path.parent.relative_to(root).as_posix()
        directories.setdefault(directory, []).append(relative)

    logger.debug("Found documentation directories: %s", sorted(directories))
    return directories


def invalid_directories_check(directories: Dict[str, List[str]]) -> None:
    """
    Raises:
        DirectoryError: On the first directory outside every known layout
    """
    for directory in sorted(directories):
        if not is_valid_directory(directory):
            raise DirectoryError(f"invalid Terraform Provider documentation directory found: {directory}")


def mixed_directories_check(directories: Dict[str, List[str]]) -> None:
    """
    Reject trees that use both the legacy and registry layouts.

    A bare ``docs`` directory (e.g. ``docs/index.md``, or other files) may
    sit next to a legacy layout.

    Raises:
        DirectoryError: If both layouts are in use
    """
    legacy_found = any(is_valid_legacy_directory(directory) for directory in directories)
    registry_found = any(
        is_valid_registry_directory(directory) and directory != REGISTRY_INDEX_DIRECTORY
        for directory in directories
    )

    if legacy_found and registry_found:
        raise DirectoryError(
            "mixed Terraform Provider documentation directory layouts found, must use only legacy or registry layout"
        )
