"""
Per-file documentation checks.

A FileCheck runs, in order: ignore, extension, size, read, frontmatter and
contents (resource-like kinds only). The first failing stage becomes one
CheckError prefixed with the stage name; run_all() accumulates every
file's error into one sorted list.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, List, Optional

from docscheck.contents_check import ContentsCheck, ContentsOptions, contents_options_for
from docscheck.directory import DocType, Layout, RESOURCE_DOC_TYPES
from docscheck.errors import CheckError, DocsCheckError, FileCheckError, sort_errors
from docscheck.frontmatter import FrontMatterCheck, FrontMatterOptions

logger = logging.getLogger(__name__)

# Terraform Registry storage limit
REGISTRY_MAXIMUM_SIZE_OF_FILE = 500000

LEGACY_FILE_EXTENSIONS = (".html.markdown", ".html.md", ".markdown", ".md")
REGISTRY_FILE_EXTENSIONS = (".md",)

IGNORED_FILE_NAMES = (".DS_Store",)


@dataclass(frozen=True)
class FileOptions:
    base_path: str = ""

    def full_path(self, path: str) -> str:
        """Join path onto the base path, if any."""
        if self.base_path:
            return str(Path(self.base_path) / path)
        return path


def file_ignore_check(path: str) -> bool:
    """Return True for files that are never checked."""
    return Path(path).name in IGNORED_FILE_NAMES


def file_extension_check(path: str, valid_extensions: Iterable[str]) -> None:
    """
    Raises:
        FileCheckError: If path does not end with one of valid_extensions
    """
    valid_extensions = tuple(valid_extensions)
    if not path.endswith(valid_extensions):
        raise FileCheckError(
            f"file does not end with a valid extension, valid extensions: {list(valid_extensions)}"
        )


def file_size_check(full_path: str) -> None:
    """
    Raises:
        FileCheckError: If the file cannot be stat'ed or reaches the registry size limit
    """
    try:
        size = Path(full_path).stat().st_size
    except OSError as e:
        raise FileCheckError(f"error getting file info: {e}")

    if size >= REGISTRY_MAXIMUM_SIZE_OF_FILE:
        raise FileCheckError(f"exceeded maximum ({REGISTRY_MAXIMUM_SIZE_OF_FILE}) size of file: {size}")


def frontmatter_options_for(layout: Layout, doc_type: DocType,
                            base: Optional[FrontMatterOptions] = None) -> FrontMatterOptions:
    """
    Apply the per-layout frontmatter rules on top of caller settings.

    Caller settings (allowed subcategories, require_subcategory) are kept;
    layout rules only ever switch flags on.
    """
    base = base or FrontMatterOptions()

    if layout is Layout.LEGACY:
        if doc_type is DocType.INDEX:
            return replace(base, require_layout=True, require_page_title=True)
        return replace(
            base,
            no_sidebar_current=True,
            require_description=True,
            require_layout=True,
            require_page_title=True,
        )

    if doc_type is DocType.INDEX:
        return replace(base, no_layout=True, no_sidebar_current=True)

    options = replace(base, no_layout=True, no_sidebar_current=True, require_page_title=True)

    if doc_type in RESOURCE_DOC_TYPES:
        options = replace(options, require_description=True)

    if doc_type is DocType.ACTION:
        options = replace(options, require_subcategory=True)

    return options


@dataclass(frozen=True)
class FileCheckOptions:
    """
    Attributes:
        file: Base path handling
        contents: Caller contents settings; per-kind defaults are applied on top
        front_matter: Caller frontmatter settings; layout rules are applied on top
        provider_name: Default provider name for resource names
    """
    file: FileOptions = field(default_factory=FileOptions)
    contents: ContentsOptions = field(default_factory=ContentsOptions)
    front_matter: FrontMatterOptions = field(default_factory=FrontMatterOptions)
    provider_name: str = ""


class FileCheck:
    """Checks documentation files of one kind in one layout."""

    def __init__(self, doc_type: DocType, layout: Layout, options: Optional[FileCheckOptions] = None):
        self.doc_type = doc_type
        self.layout = layout
        self.options = options or FileCheckOptions()

        contents = contents_options_for(doc_type, self.options.contents)
        if not contents.provider_name:
            contents = replace(contents, provider_name=self.options.provider_name)
        if doc_type is DocType.ACTION and layout is Layout.REGISTRY:
            contents = replace(contents, enable=True)

        self.contents_check = ContentsCheck(contents)
        self.front_matter_check = FrontMatterCheck(
            frontmatter_options_for(layout, doc_type, self.options.front_matter)
        )

    @property
    def valid_extensions(self):
        if self.layout is Layout.LEGACY:
            return LEGACY_FILE_EXTENSIONS
        return REGISTRY_FILE_EXTENSIONS

    def run(self, path: str, example_language: str = "") -> Optional[CheckError]:
        """
        Check one file.

        Args:
            path: File path relative to the base path
            example_language: Expected Example Usage code block language

        Returns:
            CheckError for the first failing stage, or None
        """
        full_path = self.options.file.full_path(path)
        logger.debug("Checking file: %s", full_path)

        if file_ignore_check(path):
            logger.debug("Skipping: %s", path)
            return None

        try:
            file_extension_check(path, self.valid_extensions)
        except FileCheckError as e:
            return CheckError(path, f"error checking file extension: {e}")

        try:
            file_size_check(full_path)
        except FileCheckError as e:
            return CheckError(path, f"error checking file size: {e}")

        try:
            content = Path(full_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return CheckError(path, f"error reading file: {e}")

        try:
            subcategory = self.front_matter_check.run(content)
        except DocsCheckError as e:
            return CheckError(path, f"error checking file frontmatter: {e}")

        if self.doc_type not in RESOURCE_DOC_TYPES:
            return None

        try:
            error = self.contents_check.run(full_path, example_language, subcategory)
        except DocsCheckError as e:
            return CheckError(path, f"error checking file contents: {e}")

        if error is not None:
            logger.debug("%s\n%s", path, error.format_error())
            return CheckError(path, f"error checking file contents: {error}")

        return None

    def run_all(self, files: Iterable[str], example_language: str = "", workers: int = 1) -> List[CheckError]:
        """
        Check every file, accumulating one error per failing file.

        Each file check is independent, so with workers > 1 files are
        checked on a bounded thread pool. The result is sorted either way.
        """
        files = list(files)

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(lambda path: self.run(path, example_language), files))
        else:
            results = [self.run(path, example_language) for path in files]

        return sort_errors(error for error in results if error is not None)
