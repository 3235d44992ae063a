"""
Directory-level orchestration.

Check.run() validates the directory tree first; an invalid or mixed
layout is reported alone. Otherwise every recognized directory gets a
file mismatch check (resource-like kinds) and per-file checks, and all
errors are accumulated into one sorted report.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from docscheck.contents_check import ContentsOptions
from docscheck.directory import (
    DirectoryError,
    DocType,
    Layout,
    RESOURCE_DOC_TYPES,
    classify_directory,
    invalid_directories_check,
    mixed_directories_check,
)
from docscheck.errors import CheckError, sort_errors
from docscheck.files import FileCheck, FileCheckOptions, FileOptions
from docscheck.frontmatter import FrontMatterOptions
from docscheck.mismatch import FileMismatchCheck, FileMismatchOptions

logger = logging.getLogger(__name__)

# Example Usage code block language for canonical documentation
DEFAULT_EXAMPLE_LANGUAGE = "terraform"


@dataclass(frozen=True)
class DocsCheckOptions:
    """
    Options for a whole documentation tree.

    Per-kind lists are keyed by DocType; kinds without an entry get none.

    Attributes:
        base_path: Provider codebase root that directory paths are relative to
        provider_name: Provider short name ("aws")
        contents: Contents settings shared by all kinds
        resource_front_matter: Frontmatter settings for resource-like pages
        guide_front_matter: Frontmatter settings for guides
        schema_names: Provider schema names per kind
        ignore_cdktf_missing_files: Skip mismatch checks for CDKTF variants
        workers: Thread pool size for per-file checks
    """
    base_path: str = ""
    provider_name: str = ""
    contents: ContentsOptions = field(default_factory=ContentsOptions)
    resource_front_matter: FrontMatterOptions = field(default_factory=FrontMatterOptions)
    guide_front_matter: FrontMatterOptions = field(default_factory=FrontMatterOptions)

    ignore_contents_check: Dict[DocType, Tuple[str, ...]] = field(default_factory=dict)
    ignore_enhanced_region_check: Dict[DocType, Tuple[str, ...]] = field(default_factory=dict)

    schema_names: Dict[DocType, Tuple[str, ...]] = field(default_factory=dict)
    ignore_file_mismatch: Dict[DocType, Tuple[str, ...]] = field(default_factory=dict)
    ignore_file_missing: Dict[DocType, Tuple[str, ...]] = field(default_factory=dict)
    ignore_cdktf_missing_files: bool = False

    workers: int = 1


class Check:
    """Checks every documentation directory of a provider."""

    def __init__(self, options: Optional[DocsCheckOptions] = None):
        self.options = options or DocsCheckOptions()

    def file_check(self, doc_type: DocType, layout: Layout) -> FileCheck:
        options = self.options

        contents = replace(
            options.contents,
            provider_name=options.contents.provider_name or options.provider_name,
            ignore_contents_check=options.ignore_contents_check.get(doc_type, ()),
            ignore_enhanced_region_check=options.ignore_enhanced_region_check.get(doc_type, ()),
        )

        if doc_type is DocType.GUIDE:
            front_matter = options.guide_front_matter
        elif doc_type is DocType.INDEX:
            front_matter = FrontMatterOptions()
        else:
            front_matter = options.resource_front_matter

        return FileCheck(doc_type, layout, FileCheckOptions(
            file=FileOptions(base_path=options.base_path),
            contents=contents,
            front_matter=front_matter,
            provider_name=options.provider_name,
        ))

    def mismatch_check(self, doc_type: DocType) -> FileMismatchCheck:
        options = self.options
        return FileMismatchCheck(FileMismatchOptions(
            doc_type=doc_type,
            provider_name=options.provider_name,
            schema_names=options.schema_names.get(doc_type, ()),
            ignore_file_mismatch=options.ignore_file_mismatch.get(doc_type, ()),
            ignore_file_missing=options.ignore_file_missing.get(doc_type, ()),
        ))

    def run(self, directories: Dict[str, List[str]]) -> List[CheckError]:
        """
        Check a documentation tree.

        Args:
            directories: Mapping from directory.get_directories()

        Returns:
            Sorted list of CheckError; empty when everything passes
        """
        try:
            invalid_directories_check(directories)
            mixed_directories_check(directories)
        except DirectoryError as e:
            return [CheckError("", str(e))]

        errors: List[CheckError] = []

        for directory in sorted(directories):
            layout, doc_type, language = classify_directory(directory)

            if layout is None:
                continue

            # Only resource-like pages have CDKTF variants worth checking.
            if language and doc_type not in RESOURCE_DOC_TYPES:
                logger.debug("Skipping CDKTF directory: %s", directory)
                continue

            files = directories[directory]
            logger.info("Checking %s %s directory: %s (%d files)", layout.value, doc_type.value, directory, len(files))

            if doc_type in RESOURCE_DOC_TYPES and not (language and self.options.ignore_cdktf_missing_files):
                errors.extend(self.mismatch_check(doc_type).run(directory, files))

            errors.extend(self.file_check(doc_type, layout).run_all(
                files, language or DEFAULT_EXAMPLE_LANGUAGE, workers=self.options.workers,
            ))

        return sort_errors(errors)
