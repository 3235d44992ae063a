"""Documentation files versus provider schema names."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from docscheck.directory import DocType
from docscheck.errors import CheckError, sort_errors
from docscheck.files import file_ignore_check
from docscheck.sections import resource_name_from_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileMismatchOptions:
    """
    Attributes:
        doc_type: Kind of the documentation directory
        provider_name: Prefix used to turn file names into schema names
        schema_names: Names from the provider schema; the check is skipped when empty
        ignore_file_mismatch: Names whose files may exist without a schema entry
        ignore_file_missing: Schema names that need no documentation file
    """
    doc_type: DocType = DocType.RESOURCE
    provider_name: str = ""
    schema_names: Tuple[str, ...] = ()
    ignore_file_mismatch: Tuple[str, ...] = ()
    ignore_file_missing: Tuple[str, ...] = ()


class FileMismatchCheck:

    def __init__(self, options: Optional[FileMismatchOptions] = None):
        self.options = options or FileMismatchOptions()

    def name_for_file(self, path: str) -> str:
        # Function names are not prefixed with the provider name.
        if self.options.doc_type is DocType.FUNCTION:
            return resource_name_from_path(path)
        return resource_name_from_path(path, self.options.provider_name)

    def run(self, directory: str, files: Iterable[str]) -> List[CheckError]:
        """
        Report extraneous documentation files and undocumented schema names.

        Args:
            directory: Directory the files live in, used for missing-file errors
            files: Documentation file paths

        Returns:
            Sorted list of CheckError (empty when schema names are unknown)
        """
        options = self.options

        if not options.schema_names:
            logger.debug("Skipping file mismatch check for %s: no schema names", directory)
            return []

        kind = options.doc_type.value
        schema_names = set(options.schema_names)
        errors = []
        documented = set()

        for path in files:
            if file_ignore_check(path):
                continue

            name = self.name_for_file(path)
            documented.add(name)

            if name in schema_names or name in options.ignore_file_mismatch:
                continue

            errors.append(CheckError(
                path,
                f"matching {kind} for documentation file ({Path(path).name}) not found, "
                f"file is extraneous or incorrectly named",
            ))

        for name in sorted(schema_names - documented):
            if name in options.ignore_file_missing:
                continue

            errors.append(CheckError(directory, f"missing documentation file for {kind}: {name}"))

        return sort_errors(errors)
