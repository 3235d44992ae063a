"""Error types for documentation checks."""

from dataclasses import dataclass
from typing import Iterable, List, Optional


class DocsCheckError(Exception):
    """Base exception for documentation check errors."""

    pass


class ParseError(DocsCheckError):
    """Raised when a documentation file cannot be decoded or tokenized."""

    pass


class FileCheckError(DocsCheckError):
    """Raised when a file fails an extension, size or read check."""

    pass


class FrontMatterError(DocsCheckError):
    """Raised when YAML frontmatter is missing, malformed or breaks a rule."""

    pass


class ConfigError(DocsCheckError):
    """Raised when a configuration file cannot be loaded or is invalid."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ProviderSchemaError(DocsCheckError):
    """Raised when a providers schema JSON file cannot be loaded or is invalid."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


@dataclass
class ContentError:
    """
    The single descriptive error returned by a section validator.

    Attributes:
        section: Section that failed validation ("title", "arguments", ...)
        message: One-line description of the mismatch
        expected: What was expected (empty string if not applicable)
        found: What was actually found (empty string if not applicable)
    """
    section: str
    message: str
    expected: str = ""
    found: str = ""

    def __str__(self) -> str:
        return self.message

    def format_error(self) -> str:
        """
        Format content error for console output.

        Example:
            [ERROR] arguments: arguments section heading (Arguments Reference) should be one of: "Argument Reference"
              Expected: "Argument Reference"
              Found: Arguments Reference
        """
        parts = [f"[ERROR] {self.section}: {self.message}"]
        if self.expected:
            parts.append(f"  Expected: {self.expected}")
        if self.found:
            parts.append(f"  Found: {self.found}")
        return "\n".join(parts)


@dataclass(frozen=True, order=True)
class CheckError:
    """
    One failure reported for a file or directory.

    Ordering is by path, then message, which keeps aggregated reports
    deterministic regardless of the order checks complete in.
    """
    path: str
    message: str

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"{self.path}: {self.message}"


def sort_errors(errors: Iterable[CheckError]) -> List[CheckError]:
    """Deduplicate and sort accumulated errors by path, then message."""
    return sorted(set(errors))


def format_errors(errors: List[CheckError]) -> str:
    """
    Render accumulated errors as a single report.

    Example:
        2 errors occurred:
        	* docs/resources/a.md: error checking file contents: missing title section: # Resource: test_a
        	* docs/resources/b.md: error checking file extension: ...
    """
    noun = "error" if len(errors) == 1 else "errors"
    lines = [f"{len(errors)} {noun} occurred:"]
    lines.extend(f"\t* {error}" for error in errors)
    return "\n".join(lines)
