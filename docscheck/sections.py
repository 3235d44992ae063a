"""
Section-indexed view of a documentation page.

A page is reduced to top-level markdown blocks, then every heading whose
text is recognized for a section kind (Title, Example Usage, Arguments,
Attributes, Timeouts, Import, Signature) claims the blocks that follow it,
up to the next heading of the same or a higher level. The first heading
recognized for a kind wins. Headings that match nothing are ignored, so
free-form prose may surround the recognized sections.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

from docscheck.errors import ParseError
from docscheck.frontmatter import split_frontmatter
from docscheck.markdown_parser import (
    Block,
    BulletList,
    FencedCodeBlock,
    Heading,
    ListItem,
    Paragraph,
    parse_blocks,
)

logger = logging.getLogger(__name__)

# Documentation file extensions, longest first so ".html.markdown" wins over ".markdown"
DOCUMENTATION_EXTENSIONS = (".html.markdown", ".html.md", ".markdown", ".md")


class SectionKind(Enum):
    TITLE = "title"
    EXAMPLES = "examples"
    ARGUMENTS = "arguments"
    ATTRIBUTES = "attributes"
    TIMEOUTS = "timeouts"
    IMPORT = "import"
    SIGNATURE = "signature"


# Heading texts recognized per section kind. Recognition is
# wider than what validators accept so that near-misses ("Arguments
# Reference", "## Imports") surface as heading errors, not missing sections.
_TITLE_PREFIX_PATTERN = re.compile(r'^(Action|Data Source|Ephemeral|Function|List Resource|Resource): ')

_HEADING_PATTERNS = (
    (SectionKind.EXAMPLES, re.compile(r'^Examples?\b')),
    (SectionKind.ARGUMENTS, re.compile(r'^Arguments?( Reference)?$')),
    (SectionKind.ATTRIBUTES, re.compile(r'^Attributes?( Reference)?$')),
    (SectionKind.TIMEOUTS, re.compile(r'^Timeouts$')),
    (SectionKind.IMPORT, re.compile(r'^Import')),
    (SectionKind.SIGNATURE, re.compile(r'^Signature')),
)

# * `name` - (Required) Description.
# * `name` (Required) Description.
_SCHEMA_ITEM_PATTERN = re.compile(r'^`([^`]+)`\s+(?:[-–—]\s*|(?=\())(.*)$', re.DOTALL)
_REQUIREDNESS_PATTERN = re.compile(r'^\(\s*\**(Required|Optional)\b')


@dataclass(frozen=True)
class SchemaAttributeListItem:
    """
    One documented schema field.

    Attributes:
        name: Field name taken from the leading code span
        required: Description starts with "(Required"
        optional: Description starts with "(Optional"
        description: Text after the separator dash
    """
    name: str
    required: bool = False
    optional: bool = False
    description: str = ""

    def __post_init__(self):
        if self.required and self.optional:
            raise ValueError(f"schema attribute {self.name} cannot be both Required and Optional")


@dataclass
class SchemaAttributeList:
    """A bullet list documenting schema fields."""
    items: List[SchemaAttributeListItem] = field(default_factory=list)


@dataclass
class Section:
    """
    Blocks claimed by one recognized heading.

    Attributes:
        heading: The recognized heading
        paragraphs: Top-level paragraphs in document order
        fenced_code_blocks: Fenced code blocks in document order
        schema_attribute_lists: Bullet lists whose every item documents a schema field
    """
    heading: Heading
    paragraphs: List[Paragraph] = field(default_factory=list)
    fenced_code_blocks: List[FencedCodeBlock] = field(default_factory=list)
    schema_attribute_lists: List[SchemaAttributeList] = field(default_factory=list)

    @property
    def paragraph_texts(self) -> List[str]:
        return [paragraph.text for paragraph in self.paragraphs]


@dataclass
class Sections:
    """At most one Section per kind; None means the section is absent."""
    title: Optional[Section] = None
    examples: Optional[Section] = None
    arguments: Optional[Section] = None
    attributes: Optional[Section] = None
    timeouts: Optional[Section] = None
    import_: Optional[Section] = None
    signature: Optional[Section] = None

    def get(self, kind: SectionKind) -> Optional[Section]:
        return getattr(self, _field_name(kind))

    def set(self, kind: SectionKind, section: Section) -> None:
        setattr(self, _field_name(kind), section)


def _field_name(kind: SectionKind) -> str:
    return "import_" if kind is SectionKind.IMPORT else kind.value


def recognize_heading(heading: Heading) -> Optional[SectionKind]:
    """
    Return the section kind a heading introduces, or None.

    Example:
        >>> recognize_heading(Heading(level=2, text="Argument Reference", line=0))
        <SectionKind.ARGUMENTS: 'arguments'>
        >>> recognize_heading(Heading(level=2, text="Notes", line=0)) is None
        True
    """
    if heading.level == 1 or _TITLE_PREFIX_PATTERN.match(heading.text):
        return SectionKind.TITLE

    for kind, pattern in _HEADING_PATTERNS:
        if pattern.match(heading.text):
            return kind

    return None


def parse_schema_attribute_item(item: ListItem) -> Optional[SchemaAttributeListItem]:
    """
    Parse a bullet list item of the form ``* `name` - (Required) Description.``

    Requiredness comes from the leading parenthetical of the description;
    only its first keyword counts, so an item is never both Required and
    Optional.

    Returns:
        SchemaAttributeListItem, or None if the item is not a schema field
    """
    match = _SCHEMA_ITEM_PATTERN.match(item.source.strip())

    if not match:
        return None

    name, description = match.group(1).strip(), match.group(2).strip()
    requiredness = _REQUIREDNESS_PATTERN.match(description)
    keyword = requiredness.group(1) if requiredness else None

    return SchemaAttributeListItem(
        name=name,
        required=keyword == "Required",
        optional=keyword == "Optional",
        description=description,
    )


def parse_schema_attribute_list(bullet_list: BulletList) -> Optional[SchemaAttributeList]:
    """
    Parse a bullet list into its schema field items.

    Items that are not fields (notes, links) are skipped.

    Returns:
        SchemaAttributeList, or None if no item is a schema field
    """
    items = []
    for list_item in bullet_list.items:
        item = parse_schema_attribute_item(list_item)
        if item is None:
            logger.debug("Skipping non-field list item at line %d", list_item.line + 1)
            continue
        items.append(item)

    if not items:
        return None

    return SchemaAttributeList(items=items)


def build_section(heading: Heading, blocks: Sequence[Block]) -> Section:
    """Sort a section's blocks into paragraphs, code blocks and schema attribute lists."""
    section = Section(heading=heading)

    for block in blocks:
        if isinstance(block, Paragraph):
            section.paragraphs.append(block)
        elif isinstance(block, FencedCodeBlock):
            section.fenced_code_blocks.append(block)
        elif isinstance(block, BulletList):
            schema_list = parse_schema_attribute_list(block)
            if schema_list is not None:
                section.schema_attribute_lists.append(schema_list)

    return section


def locate_sections(blocks: Sequence[Block]) -> Sections:
    """
    Group blocks under the nearest recognized heading.

    Each recognized heading captures all following blocks up to, but not
    including, the next heading of the same or a higher level (so nested
    subheadings and their lists stay inside). The title is the exception:
    it stops at the next heading of any level. The first heading
    recognized for a kind wins; later ones are ignored.

    Args:
        blocks: Top-level blocks from markdown_parser.extract_blocks()

    Returns:
        Sections with one entry per recognized kind
    """
    sections = Sections()

    for index, block in enumerate(blocks):
        if not isinstance(block, Heading):
            continue

        kind = recognize_heading(block)
        if kind is None or sections.get(kind) is not None:
            continue

        # The title owns only the prose directly under it.
        boundary_level = 6 if kind is SectionKind.TITLE else block.level

        end = len(blocks)
        for next_index in range(index + 1, len(blocks)):
            candidate = blocks[next_index]
            if isinstance(candidate, Heading) and candidate.level <= boundary_level:
                end = next_index
                break

        sections.set(kind, build_section(block, blocks[index + 1:end]))

    return sections


def is_sorted(schema_list: SchemaAttributeList) -> bool:
    """
    Check that item names are non-decreasing in byte-wise ascending order.

    Python compares str by code point, which orders the same way as
    comparing UTF-8 encodings byte by byte.

    Example:
        >>> is_sorted(SchemaAttributeList([SchemaAttributeListItem("a"), SchemaAttributeListItem("b")]))
        True
        >>> is_sorted(SchemaAttributeList([SchemaAttributeListItem("b"), SchemaAttributeListItem("a")]))
        False
    """
    items = schema_list.items
    return all(items[i].name <= items[i + 1].name for i in range(len(items) - 1))


def strip_documentation_extension(filename: str) -> str:
    """
    Remove a documentation extension from a file name.

    Example:
        >>> strip_documentation_extension("instance.html.markdown")
        'instance'
    """
    for extension in DOCUMENTATION_EXTENSIONS:
        if filename.endswith(extension):
            return filename[:-len(extension)]
    return filename


def resource_name_from_path(path: Union[str, Path], provider_name: str = "") -> str:
    """
    Derive the resource type name a documentation file describes.

    Example:
        >>> resource_name_from_path("docs/resources/instance.md", "aws")
        'aws_instance'
    """
    base = strip_documentation_extension(Path(path).name)
    if provider_name:
        return f"{provider_name}_{base}"
    return base


class Document:
    """
    One documentation page, parsed into sections.

    A Document is created per file check and discarded afterwards. Parsing
    populates ``sections``; checking only attaches ``check_options``.
    """

    def __init__(self, source: Union[bytes, str], resource_name: str = "", provider_name: str = "",
                 path: Optional[str] = None):
        self.source = source
        self.resource_name = resource_name
        self.provider_name = provider_name
        self.path = path
        self.sections: Optional[Sections] = None
        self.check_options = None

    @classmethod
    def from_path(cls, path: Union[str, Path], provider_name: str = "") -> "Document":
        """
        Read a documentation file, deriving its resource name from the file name.

        Raises:
            ParseError: If the file cannot be read
        """
        try:
            source = Path(path).read_bytes()
        except OSError as e:
            raise ParseError(f"error reading file: {e}")

        return cls(
            source,
            resource_name=resource_name_from_path(path, provider_name),
            provider_name=provider_name,
            path=str(path),
        )

    def parse(self) -> "Document":
        """
        Tokenize the source and locate its sections.

        Leading YAML frontmatter is blanked out before tokenizing, keeping
        line numbers intact.

        Raises:
            ParseError: If the source is not valid UTF-8
        """
        if isinstance(self.source, bytes):
            try:
                text = self.source.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"error decoding file: {e}")
        else:
            text = self.source

        _, body = split_frontmatter(text)
        self.sections = locate_sections(parse_blocks(body))

        found = [kind.value for kind in SectionKind if self.sections.get(kind) is not None]
        logger.debug("Found sections for %s: %s", self.resource_name or self.path, found)

        return self

    def check(self, options=None):
        """
        Validate the parsed sections, returning the first ContentError or None.

        See contents.check_document.
        """
        from docscheck.contents import check_document
        return check_document(self, options)
