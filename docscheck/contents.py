#!/usr/bin/env python3
"""
Section Validators - structural and textual rules for documentation pages.

Each validator takes a parsed Document and its section options and returns
either None or a single ContentError naming the section, what was expected
and what was found. check_document() runs them in a fixed order and stops
at the first error.

Execution order:
1. Title
2. Examples
3. Arguments
4. Attributes (or the disallow check)
5. Timeouts
6. Import (or the disallow check)
7. Signature (only when signature options are given)

Default heading texts and bylines are module constants, used whenever the
matching option is left empty.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from docscheck.errors import ContentError
from docscheck.sections import Document, Section, is_sorted


class SectionRequirement(Enum):
    """Whether a section must, may or must not be present."""
    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


DEFAULT_TITLE_PREFIXES = ("Action", "Data Source", "Ephemeral", "List Resource", "Resource")

DEFAULT_ARGUMENTS_HEADING_TEXTS = ("Argument Reference",)

REQUIRED_ARGUMENTS_BYLINE = "The following arguments are required:"
OPTIONAL_ARGUMENTS_BYLINE = "The following arguments are optional:"

DEFAULT_ARGUMENTS_BYLINE_TEXTS = (
    "This resource supports the following arguments:",
    "This ephemeral resource supports the following arguments:",
    "This list resource supports the following arguments:",
    "This action supports the following arguments:",
    REQUIRED_ARGUMENTS_BYLINE,
    OPTIONAL_ARGUMENTS_BYLINE,
    "This resource does not support any arguments.",
    "This ephemeral resource does not support any arguments.",
    "This list resource does not support any arguments.",
    "This action does not support any arguments.",
    "This data source does not support any arguments.",
    "This data source supports the following arguments:",
)

# The first spelling is preferred; the second is accepted for older pages.
DEFAULT_ATTRIBUTES_HEADING_TEXTS = ("Attribute Reference", "Attributes Reference")

DEFAULT_ATTRIBUTES_BYLINE_TEXTS = (
    "This resource exports the following attributes in addition to the arguments above:",
    "This data source exports the following attributes in addition to the arguments above:",
    "This ephemeral resource exports the following attributes in addition to the arguments above:",
    "This resource exports no additional attributes.",
    "This data source exports no additional attributes.",
    "This ephemeral resource exports no additional attributes.",
    "In addition to all arguments above, the following attributes are exported:",
    "No additional attributes are exported.",
)

IMPORT_HEADING_TEXT = "Import"
IMPORT_BYLINE_SUFFIX = ". For example:"
IMPORT_CANNOT_IMPORT = "cannot import"

# (problem, fix message)
IMPORT_BYLINE_PROBLEMS = (
    ("can be imported", "use active voice instead: Import X using A, B, C."),
    ("e.g", 'instead use "For example:"'),
    ("E.g", 'instead use "For example:"'),
)

DEFAULT_SIGNATURE_HEADING_TEXTS = ("Signature",)

ATTRIBUTES_DISALLOWED_MESSAGE = "attribute section is not allowed"
IMPORT_DISALLOWED_MESSAGE = "import section is not allowed"


@dataclass(frozen=True)
class TitleSectionOptions:
    allowed_prefixes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ExamplesSectionOptions:
    expected_code_block_language: str = ""


@dataclass(frozen=True)
class ArgumentsSectionOptions:
    """
    Attributes:
        enhanced_region_checks: Enable the region argument check
        region_aware: The resource has a top-level region argument
        require_schema_ordering: Every schema attribute list must be sorted by name
        expected_byline_texts: Overrides DEFAULT_ARGUMENTS_BYLINE_TEXTS
        allowed_heading_texts: Overrides DEFAULT_ARGUMENTS_HEADING_TEXTS
        allow_missing_byline: A section without any paragraph passes
    """
    enhanced_region_checks: bool = False
    region_aware: bool = False
    require_schema_ordering: bool = False
    expected_byline_texts: Tuple[str, ...] = ()
    allowed_heading_texts: Tuple[str, ...] = ()
    allow_missing_byline: bool = False


@dataclass(frozen=True)
class AttributesSectionOptions:
    require_section: SectionRequirement = SectionRequirement.REQUIRED
    require_schema_ordering: bool = False
    expected_byline_texts: Tuple[str, ...] = ()
    allowed_heading_texts: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TimeoutsSectionOptions:
    require_section: SectionRequirement = SectionRequirement.OPTIONAL


@dataclass(frozen=True)
class ImportSectionOptions:
    require_section: SectionRequirement = SectionRequirement.OPTIONAL


@dataclass(frozen=True)
class SignatureSectionOptions:
    require_section: SectionRequirement = SectionRequirement.OPTIONAL
    allowed_heading_texts: Tuple[str, ...] = ()
    require_code_block: bool = False


@dataclass(frozen=True)
class CheckOptions:
    """
    Per-section configuration for one document check.

    Unset section options fall back to their defaults; signature checks only
    run when signature_section is given.
    """
    title_section: Optional[TitleSectionOptions] = None
    examples_section: Optional[ExamplesSectionOptions] = None
    arguments_section: Optional[ArgumentsSectionOptions] = None
    attributes_section: Optional[AttributesSectionOptions] = None
    timeouts_section: Optional[TimeoutsSectionOptions] = None
    import_section: Optional[ImportSectionOptions] = None
    signature_section: Optional[SignatureSectionOptions] = None

    disallow_attributes_section: bool = False
    attributes_section_disallowed_message: str = ""
    disallow_import_section: bool = False
    import_section_disallowed_message: str = ""


def _quoted(texts: Sequence[str]) -> str:
    return ", ".join(f'"{text}"' for text in texts)


def _check_presence(section: Optional[Section], name: str, heading: str,
                    requirement: SectionRequirement) -> Tuple[bool, Optional[ContentError]]:
    """
    Apply a three-state presence requirement.

    Returns:
        Tuple of (continue checking content, error)
    """
    if section is None:
        if requirement is SectionRequirement.REQUIRED:
            return False, ContentError(
                section=name,
                message=f"missing {name} section: {heading}",
                expected=heading,
                found="Section not found",
            )
        return False, None

    if requirement is SectionRequirement.FORBIDDEN:
        return False, ContentError(
            section=name,
            message=f"{name} section should not be present",
            expected="Section absent",
            found=f"Section found at line {section.heading.line + 1}",
        )

    return True, None


def _check_heading_level(section: Section, name: str, level: int) -> Optional[ContentError]:
    if section.heading.level != level:
        return ContentError(
            section=name,
            message=f"{name} section heading level ({section.heading.level}) should be: {level}",
            expected=str(level),
            found=str(section.heading.level),
        )
    return None


def _check_heading_text(section: Section, name: str, allowed: Sequence[str]) -> Optional[ContentError]:
    text = section.heading.text
    if text not in allowed:
        return ContentError(
            section=name,
            message=f"{name} section heading ({text}) should be one of: {_quoted(allowed)}",
            expected=_quoted(allowed),
            found=text,
        )
    return None


def _check_schema_ordering(section: Section, name: str) -> Optional[ContentError]:
    for schema_list in section.schema_attribute_lists:
        if not is_sorted(schema_list):
            return ContentError(
                section=name,
                message=f"{name} section is not sorted by name",
                expected="Schema attribute names in ascending order",
                found=", ".join(item.name for item in schema_list.items),
            )
    return None


def check_title_section(document: Document, options: Optional[TitleSectionOptions] = None) -> Optional[ContentError]:
    """
    Title: required, level 1, "<Prefix>: <name>", no code blocks.

    Example:
        # Resource: aws_instance
    """
    options = options or TitleSectionOptions()
    prefixes = options.allowed_prefixes or DEFAULT_TITLE_PREFIXES
    section = document.sections.title

    if section is None:
        return ContentError(
            section="title",
            message=f"missing title section: # Resource: {document.resource_name}",
            expected=f"# Resource: {document.resource_name}",
            found="No H1 heading found",
        )

    error = _check_heading_level(section, "title", 1)
    if error:
        return error

    text = section.heading.text
    prefix = next((p for p in prefixes if text.startswith(f"{p}: ")), None)

    if prefix is None or not text[len(prefix) + 2:].strip():
        return ContentError(
            section="title",
            message=f"title section heading ({text}) should have one of these prefixes: {list(prefixes)}",
            expected=", ".join(f"{p}: <name>" for p in prefixes),
            found=text,
        )

    if section.fenced_code_blocks:
        return ContentError(
            section="title",
            message="title section code examples should be in Example Usage section",
            expected="No code blocks",
            found=f"{len(section.fenced_code_blocks)} code blocks",
        )

    return None


def check_examples_section(document: Document,
                           options: Optional[ExamplesSectionOptions] = None) -> Optional[ContentError]:
    """Every Example Usage code block must use the expected language tag."""
    options = options or ExamplesSectionOptions()
    section = document.sections.examples
    expected = options.expected_code_block_language

    if section is None or not expected:
        return None

    for code_block in section.fenced_code_blocks:
        if code_block.language != expected:
            return ContentError(
                section="examples",
                message=f"example section code block language ({code_block.language}) should be: ```{expected}",
                expected=expected,
                found=code_block.language or "(none)",
            )

    return None


def check_arguments_section(document: Document,
                            options: Optional[ArgumentsSectionOptions] = None) -> Optional[ContentError]:
    """
    Arguments: required, level 2, allowed heading text, exact byline.

    When the byline is "The following arguments are required:", the first
    schema attribute list holds only non-Optional items, and a later
    paragraph "The following arguments are optional:" introduces the list
    at the same index, which holds only non-Required items.
    """
    options = options or ArgumentsSectionOptions()
    section = document.sections.arguments

    if section is None:
        return ContentError(
            section="arguments",
            message="missing arguments section: ## Argument Reference",
            expected="## Argument Reference",
            found="Section not found",
        )

    error = _check_heading_level(section, "arguments", 2)
    if error:
        return error

    error = _check_heading_text(section, "arguments",
                                options.allowed_heading_texts or DEFAULT_ARGUMENTS_HEADING_TEXTS)
    if error:
        return error

    bylines = options.expected_byline_texts or DEFAULT_ARGUMENTS_BYLINE_TEXTS
    paragraphs = section.paragraph_texts

    if not paragraphs:
        if not options.allow_missing_byline:
            return ContentError(
                section="arguments",
                message=f"argument section byline should be one of: {_quoted(bylines)}",
                expected=_quoted(bylines),
                found="No byline",
            )
    else:
        byline = paragraphs[0]

        if byline not in bylines:
            return ContentError(
                section="arguments",
                message=f"argument section byline ({byline}) should be one of: {_quoted(bylines)}",
                expected=_quoted(bylines),
                found=byline,
            )

        if byline == REQUIRED_ARGUMENTS_BYLINE:
            error = _check_split_argument_lists(section, paragraphs)
            if error:
                return error

    if options.enhanced_region_checks and options.region_aware:
        if not any(item.name == "region" and item.optional
                   for schema_list in section.schema_attribute_lists
                   for item in schema_list.items):
            return ContentError(
                section="arguments",
                message="arguments section does not contain an Optional region argument",
                expected="* `region` - (Optional) ...",
                found="No Optional region argument",
            )

    if options.require_schema_ordering:
        return _check_schema_ordering(section, "arguments")

    return None


def _check_split_argument_lists(section: Section, paragraphs: Sequence[str]) -> Optional[ContentError]:
    lists = section.schema_attribute_lists

    if lists and any(item.optional for item in lists[0].items):
        return ContentError(
            section="arguments",
            message="required arguments section contains an Optional argument",
            expected="Only Required arguments",
            found=", ".join(item.name for item in lists[0].items if item.optional),
        )

    if len(paragraphs) < 2:
        return None

    index = next((i for i in range(1, len(paragraphs)) if paragraphs[i] == OPTIONAL_ARGUMENTS_BYLINE), None)

    if index is None:
        return ContentError(
            section="arguments",
            message=f'argument section byline ({REQUIRED_ARGUMENTS_BYLINE}) should be: "{OPTIONAL_ARGUMENTS_BYLINE}"',
            expected=OPTIONAL_ARGUMENTS_BYLINE,
            found=paragraphs[1],
        )

    if len(lists) > index and any(item.required for item in lists[index].items):
        return ContentError(
            section="arguments",
            message="optional arguments section contains a Required argument",
            expected="Only Optional arguments",
            found=", ".join(item.name for item in lists[index].items if item.required),
        )

    return None


def check_attributes_section(document: Document,
                             options: Optional[AttributesSectionOptions] = None) -> Optional[ContentError]:
    """Attributes: three-state presence, level 2, allowed heading text, exact byline."""
    options = options or AttributesSectionOptions()
    section = document.sections.attributes

    present, error = _check_presence(section, "attribute", "## Attribute Reference", options.require_section)
    if not present:
        return error

    error = _check_heading_level(section, "attribute", 2)
    if error:
        return error

    error = _check_heading_text(section, "attribute",
                                options.allowed_heading_texts or DEFAULT_ATTRIBUTES_HEADING_TEXTS)
    if error:
        return error

    bylines = options.expected_byline_texts or DEFAULT_ATTRIBUTES_BYLINE_TEXTS
    paragraphs = section.paragraph_texts
    byline = paragraphs[0] if paragraphs else None

    if byline not in bylines:
        return ContentError(
            section="attribute",
            message=f"attribute section byline ({byline or ''}) should be one of: {_quoted(bylines)}",
            expected=_quoted(bylines),
            found=byline if byline is not None else "No byline",
        )

    if options.require_schema_ordering:
        return _check_schema_ordering(section, "attribute")

    return None


def check_disallowed_section(section: Optional[Section], name: str, message: str) -> Optional[ContentError]:
    """A disallowed section is an error whenever it is present."""
    if section is None:
        return None

    return ContentError(
        section=name,
        message=message,
        expected="Section absent",
        found=f"Section found at line {section.heading.line + 1}",
    )


def check_timeouts_section(document: Document,
                           options: Optional[TimeoutsSectionOptions] = None) -> Optional[ContentError]:
    """Timeouts: presence only."""
    options = options or TimeoutsSectionOptions()
    _, error = _check_presence(document.sections.timeouts, "timeouts", "## Timeouts", options.require_section)
    return error


def check_import_section(document: Document,
                         options: Optional[ImportSectionOptions] = None) -> Optional[ContentError]:
    """
    Import: three-state presence, level 2, "Import", active-voice byline
    ending ". For example:" and import code blocks for the resource.

    Example:
        ## Import

        In Terraform v1.5.0 and later, use an `import` block to import example_thing using the `id`. For example:

        ```terraform
        import {
          to = example_thing.example
          id = "thing-12345678"
        }
        ```

        Using `terraform import`, import example_thing using the `id`. For example:

        ```console
        % terraform import example_thing.example thing-12345678
        ```
    """
    options = options or ImportSectionOptions()
    section = document.sections.import_

    present, error = _check_presence(section, "import", "## Import", options.require_section)
    if not present:
        return error

    error = _check_heading_level(section, "import", 2)
    if error:
        return error

    error = _check_heading_text(section, "import", (IMPORT_HEADING_TEXT,))
    if error:
        return error

    paragraphs = section.paragraph_texts
    cannot_import = bool(paragraphs) and IMPORT_CANNOT_IMPORT in paragraphs[0]

    if paragraphs:
        text = paragraphs[0]

        for problem, fix in IMPORT_BYLINE_PROBLEMS:
            if problem in text:
                return ContentError(
                    section="import",
                    message=f'import section should not include "{problem}", {fix}',
                    expected=fix,
                    found=text,
                )

        if not text.endswith(IMPORT_BYLINE_SUFFIX) and not cannot_import:
            return ContentError(
                section="import",
                message=f'import section should conclude with "{IMPORT_BYLINE_SUFFIX}" (or state "You cannot import ...")',
                expected=f"...{IMPORT_BYLINE_SUFFIX}",
                found=text,
            )

        if not cannot_import and not section.fenced_code_blocks:
            return ContentError(
                section="import",
                message='import section should have a code block (or state "You cannot import ...")',
                expected="At least one code block",
                found="No code blocks",
            )

    return _check_import_code_blocks(document, section)


def _check_import_code_blocks(document: Document, section: Section) -> Optional[ContentError]:
    hit_console = False

    for index, code_block in enumerate(section.fenced_code_blocks):
        body = code_block.body
        language = code_block.language

        if document.resource_name not in body:
            return ContentError(
                section="import",
                message=f"import section code block text should contain resource name: {document.resource_name}",
                expected=document.resource_name,
                found=body.strip(),
            )

        if index == 0 and (language != "terraform" or not body.startswith("import {")):
            return ContentError(
                section="import",
                message="the first import section code block should have an import block using type 'terraform' "
                        "(i.e., ```terraform\\nimport {)",
                expected="```terraform\nimport {",
                found=f"```{language}\n{body.splitlines()[0] if body else ''}",
            )

        if language == "console" and not body.startswith("% "):
            return ContentError(
                section="import",
                message="import section code block type 'console' should begin with '% '",
                expected="% terraform import ...",
                found=body.strip(),
            )

        if language not in ("console", "terraform"):
            return ContentError(
                section="import",
                message="import section code block type should be 'console' or 'terraform' "
                        "(i.e., ```console or ```terraform)",
                expected="console, terraform",
                found=language or "(none)",
            )

        if language == "console":
            hit_console = True

        if hit_console and language == "terraform" and body.startswith("import "):
            return ContentError(
                section="import",
                message="import section: all code blocks of type 'terraform' should be before code blocks "
                        "of type 'console'",
                expected="terraform import blocks before console blocks",
                found=f"terraform import block at line {code_block.line + 1} after a console block",
            )

    return None


def check_signature_section(document: Document,
                            options: Optional[SignatureSectionOptions]) -> Optional[ContentError]:
    """Signature (function pages): three-state presence, level 2, allowed heading text, code block."""
    if options is None:
        return None

    section = document.sections.signature

    present, error = _check_presence(section, "signature", "## Signature", options.require_section)
    if not present:
        return error

    error = _check_heading_level(section, "signature", 2)
    if error:
        return error

    error = _check_heading_text(section, "signature",
                                options.allowed_heading_texts or DEFAULT_SIGNATURE_HEADING_TEXTS)
    if error:
        return error

    if options.require_code_block and not section.fenced_code_blocks:
        return ContentError(
            section="signature",
            message="signature section must include a code block",
            expected="At least one code block",
            found="No code blocks",
        )

    return None


def check_document(document: Document, options: Optional[CheckOptions] = None) -> Optional[ContentError]:
    """
    Run all section validators in order, returning the first error.

    Args:
        document: Parsed Document
        options: Check options (defaults apply when None)

    Returns:
        The first ContentError found, or None when every validator passes
    """
    if document.sections is None:
        document.parse()

    options = options or CheckOptions()
    document.check_options = options
    sections = document.sections

    validators = [
        lambda: check_title_section(document, options.title_section),
        lambda: check_examples_section(document, options.examples_section),
        lambda: check_arguments_section(document, options.arguments_section),
    ]

    if options.disallow_attributes_section:
        validators.append(lambda: check_disallowed_section(
            sections.attributes, "attribute",
            options.attributes_section_disallowed_message or ATTRIBUTES_DISALLOWED_MESSAGE))
    else:
        validators.append(lambda: check_attributes_section(document, options.attributes_section))

    validators.append(lambda: check_timeouts_section(document, options.timeouts_section))

    if options.disallow_import_section:
        validators.append(lambda: check_disallowed_section(
            sections.import_, "import",
            options.import_section_disallowed_message or IMPORT_DISALLOWED_MESSAGE))
    else:
        validators.append(lambda: check_import_section(document, options.import_section))

    validators.append(lambda: check_signature_section(document, options.signature_section))

    for validator in validators:
        error = validator()
        if error is not None:
            return error

    return None
