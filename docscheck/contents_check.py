"""
Contents check for one documentation file.

ContentsOptions is the per-kind configuration callers build (from CLI
flags or a config file); ContentsCheck turns it into CheckOptions for a
single document, applying the ignore lists, and runs the section
validators.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from docscheck.contents import (
    ArgumentsSectionOptions,
    AttributesSectionOptions,
    CheckOptions,
    ExamplesSectionOptions,
    ImportSectionOptions,
    SectionRequirement,
    SignatureSectionOptions,
    TimeoutsSectionOptions,
    TitleSectionOptions,
)
from docscheck.directory import DocType
from docscheck.errors import ContentError
from docscheck.sections import Document

logger = logging.getLogger(__name__)

ACTION_ARGUMENTS_BYLINE_TEXTS = (
    "This action supports the following arguments:",
    "The following arguments are required:",
    "The following arguments are optional:",
    "This action does not support any arguments.",
)

FUNCTION_ARGUMENTS_BYLINE_TEXTS = (
    "This function supports the following arguments:",
    "This function does not support any arguments.",
)


@dataclass(frozen=True)
class ContentsOptions:
    """
    Contents configuration for one documentation kind.

    Attributes:
        enable: Run contents checks at all
        enhanced_region_checks: Require a documented Optional region argument
        disable_region_argument_check: Never treat resources as region aware
        provider_name: Prefix for resource names ("aws" -> "aws_instance")
        require_schema_ordering: Schema attribute lists must be sorted
        ignore_contents_check: Resource names skipped entirely
        ignore_enhanced_region_check: Resource names exempt from the region check
        ignore_enhanced_region_check_subcategories: Frontmatter subcategories
            exempt from the region check
    """
    enable: bool = False
    enhanced_region_checks: bool = False
    disable_region_argument_check: bool = False
    provider_name: str = ""
    require_schema_ordering: bool = False

    ignore_contents_check: Tuple[str, ...] = ()
    ignore_enhanced_region_check: Tuple[str, ...] = ()
    ignore_enhanced_region_check_subcategories: Tuple[str, ...] = ()

    title_prefixes: Tuple[str, ...] = ()
    arguments_heading_texts: Tuple[str, ...] = ()
    arguments_byline_texts: Tuple[str, ...] = ()
    allow_missing_arguments_byline: bool = False

    require_attributes_section: SectionRequirement = SectionRequirement.REQUIRED
    require_timeouts_section: SectionRequirement = SectionRequirement.OPTIONAL
    require_import_section: SectionRequirement = SectionRequirement.OPTIONAL

    disallow_attributes_section: bool = False
    attributes_section_disallowed_message: str = ""
    disallow_import_section: bool = False
    import_section_disallowed_message: str = ""

    check_signature_section: bool = False
    require_signature_section: SectionRequirement = SectionRequirement.OPTIONAL
    signature_heading_texts: Tuple[str, ...] = ()
    require_signature_code_block: bool = False


def contents_options_for(doc_type: DocType, base: Optional[ContentsOptions] = None) -> ContentsOptions:
    """
    Apply the per-kind defaults on top of caller settings.

    Only kind-specific fields are replaced; enable, provider name, ignore
    lists and enhanced region checks come from ``base``.

    Example:
        >>> contents_options_for(DocType.FUNCTION).require_import_section
        <SectionRequirement.FORBIDDEN: 'forbidden'>
    """
    base = base or ContentsOptions()

    if doc_type is DocType.ACTION:
        return replace(
            base,
            title_prefixes=("Action",),
            disable_region_argument_check=True,
            arguments_byline_texts=ACTION_ARGUMENTS_BYLINE_TEXTS,
            disallow_attributes_section=True,
            attributes_section_disallowed_message="actions documentation cannot include an attributes section",
            disallow_import_section=True,
            import_section_disallowed_message="actions documentation cannot include an import section",
        )

    if doc_type in (DocType.DATA_SOURCE, DocType.EPHEMERAL):
        prefix = "Data Source" if doc_type is DocType.DATA_SOURCE else "Ephemeral"
        return replace(
            base,
            title_prefixes=(prefix,),
            require_attributes_section=SectionRequirement.REQUIRED,
            require_import_section=SectionRequirement.FORBIDDEN,
        )

    if doc_type is DocType.FUNCTION:
        return replace(
            base,
            title_prefixes=("Function",),
            disable_region_argument_check=True,
            arguments_heading_texts=("Arguments",),
            arguments_byline_texts=FUNCTION_ARGUMENTS_BYLINE_TEXTS,
            allow_missing_arguments_byline=True,
            require_attributes_section=SectionRequirement.OPTIONAL,
            require_import_section=SectionRequirement.FORBIDDEN,
            check_signature_section=True,
            require_signature_section=SectionRequirement.REQUIRED,
            require_signature_code_block=True,
        )

    if doc_type is DocType.LIST_RESOURCE:
        return replace(
            base,
            title_prefixes=("List Resource",),
            require_schema_ordering=True,
            require_attributes_section=SectionRequirement.FORBIDDEN,
            require_timeouts_section=SectionRequirement.FORBIDDEN,
            require_import_section=SectionRequirement.FORBIDDEN,
        )

    if doc_type is DocType.RESOURCE:
        return replace(
            base,
            title_prefixes=("Resource",),
            require_attributes_section=SectionRequirement.REQUIRED,
            require_import_section=SectionRequirement.OPTIONAL,
        )

    return base


class ContentsCheck:
    """Runs the section validators against one documentation file."""

    def __init__(self, options: Optional[ContentsOptions] = None):
        self.options = options or ContentsOptions()

    def check_options(self, example_language: str = "", region_aware: bool = True) -> CheckOptions:
        """Build the per-document CheckOptions."""
        options = self.options

        signature = None
        if options.check_signature_section:
            signature = SignatureSectionOptions(
                require_section=options.require_signature_section,
                allowed_heading_texts=options.signature_heading_texts,
                require_code_block=options.require_signature_code_block,
            )

        return CheckOptions(
            title_section=TitleSectionOptions(allowed_prefixes=options.title_prefixes),
            examples_section=ExamplesSectionOptions(expected_code_block_language=example_language),
            arguments_section=ArgumentsSectionOptions(
                enhanced_region_checks=options.enhanced_region_checks,
                region_aware=region_aware and not options.disable_region_argument_check,
                require_schema_ordering=options.require_schema_ordering,
                expected_byline_texts=options.arguments_byline_texts,
                allowed_heading_texts=options.arguments_heading_texts,
                allow_missing_byline=options.allow_missing_arguments_byline,
            ),
            attributes_section=AttributesSectionOptions(
                require_section=options.require_attributes_section,
                require_schema_ordering=options.require_schema_ordering,
            ),
            timeouts_section=TimeoutsSectionOptions(require_section=options.require_timeouts_section),
            import_section=ImportSectionOptions(require_section=options.require_import_section),
            signature_section=signature,
            disallow_attributes_section=options.disallow_attributes_section,
            attributes_section_disallowed_message=options.attributes_section_disallowed_message,
            disallow_import_section=options.disallow_import_section,
            import_section_disallowed_message=options.import_section_disallowed_message,
        )

    def run(self, path: str, example_language: str = "",
            subcategory: Optional[str] = None) -> Optional[ContentError]:
        """
        Check the contents of one documentation file.

        Args:
            path: Full path to the file
            example_language: Expected Example Usage code block language
            subcategory: Frontmatter subcategory, if any

        Returns:
            The first ContentError, or None when the file passes or is ignored

        Raises:
            ParseError: If the file cannot be read or decoded
        """
        if not self.options.enable:
            return None

        document = Document.from_path(path, self.options.provider_name).parse()

        if document.resource_name in self.options.ignore_contents_check:
            logger.debug("Skipping contents check: %s", document.resource_name)
            return None

        region_aware = True
        if document.resource_name in self.options.ignore_enhanced_region_check:
            region_aware = False
        if subcategory is not None and subcategory in self.options.ignore_enhanced_region_check_subcategories:
            region_aware = False

        return document.check(self.check_options(example_language, region_aware))
