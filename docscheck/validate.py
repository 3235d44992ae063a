#!/usr/bin/env python3
"""Documentation check tool for Terraform Providers."""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from docscheck import __version__
from docscheck.check import Check
from docscheck.config import KIND_KEYS, CheckConfig, build_check_options, load_config, merge_config, split_list
from docscheck.directory import get_directories
from docscheck.errors import DocsCheckError, format_errors

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

LOG_FORMAT = "[%(levelname)s] %(message)s"

# (flag suffix, configuration setting) for flags repeated per documentation kind
PER_KIND_FLAGS = (
    ("ignore-contents-check", "ignore_contents_check"),
    ("ignore-enhanced-region-check", "ignore_enhanced_region_check"),
    ("ignore-file-mismatch", "ignore_file_mismatch"),
    ("ignore-file-missing", "ignore_file_missing"),
)

BOOLEAN_SETTINGS = (
    "enable_contents_check",
    "enable_enhanced_region_check",
    "ignore_cdktf_missing_files",
    "require_guide_subcategory",
    "require_resource_subcategory",
    "require_schema_ordering",
)

LIST_SETTINGS = (
    "allowed_guide_subcategories",
    "allowed_resource_subcategories",
    "ignore_enhanced_region_check_subcategories",
)

STRING_SETTINGS = (
    "allowed_guide_subcategories_file",
    "allowed_resource_subcategories_file",
    "ignore_enhanced_region_check_subcategories_file",
    "log_level",
    "provider_name",
    "provider_source",
    "providers_schema_json",
)


def configure_logging(level: str):
    """Configure root logging once for the command."""
    logging.basicConfig(level=getattr(logging, level), format=LOG_FORMAT, stream=sys.stderr)


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect explicitly given flags as configuration overrides."""
    overrides: Dict[str, Any] = {
        "path": args.path,
        "workers": args.workers,
    }

    for name in BOOLEAN_SETTINGS + STRING_SETTINGS:
        overrides[name] = getattr(args, name)

    for name in LIST_SETTINGS:
        value = getattr(args, name)
        overrides[name] = split_list(value) if value is not None else None

    for _, setting in PER_KIND_FLAGS:
        values = {}
        for key in KIND_KEYS:
            value = getattr(args, f"{setting}_{key}")
            if value is not None:
                values[key] = split_list(value)
        overrides[setting] = values or None

    files = {}
    for key in KIND_KEYS:
        value = getattr(args, f"ignore_enhanced_region_check_{key}_file", None)
        if value is not None:
            files[key] = value
    overrides["ignore_enhanced_region_check_files"] = files or None

    return overrides


def check_docs(args) -> int:
    """Check a provider's documentation directories and files."""
    try:
        config = load_config(args.config) if args.config else CheckConfig()
        config = merge_config(config, overrides_from_args(args))
    except DocsCheckError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    configure_logging(config.log_level)

    try:
        options = build_check_options(config)
        directories = get_directories(config.path or None)
    except DocsCheckError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    if not directories:
        if config.path:
            print(f"No Terraform Provider documentation directories found in path: {config.path}", file=sys.stderr)
        else:
            print("No Terraform Provider documentation directories found in current path", file=sys.stderr)
        return 1

    errors = Check(options).run(directories)

    if errors:
        print(format_errors(errors), file=sys.stderr)
        return 1

    file_count = sum(len(files) for files in directories.values())
    print(f"Documentation check passed: {file_count} files in {len(directories)} directories")
    return 0


def show_version(args) -> int:
    """Print the tool version."""
    print(f"docscheck v{__version__}")
    return 0


def _add_check_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        'path',
        nargs='?',
        default=None,
        help='Provider codebase root (default: current directory)'
    )
    parser.add_argument(
        '--config',
        help='Path to YAML configuration file; flags override its values'
    )
    parser.add_argument(
        '--log-level',
        dest='log_level',
        choices=LOG_LEVELS,
        default=None,
        help='Logging level (default: WARNING)'
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='Number of files to check concurrently (default: 1)'
    )

    parser.add_argument('--provider-name', dest='provider_name',
                        help='Provider short name (e.g. aws); determined from --provider-source or a '
                             'terraform-provider-* directory name when omitted')
    parser.add_argument('--provider-source', dest='provider_source',
                        help='Provider source address (e.g. registry.terraform.io/hashicorp/aws)')
    parser.add_argument('--providers-schema-json', dest='providers_schema_json',
                        help='Path to terraform providers schema -json output; enables file mismatch checks')

    parser.add_argument('--enable-contents-check', dest='enable_contents_check',
                        action='store_true', default=None,
                        help='Enable section contents checks')
    parser.add_argument('--enable-enhanced-region-check', dest='enable_enhanced_region_check',
                        action='store_true', default=None,
                        help='Require an Optional region argument (requires --enable-contents-check)')
    parser.add_argument('--require-schema-ordering', dest='require_schema_ordering',
                        action='store_true', default=None,
                        help='Require schema attribute lists sorted by name (requires --enable-contents-check)')
    parser.add_argument('--require-guide-subcategory', dest='require_guide_subcategory',
                        action='store_true', default=None,
                        help='Require guide frontmatter subcategory')
    parser.add_argument('--require-resource-subcategory', dest='require_resource_subcategory',
                        action='store_true', default=None,
                        help='Require data source and resource frontmatter subcategory')
    parser.add_argument('--ignore-cdktf-missing-files', dest='ignore_cdktf_missing_files',
                        action='store_true', default=None,
                        help='Skip file mismatch checks for CDKTF documentation')

    parser.add_argument('--allowed-guide-subcategories', dest='allowed_guide_subcategories',
                        help='Comma separated list of allowed guide frontmatter subcategories')
    parser.add_argument('--allowed-guide-subcategories-file', dest='allowed_guide_subcategories_file',
                        help='Newline separated file of allowed guide frontmatter subcategories')
    parser.add_argument('--allowed-resource-subcategories', dest='allowed_resource_subcategories',
                        help='Comma separated list of allowed resource frontmatter subcategories')
    parser.add_argument('--allowed-resource-subcategories-file', dest='allowed_resource_subcategories_file',
                        help='Newline separated file of allowed resource frontmatter subcategories')
    parser.add_argument('--ignore-enhanced-region-check-subcategories',
                        dest='ignore_enhanced_region_check_subcategories',
                        help='Comma separated list of frontmatter subcategories exempt from the region check')
    parser.add_argument('--ignore-enhanced-region-check-subcategories-file',
                        dest='ignore_enhanced_region_check_subcategories_file',
                        help='Newline separated file of frontmatter subcategories exempt from the region check')

    for flag, setting in PER_KIND_FLAGS:
        for key in KIND_KEYS:
            kind = key.replace('_', '-')
            parser.add_argument(
                f'--{flag}-{kind}',
                dest=f'{setting}_{key}',
                help=f'Comma separated list of {kind} for {flag.replace("-", " ")}'
            )

    for key in KIND_KEYS:
        kind = key.replace('_', '-')
        parser.add_argument(
            f'--ignore-enhanced-region-check-{kind}-file',
            dest=f'ignore_enhanced_region_check_{key}_file',
            help=f'Newline separated file of {kind} exempt from the region check'
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the documentation check tool."""
    parser = argparse.ArgumentParser(
        prog='docscheck',
        description="Check Terraform Provider documentation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s check
  %(prog)s check --enable-contents-check --provider-name aws ../terraform-provider-aws
  %(prog)s check --config docscheck.yml
  %(prog)s version
        """
    )

    subparsers = parser.add_subparsers(
        dest='command',
        required=True,
        help='Command to run'
    )

    # check subcommand
    parser_check = subparsers.add_parser(
        'check',
        help='Check documentation directories and files'
    )
    _add_check_arguments(parser_check)

    # version subcommand
    subparsers.add_parser(
        'version',
        help='Show version'
    )

    args = parser.parse_args(argv)

    handlers: Dict[str, callable] = {
        'check': check_docs,
        'version': show_version,
    }

    handler = handlers.get(args.command)
    if handler is None:
        print(f"Error: Unknown command '{args.command}'", file=sys.stderr)
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
