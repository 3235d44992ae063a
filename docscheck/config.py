"""
Check configuration.

Settings come from an optional YAML file validated against
config_schema.json, with command line values layered on top. Lists may be
given inline or as newline separated files; file contents replace inline
values. build_check_options() resolves everything into DocsCheckOptions.
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from jsonschema import Draft7Validator

from docscheck.check import DocsCheckOptions
from docscheck.contents_check import ContentsOptions
from docscheck.directory import DocType
from docscheck.errors import ConfigError
from docscheck.frontmatter import FrontMatterOptions
from docscheck.provider_schema import load_provider_schemas, provider_schema_names

logger = logging.getLogger(__name__)

CONFIG_SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

PROVIDER_DIRECTORY_PREFIX = "terraform-provider-"

# Keys of per-kind lists in configuration files and flag names
KIND_KEYS = {
    "actions": DocType.ACTION,
    "data_sources": DocType.DATA_SOURCE,
    "ephemerals": DocType.EPHEMERAL,
    "functions": DocType.FUNCTION,
    "list_resources": DocType.LIST_RESOURCE,
    "resources": DocType.RESOURCE,
}


@dataclass
class CheckConfig:
    """Settings for one ``docscheck check`` run."""
    path: str = ""
    provider_name: str = ""
    provider_source: str = ""
    providers_schema_json: str = ""
    log_level: str = "WARNING"
    workers: int = 1

    enable_contents_check: bool = False
    enable_enhanced_region_check: bool = False
    require_schema_ordering: bool = False
    require_guide_subcategory: bool = False
    require_resource_subcategory: bool = False
    ignore_cdktf_missing_files: bool = False

    allowed_guide_subcategories: List[str] = field(default_factory=list)
    allowed_guide_subcategories_file: str = ""
    allowed_resource_subcategories: List[str] = field(default_factory=list)
    allowed_resource_subcategories_file: str = ""

    ignore_contents_check: Dict[str, List[str]] = field(default_factory=dict)
    ignore_enhanced_region_check: Dict[str, List[str]] = field(default_factory=dict)
    ignore_enhanced_region_check_files: Dict[str, str] = field(default_factory=dict)
    ignore_enhanced_region_check_subcategories: List[str] = field(default_factory=list)
    ignore_enhanced_region_check_subcategories_file: str = ""
    ignore_file_mismatch: Dict[str, List[str]] = field(default_factory=dict)
    ignore_file_missing: Dict[str, List[str]] = field(default_factory=dict)


def _load_config_schema() -> Dict[str, Any]:
    with open(CONFIG_SCHEMA_PATH) as f:
        return json.load(f)


def load_config(path: Union[str, Path]) -> CheckConfig:
    """
    Load a YAML configuration file.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML or does
            not match the configuration schema
    """
    logger.debug("Loading configuration file: %s", path)

    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"error reading configuration file ({path}): {e}", str(path))

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"error parsing configuration file ({path}): {e}", str(path))

    if data is None:
        return CheckConfig()

    validator = Draft7Validator(_load_config_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        error = errors[0]
        location = ".".join(str(part) for part in error.path) or "(root)"
        raise ConfigError(f"invalid configuration file ({path}): {location}: {error.message}", str(path))

    return CheckConfig(**data)


def merge_config(config: CheckConfig, overrides: Dict[str, Any]) -> CheckConfig:
    """
    Layer explicit values over a configuration.

    None values are ignored; per-kind mappings are merged key by key.
    """
    names = {f.name for f in fields(CheckConfig)}
    changes: Dict[str, Any] = {}

    for name, value in overrides.items():
        if name not in names:
            raise ConfigError(f"unknown configuration setting: {name}")
        if value is None:
            continue
        current = getattr(config, name)
        if isinstance(current, dict):
            value = {**current, **value}
        changes[name] = value

    return replace(config, **changes)


def split_list(value: Optional[str]) -> List[str]:
    """
    Split a comma separated flag value.

    Example:
        >>> split_list("aws_instance, aws_vpc,")
        ['aws_instance', 'aws_vpc']
    """
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def read_list_file(path: Union[str, Path]) -> List[str]:
    """
    Read a newline separated list file, skipping blank lines.

    Raises:
        ConfigError: If the file cannot be read
    """
    logger.debug("Loading list file: %s", path)

    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"error reading list file ({path}): {e}", str(path))

    return [line.strip() for line in content.splitlines() if line.strip()]


def _resolve_list(values: List[str], path: str) -> Tuple[str, ...]:
    if path:
        return tuple(read_list_file(path))
    return tuple(values)


def provider_name_from_path(path: Union[str, Path]) -> str:
    """
    Provider name from a ``terraform-provider-<name>`` directory.

    Example:
        >>> provider_name_from_path("/src/terraform-provider-aws")
        'aws'
        >>> provider_name_from_path("/src/docs")
        ''
    """
    base = Path(path).name
    if not base.startswith(PROVIDER_DIRECTORY_PREFIX):
        return ""

    name = base[len(PROVIDER_DIRECTORY_PREFIX):]
    if not name or "." in name:
        return ""
    return name


def resolve_provider_name(config: CheckConfig) -> str:
    """Explicit name, else last segment of the source address, else the directory name."""
    if config.provider_name:
        return config.provider_name

    if config.provider_source:
        return config.provider_source.rstrip("/").split("/")[-1]

    if config.path:
        return provider_name_from_path(Path(config.path).resolve())

    return provider_name_from_path(os.getcwd())


def _per_kind(values: Dict[str, List[str]]) -> Dict[DocType, Tuple[str, ...]]:
    return {KIND_KEYS[key]: tuple(names) for key, names in values.items() if key in KIND_KEYS}


def build_check_options(config: CheckConfig) -> DocsCheckOptions:
    """
    Resolve a configuration into options for Check.

    Raises:
        ConfigError: If a list file cannot be read, or schema checks are
            requested without a known provider name
        ProviderSchemaError: If the providers schema JSON file is invalid
    """
    provider_name = resolve_provider_name(config)

    if provider_name:
        logger.debug("Found provider name: %s", provider_name)
    else:
        logger.warning("Unable to determine provider name. Contents and enhanced validations may fail.")

    ignore_enhanced_region_check = _per_kind(config.ignore_enhanced_region_check)
    for key, path in config.ignore_enhanced_region_check_files.items():
        ignore_enhanced_region_check[KIND_KEYS[key]] = tuple(read_list_file(path))

    schema_names: Dict[DocType, Tuple[str, ...]] = {}
    if config.providers_schema_json:
        if not provider_name:
            raise ConfigError(
                "Unknown provider name for enabling Terraform Provider schema checks. Check that the current "
                f"working directory or provided path is prefixed with {PROVIDER_DIRECTORY_PREFIX}*."
            )

        schemas = load_provider_schemas(config.providers_schema_json)
        for doc_type in KIND_KEYS.values():
            schema_names[doc_type] = tuple(
                provider_schema_names(schemas, doc_type, provider_name, config.provider_source)
            )

    contents = ContentsOptions(
        enable=config.enable_contents_check,
        enhanced_region_checks=config.enable_enhanced_region_check,
        provider_name=provider_name,
        require_schema_ordering=config.require_schema_ordering,
        ignore_enhanced_region_check_subcategories=_resolve_list(
            config.ignore_enhanced_region_check_subcategories,
            config.ignore_enhanced_region_check_subcategories_file,
        ),
    )

    return DocsCheckOptions(
        base_path=config.path,
        provider_name=provider_name,
        contents=contents,
        resource_front_matter=FrontMatterOptions(
            allowed_subcategories=_resolve_list(config.allowed_resource_subcategories,
                                                config.allowed_resource_subcategories_file),
            require_subcategory=config.require_resource_subcategory,
        ),
        guide_front_matter=FrontMatterOptions(
            allowed_subcategories=_resolve_list(config.allowed_guide_subcategories,
                                                config.allowed_guide_subcategories_file),
            require_subcategory=config.require_guide_subcategory,
        ),
        ignore_contents_check=_per_kind(config.ignore_contents_check),
        ignore_enhanced_region_check=ignore_enhanced_region_check,
        schema_names=schema_names,
        ignore_file_mismatch=_per_kind(config.ignore_file_mismatch),
        ignore_file_missing=_per_kind(config.ignore_file_missing),
        ignore_cdktf_missing_files=config.ignore_cdktf_missing_files,
        workers=config.workers,
    )
