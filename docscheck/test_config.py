#!/usr/bin/env python3
"""
Test suite for configuration loading and resolution.

Tests YAML loading against the configuration schema, layering of command
line values, list files, provider name resolution and providers schema
JSON handling.
"""

import json

import pytest
from jsonschema import Draft7Validator

from docscheck.config import (
    CheckConfig,
    _load_config_schema,
    build_check_options,
    load_config,
    merge_config,
    provider_name_from_path,
    read_list_file,
    resolve_provider_name,
    split_list,
)
from docscheck.directory import DocType
from docscheck.errors import ConfigError, ProviderSchemaError
from docscheck.provider_schema import load_provider_schemas, provider_schema_names


PROVIDERS_SCHEMA = {
    "format_version": "1.0",
    "provider_schemas": {
        "registry.terraform.io/hashicorp/example": {
            "resource_schemas": {"example_widget": {}, "example_gadget": {}},
            "data_source_schemas": {"example_widget": {}},
            "functions": {"parse_id": {}},
        },
    },
}


def test_config_schema_is_valid():
    Draft7Validator.check_schema(_load_config_schema())


# ============================================================================
# Loading Tests
# ============================================================================

def test_load_config(tmp_path):
    path = tmp_path / "docscheck.yml"
    path.write_text(
        "provider_name: example\n"
        "enable_contents_check: true\n"
        "workers: 4\n"
        "allowed_resource_subcategories:\n"
        "  - Widgets\n"
        "ignore_file_missing:\n"
        "  resources:\n"
        "    - example_gadget\n"
    )

    config = load_config(path)

    assert config.provider_name == "example"
    assert config.enable_contents_check
    assert config.workers == 4
    assert config.allowed_resource_subcategories == ["Widgets"]
    assert config.ignore_file_missing == {"resources": ["example_gadget"]}


def test_load_config_empty(tmp_path):
    path = tmp_path / "docscheck.yml"
    path.write_text("")
    assert load_config(path) == CheckConfig()


@pytest.mark.parametrize("content,location", [
    ("unknown_setting: true\n", "(root)"),
    ("enable_contents_check: yes please\n", "enable_contents_check"),
    ("workers: 0\n", "workers"),
    ("ignore_file_missing:\n  widgets: [example_widget]\n", "ignore_file_missing"),
])
def test_load_config_invalid(tmp_path, content, location):
    path = tmp_path / "docscheck.yml"
    path.write_text(content)

    with pytest.raises(ConfigError) as exc_info:
        load_config(path)

    assert f"invalid configuration file ({path}): {location}:" in str(exc_info.value)
    assert exc_info.value.path == str(path)


def test_load_config_bad_yaml(tmp_path):
    path = tmp_path / "docscheck.yml"
    path.write_text("provider_name: [unclosed\n")
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert "error parsing configuration file" in str(exc_info.value)


def test_load_config_missing(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yml")


# ============================================================================
# Merge and List Tests
# ============================================================================

def test_merge_config():
    config = CheckConfig(provider_name="example", ignore_file_missing={"resources": ["example_gadget"]})

    merged = merge_config(config, {
        "provider_name": None,
        "enable_contents_check": True,
        "ignore_file_missing": {"data_sources": ["example_gadget"]},
    })

    assert merged.provider_name == "example"
    assert merged.enable_contents_check
    assert merged.ignore_file_missing == {
        "resources": ["example_gadget"],
        "data_sources": ["example_gadget"],
    }
    assert not config.enable_contents_check


def test_merge_config_unknown_setting():
    with pytest.raises(ConfigError):
        merge_config(CheckConfig(), {"enable_everything": True})


def test_split_list():
    assert split_list(None) == []
    assert split_list("") == []
    assert split_list("a, b,,c ") == ["a", "b", "c"]


def test_read_list_file(tmp_path):
    path = tmp_path / "list.txt"
    path.write_text("Widgets\n\n  Gadgets  \n")
    assert read_list_file(path) == ["Widgets", "Gadgets"]

    with pytest.raises(ConfigError):
        read_list_file(tmp_path / "missing.txt")


# ============================================================================
# Provider Name Tests
# ============================================================================

@pytest.mark.parametrize("path,expected", [
    ("/src/terraform-provider-example", "example"),
    ("terraform-provider-aws", "aws"),
    ("/src/terraform-provider-", ""),
    ("/src/terraform-provider-example.git", ""),
    ("/src/docs", ""),
])
def test_provider_name_from_path(path, expected):
    assert provider_name_from_path(path) == expected


def test_resolve_provider_name(tmp_path):
    assert resolve_provider_name(CheckConfig(provider_name="explicit", provider_source="a/b/c")) == "explicit"
    assert resolve_provider_name(CheckConfig(provider_source="registry.terraform.io/hashicorp/aws")) == "aws"
    assert resolve_provider_name(CheckConfig(path=str(tmp_path / "terraform-provider-example"))) == "example"


# ============================================================================
# Build Tests
# ============================================================================

def test_build_check_options(tmp_path):
    subcategories = tmp_path / "subcategories.txt"
    subcategories.write_text("Widgets\nGadgets\n")
    regions = tmp_path / "regions.txt"
    regions.write_text("example_global\n")

    config = CheckConfig(
        path=str(tmp_path / "terraform-provider-example"),
        enable_contents_check=True,
        allowed_resource_subcategories=["Ignored"],
        allowed_resource_subcategories_file=str(subcategories),
        require_guide_subcategory=True,
        ignore_contents_check={"resources": ["example_widget"]},
        ignore_enhanced_region_check={"data_sources": ["example_widget"]},
        ignore_enhanced_region_check_files={"resources": str(regions)},
        workers=2,
    )

    options = build_check_options(config)

    assert options.provider_name == "example"
    assert options.contents.enable
    assert options.contents.provider_name == "example"
    assert options.resource_front_matter.allowed_subcategories == ("Widgets", "Gadgets")
    assert options.guide_front_matter.require_subcategory
    assert options.ignore_contents_check == {DocType.RESOURCE: ("example_widget",)}
    assert options.ignore_enhanced_region_check == {
        DocType.DATA_SOURCE: ("example_widget",),
        DocType.RESOURCE: ("example_global",),
    }
    assert options.schema_names == {}
    assert options.workers == 2


def test_build_check_options_schema_names(tmp_path):
    schema = tmp_path / "schema.json"
    schema.write_text(json.dumps(PROVIDERS_SCHEMA))

    options = build_check_options(CheckConfig(
        path=str(tmp_path),
        provider_name="example",
        providers_schema_json=str(schema),
    ))

    assert options.schema_names[DocType.RESOURCE] == ("example_gadget", "example_widget")
    assert options.schema_names[DocType.DATA_SOURCE] == ("example_widget",)
    assert options.schema_names[DocType.FUNCTION] == ("parse_id",)
    assert options.schema_names[DocType.ACTION] == ()


def test_build_check_options_schema_without_provider_name(tmp_path):
    schema = tmp_path / "schema.json"
    schema.write_text(json.dumps(PROVIDERS_SCHEMA))

    with pytest.raises(ConfigError) as exc_info:
        build_check_options(CheckConfig(path=str(tmp_path), providers_schema_json=str(schema)))

    assert "Unknown provider name" in str(exc_info.value)


# ============================================================================
# Providers Schema Tests
# ============================================================================

def test_load_provider_schemas_invalid(tmp_path):
    path = tmp_path / "schema.json"

    path.write_text("{not json")
    with pytest.raises(ProviderSchemaError):
        load_provider_schemas(path)

    path.write_text(json.dumps({"format_version": "2.0"}))
    with pytest.raises(ProviderSchemaError) as exc_info:
        load_provider_schemas(path)
    assert "format_version" in str(exc_info.value)


def test_provider_schema_names_lookup():
    schemas = PROVIDERS_SCHEMA["provider_schemas"]

    assert provider_schema_names(schemas, DocType.RESOURCE, "example") == ["example_gadget", "example_widget"]
    assert provider_schema_names(
        schemas, DocType.DATA_SOURCE, "other", "registry.terraform.io/hashicorp/example",
    ) == ["example_widget"]
    assert provider_schema_names(schemas, DocType.RESOURCE, "missing") == []
    assert provider_schema_names(schemas, DocType.EPHEMERAL, "example") == []
