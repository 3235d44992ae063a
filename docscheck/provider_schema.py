"""
Provider schema names from ``terraform providers schema -json`` output.

Only the envelope is validated (format version plus one object of schema
maps per provider); attribute-level schema contents are not inspected.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from jsonschema import Draft7Validator

from docscheck.directory import DocType
from docscheck.errors import ProviderSchemaError

logger = logging.getLogger(__name__)

# Key in each provider's schema object holding the names for a kind
SCHEMA_KEYS = {
    DocType.ACTION: "action_schemas",
    DocType.DATA_SOURCE: "data_source_schemas",
    DocType.EPHEMERAL: "ephemeral_resource_schemas",
    DocType.FUNCTION: "functions",
    DocType.LIST_RESOURCE: "list_resource_schemas",
    DocType.RESOURCE: "resource_schemas",
}

PROVIDER_SCHEMAS_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["format_version"],
    "properties": {
        "format_version": {"type": "string", "pattern": "^1\\."},
        "provider_schemas": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {key: {"type": ["object", "null"]} for key in SCHEMA_KEYS.values()},
            },
        },
    },
}


def load_provider_schemas(path: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
    """
    Load and validate a providers schema JSON file.

    Returns:
        Mapping of provider address to its schema object

    Raises:
        ProviderSchemaError: If the file cannot be read, parsed or validated
    """
    logger.debug("Loading providers schema JSON file: %s", path)

    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ProviderSchemaError(f"error reading providers schema JSON file ({path}): {e}", str(path))

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ProviderSchemaError(f"error parsing providers schema JSON file ({path}): {e}", str(path))

    errors = sorted(Draft7Validator(PROVIDER_SCHEMAS_SCHEMA).iter_errors(data), key=lambda e: list(e.path))
    if errors:
        error = errors[0]
        location = "/".join(str(part) for part in error.path) or "(root)"
        raise ProviderSchemaError(
            f"error validating providers schema JSON file ({path}): {location}: {error.message}", str(path)
        )

    return data.get("provider_schemas") or {}


def provider_schema_names(schemas: Dict[str, Dict[str, Any]], doc_type: DocType,
                          provider_name: str, provider_source: str = "") -> List[str]:
    """
    Sorted schema names of one kind for a provider.

    The provider is looked up by source address, then by bare name, then by
    any address ending in ``/<name>``.

    Example:
        >>> schemas = {"registry.terraform.io/hashicorp/aws": {"resource_schemas": {"aws_vpc": {}}}}
        >>> provider_schema_names(schemas, DocType.RESOURCE, "aws")
        ['aws_vpc']
    """
    provider = None

    if provider_source and provider_source in schemas:
        provider = schemas[provider_source]
    elif provider_name in schemas:
        provider = schemas[provider_name]
    elif provider_name:
        for address in sorted(schemas):
            if address.endswith(f"/{provider_name}"):
                provider = schemas[address]
                break

    if provider is None:
        logger.warning("Provider source (%s) and name (%s) not found in provider schema",
                       provider_source, provider_name)
        return []

    names = sorted(provider.get(SCHEMA_KEYS[doc_type]) or {})
    logger.debug("Found provider schema %s names: %s", doc_type.value, names)
    return names
