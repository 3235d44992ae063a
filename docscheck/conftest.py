"""Shared pytest fixtures for documentation check tests."""

from pathlib import Path
from typing import Dict

import pytest


RESOURCE_PAGE = """---
subcategory: "Widgets"
page_title: "Example: example_widget"
description: |-
  Manages a widget.
---

# Resource: example_widget

Manages a widget.

## Example Usage

```terraform
resource "example_widget" "example" {
  name = "example"
}
```

## Argument Reference

The following arguments are required:

* `name` - (Required) Name of the widget.

The following arguments are optional:

* `description` - (Optional) Description of the widget.
* `region` - (Optional) Region where this resource will be managed.

## Attribute Reference

This resource exports the following attributes in addition to the arguments above:

* `arn` - ARN of the widget.
* `id` - Name of the widget.

## Import

In Terraform v1.5.0 and later, use an [`import` block](https://developer.hashicorp.com/terraform/language/import) to import widgets using the `name`. For example:

```terraform
import {
  to = example_widget.example
  id = "example"
}
```

Using `terraform import`, import widgets using the `name`. For example:

```console
% terraform import example_widget.example example
```
"""

DATA_SOURCE_PAGE = """---
subcategory: "Widgets"
page_title: "Example: example_widget"
description: |-
  Provides details about a widget.
---

# Data Source: example_widget

Provides details about a widget.

## Example Usage

```terraform
data "example_widget" "example" {
  name = "example"
}
```

## Argument Reference

This data source supports the following arguments:

* `name` - (Required) Name of the widget.

## Attribute Reference

This data source exports the following attributes in addition to the arguments above:

* `arn` - ARN of the widget.
"""

INDEX_PAGE = """---
page_title: "Provider: Example"
description: |-
  Use the Example provider to manage widgets.
---

# Example Provider

Use the Example provider to manage widgets.
"""

GUIDE_PAGE = """---
subcategory: ""
page_title: "Getting Started"
description: |-
  Getting started with the Example provider.
---

# Getting Started

Configure the provider first.
"""

REGISTRY_FILES = {
    "docs/index.md": INDEX_PAGE,
    "docs/guides/getting-started.md": GUIDE_PAGE,
    "docs/data-sources/widget.md": DATA_SOURCE_PAGE,
    "docs/resources/widget.md": RESOURCE_PAGE,
}


def write_files(root: Path, files: Dict[str, str]) -> Path:
    """Write relative path -> content pairs under root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def resource_page() -> str:
    """A registry resource page that passes every default check."""
    return RESOURCE_PAGE


@pytest.fixture
def data_source_page() -> str:
    return DATA_SOURCE_PAGE


@pytest.fixture
def write_docs():
    """Write documentation files: write_docs(root, {relative path: content})."""
    return write_files


@pytest.fixture
def provider_dir(tmp_path) -> Path:
    """
    A provider codebase with a valid registry documentation tree.

    Returns:
        Path to ``terraform-provider-example``
    """
    return write_files(tmp_path / "terraform-provider-example", REGISTRY_FILES)
