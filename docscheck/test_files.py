#!/usr/bin/env python3
"""
Test suite for per-file checks.

Tests the ignore, extension and size checks, per-layout frontmatter rules,
the staged FileCheck.run and accumulate-all run_all.
"""

import pytest

from docscheck.contents_check import ContentsOptions
from docscheck.directory import DocType, Layout
from docscheck.errors import CheckError, FileCheckError
from docscheck.files import (
    REGISTRY_MAXIMUM_SIZE_OF_FILE,
    FileCheck,
    FileCheckOptions,
    FileOptions,
    file_extension_check,
    file_ignore_check,
    file_size_check,
    frontmatter_options_for,
    LEGACY_FILE_EXTENSIONS,
    REGISTRY_FILE_EXTENSIONS,
)


# ============================================================================
# File Stage Tests
# ============================================================================

def test_file_ignore_check():
    assert file_ignore_check("docs/resources/.DS_Store")
    assert not file_ignore_check("docs/resources/widget.md")


@pytest.mark.parametrize("path", ["widget.html.markdown", "widget.html.md", "widget.markdown", "widget.md"])
def test_legacy_file_extensions(path):
    file_extension_check(path, LEGACY_FILE_EXTENSIONS)


@pytest.mark.parametrize("path", ["widget.html.markdown", "widget.markdown", "widget.txt"])
def test_registry_file_extension_invalid(path):
    with pytest.raises(FileCheckError) as exc_info:
        file_extension_check(path, REGISTRY_FILE_EXTENSIONS)
    assert "file does not end with a valid extension" in str(exc_info.value)


def test_file_size_check_limit(tmp_path):
    """A file of exactly the maximum size fails; one byte less passes."""
    path = tmp_path / "widget.md"

    path.write_bytes(b"a" * (REGISTRY_MAXIMUM_SIZE_OF_FILE - 1))
    file_size_check(str(path))

    path.write_bytes(b"a" * REGISTRY_MAXIMUM_SIZE_OF_FILE)
    with pytest.raises(FileCheckError) as exc_info:
        file_size_check(str(path))
    assert "exceeded maximum (500000) size of file: 500000" in str(exc_info.value)


def test_file_size_check_missing(tmp_path):
    with pytest.raises(FileCheckError):
        file_size_check(str(tmp_path / "missing.md"))


def test_file_options_full_path():
    assert FileOptions().full_path("docs/index.md") == "docs/index.md"
    assert FileOptions(base_path="provider").full_path("docs/index.md").replace("\\", "/") == "provider/docs/index.md"


# ============================================================================
# Frontmatter Defaults Tests
# ============================================================================

def test_frontmatter_options_legacy():
    options = frontmatter_options_for(Layout.LEGACY, DocType.RESOURCE)
    assert options.no_sidebar_current
    assert options.require_layout
    assert options.require_page_title
    assert options.require_description
    assert not options.no_layout


def test_frontmatter_options_registry():
    options = frontmatter_options_for(Layout.REGISTRY, DocType.RESOURCE)
    assert options.no_layout
    assert options.no_sidebar_current
    assert options.require_page_title
    assert options.require_description
    assert not options.require_subcategory


def test_frontmatter_options_registry_action_requires_subcategory():
    assert frontmatter_options_for(Layout.REGISTRY, DocType.ACTION).require_subcategory


def test_frontmatter_options_keep_caller_settings():
    from docscheck.frontmatter import FrontMatterOptions

    base = FrontMatterOptions(allowed_subcategories=("Widgets",), require_subcategory=True)
    options = frontmatter_options_for(Layout.REGISTRY, DocType.GUIDE, base)
    assert options.allowed_subcategories == ("Widgets",)
    assert options.require_subcategory


# ============================================================================
# FileCheck Tests
# ============================================================================

ACTION_PAGE = """---
subcategory: "Widgets"
page_title: "Example: example_restart"
description: |-
  Restarts a widget.
---

# Action: example_restart

## Argument Reference

This action does not support any arguments.

## Attribute Reference

This resource exports no additional attributes.
"""

LEGACY_DATA_SOURCE_PAGE = """---
layout: "example"
page_title: "Example: example_widget"
description: |-
  Provides details about a widget.
---

# Data Source: example_widget

## Argument Reference

This data source does not support any arguments.

## Attribute Reference

This data source exports no additional attributes.
"""


def _file_check(root, doc_type=DocType.RESOURCE, layout=Layout.REGISTRY, enable=True):
    return FileCheck(doc_type, layout, FileCheckOptions(
        file=FileOptions(base_path=str(root)),
        contents=ContentsOptions(enable=enable),
        provider_name="example",
    ))


def test_file_check_valid_resource(tmp_path, write_docs, resource_page):
    write_docs(tmp_path, {"docs/resources/widget.md": resource_page})
    assert _file_check(tmp_path).run("docs/resources/widget.md", "terraform") is None


def test_file_check_ignored_file(tmp_path, write_docs):
    write_docs(tmp_path, {"docs/resources/.DS_Store": "binary"})
    assert _file_check(tmp_path).run("docs/resources/.DS_Store") is None


def test_file_check_extension_error(tmp_path, write_docs, resource_page):
    path = "docs/resources/widget.html.markdown"
    write_docs(tmp_path, {path: resource_page})

    error = _file_check(tmp_path).run(path)

    assert error.path == path
    assert error.message.startswith("error checking file extension:")


def test_file_check_frontmatter_error(tmp_path, write_docs, resource_page):
    path = "docs/resources/widget.md"
    write_docs(tmp_path, {path: resource_page.replace("---\nsubcategory", "---\nlayout: \"example\"\nsubcategory", 1)})

    error = _file_check(tmp_path).run(path)

    assert str(error) == f"{path}: error checking file frontmatter: YAML frontmatter should not contain layout"


def test_file_check_contents_error(tmp_path, write_docs, resource_page):
    path = "docs/resources/widget.md"
    write_docs(tmp_path, {path: resource_page.replace("## Argument Reference", "## Arguments Reference")})

    error = _file_check(tmp_path).run(path, "terraform")

    assert error.message.startswith("error checking file contents: arguments section heading (Arguments Reference)")


def test_file_check_contents_disabled(tmp_path, write_docs, resource_page):
    path = "docs/resources/widget.md"
    write_docs(tmp_path, {path: resource_page.replace("## Argument Reference", "## Arguments Reference")})

    assert _file_check(tmp_path, enable=False).run(path, "terraform") is None


def test_file_check_registry_action_contents_always_enabled(tmp_path, write_docs):
    path = "docs/actions/restart.md"
    write_docs(tmp_path, {path: ACTION_PAGE})

    error = _file_check(tmp_path, DocType.ACTION, enable=False).run(path)

    assert error.message == "error checking file contents: actions documentation cannot include an attributes section"


def test_file_check_guides_skip_contents(tmp_path, write_docs):
    path = "docs/guides/notes.md"
    write_docs(tmp_path, {path: "---\npage_title: \"Notes\"\n---\n\nNo sections here.\n"})

    assert _file_check(tmp_path, DocType.GUIDE).run(path) is None


def test_file_check_legacy_layout(tmp_path, write_docs):
    path = "website/docs/d/widget.html.markdown"
    write_docs(tmp_path, {path: LEGACY_DATA_SOURCE_PAGE})

    assert _file_check(tmp_path, DocType.DATA_SOURCE, Layout.LEGACY).run(path) is None


def test_file_check_legacy_requires_layout(tmp_path, write_docs):
    path = "website/docs/d/widget.html.markdown"
    write_docs(tmp_path, {path: LEGACY_DATA_SOURCE_PAGE.replace("layout: \"example\"\n", "")})

    error = _file_check(tmp_path, DocType.DATA_SOURCE, Layout.LEGACY).run(path)

    assert error.message == "error checking file frontmatter: YAML frontmatter missing required layout"


# ============================================================================
# Accumulate-All Tests
# ============================================================================

def test_run_all_accumulates_sorted(tmp_path, write_docs, resource_page):
    """Every failing file is reported once, sorted by path."""
    write_docs(tmp_path, {
        "docs/resources/widget.md": resource_page,
        "docs/resources/b.md": "# no frontmatter\n",
        "docs/resources/a.txt": "text",
    })

    errors = _file_check(tmp_path).run_all(
        ["docs/resources/widget.md", "docs/resources/b.md", "docs/resources/a.txt"], "terraform",
    )

    assert [error.path for error in errors] == ["docs/resources/a.txt", "docs/resources/b.md"]
    assert all(isinstance(error, CheckError) for error in errors)


def test_run_all_no_errors(tmp_path, write_docs, resource_page):
    write_docs(tmp_path, {"docs/resources/widget.md": resource_page})
    assert _file_check(tmp_path).run_all(["docs/resources/widget.md"], "terraform") == []


def test_run_all_workers_same_result(tmp_path, write_docs, resource_page):
    """A thread pool gives the same sorted report regardless of completion order."""
    files = {f"docs/resources/w{i}.md": resource_page.replace("## Import", "## Imports") for i in range(6)}
    write_docs(tmp_path, files)

    sequential = _file_check(tmp_path).run_all(list(files), "terraform")
    concurrent = _file_check(tmp_path).run_all(list(reversed(list(files))), "terraform", workers=4)

    assert len(sequential) == 6
    assert sequential == concurrent
