"""Userscript metadata block serialization tests."""

from __future__ import annotations

import pytest

from userskripter.exceptions import ConfigurationError, MetadataBlockError
from userskripter.metadata.block import UserscriptMetadata
from userskripter.metadata.header import (
    METADATA_END,
    METADATA_START,
    MetadataBlockBuilder,
    alphabetical,
    comparator_from_order,
    serialize_metadata_block,
)
from userskripter.metadata.property import single
from userskripter.metadata.run_at import DOCUMENT_END
from userskripter.project import ProjectInfo, UserskripterSettings


def _content_lines(block: str) -> list:
    return block.splitlines()[1:-1]


def test_minimal_block_matches_expected_layout(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.version = "1.0"
    bare_metadata.add_match("*://example.com/*")

    block = serialize_metadata_block(bare_metadata)

    assert block == (
        "// ==UserScript==\n"
        "// @name     Foo\n"
        "// @version  1.0\n"
        "// @match    *://example.com/*\n"
        "// ==/UserScript==\n"
    )


def test_block_is_bounded_by_markers(metadata: UserscriptMetadata) -> None:
    block = serialize_metadata_block(metadata)

    assert block.startswith(f"// {METADATA_START}\n")
    assert block.endswith(f"// {METADATA_END}\n")
    assert not block.endswith("\n\n")


def test_project_defaults_fill_identity_fields(metadata: UserscriptMetadata) -> None:
    metadata.match_host_name("example.com")
    metadata.add_grant("GM.getValue")
    metadata.run_at = DOCUMENT_END
    metadata.no_frames = True

    block = serialize_metadata_block(metadata)

    assert _content_lines(block) == [
        "// @name         example-script",
        "// @namespace    com.example",
        "// @description  Example userscript",
        "// @version      1.2.0",
        "// @match        *://example.com/*",
        "// @match        *://www.example.com/*",
        "// @grant        GM.getValue",
        "// @run-at       document-end",
        "// @noframes",
    ]


def test_value_columns_are_aligned(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.add_require("https://cdn.example.com/lib.js")
    bare_metadata.author = "someone"

    lines = _content_lines(serialize_metadata_block(bare_metadata))
    values = ["Foo", "https://cdn.example.com/lib.js", "someone"]
    columns = {line.index(value) for line, value in zip(lines, values)}

    assert len(columns) == 1
    name_line, require_line = lines[0], lines[1]
    assert name_line.startswith("// @name     ")
    assert require_line.startswith("// @require  ")


def test_name_is_first_regardless_of_comparator(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.author = "zed"
    bare_metadata.version = "2.0"
    bare_metadata.add_match("*://a.example/*")
    bare_metadata.sort(alphabetical)

    keys = [line.split()[1] for line in _content_lines(serialize_metadata_block(bare_metadata))]

    assert keys == ["@name", "@author", "@match", "@version"]


def test_comparator_from_order_puts_listed_keys_first(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.author = "zed"
    bare_metadata.version = "2.0"
    bare_metadata.icon = "https://example.com/icon.png"
    bare_metadata.sort(comparator_from_order(["version", "name"]))

    keys = [line.split()[1] for line in _content_lines(serialize_metadata_block(bare_metadata))]

    assert keys == ["@name", "@version", "@author", "@icon"]


def test_missing_name_is_a_configuration_error(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.name = None

    with pytest.raises(MetadataBlockError):
        serialize_metadata_block(bare_metadata)
    with pytest.raises(ConfigurationError):
        serialize_metadata_block(bare_metadata)


def test_serialization_is_idempotent(metadata: UserscriptMetadata) -> None:
    metadata.add_match("*://example.com/*")

    assert serialize_metadata_block(metadata) == serialize_metadata_block(metadata)


def test_empty_lists_and_false_flags_emit_nothing(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.match = []
    bare_metadata.resource = {}
    bare_metadata.grant = None
    bare_metadata.no_frames = False

    assert _content_lines(serialize_metadata_block(bare_metadata)) == ["// @name  Foo"]


def test_flag_renders_key_without_value(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.no_frames = True

    lines = _content_lines(serialize_metadata_block(bare_metadata))

    assert lines == ["// @name      Foo", "// @noframes"]


def test_named_entries_render_key_and_value(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.add_resource(("logo", "https://example.com/logo.png"), css="https://example.com/site.css")

    lines = _content_lines(serialize_metadata_block(bare_metadata))

    assert lines[1:] == [
        "// @resource  logo https://example.com/logo.png",
        "// @resource  css https://example.com/site.css",
    ]


def test_extra_properties_follow_declared_ones(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.extra("license", "MIT")
    bare_metadata.extra("compatible", "firefox", "chrome")
    bare_metadata.author = "someone"

    lines = _content_lines(serialize_metadata_block(bare_metadata))

    assert lines == [
        "// @name        Foo",
        "// @author      someone",
        "// @license     MIT",
        "// @compatible  firefox",
        "// @compatible  chrome",
    ]


def test_build_only_id_property_is_not_serialized(settings) -> None:
    class _MetadataWithId(UserscriptMetadata):
        build_id = single("id", lambda self: "internal-id")

    block = serialize_metadata_block(_MetadataWithId(settings))

    assert "@id" not in block
    assert "internal-id" not in block


def test_extra_id_is_not_serialized(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.extra("id", "internal-id")

    assert "@id" not in serialize_metadata_block(bare_metadata)


def test_values_with_line_breaks_are_rejected(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.description = "first line\nsecond line"

    with pytest.raises(MetadataBlockError):
        serialize_metadata_block(bare_metadata)


def test_builder_requires_name() -> None:
    builder = MetadataBlockBuilder()
    builder.single("version", "1.0")

    with pytest.raises(MetadataBlockError):
        builder.encode()


def test_empty_single_values_are_omitted() -> None:
    metadata = UserscriptMetadata(UserskripterSettings(project=ProjectInfo(name="Foo", description="")))
    metadata.author = ""

    block = serialize_metadata_block(metadata)

    assert "@description" not in block
    assert "@author" not in block
    assert block == "// ==UserScript==\n// @name  Foo\n// ==/UserScript==\n"


def test_empty_entries_of_many_are_omitted(bare_metadata: UserscriptMetadata) -> None:
    bare_metadata.add_match("", "*://example.com/*")

    assert _content_lines(serialize_metadata_block(bare_metadata)) == [
        "// @name   Foo",
        "// @match  *://example.com/*",
    ]
