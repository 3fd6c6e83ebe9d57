"""Tests for openwords.infrastructure.utils.text frontmatter helpers."""

from datetime import date

import pytest

from openwords.infrastructure.utils.text import (
    parse_frontmatter,
    rebuild_markdown_with_frontmatter,
    scrub_internal_keys,
    update_frontmatter_fields,
)

# ---------- Frontmatter Parsing Tests ----------


def test_parse_frontmatter_valid():
    md = "---\ntags:\n  - L1\ndue_date: 2024-01-01\nefactor: 250\n---\nBody content"
    meta, body = parse_frontmatter(md)
    assert meta["tags"] == ["L1"]
    assert meta["due_date"] == date(2024, 1, 1)
    assert meta["efactor"] == 250
    assert body.strip() == "Body content"


def test_parse_frontmatter_empty():
    md = "Just text, no YAML."
    meta, body = parse_frontmatter(md)
    assert meta == {}
    assert body == md


def test_parse_frontmatter_unclosed():
    md = "---\nfoo: bar\nbody"
    meta, body = parse_frontmatter(md)
    assert meta == {}
    assert body == md


def test_parse_frontmatter_invalid_yaml():
    md = "---\n: broken yaml\n---\nBody"
    meta, body = parse_frontmatter(md)
    assert "__yaml_error__" in meta
    assert body == md


def test_parse_frontmatter_tabs():
    """Tabs in frontmatter are replaced by spaces during parsing."""
    text = "---\n\tkey: value\n---\ncontent"
    meta, rest = parse_frontmatter(text)
    assert scrub_internal_keys(meta) == {"key": "value"}
    assert rest == "content"


def test_parse_frontmatter_bom():
    meta, body = parse_frontmatter("\ufeff---\nfoo: bar\n---\nbody")
    assert meta == {"foo": "bar"}
    assert body == "body"


def test_parse_frontmatter_not_a_mapping():
    meta, _ = parse_frontmatter("---\n- a\n- b\n---\nbody")
    assert "__yaml_error__" in meta


def test_duplicate_keys_error():
    """Duplicate keys are reported instead of silently keeping the last one."""
    meta, _ = parse_frontmatter("---\nkey: v1\nkey: v2\n---\n")
    assert "found duplicate key 'key'" in meta["__yaml_error__"]


# ---------- Rebuild / Update Tests ----------


def test_scrub_internal_keys():
    assert scrub_internal_keys({"a": 1, "__line__": 3, "b": [{"__x": 1, "c": 2}]}) == {
        "a": 1,
        "b": [{"c": 2}],
    }


def test_rebuild_markdown_roundtrip():
    meta = {"due_date": date(2024, 1, 1), "tags": ["L1"]}
    body = "Original Body"
    rebuilt = rebuild_markdown_with_frontmatter(meta, body)

    parsed_meta, parsed_body = parse_frontmatter(rebuilt)
    assert parsed_meta == meta
    assert parsed_body.strip() == "Original Body"


def test_rebuild_markdown_format():
    full_text = rebuild_markdown_with_frontmatter(
        {"foo": "bar", "tags": ["L1"], "note": "line one\nline two\n"}, "Content"
    )
    assert full_text.startswith("---\nfoo: bar\n")
    assert "tags:\n  - L1\n" in full_text
    assert "note: |-\n  line one\n  line two\n" in full_text
    assert full_text.endswith("---\nContent")


def test_update_frontmatter_fields_keeps_order_and_body():
    md = "---\ntags:\n  - L1\ndue_date: 2024-01-01\ninterval: 0\n---\n# apple\n\nA fruit.\n"
    updated = update_frontmatter_fields(md, {"due_date": date(2024, 2, 1), "interval": 3})
    assert updated == (
        "---\ntags:\n  - L1\ndue_date: 2024-02-01\ninterval: 3\n---\n# apple\n\nA fruit.\n"
    )


def test_update_frontmatter_fields_adds_block():
    assert update_frontmatter_fields("Body", {"interval": 1}) == "---\ninterval: 1\n---\nBody"


def test_update_frontmatter_fields_refuses_broken_yaml():
    with pytest.raises(ValueError):
        update_frontmatter_fields("---\nkey: v1\nkey: v2\n---\n", {"interval": 1})
