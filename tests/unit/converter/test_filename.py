"""Tests for hugoify/converter/filename.py."""

from __future__ import annotations

import re
from pathlib import Path

from hypothesis import given
from hypothesis import strategies as st

from hugoify.converter.filename import output_path, resolve_filename, slugify_title

_SLUG_FILE_RE = re.compile(r"^[a-z0-9-]*\.md$")


class TestSlugifyTitle:
    def test_ascii_words_are_kept(self):
        # Latin words are kept, not dropped, so the page ID is not used.
        assert slugify_title("Hello World") == "hello-world"
        assert resolve_filename("abc-123", "Hello World") != "abc-123.md"

    def test_chinese_is_romanized(self):
        assert slugify_title("你好世界") == "ni-hao-shi-jie"

    def test_mixed_keeps_latin_prefix(self):
        assert slugify_title("Go 语言") == "go-yu-yan"
        assert slugify_title("Go语言") == "go-yu-yan"

    def test_punctuation_becomes_hyphens(self):
        assert slugify_title("C++ & Rust: a tour!") == "c-rust-a-tour"

    def test_collapses_and_trims(self):
        assert slugify_title("--a   b--") == "a-b"

    def test_empty(self):
        assert slugify_title("") == ""

    def test_symbols_only(self):
        assert slugify_title("!!!") == ""


class TestResolveFilename:
    def test_uses_slug(self):
        assert resolve_filename("abc", "Hello World") == "hello-world.md"

    def test_empty_title_falls_back_to_id(self):
        assert resolve_filename("abc-123", "") == "abc-123.md"

    def test_unusable_title_falls_back_to_id(self):
        assert resolve_filename("abc-123", "???") == "abc-123.md"

    @given(st.text(max_size=30))
    def test_filename_shape(self, title):
        name = resolve_filename("PAGE_ID", title)
        assert _SLUG_FILE_RE.match(name) or name == "PAGE_ID.md"


class TestOutputPath:
    def test_category_dir(self):
        assert output_path("content/posts", "tech", "a.md") == Path("content/posts/tech/a.md")

    def test_uncategorized(self):
        assert output_path("content/posts", None, "a.md") == Path("content/posts/uncategorized/a.md")
