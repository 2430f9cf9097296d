"""Tests for hugoify/converter/renderer.py."""

from __future__ import annotations

import logging
from io import StringIO

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hugoify.config import HugoifyConfig
from hugoify.converter.renderer import (
    MarkdownRenderer,
    extract_youtube_id,
    is_youtube_url,
    url_filename,
)
from hugoify.errors import HugoifyMediaError, HugoifyUnsupportedBlockError
from hugoify.models import (
    Bookmark,
    BulletItem,
    Callout,
    CalloutIcon,
    Code,
    ColumnList,
    Divider,
    Equation,
    File,
    Heading,
    Image,
    MediaContext,
    NumberedItem,
    Paragraph,
    Quote,
    Table,
    TextRun,
    Todo,
    Toggle,
    Unsupported,
    Video,
)


def runs(text: str, **flags) -> tuple[TextRun, ...]:
    return (TextRun(text, **flags),)


def render(renderer: MarkdownRenderer, node, context=None) -> str:
    out = StringIO()
    renderer.render(node, out, context)
    return out.getvalue()


class TestTextBlocks:
    def test_headings(self, renderer):
        assert render(renderer, Heading(1, runs("A"))) == "# A\n\n"
        assert render(renderer, Heading(2, runs("B"))) == "## B\n\n"
        assert render(renderer, Heading(3, runs("C", bold=True))) == "### **C**\n\n"

    def test_paragraph(self, renderer):
        assert render(renderer, Paragraph(runs("Hi"))) == "Hi\n\n"

    def test_empty_paragraph_is_single_newline(self, renderer):
        assert render(renderer, Paragraph()) == "\n"

    def test_paragraph_children_follow_unindented(self, renderer):
        node = Paragraph(runs("parent"), children=(Paragraph(runs("child")),))
        assert render(renderer, node) == "parent\n\nchild\n\n"

    def test_todo(self, renderer):
        assert render(renderer, Todo(runs("done"), checked=True)) == "- [x] done\n"
        assert render(renderer, Todo(runs("open"))) == "- [ ] open\n"

    def test_quote(self, renderer):
        assert render(renderer, Quote(runs("wise"))) == "> wise\n"

    def test_multiline_quote(self, renderer):
        assert render(renderer, Quote(runs("a\nb"))) == "> a\n> b\n"

    def test_quote_children_are_quoted(self, renderer):
        node = Quote(runs("top"), children=(Paragraph(runs("inner")),))
        assert render(renderer, node) == "> top\n> inner\n"

    def test_code_with_language(self, renderer):
        node = Code(runs("print(1)"), language="python")
        assert render(renderer, node) == "```python\nprint(1)\n```\n\n"

    def test_code_plain_text_language_is_dropped(self, renderer):
        node = Code(runs("x=1"), language="plain text")
        assert render(renderer, node) == "```\nx=1\n```\n\n"

    def test_equation(self, renderer):
        assert render(renderer, Equation("e^{i\\pi}")) == "$$\ne^{i\\pi}\n$$\n\n"

    def test_divider(self, renderer):
        assert render(renderer, Divider()) == "---\n"

    def test_bookmark(self, renderer):
        assert render(renderer, Bookmark("https://a.b")) == "[https://a.b](https://a.b)\n\n"
        node = Bookmark("https://a.b", caption=runs("Site"))
        assert render(renderer, node) == "[Site](https://a.b)\n\n"

    def test_escape_option(self):
        r = MarkdownRenderer(HugoifyConfig(escape_markdown=True))
        assert render(r, Paragraph(runs("1*2"))) == "1\\*2\n\n"


class TestLists:
    def test_bullet(self, renderer):
        assert render(renderer, BulletItem(runs("one"))) == "- one\n"

    def test_numbered(self, renderer):
        assert render(renderer, NumberedItem(runs("one"))) == "1. one\n"

    def test_nested_bullet_indent(self, renderer):
        node = BulletItem(runs("a"), children=(BulletItem(runs("b")),))
        assert render(renderer, node) == "- a\n  - b\n"

    def test_nested_numbered_indent(self, renderer):
        node = NumberedItem(runs("a"), children=(NumberedItem(runs("b")),))
        assert render(renderer, node) == "1. a\n   1. b\n"

    def test_indent_applies_per_child_not_per_line(self, renderer):
        node = BulletItem(runs("a"), children=(
            BulletItem(runs("b"), children=(BulletItem(runs("c")),)),
        ))
        assert render(renderer, node) == "- a\n  - b\n  - c\n"


class TestContainers:
    def test_toggle(self, renderer):
        node = Toggle(runs("More"), children=(Paragraph(runs("Hi")),))
        expected = "<details>\n<summary>More</summary>\n\nHi\n\n</details>\n"
        assert render(renderer, node) == expected

    def test_callout_default_icon(self, renderer):
        assert render(renderer, Callout(runs("Note"))) == "> 💡 Note\n\n"

    def test_callout_emoji_icon(self, renderer):
        node = Callout(runs("Hot"), icon=CalloutIcon("emoji", "🔥"))
        assert render(renderer, node) == "> 🔥 Hot\n\n"

    def test_callout_kind_icons(self, renderer):
        assert render(renderer, Callout(runs("x"), icon=CalloutIcon("external"))) == "> 🔗 x\n\n"
        assert render(renderer, Callout(runs("x"), icon=CalloutIcon("file"))) == "> 📎 x\n\n"

    def test_callout_children_are_quoted(self, renderer):
        node = Callout(runs("Note"), children=(Paragraph(runs("more")),))
        assert render(renderer, node) == "> 💡 Note\n> more\n\n"

    def test_column_list(self, renderer):
        node = ColumnList(columns=((Paragraph(runs("L")),), (Paragraph(runs("R")),)))
        expected = (
            '<div class="row">\n'
            '<div class="col">\nL\n\n</div>\n'
            '<div class="col">\nR\n\n</div>\n'
            "</div>\n"
        )
        assert render(renderer, node) == expected


class TestTable:
    def test_zero_rows_render_nothing(self, renderer):
        assert render(renderer, Table()) == ""

    def test_header_separator_and_rows(self, renderer):
        node = Table(rows=(
            (runs("h1"), runs("h2")),
            (runs("a"), runs("b", bold=True)),
        ))
        assert render(renderer, node) == "h1 | h2\n--- | ---\na | **b**\n\n"

    @given(st.integers(min_value=1, max_value=12), st.integers(min_value=1, max_value=5))
    def test_line_count(self, n_rows, n_cols):
        r = MarkdownRenderer(HugoifyConfig())
        row = tuple((TextRun("c"),) for _ in range(n_cols))
        text = render(r, Table(rows=(row,) * n_rows))
        assert text.endswith("\n\n")
        assert len(text.rstrip("\n").split("\n")) == n_rows + 1


class TestMedia:
    def test_image_without_store_keeps_url(self, renderer):
        node = Image(external_url="https://x/a.png")
        assert render(renderer, node) == "![image](https://x/a.png)\n\n"

    def test_image_caption(self, renderer):
        node = Image(external_url="https://x/a.png", caption=runs("A cat"))
        assert render(renderer, node) == "![A cat](https://x/a.png)\n\n"

    def test_image_is_externalized_with_context(self, config, media_store):
        r = MarkdownRenderer(config, media_store=media_store)
        context = MediaContext(category="tech", article="hello")
        node = Image(file_url="https://s3/a.png", external_url="https://x/b.png")
        assert render(r, node, context) == "![image](https://cdn/x.png)\n\n"
        media_store.save.assert_called_once_with("https://s3/a.png", context)

    def test_media_error_propagates(self, config, media_store):
        media_store.save.side_effect = HugoifyMediaError("boom")
        r = MarkdownRenderer(config, media_store=media_store)
        with pytest.raises(HugoifyMediaError):
            render(r, Image(external_url="https://x/a.png"))

    def test_youtube_video(self, renderer):
        node = Video("https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=1")
        assert render(renderer, node) == "{{< youtube dQw4w9WgXcQ >}}\n\n"

    def test_other_video(self, renderer):
        node = Video("https://cdn.example/v.mp4")
        assert render(renderer, node) == '<video controls src="https://cdn.example/v.mp4"></video>\n\n'

    def test_hosted_video_not_externalized_by_default(self, config, media_store):
        r = MarkdownRenderer(config, media_store=media_store)
        render(r, Video("https://s3/v.mp4", kind="file"))
        media_store.save.assert_not_called()

    def test_hosted_video_externalized_when_enabled(self, media_store):
        r = MarkdownRenderer(HugoifyConfig(externalize_attachments=True), media_store=media_store)
        assert "https://cdn/x.png" in render(r, Video("https://s3/v.mp4", kind="file"))

    def test_pdf_shortcode(self, renderer):
        node = File("https://s3/doc.pdf?X-Amz=1", kind="file")
        assert render(renderer, node) == '{{< pdf src="https://s3/doc.pdf?X-Amz=1" >}}\n\n'

    def test_pdf_embed_without_shortcodes(self):
        r = MarkdownRenderer(HugoifyConfig(use_shortcodes=False))
        expected = '<embed src="https://s3/doc.pdf" type="application/pdf" width="100%" height="600px">\n\n'
        assert render(r, File("https://s3/doc.pdf")) == expected

    def test_other_file_is_link(self, renderer):
        assert render(renderer, File("https://s3/data.zip?sig=1")) == "[data.zip](https://s3/data.zip?sig=1)\n\n"

    def test_empty_file_url_renders_nothing(self, renderer):
        assert render(renderer, File("")) == ""


class TestUnsupported:
    def test_skip_by_default(self, renderer):
        assert render(renderer, Unsupported("child_page", "b1")) == ""

    def test_comment_policy(self):
        r = MarkdownRenderer(HugoifyConfig(unsupported_block_policy="comment"))
        assert render(r, Unsupported("synced_block")) == "<!-- notion:synced_block -->\n\n"

    def test_raise_policy(self):
        r = MarkdownRenderer(HugoifyConfig(unsupported_block_policy="raise"))
        with pytest.raises(HugoifyUnsupportedBlockError) as exc_info:
            render(r, Unsupported("synced_block", "b9"))
        assert exc_info.value.context == {"block_id": "b9", "block_type": "synced_block"}

    def test_skip_is_logged(self, renderer):
        records: list[logging.LogRecord] = []

        class _Capture(logging.Handler):
            def emit(self, record):
                records.append(record)

        handler = _Capture(level=logging.DEBUG)
        logger = logging.getLogger("hugoify")
        previous = logger.level
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        try:
            render(renderer, Unsupported("child_page", "b1"))
        finally:
            logger.removeHandler(handler)
            logger.setLevel(previous)
        assert records[0].extra_fields["block_type"] == "child_page"


class TestDispatch:
    def test_non_node_raises_type_error(self, renderer):
        with pytest.raises(TypeError):
            render(renderer, "not a node")

    def test_render_nodes_concatenates(self, renderer):
        nodes = [Heading(1, runs("T")), Paragraph(runs("body"))]
        assert renderer.render_nodes(nodes) == "# T\n\nbody\n\n"


_TEXT_NODES = st.one_of(
    st.builds(lambda t: Heading(1, runs(t)), st.text(max_size=10)),
    st.builds(lambda t: Paragraph(runs(t)), st.text(max_size=10)),
    st.builds(lambda t: BulletItem(runs(t)), st.text(max_size=10)),
    st.builds(lambda t: Code(runs(t), "go"), st.text(max_size=10)),
    st.just(Divider()),
)


@given(st.lists(_TEXT_NODES, max_size=8))
def test_store_does_not_affect_trees_without_media(nodes):
    from unittest.mock import MagicMock

    store = MagicMock()
    plain = MarkdownRenderer(HugoifyConfig()).render_nodes(nodes)
    with_store = MarkdownRenderer(HugoifyConfig(), media_store=store).render_nodes(nodes)
    assert plain == with_store
    store.save.assert_not_called()


class TestUrlHelpers:
    @pytest.mark.parametrize("url, expected", [
        ("https://youtu.be/abc123", "abc123"),
        ("https://youtu.be/abc123?t=10", "abc123"),
        ("https://www.youtube.com/watch?v=xyz&list=L", "xyz"),
        ("https://www.youtube.com/embed/zzz", "https://www.youtube.com/embed/zzz"),
    ])
    def test_extract_youtube_id(self, url, expected):
        assert extract_youtube_id(url) == expected

    def test_is_youtube_url(self):
        assert is_youtube_url("https://m.youtube.com/watch?v=1")
        assert is_youtube_url("https://youtu.be/1")
        assert not is_youtube_url("https://vimeo.com/1")
        assert not is_youtube_url("https://example.com/?ref=youtube.com")

    def test_url_filename_strips_query(self):
        assert url_filename("https://s3/a/b/report.pdf?sig=1#frag") == "report.pdf"
