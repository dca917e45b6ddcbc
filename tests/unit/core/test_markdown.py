import pytest

from mbbs.core import markdown as md
from mbbs.core.markdown import (
    convert_markdown_to_pure_text,
    filter_markdown_hidden_content,
    html_to_pure_text,
    markdown_has_reply_hidden_content,
    markdown_to_pure_text,
)
from mbbs.core.outcome import BestEffort

MARKER = "> ![^mbbs_reply_visible_tag^](x.png)"


@pytest.mark.unit
def test_pure_text_strips_tags():
    assert html_to_pure_text("<p>Hello <b>world</b></p>") == "Hello world"


@pytest.mark.unit
def test_pure_text_erases_hidden_blockquote():
    html = (
        '<blockquote><p><img alt="^mbbs_reply_visible_tag^" src="t.png"></p><p>secret</p></blockquote>'
        "<blockquote><p>quoted</p></blockquote><p>open</p>"
    )
    assert markdown_to_pure_text(html) == "quotedopen"


@pytest.mark.unit
def test_pure_text_of_empty_input():
    result = convert_markdown_to_pure_text("")
    assert result.text == ""
    assert result.outcome is BestEffort.APPLIED


@pytest.mark.unit
def test_pure_text_degrades_instead_of_raising(monkeypatch):
    def boom(html):
        raise ValueError("unparseable")

    monkeypatch.setattr(md, "html_to_pure_text", boom)
    result = convert_markdown_to_pure_text("<p>x</p>")
    assert result.text == ""
    assert result.outcome is BestEffort.DEGRADED
    assert not result.outcome.ok
    assert markdown_to_pure_text("<p>x</p>") == ""


@pytest.mark.unit
@pytest.mark.parametrize(
    "markdown,expected",
    [
        (f"intro\n{MARKER}\n> secret", True),
        ("> ![^mbbs_reply_visible_tag](x.png)", False),
        ("> ![other](x.png)", False),
        ("> ![^mbbs_reply_visible_tag^]()", False),
        ("", False),
    ],
)
def test_has_reply_hidden_content(markdown, expected):
    assert markdown_has_reply_hidden_content(markdown) is expected


@pytest.mark.unit
def test_filter_replaces_hidden_lines_with_summary():
    src = f"{MARKER}\n> secret\n> text\nafter"
    # the count covers the raw quoted lines, quote markers included
    assert filter_markdown_hidden_content(src) == (
        f"{MARKER}\n> （有隐藏内容共 12 字，评论后可见）\n\nafter"
    )


@pytest.mark.unit
def test_filter_hidden_block_at_end_of_post():
    src = f"before\n{MARKER}\n> a b"
    assert filter_markdown_hidden_content(src) == f"before\n{MARKER}\n> （有隐藏内容共 3 字，评论后可见）\n"


@pytest.mark.unit
def test_filter_keeps_ordinary_blockquotes():
    src = "> just a quote\nplain"
    assert filter_markdown_hidden_content(src) == src


@pytest.mark.unit
def test_filter_handles_several_hidden_blocks():
    src = f"{MARKER}\n> aa\nmid\n{MARKER}\n> bbb"
    out = filter_markdown_hidden_content(src).split("\n")
    assert out[0] == MARKER
    assert out[1] == "> （有隐藏内容共 3 字，评论后可见）"
    assert out[3] == "mid"
    assert out[4] == MARKER
    assert out[5] == "> （有隐藏内容共 4 字，评论后可见）"
    assert "aa" not in "\n".join(out)
