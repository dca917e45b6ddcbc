"""Plain-text extraction and reply-hidden content filtering for post Markdown.

Post bodies are authored by a rich-text editor that already emits HTML, so
"Markdown" here is parsed as HTML. A block is hidden from viewers who have
not replied by placing a blockquote whose first line is the marker image::

    > ![^mbbs_reply_visible_tag^](tag.png)
    > only repliers can read this

The marker text is shared with the authoring UI and must not change.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup

from mbbs.core.outcome import BestEffort

logger = logging.getLogger(__name__)

REPLY_VISIBLE_TAG = "^mbbs_reply_visible_tag^"
REPLY_VISIBLE_LINE_MARK = f"> ![{REPLY_VISIBLE_TAG}]"

_REPLY_HIDDEN_RE = re.compile(r"> !\[\^mbbs_reply_visible_tag\^\]\(.+\)")
_BLOCKQUOTE_LINE_RE = re.compile(r"^\s*>")
_WHITESPACE_RE = re.compile(r"\s")
_MARKER_IMAGE_SELECTOR = f'p > img[alt="{REPLY_VISIBLE_TAG}"]'


@dataclass(frozen=True)
class PureText:
    text: str
    outcome: BestEffort


def markdown_to_html(markdown: str) -> str:
    if not markdown:
        return ""
    return markdown


def html_to_pure_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    # hidden reply blocks never reach the plain-text index
    for blockquote in soup.find_all("blockquote"):
        if blockquote.select_one(_MARKER_IMAGE_SELECTOR) is not None:
            blockquote.clear()
    return soup.get_text()


def convert_markdown_to_pure_text(markdown: str) -> PureText:
    try:
        return PureText(html_to_pure_text(markdown_to_html(markdown)), BestEffort.APPLIED)
    except Exception:
        logger.exception("markdown to pure text conversion failed", extra={"length": len(markdown or "")})
        return PureText("", BestEffort.DEGRADED)


def markdown_to_pure_text(markdown: str) -> str:
    """Return the text content of ``markdown``; "" if it cannot be parsed."""
    return convert_markdown_to_pure_text(markdown).text


def markdown_has_reply_hidden_content(markdown: str) -> bool:
    return bool(markdown) and _REPLY_HIDDEN_RE.search(markdown) is not None


def _hidden_summary(hidden_lines: list[str]) -> str:
    count = len(_WHITESPACE_RE.sub("", markdown_to_pure_text("\n".join(hidden_lines))))
    return f"> （有隐藏内容共 {count} 字，评论后可见）\n"


def filter_markdown_hidden_content(markdown: str) -> str:
    """Replace every reply-hidden blockquote run with a character-count summary.

    The marker line itself is kept; the blockquote lines after it are dropped
    and a single summary line takes their place. All other lines keep their
    order.
    """
    in_filter = False
    content_lines: list[str] = []
    filtered_lines: list[str] = []
    for line in markdown.split("\n"):
        if in_filter:
            if _BLOCKQUOTE_LINE_RE.match(line):
                filtered_lines.append(line)
                continue
            content_lines.append(_hidden_summary(filtered_lines))
            in_filter = False
            filtered_lines = []
            content_lines.append(line)
        else:
            if REPLY_VISIBLE_LINE_MARK in line:
                in_filter = True
            content_lines.append(line)
    if filtered_lines:
        # hidden block runs to the end of the post
        content_lines.append(_hidden_summary(filtered_lines))
    return "\n".join(content_lines)


__all__ = [
    "REPLY_VISIBLE_TAG",
    "PureText",
    "markdown_to_html",
    "html_to_pure_text",
    "convert_markdown_to_pure_text",
    "markdown_to_pure_text",
    "markdown_has_reply_hidden_content",
    "filter_markdown_hidden_content",
]
