"""HTML rewriting between stored post content and rendered content.

Stored HTML references uploaded images and attachments by relative path.
Before rendering, those paths are made absolute under the resource base URL
(``transform_will_render_html``); before saving edited HTML the base is
stripped again (``transform_render_html_for_upload``).
"""
from __future__ import annotations

import re
from typing import Protocol

from bs4 import BeautifulSoup, Tag

from mbbs.core.config import get_settings

_PASSTHROUGH_SRC_RE = re.compile(r"^(https?:|data:|file:|/|\.|#|\?)")
_MARKER_ALT_RE = re.compile(r"^\^.*\^$")
_VIDEO_HREF_RE = re.compile(r"\.(mp4|avi)$")
_HTTP_RE = re.compile(r"^https?:")
_QUERY_RE = re.compile(r"\?.*")

NEXT_NODE_STYLE_ATTR = "data-next-node-style"


class LoginUser(Protocol):
    id: int
    token: str | None


def _resource_base(base: str | None) -> str:
    return get_settings().resource_base_url if base is None else base


def get_resource_url(path: str, base: str | None = None) -> str:
    return _resource_base(base) + path


def try_append_resource_base_url(
    src: str | None,
    append_res_auth_token: bool = False,
    *,
    base: str | None = None,
    login_user: LoginUser | None = None,
) -> str:
    """Make a relative resource path absolute; leave other URLs untouched.

    With ``append_res_auth_token`` any query is replaced by the viewer's
    ``uid`` and the leading characters of their login token.
    """
    if not src:
        return ""
    if _PASSTHROUGH_SRC_RE.match(src):
        return src
    src = get_resource_url(src, base)
    if append_res_auth_token:
        src = _QUERY_RE.sub("", src)
        if login_user is not None:
            token = (login_user.token or "")[: get_settings().resource_token_length]
            src += f"?uid={login_user.id}&token={token}"
    return src


def remove_resource_base_url(src: str | None, base: str | None = None) -> str:
    if not src:
        return ""
    base = _resource_base(base)
    if base and src.startswith(base):
        return src[len(base):]
    return src


def _next_element_sibling(node: Tag) -> Tag | None:
    sibling = node.next_sibling
    while sibling is not None and not isinstance(sibling, Tag):
        sibling = sibling.next_sibling
    return sibling


def transform_will_render_html(
    html: str,
    transform_attachment_link: bool = False,
    *,
    resource_base_url: str | None = None,
    login_user: LoginUser | None = None,
) -> str:
    soup = BeautifulSoup(html, "html.parser")

    for img in soup.find_all("img"):
        data_src = img.get("data-src")
        if (data_src or "").startswith("data:image") or _MARKER_ALT_RE.match(img.get("alt") or ""):
            # inline images and marker tags are shown directly, never lazy loaded
            img["src"] = data_src or img.get("src") or ""
            continue
        if img.get("src"):
            img["src"] = try_append_resource_base_url(img["src"], base=resource_base_url)
        if data_src:
            img["data-src"] = try_append_resource_base_url(data_src, base=resource_base_url)

    # markers carry font/color/alignment for the element right after them
    for node in soup.find_all(attrs={NEXT_NODE_STYLE_ATTR: True}):
        next_el = _next_element_sibling(node)
        if next_el is None:
            continue
        style = node.get("style")
        if style:
            next_el["style"] = style
        elif next_el.has_attr("style"):
            del next_el["style"]

    if transform_attachment_link:
        for a in soup.find_all("a"):
            is_video = _VIDEO_HREF_RE.search(a.get("href") or "") is not None
            href = try_append_resource_base_url(a.get("href"), True, base=resource_base_url, login_user=login_user)
            a["href"] = href
            if is_video:
                video = soup.new_tag("video", src=href, controls="", preload="none")
                a.replace_with(video)

    return str(soup)


def transform_render_html_for_upload(html: str, *, resource_base_url: str | None = None) -> str:
    soup = BeautifulSoup(html, "html.parser")

    for img in soup.find_all("img"):
        if img.get("src"):
            img["src"] = remove_resource_base_url(img["src"], resource_base_url)
        if img.get("data-src"):
            img["data-src"] = remove_resource_base_url(img["data-src"], resource_base_url)

    # bare domains typed as links ("example.com/page") get a scheme
    for a in soup.find_all("a"):
        url = a.get("href")
        if not url:
            continue
        url = remove_resource_base_url(url, resource_base_url)
        if not _HTTP_RE.match(url) and "." in url.split("/")[0]:
            a["href"] = f"http://{url}"

    for node in soup.find_all(attrs={NEXT_NODE_STYLE_ATTR: True}):
        if node.decomposed or node.get("style"):
            continue
        parent = node.parent
        grandparent = parent.parent if parent is not None else None
        if isinstance(grandparent, Tag) and not isinstance(grandparent, BeautifulSoup):
            grandparent.decompose()

    return str(soup)


__all__ = [
    "get_resource_url",
    "try_append_resource_base_url",
    "remove_resource_base_url",
    "transform_will_render_html",
    "transform_render_html_for_upload",
]
