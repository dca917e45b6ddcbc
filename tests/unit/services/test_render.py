from types import SimpleNamespace

import pytest
from bs4 import BeautifulSoup

from mbbs.services.render import (
    get_resource_url,
    remove_resource_base_url,
    transform_render_html_for_upload,
    transform_will_render_html,
    try_append_resource_base_url,
)

BASE = "https://res.example.com/"
VIEWER = SimpleNamespace(id=5, token="abcdefghijklmnop")


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


@pytest.mark.unit
def test_resource_url_uses_configured_base():
    assert get_resource_url("upload/a.png") == BASE + "upload/a.png"


@pytest.mark.unit
@pytest.mark.parametrize(
    "src",
    ["http://x.com/a.png", "https://x.com/a.png", "data:image/png;base64,AAA", "/abs.png", "./rel.png", "#top", "?q=1"],
)
def test_append_leaves_absolute_and_special_urls(src):
    assert try_append_resource_base_url(src, base=BASE) == src


@pytest.mark.unit
def test_append_prefixes_relative_paths():
    assert try_append_resource_base_url("upload/a.png", base=BASE) == BASE + "upload/a.png"
    assert try_append_resource_base_url(None) == ""
    assert try_append_resource_base_url("") == ""


@pytest.mark.unit
def test_append_auth_token_replaces_query():
    url = try_append_resource_base_url("upload/a.zip?x=1", True, base=BASE, login_user=VIEWER)
    assert url == BASE + "upload/a.zip?uid=5&token=abcdefgh"


@pytest.mark.unit
def test_append_auth_token_without_viewer_only_strips_query():
    assert try_append_resource_base_url("upload/a.zip?x=1", True, base=BASE) == BASE + "upload/a.zip"


@pytest.mark.unit
def test_remove_base():
    assert remove_resource_base_url(BASE + "upload/a.png", BASE) == "upload/a.png"
    assert remove_resource_base_url("https://other.com/a.png", BASE) == "https://other.com/a.png"
    assert remove_resource_base_url(None, BASE) == ""


@pytest.mark.unit
def test_will_render_rewrites_images():
    html = (
        '<img src="upload/a.png">'
        '<img data-src="upload/b.png">'
        '<img data-src="data:image/png;base64,AAA">'
        '<img alt="^mbbs_reply_visible_tag^" src="tag.png">'
    )
    imgs = _soup(transform_will_render_html(html, resource_base_url=BASE)).find_all("img")
    assert imgs[0]["src"] == BASE + "upload/a.png"
    assert imgs[1]["data-src"] == BASE + "upload/b.png"
    assert not imgs[1].get("src")
    assert imgs[2]["src"] == "data:image/png;base64,AAA"
    assert imgs[3]["src"] == "tag.png"


@pytest.mark.unit
def test_will_render_applies_next_node_style():
    html = (
        '<span data-next-node-style="" style="color: red"></span><p>styled</p>'
        '<span data-next-node-style=""></span><p style="color: blue">plain</p>'
    )
    ps = _soup(transform_will_render_html(html, resource_base_url=BASE)).find_all("p")
    assert ps[0]["style"] == "color: red"
    assert not ps[1].has_attr("style")


@pytest.mark.unit
def test_will_render_leaves_links_unless_asked():
    html = '<a href="upload/doc.zip">doc</a>'
    a = _soup(transform_will_render_html(html, resource_base_url=BASE)).find("a")
    assert a["href"] == "upload/doc.zip"


@pytest.mark.unit
def test_will_render_transforms_attachment_links():
    html = '<a href="upload/doc.zip">doc</a><a href="upload/clip.mp4">clip</a>'
    soup = _soup(transform_will_render_html(html, True, resource_base_url=BASE, login_user=VIEWER))
    a = soup.find("a")
    assert a["href"] == BASE + "upload/doc.zip?uid=5&token=abcdefgh"
    video = soup.find("video")
    assert video is not None
    assert video["src"] == BASE + "upload/clip.mp4?uid=5&token=abcdefgh"
    assert len(soup.find_all("a")) == 1


@pytest.mark.unit
@pytest.mark.parametrize(
    "html",
    [
        '<img src="upload/a.png"/>',
        '<img data-src="upload/b.png"/>',
        '<img data-src="upload/b.png" src="upload/p.gif"/>',
        '<img src="https://x.com/a.png"/>',
        '<img alt="^mbbs_reply_visible_tag^" src="tag.png"/>',
        '<p>hi <img src="upload/c.png"/></p>',
        '<a href="upload/doc.zip">doc</a>',
    ],
)
def test_rendered_html_converts_back_to_stored_html(html):
    rendered = transform_will_render_html(html, resource_base_url=BASE)
    assert transform_render_html_for_upload(rendered, resource_base_url=BASE) == html


@pytest.mark.unit
def test_for_upload_strips_base_from_images():
    html = f'<img src="{BASE}upload/a.png" data-src="{BASE}upload/b.png">'
    img = _soup(transform_render_html_for_upload(html, resource_base_url=BASE)).find("img")
    assert img["src"] == "upload/a.png"
    assert img["data-src"] == "upload/b.png"


@pytest.mark.unit
def test_for_upload_adds_scheme_to_bare_domains():
    html = '<a href="example.com/page">a</a><a href="https://x.com">b</a><a href="notes">c</a>'
    links = _soup(transform_render_html_for_upload(html, resource_base_url=BASE)).find_all("a")
    assert [a["href"] for a in links] == ["http://example.com/page", "https://x.com", "notes"]


@pytest.mark.unit
def test_for_upload_removes_empty_style_markers():
    html = (
        '<div id="gone"><p><span data-next-node-style=""></span></p></div>'
        '<div id="kept"><p><span data-next-node-style="" style="color: red"></span></p></div>'
    )
    soup = _soup(transform_render_html_for_upload(html, resource_base_url=BASE))
    assert soup.find(id="gone") is None
    assert soup.find(id="kept") is not None
