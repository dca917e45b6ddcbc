"""Rendering helpers for previewing stored post HTML.

* ``RenderHeightMemory`` remembers the last rendered height of each distinct
  content so a re-mounted preview can reserve space and avoid layout shift.
* ``LazyImagePoller`` swaps ``data-src`` for ``src`` on images once they are
  inside the viewport, checking on a fixed tick until closed.
* ``PreviewClickRouter`` routes clicks on links and images to pluggable
  handlers instead of default navigation.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Callable

from bs4 import Tag

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0


def hash_string(value: str) -> int:
    """32-bit signed string hash (``h = h * 31 + c``)."""
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


class RenderHeightMemory:
    def __init__(self) -> None:
        self._heights: dict[int, int | None] = {}

    def remember(self, content: str, height: int) -> None:
        """Record the height a content had when its preview was torn down."""
        self._heights[hash_string(content)] = height or None

    def min_height(self, content: str) -> int | None:
        return self._heights.get(hash_string(content))

    def __len__(self) -> int:
        return len(self._heights)


@dataclass(frozen=True)
class Bound:
    top: float
    bottom: float
    left: float
    right: float


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


def is_visible(bound: Bound, viewport: Viewport) -> bool:
    return not (
        bound.top >= viewport.height
        or bound.bottom <= 0
        or bound.left >= viewport.width
        or bound.right <= 0
    )


def load_lazy_image(img: Tag) -> str | None:
    src = img.get("data-src")
    if img.has_attr("data-src"):
        del img["data-src"]
    if not src:
        return None
    img["src"] = src
    return src


class LazyImagePoller:
    """Polls ``root`` for lazy images and loads the visible ones.

    ``measure`` returns an image's bounding box (None when it is not laid
    out); ``viewport`` returns the current viewport size.
    """

    def __init__(
        self,
        root: Tag,
        measure: Callable[[Tag], Bound | None],
        viewport: Callable[[], Viewport],
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.root = root
        self.measure = measure
        self.viewport = viewport
        self.interval = interval
        self._task: asyncio.Task | None = None

    def check_once(self) -> list[str]:
        loaded = []
        view = self.viewport()
        for img in self.root.select("img[data-src]"):
            bound = self.measure(img)
            if bound is None or not is_visible(bound, view):
                continue
            src = load_lazy_image(img)
            if src:
                loaded.append(src)
        return loaded

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.check_once()

    async def close(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def __aenter__(self) -> "LazyImagePoller":
        self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()


@dataclass(frozen=True)
class ClickResult:
    kind: str  # "link" | "image"
    url: str
    handled: bool


class PreviewClickRouter:
    """Route preview clicks; unhandled links fall back to ``open_link``."""

    def __init__(
        self,
        on_link: Callable[[str], None] | None = None,
        on_image: Callable[[str], None] | None = None,
        open_link: Callable[[str], None] | None = None,
    ) -> None:
        self.on_link = on_link
        self.on_image = on_image
        self.open_link = open_link

    def handle_click(self, target: Tag) -> ClickResult | None:
        if target.name == "a":
            url = target.get("href") or ""
            handler = self.on_link or self.open_link
            if handler is not None:
                handler(url)
            return ClickResult("link", url, handler is not None)
        if target.name == "img":
            src = target.get("src")
            if not src:
                return None
            if self.on_image is not None:
                self.on_image(src)
            return ClickResult("image", src, self.on_image is not None)
        return None
