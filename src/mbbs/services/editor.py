"""Editor submit/cancel glue.

``EditorSubmit`` holds the HTML being edited and hands it to caller-supplied
async handlers. A failing handler never propagates: it is logged and, when
alerts are enabled, its message is returned for display.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

Handler = Callable[[str], Awaitable[object]]

VIDEO_SRC_SCHEME_MESSAGE = "视频地址必须以 http/https 开头"


@dataclass(frozen=True)
class TaskResult:
    ok: bool
    alert: str | None = None


class EditorSubmit:
    def __init__(
        self,
        on_submit: Handler,
        on_cancel: Handler | None = None,
        *,
        default_html: str = "",
        fail_alert: bool = False,
        on_cancel_fail_alert: bool | None = None,
        submit_text: str = "提交",
        cancel_text: str | None = None,
    ) -> None:
        self.on_submit = on_submit
        self.on_cancel = on_cancel
        self.html = default_html
        self.fail_alert = fail_alert
        self.on_cancel_fail_alert = fail_alert if on_cancel_fail_alert is None else on_cancel_fail_alert
        self.submit_text = submit_text
        self.cancel_text = cancel_text

    @property
    def can_cancel(self) -> bool:
        return bool(self.cancel_text)

    def change(self, html: str) -> None:
        self.html = html

    async def submit(self) -> TaskResult:
        return await self._run("submit", self.on_submit, self.fail_alert)

    async def cancel(self) -> TaskResult:
        if self.on_cancel is None:
            return TaskResult(True)
        return await self._run("cancel", self.on_cancel, self.on_cancel_fail_alert)

    async def _run(self, action: str, handler: Handler, alert: bool) -> TaskResult:
        try:
            await handler(self.html or "")
        except Exception as e:
            logger.warning("editor %s failed", action, exc_info=True)
            return TaskResult(False, (str(e) or e.__class__.__name__) if alert else None)
        return TaskResult(True)


def check_video_src(src: str) -> bool | str | None:
    """True to accept, a message to reject with an alert, None to reject silently."""
    if not src:
        return None
    if not src.startswith("http"):
        return VIDEO_SRC_SCHEME_MESSAGE
    return True


def parse_video_src(src: str) -> str:
    """Turn bilibili page links into an embeddable player; others pass through."""
    if ".bilibili.com" not in src:
        return src
    vid = urlparse(src).path.rstrip("/").split("/")[-1]
    return (
        f'<iframe src="//player.bilibili.com/player.html?bvid={vid}" scrolling="no" border="0" '
        f'frameborder="no" framespacing="0" allowfullscreen="true"> </iframe>'
    )
