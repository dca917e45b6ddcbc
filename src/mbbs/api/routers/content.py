"""Stateless content transforms used by the editor and preview clients."""
from fastapi import APIRouter, Depends

from mbbs.api import deps
from mbbs.core.markdown import (
    convert_markdown_to_pure_text,
    filter_markdown_hidden_content,
    markdown_has_reply_hidden_content,
)
from mbbs.core.outcome import BestEffort
from mbbs.models.user import User
from mbbs.schemas.content import (
    HiddenFilterResponse,
    HtmlResponse,
    MarkdownRequest,
    PureTextResponse,
    RenderRequest,
    UploadRequest,
)
from mbbs.services.render import transform_render_html_for_upload, transform_will_render_html

router = APIRouter(prefix="/content", tags=["content"])


@router.post("/render", response_model=HtmlResponse, summary="Rewrite stored HTML for display")
async def render_route(payload: RenderRequest, current_user: User | None = Depends(deps.get_current_user)):
    html = transform_will_render_html(
        payload.html, payload.transform_attachment_link, login_user=current_user
    )
    return HtmlResponse(html=html)


@router.post("/upload", response_model=HtmlResponse, summary="Rewrite edited HTML for storage")
async def upload_route(payload: UploadRequest):
    return HtmlResponse(html=transform_render_html_for_upload(payload.html))


@router.post("/pure-text", response_model=PureTextResponse, summary="Extract indexable plain text")
async def pure_text_route(payload: MarkdownRequest):
    result = convert_markdown_to_pure_text(payload.markdown)
    return PureTextResponse(text=result.text, degraded=result.outcome is BestEffort.DEGRADED)


@router.post("/filter-hidden", response_model=HiddenFilterResponse,
             summary="Replace reply-hidden blocks with a summary")
async def filter_hidden_route(payload: MarkdownRequest):
    has_hidden = markdown_has_reply_hidden_content(payload.markdown)
    markdown = filter_markdown_hidden_content(payload.markdown) if has_hidden else payload.markdown
    return HiddenFilterResponse(markdown=markdown, has_hidden_content=has_hidden)
