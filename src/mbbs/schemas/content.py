from pydantic import BaseModel


class RenderRequest(BaseModel):
    html: str
    transform_attachment_link: bool = False


class UploadRequest(BaseModel):
    html: str


class MarkdownRequest(BaseModel):
    markdown: str


class HtmlResponse(BaseModel):
    html: str


class PureTextResponse(BaseModel):
    text: str
    degraded: bool = False


class HiddenFilterResponse(BaseModel):
    markdown: str
    has_hidden_content: bool
