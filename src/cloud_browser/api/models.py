"""Pydantic models for session API payloads."""

from pydantic import BaseModel, ConfigDict, Field


class NavigateRequest(BaseModel):
    """Body of ``POST /api/navigate``."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str | None = Field(default=None, alias="sessionId")
    url: str | None = None


class CloseSessionRequest(BaseModel):
    """Body of ``POST /api/close-session``."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str | None = Field(default=None, alias="sessionId")


class ViewportModel(BaseModel):
    width: int
    height: int


class BrowserInfoModel(BaseModel):
    viewport: ViewportModel
    headless: bool


class SessionData(BaseModel):
    """Session details returned to the client on create."""

    id: str
    live_view_url: str
    browser_info: BrowserInfoModel


class CreateSessionResponse(BaseModel):
    data: SessionData


class ActionResponse(BaseModel):
    success: bool
    message: str


class ScreenshotResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    image: str
    mime_type: str = Field(alias="mimeType")
