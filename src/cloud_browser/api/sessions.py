"""Browser session API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, Response, status

from cloud_browser.api.models import (
    ActionResponse,
    BrowserInfoModel,
    CloseSessionRequest,
    CreateSessionResponse,
    NavigateRequest,
    ScreenshotResponse,
    SessionData,
    ViewportModel,
)
from cloud_browser.config import Settings, parse_csv

if TYPE_CHECKING:
    from cloud_browser.containers import AppContainer
    from cloud_browser.domain.sessions import SessionRecord

router = APIRouter(prefix="/api", tags=["sessions"])

PREFLIGHT_PATHS = (
    "/create-session",
    "/navigate",
    "/screenshot/{session_id}",
    "/close-session",
)


def cors_headers(settings: Settings, origin: str | None) -> dict[str, str]:
    """Build the CORS headers for a response to ``origin``."""
    allowed = parse_csv(settings.cors_allow_origins) or ["*"]
    if "*" in allowed:
        allow_origin = "*"
    elif origin in allowed:
        allow_origin = origin
    else:
        allow_origin = allowed[0]
    headers = {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }
    if allow_origin != "*":
        headers["Vary"] = "Origin"
    return headers


async def preflight(request: Request) -> Response:
    """Answer pre-flight requests that bypass the CORS middleware."""
    container: AppContainer = request.app.state.container
    headers = cors_headers(container.settings, request.headers.get("origin"))
    return Response(status_code=status.HTTP_200_OK, headers=headers)


for _path in PREFLIGHT_PATHS:
    router.add_api_route(
        _path, preflight, methods=["OPTIONS"], include_in_schema=False
    )


@router.post("/create-session", response_model=CreateSessionResponse)
async def create_session(request: Request) -> CreateSessionResponse:
    """Launch a browser and return the new session's id."""
    container: AppContainer = request.app.state.container
    record = await container.session_service.create_session()
    return CreateSessionResponse(data=_session_data(record))


@router.post("/navigate", response_model=ActionResponse)
async def navigate(
    request: Request, body: NavigateRequest | None = None
) -> ActionResponse:
    """Navigate a session's page to a URL."""
    payload = body or NavigateRequest()
    if not payload.session_id or not payload.url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Session ID and URL are required.",
        )
    container: AppContainer = request.app.state.container
    await container.session_service.navigate(payload.session_id, payload.url)
    return ActionResponse(success=True, message=f"Navigated to {payload.url}")


@router.get(
    "/screenshot/{session_id}",
    response_model=ScreenshotResponse,
    response_model_by_alias=True,
)
async def screenshot(session_id: str, request: Request) -> ScreenshotResponse:
    """Return a base64 PNG of the session's page."""
    container: AppContainer = request.app.state.container
    shot = await container.session_service.screenshot(session_id)
    return ScreenshotResponse(
        success=True, image=shot.image_base64, mime_type=shot.mime_type
    )


@router.post("/close-session", response_model=ActionResponse)
async def close_session(
    request: Request, body: CloseSessionRequest | None = None
) -> ActionResponse:
    """Close a session's browser."""
    payload = body or CloseSessionRequest()
    if not payload.session_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Session ID is required.",
        )
    container: AppContainer = request.app.state.container
    message = await container.session_service.close_session(payload.session_id)
    return ActionResponse(success=True, message=message)


def _session_data(record: SessionRecord) -> SessionData:
    viewport = record.browser_info.viewport
    return SessionData(
        id=record.id,
        live_view_url=record.live_view_url,
        browser_info=BrowserInfoModel(
            viewport=ViewportModel(width=viewport.width, height=viewport.height),
            headless=record.browser_info.headless,
        ),
    )
