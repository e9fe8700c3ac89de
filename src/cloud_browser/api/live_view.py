"""Placeholder live view that polls session screenshots."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["live-view"])


@router.get("/browser-view-placeholder.html", response_class=HTMLResponse)
async def live_view() -> HTMLResponse:
    """Minimal page that refreshes a session's screenshot."""
    return HTMLResponse(_LIVE_VIEW_HTML)


_LIVE_VIEW_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Browser Session</title>
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; margin: 1rem; }
      img { max-width: 100%; border: 1px solid #ddd; }
      #status { color: #666; margin-bottom: 0.5rem; }
    </style>
  </head>
  <body>
    <div id="status">Waiting for session...</div>
    <img id="frame" alt="Session screenshot" />
    <script>
      const sessionId = new URLSearchParams(location.search).get('session_id');
      const status = document.getElementById('status');
      const frame = document.getElementById('frame');
      async function refresh() {
        if (!sessionId) {
          status.textContent = 'No session_id in the URL.';
          return;
        }
        const res = await fetch('/api/screenshot/' + encodeURIComponent(sessionId));
        const data = await res.json();
        if (!res.ok) {
          status.textContent = 'Error: ' + (data.error || res.status);
          return;
        }
        frame.src = 'data:' + data.mimeType + ';base64,' + data.image;
        status.textContent = 'Session ' + sessionId;
        setTimeout(refresh, 2000);
      }
      refresh();
    </script>
  </body>
</html>
"""
