"""ASGI entrypoint for the cloud browser API."""

from cloud_browser.api.app import create_app
from cloud_browser.containers import build_container

app = create_app(build_container())
