"""Errors raised by session operations.

Each error carries the HTTP status the API answers with, so handlers can
render any of them without knowing the concrete type.
"""


class SessionError(Exception):
    """Base class for session failures surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class SessionNotFoundError(SessionError):
    """No record exists for the requested session id."""

    status_code = 404

    def __init__(self, session_id: str, message: str | None = None) -> None:
        super().__init__(
            message or "Session not found or invalid. Please create a new session."
        )
        self.session_id = session_id


class BrowserLaunchError(SessionError):
    """The browser could not be started or connected to."""


class BrowserLaunchTimeoutError(SessionError):
    """Starting the browser took longer than the launch budget."""

    status_code = 504

    def __init__(self, message: str = "Browser launch timed out.") -> None:
        super().__init__(message)


class MissingBrowserDependencyError(BrowserLaunchError):
    """Chromium is missing a shared library it needs to start."""

    def __init__(self, details: str) -> None:
        super().__init__(
            "Failed to launch browser: Missing system dependency (libnss3.so). "
            "This often requires a custom build image or a remote browser service.",
            details=details,
        )


class NavigationTimeoutError(SessionError):
    """The page did not settle before the navigation timeout."""

    status_code = 504

    def __init__(self, url: str) -> None:
        super().__init__(f"Navigation to {url} timed out.")
        self.url = url


class BrowserOperationError(SessionError):
    """A page or browser call failed."""
