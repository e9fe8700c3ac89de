"""Run the API in a single long-lived process."""

import os

import uvicorn


def main() -> None:
    """Serve the ASGI app with uvicorn."""
    uvicorn.run(
        "cloud_browser.api.asgi:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        reload=os.getenv("RELOAD", "0") == "1",
    )


if __name__ == "__main__":
    main()
