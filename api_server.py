"""API server entry point."""

from __future__ import annotations

import logging
import sys

import uvicorn

from lyric_assistant.api.routes import create_app
from lyric_assistant.config import load_settings

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    stream=sys.stderr,
)


def main() -> None:
    """Run the API server."""
    settings = load_settings()
    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
