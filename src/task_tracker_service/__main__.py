"""Run the service with uvicorn: ``python -m task_tracker_service``."""

from __future__ import annotations

import uvicorn

from task_tracker_service.app import create_app
from task_tracker_service.config import get_settings


def main() -> None:
    """Start the HTTP server using the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        create_app(),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
